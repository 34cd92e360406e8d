# Prescriptions Feature - Service

from typing import List
from easyhealth.core.access import Caller, Role, ensure_in_scope, prescription_scope
from easyhealth.core.events import PharmacyAssigned, event_bus
from easyhealth.core.logging import logger
from easyhealth.database import Database
from easyhealth.features.catalog.models import Medication, Pharmacy
from easyhealth.features.catalog.schemas import MedicationResponse
from easyhealth.features.catalog.service import pharmacy_summary
from easyhealth.features.consultations.models import Consultation
from easyhealth.features.prescriptions.models import Prescription
from easyhealth.features.prescriptions.schemas import (
    PrescriptionBatchCreate,
    PrescriptionResponse,
    PrescriptionUpdate,
)
from easyhealth.features.profiles.service import ProfileService
from easyhealth.features.staff.service import StaffService
from easyhealth.shared.exceptions import (
    BadRequestException,
    ForbiddenException,
    InvalidStateException,
)
from easyhealth.shared.lookups import fetch, fetch_many, get_or_404


DOCTOR_FIELDS = {
    "medication_id",
    "quantity",
    "dosage",
    "instructions",
    "unit_price",
    "notes",
    "status",
    "signature_data",
}
PATIENT_FIELDS = {"pharmacy_id"}


class PrescriptionService:
    """Service class for prescriptions."""

    @staticmethod
    async def create_batch(request: PrescriptionBatchCreate, caller: Caller) -> List[Prescription]:
        """
        Create one prescription per item.

        Every item is checked before anything is written; the first invalid
        item aborts the batch. Inserts share one unit of work, and without
        transactions the already-inserted documents are removed if a later
        insert fails.
        """
        if caller.role != Role.DOCTOR:
            raise ForbiddenException("Only doctors can create prescriptions")

        consultation = await get_or_404(Consultation, request.consultation_id, "Consultation")
        if caller.doctor_id is None or caller.doctor_id != consultation.doctor_id:
            raise ForbiddenException("Access denied")

        if not request.items:
            raise BadRequestException("Prescription must contain at least one medication item")

        medications = await fetch_many(Medication, [item.medication_id for item in request.items])

        for index, item in enumerate(request.items, start=1):
            if not item.medication_id:
                raise BadRequestException(f"Item {index}: medication_id is required")
            if item.quantity is None or item.quantity <= 0:
                raise BadRequestException(f"Item {index}: quantity must be greater than 0")
            if not item.dosage or not item.dosage.strip():
                raise BadRequestException(f"Item {index}: dosage is required")
            if item.medication_id not in medications:
                raise BadRequestException(f"Item {index}: medication not found")

        prescriptions = []
        for item in request.items:
            medication = medications[item.medication_id]
            prescription = Prescription(
                consultation_id=str(consultation.id),
                patient_id=consultation.patient_id,
                doctor_id=consultation.doctor_id,
                medication_id=item.medication_id,
                quantity=item.quantity,
                dosage=item.dosage.strip(),
                instructions=item.instructions,
                unit_price=item.unit_price if item.unit_price is not None else medication.unit_price,
                notes=request.notes,
                signature_data=request.signature_data,
                status=request.status,
            )
            prescription.recompute_total()
            prescriptions.append(prescription)

        inserted = []
        async with Database.transaction() as session:
            try:
                for prescription in prescriptions:
                    await prescription.insert(session=session)
                    inserted.append(prescription)
            except Exception:
                if session is None:
                    logger.error(f"Prescription batch failed after {len(inserted)} inserts; rolling back")
                    for prescription in inserted:
                        await prescription.delete()
                raise

        logger.info(
            f"Created {len(inserted)} prescriptions for consultation {consultation.id} by {caller.id}"
        )
        return inserted

    @staticmethod
    async def list_prescriptions(caller: Caller) -> List[Prescription]:
        scope = prescription_scope(caller)
        if scope is None:
            return []
        return await Prescription.find(scope).sort(-Prescription.created_at).to_list()

    @staticmethod
    async def get_prescription(prescription_id: str, caller: Caller) -> Prescription:
        prescription = await get_or_404(Prescription, prescription_id, "Prescription")
        ensure_in_scope(prescription_scope(caller), prescription)
        return prescription

    @staticmethod
    async def update_prescription(prescription_id: str, request: PrescriptionUpdate, caller: Caller) -> Prescription:
        """
        Update a prescription.

        The owning doctor edits the medication line, notes, status and
        signature; the owning patient may only pick a pharmacy; admins may
        change anything. Picking a pharmacy opens a pharmacy request for the
        (prescription, pharmacy) pair if none exists yet.
        """
        prescription = await get_or_404(Prescription, prescription_id, "Prescription")
        update_data = request.model_dump(exclude_unset=True)

        if caller.is_admin:
            allowed = DOCTOR_FIELDS | PATIENT_FIELDS
        elif caller.role == Role.DOCTOR and caller.doctor_id == prescription.doctor_id:
            allowed = DOCTOR_FIELDS
        elif caller.role == Role.PATIENT and caller.id == prescription.patient_id:
            allowed = PATIENT_FIELDS
        else:
            raise ForbiddenException("Access denied")

        denied = set(update_data) - allowed
        if denied:
            raise ForbiddenException(f"Not allowed to change: {', '.join(sorted(denied))}")

        if update_data.get("medication_id"):
            await get_or_404(Medication, update_data["medication_id"], "Medication")
        if "dosage" in update_data and not (update_data["dosage"] or "").strip():
            raise BadRequestException("dosage is required")

        for field, value in update_data.items():
            if field == "pharmacy_id":
                continue
            if value is None and field in ("quantity", "unit_price", "status", "dosage"):
                continue
            setattr(prescription, field, value)

        if "unit_price" in update_data or "quantity" in update_data:
            prescription.recompute_total()

        pharmacy_id = update_data.get("pharmacy_id")
        if pharmacy_id:
            if not prescription.medication_id or await fetch(Medication, prescription.medication_id) is None:
                raise InvalidStateException("Cannot assign pharmacy: Prescription must have a medication")
            pharmacy = await get_or_404(Pharmacy, pharmacy_id, "Pharmacy")
            pharmacy_id = str(pharmacy.id)
            prescription.pharmacy_id = pharmacy_id

        async with Database.transaction() as session:
            prescription.touch()
            await prescription.save(session=session)
            logger.info(f"Prescription {prescription.id} updated by {caller.id}")

            if pharmacy_id:
                await event_bus.publish(
                    PharmacyAssigned(
                        prescription_id=str(prescription.id),
                        pharmacy_id=pharmacy_id,
                        patient_id=prescription.patient_id,
                    ),
                    session=session,
                )

        return prescription

    @staticmethod
    async def to_responses(prescriptions: List[Prescription]) -> List[PrescriptionResponse]:
        """Expand patient, doctor, medication and pharmacy references."""
        patients = await ProfileService.summaries(p.patient_id for p in prescriptions)
        doctors = await StaffService.doctor_summaries(p.doctor_id for p in prescriptions)
        medications = await fetch_many(Medication, [p.medication_id for p in prescriptions])
        pharmacies = await fetch_many(Pharmacy, [p.pharmacy_id for p in prescriptions])
        responses = []
        for p in prescriptions:
            medication = medications.get(p.medication_id or "")
            responses.append(
                PrescriptionResponse.from_document(
                    p,
                    patient=patients.get(p.patient_id),
                    doctor=doctors.get(p.doctor_id),
                    medication=MedicationResponse.from_document(medication) if medication else None,
                    pharmacy=pharmacy_summary(pharmacies.get(p.pharmacy_id or "")),
                )
            )
        return responses
