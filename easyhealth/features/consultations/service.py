# Consultations Feature - Service

from typing import List
from pymongo.errors import DuplicateKeyError
from easyhealth.core.access import Caller, Role, consultation_scope, ensure_in_scope
from easyhealth.core.events import ConsultationRecorded, event_bus
from easyhealth.core.logging import logger
from easyhealth.database import Database
from easyhealth.features.appointments.models import Appointment, AppointmentStatus
from easyhealth.features.consultations.models import Consultation
from easyhealth.features.consultations.schemas import (
    AppointmentSummary,
    ConsultationCreate,
    ConsultationResponse,
    ConsultationUpdate,
)
from easyhealth.features.profiles.service import ProfileService
from easyhealth.features.staff.service import StaffService
from easyhealth.shared.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
)
from easyhealth.shared.lookups import canonical_id, fetch_many, get_or_404


ALREADY_RECORDED = "A consultation already exists for this appointment"


class ConsultationService:
    """Service class for consultations."""

    @staticmethod
    async def create_consultation(request: ConsultationCreate, caller: Caller) -> Consultation:
        """
        Record the consultation of an appointment.

        Only the appointment's doctor may record it, once. The appointment
        is completed in the same unit of work.
        """
        if caller.role != Role.DOCTOR:
            raise ForbiddenException("Only doctors can create consultations")

        appointment = await get_or_404(Appointment, request.appointment_id, "Appointment")
        if caller.doctor_id is None or caller.doctor_id != appointment.doctor_id:
            raise ForbiddenException("Access denied")

        if appointment.status in (AppointmentStatus.REJECTED, AppointmentStatus.CANCELLED):
            raise InvalidStateException(
                f"Cannot record a consultation for a {appointment.status.value} appointment"
            )

        if await Consultation.find_one(Consultation.appointment_id == request.appointment_id):
            raise ConflictException(ALREADY_RECORDED)

        values = request.model_dump(exclude_none=True)
        values.update(
            appointment_id=str(appointment.id),
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
        )

        async with Database.transaction() as session:
            consultation = Consultation(**values)
            try:
                await consultation.insert(session=session)
            except DuplicateKeyError:
                raise ConflictException(ALREADY_RECORDED)

            logger.info(f"Consultation {consultation.id} recorded for appointment {appointment.id} by {caller.id}")

            await event_bus.publish(
                ConsultationRecorded(
                    consultation_id=str(consultation.id),
                    appointment_id=str(appointment.id),
                ),
                session=session,
            )

        return consultation

    @staticmethod
    async def list_consultations(caller: Caller) -> List[Consultation]:
        scope = consultation_scope(caller)
        if scope is None:
            return []
        return await Consultation.find(scope).sort(-Consultation.consultation_date).to_list()

    @staticmethod
    async def get_consultation(consultation_id: str, caller: Caller) -> Consultation:
        consultation = await get_or_404(Consultation, consultation_id, "Consultation")
        ensure_in_scope(consultation_scope(caller), consultation)
        return consultation

    @staticmethod
    async def get_by_appointment(appointment_id: str, caller: Caller) -> Consultation:
        consultation = await Consultation.find_one(Consultation.appointment_id == canonical_id(appointment_id))
        if not consultation:
            raise NotFoundException("Consultation not found")
        ensure_in_scope(consultation_scope(caller), consultation)
        return consultation

    @staticmethod
    async def update_consultation(consultation_id: str, request: ConsultationUpdate, caller: Caller) -> Consultation:
        """Update clinical fields. Owning doctor or admin."""
        consultation = await get_or_404(Consultation, consultation_id, "Consultation")
        if not caller.is_admin and not (
            caller.role == Role.DOCTOR and caller.doctor_id == consultation.doctor_id
        ):
            raise ForbiddenException("Access denied")

        for field, value in request.model_dump(exclude_unset=True).items():
            if value is None and field in ("requires_lab_test", "requires_prescription", "consultation_date"):
                continue
            setattr(consultation, field, value)

        consultation.touch()
        await consultation.save()
        logger.info(f"Consultation {consultation.id} updated by {caller.id}")
        return consultation

    @staticmethod
    async def to_responses(consultations: List[Consultation]) -> List[ConsultationResponse]:
        patients = await ProfileService.summaries(c.patient_id for c in consultations)
        doctors = await StaffService.doctor_summaries(c.doctor_id for c in consultations)
        appointments = await fetch_many(Appointment, [c.appointment_id for c in consultations])
        return [
            ConsultationResponse.from_document(
                c,
                patient=patients.get(c.patient_id),
                doctor=doctors.get(c.doctor_id),
                appointment=appointment_summary(appointments.get(c.appointment_id)),
            )
            for c in consultations
        ]

    @staticmethod
    async def to_response(consultation: Consultation) -> ConsultationResponse:
        return (await ConsultationService.to_responses([consultation]))[0]


def appointment_summary(appointment):
    if appointment is None:
        return None
    return AppointmentSummary(
        id=str(appointment.id),
        appointment_date=appointment.appointment_date.date(),
        appointment_time=appointment.appointment_time,
        status=appointment.status,
        reason=appointment.reason,
        hospital_id=appointment.hospital_id,
        department_id=appointment.department_id,
    )
