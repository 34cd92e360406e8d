# Vitals Feature - Service

from typing import List
from easyhealth.core.access import Caller, Role, ensure_in_scope, vital_scope
from easyhealth.core.logging import logger
from easyhealth.features.profiles.service import ProfileService
from easyhealth.features.vitals.models import Vital
from easyhealth.features.vitals.schemas import VitalCreate, VitalResponse
from easyhealth.shared.exceptions import ForbiddenException
from easyhealth.shared.lookups import canonical_id, get_or_404


class VitalService:
    """Service class for vital signs."""

    @staticmethod
    async def create_vital(request: VitalCreate, caller: Caller) -> Vital:
        """Record vitals for a patient. The nurse is always the caller."""
        if caller.role != Role.NURSE:
            raise ForbiddenException("Only nurses can record vitals")

        await ProfileService.require_patient(request.patient_id)

        vital = Vital(**request.model_dump(), nurse_id=caller.id)
        await vital.insert()
        logger.info(f"Vitals {vital.id} recorded for patient {vital.patient_id} by nurse {caller.id}")
        return vital

    @staticmethod
    async def list_vitals(caller: Caller) -> List[Vital]:
        scope = vital_scope(caller)
        if scope is None:
            return []
        return await Vital.find(scope).sort(-Vital.created_at).to_list()

    @staticmethod
    async def list_patient_vitals(patient_id: str, caller: Caller) -> List[Vital]:
        """Vitals of one patient; the patient themself or clinical staff."""
        patient_id = canonical_id(patient_id)
        if caller.role == Role.PATIENT:
            if caller.id != patient_id:
                raise ForbiddenException("Access denied")
        elif caller.role not in (Role.DOCTOR, Role.NURSE, Role.ADMIN):
            raise ForbiddenException("Access denied")

        return await Vital.find(Vital.patient_id == patient_id).sort(-Vital.created_at).to_list()

    @staticmethod
    async def get_vital(vital_id: str, caller: Caller) -> Vital:
        vital = await get_or_404(Vital, vital_id, "Vital")
        ensure_in_scope(vital_scope(caller), vital)
        return vital

    @staticmethod
    async def to_responses(vitals: List[Vital]) -> List[VitalResponse]:
        people = await ProfileService.summaries(
            [v.patient_id for v in vitals] + [v.nurse_id for v in vitals]
        )
        return [
            VitalResponse.from_document(
                v,
                patient=people.get(v.patient_id),
                nurse=people.get(v.nurse_id),
            )
            for v in vitals
        ]
