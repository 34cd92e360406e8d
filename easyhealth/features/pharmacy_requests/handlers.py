"""Pharmacy request bookkeeping for prescription updates."""

from easyhealth.core.events import PharmacyAssigned, event_bus
from easyhealth.features.pharmacy_requests.service import PharmacyRequestService


@event_bus.subscribe(PharmacyAssigned)
async def open_pharmacy_request(event: PharmacyAssigned, session=None) -> None:
    await PharmacyRequestService.ensure_request(
        prescription_id=event.prescription_id,
        pharmacy_id=event.pharmacy_id,
        patient_id=event.patient_id,
        session=session,
    )
