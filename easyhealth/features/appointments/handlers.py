"""Appointment status changes driven by other workflow steps."""

from easyhealth.core.events import ConsultationRecorded, event_bus
from easyhealth.core.logging import logger
from easyhealth.features.appointments.models import Appointment, AppointmentStatus
from easyhealth.shared.lookups import fetch


@event_bus.subscribe(ConsultationRecorded)
async def complete_consulted_appointment(event: ConsultationRecorded, session=None) -> None:
    appointment = await fetch(Appointment, event.appointment_id, session=session)
    if appointment is None:
        logger.warning(f"Consultation {event.consultation_id} references missing appointment {event.appointment_id}")
        return

    appointment.status = AppointmentStatus.COMPLETED
    appointment.hold_slot()
    appointment.touch()
    await appointment.save(session=session)
    logger.info(f"Appointment {appointment.id} completed by consultation {event.consultation_id}")
