"""Inbox rows written in reaction to appointment events."""

from easyhealth.core.events import AppointmentRequested, AppointmentReviewed, event_bus
from easyhealth.core.logging import logger
from easyhealth.features.notifications.service import NotificationService
from easyhealth.features.staff.models import Doctor
from easyhealth.shared.lookups import fetch


@event_bus.subscribe(AppointmentRequested)
async def notify_doctor_of_request(event: AppointmentRequested, session=None) -> None:
    doctor = await fetch(Doctor, event.doctor_id, session=session)
    if doctor is None:
        logger.warning(f"Appointment {event.appointment_id} references missing doctor {event.doctor_id}")
        return

    await NotificationService.notify(
        user_id=doctor.user_id,
        title="New Appointment Request",
        message=f"You have a new appointment request from {event.patient_name}",
        type="appointment",
        reference_id=event.appointment_id,
        session=session,
    )


@event_bus.subscribe(AppointmentReviewed)
async def notify_patient_of_review(event: AppointmentReviewed, session=None) -> None:
    await NotificationService.notify(
        user_id=event.patient_id,
        title=f"Appointment {event.status}",
        message=f"Your appointment has been {event.status}",
        type="appointment",
        reference_id=event.appointment_id,
        session=session,
    )
