# Appointments Feature - Service

from datetime import date, datetime, time
from typing import List
from beanie.operators import In
from pymongo.errors import DuplicateKeyError
from easyhealth.core.access import Caller, Role, appointment_scope, ensure_in_scope
from easyhealth.core.events import AppointmentRequested, AppointmentReviewed, event_bus
from easyhealth.core.logging import logger
from easyhealth.database import Database
from easyhealth.features.appointments.models import (
    Appointment,
    AppointmentStatus,
    SLOT_HOLDING_STATUSES,
)
from easyhealth.features.appointments.schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    all_slots,
)
from easyhealth.features.catalog.service import hospital_and_department_summaries
from easyhealth.features.profiles.service import ProfileService
from easyhealth.features.staff.models import Doctor
from easyhealth.features.staff.service import StaffService
from easyhealth.shared.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    InvalidStateException,
)
from easyhealth.shared.lookups import canonical_id, get_or_404, to_object_id


REVIEWERS = (Role.DOCTOR, Role.NURSE, Role.ADMIN)

# (from, to) -> roles allowed to perform the transition
TRANSITIONS = {
    (AppointmentStatus.PENDING, AppointmentStatus.APPROVED): REVIEWERS,
    (AppointmentStatus.PENDING, AppointmentStatus.REJECTED): REVIEWERS,
    (AppointmentStatus.APPROVED, AppointmentStatus.COMPLETED): REVIEWERS,
    (AppointmentStatus.PENDING, AppointmentStatus.CANCELLED): (Role.PATIENT, Role.ADMIN),
    (AppointmentStatus.APPROVED, AppointmentStatus.CANCELLED): (Role.PATIENT, Role.ADMIN),
}

SLOT_TAKEN = "This time slot is already booked"


def day_start(value: date) -> datetime:
    """Stored form of an appointment date."""
    return datetime.combine(value, time.min)


class AppointmentService:
    """Service class for appointment booking and review."""

    @staticmethod
    async def ensure_slot_free(
        doctor_id: str,
        appointment_date: datetime,
        appointment_time: str,
        exclude_id=None,
        session=None,
    ) -> None:
        """Raise ConflictException if a slot-holding appointment occupies the slot."""
        held = await Appointment.find_one(
            Appointment.doctor_id == doctor_id,
            Appointment.appointment_date == appointment_date,
            Appointment.appointment_time == appointment_time,
            In(Appointment.status, [s.value for s in SLOT_HOLDING_STATUSES]),
            session=session,
        )
        if held and held.id != exclude_id:
            logger.warning(f"Slot {appointment_date.date()} {appointment_time} of doctor {doctor_id} is taken")
            raise ConflictException(SLOT_TAKEN)

    @staticmethod
    async def create_appointment(request: AppointmentCreate, caller: Caller) -> Appointment:
        """
        Book an appointment for the calling patient.

        The patient is always the caller. Hospital and department default to
        the doctor's affiliation.
        """
        if caller.role != Role.PATIENT:
            raise ForbiddenException("Only patients can create appointments")

        doctor = await get_or_404(Doctor, request.doctor_id, "Doctor")
        appointment_date = day_start(request.appointment_date)

        async with Database.transaction() as session:
            await AppointmentService.ensure_slot_free(
                str(doctor.id), appointment_date, request.appointment_time, session=session
            )

            appointment = Appointment(
                patient_id=caller.id,
                doctor_id=str(doctor.id),
                hospital_id=request.hospital_id or doctor.hospital_id,
                department_id=request.department_id or doctor.department_id,
                appointment_date=appointment_date,
                appointment_time=request.appointment_time,
                status=AppointmentStatus.PENDING,
                reason=request.reason,
            )
            try:
                await appointment.insert(session=session)
            except DuplicateKeyError:
                logger.warning(f"Concurrent booking lost the race for doctor {doctor.id}")
                raise ConflictException(SLOT_TAKEN)

            logger.info(f"Appointment {appointment.id} booked by patient {caller.id}")

            await event_bus.publish(
                AppointmentRequested(
                    appointment_id=str(appointment.id),
                    doctor_id=str(doctor.id),
                    patient_name=caller.full_name,
                ),
                session=session,
            )

        return appointment

    @staticmethod
    async def list_appointments(caller: Caller) -> List[Appointment]:
        """Appointments visible to the caller, by date then time."""
        scope = appointment_scope(caller)
        if scope is None:
            return []
        return await Appointment.find(scope).sort(
            +Appointment.appointment_date, +Appointment.appointment_time
        ).to_list()

    @staticmethod
    async def get_appointment(appointment_id: str, caller: Caller) -> Appointment:
        appointment = await get_or_404(Appointment, appointment_id, "Appointment")
        ensure_in_scope(appointment_scope(caller), appointment)
        return appointment

    @staticmethod
    async def update_appointment(appointment_id: str, request: AppointmentUpdate, caller: Caller) -> Appointment:
        """
        Apply a status transition and/or patient edits.

        Allowed transitions are listed in TRANSITIONS; anything else raises
        InvalidStateException. The owning patient may edit the reason and
        reschedule while the appointment is pending.
        """
        appointment = await AppointmentService.get_appointment(appointment_id, caller)
        update_data = request.model_dump(exclude_unset=True)

        edits = {k: update_data[k] for k in ("reason", "appointment_date", "appointment_time") if k in update_data}
        target = update_data.get("status")

        if edits:
            if caller.role not in (Role.PATIENT, Role.ADMIN):
                raise ForbiddenException("Only the patient can edit or reschedule an appointment")
            if appointment.status != AppointmentStatus.PENDING:
                raise InvalidStateException("Only pending appointments can be edited")

        if target is not None:
            allowed = TRANSITIONS.get((appointment.status, target))
            if allowed is None:
                raise InvalidStateException(
                    f"Cannot change appointment from {appointment.status.value} to {target.value}"
                )
            if caller.role not in allowed:
                raise ForbiddenException("Access denied")
            if target == AppointmentStatus.REJECTED:
                if not (request.rejection_reason or "").strip():
                    raise BadRequestException("rejection_reason is required when rejecting an appointment")
                appointment.rejection_reason = request.rejection_reason.strip()

        async with Database.transaction() as session:
            if "appointment_date" in edits or "appointment_time" in edits:
                new_date = day_start(edits["appointment_date"]) if edits.get("appointment_date") else appointment.appointment_date
                new_time = edits.get("appointment_time") or appointment.appointment_time
                await AppointmentService.ensure_slot_free(
                    appointment.doctor_id, new_date, new_time, exclude_id=appointment.id, session=session
                )
                appointment.appointment_date = new_date
                appointment.appointment_time = new_time

            if "reason" in edits:
                appointment.reason = edits["reason"]

            if target is not None:
                appointment.status = target
                appointment.hold_slot()

            appointment.touch()
            try:
                await appointment.save(session=session)
            except DuplicateKeyError:
                raise ConflictException(SLOT_TAKEN)

            logger.info(f"Appointment {appointment.id} updated by {caller.id} (status={appointment.status.value})")

            if target in (AppointmentStatus.APPROVED, AppointmentStatus.REJECTED):
                await event_bus.publish(
                    AppointmentReviewed(
                        appointment_id=str(appointment.id),
                        patient_id=appointment.patient_id,
                        status=target.value,
                    ),
                    session=session,
                )

        return appointment

    @staticmethod
    async def available_slots(doctor_id: str, day: date) -> List[str]:
        """All slots of the day minus those held by pending or approved appointments."""
        if to_object_id(doctor_id) is None:
            return all_slots()

        held = await Appointment.find(
            Appointment.doctor_id == canonical_id(doctor_id),
            Appointment.appointment_date == day_start(day),
            In(Appointment.status, [s.value for s in SLOT_HOLDING_STATUSES]),
        ).to_list()
        taken = {a.appointment_time for a in held}
        return [slot for slot in all_slots() if slot not in taken]

    @staticmethod
    async def to_responses(appointments: List[Appointment]) -> List[AppointmentResponse]:
        """Expand patient, doctor, hospital and department references."""
        patients = await ProfileService.summaries(a.patient_id for a in appointments)
        doctors = await StaffService.doctor_summaries(a.doctor_id for a in appointments)
        hospitals, departments = await hospital_and_department_summaries(
            [a.hospital_id for a in appointments],
            [a.department_id for a in appointments],
        )
        return [
            AppointmentResponse(
                id=str(a.id),
                patient_id=a.patient_id,
                doctor_id=a.doctor_id,
                hospital_id=a.hospital_id,
                department_id=a.department_id,
                appointment_date=a.appointment_date.date(),
                appointment_time=a.appointment_time,
                status=a.status,
                reason=a.reason,
                rejection_reason=a.rejection_reason,
                patient=patients.get(a.patient_id),
                doctor=doctors.get(a.doctor_id),
                hospital=hospitals.get(a.hospital_id),
                department=departments.get(a.department_id),
                created_at=a.created_at,
                updated_at=a.updated_at,
            )
            for a in appointments
        ]

    @staticmethod
    async def to_response(appointment: Appointment) -> AppointmentResponse:
        return (await AppointmentService.to_responses([appointment]))[0]
