"""Event bus dispatch and handler registration."""

from easyhealth.core.events import (
    AppointmentRequested,
    AppointmentReviewed,
    ConsultationRecorded,
    EventBus,
    LabResultRecorded,
    PharmacyAssigned,
    event_bus,
)
from easyhealth.features.appointments.handlers import complete_consulted_appointment
from easyhealth.features.lab_tests.handlers import complete_lab_request
from easyhealth.features.notifications.handlers import (
    notify_doctor_of_request,
    notify_patient_of_review,
)
from easyhealth.features.pharmacy_requests.handlers import open_pharmacy_request
from easyhealth.features.pharmacy_requests.models import PharmacyRequest
from easyhealth.features.pharmacy_requests.service import PharmacyRequestService


async def test_handlers_run_in_subscription_order():
    bus = EventBus()
    calls = []

    @bus.subscribe(ConsultationRecorded)
    async def first(event, session=None):
        calls.append(("first", event.consultation_id, session))

    @bus.subscribe(ConsultationRecorded)
    async def second(event, session=None):
        calls.append(("second", event.consultation_id, session))

    await bus.publish(ConsultationRecorded(consultation_id="c1", appointment_id="a1"), session="s")

    assert calls == [("first", "c1", "s"), ("second", "c1", "s")]


async def test_publish_without_subscribers_is_a_no_op():
    bus = EventBus()

    await bus.publish(LabResultRecorded(result_id="r", lab_test_request_id="q"))

    assert bus.handlers_for(LabResultRecorded) == []


def test_application_handlers_are_registered():
    assert notify_doctor_of_request in event_bus.handlers_for(AppointmentRequested)
    assert notify_patient_of_review in event_bus.handlers_for(AppointmentReviewed)
    assert complete_consulted_appointment in event_bus.handlers_for(ConsultationRecorded)
    assert complete_lab_request in event_bus.handlers_for(LabResultRecorded)
    assert open_pharmacy_request in event_bus.handlers_for(PharmacyAssigned)


async def test_ensure_request_is_idempotent():
    first = await PharmacyRequestService.ensure_request("rx-1", "ph-1", "p-1")
    second = await PharmacyRequestService.ensure_request("rx-1", "ph-1", "p-1")
    other = await PharmacyRequestService.ensure_request("rx-1", "ph-2", "p-1")

    assert first.id == second.id
    assert other.id != first.id
    assert await PharmacyRequest.find_all().count() == 2


async def test_missing_references_are_skipped():
    await complete_consulted_appointment(
        ConsultationRecorded(consultation_id="c", appointment_id="665f1c2e9b1e8a0012345678")
    )
    await complete_lab_request(
        LabResultRecorded(result_id="r", lab_test_request_id="not-an-id")
    )
