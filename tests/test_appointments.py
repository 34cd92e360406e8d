"""Appointment booking, slot availability and review transitions."""

import asyncio
from datetime import date

import pytest

from easyhealth.features.appointments.models import Appointment
from easyhealth.features.appointments.schemas import all_slots, normalize_slot
from easyhealth.features.appointments.service import AppointmentService
from easyhealth.features.notifications.models import Notification
from easyhealth.shared.lookups import fetch


API = "/api"


def test_day_has_sixty_slots():
    slots = all_slots()

    assert len(slots) == 60
    assert slots[0] == "08:00:00"
    assert slots[-1] == "17:50:00"


@pytest.mark.parametrize("value, expected", [("09:30", "09:30:00"), ("17:50:00", "17:50:00")])
def test_normalize_slot_accepts_short_and_long_forms(value, expected):
    assert normalize_slot(value) == expected


@pytest.mark.parametrize("value", ["07:50", "18:00", "09:05", "9:00", "noon"])
def test_normalize_slot_rejects_non_slots(value):
    with pytest.raises(ValueError):
        normalize_slot(value)


async def test_patient_books_appointment(book, clinic):
    appointment = await book("09:00", reason="Chest pain")

    assert appointment["status"] == "pending"
    assert appointment["appointment_date"] == "2030-01-15"
    assert appointment["appointment_time"] == "09:00:00"
    assert appointment["patient_id"] == clinic.patient.id
    assert appointment["hospital_id"] == str(clinic.hospital.id)
    assert appointment["department_id"] == str(clinic.department.id)
    assert appointment["doctor"]["full_name"] == "Dr Kim"
    assert appointment["patient"]["full_name"] == "Jane Patient"
    assert appointment["hospital"]["name"] == "Kigali General"


async def test_booking_notifies_the_doctor(book, clinic):
    appointment = await book("09:00")

    notifications = await Notification.find(
        Notification.user_id == clinic.doctor_account.id
    ).to_list()

    assert len(notifications) == 1
    assert notifications[0].title == "New Appointment Request"
    assert notifications[0].message == "You have a new appointment request from Jane Patient"
    assert notifications[0].type == "appointment"
    assert notifications[0].reference_id == appointment["id"]


async def test_only_patients_can_book(client, clinic):
    response = await client.post(
        f"{API}/appointments",
        json={
            "doctor_id": str(clinic.doctor.id),
            "appointment_date": "2030-01-15",
            "appointment_time": "09:00",
        },
        headers=clinic.nurse_account.headers,
    )

    assert response.status_code == 403


async def test_booking_unknown_doctor_is_not_found(client, clinic):
    response = await client.post(
        f"{API}/appointments",
        json={
            "doctor_id": "665f1c2e9b1e8a0012345678",
            "appointment_date": "2030-01-15",
            "appointment_time": "09:00",
        },
        headers=clinic.patient.headers,
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Doctor not found"}


async def test_booking_off_grid_time_is_rejected(client, clinic):
    response = await client.post(
        f"{API}/appointments",
        json={
            "doctor_id": str(clinic.doctor.id),
            "appointment_date": "2030-01-15",
            "appointment_time": "09:05",
        },
        headers=clinic.patient.headers,
    )

    assert response.status_code == 400
    assert "appointment_time" in response.json()["error"]


async def test_double_booking_a_slot_conflicts(client, book, clinic):
    await book("10:00")

    response = await client.post(
        f"{API}/appointments",
        json={
            "doctor_id": str(clinic.doctor.id),
            "appointment_date": "2030-01-15",
            "appointment_time": "10:00:00",
        },
        headers=clinic.other_patient.headers,
    )

    assert response.status_code == 409
    assert response.json() == {"error": "This time slot is already booked"}
    assert await Appointment.find_all().count() == 1


async def test_concurrent_bookings_of_one_slot(client, clinic):
    def attempt(patient):
        return client.post(
            f"{API}/appointments",
            json={
                "doctor_id": str(clinic.doctor.id),
                "appointment_date": "2030-01-15",
                "appointment_time": "10:30:00",
            },
            headers=patient.headers,
        )

    responses = await asyncio.gather(attempt(clinic.patient), attempt(clinic.other_patient))

    assert sorted(r.status_code for r in responses) == [201, 409]
    assert await Appointment.find_all().count() == 1


async def test_slot_index_rejects_booking_that_passed_the_check(client, book, clinic, monkeypatch):
    await book("10:40")

    async def slot_looks_free(*args, **kwargs):
        return None

    monkeypatch.setattr(AppointmentService, "ensure_slot_free", staticmethod(slot_looks_free))
    response = await client.post(
        f"{API}/appointments",
        json={
            "doctor_id": str(clinic.doctor.id),
            "appointment_date": "2030-01-15",
            "appointment_time": "10:40:00",
        },
        headers=clinic.other_patient.headers,
    )

    assert response.status_code == 409
    assert response.json() == {"error": "This time slot is already booked"}
    assert await Appointment.find_all().count() == 1


async def test_same_time_on_another_day_is_free(book):
    first = await book("10:00")
    second = await book("10:00", day=date(2030, 1, 16))

    assert first["id"] != second["id"]


async def test_available_slots_exclude_held_slots(client, book, clinic):
    await book("08:00")
    await book("08:10")

    response = await client.get(
        f"{API}/appointments/available/{clinic.doctor.id}/2030-01-15",
        headers=clinic.patient.headers,
    )

    assert response.status_code == 200
    slots = response.json()
    assert len(slots) == 58
    assert "08:00:00" not in slots
    assert "08:10:00" not in slots
    assert slots[0] == "08:20:00"


async def test_available_slots_accept_upper_case_doctor_id(client, book, clinic):
    await book("08:00")

    response = await client.get(
        f"{API}/appointments/available/{str(clinic.doctor.id).upper()}/2030-01-15",
        headers=clinic.patient.headers,
    )

    assert response.status_code == 200
    assert len(response.json()) == 59
    assert "08:00:00" not in response.json()


async def test_cancelled_appointment_frees_its_slot(client, book, clinic):
    appointment = await book("11:00")

    cancel = await client.put(
        f"{API}/appointments/{appointment['id']}",
        json={"status": "cancelled"},
        headers=clinic.patient.headers,
    )
    slots = await client.get(
        f"{API}/appointments/available/{clinic.doctor.id}/2030-01-15",
        headers=clinic.patient.headers,
    )

    assert cancel.status_code == 200
    assert cancel.json()["status"] == "cancelled"
    assert "11:00:00" in slots.json()
    stored = await fetch(Appointment, appointment["id"])
    assert stored.slot_held is False


async def test_lists_are_scoped_by_role(client, book, clinic):
    await book("09:00")
    await book("09:10", patient=clinic.other_patient)

    mine = await client.get(f"{API}/appointments", headers=clinic.patient.headers)
    doctor = await client.get(f"{API}/appointments", headers=clinic.doctor_account.headers)
    other_doctor = await client.get(f"{API}/appointments", headers=clinic.other_doctor_account.headers)
    nurse = await client.get(f"{API}/appointments", headers=clinic.nurse_account.headers)
    pharmacist = await client.get(f"{API}/appointments", headers=clinic.pharmacist.headers)

    assert [a["appointment_time"] for a in mine.json()] == ["09:00:00"]
    assert [a["appointment_time"] for a in doctor.json()] == ["09:00:00", "09:10:00"]
    assert other_doctor.json() == []
    assert len(nurse.json()) == 2
    assert pharmacist.json() == []


async def test_single_read_follows_list_visibility(client, book, clinic):
    appointment = await book("09:00")
    url = f"{API}/appointments/{appointment['id']}"

    assert (await client.get(url, headers=clinic.patient.headers)).status_code == 200
    assert (await client.get(url, headers=clinic.doctor_account.headers)).status_code == 200
    assert (await client.get(url, headers=clinic.other_patient.headers)).status_code == 403
    assert (await client.get(url, headers=clinic.other_doctor_account.headers)).status_code == 403


async def test_doctor_approves_and_patient_is_notified(client, book, clinic):
    appointment = await book("09:00")

    response = await client.put(
        f"{API}/appointments/{appointment['id']}",
        json={"status": "approved"},
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    inbox = await Notification.find(Notification.user_id == clinic.patient.id).to_list()
    assert [(n.title, n.message) for n in inbox] == [
        ("Appointment approved", "Your appointment has been approved"),
    ]


async def test_rejecting_requires_a_reason(client, book, clinic):
    appointment = await book("09:00")
    url = f"{API}/appointments/{appointment['id']}"

    missing = await client.put(url, json={"status": "rejected"}, headers=clinic.doctor_account.headers)
    given = await client.put(
        url,
        json={"status": "rejected", "rejection_reason": "Doctor unavailable"},
        headers=clinic.doctor_account.headers,
    )

    assert missing.status_code == 400
    assert given.status_code == 200
    assert given.json()["rejection_reason"] == "Doctor unavailable"


async def test_invalid_transition_is_rejected(client, book, clinic):
    appointment = await book("09:00")

    response = await client.put(
        f"{API}/appointments/{appointment['id']}",
        json={"status": "completed"},
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Cannot change appointment from pending to completed"}


async def test_patient_cannot_approve_own_appointment(client, book, clinic):
    appointment = await book("09:00")

    response = await client.put(
        f"{API}/appointments/{appointment['id']}",
        json={"status": "approved"},
        headers=clinic.patient.headers,
    )

    assert response.status_code == 403


async def test_patient_reschedules_pending_appointment(client, book, clinic):
    appointment = await book("09:00")
    await book("09:30", patient=clinic.other_patient)
    url = f"{API}/appointments/{appointment['id']}"

    taken = await client.put(url, json={"appointment_time": "09:30"}, headers=clinic.patient.headers)
    moved = await client.put(
        url,
        json={"appointment_time": "12:00", "reason": "Follow-up"},
        headers=clinic.patient.headers,
    )

    assert taken.status_code == 409
    assert moved.status_code == 200
    assert moved.json()["appointment_time"] == "12:00:00"
    assert moved.json()["reason"] == "Follow-up"


async def test_approved_appointment_cannot_be_edited(client, book, clinic):
    appointment = await book("09:00")
    url = f"{API}/appointments/{appointment['id']}"
    await client.put(url, json={"status": "approved"}, headers=clinic.doctor_account.headers)

    response = await client.put(url, json={"reason": "Changed my mind"}, headers=clinic.patient.headers)

    assert response.status_code == 400
