"""Consultation recording and the appointment completion it triggers."""

from easyhealth.features.appointments.models import Appointment, AppointmentStatus
from easyhealth.features.consultations.models import Consultation
from easyhealth.shared.lookups import fetch


API = "/api"


async def test_doctor_records_consultation_and_completes_appointment(client, book, clinic):
    appointment = await book("09:00")

    response = await client.post(
        f"{API}/consultations",
        json={
            "appointment_id": appointment["id"],
            "diagnosis": "Hypertension",
            "requires_prescription": True,
        },
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["patient_id"] == clinic.patient.id
    assert body["doctor_id"] == str(clinic.doctor.id)
    assert body["requires_prescription"] is True
    assert body["requires_lab_test"] is False
    assert body["appointment"]["id"] == appointment["id"]

    stored = await fetch(Appointment, appointment["id"])
    assert stored.status == AppointmentStatus.COMPLETED
    assert stored.slot_held is False


async def test_second_consultation_for_appointment_conflicts(client, consult, clinic):
    first = await consult("09:00")

    response = await client.post(
        f"{API}/consultations",
        json={"appointment_id": first["appointment_id"], "diagnosis": "Again"},
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 409
    assert response.json() == {"error": "A consultation already exists for this appointment"}
    assert await Consultation.find_all().count() == 1


async def test_only_assigned_doctor_can_record(client, book, clinic):
    appointment = await book("09:00")

    other_doctor = await client.post(
        f"{API}/consultations",
        json={"appointment_id": appointment["id"]},
        headers=clinic.other_doctor_account.headers,
    )
    nurse = await client.post(
        f"{API}/consultations",
        json={"appointment_id": appointment["id"]},
        headers=clinic.nurse_account.headers,
    )

    assert other_doctor.status_code == 403
    assert nurse.status_code == 403
    assert nurse.json() == {"error": "Only doctors can create consultations"}


async def test_cancelled_appointment_cannot_be_consulted(client, book, clinic):
    appointment = await book("09:00")
    await client.put(
        f"{API}/appointments/{appointment['id']}",
        json={"status": "cancelled"},
        headers=clinic.patient.headers,
    )

    response = await client.post(
        f"{API}/consultations",
        json={"appointment_id": appointment["id"]},
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 400


async def test_consultation_for_missing_appointment_is_not_found(client, clinic):
    response = await client.post(
        f"{API}/consultations",
        json={"appointment_id": "665f1c2e9b1e8a0012345678"},
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Appointment not found"}


async def test_consultation_visibility(client, consult, clinic):
    consultation = await consult("09:00")
    url = f"{API}/consultations/{consultation['id']}"

    assert (await client.get(url, headers=clinic.patient.headers)).status_code == 200
    assert (await client.get(url, headers=clinic.nurse_account.headers)).status_code == 200
    assert (await client.get(url, headers=clinic.other_patient.headers)).status_code == 403
    assert (await client.get(url, headers=clinic.other_doctor_account.headers)).status_code == 403

    mine = await client.get(f"{API}/consultations", headers=clinic.patient.headers)
    theirs = await client.get(f"{API}/consultations", headers=clinic.other_patient.headers)
    assert [c["id"] for c in mine.json()] == [consultation["id"]]
    assert theirs.json() == []


async def test_consultation_by_appointment(client, consult, clinic):
    consultation = await consult("09:00")

    found = await client.get(
        f"{API}/consultations/appointment/{consultation['appointment_id']}",
        headers=clinic.doctor_account.headers,
    )
    missing = await client.get(
        f"{API}/consultations/appointment/665f1c2e9b1e8a0012345678",
        headers=clinic.doctor_account.headers,
    )

    assert found.status_code == 200
    assert found.json()["id"] == consultation["id"]
    assert missing.status_code == 404


async def test_owning_doctor_updates_consultation(client, consult, clinic):
    consultation = await consult("09:00")
    url = f"{API}/consultations/{consultation['id']}"

    updated = await client.put(
        url,
        json={"notes": "Review in two weeks", "requires_lab_test": True},
        headers=clinic.doctor_account.headers,
    )
    foreign = await client.put(url, json={"notes": "x"}, headers=clinic.other_doctor_account.headers)

    assert updated.status_code == 200
    assert updated.json()["notes"] == "Review in two weeks"
    assert updated.json()["requires_lab_test"] is True
    assert foreign.status_code == 403
