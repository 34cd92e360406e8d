"""Payment recording and insurance split."""

import pytest

from easyhealth.features.payments.service import split_amount


API = "/api"


@pytest.mark.parametrize(
    "amount, coverage, expected",
    [
        (10000, 80, (8000, 2000)),
        (10000, None, (0, 10000)),
        (10000, 0, (0, 10000)),
        (2500, 100, (2500, 0)),
    ],
)
def test_split_amount(amount, coverage, expected):
    assert split_amount(amount, coverage) == pytest.approx(expected)


async def test_insured_patient_pays_remainder(client, clinic):
    response = await client.post(
        f"{API}/payments",
        json={"payment_type": "consultation", "reference_id": "c-1", "amount": 15000},
        headers=clinic.patient.headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "completed"
    assert body["insurance_coverage"] == pytest.approx(12000)
    assert body["patient_pays"] == pytest.approx(3000)
    assert body["patient"]["full_name"] == "Jane Patient"


async def test_uninsured_patient_pays_everything(client, clinic):
    response = await client.post(
        f"{API}/payments",
        json={"payment_type": "medication", "reference_id": "p-1", "amount": 1000},
        headers=clinic.other_patient.headers,
    )

    assert response.json()["insurance_coverage"] == 0
    assert response.json()["patient_pays"] == 1000


async def test_non_positive_amount_is_rejected(client, clinic):
    response = await client.post(
        f"{API}/payments",
        json={"payment_type": "lab_test", "reference_id": "l-1", "amount": 0},
        headers=clinic.patient.headers,
    )

    assert response.status_code == 400


async def test_only_patients_record_payments(client, clinic):
    response = await client.post(
        f"{API}/payments",
        json={"payment_type": "consultation", "reference_id": "c-1", "amount": 100},
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 403


async def test_payment_visibility(client, clinic):
    consultation = await client.post(
        f"{API}/payments",
        json={"payment_type": "consultation", "reference_id": "c-1", "amount": 100},
        headers=clinic.patient.headers,
    )
    await client.post(
        f"{API}/payments",
        json={"payment_type": "lab_test", "reference_id": "l-1", "amount": 100},
        headers=clinic.patient.headers,
    )
    url = f"{API}/payments/{consultation.json()['id']}"

    patient = await client.get(f"{API}/payments", headers=clinic.patient.headers)
    doctor = await client.get(f"{API}/payments", headers=clinic.doctor_account.headers)
    stranger = await client.get(f"{API}/payments", headers=clinic.other_patient.headers)
    nurse = await client.get(f"{API}/payments", headers=clinic.nurse_account.headers)

    assert len(patient.json()) == 2
    assert [p["payment_type"] for p in doctor.json()] == ["consultation"]
    assert stranger.json() == []
    assert nurse.json() == []
    assert (await client.get(url, headers=clinic.admin.headers)).status_code == 200
    assert (await client.get(url, headers=clinic.other_patient.headers)).status_code == 403


async def test_payment_by_reference(client, clinic):
    await client.post(
        f"{API}/payments",
        json={"payment_type": "lab_test", "reference_id": "l-9", "amount": 5000},
        headers=clinic.patient.headers,
    )

    found = await client.get(f"{API}/payments/reference/lab_test/l-9", headers=clinic.patient.headers)
    wrong_type = await client.get(f"{API}/payments/reference/medication/l-9", headers=clinic.patient.headers)

    assert found.status_code == 200
    assert found.json()["amount"] == 5000
    assert wrong_type.status_code == 404
