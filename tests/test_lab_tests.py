"""Lab test templates, requests and results."""

from easyhealth.core.access import Role
from easyhealth.features.lab_tests.models import LabRequestStatus, LabTestRequest, LabTestResult
from easyhealth.shared.lookups import fetch


API = "/api"


async def order_test(client, clinic, consultation, **fields):
    response = await client.post(
        f"{API}/lab-tests/requests",
        json={
            "consultation_id": consultation["id"],
            "lab_test_template_id": str(clinic.template.id),
            **fields,
        },
        headers=clinic.doctor_account.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_template_names_are_unique(client, clinic):
    response = await client.post(
        f"{API}/lab-tests/templates",
        json={"name": "Complete Blood Count", "price": 100},
        headers=clinic.admin.headers,
    )

    assert response.status_code == 409
    assert response.json() == {"error": "Template with this name already exists"}


async def test_templates_are_managed_by_admin(client, clinic):
    forbidden = await client.post(
        f"{API}/lab-tests/templates",
        json={"name": "Lipid Panel", "price": 8000},
        headers=clinic.doctor_account.headers,
    )
    created = await client.post(
        f"{API}/lab-tests/templates",
        json={"name": "Lipid Panel", "price": 8000},
        headers=clinic.admin.headers,
    )

    assert forbidden.status_code == 403
    assert created.status_code == 201
    assert created.json()["price"] == 8000


async def test_request_copies_consultation_and_derives_hospital(client, consult, clinic):
    consultation = await consult("09:00", requires_lab_test=True)

    lab_request = await order_test(client, clinic, consultation)

    assert lab_request["patient_id"] == clinic.patient.id
    assert lab_request["doctor_id"] == str(clinic.doctor.id)
    assert lab_request["hospital_id"] == str(clinic.hospital.id)
    assert lab_request["status"] == "awaiting_payment"
    assert lab_request["total_price"] == 5000
    assert lab_request["lab_test_template"]["name"] == "Complete Blood Count"
    assert lab_request["hospital"]["name"] == "Kigali General"


async def test_request_with_explicit_price_and_pending_status(client, consult, clinic):
    consultation = await consult("09:00")

    lab_request = await order_test(client, clinic, consultation, total_price=4200, status="pending")

    assert lab_request["total_price"] == 4200
    assert lab_request["status"] == "pending"


async def test_request_cannot_start_in_progress(client, consult, clinic):
    consultation = await consult("09:00")

    response = await client.post(
        f"{API}/lab-tests/requests",
        json={
            "consultation_id": consultation["id"],
            "lab_test_template_id": str(clinic.template.id),
            "status": "completed",
        },
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 400


async def test_only_owning_doctor_orders_tests(client, consult, clinic):
    consultation = await consult("09:00")

    response = await client.post(
        f"{API}/lab-tests/requests",
        json={
            "consultation_id": consultation["id"],
            "lab_test_template_id": str(clinic.template.id),
        },
        headers=clinic.other_doctor_account.headers,
    )

    assert response.status_code == 403


async def test_lab_technician_sees_requests_of_their_hospital(client, consult, clinic, make_account):
    consultation = await consult("09:00")
    lab_request = await order_test(client, clinic, consultation)
    outsider = await make_account(Role.LAB_TECHNICIAN)

    mine = await client.get(f"{API}/lab-tests/requests", headers=clinic.lab_tech.headers)
    narrowed = await client.get(
        f"{API}/lab-tests/requests",
        params={"hospital_id": "665f1c2e9b1e8a0012345678"},
        headers=clinic.lab_tech.headers,
    )
    theirs = await client.get(f"{API}/lab-tests/requests", headers=outsider.headers)
    single = await client.get(
        f"{API}/lab-tests/requests/{lab_request['id']}",
        headers=outsider.headers,
    )

    assert [r["id"] for r in mine.json()] == [lab_request["id"]]
    assert narrowed.json() == []
    assert theirs.json() == []
    assert single.status_code == 403


async def test_patient_confirms_payment_only(client, consult, clinic):
    consultation = await consult("09:00")
    lab_request = await order_test(client, clinic, consultation)
    url = f"{API}/lab-tests/requests/{lab_request['id']}"

    jump = await client.put(url, json={"status": "completed"}, headers=clinic.patient.headers)
    paid = await client.put(url, json={"status": "pending"}, headers=clinic.patient.headers)

    assert jump.status_code == 403
    assert paid.status_code == 200
    assert paid.json()["status"] == "pending"


async def test_status_never_moves_backwards(client, consult, clinic):
    consultation = await consult("09:00")
    lab_request = await order_test(client, clinic, consultation, status="pending")
    url = f"{API}/lab-tests/requests/{lab_request['id']}"

    forward = await client.put(url, json={"status": "in_progress"}, headers=clinic.lab_tech.headers)
    backward = await client.put(url, json={"status": "pending"}, headers=clinic.lab_tech.headers)

    assert forward.status_code == 200
    assert backward.status_code == 400


async def test_lab_technician_cannot_change_price(client, consult, clinic):
    consultation = await consult("09:00")
    lab_request = await order_test(client, clinic, consultation)

    response = await client.put(
        f"{API}/lab-tests/requests/{lab_request['id']}",
        json={"total_price": 1},
        headers=clinic.lab_tech.headers,
    )

    assert response.status_code == 403


async def test_result_completes_the_request(client, consult, clinic):
    consultation = await consult("09:00")
    lab_request = await order_test(client, clinic, consultation, status="pending")

    response = await client.post(
        f"{API}/lab-tests/results",
        json={
            "lab_test_request_id": lab_request["id"],
            "result_status": "negative",
            "result_data": "WBC 6.1",
        },
        headers=clinic.lab_tech.headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["technician_id"] == clinic.lab_tech.id
    assert body["lab_test_request"]["status"] == "completed"
    stored = await fetch(LabTestRequest, lab_request["id"])
    assert stored.status == LabRequestStatus.COMPLETED


async def test_second_result_conflicts(client, consult, clinic):
    consultation = await consult("09:00")
    lab_request = await order_test(client, clinic, consultation)
    payload = {
        "lab_test_request_id": lab_request["id"],
        "result_status": "positive",
        "result_data": "Reactive",
    }

    first = await client.post(f"{API}/lab-tests/results", json=payload, headers=clinic.lab_tech.headers)
    second = await client.post(f"{API}/lab-tests/results", json=payload, headers=clinic.lab_tech.headers)

    assert first.status_code == 201
    assert second.status_code == 409
    assert await LabTestResult.find_all().count() == 1


async def test_upper_case_request_id_is_the_same_request(client, consult, clinic):
    consultation = await consult("09:00")
    lab_request = await order_test(client, clinic, consultation)
    payload = {"result_status": "negative", "result_data": "WBC 6.1"}

    first = await client.post(
        f"{API}/lab-tests/results",
        json={**payload, "lab_test_request_id": lab_request["id"].upper()},
        headers=clinic.lab_tech.headers,
    )
    second = await client.post(
        f"{API}/lab-tests/results",
        json={**payload, "lab_test_request_id": lab_request["id"]},
        headers=clinic.lab_tech.headers,
    )

    assert first.status_code == 201
    assert first.json()["lab_test_request_id"] == lab_request["id"]
    assert first.json()["lab_test_request"]["id"] == lab_request["id"]
    assert second.status_code == 409
    assert await LabTestResult.find_all().count() == 1


async def test_only_lab_technicians_record_results(client, consult, clinic):
    consultation = await consult("09:00")
    lab_request = await order_test(client, clinic, consultation)

    response = await client.post(
        f"{API}/lab-tests/results",
        json={
            "lab_test_request_id": lab_request["id"],
            "result_status": "negative",
            "result_data": "Normal",
        },
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 403


async def test_results_visible_to_patient_not_to_others(client, consult, clinic):
    consultation = await consult("09:00")
    lab_request = await order_test(client, clinic, consultation)
    created = await client.post(
        f"{API}/lab-tests/results",
        json={
            "lab_test_request_id": lab_request["id"],
            "result_status": "inconclusive",
            "result_data": "Retest",
        },
        headers=clinic.lab_tech.headers,
    )
    url = f"{API}/lab-tests/results/{created.json()['id']}"

    mine = await client.get(f"{API}/lab-tests/results", headers=clinic.patient.headers)
    theirs = await client.get(f"{API}/lab-tests/results", headers=clinic.other_patient.headers)

    assert len(mine.json()) == 1
    assert theirs.json() == []
    assert (await client.get(url, headers=clinic.patient.headers)).status_code == 200
    assert (await client.get(url, headers=clinic.other_patient.headers)).status_code == 403
