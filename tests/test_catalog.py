"""Insurances, hospitals, departments, medications and pharmacies."""

from easyhealth.features.catalog.models import Hospital


API = "/api"


async def test_catalog_writes_are_admin_only(client, clinic):
    payload = {"name": "MMI", "coverage_percentage": 90}

    patient = await client.post(f"{API}/insurances", json=payload, headers=clinic.patient.headers)
    admin = await client.post(f"{API}/insurances", json=payload, headers=clinic.admin.headers)

    assert patient.status_code == 403
    assert admin.status_code == 201
    assert admin.json()["coverage_percentage"] == 90


async def test_coverage_above_hundred_is_rejected(client, clinic):
    response = await client.post(
        f"{API}/insurances",
        json={"name": "Too generous", "coverage_percentage": 120},
        headers=clinic.admin.headers,
    )

    assert response.status_code == 400


async def test_catalog_reads_need_authentication(client, clinic):
    anonymous = await client.get(f"{API}/hospitals")
    signed_in = await client.get(f"{API}/hospitals", headers=clinic.patient.headers)

    assert anonymous.status_code == 401
    assert [h["name"] for h in signed_in.json()] == ["Kigali General"]


async def test_hospitals_are_sorted_by_name(client, clinic):
    await Hospital(name="Butare Hospital").insert()
    await Hospital(name="Ruhengeri Hospital").insert()

    response = await client.get(f"{API}/hospitals", headers=clinic.patient.headers)

    assert [h["name"] for h in response.json()] == [
        "Butare Hospital",
        "Kigali General",
        "Ruhengeri Hospital",
    ]


async def test_hospital_lab_user_must_exist(client, clinic):
    response = await client.post(
        f"{API}/hospitals",
        json={"name": "New Hospital", "lab_user_id": "665f1c2e9b1e8a0012345678"},
        headers=clinic.admin.headers,
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Lab user not found"}


async def test_update_and_delete_hospital(client, clinic):
    url = f"{API}/hospitals/{clinic.hospital.id}"

    updated = await client.put(url, json={"consultation_fee": 12000}, headers=clinic.admin.headers)
    deleted = await client.delete(url, headers=clinic.admin.headers)
    missing = await client.get(url, headers=clinic.admin.headers)

    assert updated.json()["consultation_fee"] == 12000
    assert updated.json()["name"] == "Kigali General"
    assert deleted.json() == {"message": "Hospital deleted"}
    assert missing.status_code == 404


async def test_hospital_department_pair_is_unique(client, clinic):
    payload = {
        "hospital_id": str(clinic.hospital.id),
        "department_id": str(clinic.department.id),
        "consultation_fee": 20000,
    }

    first = await client.post(f"{API}/hospital-departments", json=payload, headers=clinic.admin.headers)
    second = await client.post(f"{API}/hospital-departments", json=payload, headers=clinic.admin.headers)
    listed = await client.get(
        f"{API}/hospital-departments/hospital/{clinic.hospital.id}",
        headers=clinic.patient.headers,
    )

    assert first.status_code == 201
    assert first.json()["hospital"]["name"] == "Kigali General"
    assert first.json()["department"]["name"] == "Cardiology"
    assert second.status_code == 409
    assert len(listed.json()) == 1


async def test_hospital_department_pair_ignores_id_case(client, clinic):
    hospital_id = str(clinic.hospital.id)
    department_id = str(clinic.department.id)

    first = await client.post(
        f"{API}/hospital-departments",
        json={"hospital_id": hospital_id.upper(), "department_id": department_id},
        headers=clinic.admin.headers,
    )
    second = await client.post(
        f"{API}/hospital-departments",
        json={"hospital_id": hospital_id, "department_id": department_id.upper()},
        headers=clinic.admin.headers,
    )

    assert first.status_code == 201
    assert first.json()["hospital_id"] == hospital_id
    assert second.status_code == 409


async def test_hospital_department_requires_existing_refs(client, clinic):
    response = await client.post(
        f"{API}/hospital-departments",
        json={"hospital_id": str(clinic.hospital.id), "department_id": "665f1c2e9b1e8a0012345678"},
        headers=clinic.admin.headers,
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Department not found"}


async def test_medication_search_is_case_insensitive(client, clinic):
    await client.post(
        f"{API}/medications",
        json={"name": "Paracetamol 500mg", "unit_price": 50},
        headers=clinic.pharmacist.headers,
    )

    response = await client.get(
        f"{API}/medications",
        params={"search": "PARACET"},
        headers=clinic.patient.headers,
    )

    assert [m["name"] for m in response.json()] == ["Paracetamol 500mg"]


async def test_medication_search_treats_input_literally(client, clinic):
    response = await client.get(
        f"{API}/medications",
        params={"search": ".*"},
        headers=clinic.patient.headers,
    )

    assert response.json() == []


async def test_medication_names_are_unique(client, clinic):
    response = await client.post(
        f"{API}/medications",
        json={"name": "Amoxicillin 500mg"},
        headers=clinic.doctor_account.headers,
    )

    assert response.status_code == 409
    assert response.json() == {"error": "Medication with this name already exists"}


async def test_doctor_adds_but_cannot_edit_medications(client, clinic):
    created = await client.post(
        f"{API}/medications",
        json={"name": "Metformin 850mg", "unit_price": 80},
        headers=clinic.doctor_account.headers,
    )
    edit = await client.put(
        f"{API}/medications/{created.json()['id']}",
        json={"unit_price": 1},
        headers=clinic.doctor_account.headers,
    )

    assert created.status_code == 201
    assert created.json()["requires_prescription"] is True
    assert edit.status_code == 403


async def test_pharmacy_lookup_by_pharmacist(client, clinic):
    found = await client.get(
        f"{API}/pharmacies/pharmacist/{clinic.pharmacist.id}",
        headers=clinic.patient.headers,
    )
    missing = await client.get(
        f"{API}/pharmacies/pharmacist/{clinic.patient.id}",
        headers=clinic.patient.headers,
    )

    assert found.status_code == 200
    assert found.json()["pharmacist"]["full_name"] == "Paula Pharmacist"
    assert missing.status_code == 404


async def test_pharmacy_coordinates_are_validated(client, clinic):
    response = await client.post(
        f"{API}/pharmacies",
        json={"name": "Off the map", "latitude": 95},
        headers=clinic.admin.headers,
    )

    assert response.status_code == 400
