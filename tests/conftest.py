"""Shared fixtures: an in-memory database, an HTTP client and a seeded clinic."""

import os

# Settings are read at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("MONGODB_TRANSACTIONS", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import itertools
from dataclasses import dataclass
from datetime import date
from types import SimpleNamespace
from typing import Dict, Optional

import httpx
import pytest
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient

from easyhealth.core.access import Role
from easyhealth.core.security import create_access_token, get_password_hash
from easyhealth.database import DOCUMENT_MODELS
from easyhealth.features.auth.models import Profile
from easyhealth.features.catalog.models import (
    Department,
    Hospital,
    Insurance,
    Medication,
    Pharmacy,
)
from easyhealth.features.lab_tests.models import LabTestTemplate
from easyhealth.features.staff.models import Doctor, Nurse
from easyhealth.main import app


API = "/api"
PASSWORD = "secret123"
VISIT_DAY = date(2030, 1, 15)


@dataclass
class Account:
    """A stored profile and a bearer token for it."""

    profile: Profile
    token: str

    @property
    def id(self) -> str:
        return str(self.profile.id)

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture(autouse=True)
async def database():
    """Fresh in-memory database per test."""
    client = AsyncMongoMockClient()
    db = client["easyhealth_test"]
    await init_beanie(database=db, document_models=DOCUMENT_MODELS)
    yield db


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def make_account():
    """Factory storing a profile of the given role and issuing its token."""
    counter = itertools.count(1)

    async def factory(
        role: Role,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        **fields,
    ) -> Account:
        n = next(counter)
        profile = Profile(
            email=email or f"{role.value}{n}@example.com",
            password_hash=get_password_hash(PASSWORD),
            full_name=full_name or f"{role.value.replace('_', ' ').title()} {n}",
            role=role,
            **fields,
        )
        await profile.insert()
        return Account(profile=profile, token=create_access_token(str(profile.id)))

    return factory


@pytest.fixture
async def clinic(make_account):
    """
    One hospital with every role staffed.

    The doctor belongs to Cardiology at Kigali General, the lab technician
    runs that hospital's lab and the pharmacist runs City Pharmacy.
    """
    insurance = Insurance(name="RSSB", coverage_percentage=80)
    await insurance.insert()

    hospital = Hospital(name="Kigali General", location="Kigali", consultation_fee=10000)
    await hospital.insert()
    department = Department(name="Cardiology")
    await department.insert()

    admin = await make_account(Role.ADMIN, full_name="Ada Admin")
    patient = await make_account(Role.PATIENT, full_name="Jane Patient", insurance_id=str(insurance.id))
    other_patient = await make_account(Role.PATIENT, full_name="Omar Patient")
    doctor_account = await make_account(Role.DOCTOR, full_name="Dr Kim")
    other_doctor_account = await make_account(Role.DOCTOR, full_name="Dr Lee")
    nurse_account = await make_account(Role.NURSE, full_name="Nina Nurse")
    lab_tech = await make_account(Role.LAB_TECHNICIAN, full_name="Leo Lab")
    pharmacist = await make_account(Role.PHARMACIST, full_name="Paula Pharmacist")

    hospital.lab_user_id = lab_tech.id
    await hospital.save()

    doctor = Doctor(
        user_id=doctor_account.id,
        hospital_id=str(hospital.id),
        department_id=str(department.id),
        specialization="Cardiologist",
        license_number="DOC-001",
        consultation_fee=15000,
    )
    await doctor.insert()
    other_doctor = Doctor(
        user_id=other_doctor_account.id,
        hospital_id=str(hospital.id),
        department_id=str(department.id),
        license_number="DOC-002",
    )
    await other_doctor.insert()
    nurse = Nurse(user_id=nurse_account.id, license_number="NUR-001")
    await nurse.insert()

    pharmacy = Pharmacy(name="City Pharmacy", location="Kigali", pharmacist_id=pharmacist.id)
    await pharmacy.insert()
    medication = Medication(name="Amoxicillin 500mg", unit_price=500, stock_quantity=100)
    await medication.insert()
    template = LabTestTemplate(name="Complete Blood Count", price=5000)
    await template.insert()

    return SimpleNamespace(
        insurance=insurance,
        hospital=hospital,
        department=department,
        admin=admin,
        patient=patient,
        other_patient=other_patient,
        doctor_account=doctor_account,
        doctor=doctor,
        other_doctor_account=other_doctor_account,
        other_doctor=other_doctor,
        nurse_account=nurse_account,
        nurse=nurse,
        lab_tech=lab_tech,
        pharmacist=pharmacist,
        pharmacy=pharmacy,
        medication=medication,
        template=template,
    )


@pytest.fixture
def book(client, clinic):
    """Book an appointment with the clinic's doctor through the API."""

    async def factory(slot: str, patient: Optional[Account] = None, day: date = VISIT_DAY, **fields):
        patient = patient or clinic.patient
        response = await client.post(
            f"{API}/appointments",
            json={
                "doctor_id": str(clinic.doctor.id),
                "appointment_date": day.isoformat(),
                "appointment_time": slot,
                **fields,
            },
            headers=patient.headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return factory


@pytest.fixture
def consult(client, clinic, book):
    """Book a slot and record its consultation; returns the consultation JSON."""

    async def factory(slot: str, **fields):
        appointment = await book(slot)
        response = await client.post(
            f"{API}/consultations",
            json={"appointment_id": appointment["id"], "diagnosis": "Hypertension", **fields},
            headers=clinic.doctor_account.headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return factory
