"""MongoDB database connection manager."""

from contextlib import asynccontextmanager
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from easyhealth.config import settings
from easyhealth.core.logging import logger
from easyhealth.features.auth.models import Profile
from easyhealth.features.catalog.models import (
    Insurance,
    Hospital,
    Department,
    HospitalDepartment,
    Medication,
    Pharmacy,
)
from easyhealth.features.staff.models import Doctor, Nurse
from easyhealth.features.appointments.models import Appointment
from easyhealth.features.consultations.models import Consultation
from easyhealth.features.lab_tests.models import LabTestTemplate, LabTestRequest, LabTestResult
from easyhealth.features.prescriptions.models import Prescription
from easyhealth.features.pharmacy_requests.models import PharmacyRequest
from easyhealth.features.payments.models import Payment
from easyhealth.features.notifications.models import Notification
from easyhealth.features.vitals.models import Vital


DOCUMENT_MODELS = [
    Profile,
    Insurance,
    Hospital,
    Department,
    HospitalDepartment,
    Medication,
    Pharmacy,
    Doctor,
    Nurse,
    Appointment,
    Consultation,
    LabTestTemplate,
    LabTestRequest,
    LabTestResult,
    Prescription,
    PharmacyRequest,
    Payment,
    Notification,
    Vital,
]


class Database:
    """MongoDB database connection manager."""

    client: Optional[AsyncIOMotorClient] = None

    @classmethod
    async def connect_db(cls):
        """Connect to MongoDB and initialize Beanie."""
        cls.client = AsyncIOMotorClient(settings.MONGODB_URL)

        await init_beanie(
            database=cls.client[settings.DATABASE_NAME],
            document_models=DOCUMENT_MODELS,
        )

        logger.info(f"Connected to MongoDB database: {settings.DATABASE_NAME}")

    @classmethod
    async def close_db(cls):
        """Close MongoDB connection."""
        if cls.client:
            cls.client.close()
            cls.client = None
            logger.info("Closed MongoDB connection")

    @classmethod
    @asynccontextmanager
    async def transaction(cls):
        """
        Unit of work for compound operations.

        Yields a session bound to an open transaction when transactions are
        enabled, otherwise None (each write then commits on its own).
        """
        if not settings.MONGODB_TRANSACTIONS or cls.client is None:
            yield None
            return

        async with await cls.client.start_session() as session:
            async with session.start_transaction():
                yield session
