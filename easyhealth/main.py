from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from easyhealth.config import settings
from easyhealth.database import Database
from easyhealth.shared.exceptions import register_exception_handlers
from easyhealth.features.auth.router import router as auth_router
from easyhealth.features.profiles.router import router as profiles_router
from easyhealth.features.catalog.router import (
    insurances_router,
    hospitals_router,
    departments_router,
    hospital_departments_router,
    medications_router,
    pharmacies_router,
)
from easyhealth.features.staff.router import doctors_router, nurses_router
from easyhealth.features.appointments.router import router as appointments_router
from easyhealth.features.consultations.router import router as consultations_router
from easyhealth.features.lab_tests.router import router as lab_tests_router
from easyhealth.features.prescriptions.router import router as prescriptions_router
from easyhealth.features.pharmacy_requests.router import router as pharmacy_requests_router
from easyhealth.features.payments.router import router as payments_router
from easyhealth.features.notifications.router import router as notifications_router
from easyhealth.features.vitals.router import router as vitals_router
from easyhealth.core.logging import logger

# Event handlers register themselves on import
from easyhealth.features.appointments import handlers as appointment_handlers  # noqa: F401
from easyhealth.features.lab_tests import handlers as lab_test_handlers  # noqa: F401
from easyhealth.features.notifications import handlers as notification_handlers  # noqa: F401
from easyhealth.features.pharmacy_requests import handlers as pharmacy_request_handlers  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI application."""
    # Startup
    logger.info(f"Starting {settings.APP_NAME}...")
    await Database.connect_db()
    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await Database.close_db()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Healthcare facility management API",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
for router in (
    auth_router,
    profiles_router,
    insurances_router,
    hospitals_router,
    departments_router,
    hospital_departments_router,
    doctors_router,
    nurses_router,
    pharmacies_router,
    medications_router,
    appointments_router,
    consultations_router,
    lab_tests_router,
    prescriptions_router,
    pharmacy_requests_router,
    payments_router,
    notifications_router,
    vitals_router,
):
    app.include_router(router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{settings.API_PREFIX}/health",
    }


@app.get(f"{settings.API_PREFIX}/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "OK",
        "message": "EasyHealth API is running",
        "environment": settings.ENVIRONMENT,
    }
