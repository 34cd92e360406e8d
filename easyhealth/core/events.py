"""
In-process domain events.

Workflow services publish an event after their primary write; the handlers
subscribed to it perform the follow-up writes (notifications, status flips,
pharmacy requests) with the same database session, so a compound operation
commits or aborts as one unit when transactions are enabled.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from easyhealth.core.logging import logger


Handler = Callable[[Any, Optional[Any]], Awaitable[None]]


@dataclass(frozen=True)
class AppointmentRequested:
    appointment_id: str
    doctor_id: str
    patient_name: str


@dataclass(frozen=True)
class AppointmentReviewed:
    appointment_id: str
    patient_id: str
    status: str


@dataclass(frozen=True)
class ConsultationRecorded:
    consultation_id: str
    appointment_id: str


@dataclass(frozen=True)
class LabResultRecorded:
    result_id: str
    lab_test_request_id: str


@dataclass(frozen=True)
class PharmacyAssigned:
    prescription_id: str
    pharmacy_id: str
    patient_id: str


class EventBus:
    """Dispatches events to their subscribed handlers in registration order."""

    def __init__(self):
        self._handlers: Dict[Type, List[Handler]] = {}

    def subscribe(self, event_type: Type):
        """Decorator registering an async handler for an event type."""
        def decorator(handler: Handler) -> Handler:
            self._handlers.setdefault(event_type, []).append(handler)
            return handler
        return decorator

    def handlers_for(self, event_type: Type) -> List[Handler]:
        return list(self._handlers.get(event_type, []))

    async def publish(self, event: Any, session=None) -> None:
        handlers = self._handlers.get(type(event), [])
        if not handlers:
            logger.warning(f"No handler subscribed to {type(event).__name__}")
        for handler in handlers:
            logger.debug(f"Dispatching {type(event).__name__} to {handler.__name__}")
            await handler(event, session)


event_bus = EventBus()
