"""
Role-based access rules.

Every list endpoint narrows its query with one of the scope functions below
before it runs. A scope is a MongoDB filter dict; ``None`` means the caller
can see nothing of that family. Single-record reads check the loaded
document against the same scope with ``in_scope`` so a record is readable
exactly when it would appear in the caller's list.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from easyhealth.shared.exceptions import ForbiddenException


class Role(str, Enum):
    """Profile roles."""
    PATIENT = "patient"
    DOCTOR = "doctor"
    LAB_TECHNICIAN = "lab_technician"
    PHARMACIST = "pharmacist"
    ADMIN = "admin"
    NURSE = "nurse"


Scope = Optional[Dict[str, Any]]


@dataclass
class Caller:
    """The authenticated profile and the role-profile ids derived from it."""

    id: str
    role: Role
    full_name: str = ""
    doctor_id: Optional[str] = None
    nurse_id: Optional[str] = None
    pharmacy_id: Optional[str] = None
    lab_hospital_ids: List[str] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles


def ensure_roles(caller: Caller, *roles: Role, detail: str = "Access denied") -> None:
    """Role gate."""
    if caller.role not in roles:
        raise ForbiddenException(detail)


def in_scope(scope: Scope, document: Any) -> bool:
    """Evaluate a scope filter against one loaded document."""
    if scope is None:
        return False
    for key, expected in scope.items():
        actual = getattr(document, key, None)
        if isinstance(expected, dict) and "$in" in expected:
            if actual not in expected["$in"]:
                return False
        elif actual != expected:
            return False
    return True


def ensure_in_scope(scope: Scope, document: Any) -> None:
    """Ownership gate for a loaded record."""
    if not in_scope(scope, document):
        raise ForbiddenException("Access denied")


# ============== Visibility scopes ==============

def _own_patient_or_doctor(caller: Caller) -> Scope:
    if caller.role == Role.PATIENT:
        return {"patient_id": caller.id}
    if caller.role == Role.DOCTOR:
        if caller.doctor_id is None:
            return None
        return {"doctor_id": caller.doctor_id}
    if caller.role in (Role.NURSE, Role.ADMIN):
        return {}
    return None


def appointment_scope(caller: Caller) -> Scope:
    return _own_patient_or_doctor(caller)


def consultation_scope(caller: Caller) -> Scope:
    return _own_patient_or_doctor(caller)


def lab_request_scope(caller: Caller) -> Scope:
    """Lab technicians see requests of the hospitals they are registered at."""
    if caller.role == Role.LAB_TECHNICIAN:
        if not caller.lab_hospital_ids:
            return None
        return {"hospital_id": {"$in": list(caller.lab_hospital_ids)}}
    return _own_patient_or_doctor(caller)


def prescription_scope(caller: Caller) -> Scope:
    if caller.role == Role.PHARMACIST:
        if caller.pharmacy_id is None:
            return None
        return {"pharmacy_id": caller.pharmacy_id}
    return _own_patient_or_doctor(caller)


def pharmacy_request_scope(caller: Caller) -> Scope:
    if caller.role == Role.PATIENT:
        return {"patient_id": caller.id}
    if caller.role == Role.PHARMACIST:
        if caller.pharmacy_id is None:
            return None
        return {"pharmacy_id": caller.pharmacy_id}
    if caller.role == Role.ADMIN:
        return {}
    return None


def payment_scope(caller: Caller) -> Scope:
    if caller.role == Role.PATIENT:
        return {"patient_id": caller.id}
    if caller.role == Role.DOCTOR:
        return {"payment_type": "consultation"}
    if caller.role == Role.ADMIN:
        return {}
    return None


def vital_scope(caller: Caller) -> Scope:
    if caller.role == Role.PATIENT:
        return {"patient_id": caller.id}
    if caller.role == Role.NURSE:
        return {"nurse_id": caller.id}
    if caller.role in (Role.DOCTOR, Role.ADMIN):
        return {}
    return None


def narrow(scope: Scope, field_name: str, value: Optional[str]) -> Scope:
    """Intersect a scope with an equality filter supplied by the caller."""
    if scope is None or value is None:
        return scope
    narrowed = dict(scope)
    current = narrowed.get(field_name)
    if isinstance(current, dict) and "$in" in current:
        if value not in current["$in"]:
            return None
    elif current is not None and current != value:
        return None
    narrowed[field_name] = value
    return narrowed
