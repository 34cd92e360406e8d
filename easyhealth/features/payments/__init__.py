# Payments Feature

from easyhealth.features.payments.models import Payment, PaymentStatus, PaymentType

__all__ = ["Payment", "PaymentStatus", "PaymentType"]
