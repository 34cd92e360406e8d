# Vitals Feature

from easyhealth.features.vitals.models import Vital

__all__ = ["Vital"]
