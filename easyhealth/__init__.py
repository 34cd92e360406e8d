"""EasyHealth API - healthcare facility management backend."""

__version__ = "1.0.0"
