# Services package initialization
# This file makes the services directory a Python package
# and allows importing service modules

from . import dashboard_service
from . import dentist_service
from . import user_service
from . import volunteer_service

__all__ = [
    "dashboard_service",
    "dentist_service",
    "user_service",
    "volunteer_service",
]
