# Controllers package initialization
# This file makes the controllers directory a Python package
# and allows importing controller modules

from . import (
    admin_controller,
    auth_controller,
    dentist_controller,
    health_controller,
)

__all__ = [
    "admin_controller",
    "auth_controller",
    "dentist_controller",
    "health_controller",
]
