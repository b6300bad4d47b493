"""
Common validation utilities for the clinic controllers.

This module provides consistent validation patterns across all controllers
and services, ensuring data integrity and proper error handling.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from odonto.domain.availability import parse_selection

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.is_valid: bool = True
        self.cleaned_data: Dict[str, Any] = {}

    def add_error(self, message: str, field: Optional[str] = None):
        """Add validation error."""
        error_msg = f"{field}: {message}" if field else message
        self.errors.append(error_msg)
        self.is_valid = False
        logger.warning(f"Validation error: {error_msg}")


class BaseValidator:
    """Base validator with common validation methods."""

    def validate(
        self, data: Dict[str, Any]
    ) -> ValidationResult:  # pragma: no cover - interface definition
        """Validate data for a specific entity type."""
        raise NotImplementedError("Subclasses must implement validate")

    @staticmethod
    def validate_required_field(
        value: Any, field_name: str, result: ValidationResult
    ) -> bool:
        """Validate that a required field is present and not empty."""
        if (
            value is None
            or value == ""
            or (isinstance(value, str) and value.strip() == "")
        ):
            result.add_error("is required", field_name)
            return False
        return True

    @staticmethod
    def validate_integer(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[int] = None,
    ) -> Optional[int]:
        """Validate and convert integer field."""
        if value is None or value == "":
            return None

        try:
            int_value = int(value)
        except (ValueError, TypeError):
            result.add_error("must be a whole number", field_name)
            return None

        if min_value is not None and int_value < min_value:
            result.add_error(f"must be at least {min_value}", field_name)
            return None

        return int_value

    @staticmethod
    def validate_string(
        value: Any,
        field_name: str,
        result: ValidationResult,
        max_length: Optional[int] = None,
    ) -> Optional[str]:
        """Validate string field; blank strings become None."""
        if value is None:
            return None

        if not isinstance(value, str):
            value = str(value)

        value = value.strip()

        if max_length is not None and len(value) > max_length:
            result.add_error(f"must have at most {max_length} characters", field_name)
            return None

        return value if value else None

    @staticmethod
    def validate_email(
        value: Any,
        field_name: str,
        result: ValidationResult,
        max_length: Optional[int] = None,
    ) -> Optional[str]:
        """Validate an optional e-mail address."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        value = str(value).strip()
        if max_length is not None and len(value) > max_length:
            result.add_error(f"must have at most {max_length} characters", field_name)
            return None
        if not EMAIL_PATTERN.match(value):
            result.add_error("is not a valid e-mail address", field_name)
            return None
        return value


class DentistValidator(BaseValidator):
    """Validator for dentist create/edit forms.

    Checks field formats only; uniqueness and schedule existence need the
    database and are checked by DentistService.
    """

    REQUIRED_FIELDS = ("name", "tax_id", "license_number")

    # Column sizes in db/base.py
    MAX_LENGTHS = {
        "name": 100,
        "tax_id": 20,
        "license_number": 20,
        "address": 255,
        "email": 100,
        "phone": 30,
    }

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        for field_name in self.REQUIRED_FIELDS:
            if self.validate_required_field(data.get(field_name), field_name, result):
                result.cleaned_data[field_name] = self.validate_string(
                    data.get(field_name),
                    field_name,
                    result,
                    max_length=self.MAX_LENGTHS[field_name],
                )

        result.cleaned_data["address"] = self.validate_string(
            data.get("address"), "address", result, max_length=self.MAX_LENGTHS["address"]
        )
        result.cleaned_data["phone"] = self.validate_string(
            data.get("phone"), "phone", result, max_length=self.MAX_LENGTHS["phone"]
        )
        result.cleaned_data["email"] = self.validate_email(
            data.get("email"), "email", result, max_length=self.MAX_LENGTHS["email"]
        )
        result.cleaned_data["schedule_id"] = self.validate_integer(
            data.get("schedule_id"), "schedule_id", result, min_value=1
        )

        slot_keys: Iterable[str] = data.get("slots") or []
        try:
            result.cleaned_data["availability"] = parse_selection(slot_keys)
        except ValueError as e:
            result.add_error(str(e), "slots")

        return result


# Factory function to get appropriate validator
def get_validator(entity_type: str) -> BaseValidator:
    """Get validator instance for entity type."""
    validators = {
        "dentist": DentistValidator(),
    }

    validator = validators.get(entity_type.lower())
    if not validator:
        raise ValueError(f"No validator found for entity type: {entity_type}")

    return validator


def validate_dentist(data: Dict[str, Any]) -> ValidationResult:
    """Validate dentist form data."""
    return get_validator("dentist").validate(data)
