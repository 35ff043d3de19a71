"""Field-level validation for the homeowner estimate wizard.

Stricter than the engine's own checks: the engine only rejects input it
cannot price, while this module reports every field the wizard should have
collected, with messages suitable for showing next to the form.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from comfortquote.exceptions import FieldError

ZIP_CODE_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")
MAX_SQUARE_FOOTAGE = 50_000


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_homeowner_input(data: Mapping[str, Any]) -> list[FieldError]:
    """Return one FieldError per missing or invalid wizard field."""
    errors: list[FieldError] = []

    zip_code = data.get("zipCode")
    if _is_blank(zip_code):
        errors.append(FieldError("zipCode", "ZIP code is required"))
    elif not ZIP_CODE_PATTERN.match(zip_code.strip()):
        errors.append(FieldError("zipCode", "Please enter a valid ZIP code"))

    square_footage = data.get("squareFootage")
    if not _is_number(square_footage) or square_footage <= 0:
        errors.append(FieldError("squareFootage", "Square footage must be greater than 0"))
    elif square_footage > MAX_SQUARE_FOOTAGE:
        errors.append(
            FieldError("squareFootage", "Square footage seems too large. Please verify.")
        )

    floors = data.get("floors")
    if not _is_number(floors) or floors < 1:
        errors.append(FieldError("floors", "Number of floors is required"))

    if _is_blank(data.get("homeAge")):
        errors.append(FieldError("homeAge", "Home age is required"))

    preferences = data.get("preferences")
    if not isinstance(preferences, Mapping):
        errors.append(FieldError("preferences", "Preferences are required"))
    else:
        if _is_blank(preferences.get("efficiencyLevel")):
            errors.append(FieldError("efficiencyLevel", "Efficiency level is required"))
        if _is_blank(preferences.get("systemType")):
            errors.append(FieldError("systemType", "System type is required"))
        # False is an answer; only a missing value is an error.
        if preferences.get("smartFeatures") is None:
            errors.append(
                FieldError("smartFeatures", "Please indicate interest in smart features")
            )

    return errors


def format_validation_errors(errors: list[FieldError]) -> str:
    """Collapse field errors into a single user-facing sentence."""
    if not errors:
        return ""
    if len(errors) == 1:
        return errors[0].message
    return "Please fix the following: " + ", ".join(e.message for e in errors)
