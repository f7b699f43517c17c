# /bmi_ussd/workflows/validator.py

"""
Pure validation functions for USSD tokens.

This module checks the newest token against what the current screen accepts,
as described by MENU in bmi_ussd.workflows.definitions.

All functions are:
- Pure (no side effects)
- Deterministic (same input = same output)
- No store access
- No logging
"""

import re
from typing import Any, Dict, Optional, Tuple, TypedDict

from bmi_ussd.models.session import MenuState


# Keypad entries: ASCII digits, and for numbers at most two decimals.
INTEGER_PATTERN = re.compile(r"[0-9]+")
NUMBER_PATTERN = re.compile(r"[0-9]+(\.[0-9]{1,2})?")


class ValidationResult(TypedDict):
    """Result of a validation check."""
    is_valid: bool
    error_code: Optional[str]
    message: Optional[str]
    value: Any


def _invalid(error_code: str, message: str) -> ValidationResult:
    return {
        "is_valid": False,
        "error_code": error_code,
        "message": message,
        "value": None
    }


def _valid(value: Any) -> ValidationResult:
    return {
        "is_valid": True,
        "error_code": None,
        "message": None,
        "value": value
    }


def validate_language_option(token: str, languages: Dict[str, str]) -> ValidationResult:
    """
    Validate a language menu option.

    Args:
        token: The newest token entered by the caller
        languages: Configured option -> language code mapping

    Returns:
        ValidationResult whose value is the selected language code
    """
    if not token:
        return _invalid("EMPTY_TOKEN", "Language option cannot be empty")

    if token not in languages:
        return _invalid("UNKNOWN_LANGUAGE", f"Language option '{token}' is not configured")

    return _valid(languages[token])


def validate_numeric_entry(token: str, kind: str, bounds: Tuple[float, float, bool]) -> ValidationResult:
    """
    Parse and range-check a numeric entry.

    Args:
        token: The newest token entered by the caller
        kind: "integer" or "number"
        bounds: (minimum, maximum, minimum_inclusive); the maximum is always inclusive

    Returns:
        ValidationResult whose value is the parsed int or float
    """
    if not token:
        return _invalid("EMPTY_TOKEN", "Entry cannot be empty")

    pattern = INTEGER_PATTERN if kind == "integer" else NUMBER_PATTERN
    if not pattern.fullmatch(token):
        return _invalid("NOT_A_NUMBER", f"'{token}' is not a valid {kind}")

    value = int(token) if kind == "integer" else float(token)

    minimum, maximum, minimum_inclusive = bounds
    above_minimum = value >= minimum if minimum_inclusive else value > minimum
    if not above_minimum or value > maximum:
        return _invalid("OUT_OF_RANGE", f"{value} is outside the accepted range for this entry")

    return _valid(value)


def validate_menu_choice(token: str, options: Dict[str, MenuState]) -> ValidationResult:
    """
    Validate a menu selection.

    Returns:
        ValidationResult whose value is the destination screen
    """
    if token not in options:
        return _invalid("UNKNOWN_CHOICE", f"Choice '{token}' is not offered on this screen")

    return _valid(options[token])
