# social_support/validation.py
from __future__ import annotations
import re
from re import Pattern
from typing import Any
from collections.abc import Callable, Collection
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

# --- Type Aliases ---
ValidationResult = tuple[bool, str]
# A validator gets the field value and the whole section's values for context
ValidatorFunc = Callable[[Any | None, dict[str, Any]], ValidationResult]

# --- Regex Patterns (centralized) ---
EMAIL_PATTERN: Pattern[str] = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_PATTERN: Pattern[str] = re.compile(r'^\+?[1-9]\d{0,15}$')
DATE_FORMAT_STORAGE: str = '%Y-%m-%d'

# ===================================================================
# GENERIC VALIDATOR GENERATORS
# ===================================================================

def required(message: str = "This field is required.") -> ValidatorFunc:
    """Ensures a value is not None, not an empty string, and not just whitespace."""
    def validator(value: Any | None, section_data: dict[str, Any]) -> ValidationResult:
        if value is None:
            return False, message
        if isinstance(value, str) and not value.strip():
            return False, message
        return True, ""
    return validator

def one_of(options: Collection[str], message: str) -> ValidatorFunc:
    """Ensures a select/radio value is one of the field's fixed options."""
    def validator(value: Any | None, section_data: dict[str, Any]) -> ValidationResult:
        if not isinstance(value, str) or value not in options:
            return False, message
        return True, ""
    return validator

def match_pattern(pattern: Pattern[str], message: str) -> ValidatorFunc:
    """Ensures a string value matches a regex pattern."""
    def validator(value: Any | None, section_data: dict[str, Any]) -> ValidationResult:
        # Empty values are `required`'s job.
        if not value or not isinstance(value, str):
            return True, ""
        if not pattern.match(value.strip()):
            return False, message
        return True, ""
    return validator

def min_length(limit: int, message: str) -> ValidatorFunc:
    """Ensures the trimmed string is at least `limit` characters long."""
    def validator(value: Any | None, section_data: dict[str, Any]) -> ValidationResult:
        if not isinstance(value, str):
            return True, ""
        if len(value.strip()) < limit:
            return False, message
        return True, ""
    return validator

def is_integer_in_range(
    min_value: int | None, max_value: int | None, message: str
) -> ValidatorFunc:
    """Ensures a whole number within the inclusive bounds."""
    def validator(value: Any | None, section_data: dict[str, Any]) -> ValidationResult:
        # bool is an int subclass, but a checkbox value is never a count.
        if isinstance(value, bool) or not isinstance(value, int):
            return False, message
        if (min_value is not None and value < min_value) or \
           (max_value is not None and value > max_value):
            return False, message
        return True, ""
    return validator

def is_non_negative_amount(message: str) -> ValidatorFunc:
    """Ensures a numeric amount (int, float, Decimal or numeric string) is >= 0."""
    def validator(value: Any | None, section_data: dict[str, Any]) -> ValidationResult:
        if value is None or isinstance(value, bool):
            return False, message
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            return False, message
        if not amount.is_finite() or amount < 0:
            return False, message
        return True, ""
    return validator

def is_within_date_range(
    min_date: date | None = date(1900, 1, 1), max_date: date | None = None,
    message: str = "The selected date is outside the allowed range."
) -> ValidatorFunc:
    """Ensures a date (or ISO date string) is within the specified min/max range.

    `max_date` defaults to today, evaluated on every call.
    """
    def validator(value: date | str | None, section_data: dict[str, Any]) -> ValidationResult:
        if not value:
            return True, ''
        if isinstance(value, str):
            try:
                value = datetime.strptime(value, DATE_FORMAT_STORAGE).date()
            except ValueError:
                return False, "Invalid date format."
        upper = max_date or date.today()
        if (min_date and value < min_date) or value > upper:
            return False, message
        return True, ''
    return validator
