# social_support/form_validation.py
"""
Section and whole-record checks built on the validator generators.
Nothing here raises: every outcome is a ValidationReport.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .record import FormData, SectionData, section_values
from .schema import Section
from .step_definitions import STEP_BY_SECTION, StepDefinition
from .validation import ValidatorFunc

@dataclass(frozen=True)
class ValidationReport:
    valid: bool
    errors: list[str] = field(default_factory=list)
    # field key -> message, for flagging individual widgets
    field_errors: dict[str, str] = field(default_factory=dict)

def _validate_simple_field(field_key: str, validator_list: list[ValidatorFunc],
                           values: dict[str, Any], errors: dict[str, str]) -> bool:
    value_to_validate = values.get(field_key)
    for validator_func in validator_list:
        is_valid, msg = validator_func(value_to_validate, values)
        if not is_valid:
            if field_key not in errors: errors[field_key] = msg
            return False
    return True

def execute_step_validators(step_def: StepDefinition, values: dict[str, Any]) -> tuple[bool, dict[str, str]]:
    """Runs every field of a step; the first failing validator per field wins."""
    new_errors: dict[str, str] = {}
    is_step_valid = True
    for field_conf in step_def['fields']:
        if not _validate_simple_field(field_conf['field'].key, field_conf['validators'], values, new_errors):
            is_step_valid = False
    return is_step_valid, new_errors

def validate_section(section: Section, data: SectionData) -> ValidationReport:
    is_valid, field_errors = execute_step_validators(STEP_BY_SECTION[section], section_values(data))
    # dicts keep insertion order, which follows field declaration order
    return ValidationReport(valid=is_valid, errors=list(field_errors.values()), field_errors=field_errors)

def validate_record(form_data: FormData) -> ValidationReport:
    """Re-runs all section rules; errors ordered by section, then by field."""
    errors: list[str] = []
    field_errors: dict[str, str] = {}
    for section in Section:
        report = validate_section(section, form_data.get_section(section))
        errors.extend(report.errors)
        field_errors.update(report.field_errors)
    return ValidationReport(valid=not errors, errors=errors, field_errors=field_errors)
