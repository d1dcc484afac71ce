# tests/test_form_validation.py
from __future__ import annotations

import sys
from dataclasses import replace
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from social_support.form_validation import execute_step_validators, validate_record, validate_section
from social_support.record import (
    FamilyFinancialInfo, FormData, PersonalInfo, SituationDescriptions, section_values,
)
from social_support.schema import Section
from social_support.step_definitions import STEPS_BY_ID

@pytest.mark.parametrize("section", list(Section))
def test_empty_sections_fail(section: Section) -> None:
    """A freshly created record never passes any step's checks."""
    report = validate_section(section, FormData().get_section(section))
    assert not report.valid
    assert report.errors, "Should explain why the section failed"

def test_valid_sections_pass(valid_form_data: FormData) -> None:
    for section in Section:
        report = validate_section(section, valid_form_data.get_section(section))
        assert report.valid, f"{section.value} should pass: {report.errors}"
        assert report.errors == []

def test_all_field_errors_are_collected() -> None:
    report = validate_section(Section.PERSONAL_INFO, PersonalInfo())
    # every identity field is empty, so every field reports
    assert len(report.errors) == 10
    assert list(report.field_errors) == [
        'full_name', 'national_id', 'date_of_birth', 'gender', 'address',
        'city', 'region', 'country', 'phone', 'email',
    ]

def test_first_failing_rule_wins_per_field(valid_personal_info: PersonalInfo) -> None:
    blank_email = replace(valid_personal_info, email="   ")
    report = validate_section(Section.PERSONAL_INFO, blank_email)
    assert report.errors == ["Email address is required."]

    bad_email = replace(valid_personal_info, email="amina@example")
    report = validate_section(Section.PERSONAL_INFO, bad_email)
    assert report.errors == ["Please enter a valid email address."]

def test_household_bounds(valid_family_info: FamilyFinancialInfo) -> None:
    too_many = replace(valid_family_info, dependents=21)
    assert not validate_section(Section.FAMILY_FINANCIAL_INFO, too_many).valid

    negative_income = replace(valid_family_info, monthly_income=Decimal("-1"))
    report = validate_section(Section.FAMILY_FINANCIAL_INFO, negative_income)
    assert report.field_errors.keys() == {'monthly_income'}

    zero_everything = replace(valid_family_info, dependents=0, monthly_income=Decimal("0"))
    assert validate_section(Section.FAMILY_FINANCIAL_INFO, zero_everything).valid

def test_unknown_option_is_rejected(valid_family_info: FamilyFinancialInfo) -> None:
    report = validate_section(Section.FAMILY_FINANCIAL_INFO, replace(valid_family_info, housing_status="castle"))
    assert report.errors == ["Please select a valid housing status."]

def test_narrative_minimum_length(valid_descriptions: SituationDescriptions) -> None:
    short = replace(valid_descriptions, reason_for_applying="x" * 49)
    report = validate_section(Section.SITUATION_DESCRIPTIONS, short)
    assert report.errors == ["Reason for applying description must be at least 50 characters."]

    exact = replace(valid_descriptions, reason_for_applying="x" * 50)
    assert validate_section(Section.SITUATION_DESCRIPTIONS, exact).valid

def test_record_errors_are_ordered_by_section_then_field(valid_form_data: FormData) -> None:
    broken = replace(
        valid_form_data,
        personal_info=replace(valid_form_data.personal_info, phone="0123", full_name=""),
        family_financial_info=replace(valid_form_data.family_financial_info, marital_status=""),
        situation_descriptions=replace(valid_form_data.situation_descriptions, current_financial_situation="short"),
    )
    report = validate_record(broken)

    assert not report.valid
    assert report.errors == [
        "Full name is required.",
        "Please enter a valid phone number.",
        "Marital status is required.",
        "Financial situation description must be at least 50 characters.",
    ]

def test_record_validation_passes_for_complete_record(valid_form_data: FormData) -> None:
    report = validate_record(valid_form_data)
    assert report.valid
    assert report.errors == []

def test_execute_step_validators_returns_field_keyed_errors(valid_personal_info: PersonalInfo) -> None:
    values = section_values(replace(valid_personal_info, city=""))
    is_valid, errors = execute_step_validators(STEPS_BY_ID[1], values)
    assert not is_valid
    assert errors == {'city': "City is required."}
