# social_support/step_definitions.py
from __future__ import annotations
from typing import TypedDict

from .schema import AppSchema, FormField, Section, NARRATIVE_MIN_LENGTH, MAX_DEPENDENTS
from .options import (
    gender_options, marital_status_options,
    employment_status_options, housing_status_options,
)
from .validation import (
    ValidatorFunc, required, one_of, match_pattern, min_length,
    is_integer_in_range, is_non_negative_amount, is_within_date_range,
    EMAIL_PATTERN, PHONE_PATTERN,
)

class FieldConfig(TypedDict):
    field: FormField
    validators: list[ValidatorFunc]

class StepDefinition(TypedDict):
    id: int
    name: str
    title: str
    subtitle: str
    section: Section
    fields: list[FieldConfig]

P = AppSchema.PersonalInfo
F = AppSchema.FamilyFinancialInfo
S = AppSchema.SituationDescriptions

def _narrative(form_field: FormField, label: str) -> FieldConfig:
    return {'field': form_field, 'validators': [
        required(f"{label} description is required."),
        min_length(NARRATIVE_MIN_LENGTH,
                   f"{label} description must be at least {NARRATIVE_MIN_LENGTH} characters."),
    ]}

STEPS_BY_ID: dict[int, StepDefinition] = {
    1: {
        'id': 1, 'name': 'personal_info', 'title': 'Personal Information',
        'subtitle': 'Tell us who you are and how we can reach you.',
        'section': Section.PERSONAL_INFO,
        'fields': [
            {'field': P.FULL_NAME, 'validators': [
                required("Full name is required."),
                min_length(2, "Full name must be at least 2 characters."),
            ]},
            {'field': P.NATIONAL_ID, 'validators': [
                required("National ID is required."),
                min_length(5, "National ID must be at least 5 characters."),
            ]},
            {'field': P.DATE_OF_BIRTH, 'validators': [
                required("Date of birth is required."),
                is_within_date_range(message="Date of birth must be between 1900 and today."),
            ]},
            {'field': P.GENDER, 'validators': [
                required("Gender is required."),
                one_of(gender_options, "Please select a valid gender."),
            ]},
            {'field': P.ADDRESS, 'validators': [required("Address is required.")]},
            {'field': P.CITY, 'validators': [required("City is required.")]},
            {'field': P.REGION, 'validators': [required("State is required.")]},
            {'field': P.COUNTRY, 'validators': [required("Country is required.")]},
            {'field': P.PHONE, 'validators': [
                required("Phone number is required."),
                match_pattern(PHONE_PATTERN, "Please enter a valid phone number."),
            ]},
            {'field': P.EMAIL, 'validators': [
                required("Email address is required."),
                match_pattern(EMAIL_PATTERN, "Please enter a valid email address."),
            ]},
        ],
    },
    2: {
        'id': 2, 'name': 'family_financial_info', 'title': 'Family & Financial Information',
        'subtitle': 'Your household, employment and income.',
        'section': Section.FAMILY_FINANCIAL_INFO,
        'fields': [
            {'field': F.MARITAL_STATUS, 'validators': [
                required("Marital status is required."),
                one_of(marital_status_options, "Please select a valid marital status."),
            ]},
            {'field': F.DEPENDENTS, 'validators': [
                is_integer_in_range(0, MAX_DEPENDENTS,
                                    f"Dependents must be a whole number between 0 and {MAX_DEPENDENTS}."),
            ]},
            {'field': F.EMPLOYMENT_STATUS, 'validators': [
                required("Employment status is required."),
                one_of(employment_status_options, "Please select a valid employment status."),
            ]},
            {'field': F.MONTHLY_INCOME, 'validators': [
                is_non_negative_amount("Monthly income must be a non-negative amount."),
            ]},
            {'field': F.HOUSING_STATUS, 'validators': [
                required("Housing status is required."),
                one_of(housing_status_options, "Please select a valid housing status."),
            ]},
        ],
    },
    3: {
        'id': 3, 'name': 'situation_descriptions', 'title': 'Situation Descriptions',
        'subtitle': 'Describe your situation in detail. AI assistance is available for each field.',
        'section': Section.SITUATION_DESCRIPTIONS,
        'fields': [
            _narrative(S.CURRENT_FINANCIAL_SITUATION, "Financial situation"),
            _narrative(S.EMPLOYMENT_CIRCUMSTANCES, "Employment circumstances"),
            _narrative(S.REASON_FOR_APPLYING, "Reason for applying"),
        ],
    },
}

STEP_BY_SECTION: dict[Section, StepDefinition] = {
    step_def['section']: step_def for step_def in STEPS_BY_ID.values()
}
