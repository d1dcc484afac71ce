# social_support/schema.py
from __future__ import annotations
from enum import Enum
from typing import Any
from dataclasses import dataclass

from .options import (
    gender_options, marital_status_options,
    employment_status_options, housing_status_options,
)

# ===================================================================
# 1. CORE DATA STRUCTURES
# ===================================================================

class Section(Enum):
    """The three groupings of the record. Values are the snapshot keys."""
    PERSONAL_INFO = 'personalInfo'
    FAMILY_FINANCIAL_INFO = 'familyFinancialInfo'
    SITUATION_DESCRIPTIONS = 'situationDescriptions'

@dataclass(frozen=True)
class FormField:
    """Defines everything about a form field in one place."""
    key: str          # attribute name on the section dataclass
    wire_key: str     # key inside the persisted/submitted JSON
    label: str
    ui_type: str = 'text'
    options: dict[str, str] | None = None
    default_value: Any = ''
    max_length: int | None = None

# ===================================================================
# 2. THE APPLICATION SCHEMA (Single Source of Truth)
# ===================================================================

class AppSchema:
    """
    Defines all fields used in the application, grouped per section in
    declaration order. That order is also the order of validation messages.
    """
    class PersonalInfo:
        FULL_NAME = FormField(key='full_name', wire_key='fullName', label='Full name')
        NATIONAL_ID = FormField(key='national_id', wire_key='nationalId', label='National ID')
        DATE_OF_BIRTH = FormField(key='date_of_birth', wire_key='dateOfBirth', label='Date of birth',
                                  ui_type='date', default_value=None)
        GENDER = FormField(key='gender', wire_key='gender', label='Gender', ui_type='select',
                           options=gender_options)
        ADDRESS = FormField(key='address', wire_key='address', label='Street address')
        CITY = FormField(key='city', wire_key='city', label='City')
        REGION = FormField(key='region', wire_key='state', label='State / Region')
        COUNTRY = FormField(key='country', wire_key='country', label='Country')
        PHONE = FormField(key='phone', wire_key='phone', label='Phone number', max_length=17)
        EMAIL = FormField(key='email', wire_key='email', label='Email address')

    class FamilyFinancialInfo:
        MARITAL_STATUS = FormField(key='marital_status', wire_key='maritalStatus', label='Marital status',
                                   ui_type='select', options=marital_status_options)
        DEPENDENTS = FormField(key='dependents', wire_key='dependents', label='Number of dependents',
                               ui_type='integer', default_value=0)
        EMPLOYMENT_STATUS = FormField(key='employment_status', wire_key='employmentStatus',
                                      label='Employment status', ui_type='select',
                                      options=employment_status_options)
        MONTHLY_INCOME = FormField(key='monthly_income', wire_key='monthlyIncome', label='Monthly income',
                                   ui_type='amount', default_value=0)
        HOUSING_STATUS = FormField(key='housing_status', wire_key='housingStatus', label='Housing status',
                                   ui_type='select', options=housing_status_options)

    class SituationDescriptions:
        CURRENT_FINANCIAL_SITUATION = FormField(key='current_financial_situation',
                                                wire_key='currentFinancialSituation',
                                                label='Current financial situation', ui_type='textarea')
        EMPLOYMENT_CIRCUMSTANCES = FormField(key='employment_circumstances',
                                             wire_key='employmentCircumstances',
                                             label='Employment circumstances', ui_type='textarea')
        REASON_FOR_APPLYING = FormField(key='reason_for_applying', wire_key='reasonForApplying',
                                        label='Reason for applying', ui_type='textarea')

    @classmethod
    def get_section_fields(cls, section: Section) -> list[FormField]:
        holder = {
            Section.PERSONAL_INFO: cls.PersonalInfo,
            Section.FAMILY_FINANCIAL_INFO: cls.FamilyFinancialInfo,
            Section.SITUATION_DESCRIPTIONS: cls.SituationDescriptions,
        }[section]
        return [
            field_instance for field_instance in holder.__dict__.values()
            if isinstance(field_instance, FormField)
        ]

    @classmethod
    def get_all_fields(cls) -> list[FormField]:
        return [f for section in Section for f in cls.get_section_fields(section)]

# ===================================================================
# 3. CENTRALIZED CONSTANTS
# ===================================================================

TOTAL_STEPS: int = 3
STORAGE_KEY: str = 'social_support_form_data'
CURRENT_STEP_KEY: str = 'currentStep'
COMPLETED_STEPS_KEY: str = 'completedSteps'
NARRATIVE_MIN_LENGTH: int = 50
MAX_DEPENDENTS: int = 20
