# social_support/record.py
from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Union
from collections.abc import Mapping

from .exceptions import SnapshotFormatError
from .schema import (
    AppSchema, FormField, Section, TOTAL_STEPS,
    CURRENT_STEP_KEY, COMPLETED_STEPS_KEY,
)
from .validation import DATE_FORMAT_STORAGE

# ===================================================================
# 1. THE THREE SECTIONS
# ===================================================================
# One frozen dataclass per section. Updating a field that does not exist
# raises a TypeError from dataclasses.replace instead of silently adding a key.

@dataclass(frozen=True)
class PersonalInfo:
    full_name: str = ''
    national_id: str = ''
    date_of_birth: date | None = None
    gender: str = ''
    address: str = ''
    city: str = ''
    region: str = ''
    country: str = ''
    phone: str = ''
    email: str = ''

@dataclass(frozen=True)
class FamilyFinancialInfo:
    marital_status: str = ''
    dependents: int = 0
    employment_status: str = ''
    monthly_income: Decimal = Decimal('0')
    housing_status: str = ''

@dataclass(frozen=True)
class SituationDescriptions:
    current_financial_situation: str = ''
    employment_circumstances: str = ''
    reason_for_applying: str = ''

SectionData = Union[PersonalInfo, FamilyFinancialInfo, SituationDescriptions]

SECTION_TYPES: dict[Section, type] = {
    Section.PERSONAL_INFO: PersonalInfo,
    Section.FAMILY_FINANCIAL_INFO: FamilyFinancialInfo,
    Section.SITUATION_DESCRIPTIONS: SituationDescriptions,
}

# ===================================================================
# 2. THE AGGREGATE: RECORD + PROGRESS METADATA
# ===================================================================

@dataclass(frozen=True)
class FormData:
    """The record under edit plus its step/completion tracking."""
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    family_financial_info: FamilyFinancialInfo = field(default_factory=FamilyFinancialInfo)
    situation_descriptions: SituationDescriptions = field(default_factory=SituationDescriptions)
    current_step: int = 1
    completed_steps: tuple[int, ...] = ()

    def get_section(self, section: Section) -> SectionData:
        return getattr(self, _ATTR_BY_SECTION[section])

    def with_section(self, section: Section, data: SectionData) -> FormData:
        return replace(self, **{_ATTR_BY_SECTION[section]: data})

    def is_step_completed(self, step: int) -> bool:
        return step in self.completed_steps

    def step_status(self, step: int) -> str:
        """Status used by the step indicator: completed, active or inactive."""
        if self.is_step_completed(step):
            return 'completed'
        if step == self.current_step:
            return 'active'
        return 'inactive'

    @property
    def progress_percentage(self) -> int:
        return round(len(self.completed_steps) / TOTAL_STEPS * 100)

_ATTR_BY_SECTION: dict[Section, str] = {
    Section.PERSONAL_INFO: 'personal_info',
    Section.FAMILY_FINANCIAL_INFO: 'family_financial_info',
    Section.SITUATION_DESCRIPTIONS: 'situation_descriptions',
}

def section_values(data: SectionData) -> dict[str, Any]:
    """Attribute-keyed view of a section, the shape validators receive."""
    return {f.name: getattr(data, f.name) for f in fields(data)}

# ===================================================================
# 3. SERIALIZATION (snapshot / submission payload)
# ===================================================================

def _json_value(form_field: FormField, value: Any) -> Any:
    if form_field.ui_type == 'date':
        return value.strftime(DATE_FORMAT_STORAGE) if isinstance(value, date) else (value or '')
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"'{form_field.wire_key}' is not a finite amount: {value}")
        return int(value) if value == value.to_integral_value() else float(value)
    return value

def form_data_to_dict(form_data: FormData) -> dict[str, Any]:
    """Serializes the aggregate to the JSON-ready snapshot shape."""
    payload: dict[str, Any] = {}
    for section in Section:
        data = form_data.get_section(section)
        payload[section.value] = {
            f.wire_key: _json_value(f, getattr(data, f.key))
            for f in AppSchema.get_section_fields(section)
        }
    payload[CURRENT_STEP_KEY] = form_data.current_step
    payload[COMPLETED_STEPS_KEY] = list(form_data.completed_steps)
    return payload

def _parse_value(form_field: FormField, raw: Any) -> Any:
    if form_field.ui_type == 'date':
        if raw in ('', None):
            return None
        if not isinstance(raw, str):
            raise SnapshotFormatError(f"'{form_field.wire_key}' is not a date string")
        try:
            return datetime.strptime(raw, DATE_FORMAT_STORAGE).date()
        except ValueError as e:
            raise SnapshotFormatError(f"'{form_field.wire_key}' is not a valid date: {raw!r}") from e
    # cleared number widget; left for validation to report
    if form_field.ui_type in ('integer', 'amount') and raw is None:
        return None
    if form_field.ui_type == 'integer':
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise SnapshotFormatError(f"'{form_field.wire_key}' is not an integer")
        return raw
    if form_field.ui_type == 'amount':
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            raise SnapshotFormatError(f"'{form_field.wire_key}' is not a number")
        try:
            amount = Decimal(str(raw))
        except InvalidOperation as e:
            raise SnapshotFormatError(f"'{form_field.wire_key}' is not a number") from e
        if not amount.is_finite():
            raise SnapshotFormatError(f"'{form_field.wire_key}' is not a finite number")
        return amount
    if not isinstance(raw, str):
        raise SnapshotFormatError(f"'{form_field.wire_key}' is not a string")
    return raw

def _parse_step(raw: Any, what: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or not 1 <= raw <= TOTAL_STEPS:
        raise SnapshotFormatError(f"{what} must be an integer between 1 and {TOTAL_STEPS}")
    return raw

def form_data_from_dict(payload: Any) -> FormData:
    """
    Rebuilds the aggregate from a deserialized snapshot.
    Raises SnapshotFormatError on any shape mismatch.
    """
    if not isinstance(payload, Mapping):
        raise SnapshotFormatError("snapshot is not an object")

    sections: dict[Section, SectionData] = {}
    for section in Section:
        raw_section = payload.get(section.value)
        if not isinstance(raw_section, Mapping):
            raise SnapshotFormatError(f"missing section '{section.value}'")
        values: dict[str, Any] = {}
        for f in AppSchema.get_section_fields(section):
            if f.wire_key not in raw_section:
                raise SnapshotFormatError(f"missing field '{section.value}.{f.wire_key}'")
            values[f.key] = _parse_value(f, raw_section[f.wire_key])
        sections[section] = SECTION_TYPES[section](**values)

    current_step = _parse_step(payload.get(CURRENT_STEP_KEY), CURRENT_STEP_KEY)
    raw_completed = payload.get(COMPLETED_STEPS_KEY)
    if not isinstance(raw_completed, list):
        raise SnapshotFormatError(f"{COMPLETED_STEPS_KEY} must be a list")
    completed: list[int] = []
    for item in raw_completed:
        step = _parse_step(item, COMPLETED_STEPS_KEY)
        if step not in completed:
            completed.append(step)

    return FormData(
        personal_info=sections[Section.PERSONAL_INFO],
        family_financial_info=sections[Section.FAMILY_FINANCIAL_INFO],
        situation_descriptions=sections[Section.SITUATION_DESCRIPTIONS],
        current_step=current_step,
        completed_steps=tuple(completed),
    )
