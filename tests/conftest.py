"""Pytest configuration and fixtures."""
from __future__ import annotations

import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

# Make the `social_support` package importable without an editable install
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from social_support.persistence import SnapshotStore
from social_support.record import (
    FamilyFinancialInfo, FormData, PersonalInfo, SituationDescriptions,
)
from social_support.store import FormStateStore

LONG_TEXT: str = (
    "I lost my job in March and my savings no longer cover rent, food and utilities "
    "for my two children."
)

@pytest.fixture
def valid_personal_info() -> PersonalInfo:
    return PersonalInfo(
        full_name="Amina Yusuf",
        national_id="784-1990-1234567-1",
        date_of_birth=date(1990, 4, 12),
        gender="female",
        address="12 Palm Street",
        city="Dubai",
        region="Dubai",
        country="United Arab Emirates",
        phone="+971501234567",
        email="amina@example.com",
    )

@pytest.fixture
def valid_family_info() -> FamilyFinancialInfo:
    return FamilyFinancialInfo(
        marital_status="married",
        dependents=2,
        employment_status="unemployed",
        monthly_income=Decimal("1500.50"),
        housing_status="rented",
    )

@pytest.fixture
def valid_descriptions() -> SituationDescriptions:
    return SituationDescriptions(
        current_financial_situation=LONG_TEXT,
        employment_circumstances=LONG_TEXT,
        reason_for_applying=LONG_TEXT,
    )

@pytest.fixture
def valid_form_data(valid_personal_info: PersonalInfo, valid_family_info: FamilyFinancialInfo,
                    valid_descriptions: SituationDescriptions) -> FormData:
    return FormData(
        personal_info=valid_personal_info,
        family_financial_info=valid_family_info,
        situation_descriptions=valid_descriptions,
        current_step=3,
        completed_steps=(1, 2),
    )

@pytest.fixture
def snapshot_store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(tmp_path / "snapshots.db")

@pytest.fixture
def store(snapshot_store: SnapshotStore) -> FormStateStore:
    """A fresh store wired to a throwaway database."""
    return FormStateStore(snapshot_store)
