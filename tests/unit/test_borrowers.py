"""Unit tests for borrower registration"""

import pytest
from dataclasses import replace
from datetime import date
from adanfo_gateway.domain.exceptions import NotFoundError, ValidationError
from adanfo_gateway.domain.models import AcademicRecord
from adanfo_gateway.services.borrowers import BorrowerRegistry


@pytest.fixture
def record() -> AcademicRecord:
    return AcademicRecord(
        is_enrolled=True,
        institution="Ashesi University",
        gpa=3.4,
        completion_date=date(2028, 5, 31),
    )


def test_register_new_borrower(profile_store, record):
    registry = BorrowerRegistry(profile_store)

    profile = registry.register("student-9", "Yaw Owusu", record)

    assert profile.is_verified is True
    assert profile.credit_score == 0
    assert profile.institution == "Ashesi University"
    assert registry.get("student-9") == profile


def test_register_defaults_display_name(profile_store, record):
    profile = BorrowerRegistry(profile_store).register("student-9", "", record)
    assert profile.display_name == "student-9"


def test_reregistration_keeps_credit_score(profile_store, record):
    registry = BorrowerRegistry(profile_store)
    first = registry.register("student-9", "Yaw Owusu", record)
    profile_store.put(replace(first, credit_score=712))

    refreshed = registry.register("student-9", "", AcademicRecord(False, "Ashesi University", 3.1, date(2028, 5, 31)))

    assert refreshed.credit_score == 712
    assert refreshed.display_name == "Yaw Owusu"
    assert refreshed.is_enrolled is False
    assert refreshed.gpa == 3.1


@pytest.mark.parametrize("gpa", [-0.1, 4.01])
def test_register_rejects_gpa_out_of_range(profile_store, record, gpa):
    record.gpa = gpa
    with pytest.raises(ValidationError):
        BorrowerRegistry(profile_store).register("student-9", "Yaw", record)


def test_register_requires_institution(profile_store, record):
    record.institution = ""
    with pytest.raises(ValidationError):
        BorrowerRegistry(profile_store).register("student-9", "Yaw", record)


def test_get_unknown_borrower(profile_store):
    with pytest.raises(NotFoundError):
        BorrowerRegistry(profile_store).get("nobody")
