"""Tests for calendar-day normalization."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "api"))

import pytest
from datetime import date, datetime, timezone

from services.dates import normalize_date, today
from services.errors import InvalidDateError, ValidationError


def test_date_passes_through():
    assert normalize_date(date(2024, 1, 1)) == date(2024, 1, 1)


def test_naive_datetime_truncated():
    """Time of day is dropped."""
    assert normalize_date(datetime(2024, 1, 1, 23, 59, 59, 999)) == date(2024, 1, 1)


def test_aware_datetime_uses_configured_timezone():
    """20:00 UTC is already the next day in Asia/Kolkata (+05:30)."""
    value = datetime(2024, 1, 1, 20, 0, tzinfo=timezone.utc)
    assert normalize_date(value) == date(2024, 1, 2)


def test_iso_strings():
    assert normalize_date("2024-01-05") == date(2024, 1, 5)
    assert normalize_date("2024-01-05T10:30:00") == date(2024, 1, 5)
    assert normalize_date("2024-01-01T20:00:00Z") == date(2024, 1, 2)


@pytest.mark.parametrize("value", ["", "not-a-date", "2024-13-01", None, 12345, object()])
def test_unparseable_input_rejected(value):
    with pytest.raises(InvalidDateError) as exc:
        normalize_date(value)
    assert exc.value.message == "Invalid start date"


def test_invalid_date_is_a_validation_error():
    assert issubclass(InvalidDateError, ValidationError)


def test_today_from_injected_clock():
    now = datetime(2024, 3, 10, 19, 0, tzinfo=timezone.utc)  # 00:30 on the 11th in IST
    assert today(now) == date(2024, 3, 11)

