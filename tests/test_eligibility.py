"""Tests for the subscription eligibility gate."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "api"))

import pytest

from services.eligibility import check_eligibility
from services.errors import ValidationError, ConflictError


def test_eligible_user_passes():
    assert check_eligibility(True, "weekly", "cod", []) is None


def test_completed_or_cancelled_history_does_not_block():
    assert check_eligibility(True, "weekly", "cod", ["completed", "cancelled", "paused"]) is None


def test_unsupported_plan():
    with pytest.raises(ValidationError, match="Only the weekly plan is currently supported"):
        check_eligibility(True, "monthly", "cod", [])


def test_unsupported_payment_method():
    with pytest.raises(ValidationError, match="Only Cash on Delivery is supported for subscriptions"):
        check_eligibility(True, "weekly", "upi", [])


def test_unverified_phone():
    with pytest.raises(ValidationError, match="Please verify your phone number before subscribing"):
        check_eligibility(False, "weekly", "cod", [])


@pytest.mark.parametrize("status", ["pending", "active", "scheduled"])
def test_open_subscription_conflicts(status):
    with pytest.raises(ConflictError, match="You already have an active subscription") as exc:
        check_eligibility(True, "weekly", "cod", ["completed", status])
    assert exc.value.status_code == 400


def test_checks_run_in_order():
    """Plan is reported before payment, verification and conflicts."""
    with pytest.raises(ValidationError, match="weekly plan"):
        check_eligibility(False, "monthly", "card", ["active"])

    with pytest.raises(ValidationError, match="Cash on Delivery"):
        check_eligibility(False, "weekly", "card", ["active"])

    with pytest.raises(ValidationError, match="verify your phone"):
        check_eligibility(False, "weekly", "cod", ["active"])
