"""Tests for delivery schedule generation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "api"))

import pytest
from datetime import date, timedelta

from models.subscription import Subscription, SubscriptionDelivery, DeliveryStatus
from services.schedule import generate_schedule, ensure_schedule


def test_weekly_schedule():
    """7 days from 2024-01-01: dates 01..07, day 0 scheduled, rest upcoming."""
    schedule = generate_schedule(date(2024, 1, 1), 7)

    assert [d.date for d in schedule.days] == [date(2024, 1, n) for n in range(1, 8)]
    assert [d.label for d in schedule.days] == [f"Day {n}" for n in range(1, 8)]
    assert schedule.days[0].status == DeliveryStatus.SCHEDULED
    assert all(d.status == DeliveryStatus.UPCOMING for d in schedule.days[1:])
    assert schedule.end_date == date(2024, 1, 7)


@pytest.mark.parametrize("total_days", [1, 2, 7, 14, 31])
def test_length_and_dates(total_days):
    start = date(2024, 2, 25)
    schedule = generate_schedule(start, total_days)
    assert len(schedule.days) == total_days
    for i, day in enumerate(schedule.days):
        assert day.day_index == i
        assert day.date == start + timedelta(days=i)
    assert schedule.end_date == schedule.days[-1].date


def test_schedule_crosses_leap_day():
    schedule = generate_schedule(date(2024, 2, 27), 4)
    assert schedule.days[2].date == date(2024, 2, 29)
    assert schedule.end_date == date(2024, 3, 1)


@pytest.mark.parametrize("total_days", [0, -3, None])
def test_non_positive_length_clamped_to_one(total_days):
    schedule = generate_schedule(date(2024, 1, 1), total_days)
    assert len(schedule.days) == 1
    assert schedule.days[0].status == DeliveryStatus.SCHEDULED
    assert schedule.end_date == date(2024, 1, 1)


def test_ensure_schedule_builds_once():
    sub = Subscription(start_date=date(2024, 1, 1), total_days=3, schedule_generated=False)

    assert ensure_schedule(sub) is True
    assert sub.schedule_generated is True
    assert [d.delivery_date for d in sub.deliveries] == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    assert sub.end_date == date(2024, 1, 3)

    # In-progress state survives a later start-date change
    sub.deliveries[0].status = DeliveryStatus.DELIVERED
    sub.start_date = date(2024, 2, 1)
    assert ensure_schedule(sub) is False
    assert sub.deliveries[0].status == DeliveryStatus.DELIVERED
    assert sub.deliveries[0].delivery_date == date(2024, 1, 1)


def test_ensure_schedule_ignores_existing_flag_even_without_rows():
    """The flag, not the emptiness of deliveries, decides."""
    sub = Subscription(start_date=date(2024, 1, 1), total_days=3, schedule_generated=True)
    sub.deliveries = []
    assert ensure_schedule(sub) is False
    assert sub.deliveries == []


def test_ensure_schedule_records_clamped_length():
    sub = Subscription(start_date=date(2024, 1, 1), total_days=0, schedule_generated=False)
    ensure_schedule(sub)
    assert sub.total_days == 1
    assert len(sub.deliveries) == 1
    assert isinstance(sub.deliveries[0], SubscriptionDelivery)
