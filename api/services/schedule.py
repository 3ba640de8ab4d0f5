"""
Schedule Generator — builds the per-day delivery plan of a subscription.

Rules:
  - Day i (0-indexed) falls on start_date + i days, labelled "Day i+1"
  - Day 0 starts as SCHEDULED (the current day), all others UPCOMING
  - total_days <= 0 is clamped to a single day
  - A subscription's schedule is built once; `schedule_generated` guards it
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, timedelta

from models.subscription import Subscription, SubscriptionDelivery, DeliveryStatus


@dataclass
class PlannedDay:
    day_index: int
    label: str
    date: date
    status: DeliveryStatus


@dataclass
class Schedule:
    days: list[PlannedDay]
    end_date: date


def generate_schedule(start_date: date, total_days: int) -> Schedule:
    """Build the ordered list of delivery days starting at start_date."""
    total_days = max(1, total_days or 0)

    days = [
        PlannedDay(
            day_index=i,
            label=f"Day {i + 1}",
            date=start_date + timedelta(days=i),
            status=DeliveryStatus.SCHEDULED if i == 0 else DeliveryStatus.UPCOMING,
        )
        for i in range(total_days)
    ]
    return Schedule(days=days, end_date=days[-1].date)


def ensure_schedule(subscription: Subscription) -> bool:
    """
    Attach the generated schedule to a subscription that has none yet.

    Returns True if a schedule was generated, False if the subscription
    already had one (its delivery state is left untouched).
    """
    if subscription.schedule_generated:
        return False

    schedule = generate_schedule(subscription.start_date, subscription.total_days)
    subscription.total_days = len(schedule.days)
    subscription.deliveries = [
        SubscriptionDelivery(
            day_index=day.day_index,
            label=day.label,
            delivery_date=day.date,
            status=day.status,
        )
        for day in schedule.days
    ]
    subscription.end_date = schedule.end_date
    subscription.schedule_generated = True
    return True
