"""
Progress Recalculator — derives a subscription's aggregate fields
from its per-day deliveries.

Steps:
  1. delivered_days = number of DELIVERED days
  2. status → COMPLETED once delivered_days reaches total_days,
     otherwise → ACTIVE unless PAUSED/CANCELLED (those are never left here)
  3. the first non-delivered day is promoted UPCOMING → SCHEDULED
  4. last-delivery stamps are refreshed when anything has been delivered

Re-running it on unchanged deliveries yields the same delivered count,
status and per-day statuses.
"""

from __future__ import annotations
import logging
from datetime import datetime, timezone

from models.subscription import (
    Subscription, SubscriptionStatus, DeliveryStatus, HELD_STATUSES,
)

logger = logging.getLogger(__name__)


def recalculate_progress(subscription: Subscription, now: datetime | None = None) -> Subscription:
    """Recompute delivered_days, status and the current-day marker in place."""
    deliveries = list(subscription.deliveries or [])
    now = now or datetime.now(timezone.utc)

    delivered = [d for d in deliveries if d.status == DeliveryStatus.DELIVERED]
    subscription.delivered_days = len(delivered)

    target = subscription.total_days or len(deliveries)
    previous_status = subscription.status

    if subscription.delivered_days >= target:
        subscription.status = SubscriptionStatus.COMPLETED
    elif subscription.status not in HELD_STATUSES:
        subscription.status = SubscriptionStatus.ACTIVE

    if (
        subscription.status == SubscriptionStatus.COMPLETED
        and previous_status != SubscriptionStatus.COMPLETED
    ):
        logger.info(
            "Subscription completed: id=%s delivered=%s/%s",
            subscription.id, subscription.delivered_days, target,
        )

    next_pending = next((d for d in deliveries if d.status != DeliveryStatus.DELIVERED), None)
    if next_pending is not None and next_pending.status == DeliveryStatus.UPCOMING:
        next_pending.status = DeliveryStatus.SCHEDULED

    if delivered:
        subscription.last_delivery_recorded_at = now
        subscription.last_delivered_on = max(delivered, key=lambda d: d.day_index).delivery_date

    return subscription
