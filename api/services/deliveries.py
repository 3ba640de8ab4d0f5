"""
Delivery Marker — administrative state transition for one delivery day.

Transitions: UPCOMING → SCHEDULED → DELIVERED. Marking an already
delivered day is not an error: progress is recalculated and the
subscription returned unchanged, so the call is safe to retry.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from models.subscription import Subscription, DeliveryStatus
from services.errors import ValidationError, NotFoundError, ConflictError
from services.progress import recalculate_progress

logger = logging.getLogger(__name__)


@dataclass
class DeliveryMarkResult:
    subscription: Subscription
    message: str
    already_delivered: bool = False


def parse_day_index(value) -> int:
    """Accept a non-negative int or a string of ASCII digits."""
    if isinstance(value, bool):
        raise ValidationError("Invalid delivery index")
    if isinstance(value, str):
        text = value.strip()
        # int() would also take "+3", "1_0" and non-ASCII digits
        if not (text.isascii() and text.isdigit()):
            raise ValidationError("Invalid delivery index")
        value = int(text)
    if not isinstance(value, int) or value < 0:
        raise ValidationError("Invalid delivery index")
    return value


async def get_subscription(db: AsyncSession, subscription_id) -> Subscription:
    try:
        sub_id = subscription_id if isinstance(subscription_id, uuid.UUID) else uuid.UUID(str(subscription_id))
    except ValueError:
        raise NotFoundError("Subscription not found") from None

    result = await db.execute(select(Subscription).where(Subscription.id == sub_id))
    subscription = result.scalar_one_or_none()
    if not subscription:
        raise NotFoundError("Subscription not found")
    return subscription


async def _save(db: AsyncSession, subscription: Subscription) -> None:
    # rollback expires the instance, so read the id first
    sub_id = subscription.id
    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        logger.warning("Concurrent update lost on subscription=%s", sub_id)
        raise ConflictError(
            "Subscription was updated by another request, please retry",
            status_code=409,
        ) from None


async def mark_delivered(
    db: AsyncSession,
    subscription_id,
    day_index,
    now: datetime | None = None,
) -> DeliveryMarkResult:
    """Mark day `day_index` of a subscription as delivered."""
    index = parse_day_index(day_index)
    subscription = await get_subscription(db, subscription_id)

    deliveries = subscription.deliveries or []
    if index >= len(deliveries):
        raise ValidationError("Delivery not found for the given index")

    delivery = deliveries[index]
    now = now or datetime.now(timezone.utc)

    if delivery.status == DeliveryStatus.DELIVERED:
        recalculate_progress(subscription, now=now)
        await _save(db, subscription)
        logger.info("Delivery re-marked (no-op): subscription=%s day=%s", subscription.id, index)
        return DeliveryMarkResult(
            subscription=subscription,
            message="Delivery already marked as delivered",
            already_delivered=True,
        )

    delivery.status = DeliveryStatus.DELIVERED
    delivery.notes = delivery.notes or ""
    delivery.delivered_at = now

    recalculate_progress(subscription, now=now)
    await _save(db, subscription)

    logger.info(
        "Delivery marked: subscription=%s day=%s delivered=%s/%s status=%s",
        subscription.id, index, subscription.delivered_days,
        subscription.total_days, subscription.status.value,
    )
    return DeliveryMarkResult(
        subscription=subscription,
        message=f"Delivery {index + 1} marked as delivered",
    )
