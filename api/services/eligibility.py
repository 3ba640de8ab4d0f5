"""
Eligibility Gate — preconditions for opening a new subscription.

Checked in order, first failure wins:
  1. plan must be weekly
  2. payment method must be COD
  3. caller's phone must be verified
  4. caller must not already hold a pending/active/scheduled subscription
"""

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.subscription import Subscription, SubscriptionStatus, Plan, PaymentMethod, OPEN_STATUSES
from services.errors import ValidationError, ConflictError

logger = logging.getLogger(__name__)


def check_eligibility(
    is_verified: bool,
    plan: str,
    payment_method: str,
    existing_statuses: Iterable[str],
) -> None:
    """Raise the first policy violation, or return None when eligible."""
    if plan != Plan.WEEKLY:
        raise ValidationError("Only the weekly plan is currently supported")

    if payment_method != PaymentMethod.COD:
        raise ValidationError("Only Cash on Delivery is supported for subscriptions")

    if not is_verified:
        raise ValidationError("Please verify your phone number before subscribing")

    if any(SubscriptionStatus(s) in OPEN_STATUSES for s in existing_statuses):
        raise ConflictError("You already have an active subscription")


async def open_subscription_statuses(db: AsyncSession, user_id: uuid.UUID) -> list[SubscriptionStatus]:
    """Statuses of the user's subscriptions that block a new one."""
    result = await db.execute(
        select(Subscription.status).where(
            Subscription.user_id == user_id,
            Subscription.status.in_(list(OPEN_STATUSES)),
        )
    )
    return list(result.scalars().all())


async def ensure_eligible(
    db: AsyncSession,
    user_id: uuid.UUID,
    is_verified: bool,
    plan: str,
    payment_method: str,
) -> None:
    """Run the gate against the user's stored subscriptions."""
    existing = await open_subscription_statuses(db, user_id)
    try:
        check_eligibility(is_verified, plan, payment_method, existing)
    except (ValidationError, ConflictError) as e:
        logger.warning("Subscription rejected for user=%s: %s", user_id, e.message)
        raise
