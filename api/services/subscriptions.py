"""
Subscription Service — opening and reading meal-plan subscriptions.

Creation runs, in order: start-date normalization, the eligibility gate,
preference validation and schedule generation, then persists the
subscription together with its deliveries in one commit.
"""

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from models.user import User
from models.subscription import Subscription, SubscriptionStatus, Plan, PaymentMethod
from services.dates import normalize_date, today as current_day
from services.eligibility import ensure_eligible
from services.errors import ValidationError, ConflictError, NotFoundError
from services.preferences import validate_preferences
from services.schedule import ensure_schedule

logger = logging.getLogger(__name__)


async def create_subscription(
    db: AsyncSession,
    user: User,
    plan: str = Plan.WEEKLY,
    start_date=None,
    preferences: dict | None = None,
    payment_method: str = PaymentMethod.COD,
    today: date | None = None,
) -> Subscription:
    """Open a new subscription for `user`. Raises ValidationError / ConflictError."""
    user_id = user.id
    today = today or current_day()
    start = normalize_date(start_date) if start_date not in (None, "") else today

    if start < today:
        raise ValidationError("Start date must be today or later")

    await ensure_eligible(db, user_id, bool(user.phone_verified), plan, payment_method)

    check = validate_preferences(preferences)
    if not check.valid:
        raise ValidationError(", ".join(check.errors))

    subscription = Subscription(
        id=uuid.uuid4(),
        user_id=user_id,
        plan=Plan.WEEKLY,
        status=SubscriptionStatus.ACTIVE if start == today else SubscriptionStatus.SCHEDULED,
        payment_method=PaymentMethod.COD,
        start_date=start,
        total_days=settings.DEFAULT_TOTAL_DAYS,
        delivered_days=0,
        schedule_generated=False,
        diet_type=check.values["dietType"],
        spice_level=check.values["spiceLevel"],
        delivery_time=check.values["deliveryTime"],
    )
    ensure_schedule(subscription)

    db.add(subscription)
    try:
        await db.commit()
    except IntegrityError:
        # Lost the race against a concurrent create for the same user
        await db.rollback()
        logger.warning("Subscription rejected for user=%s: open subscription exists", user_id)
        raise ConflictError("You already have an active subscription") from None

    logger.info(
        "Subscription created: id=%s user=%s start=%s status=%s",
        subscription.id, user_id, start, subscription.status.value,
    )
    return subscription


async def get_latest_for_user(db: AsyncSession, user_id: uuid.UUID) -> Subscription:
    """Most recently created subscription of the user."""
    result = await db.execute(
        select(Subscription)
        .where(Subscription.user_id == user_id)
        .order_by(Subscription.created_at.desc())
        .limit(1)
    )
    subscription = result.scalar_one_or_none()
    if not subscription:
        raise NotFoundError("No subscription found for this account")
    return subscription


async def list_subscriptions(
    db: AsyncSession,
    status: SubscriptionStatus | None = None,
    user_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 50,
) -> list[Subscription]:
    """All subscriptions, newest first, with their owners loaded."""
    query = select(Subscription)
    if status:
        query = query.where(Subscription.status == status)
    if user_id:
        query = query.where(Subscription.user_id == user_id)
    query = query.order_by(Subscription.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())
