"""Meal-plan subscription API endpoints — customer and admin."""

import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from db.database import get_db
from models.user import User
from models.subscription import SubscriptionStatus
from routers.deps import get_current_user, require_admin
from schemas import (
    SubscriptionCreate, SubscriptionResponse, AdminSubscriptionResponse,
    SubscriptionEnvelope, AdminSubscriptionEnvelope, AdminSubscriptionListEnvelope,
)
from services.subscriptions import create_subscription, get_latest_for_user, list_subscriptions
from services.deliveries import mark_delivered

router = APIRouter()


# ── Customer ───────────────────────────────────────────────

@router.get("/my", response_model=SubscriptionEnvelope)
async def get_my_subscription(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Latest subscription of the calling user."""
    subscription = await get_latest_for_user(db, user.id)
    return SubscriptionEnvelope(
        message="Subscription fetched successfully",
        data=SubscriptionResponse.model_validate(subscription),
    )


@router.post("/create", response_model=SubscriptionEnvelope, status_code=201)
async def create_my_subscription(
    data: SubscriptionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Open a 7-day weekly plan for the calling user."""
    subscription = await create_subscription(
        db,
        user,
        plan=data.plan,
        start_date=data.start_date,
        preferences=data.preferences.as_dict(),
        payment_method=data.payment_method,
    )
    return SubscriptionEnvelope(
        message="Subscription created successfully",
        data=SubscriptionResponse.model_validate(subscription),
    )


# ── Admin ──────────────────────────────────────────────────

@router.get("/admin", response_model=AdminSubscriptionListEnvelope)
async def list_all_subscriptions(
    status: SubscriptionStatus | None = None,
    user_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 50,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All subscriptions with owner contact details (newest first)."""
    subscriptions = await list_subscriptions(db, status=status, user_id=user_id, skip=skip, limit=limit)
    return AdminSubscriptionListEnvelope(
        message="Subscriptions fetched successfully",
        data=[AdminSubscriptionResponse.model_validate(s) for s in subscriptions],
    )


@router.post(
    "/admin/{subscription_id}/deliveries/{day_index}/delivered",
    response_model=AdminSubscriptionEnvelope,
)
async def mark_delivery_delivered(
    subscription_id: str,
    day_index: str,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Mark one day of a subscription as delivered. Safe to repeat."""
    result = await mark_delivered(db, subscription_id, day_index)
    return AdminSubscriptionEnvelope(
        message=result.message,
        data=AdminSubscriptionResponse.model_validate(result.subscription),
    )
