"""Pydantic schemas for API request/response models."""

from __future__ import annotations
import uuid
from datetime import date, datetime
from pydantic import AliasChoices, BaseModel, Field

from models.subscription import (
    Plan, PaymentMethod, SubscriptionStatus, DeliveryStatus,
    DietType, SpiceLevel, DeliveryTime,
)


# ── Request Schemas ────────────────────────────────────────

class PreferencesIn(BaseModel):
    """Raw preference strings; enumerations are checked by the validator service."""

    diet_type: str | None = Field(None, alias="dietType")
    spice_level: str | None = Field(None, alias="spiceLevel")
    delivery_time: str | None = Field(None, alias="deliveryTime")

    class Config:
        populate_by_name = True

    def as_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class SubscriptionCreate(BaseModel):
    plan: str = Plan.WEEKLY.value
    start_date: str | None = Field(None, alias="startDate")
    preferences: PreferencesIn = Field(default_factory=PreferencesIn)
    payment_method: str = Field(PaymentMethod.COD.value, alias="paymentMethod")

    class Config:
        populate_by_name = True


# ── Response Schemas ───────────────────────────────────────

class UserSummary(BaseModel):
    id: uuid.UUID
    full_name: str = Field(
        validation_alias=AliasChoices("full_name", "name"),
        serialization_alias="name",
    )
    email: str | None
    phone: str | None

    class Config:
        from_attributes = True


class PreferencesOut(BaseModel):
    diet_type: DietType
    spice_level: SpiceLevel
    delivery_time: DeliveryTime


class DeliveryResponse(BaseModel):
    day_index: int
    label: str
    delivery_date: date = Field(
        validation_alias=AliasChoices("delivery_date", "date"),
        serialization_alias="date",
    )
    status: DeliveryStatus
    notes: str | None = None
    delivered_at: datetime | None = None

    class Config:
        from_attributes = True


class SubscriptionResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    plan: Plan
    status: SubscriptionStatus
    payment_method: PaymentMethod
    start_date: date
    end_date: date | None
    total_days: int
    delivered_days: int
    remaining_days: int
    progress_pct: int
    preferences: PreferencesOut
    deliveries: list[DeliveryResponse]
    schedule_generated: bool
    last_delivery_recorded_at: datetime | None
    last_delivered_on: date | None
    cancellation_reason: str | None
    version: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AdminSubscriptionResponse(SubscriptionResponse):
    user: UserSummary | None = None


# ── Envelopes ──────────────────────────────────────────────

class SubscriptionEnvelope(BaseModel):
    success: bool = True
    message: str
    data: SubscriptionResponse | None = None


class AdminSubscriptionEnvelope(BaseModel):
    success: bool = True
    message: str
    data: AdminSubscriptionResponse | None = None


class AdminSubscriptionListEnvelope(BaseModel):
    success: bool = True
    message: str
    data: list[AdminSubscriptionResponse]
