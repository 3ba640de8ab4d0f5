"""Subscription and per-day delivery ORM models — fixed-length meal plans."""

import uuid
from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import (
    String, Integer, Boolean, Date, DateTime, ForeignKey, Text, Index,
    Enum as SAEnum, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from db.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Closed variants ────────────────────────────────────────

class Plan(str, Enum):
    WEEKLY = "weekly"


class PaymentMethod(str, Enum):
    COD = "cod"


class SubscriptionStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    SCHEDULED = "scheduled"
    PAUSED = "paused"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# A user may hold at most one subscription in these states.
OPEN_STATUSES = frozenset({
    SubscriptionStatus.PENDING,
    SubscriptionStatus.ACTIVE,
    SubscriptionStatus.SCHEDULED,
})

# Entered only by administrative action; never left by recalculation.
HELD_STATUSES = frozenset({
    SubscriptionStatus.PAUSED,
    SubscriptionStatus.CANCELLED,
})

_OPEN_STATUS_SQL = "status IN (%s)" % ", ".join(sorted(f"'{s.value}'" for s in OPEN_STATUSES))


class DeliveryStatus(str, Enum):
    UPCOMING = "upcoming"
    SCHEDULED = "scheduled"
    DELIVERED = "delivered"
    # Reserved: no write path sets these yet.
    SKIPPED = "skipped"
    CANCELLED = "cancelled"


class DietType(str, Enum):
    VEG = "veg"
    NON_VEG = "non-veg"


class SpiceLevel(str, Enum):
    MILD = "mild"
    MEDIUM = "medium"
    SPICY = "spicy"


class DeliveryTime(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


def _pg_enum(enum_cls: type[Enum], name: str) -> SAEnum:
    """Persist an Enum by its lowercase values, not its member names."""
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        Index("ix_subscriptions_user_status", "user_id", "status"),
        # At most one open subscription per user
        Index(
            "uq_subscriptions_user_open",
            "user_id",
            unique=True,
            postgresql_where=text(_OPEN_STATUS_SQL),
            sqlite_where=text(_OPEN_STATUS_SQL),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    plan: Mapped[Plan] = mapped_column(_pg_enum(Plan, "subscription_plan"), default=Plan.WEEKLY)
    status: Mapped[SubscriptionStatus] = mapped_column(
        _pg_enum(SubscriptionStatus, "subscription_status"),
        default=SubscriptionStatus.SCHEDULED,
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(
        _pg_enum(PaymentMethod, "subscription_payment_method"),
        default=PaymentMethod.COD,
    )

    # Schedule
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    total_days: Mapped[int] = mapped_column(Integer, default=7)
    schedule_generated: Mapped[bool] = mapped_column(Boolean, default=False)

    # Progress (written only by the progress recalculation)
    delivered_days: Mapped[int] = mapped_column(Integer, default=0)
    last_delivery_recorded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    last_delivered_on: Mapped[date | None] = mapped_column(Date)

    # Preferences
    diet_type: Mapped[DietType] = mapped_column(_pg_enum(DietType, "diet_type"), nullable=False)
    spice_level: Mapped[SpiceLevel] = mapped_column(_pg_enum(SpiceLevel, "spice_level"), nullable=False)
    delivery_time: Mapped[DeliveryTime] = mapped_column(_pg_enum(DeliveryTime, "delivery_time"), nullable=False)

    cancellation_reason: Mapped[str | None] = mapped_column(Text)

    # Optimistic concurrency counter
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    # Relationships
    user = relationship("User", back_populates="subscriptions", lazy="selectin")
    deliveries = relationship(
        "SubscriptionDelivery",
        back_populates="subscription",
        lazy="selectin",
        order_by="SubscriptionDelivery.day_index",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def preferences(self) -> dict:
        return {
            "diet_type": self.diet_type,
            "spice_level": self.spice_level,
            "delivery_time": self.delivery_time,
        }

    @property
    def remaining_days(self) -> int:
        return max((self.total_days or 0) - (self.delivered_days or 0), 0)

    @property
    def progress_pct(self) -> int:
        if not self.total_days:
            return 0
        return round(100 * (self.delivered_days or 0) / self.total_days)


class SubscriptionDelivery(Base):
    """One day of a subscription's schedule; has no identity outside it."""

    __tablename__ = "subscription_deliveries"

    subscription_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("subscriptions.id", ondelete="CASCADE"), primary_key=True,
    )
    day_index: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(String(20), nullable=False)
    delivery_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    status: Mapped[DeliveryStatus] = mapped_column(
        _pg_enum(DeliveryStatus, "delivery_status"),
        default=DeliveryStatus.UPCOMING,
    )
    notes: Mapped[str | None] = mapped_column(Text)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    subscription = relationship("Subscription", back_populates="deliveries")
