import uuid
from datetime import date, datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.members_service.models.enums import (
    IcfLevel,
    SubscriptionPlan,
    SubscriptionStatus,
    UserRole,
    enum_values,
)
from sqlalchemy import JSON, Boolean, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class Profile(Base):
    """A coach's account record, keyed by the identity provider's user id."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)

    icf_level: Mapped[IcfLevel] = mapped_column(
        SAEnum(
            IcfLevel,
            name="icf_level_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=IcfLevel.NONE,
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)
    country: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    cpd_renewal_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    role: Mapped[UserRole] = mapped_column(
        SAEnum(
            UserRole,
            name="user_role_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=UserRole.USER,
        nullable=False,
    )

    # Billing (mirrored from the payment provider; manual override by admins)
    subscription_plan: Mapped[SubscriptionPlan] = mapped_column(
        SAEnum(
            SubscriptionPlan,
            name="subscription_plan_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=SubscriptionPlan.FREE,
        nullable=False,
    )
    subscription_status: Mapped[SubscriptionStatus] = mapped_column(
        SAEnum(
            SubscriptionStatus,
            name="subscription_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=SubscriptionStatus.INACTIVE,
        nullable=False,
    )
    subscription_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    subscription_current_period_start: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    subscription_current_period_end: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    cancel_at_period_end: Mapped[bool] = mapped_column(Boolean, default=False)

    # Raw list; always read through filter_notification_types
    email_notification_types: Mapped[list] = mapped_column(JSON, default=list)

    calendly_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    calendly_access_token: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    last_seen_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    @property
    def is_subscribed(self) -> bool:
        return (
            self.subscription_status == SubscriptionStatus.ACTIVE
            or self.subscription_plan != SubscriptionPlan.FREE
        )

    @property
    def has_calendly_token(self) -> bool:
        return bool(self.calendly_access_token)

    def __repr__(self):
        return f"<Profile {self.user_id} {self.email}>"


class PushSubscription(Base):
    """A browser's Web Push endpoint plus the alert types it should receive.

    A row with a non-empty ``notification_types`` list means push is on.
    """

    __tablename__ = "push_subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    subscription: Mapped[dict] = mapped_column(JSON, nullable=False)
    notification_types: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
