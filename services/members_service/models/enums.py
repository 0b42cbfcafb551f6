"""Enum definitions for members service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class IcfLevel(str, enum.Enum):
    """ICF credential held by the coach."""

    NONE = "none"
    ACC = "ACC"
    PCC = "PCC"
    MCC = "MCC"


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class SubscriptionPlan(str, enum.Enum):
    FREE = "free"
    STARTER = "starter"
    PRO = "pro"


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    CANCELED = "canceled"
    TRIALING = "trialing"
    PAST_DUE = "past_due"


class NotificationType(str, enum.Enum):
    """Every reminder or alert a coach can opt into, by email or push.

    The values are stored verbatim in preference lists, so renaming one
    silently prunes it from every user's saved preferences.
    """

    CALENDLY_EVENTS = "Calendly events"
    SESSION_LOGGING = "Session logging reminders (7 days)"
    POST_SESSION_REFLECTION = "Post-session reflection reminders"
    CPD_ACTIVITY = "CPD activity reminders (14 days)"
    CPD_DEADLINE = "CPD deadline reminders (renewal date)"
