"""Enum definitions for sessions service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class PaymentType(str, enum.Enum):
    PAID = "paid"
    PRO_BONO = "proBono"
    PAID_AND_PRO_BONO = "paidAndProBono"


class SessionType(str, enum.Enum):
    """Format tag on a coaching session; a session may carry several."""

    INDIVIDUAL = "individual"
    GROUP = "group"
    TEAM = "team"
    MENTOR = "mentor"
    OTHER = "other"
