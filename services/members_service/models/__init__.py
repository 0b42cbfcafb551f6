"""Members Service models package.

Re-exports every model and enum so SQLAlchemy's mapper registry sees them
on import and callers can use ``from services.members_service.models import Profile``.
"""

from services.members_service.models.enums import (  # noqa: F401
    IcfLevel,
    NotificationType,
    SubscriptionPlan,
    SubscriptionStatus,
    UserRole,
)
from services.members_service.models.profile import (  # noqa: F401
    Profile,
    PushSubscription,
)

__all__ = [
    "IcfLevel",
    "NotificationType",
    "Profile",
    "PushSubscription",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "UserRole",
]
