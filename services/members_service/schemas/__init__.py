"""Members Service schemas package.

Schema files:
  - schemas/profile.py: profile, usage, progress and notification preferences
  - schemas/admin.py  : admin dashboard and subscription management
"""

from services.members_service.schemas.admin import (  # noqa: F401
    AdminUserResponse,
    OnlineUserResponse,
    PlanUpdate,
    RoleUpdate,
    SubscriptionRow,
    SubscriptionStatsResponse,
    UserActivityResponse,
    UserStatsResponse,
)
from services.members_service.schemas.profile import (  # noqa: F401
    EmailPreferencesUpdate,
    LatestEntryDateResponse,
    NotificationPreferencesResponse,
    ProfileResponse,
    ProfileUpdate,
    ProgressResponse,
    PushSubscriptionUpdate,
    UsageResponse,
)
