"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    profile = ProfileFactory.create(email="custom@test.com")
    db_session.add(profile)
    await db_session.commit()
"""

import uuid
from datetime import date, datetime, timedelta, timezone

TEST_USER_ID = "test-user"
TEST_USER_EMAIL = "coach@example.com"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:8]}@test.com"


def _user_id() -> str:
    return f"user-{uuid.uuid4().hex[:8]}"


# ---------------------------------------------------------------------------
# Members Service
# ---------------------------------------------------------------------------


class ProfileFactory:
    @staticmethod
    def create(**overrides):
        from services.members_service.models import (
            IcfLevel,
            Profile,
            SubscriptionPlan,
            SubscriptionStatus,
            UserRole,
        )

        defaults = {
            "id": _uuid(),
            "user_id": _user_id(),
            "email": _unique_email(),
            "name": "Test Coach",
            "icf_level": IcfLevel.NONE,
            "currency": "USD",
            "role": UserRole.USER,
            "subscription_plan": SubscriptionPlan.FREE,
            "subscription_status": SubscriptionStatus.INACTIVE,
            "email_notification_types": [],
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Profile(**defaults)


class PushSubscriptionFactory:
    @staticmethod
    def create(user_id=None, **overrides):
        from services.members_service.models import PushSubscription

        defaults = {
            "id": _uuid(),
            "user_id": user_id or _user_id(),
            "subscription": {
                "endpoint": "https://push.example.com/send/abc123",
                "keys": {"p256dh": "test-p256dh", "auth": "test-auth"},
            },
            "notification_types": [],
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return PushSubscription(**defaults)


# ---------------------------------------------------------------------------
# Sessions Service
# ---------------------------------------------------------------------------


class ClientFactory:
    @staticmethod
    def create(user_id=None, **overrides):
        from services.sessions_service.models import Client

        defaults = {
            "id": _uuid(),
            "user_id": user_id or _user_id(),
            "name": "Test Client",
            "email": _unique_email(),
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Client(**defaults)


class CoachingSessionFactory:
    @staticmethod
    def create(user_id=None, **overrides):
        from services.sessions_service.models import CoachingSession, PaymentType

        defaults = {
            "id": _uuid(),
            "user_id": user_id or _user_id(),
            "client_name": "Test Client",
            "date": date.today() - timedelta(days=1),
            "duration": 60,
            "types": ["individual"],
            "payment_type": PaymentType.PAID,
            "coaching_tools": [],
            "icf_competencies": [],
            "notes": "Explored goals for the quarter.",
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return CoachingSession(**defaults)


# ---------------------------------------------------------------------------
# CPD Service
# ---------------------------------------------------------------------------


class CPDEntryFactory:
    @staticmethod
    def create(user_id=None, **overrides):
        from services.cpd_service.models import CPDEntry, CpdType

        defaults = {
            "id": _uuid(),
            "user_id": user_id or _user_id(),
            "title": "Coaching Ethics Workshop",
            "activity_date": date.today() - timedelta(days=3),
            "hours": 3.0,
            "cpd_type": CpdType.WORKSHOP,
            "icf_competencies": [],
            "core_competency": True,
            "resource_development": False,
            "icf_cce_hours": True,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return CPDEntry(**defaults)


class MentoringSessionFactory:
    @staticmethod
    def create(user_id=None, **overrides):
        from services.cpd_service.models import (
            DeliveryType,
            MentoringKind,
            MentoringSession,
        )

        defaults = {
            "id": _uuid(),
            "user_id": user_id or _user_id(),
            "session_type": MentoringKind.MENTORING,
            "date": date.today() - timedelta(days=7),
            "duration": 60,
            "provider_name": "Mentor Coach",
            "delivery_type": DeliveryType.INDIVIDUAL,
            "is_formal_supervision": False,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return MentoringSession(**defaults)


# ---------------------------------------------------------------------------
# Communications Service
# ---------------------------------------------------------------------------


class ScheduledEmailFactory:
    @staticmethod
    def create(**overrides):
        from services.communications_service.models import (
            RecipientType,
            ScheduledEmail,
            ScheduledEmailStatus,
        )

        defaults = {
            "id": _uuid(),
            "created_by": _user_id(),
            "subject": "Monthly check-in",
            "email_content": "Hi {{userName}}, you have logged {{sessionCount}} sessions.",
            "recipient_type": RecipientType.ALL,
            "scheduled_for": _now() - timedelta(minutes=5),
            "status": ScheduledEmailStatus.PENDING,
            "sent_count": 0,
            "failed_count": 0,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return ScheduledEmail(**defaults)
