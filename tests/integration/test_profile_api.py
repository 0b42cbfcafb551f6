"""Integration tests for the signed-in coach's profile, usage and preferences."""

import datetime as dt

import pytest
from services.members_service.models import NotificationType, Profile, PushSubscription
from sqlalchemy import select
from tests.factories import (
    TEST_USER_EMAIL,
    TEST_USER_ID,
    CoachingSessionFactory,
    CPDEntryFactory,
    ProfileFactory,
    PushSubscriptionFactory,
)

SESSION_LOGGING = NotificationType.SESSION_LOGGING.value
CPD_DEADLINE = NotificationType.CPD_DEADLINE.value

# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_profile_is_provisioned_on_first_request(client, db_session):
    response = await client.get("/api/profile/me")

    assert response.status_code == 200
    data = response.json()
    assert data["userId"] == TEST_USER_ID
    assert data["email"] == TEST_USER_EMAIL
    assert data["icfLevel"] == "none"
    assert data["subscriptionPlan"] == "free"

    stored = (
        await db_session.execute(select(Profile).where(Profile.user_id == TEST_USER_ID))
    ).scalar_one()
    assert stored.email == TEST_USER_EMAIL


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_profile(client, coach_profile):
    response = await client.patch(
        "/api/profile/me",
        json={"name": "Jordan Lee", "icfLevel": "ACC", "country": "de", "currency": "eur"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Jordan Lee"
    assert data["icfLevel"] == "ACC"
    assert data["country"] == "DE"
    assert data["currency"] == "EUR"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_heartbeat_records_last_seen(client, db_session, coach_profile):
    response = await client.post("/api/profile/me/heartbeat")

    assert response.status_code == 204
    assert coach_profile.last_seen_at is not None


# ---------------------------------------------------------------------------
# Usage and progress
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_usage_for_free_account(client, db_session, coach_profile):
    db_session.add_all(
        [CoachingSessionFactory.create(user_id=TEST_USER_ID) for _ in range(6)]
        + [CPDEntryFactory.create(user_id=TEST_USER_ID) for _ in range(2)]
    )
    await db_session.commit()

    response = await client.get("/api/usage")

    assert response.status_code == 200
    data = response.json()
    assert data["totalEntries"] == 8
    assert data["sessionCount"] == 6
    assert data["cpdCount"] == 2
    assert data["remaining"] == 2
    assert data["percentage"] == 80.0
    assert data["color"] == "red"
    assert data["showWarning"] is True
    assert data["canAdd"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_usage_at_limit_explains_why(client, db_session, coach_profile):
    db_session.add_all(
        [CoachingSessionFactory.create(user_id=TEST_USER_ID) for _ in range(10)]
    )
    await db_session.commit()

    data = (await client.get("/api/usage")).json()

    assert data["canAdd"] is False
    assert data["remaining"] == 0
    assert "free limit of 10 entries" in data["reason"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_progress_towards_acc(client, db_session, coach_profile):
    db_session.add_all(
        [
            CoachingSessionFactory.create(user_id=TEST_USER_ID, duration=1500),
            CoachingSessionFactory.create(user_id=TEST_USER_ID, duration=1500),
            CPDEntryFactory.create(user_id=TEST_USER_ID, hours=30.0),
            CPDEntryFactory.create(user_id=TEST_USER_ID, hours=10.0, icf_cce_hours=False),
        ]
    )
    await db_session.commit()

    response = await client.get("/api/progress")

    assert response.status_code == 200
    data = response.json()
    assert data["currentLevel"] == "none"
    assert data["nextLevel"] == "ACC"
    assert data["coachingHours"] == 50.0
    assert data["coachingPercent"] == 50.0
    assert data["cpdHours"] == 30.0
    assert data["trainingPercent"] == 50.0
    assert data["ready"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_latest_entry_date(client, db_session, coach_profile):
    db_session.add(
        CoachingSessionFactory.create(user_id=TEST_USER_ID, date=dt.date(2024, 8, 30))
    )
    await db_session.commit()

    response = await client.get("/api/entries/latest-date")

    assert response.json() == {"latestDate": "2024-08-30"}


# ---------------------------------------------------------------------------
# Notification preferences
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_obsolete_preferences_are_pruned_and_saved(client, db_session):
    profile = ProfileFactory.create(
        user_id=TEST_USER_ID,
        email_notification_types=[SESSION_LOGGING, "Weekly digest"],
    )
    db_session.add(profile)
    await db_session.commit()

    response = await client.get("/api/notifications/preferences")

    assert response.status_code == 200
    data = response.json()
    assert data["emailTypes"] == [SESSION_LOGGING]
    assert data["emailEnabled"] is True
    assert data["pushSubscribed"] is False

    await db_session.refresh(profile)
    assert profile.email_notification_types == [SESSION_LOGGING]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_email_preferences(client, coach_profile):
    response = await client.put(
        "/api/notifications/preferences/email",
        json={"types": [CPD_DEADLINE, "not a type", CPD_DEADLINE]},
    )

    assert response.status_code == 200
    assert response.json()["emailTypes"] == [CPD_DEADLINE]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_push_subscription_lifecycle(client, db_session, coach_profile):
    subscription = {
        "endpoint": "https://push.example.com/send/xyz",
        "keys": {"p256dh": "key", "auth": "secret"},
    }

    response = await client.put(
        "/api/notifications/push-subscription",
        json={"subscription": subscription, "types": [SESSION_LOGGING]},
    )

    assert response.status_code == 200
    assert response.json()["pushTypes"] == [SESSION_LOGGING]
    assert response.json()["pushSubscribed"] is True

    response = await client.delete("/api/notifications/push-subscription")
    assert response.status_code == 204

    remaining = (
        await db_session.execute(
            select(PushSubscription).where(PushSubscription.user_id == TEST_USER_ID)
        )
    ).scalar_one_or_none()
    assert remaining is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_push_types_without_subscription_are_rejected(client, coach_profile):
    response = await client.put(
        "/api/notifications/push-subscription", json={"types": [SESSION_LOGGING]}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_push_types_update_keeps_existing_endpoint(client, db_session, coach_profile):
    existing = PushSubscriptionFactory.create(user_id=TEST_USER_ID)
    db_session.add(existing)
    await db_session.commit()

    response = await client.put(
        "/api/notifications/push-subscription", json={"types": [CPD_DEADLINE]}
    )

    assert response.status_code == 200
    assert existing.subscription["endpoint"] == "https://push.example.com/send/abc123"
    assert existing.notification_types == [CPD_DEADLINE]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_missing_push_subscription(client, coach_profile):
    response = await client.delete("/api/notifications/push-subscription")
    assert response.status_code == 404
