"""Unit tests for Web Push delivery."""

from unittest.mock import patch

import pytest
from libs.common.config import get_settings
from pywebpush import WebPushException
from services.communications_service.services.push import (
    PushNotConfigured,
    send_to_subscriptions,
    vapid_claims,
)
from tests.factories import PushSubscriptionFactory

CPD_ACTIVITY = "CPD activity reminders (14 days)"


@pytest.fixture
def vapid_keys(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "VAPID_PUBLIC_KEY", "public-key")
    monkeypatch.setattr(settings, "VAPID_PRIVATE_KEY", "private-key")
    monkeypatch.setattr(settings, "VAPID_EMAIL", "support@icflog.com")


@pytest.mark.unit
def test_missing_keys_raise(monkeypatch):
    monkeypatch.setattr(get_settings(), "VAPID_PRIVATE_KEY", "")
    with pytest.raises(PushNotConfigured):
        vapid_claims()


@pytest.mark.unit
def test_claims_subject_is_mailto(vapid_keys):
    assert vapid_claims() == {"sub": "mailto:support@icflog.com"}


@pytest.mark.unit
def test_only_opted_in_subscriptions_receive(vapid_keys):
    opted_in = PushSubscriptionFactory.create(notification_types=[CPD_ACTIVITY])
    opted_out = PushSubscriptionFactory.create(notification_types=["Calendly events"])

    with patch("services.communications_service.services.push.webpush") as webpush:
        sent, failed = send_to_subscriptions(
            [opted_in, opted_out], CPD_ACTIVITY, "Title", "Body", "/dashboard/cpd"
        )

    assert (sent, failed) == (1, 0)
    webpush.assert_called_once()
    assert webpush.call_args.kwargs["subscription_info"] == opted_in.subscription
    assert '"url": "/dashboard/cpd"' in webpush.call_args.kwargs["data"]


@pytest.mark.unit
def test_rejected_push_counts_as_failed(vapid_keys):
    subscription = PushSubscriptionFactory.create(notification_types=[CPD_ACTIVITY])

    with patch(
        "services.communications_service.services.push.webpush",
        side_effect=WebPushException("gone"),
    ):
        sent, failed = send_to_subscriptions([subscription], CPD_ACTIVITY, "T", "B")

    assert (sent, failed) == (0, 1)
