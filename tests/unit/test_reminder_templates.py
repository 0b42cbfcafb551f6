"""Unit tests for reminder and broadcast email rendering."""

import datetime as dt

import pytest
from libs.common.config import get_settings
from services.communications_service.templates.reminders import (
    REMINDER_SUBJECT,
    fill_placeholders,
    html_to_text,
    linkify,
    looks_like_html,
    notification_email,
    plain_text_to_html,
    reminder_email,
    render_custom_email,
)

# ---------------------------------------------------------------------------
# Placeholders
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_fill_placeholders():
    content = (
        "Hi {{userName}}, {{sessionCount}} sessions, {{cpdHours}} CPD hours, "
        "last active {{lastActivityDate}}"
    )
    filled = fill_placeholders(content, "Jo", 12, 7.5, dt.date(2024, 3, 5))
    assert filled == "Hi Jo, 12 sessions, 7.5 CPD hours, last active 5/3/2024"


@pytest.mark.unit
def test_fill_placeholders_defaults():
    filled = fill_placeholders(
        "{{sessionCount}}|{{cpdHours}}|{{lastActivityDate}}", "Jo"
    )
    assert filled == "0|0.0|No recent activity"


@pytest.mark.unit
def test_every_occurrence_is_replaced():
    assert fill_placeholders("{{userName}} {{userName}}", "Jo") == "Jo Jo"


# ---------------------------------------------------------------------------
# Plain text to HTML
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_plain_text_lists_and_breaks():
    result = plain_text_to_html("Hello\n\n- one\n• two\n3. three\nBye")

    assert result.startswith("Hello<br><br><br><ul")
    assert result.count("<li") == 3
    assert '<li style="margin: 5px 0;">two</li>' in result
    assert result.endswith("</ul><br>Bye")


@pytest.mark.unit
def test_urls_become_links():
    result = linkify("See https://icflog.com/pricing for plans")
    assert '<a href="https://icflog.com/pricing"' in result
    assert ">https://icflog.com/pricing</a>" in result


@pytest.mark.unit
def test_existing_anchor_is_not_relinked():
    content = '<a href="https://icflog.com">here</a>'
    assert linkify(content) == content


@pytest.mark.unit
def test_looks_like_html():
    assert looks_like_html("<p>Hello</p>")
    assert not looks_like_html("2 < 3 and 4 > 1")


@pytest.mark.unit
def test_html_to_text():
    assert html_to_text("<p>Tom &amp; Jerry</p><br>&nbsp;") == "Tom & Jerry"


# ---------------------------------------------------------------------------
# Rendered emails
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_custom_plain_text_email_is_converted():
    email = render_custom_email(
        "Hello {{userName}}",
        "Hi {{userName}},\n- Log your sessions",
        user_name="Jo",
        session_count=3,
    )

    assert email.subject == "Hello Jo"
    assert "<li" in email.html
    assert "Manage your email preferences" in email.html
    assert email.text.startswith("Hi Jo,")


@pytest.mark.unit
def test_custom_html_email_is_kept():
    email = render_custom_email("News", "<p>Hi <b>{{userName}}</b></p>", user_name=None)

    assert "<p>Hi <b>Valued Coach</b></p>" in email.html
    assert "<ul" not in email.html
    assert email.text == "Hi Valued Coach"


@pytest.mark.unit
def test_reminder_email_defaults():
    email = reminder_email()

    assert email.subject == REMINDER_SUBJECT
    assert "Hi Valued Coach," in email.html
    assert "Update Your Log Now" in email.html
    assert "Last Activity: No recent activity" in email.text


@pytest.mark.unit
def test_reminder_email_status():
    email = reminder_email("Jo", dt.date(2024, 11, 2), 14, 6.5)

    assert "2/11/2024" in email.html
    assert "Total Sessions: 14" in email.text
    assert "CPD Hours: 6.5h" in email.text


@pytest.mark.unit
def test_notification_email_links_into_app():
    email = notification_email(
        "CPD Activity Reminder", "Log your CPD <now>", "/dashboard/cpd/log", "Jo"
    )
    url = f"{get_settings().APP_URL}/dashboard/cpd/log"

    assert email.subject == "CPD Activity Reminder"
    assert url in email.html
    assert "Log your CPD &lt;now&gt;" in email.html
    assert url in email.text
