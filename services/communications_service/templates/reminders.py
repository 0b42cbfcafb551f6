"""
Reminder and admin broadcast emails.

Admin-written content may be plain text or HTML. Plain text is converted:
URLs become links, bullet/numbered lines become a list and newlines become
``<br>``. Either way the ``{{userName}}``-style placeholders are filled in
per recipient before sending.
"""

import datetime as dt
import html
import re
from dataclasses import dataclass
from typing import Optional

from libs.common.config import get_settings
from libs.common.datetime_utils import format_dmy
from services.communications_service.templates.base import (
    cta_button,
    detail_box,
    info_box,
    wrap_html,
)

REMINDER_SUBJECT = "Reminder: Keep Your ICF Log Updated"
DEFAULT_USER_NAME = "Valued Coach"
NO_RECENT_ACTIVITY = "No recent activity"

HTML_TAG_PATTERN = re.compile(r"<[a-z][\s\S]*>", re.IGNORECASE)
URL_PATTERN = re.compile(r"(?<![\"'=])(https?://[^\s<>]+)", re.IGNORECASE)
LIST_ITEM_PATTERN = re.compile(r"^(?:•|-|\d+\.)\s*")
LINK_STYLE = "color: #3b82f6; text-decoration: underline;"


@dataclass
class RenderedEmail:
    subject: str
    html: str
    text: str


def _last_activity(value: Optional[dt.date]) -> str:
    return format_dmy(value) if value else NO_RECENT_ACTIVITY


def fill_placeholders(
    content: str,
    user_name: str,
    session_count: Optional[int] = None,
    cpd_hours: Optional[float] = None,
    last_activity_date: Optional[dt.date] = None,
) -> str:
    return (
        content.replace("{{userName}}", user_name)
        .replace("{{sessionCount}}", str(session_count or 0))
        .replace("{{cpdHours}}", f"{cpd_hours or 0:.1f}")
        .replace("{{lastActivityDate}}", _last_activity(last_activity_date))
    )


def looks_like_html(content: str) -> bool:
    return bool(HTML_TAG_PATTERN.search(content))


def linkify(text: str) -> str:
    return URL_PATTERN.sub(rf'<a href="\1" style="{LINK_STYLE}">\1</a>', text)


def plain_text_to_html(text: str) -> str:
    """Convert admin-typed plain text to simple HTML."""
    lines = []
    in_list = False
    for raw_line in linkify(text).split("\n"):
        line = raw_line.strip()
        if LIST_ITEM_PATTERN.match(line):
            if not in_list:
                lines.append('<ul style="margin: 10px 0; padding-left: 20px;">')
                in_list = True
            item = LIST_ITEM_PATTERN.sub("", line, count=1).strip()
            lines.append(f'<li style="margin: 5px 0;">{item}</li>')
            continue
        if in_list:
            lines.append("</ul>")
            in_list = False
        # Blank lines become paragraph breaks
        lines.append(line or "<br>")
    if in_list:
        lines.append("</ul>")
    return "<br>".join(lines)


def html_to_text(content: str) -> str:
    """Plain-text alternative: tags stripped, entities unescaped."""
    stripped = re.sub(r"<[^>]*>", "", content)
    return html.unescape(stripped).replace("\xa0", " ").strip()


def render_custom_email(
    subject: str,
    content: str,
    user_name: Optional[str],
    session_count: Optional[int] = None,
    cpd_hours: Optional[float] = None,
    last_activity_date: Optional[dt.date] = None,
) -> RenderedEmail:
    """Render an admin broadcast for one recipient."""
    filled = fill_placeholders(
        content,
        user_name or DEFAULT_USER_NAME,
        session_count,
        cpd_hours,
        last_activity_date,
    )
    if looks_like_html(filled):
        body_html = filled
    else:
        body_html = (
            f'<div style="font-size: 16px; line-height: 1.8;">{plain_text_to_html(filled)}</div>'
        )
    return RenderedEmail(
        subject=fill_placeholders(
            subject, user_name or DEFAULT_USER_NAME, session_count, cpd_hours, last_activity_date
        ),
        html=wrap_html(title="", body_html=body_html),
        text=html_to_text(filled),
    )


def reminder_email(
    user_name: Optional[str] = None,
    last_activity_date: Optional[dt.date] = None,
    session_count: Optional[int] = None,
    cpd_hours: Optional[float] = None,
) -> RenderedEmail:
    """The standard 'keep your log updated' reminder."""
    name = user_name or DEFAULT_USER_NAME
    app_url = get_settings().APP_URL

    status_items = {
        "Last Activity": format_dmy(last_activity_date) if last_activity_date else None,
        "Total Sessions": str(session_count) if session_count is not None else None,
        "CPD Hours": f"{cpd_hours}h" if cpd_hours is not None else None,
    }
    body_html = (
        '<p style="font-size: 16px;">This is a friendly reminder to keep your ICF Log '
        "updated with your latest coaching sessions and CPD activities.</p>"
        + detail_box(status_items, heading="Your Current Status:")
        + '<p style="font-size: 16px;">Regular logging helps you:</p>'
        '<ul style="font-size: 16px; line-height: 1.8;">'
        "<li>Stay on track for ICF credential renewal</li>"
        "<li>Maintain accurate records of your coaching practice</li>"
        "<li>Generate professional reports when needed</li>"
        "<li>Avoid last-minute scrambling before renewal deadlines</li>"
        "</ul>"
        + cta_button("Update Your Log Now", f"{app_url}/dashboard")
        + info_box(
            "Set aside 10-15 minutes each week to log your sessions and CPD "
            "activities. This small habit will save you hours of work later!",
            title="Tip:",
        )
    )
    text = (
        f"Hi {name},\n\n"
        "This is a friendly reminder to keep your ICF Log updated with your latest "
        "coaching sessions and CPD activities.\n\n"
        f"Last Activity: {_last_activity(last_activity_date)}\n"
        f"Total Sessions: {session_count or 0}\n"
        f"CPD Hours: {cpd_hours or 0}h\n\n"
        f"Update your log: {app_url}/dashboard\n"
    )
    return RenderedEmail(
        subject=REMINDER_SUBJECT,
        html=wrap_html(title=f"Hi {html.escape(name)},", body_html=body_html),
        text=text,
    )


def notification_email(title: str, body: str, path: str, user_name: Optional[str] = None) -> RenderedEmail:
    """A single alert (session logging, reflection, CPD) with a link back into the app."""
    url = f"{get_settings().APP_URL}{path}"
    body_html = (
        f'<p style="font-size: 16px;">{html.escape(body)}</p>'
        + cta_button("View in ICF Log", url)
    )
    return RenderedEmail(
        subject=title,
        html=wrap_html(
            title=f"Hi {html.escape(user_name or DEFAULT_USER_NAME)},",
            body_html=body_html,
        ),
        text=f"{body}\n\nView in ICF Log: {url}\n",
    )
