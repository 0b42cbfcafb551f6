"""
Annual ICF compliance report for one coach, as a standalone HTML page.

CSS is inlined so the file renders the same when opened offline or
attached to an email.
"""

import datetime as dt
import html
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from libs.common.datetime_utils import format_dmy, utc_now
from services.cpd_service.models import CPDEntry
from services.members_service.models import Profile
from services.members_service.services.credentials import (
    RENEWAL_CCE_HOURS,
    RENEWAL_CORE_COMPETENCY_HOURS,
    RENEWAL_MAX_RESOURCE_DEVELOPMENT_HOURS,
)
from services.sessions_service.models import CoachingSession

REPORT_STYLE = """
body { font-family: Arial, sans-serif; color: #1f2937; margin: 40px; }
h1 { color: #1e40af; margin-bottom: 4px; }
h2 { color: #1f2937; border-bottom: 2px solid #3b82f6; padding-bottom: 4px; margin-top: 32px; }
.meta { color: #6b7280; margin-bottom: 24px; }
.summary { display: flex; gap: 16px; margin: 16px 0; }
.card { background: #f3f4f6; border-radius: 8px; padding: 12px 16px; min-width: 140px; }
.card .value { font-size: 22px; font-weight: bold; color: #1e40af; }
table { width: 100%; border-collapse: collapse; margin-top: 12px; font-size: 13px; }
th { background: #1e40af; color: #ffffff; text-align: left; padding: 8px; }
td { border-bottom: 1px solid #e5e7eb; padding: 8px; }
tr:nth-child(even) td { background: #f9fafb; }
.requirements li { margin: 4px 0; }
.empty { color: #9ca3af; font-style: italic; }
"""


@dataclass
class ReportTotals:
    session_count: int
    coaching_hours: float
    cpd_hours: float
    core_competency_hours: float
    resource_development_hours: float


def report_filename(name: str, year: int) -> str:
    safe = re.sub(r"[^A-Za-z0-9]+", "_", name).strip("_") or "User"
    return f"ICF_Report_{safe}_{year}.html"


def compute_totals(
    sessions: Sequence[CoachingSession], entries: Sequence[CPDEntry]
) -> ReportTotals:
    core = resource = 0.0
    for entry in entries:
        if entry.core_competency and entry.resource_development:
            core += entry.core_competency_hours or 0
            resource += entry.resource_development_hours or 0
        elif entry.core_competency:
            core += entry.hours or 0
        elif entry.resource_development:
            resource += entry.hours or 0
    return ReportTotals(
        session_count=len(sessions),
        coaching_hours=round(sum(s.duration or 0 for s in sessions) / 60, 1),
        cpd_hours=round(
            sum(e.hours or 0 for e in entries if e.icf_cce_hours is not False), 1
        ),
        core_competency_hours=round(core, 1),
        resource_development_hours=round(resource, 1),
    )


def _cell(value) -> str:
    return f"<td>{html.escape(str(value)) if value not in (None, '') else ''}</td>"


def _table(headers: Sequence[str], rows: list[list]) -> str:
    if not rows:
        return '<p class="empty">No records for this period.</p>'
    head = "".join(f"<th>{h}</th>" for h in headers)
    body = "".join("<tr>" + "".join(_cell(v) for v in row) + "</tr>" for row in rows)
    return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


def render_report(
    profile: Profile,
    year: int,
    sessions: Sequence[CoachingSession],
    entries: Sequence[CPDEntry],
    generated_at: Optional[dt.datetime] = None,
) -> str:
    generated_at = generated_at or utc_now()
    totals = compute_totals(sessions, entries)
    name = html.escape(profile.name or profile.email or profile.user_id)
    level = profile.icf_level.value if profile.icf_level else "none"

    session_rows = [
        [
            format_dmy(s.date),
            s.client_name,
            ", ".join(s.types or []),
            round((s.duration or 0) / 60, 2),
            s.payment_type.value if s.payment_type else "",
            s.focus_area,
        ]
        for s in sessions
    ]
    cpd_rows = [
        [
            format_dmy(e.activity_date),
            e.title,
            e.cpd_type.value if e.cpd_type else "",
            e.hours,
            e.provider_organization,
            "Yes" if e.icf_cce_hours is not False else "No",
        ]
        for e in entries
    ]

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8" />
<title>ICF Report - {name} - {year}</title>
<style>{REPORT_STYLE}</style>
</head>
<body>
<h1>ICF Coaching Report {year}</h1>
<div class="meta">{name} &middot; Credential: {html.escape(level)} &middot; Generated {format_dmy(generated_at.date())}</div>

<div class="summary">
  <div class="card"><div>Sessions</div><div class="value">{totals.session_count}</div></div>
  <div class="card"><div>Coaching hours</div><div class="value">{totals.coaching_hours}</div></div>
  <div class="card"><div>CCE hours</div><div class="value">{totals.cpd_hours}</div></div>
  <div class="card"><div>Core competency</div><div class="value">{totals.core_competency_hours}</div></div>
  <div class="card"><div>Resource development</div><div class="value">{totals.resource_development_hours}</div></div>
</div>

<h2>Renewal requirements</h2>
<ul class="requirements">
  <li>At least {RENEWAL_CCE_HOURS} CCE hours every three years</li>
  <li>At least {RENEWAL_CORE_COMPETENCY_HOURS} hours in Core Competencies</li>
  <li>At most {RENEWAL_MAX_RESOURCE_DEVELOPMENT_HOURS} hours in Resource Development</li>
</ul>

<h2>Coaching sessions</h2>
{_table(["Date", "Client", "Type", "Hours", "Payment", "Focus area"], session_rows)}

<h2>CPD activities</h2>
{_table(["Date", "Title", "Type", "Hours", "Provider", "ICF CCE"], cpd_rows)}
</body>
</html>"""
