"""Unit tests for the yearly ICF HTML report."""

import datetime as dt

import pytest
from services.cpd_service.services.report import (
    compute_totals,
    render_report,
    report_filename,
)
from tests.factories import CoachingSessionFactory, CPDEntryFactory, ProfileFactory


@pytest.mark.unit
def test_report_filename():
    assert report_filename("Jo Smith", 2024) == "ICF_Report_Jo_Smith_2024.html"
    assert report_filename("", 2024) == "ICF_Report_User_2024.html"


@pytest.mark.unit
def test_totals_split_core_and_resource_hours():
    sessions = [
        CoachingSessionFactory.create(duration=60),
        CoachingSessionFactory.create(duration=90),
    ]
    entries = [
        CPDEntryFactory.create(hours=3, core_competency=True, resource_development=False),
        CPDEntryFactory.create(
            hours=4,
            core_competency=True,
            resource_development=True,
            core_competency_hours=2.5,
            resource_development_hours=1.5,
        ),
        CPDEntryFactory.create(
            hours=2, core_competency=False, resource_development=True, icf_cce_hours=False
        ),
    ]

    totals = compute_totals(sessions, entries)

    assert totals.session_count == 2
    assert totals.coaching_hours == 2.5
    assert totals.cpd_hours == 7.0
    assert totals.core_competency_hours == 5.5
    assert totals.resource_development_hours == 3.5


@pytest.mark.unit
def test_render_report_escapes_user_content():
    profile = ProfileFactory.create(name="Jo <script>")
    sessions = [
        CoachingSessionFactory.create(
            client_name="A & B Ltd", date=dt.date(2024, 3, 5), duration=60
        )
    ]

    html = render_report(
        profile, 2024, sessions, [], generated_at=dt.datetime(2024, 12, 1)
    )

    assert html.startswith("<!DOCTYPE html>")
    assert "Jo &lt;script&gt;" in html
    assert "A &amp; B Ltd" in html
    assert "5/3/2024" in html
    assert "At least 40 CCE hours every three years" in html
    assert "No records for this period." in html
