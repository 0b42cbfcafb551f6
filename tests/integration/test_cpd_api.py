"""Integration tests for CPD entries and mentoring/supervision records."""

import datetime as dt

import pytest
from tests.factories import TEST_USER_ID, CPDEntryFactory, MentoringSessionFactory

CPD_BODY = {
    "title": "Team Coaching Intensive",
    "activityDate": "2024-05-10",
    "hours": 5,
    "cpdType": "Course",
    "learningMethod": "Online",
    "coreCompetency": True,
    "resourceDevelopment": True,
    "coreCompetencyHours": 3,
    "resourceDevelopmentHours": 2,
}

# ---------------------------------------------------------------------------
# CPD entries
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_entry_when_split_adds_up(client):
    response = await client.post("/api/cpd", json=CPD_BODY)

    assert response.status_code == 201
    data = response.json()
    assert data["hours"] == 5
    assert data["coreCompetencyHours"] == 3
    assert data["icfCceHours"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_entry_with_mismatched_split_is_rejected(client):
    body = {**CPD_BODY, "resourceDevelopmentHours": 1}
    response = await client.post("/api/cpd", json=body)
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_single_category_needs_no_split(client):
    body = {
        **CPD_BODY,
        "resourceDevelopment": False,
        "coreCompetencyHours": None,
        "resourceDevelopmentHours": None,
    }
    response = await client.post("/api/cpd", json=body)
    assert response.status_code == 201


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_checks_split_against_merged_entry(client, db_session):
    entry = CPDEntryFactory.create(
        user_id=TEST_USER_ID,
        hours=4.0,
        core_competency=True,
        resource_development=True,
        core_competency_hours=2.0,
        resource_development_hours=2.0,
    )
    db_session.add(entry)
    await db_session.commit()
    entry_id = entry.id

    response = await client.patch(f"/api/cpd/{entry_id}", json={"hours": 6})
    assert response.status_code == 400

    response = await client.patch(
        f"/api/cpd/{entry_id}", json={"hours": 6, "coreCompetencyHours": 4}
    )
    assert response.status_code == 200
    assert response.json()["hours"] == 6


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_filters_by_year(client, db_session):
    db_session.add_all(
        [
            CPDEntryFactory.create(
                user_id=TEST_USER_ID, title="2023 course", activity_date=dt.date(2023, 11, 2)
            ),
            CPDEntryFactory.create(
                user_id=TEST_USER_ID, title="2024 course", activity_date=dt.date(2024, 2, 14)
            ),
            CPDEntryFactory.create(user_id="someone-else", activity_date=dt.date(2024, 3, 1)),
        ]
    )
    await db_session.commit()

    response = await client.get("/api/cpd", params={"year": 2024})

    assert response.status_code == 200
    assert [e["title"] for e in response.json()] == ["2024 course"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_csv_export(client, db_session):
    db_session.add(CPDEntryFactory.create(user_id=TEST_USER_ID, title="Ethics refresher"))
    await db_session.commit()

    response = await client.get("/api/cpd/export")

    assert response.status_code == 200
    assert 'filename="cpd-data.csv"' in response.headers["content-disposition"]
    assert "Ethics refresher" in response.text


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_entry(client, db_session):
    entry = CPDEntryFactory.create(user_id=TEST_USER_ID)
    db_session.add(entry)
    await db_session.commit()

    assert (await client.delete(f"/api/cpd/{entry.id}")).status_code == 204
    assert (await client.get(f"/api/cpd/{entry.id}")).status_code == 404


# ---------------------------------------------------------------------------
# Mentoring and supervision
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_peer_supervision_is_allowed(client):
    response = await client.post(
        "/api/mentoring",
        json={
            "sessionType": "supervision",
            "date": "2024-04-01",
            "duration": 90,
            "deliveryType": "peer",
            "isFormalSupervision": True,
        },
    )

    assert response.status_code == 201
    assert response.json()["deliveryType"] == "peer"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_peer_mentoring_is_rejected(client):
    response = await client.post(
        "/api/mentoring",
        json={"sessionType": "mentoring", "date": "2024-04-01", "deliveryType": "peer"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_switching_peer_supervision_to_mentoring_is_rejected(client, db_session):
    from services.cpd_service.models import DeliveryType, MentoringKind

    record = MentoringSessionFactory.create(
        user_id=TEST_USER_ID,
        session_type=MentoringKind.SUPERVISION,
        delivery_type=DeliveryType.PEER,
    )
    db_session.add(record)
    await db_session.commit()

    response = await client.patch(
        f"/api/mentoring/{record.id}", json={"sessionType": "mentoring"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Peer delivery is only available for supervision"
