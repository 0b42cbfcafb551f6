"""Unit tests for mapping spreadsheet rows to candidate sessions and clients."""

import datetime as dt

import pytest
from libs.auth.models import OwnerContext
from services.sessions_service.importer.mapper import (
    MappedRow,
    SkipReason,
    client_key,
    map_row,
    payment_type_for,
)
from services.sessions_service.importer.pipeline import map_rows
from services.sessions_service.models import PaymentType

TODAY = dt.date(2025, 6, 1)
OWNER = OwnerContext(user_id="coach-1")
GERMAN_OWNER = OwnerContext(user_id="coach-2", country="DE", currency="EUR")


@pytest.mark.unit
def test_bob_row_maps_to_paid_individual_session():
    mapped = map_row(
        {
            "Client Name": "Bob",
            "Start Date": "15/03/24",
            "Paid hours": "1",
            "Pro-bono hours": "0",
        },
        OWNER,
        today=TODAY,
    )

    assert isinstance(mapped, MappedRow)
    session = mapped.session
    assert session.date == dt.date(2024, 3, 15)
    assert session.duration == 60
    assert session.types == ["individual"]
    assert session.payment_type == PaymentType.PAID
    assert mapped.client.name == "Bob"
    assert mapped.client.key == "Bob"


@pytest.mark.unit
def test_row_without_client_name_is_skipped():
    assert map_row({"Start Date": "15/03/24", "Paid hours": 1}, OWNER) == (
        SkipReason.MISSING_CLIENT_NAME
    )
    assert map_row({"Client Name": "   ", "Paid hours": 1}, OWNER) == (
        SkipReason.MISSING_CLIENT_NAME
    )


@pytest.mark.unit
def test_row_without_date_or_hours_is_skipped():
    assert map_row({"Client Name": "Bob", "Paid hours": "0"}, OWNER) == (
        SkipReason.MISSING_DATE_AND_HOURS
    )


@pytest.mark.unit
def test_row_with_hours_but_no_date_uses_today():
    mapped = map_row({"Client Name": "Bob", "Pro-bono hours": "1.5"}, OWNER, today=TODAY)

    assert mapped.session.date == TODAY
    assert mapped.session.duration == 90
    assert mapped.session.payment_type == PaymentType.PRO_BONO


@pytest.mark.unit
@pytest.mark.parametrize(
    "paid, pro_bono, expected",
    [
        (1, 0, PaymentType.PAID),
        (1, 1, PaymentType.PAID_AND_PRO_BONO),
        (0, 1, PaymentType.PRO_BONO),
        (0, 0, PaymentType.PRO_BONO),
    ],
)
def test_payment_type_classification(paid, pro_bono, expected):
    assert payment_type_for(paid, pro_bono) == expected


@pytest.mark.unit
def test_email_extracted_from_contact_information():
    mapped = map_row(
        {
            "Client Name": "Alice",
            "Start Date": "2024-01-10",
            "Paid hours": 1,
            "Contact Information": "Alice Smith <alice@example.com>, +44 7700 900000",
        },
        OWNER,
    )

    assert mapped.client.email == "alice@example.com"
    assert mapped.client.key == "alice@example.com"
    assert mapped.session.additional_notes.startswith("Alice Smith")


@pytest.mark.unit
def test_email_falls_back_to_email_columns():
    mapped = map_row(
        {
            "Client Name": "Alice",
            "Start Date": "2024-01-10",
            "Paid hours": 1,
            "Contact Information": "+44 7700 900000",
            "Client Email": "Alice@Example.com",
        },
        OWNER,
    )

    assert mapped.client.email == "Alice@Example.com"
    assert mapped.client.key == "alice@example.com"


@pytest.mark.unit
def test_first_non_empty_payment_column_wins():
    mapped = map_row(
        {
            "Client Name": "Bob",
            "Start Date": "2024-01-10",
            "Paid hours": 1,
            "Payment Amount": "",
            "Fee": "$150",
            "Rate": "90",
        },
        OWNER,
    )
    assert mapped.session.payment_amount == 150.0


@pytest.mark.unit
def test_payment_amount_uses_owner_locale():
    mapped = map_row(
        {
            "Client Name": "Bob",
            "Start Date": "2024-01-10",
            "Paid hours": "1,5",
            "Payment": "€1.234,50",
        },
        GERMAN_OWNER,
    )
    assert mapped.session.payment_amount == 1234.5
    assert mapped.session.duration == 90


@pytest.mark.unit
def test_unparseable_amount_is_null():
    mapped = map_row(
        {"Client Name": "Bob", "Start Date": "2024-01-10", "Paid hours": 1, "Fee": "n/a"},
        OWNER,
    )
    assert mapped.session.payment_amount is None


@pytest.mark.unit
def test_session_type_and_group_size():
    mapped = map_row(
        {
            "Client Name": "Leadership team",
            "Start Date": "2024-01-10",
            "Paid hours": 2,
            "Individual/Group": "Group",
            "Number in Group": "6",
        },
        OWNER,
    )
    assert mapped.session.types == ["group"]
    assert mapped.session.number_in_group == 6


@pytest.mark.unit
def test_headers_are_matched_loosely():
    mapped = map_row(
        {"client  name": "Bob", "START DATE": "2024-01-10", "Paid Hours": 1}, OWNER
    )
    assert isinstance(mapped, MappedRow)
    assert mapped.session.date == dt.date(2024, 1, 10)


@pytest.mark.unit
def test_client_key_prefers_lowercased_email():
    assert client_key("Bob", "Bob@Example.com") == "bob@example.com"
    assert client_key("Bob", None) == "Bob"


@pytest.mark.unit
def test_map_rows_collects_unique_clients_and_counts_unusable():
    rows = [
        {"Client Name": "Carol", "Start Date": "2024-02-01", "Paid hours": 1},
        {"Client Name": "Carol", "Start Date": "2024-02-01", "Paid hours": 1},
        {"Client Name": "Dan", "Start Date": "2024-02-02", "Paid hours": 1},
        {"Start Date": "2024-02-03"},
    ]

    sessions, clients, unusable = map_rows(rows, OWNER, today=TODAY)

    assert len(sessions) == 3
    assert [c.name for c in clients] == ["Carol", "Dan"]
    assert unusable == 1
