"""
Map one spreadsheet row to a candidate session and client.

``map_row`` is pure: it either returns a ``MappedRow`` or a ``SkipReason``
and never touches the database.
"""

import datetime as dt
import enum
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from libs.auth.models import OwnerContext
from libs.common.logging import get_logger
from libs.common.numbers import parse_amount, parse_localized_number
from services.sessions_service.importer.dates import to_date
from services.sessions_service.models import PaymentType

logger = get_logger(__name__)

CLIENT_NAME_COLUMN = "Client Name"
CONTACT_COLUMN = "Contact Information"
TYPE_COLUMN = "Individual/Group"
GROUP_SIZE_COLUMN = "Number in Group"
START_DATE_COLUMN = "Start Date"
END_DATE_COLUMN = "End Date"
PAID_HOURS_COLUMNS = ("Paid hours", "Paid Hours")
PRO_BONO_HOURS_COLUMNS = ("Pro-bono hours", "Pro bono hours", "Probono hours")

# First non-empty column wins
PAYMENT_AMOUNT_COLUMNS = (
    "Payment Amount",
    "Payment",
    "Amount",
    "Fee",
    "Rate",
    "Cost",
    "Paid Amount",
    "Payment Fee",
    "Session Fee",
    "Hourly Rate",
)
EMAIL_COLUMNS = ("Email", "Client Email", "E-mail", "Email Address", "Contact Email")

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._-]+@[a-zA-Z0-9._-]+\.[a-zA-Z0-9._-]+")


class SkipReason(str, enum.Enum):
    MISSING_CLIENT_NAME = "missing_client_name"
    MISSING_DATE_AND_HOURS = "missing_date_and_hours"
    INVALID_ROW = "invalid_row"


@dataclass
class CandidateClient:
    key: str
    name: str
    email: Optional[str] = None
    contact: Optional[str] = None


@dataclass
class CandidateSession:
    client_key: str
    client_name: str
    date: dt.date
    duration: int
    types: list[str] = field(default_factory=lambda: ["individual"])
    payment_type: PaymentType = PaymentType.PAID
    payment_amount: Optional[float] = None
    finish_date: Optional[dt.date] = None
    number_in_group: Optional[int] = None
    additional_notes: Optional[str] = None

    @property
    def dedupe_key(self) -> tuple[str, dt.date, int]:
        return (self.client_name, self.date, self.duration)


@dataclass
class MappedRow:
    session: CandidateSession
    client: CandidateClient


class _Row:
    """Case-insensitive, whitespace-tolerant view over a header-keyed row."""

    def __init__(self, raw: dict[str, Any]):
        self._values = {
            " ".join(str(key).split()).lower(): value for key, value in raw.items()
        }

    def get(self, *names: str) -> Any:
        for name in names:
            value = self._values.get(name.lower())
            if value is not None and not (isinstance(value, str) and not value.strip()):
                return value
        return None

    def text(self, *names: str) -> Optional[str]:
        value = self.get(*names)
        return str(value).strip() if value is not None else None


def _hours(value: Any, country: Optional[str]) -> float:
    result = parse_localized_number(value, country)
    return max(result.value, 0.0) if result.ok else 0.0


def _email_from(row: _Row, contact: Optional[str]) -> Optional[str]:
    if contact and "@" in contact:
        match = EMAIL_PATTERN.search(contact)
        if match:
            return match.group(0)
    for column in EMAIL_COLUMNS:
        value = row.text(column)
        if value:
            match = EMAIL_PATTERN.search(value)
            if match:
                return match.group(0)
    return None


def payment_type_for(paid: float, pro_bono: float) -> PaymentType:
    if paid > 0 and pro_bono > 0:
        return PaymentType.PAID_AND_PRO_BONO
    if paid > 0:
        return PaymentType.PAID
    return PaymentType.PRO_BONO


def client_key(name: str, email: Optional[str]) -> str:
    return email.lower() if email else name


def _map(raw: dict[str, Any], owner: OwnerContext, today: Optional[dt.date]) -> Union[MappedRow, SkipReason]:
    row = _Row(raw)

    name = row.text(CLIENT_NAME_COLUMN)
    if not name:
        return SkipReason.MISSING_CLIENT_NAME

    paid = _hours(row.get(*PAID_HOURS_COLUMNS), owner.country)
    pro_bono = _hours(row.get(*PRO_BONO_HOURS_COLUMNS), owner.country)
    start = row.get(START_DATE_COLUMN)
    if start is None and paid + pro_bono <= 0:
        return SkipReason.MISSING_DATE_AND_HOURS

    contact = row.text(CONTACT_COLUMN)
    email = _email_from(row, contact)

    amount = None
    for column in PAYMENT_AMOUNT_COLUMNS:
        value = row.get(column)
        if value is not None:
            amount = parse_amount(value, owner.country)
            break

    session_type = (row.text(TYPE_COLUMN) or "individual").lower()

    number_in_group = None
    group_size = parse_localized_number(row.get(GROUP_SIZE_COLUMN), owner.country)
    if group_size.ok and group_size.value >= 1:
        number_in_group = int(group_size.value)

    end = row.get(END_DATE_COLUMN)
    key = client_key(name, email)

    return MappedRow(
        session=CandidateSession(
            client_key=key,
            client_name=name,
            date=to_date(start, today=today),
            finish_date=to_date(end, today=today) if end is not None else None,
            duration=round((paid + pro_bono) * 60),
            types=[session_type],
            payment_type=payment_type_for(paid, pro_bono),
            payment_amount=amount,
            number_in_group=number_in_group,
            additional_notes=contact,
        ),
        client=CandidateClient(key=key, name=name, email=email, contact=contact),
    )


def map_row(
    raw: dict[str, Any], owner: OwnerContext, today: Optional[dt.date] = None
) -> Union[MappedRow, SkipReason]:
    """Derive a candidate session and client from one row, or say why not."""
    try:
        return _map(raw, owner, today)
    except Exception as e:
        logger.debug(f"Skipping unreadable import row {raw!r}: {e}")
        return SkipReason.INVALID_ROW
