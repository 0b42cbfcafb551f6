"""
Session exports: the ICF Client Coaching Log workbook plus plain CSV/XLSX.

The ICF log layout mirrors the template ICF asks applicants to submit, so
an exported file can also be re-imported.
"""

from typing import Iterable, Optional

from libs.common.datetime_utils import format_dmy
from libs.common.exports import autosize_columns, rows_to_csv, rows_to_xlsx, workbook_bytes
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from services.sessions_service.models import Client, CoachingSession, PaymentType

ICF_LOG_TITLE = "ICF Client Coaching Log"
ICF_LOG_HEADERS = (
    "Client Name",
    "Contact Information",
    "Individual/Group",
    "Number in Group",
    "Start Date",
    "End Date",
    "Paid hours",
    "Pro-bono hours",
)
TITLE_FILL = PatternFill(start_color="E6F3FF", end_color="E6F3FF", fill_type="solid")
HEADER_FILL = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")

SESSION_EXPORT_HEADERS = (
    "Client Name",
    "Start Date",
    "End Date",
    "Duration",
    "Session Type",
    "Number in Group",
    "Payment Type",
    "Payment Amount",
    "Focus Area",
    "Key Outcomes",
    "Client Progress",
    "Coaching Tools",
    "ICF Competencies",
    "Notes",
    "Additional Notes",
    "Created At",
)


def _hours(session: CoachingSession) -> float:
    return round((session.duration or 0) / 60, 2)


def split_hours(session: CoachingSession) -> tuple[float, float]:
    """(paid, pro-bono) hours. Mixed sessions have no stored split and count as paid."""
    if session.payment_type == PaymentType.PRO_BONO:
        return 0, _hours(session)
    return _hours(session), 0


def _contact(session: CoachingSession, clients: dict) -> str:
    client: Optional[Client] = clients.get(session.client_id) if session.client_id else None
    if client:
        return client.email or client.phone or ""
    return ""


def icf_log_rows(sessions: Iterable[CoachingSession], clients: dict) -> list[list]:
    rows = []
    for session in sessions:
        paid, pro_bono = split_hours(session)
        types = session.types or []
        rows.append(
            [
                session.client_name,
                _contact(session, clients),
                "Group" if "group" in types or "team" in types else "Individual",
                session.number_in_group or 1,
                format_dmy(session.date),
                format_dmy(session.finish_date),
                paid,
                pro_bono,
            ]
        )
    return rows


def build_icf_log_workbook(sessions: Iterable[CoachingSession], clients: dict) -> bytes:
    """Title row, blank row, highlighted header row, then one row per session."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = ICF_LOG_TITLE

    sheet.append([ICF_LOG_TITLE] + [""] * (len(ICF_LOG_HEADERS) - 1))
    sheet.append([""] * len(ICF_LOG_HEADERS))
    sheet.append(list(ICF_LOG_HEADERS))
    for row in icf_log_rows(sessions, clients):
        sheet.append(row)

    for cell in sheet[1]:
        cell.fill = TITLE_FILL
        cell.font = Font(bold=True, size=14)
    for cell in sheet[3]:
        cell.fill = HEADER_FILL
        cell.font = Font(bold=True, color="000000")
        cell.alignment = Alignment(horizontal="center")

    autosize_columns(sheet, min_width=12, max_width=30)
    return workbook_bytes(workbook)


def _session_row(session: CoachingSession) -> list:
    return [
        session.client_name,
        session.date.isoformat() if session.date else "",
        session.finish_date.isoformat() if session.finish_date else "",
        f"{session.duration} minutes" if session.duration else "",
        ", ".join(session.types or []),
        session.number_in_group or 1,
        session.payment_type.value if session.payment_type else "",
        session.payment_amount if session.payment_amount is not None else "",
        session.focus_area,
        session.key_outcomes,
        session.client_progress,
        ", ".join(session.coaching_tools or []),
        ", ".join(session.icf_competencies or []),
        session.notes,
        session.additional_notes,
        session.created_at.date().isoformat() if session.created_at else "",
    ]


def sessions_csv(sessions: Iterable[CoachingSession]) -> bytes:
    return rows_to_csv(SESSION_EXPORT_HEADERS, (_session_row(s) for s in sessions))


def sessions_xlsx(sessions: Iterable[CoachingSession]) -> bytes:
    return rows_to_xlsx(
        SESSION_EXPORT_HEADERS, (_session_row(s) for s in sessions), "Sessions"
    )
