"""CPD CSV/XLSX exports."""

from typing import Iterable

from libs.common.exports import rows_to_csv, rows_to_xlsx
from services.cpd_service.models import CPDEntry

CPD_EXPORT_HEADERS = (
    "Title",
    "Date",
    "Hours",
    "Type",
    "Description",
    "Certificate Link",
    "Created At",
)


def _cpd_row(entry: CPDEntry) -> list:
    return [
        entry.title,
        entry.activity_date.isoformat() if entry.activity_date else "",
        entry.hours,
        entry.cpd_type.value if entry.cpd_type else "",
        entry.description,
        entry.supporting_document_url,
        entry.created_at.date().isoformat() if entry.created_at else "",
    ]


def cpd_csv(entries: Iterable[CPDEntry]) -> bytes:
    return rows_to_csv(CPD_EXPORT_HEADERS, (_cpd_row(e) for e in entries))


def cpd_xlsx(entries: Iterable[CPDEntry]) -> bytes:
    return rows_to_xlsx(CPD_EXPORT_HEADERS, (_cpd_row(e) for e in entries), "CPD")
