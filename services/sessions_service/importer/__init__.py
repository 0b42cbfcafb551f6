"""Spreadsheet import of coaching sessions."""

from services.sessions_service.importer.pipeline import (  # noqa: F401
    ImportResult,
    import_rows,
    import_spreadsheet,
)
