"""
Archive jobs: move terminated contracts out of the tracker and remove rows
that belong to already-archived companies.

Both jobs delete rows in place, so they walk the tracker bottom to top.
"""

import logging
from typing import Dict, Any

from contract_tracker.logics.config.tracker_columns import (
    COMPANY_COLUMN,
    DATA_START_ROW,
    FIRST_MONTH_COLUMN,
    STATUS_TERMINATE,
)
from contract_tracker.logics.intake import company_names
from contract_tracker.logics.month_grid import MonthGrid
from contract_tracker.logics.sheet_store import WorkbookStore, cell_text
from contract_tracker.settings import TRACKER_SHEET_NAME, ARCHIVE_SHEET_NAME

logger = logging.getLogger(__name__)


def archive_terminated_rows(
    store: WorkbookStore,
    tracker_sheet_name: str = TRACKER_SHEET_NAME,
    archive_sheet_name: str = ARCHIVE_SHEET_NAME
) -> Dict[str, Any]:
    """Append every row with a "terminate" month to the archive and delete it from the tracker."""
    tracker = store.sheet(tracker_sheet_name)
    archive = store.sheet(archive_sheet_name)

    last = tracker.last_row()
    width = tracker.width()
    archived = []

    for row in range(last, DATA_START_ROW - 1, -1):
        values = tracker.read_range(row, 1, 1, width)[0]
        monthly = values[FIRST_MONTH_COLUMN - 1:]
        if not any(cell_text(value).lower() == STATUS_TERMINATE for value in monthly):
            continue

        archive_row = archive.append_row(values)
        tracker.delete_row(row)
        company = cell_text(values[COMPANY_COLUMN - 1])
        archived.append({"company": company, "tracker_row": row, "archive_row": archive_row})
        logger.info(f"[Archive] Archived '{company}' from tracker row {row} to archive row {archive_row}")

    if archived:
        MonthGrid(tracker).refresh_validation(DATA_START_ROW)
    logger.info(f"[Archive] Archived {len(archived)} row(s)")
    return {"archived": archived, "count": len(archived)}


def remove_archived_duplicates(
    store: WorkbookStore,
    tracker_sheet_name: str = TRACKER_SHEET_NAME,
    archive_sheet_name: str = ARCHIVE_SHEET_NAME
) -> Dict[str, Any]:
    """Delete tracker rows whose company (trimmed, case-insensitive) is already archived."""
    tracker = store.sheet(tracker_sheet_name)
    archived_names = {name.lower() for name in company_names(store.sheet(archive_sheet_name))}

    removed = []
    last = tracker.last_row()
    for row in range(last, DATA_START_ROW - 1, -1):
        company = cell_text(tracker.get_value(row, COMPANY_COLUMN))
        if company and company.lower() in archived_names:
            tracker.delete_row(row)
            removed.append({"company": company, "row": row})
            logger.info(f"[Archive] Removed archived duplicate '{company}' at tracker row {row}")

    if removed:
        MonthGrid(tracker).refresh_validation(DATA_START_ROW)
    logger.info(f"[Archive] Removed {len(removed)} duplicate row(s)")
    return {"removed": removed, "count": len(removed)}
