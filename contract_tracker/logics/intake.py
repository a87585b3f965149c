"""
Form intake: copy new form responses into the tracker.
"""

import logging
from typing import Dict, Any, Set

import pandas as pd

from contract_tracker.logics.config.tracker_columns import (
    COMPANY_COLUMN,
    DATA_START_ROW,
    FORM_DATA_START_ROW,
    FORM_EMAIL_COLUMN,
)
from contract_tracker.logics.sheet_store import Sheet, WorkbookStore, cell_text
from contract_tracker.settings import FORM_SHEET_NAME, TRACKER_SHEET_NAME, ARCHIVE_SHEET_NAME

logger = logging.getLogger(__name__)

FORM_COLUMNS = ["Timestamp", "Company Name", "Location", "Email"]


def company_names(sheet: Sheet) -> Set[str]:
    """Company names on a tracker-layout sheet, as written (trimmed only)."""
    last = sheet.last_row()
    if last < DATA_START_ROW:
        return set()
    values = sheet.read_range(DATA_START_ROW, COMPANY_COLUMN, last - DATA_START_ROW + 1, 1)
    return {cell_text(value) for (value,) in values if cell_text(value)}


def read_form_responses(sheet: Sheet) -> pd.DataFrame:
    rows = sheet.read_rows(FORM_DATA_START_ROW, FORM_EMAIL_COLUMN)
    return pd.DataFrame(rows, columns=FORM_COLUMNS, dtype=object)


def import_form_responses(
    store: WorkbookStore,
    form_sheet_name: str = FORM_SHEET_NAME,
    tracker_sheet_name: str = TRACKER_SHEET_NAME,
    archive_sheet_name: str = ARCHIVE_SHEET_NAME
) -> Dict[str, Any]:
    """
    Append form responses whose company is not yet in the tracker or archive.

    The S/N column is left empty for the sheet formula to number. Running the
    job again after a successful import adds nothing.
    """
    form_sheet = store.sheet(form_sheet_name)
    tracker = store.sheet(tracker_sheet_name)
    archive = store.sheet(archive_sheet_name)

    known = company_names(tracker) | company_names(archive)
    responses = read_form_responses(form_sheet)

    added = []
    skipped = 0
    # Row-wise Series would infer a datetime dtype and turn blank cells into NaT
    for _, company, location, email in responses.itertuples(index=False, name=None):
        company = cell_text(company)
        if not company or company in known:
            skipped += 1
            continue

        row = tracker.append_row([None, company, cell_text(location), cell_text(email)])
        known.add(company)
        added.append({"row": row, "company": company})
        logger.info(f"[Intake] Added '{company}' at tracker row {row}")

    logger.info(f"[Intake] {len(added)} added, {skipped} skipped of {len(responses)} responses")
    return {"added": added, "skipped": skipped, "total_responses": len(responses)}
