"""
Urgency highlighting for tracker rows.

Each row falls in one bucket, decided by renewal status first and then by
whole months until the contract end month:

    renewed           renewal status is "Renewed"
    expired           end month is this month or already past
    one_month         end month is next month
    two_three_months  end month is two or three months out
    None              anything else, or no contract end
"""

import logging
from datetime import date
from typing import Dict, Any, Optional

from contract_tracker.logics.config.tracker_columns import (
    RENEWAL_RENEWED,
    URGENCY_COLORS,
    DATA_START_ROW,
)
from contract_tracker.logics.month_grid import MonthLabel
from contract_tracker.logics.sheet_store import WorkbookStore
from contract_tracker.logics.tracker_rows import TrackerRow, read_tracker_rows
from contract_tracker.settings import TRACKER_SHEET_NAME

logger = logging.getLogger(__name__)


def months_until_end(row: TrackerRow, today: date) -> Optional[int]:
    if row.contract_end is None:
        return None
    return MonthLabel.from_date(today).months_until(MonthLabel.from_date(row.contract_end))


def classify_urgency(row: TrackerRow, today: date) -> Optional[str]:
    if row.renewal_status == RENEWAL_RENEWED:
        return "renewed"
    months = months_until_end(row, today)
    if months is None:
        return None
    if months <= 0:
        return "expired"
    if months == 1:
        return "one_month"
    if months <= 3:
        return "two_three_months"
    return None


def highlight_urgency(
    store: WorkbookStore,
    today: Optional[date] = None,
    tracker_sheet_name: str = TRACKER_SHEET_NAME
) -> Dict[str, Any]:
    """Paint each row's visible columns with its bucket colour (rows with no bucket are cleared)."""
    today = today or date.today()
    sheet = store.sheet(tracker_sheet_name)
    width = sheet.last_column()
    counts = {bucket: 0 for bucket in URGENCY_COLORS}

    for row in read_tracker_rows(sheet):
        if not row.company:
            continue
        bucket = classify_urgency(row, today)
        sheet.set_background(row.row, 1, width, URGENCY_COLORS.get(bucket))
        if bucket:
            counts[bucket] += 1

    logger.info(f"[Highlight] Highlighted rows: {counts}")
    return {"counts": counts, "highlighted": sum(counts.values())}


def clear_highlighting(store: WorkbookStore, tracker_sheet_name: str = TRACKER_SHEET_NAME) -> Dict[str, Any]:
    sheet = store.sheet(tracker_sheet_name)
    width = sheet.width()
    last = sheet.last_row()
    for row in range(DATA_START_ROW, last + 1):
        sheet.set_background(row, 1, width, None)

    cleared = max(last - DATA_START_ROW + 1, 0)
    logger.info(f"[Highlight] Cleared highlighting on {cleared} row(s)")
    return {"rows_cleared": cleared}
