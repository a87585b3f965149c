"""
Sort tracker rows by contract start.
"""

import logging
from typing import Dict, Any

import pandas as pd

from contract_tracker.logics.config.tracker_columns import (
    SERIAL_COLUMN,
    COMPANY_COLUMN,
    CONTRACT_START_COLUMN,
    DATA_START_ROW,
)
from contract_tracker.logics.exceptions import InvalidDateException
from contract_tracker.logics.month_grid import MonthGrid
from contract_tracker.logics.sheet_store import WorkbookStore, cell_text, coerce_date
from contract_tracker.settings import TRACKER_SHEET_NAME

logger = logging.getLogger(__name__)


def _sort_key(values) -> pd.Timestamp:
    """Contract start as a timestamp; NaT for rows that sink to the bottom."""
    if not cell_text(values[COMPANY_COLUMN - 1]):
        return pd.NaT
    try:
        start = coerce_date(values[CONTRACT_START_COLUMN - 1], "contract start")
    except InvalidDateException:
        return pd.NaT
    return pd.Timestamp(start) if start else pd.NaT


def sort_by_contract_start(store: WorkbookStore, tracker_sheet_name: str = TRACKER_SHEET_NAME) -> Dict[str, Any]:
    """
    Reorder data rows by ascending contract start.

    Rows without a company name or contract start go last in their original
    order. The S/N column is formula-driven and stays where it is.
    """
    sheet = store.sheet(tracker_sheet_name)
    width = sheet.width()
    first_column = SERIAL_COLUMN + 1
    rows = sheet.read_rows(DATA_START_ROW, width)
    if not rows:
        return {"rows_sorted": 0, "rows_without_start": 0}

    df = pd.DataFrame({"values": pd.Series(rows, dtype=object)})
    df["sort_key"] = pd.to_datetime(df["values"].map(_sort_key))
    ordered = df.sort_values("sort_key", kind="mergesort", na_position="last")

    block = [values[first_column - 1:] for values in ordered["values"]]
    sheet.write_range(DATA_START_ROW, first_column, block)
    MonthGrid(sheet).refresh_validation(DATA_START_ROW)

    without_start = int(df["sort_key"].isna().sum())
    logger.info(f"[Sort] Sorted {len(rows)} row(s) by contract start ({without_start} without start)")
    return {"rows_sorted": len(rows), "rows_without_start": without_start}
