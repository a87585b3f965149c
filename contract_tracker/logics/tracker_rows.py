"""
Typed view of tracker data rows.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional

from contract_tracker.logics.config.tracker_columns import (
    COMPANY_COLUMN,
    LOCATION_COLUMN,
    EMAIL_COLUMN,
    PILOT_NUMBER_COLUMN,
    RENEWAL_STATUS_COLUMN,
    CONTRACT_START_COLUMN,
    CONTRACT_END_COLUMN,
    FIRST_MONTH_COLUMN,
    DATA_START_ROW,
)
from contract_tracker.logics.exceptions import InvalidDateException
from contract_tracker.logics.sheet_store import Sheet, cell_text, coerce_date

logger = logging.getLogger(__name__)


@dataclass
class TrackerRow:
    """One contract record; row is the 1-based sheet row it was read from."""
    row: int
    company: str = ""
    location: str = ""
    email: str = ""
    pilot_number: str = ""
    renewal_status: str = ""
    contract_start: Optional[date] = None
    contract_end: Optional[date] = None


def _lenient_date(value: Any, field_name: str, row: int) -> Optional[date]:
    try:
        return coerce_date(value, field_name)
    except InvalidDateException:
        logger.warning(f"[TrackerRows] Row {row}: ignoring unreadable {field_name} {value!r}")
        return None


def row_from_values(row: int, values: List[Any]) -> TrackerRow:
    def at(column: int) -> Any:
        return values[column - 1] if len(values) >= column else None

    return TrackerRow(
        row=row,
        company=cell_text(at(COMPANY_COLUMN)),
        location=cell_text(at(LOCATION_COLUMN)),
        email=cell_text(at(EMAIL_COLUMN)),
        pilot_number=cell_text(at(PILOT_NUMBER_COLUMN)),
        renewal_status=cell_text(at(RENEWAL_STATUS_COLUMN)),
        contract_start=_lenient_date(at(CONTRACT_START_COLUMN), "contract start", row),
        contract_end=_lenient_date(at(CONTRACT_END_COLUMN), "contract end", row),
    )


def read_row(sheet: Sheet, row: int) -> TrackerRow:
    width = max(sheet.width(), FIRST_MONTH_COLUMN - 1)
    values = sheet.read_range(row, 1, 1, width)[0]
    return row_from_values(row, values)


def read_tracker_rows(sheet: Sheet) -> List[TrackerRow]:
    """Every data row below the header band, blank rows included."""
    width = max(sheet.width(), FIRST_MONTH_COLUMN - 1)
    rows = sheet.read_rows(DATA_START_ROW, width)
    return [row_from_values(DATA_START_ROW + offset, values) for offset, values in enumerate(rows)]
