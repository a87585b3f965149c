"""
Contract date engine.

Keeps a tracker row's contract start/end dates and its monthly status cells
consistent when a pilot number is assigned, when either date is edited by
hand, and when the renewal sync renews or terminates the contract.

Two different rollover rules are in play and are intentionally not unified:

- contract_term(): first of the start month + 12 months - 1 day
  (activation and manual start edits)
- renewal_term(): old end + 1 year, same day of month
  (the "Renew" batch sync)
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from dateutil.relativedelta import relativedelta

from contract_tracker.logics.config.tracker_columns import (
    CONTRACT_START_COLUMN,
    CONTRACT_END_COLUMN,
    RENEWAL_STATUS_COLUMN,
    CONTRACT_TERM_MONTHS,
    STATUS_PAID,
    STATUS_RENEW,
    STATUS_TERMINATE,
    RENEWAL_RENEWED,
    RENEWAL_TERMINATED,
)
from contract_tracker.logics.exceptions import InvalidDateException
from contract_tracker.logics.month_grid import MonthGrid, MonthLabel
from contract_tracker.logics.sheet_store import Sheet, coerce_date, is_blank
from contract_tracker.logics.tracker_rows import TrackerRow, read_row

logger = logging.getLogger(__name__)


def first_of_month(value: date) -> date:
    return value.replace(day=1)


def last_of_month(value: date) -> date:
    return MonthLabel.from_date(value).last_day


def contract_term(start: date) -> Tuple[date, date]:
    """
    Normalised (start, end) for a fresh twelve-month contract.

    >>> contract_term(date(2026, 10, 19))
    (datetime.date(2026, 10, 1), datetime.date(2027, 9, 30))
    """
    normalized = first_of_month(start)
    end = normalized + relativedelta(months=CONTRACT_TERM_MONTHS) - timedelta(days=1)
    return normalized, end


def renewal_term(current_end: date) -> Tuple[date, date]:
    """
    (start, end) of the renewed contract: start on the 1st of the month after
    the current end, end exactly one year after the current end.

    >>> renewal_term(date(2027, 9, 30))
    (datetime.date(2027, 10, 1), datetime.date(2028, 9, 30))
    """
    new_start = first_of_month(current_end) + relativedelta(months=1)
    new_end = current_end + relativedelta(years=1)
    return new_start, new_end


def decode_previous_value(value: Any) -> Any:
    """
    Turn an edit event's previous value back into what the cell held.

    Date cells report their previous value as a day-count serial; those are
    converted to dates so restoring keeps the cell's date formatting. Text that
    does not read as a date is returned unchanged. Blank means "no prior value".
    """
    if is_blank(value):
        return None
    try:
        return coerce_date(value, "previous value")
    except InvalidDateException:
        return value


@dataclass
class PendingStartChange:
    """A proposed contract start edit awaiting confirmation, with its inverse."""
    sheet_name: str
    row: int
    new_start: date
    previous_value: Any
    pending_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        previous = self.previous_value
        return {
            "pending_id": self.pending_id,
            "sheet": self.sheet_name,
            "row": self.row,
            "new_start": self.new_start.isoformat(),
            "previous_value": previous.isoformat() if isinstance(previous, date) else previous,
        }


class ContractDateEngine:
    """Date and monthly-cell state transitions for rows of one tracker sheet."""

    def __init__(self, sheet: Sheet, grid: Optional[MonthGrid] = None):
        self.sheet = sheet
        self.grid = grid or MonthGrid(sheet)

    def _write_dates(self, row: int, start: Optional[date], end: Optional[date]) -> None:
        if start is not None:
            self.sheet.set_value(row, CONTRACT_START_COLUMN, start)
        if end is not None:
            self.sheet.set_value(row, CONTRACT_END_COLUMN, end)

    def activate(self, row: int, today: Optional[date] = None) -> Optional[Tuple[date, date]]:
        """
        Start tracking a row that just received its pilot number.

        Rows that already have a contract start are left alone. Otherwise the
        contract runs from the first of the current month for twelve months,
        each of which is marked paid.

        Returns:
            (start, end) when dates were assigned, None otherwise
        """
        current = read_row(self.sheet, row)
        if current.contract_start is not None:
            logger.info(f"[ContractDates] Row {row} already has a contract start; activation skipped")
            return None

        start, end = contract_term(today or date.today())
        self._write_dates(row, start, end)
        self.grid.extend_to(end, start_from=start)
        self.grid.fill_months(row, MonthLabel.from_date(start), CONTRACT_TERM_MONTHS, STATUS_PAID, STATUS_PAID)
        logger.info(f"[ContractDates] Activated row {row}: {start} -> {end}")
        return start, end

    def propose_start_change(self, row: int, new_value: Any, old_value: Any) -> PendingStartChange:
        """
        First phase of a manual contract start edit: validate the new value and
        capture the prior cell value. Nothing is written.

        Raises:
            InvalidDateException: If the new value is not a date
        """
        new_start = coerce_date(new_value, "contract start")
        if new_start is None:
            raise InvalidDateException(new_value, "contract start")
        pending = PendingStartChange(
            sheet_name=self.sheet.name,
            row=row,
            new_start=new_start,
            previous_value=decode_previous_value(old_value),
        )
        logger.info(f"[ContractDates] Proposed start change {pending.pending_id} for row {row}: {new_start}")
        return pending

    def apply_start_change(self, pending: PendingStartChange) -> Dict[str, Any]:
        """Confirmed start edit: reset the row to a fresh twelve-month term."""
        start, end = contract_term(pending.new_start)
        self._write_dates(pending.row, start, end)
        cleared = self.grid.clear_row(pending.row)
        self.grid.extend_to(end, start_from=start)
        filled = self.grid.fill_months(
            pending.row, MonthLabel.from_date(start), CONTRACT_TERM_MONTHS, STATUS_PAID, STATUS_PAID
        )
        logger.info(
            f"[ContractDates] Applied start change for row {pending.row}: {start} -> {end} "
            f"(cleared {cleared}, filled {len(filled)})"
        )
        return {
            "row": pending.row,
            "contract_start": start.isoformat(),
            "contract_end": end.isoformat(),
            "cells_cleared": cleared,
            "months_filled": [label.token for label in filled],
        }

    def reject_start_change(self, pending: PendingStartChange) -> None:
        """Declined start edit: put back exactly what the cell held before."""
        if pending.previous_value is None:
            self.sheet.clear_value(pending.row, CONTRACT_START_COLUMN)
        else:
            self.sheet.set_value(pending.row, CONTRACT_START_COLUMN, pending.previous_value)
        logger.info(f"[ContractDates] Rolled back start change for row {pending.row}")

    def apply_end_change(self, row: int, new_value: Any) -> Dict[str, Any]:
        """
        Manual contract end edit.

        The end is normalised to the last day of the entered month. Filling
        resumes after the last populated month (first new month "renew", the
        rest "paid") or, for a row without monthly data, at the contract start
        month with every month "paid". Filled cells are never overwritten and
        an earlier end never removes anything.

        Raises:
            InvalidDateException: If the new value is not a date
        """
        entered = coerce_date(new_value, "contract end")
        if entered is None:
            raise InvalidDateException(new_value, "contract end")
        new_end = last_of_month(entered)
        self._write_dates(row, None, new_end)
        result = {"row": row, "contract_end": new_end.isoformat(), "months_filled": []}

        last_filled = self.grid.last_filled_month(row)
        if last_filled is not None:
            fill_start = last_filled.next()
            extension = True
        else:
            contract_start = read_row(self.sheet, row).contract_start
            if contract_start is None:
                logger.info(f"[ContractDates] Row {row} has no monthly data or contract start; nothing to fill")
                return result
            fill_start = MonthLabel.from_date(contract_start)
            extension = False

        end_label = MonthLabel.from_date(new_end)
        if fill_start > end_label:
            logger.info(f"[ContractDates] Row {row}: end {new_end} is not past filled months; no change")
            return result

        self.grid.extend_to(new_end, start_from=fill_start.first_day)

        filled = []
        label = fill_start
        while label <= end_label:
            if self.grid.get_cell(row, label) is None:
                value = STATUS_RENEW if extension and not filled else STATUS_PAID
                if self.grid.set_cell(row, label, value):
                    filled.append(label)
            label = label.next()

        logger.info(f"[ContractDates] Row {row}: end set to {new_end}, filled {len(filled)} month(s)")
        result["months_filled"] = [label.token for label in filled]
        return result

    def renew(self, row: TrackerRow) -> Optional[Tuple[date, date]]:
        """Extend a "Renew" row by one year and mark it Renewed."""
        if row.contract_end is None:
            logger.warning(f"[ContractDates] Row {row.row} ({row.company}) has no contract end; cannot renew")
            return None

        new_start, new_end = renewal_term(row.contract_end)
        self._write_dates(row.row, new_start, new_end)
        self.grid.extend_to(new_end, start_from=new_start)
        self.grid.fill_months(
            row.row, MonthLabel.from_date(new_start), CONTRACT_TERM_MONTHS, STATUS_RENEW, STATUS_PAID
        )
        self.sheet.set_value(row.row, RENEWAL_STATUS_COLUMN, RENEWAL_RENEWED)
        logger.info(f"[ContractDates] Renewed row {row.row} ({row.company}): {new_start} -> {new_end}")
        return new_start, new_end

    def terminate(self, row: TrackerRow) -> bool:
        """Mark the final contract month "terminate" and the row Terminated."""
        if row.contract_end is None:
            logger.warning(f"[ContractDates] Row {row.row} ({row.company}) has no contract end; cannot terminate")
            return False

        self.grid.extend_to(row.contract_end, start_from=row.contract_start)
        marked = self.grid.set_cell(row.row, MonthLabel.from_date(row.contract_end), STATUS_TERMINATE)
        self.sheet.set_value(row.row, RENEWAL_STATUS_COLUMN, RENEWAL_TERMINATED)
        logger.info(f"[ContractDates] Terminated row {row.row} ({row.company}) at {row.contract_end}")
        return marked
