"""
Month grid management for the tracker sheet.

The monthly status columns start at FIRST_MONTH_COLUMN and are identified by a
two-row header band: the numeric year (written only above January columns)
and a month label token such as "Mar-2026". Columns are contiguous, ordered
left to right and never removed.
"""

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from contract_tracker.logics.config.tracker_columns import (
    FIRST_MONTH_COLUMN,
    YEAR_LABEL_ROW,
    MONTH_LABEL_ROW,
    MONTHLY_STATUSES,
)
from contract_tracker.logics.sheet_store import Sheet, is_blank, cell_text

logger = logging.getLogger(__name__)

MONTH_ABBRS = list(calendar.month_abbr)[1:]  # ['Jan', ..., 'Dec']


@dataclass(frozen=True, order=True)
class MonthLabel:
    """
    A (year, month) pair with the header token form "Mon-YYYY".

    Example:
        >>> MonthLabel.parse("Mar-2026")
        MonthLabel(year=2026, month=3)
        >>> MonthLabel(2026, 12).next().token
        'Jan-2027'
    """
    year: int
    month: int

    @classmethod
    def from_date(cls, value: date) -> "MonthLabel":
        return cls(value.year, value.month)

    @classmethod
    def parse(cls, token: str) -> "MonthLabel":
        match = re.fullmatch(r"([A-Za-z]{3})-(\d{4})", token.strip())
        if not match:
            raise ValueError(f"Invalid month label: {token!r}")
        month_str, year_str = match.groups()
        try:
            month = [abbr.lower() for abbr in MONTH_ABBRS].index(month_str.lower()) + 1
        except ValueError:
            raise ValueError(f"Invalid month label: {token!r}")
        return cls(int(year_str), month)

    @classmethod
    def from_cell(cls, value: Any) -> Optional["MonthLabel"]:
        """Header cell to label; date-typed headers are read by their month."""
        if isinstance(value, date):
            return cls.from_date(value)
        if is_blank(value):
            return None
        try:
            return cls.parse(str(value))
        except ValueError:
            return None

    @property
    def token(self) -> str:
        return f"{MONTH_ABBRS[self.month - 1]}-{self.year}"

    def shift(self, months: int) -> "MonthLabel":
        index = self.year * 12 + (self.month - 1) + months
        return MonthLabel(index // 12, index % 12 + 1)

    def next(self) -> "MonthLabel":
        return self.shift(1)

    def months_until(self, other: "MonthLabel") -> int:
        """Whole months from this label to other (negative if other is earlier)."""
        return (other.year - self.year) * 12 + (other.month - self.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def __str__(self) -> str:
        return self.token


class MonthGrid:
    """Owns the monthly columns of one sheet and the status cells beneath them."""

    def __init__(self, sheet: Sheet, first_column: int = FIRST_MONTH_COLUMN):
        self.sheet = sheet
        self.first_column = first_column

    def columns(self) -> List[Tuple[int, MonthLabel]]:
        """(column index, label) for every month column, left to right."""
        result = []
        last = self.sheet.width()
        if last < self.first_column:
            return result
        headers = self.sheet.read_range(MONTH_LABEL_ROW, self.first_column, 1, last - self.first_column + 1)[0]
        for offset, value in enumerate(headers):
            label = MonthLabel.from_cell(value)
            if label is not None:
                result.append((self.first_column + offset, label))
        return result

    def find_column(self, label: MonthLabel) -> Optional[int]:
        for column, existing in self.columns():
            if existing == label:
                return column
        return None

    def last_month(self) -> Optional[Tuple[int, MonthLabel]]:
        columns = self.columns()
        return columns[-1] if columns else None

    def extend_to(self, target: date, start_from: Optional[date] = None) -> List[MonthLabel]:
        """
        Append month columns up to and including the month containing target.

        New columns start after the rightmost existing month column; an empty
        grid starts at start_from's month (or target's month). Only January
        columns get the numeric year in the year row. Calling again with the
        same or an earlier target adds nothing.

        Returns:
            Labels of the columns that were added
        """
        target_label = MonthLabel.from_date(target)
        last = self.last_month()

        if last is None:
            next_column = self.first_column
            next_label = MonthLabel.from_date(start_from) if start_from else target_label
            if next_label > target_label:
                next_label = target_label
        else:
            last_column, last_label = last
            if target_label <= last_label:
                return []
            next_column = last_column + 1
            next_label = last_label.next()

        added = []
        while next_label <= target_label:
            self.sheet.set_value(MONTH_LABEL_ROW, next_column, next_label.token)
            if next_label.month == 1:
                self.sheet.set_value(YEAR_LABEL_ROW, next_column, next_label.year)
            added.append(next_label)
            next_column += 1
            next_label = next_label.next()

        if added:
            logger.info(f"[MonthGrid] Added {len(added)} month column(s): {added[0]} .. {added[-1]}")
        return added

    def set_cell(self, row: int, label: MonthLabel, value: str) -> bool:
        """Write a status cell and attach the status list rule. False if the month has no column."""
        column = self.find_column(label)
        if column is None:
            logger.warning(f"[MonthGrid] No column for {label} (row {row}); skipping '{value}'")
            return False
        self.sheet.set_value(row, column, value)
        self.sheet.set_list_validation(row, column, MONTHLY_STATUSES)
        return True

    def get_cell(self, row: int, label: MonthLabel) -> Optional[str]:
        column = self.find_column(label)
        if column is None:
            return None
        value = self.sheet.get_value(row, column)
        return None if is_blank(value) else cell_text(value)

    def row_statuses(self, row: int) -> Dict[MonthLabel, str]:
        """Non-empty status cells of a row keyed by month."""
        statuses = {}
        for column, label in self.columns():
            value = self.sheet.get_value(row, column)
            if not is_blank(value):
                statuses[label] = cell_text(value)
        return statuses

    def last_filled_month(self, row: int) -> Optional[MonthLabel]:
        statuses = self.row_statuses(row)
        return max(statuses) if statuses else None

    def clear_row(self, row: int) -> int:
        """Clear every cell from the first month column onward; returns cells cleared."""
        last = self.sheet.width()
        cleared = 0
        for column in range(self.first_column, last + 1):
            if not is_blank(self.sheet.get_value(row, column)):
                self.sheet.clear_value(row, column)
                cleared += 1
        return cleared

    def refresh_validation(self, start_row: int) -> int:
        """
        Reattach the status list rule after rows were moved or deleted.

        Sorting and row deletion move cell values but leave validation ranges at
        their old coordinates, so every rule below start_row is dropped and put
        back on the status cells that hold a value.

        Returns:
            Number of cells carrying the rule afterwards
        """
        columns = [column for column, _ in self.columns()]
        if not columns:
            return 0
        self.sheet.clear_list_validation(start_row, columns[0], columns[-1])

        attached = 0
        for row in range(start_row, self.sheet.last_row() + 1):
            for column in columns:
                if not is_blank(self.sheet.get_value(row, column)):
                    self.sheet.set_list_validation(row, column, MONTHLY_STATUSES)
                    attached += 1
        logger.debug(f"[MonthGrid] Status rule reattached to {attached} cell(s) from row {start_row}")
        return attached

    def fill_months(self, row: int, start: MonthLabel, count: int, first_value: str, rest_value: str) -> List[MonthLabel]:
        """Write count consecutive months from start; returns the months written."""
        written = []
        for offset in range(count):
            label = start.shift(offset)
            value = first_value if offset == 0 else rest_value
            if self.set_cell(row, label, value):
                written.append(label)
        return written
