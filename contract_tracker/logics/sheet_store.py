"""
Workbook storage adapter.

Wraps an openpyxl workbook behind the handful of primitives the tracker logic
needs (range read/write, single cells, append/delete row, background fill and
list validation). Cell values are normalised here so callers never branch on
raw cell types: datetimes at midnight come back as dates, and any date-ish
input can be coerced with ``coerce_date``.
"""

import logging
import os
import re
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Sequence

import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.styles import PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.cell_range import MultiCellRange
from openpyxl.worksheet.datavalidation import DataValidation
from openpyxl.worksheet.worksheet import Worksheet

from contract_tracker.logics.exceptions import (
    InvalidDateException,
    SheetNotFoundException,
    WorkbookNotFoundException,
)

logger = logging.getLogger(__name__)

# Day zero for spreadsheet date serials
SERIAL_EPOCH = date(1899, 12, 30)

DATE_INPUT_FORMATS = ["%Y-%m-%d", "%d/%m/%Y", "%d-%b-%Y", "%d %b %Y", "%b %d, %Y"]
DATE_NUMBER_FORMAT = "yyyy-mm-dd"


def serial_to_date(serial: float, field: str = "date") -> date:
    """
    Convert a spreadsheet day-count serial to a calendar date.

    >>> serial_to_date(46082)
    datetime.date(2026, 3, 1)

    Raises:
        InvalidDateException: If the serial falls outside the calendar range
    """
    try:
        return SERIAL_EPOCH + timedelta(days=int(serial))
    except (OverflowError, ValueError) as e:
        logger.warning(f"[SheetStore] Date serial out of range for {field}: {serial!r}")
        raise InvalidDateException(serial, field) from e


def normalize_cell_value(value: Any) -> Any:
    """Collapse midnight datetimes to dates; leave everything else alone."""
    if isinstance(value, datetime):
        if value.hour == 0 and value.minute == 0 and value.second == 0 and value.microsecond == 0:
            return value.date()
    return value


def is_blank(value: Any) -> bool:
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, float):
        return pd.isna(value)
    return isinstance(value, str) and not value.strip()


def cell_text(value: Any) -> str:
    """Trimmed string form of a cell value ('' for blanks, NaN and NaT included)."""
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def coerce_date(value: Any, field: str = "date") -> Optional[date]:
    """
    Read a cell or request value as a date.

    Accepts dates, datetimes, spreadsheet serials (int/float or digit strings)
    and common textual formats. Blank values return None.

    Raises:
        InvalidDateException: If the value cannot be read as a date
    """
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise InvalidDateException(value, field)
    if isinstance(value, (int, float)):
        return serial_to_date(value, field)

    text = str(value).strip()
    if re.fullmatch(r"\d+(\.\d+)?", text):
        return serial_to_date(float(text), field)

    for fmt in DATE_INPUT_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    try:
        return pd.to_datetime(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        logger.warning(f"[SheetStore] Unparseable date for {field}: {text!r} ({e})")
        raise InvalidDateException(value, field) from e


class Sheet:
    """One worksheet, addressed with 1-based (row, column) coordinates."""

    def __init__(self, worksheet: Worksheet):
        self.worksheet = worksheet

    @property
    def name(self) -> str:
        return self.worksheet.title

    def last_row(self) -> int:
        """Index of the last row holding any value (0 for an empty sheet)."""
        last = 0
        for index, values in enumerate(self.worksheet.iter_rows(values_only=True), start=1):
            if any(not is_blank(v) for v in values):
                last = index
        return last

    def width(self) -> int:
        """Allocated column count (may include trailing blank columns)."""
        return self.worksheet.max_column

    def last_column(self) -> int:
        """Index of the last column holding any value (0 for an empty sheet)."""
        last = 0
        for values in self.worksheet.iter_rows(values_only=True):
            for index, value in enumerate(values, start=1):
                if not is_blank(value) and index > last:
                    last = index
        return last

    def read_range(self, row: int, column: int, num_rows: int, num_columns: int) -> List[List[Any]]:
        if num_rows <= 0 or num_columns <= 0:
            return []
        rows = self.worksheet.iter_rows(
            min_row=row,
            max_row=row + num_rows - 1,
            min_col=column,
            max_col=column + num_columns - 1,
            values_only=True
        )
        return [[normalize_cell_value(v) for v in values] for values in rows]

    def read_rows(self, start_row: int, num_columns: Optional[int] = None) -> List[List[Any]]:
        """All rows from start_row to the last used row, padded to num_columns."""
        last = self.last_row()
        width = num_columns if num_columns is not None else self.last_column()
        if last < start_row:
            return []
        return self.read_range(start_row, 1, last - start_row + 1, width)

    def write_range(self, row: int, column: int, values: Sequence[Sequence[Any]]) -> None:
        for row_offset, row_values in enumerate(values):
            for col_offset, value in enumerate(row_values):
                self.set_value(row + row_offset, column + col_offset, value)

    def get_value(self, row: int, column: int) -> Any:
        return normalize_cell_value(self.worksheet.cell(row=row, column=column).value)

    def set_value(self, row: int, column: int, value: Any) -> None:
        cell = self.worksheet.cell(row=row, column=column)
        cell.value = value
        if isinstance(value, date):
            cell.number_format = DATE_NUMBER_FORMAT

    def clear_value(self, row: int, column: int) -> None:
        self.worksheet.cell(row=row, column=column).value = None

    def append_row(self, values: Sequence[Any]) -> int:
        """Write values on the row after the last used row; returns its index."""
        row = self.last_row() + 1
        for col_offset, value in enumerate(values):
            self.set_value(row, 1 + col_offset, value)
        return row

    def delete_row(self, row: int) -> None:
        self.worksheet.delete_rows(row, 1)

    def set_background(self, row: int, column: int, num_columns: int, color: Optional[str]) -> None:
        """Fill a horizontal run of cells; color=None clears the fill."""
        if color:
            fill = PatternFill(fill_type="solid", start_color=color, end_color=color)
        else:
            fill = PatternFill(fill_type=None)
        for col in range(column, column + num_columns):
            self.worksheet.cell(row=row, column=col).fill = fill

    def get_background(self, row: int, column: int) -> Optional[str]:
        fill = self.worksheet.cell(row=row, column=column).fill
        if fill is None or fill.fill_type != "solid":
            return None
        rgb = fill.start_color.rgb
        if not isinstance(rgb, str):
            return None
        return rgb[-6:].upper()

    def _find_list_validation(self, formula: str) -> Optional[DataValidation]:
        for validation in self.worksheet.data_validations.dataValidation:
            if validation.type == "list" and validation.formula1 == formula:
                return validation
        return None

    def set_list_validation(self, row: int, column: int, choices: Sequence[str]) -> None:
        """Restrict a cell to a fixed list of choices, reusing one rule per choice list."""
        formula = '"{}"'.format(",".join(choices))
        validation = self._find_list_validation(formula)
        if validation is None:
            validation = DataValidation(type="list", formula1=formula, allow_blank=True)
            validation.error = "Choose one of: " + ", ".join(choices)
            validation.showErrorMessage = True
            self.worksheet.add_data_validation(validation)

        coordinate = f"{get_column_letter(column)}{row}"
        if coordinate not in validation.sqref:
            validation.add(coordinate)

    def clear_list_validation(self, min_row: int, min_col: int, max_col: int, max_row: Optional[int] = None) -> None:
        """Detach list rules from every cell in the block; max_row=None runs to the bottom of the sheet."""
        for validation in self.worksheet.data_validations.dataValidation:
            if validation.type != "list":
                continue
            kept = MultiCellRange()
            for cell_range in validation.sqref.ranges:
                for row, column in cell_range.cells:
                    inside = min_row <= row and (max_row is None or row <= max_row) and min_col <= column <= max_col
                    if not inside:
                        kept.add(f"{get_column_letter(column)}{row}")
            validation.sqref = kept

    def get_list_validation(self, row: int, column: int) -> Optional[List[str]]:
        """Choices attached to a cell, or None when no list rule covers it."""
        coordinate = f"{get_column_letter(column)}{row}"
        for validation in self.worksheet.data_validations.dataValidation:
            if validation.type == "list" and coordinate in validation.sqref:
                return validation.formula1.strip('"').split(",")
        return None

    def clear(self) -> None:
        """Remove every value on the sheet (formatting is kept)."""
        for row in self.worksheet.iter_rows():
            for cell in row:
                cell.value = None


class WorkbookStore:
    """Named-sheet access to a workbook, optionally bound to a file on disk."""

    def __init__(self, workbook: Workbook, path: Optional[str] = None):
        self.workbook = workbook
        self.path = path

    @classmethod
    def load(cls, path: str) -> "WorkbookStore":
        if not os.path.exists(path):
            logger.error(f"[SheetStore] Workbook not found at {path}")
            raise WorkbookNotFoundException(path)
        logger.debug(f"[SheetStore] Loading workbook {path}")
        return cls(load_workbook(path), path)

    def sheet_names(self) -> List[str]:
        return list(self.workbook.sheetnames)

    def sheet(self, name: str) -> Sheet:
        if name not in self.workbook.sheetnames:
            logger.error(f"[SheetStore] Missing sheet '{name}' (available: {self.workbook.sheetnames})")
            raise SheetNotFoundException(name, self.sheet_names())
        return Sheet(self.workbook[name])

    def get_or_create_sheet(self, name: str) -> Sheet:
        if name not in self.workbook.sheetnames:
            logger.info(f"[SheetStore] Creating sheet '{name}'")
            self.workbook.create_sheet(title=name)
        return Sheet(self.workbook[name])

    def save(self) -> None:
        if not self.path:
            return
        self.workbook.save(self.path)
        logger.debug(f"[SheetStore] Saved workbook {self.path}")
