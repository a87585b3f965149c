"""
Shared pytest fixtures: in-memory tracker workbooks.
"""

import pytest
from openpyxl import Workbook

from contract_tracker.logics.config.tracker_columns import (
    TRACKER_HEADERS,
    YEAR_LABEL_ROW,
    MONTH_LABEL_ROW,
    DATA_START_ROW,
    FIRST_MONTH_COLUMN,
)
from contract_tracker.logics.intake import FORM_COLUMNS
from contract_tracker.logics.sheet_store import WorkbookStore
from contract_tracker.settings import FORM_SHEET_NAME, TRACKER_SHEET_NAME, ARCHIVE_SHEET_NAME


def _tracker_layout(ws, months, rows):
    for column, header in enumerate(TRACKER_HEADERS, start=1):
        ws.cell(row=MONTH_LABEL_ROW, column=column, value=header)
    for offset, token in enumerate(months):
        column = FIRST_MONTH_COLUMN + offset
        ws.cell(row=MONTH_LABEL_ROW, column=column, value=token)
        if token.startswith("Jan-"):
            ws.cell(row=YEAR_LABEL_ROW, column=column, value=int(token[-4:]))
    for offset, values in enumerate(rows):
        for column, value in enumerate(values, start=1):
            ws.cell(row=DATA_START_ROW + offset, column=column, value=value)


def build_workbook(rows=(), months=(), form_rows=(), archive_rows=(), archive_months=()) -> Workbook:
    """Form Responses, Tracker and Archive sheets laid out like the live workbook."""
    wb = Workbook()
    wb.remove(wb.active)

    form = wb.create_sheet(FORM_SHEET_NAME)
    form.append(FORM_COLUMNS)
    for values in form_rows:
        form.append(list(values))

    _tracker_layout(wb.create_sheet(TRACKER_SHEET_NAME), list(months), list(rows))
    _tracker_layout(wb.create_sheet(ARCHIVE_SHEET_NAME), list(archive_months), list(archive_rows))
    return wb


def tracker_values(company="", location="", email="", pilot="", status="", start=None, end=None, months=()):
    """Cell values for one tracker row; S/N is left to the sheet formula."""
    return [None, company, location, email, pilot, status, start, end] + list(months)


@pytest.fixture
def make_workbook():
    return build_workbook


@pytest.fixture
def make_store():
    def _make(**kwargs) -> WorkbookStore:
        return WorkbookStore(build_workbook(**kwargs))
    return _make


@pytest.fixture
def row_values():
    return tracker_values
