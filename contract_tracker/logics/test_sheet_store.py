"""
Tests for the workbook storage adapter.

Run with:
    python3 -m pytest contract_tracker/logics/test_sheet_store.py -v
"""

import pandas as pd
import pytest
from datetime import date, datetime

from openpyxl import Workbook

from contract_tracker.logics.exceptions import (
    InvalidDateException,
    SheetNotFoundException,
    WorkbookNotFoundException,
)
from contract_tracker.logics.sheet_store import (
    Sheet,
    WorkbookStore,
    cell_text,
    coerce_date,
    normalize_cell_value,
    serial_to_date,
)


def blank_sheet() -> Sheet:
    wb = Workbook()
    return Sheet(wb.active)


# ============================================================================
# 1. Value helpers
# ============================================================================

class TestValueHelpers:

    def test_serial_to_date(self):
        assert serial_to_date(46082) == date(2026, 3, 1)

    def test_serial_epoch_day_one(self):
        assert serial_to_date(1) == date(1899, 12, 31)

    def test_midnight_datetime_becomes_date(self):
        assert normalize_cell_value(datetime(2026, 3, 1)) == date(2026, 3, 1)

    def test_datetime_with_time_is_kept(self):
        value = datetime(2026, 3, 1, 14, 30)
        assert normalize_cell_value(value) == value

    def test_cell_text_trims(self):
        assert cell_text("  Acme Ltd ") == "Acme Ltd"

    def test_cell_text_integer_float(self):
        assert cell_text(1001.0) == "1001"

    def test_cell_text_none(self):
        assert cell_text(None) == ""

    @pytest.mark.parametrize("value", [pd.NaT, float("nan")])
    def test_cell_text_missing_values(self, value):
        assert cell_text(value) == ""


class TestCoerceDate:

    @pytest.mark.parametrize("value", [
        "2026-03-15",
        "15/03/2026",
        "15-Mar-2026",
        date(2026, 3, 15),
        datetime(2026, 3, 15, 9, 0),
    ])
    def test_accepted_inputs(self, value):
        assert coerce_date(value) == date(2026, 3, 15)

    def test_serial_number(self):
        assert coerce_date(46082) == date(2026, 3, 1)

    def test_serial_string(self):
        assert coerce_date("46082") == date(2026, 3, 1)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_none(self, value):
        assert coerce_date(value) is None

    def test_garbage_raises(self):
        with pytest.raises(InvalidDateException) as exc_info:
            coerce_date("next tuesday-ish", "contract start")
        assert exc_info.value.context["field"] == "contract start"

    @pytest.mark.parametrize("value", [20270331, "20270331", 1e12])
    def test_out_of_range_serial_raises(self, value):
        with pytest.raises(InvalidDateException) as exc_info:
            coerce_date(value, "contract end")
        assert exc_info.value.context["field"] == "contract end"

    def test_nat_is_none(self):
        assert coerce_date(pd.NaT) is None

    def test_bool_raises(self):
        with pytest.raises(InvalidDateException):
            coerce_date(True)


# ============================================================================
# 2. Sheet primitives
# ============================================================================

class TestSheet:

    def test_empty_sheet_bounds(self):
        sheet = blank_sheet()
        assert sheet.last_row() == 0
        assert sheet.last_column() == 0
        assert sheet.read_rows(1) == []

    def test_set_and_get_date(self):
        sheet = blank_sheet()
        sheet.set_value(3, 7, date(2026, 3, 1))
        assert sheet.get_value(3, 7) == date(2026, 3, 1)
        assert sheet.worksheet.cell(row=3, column=7).number_format == "yyyy-mm-dd"

    def test_read_range_pads_missing_cells(self):
        sheet = blank_sheet()
        sheet.set_value(1, 1, "a")
        sheet.set_value(2, 3, "c")
        assert sheet.read_range(1, 1, 2, 3) == [["a", None, None], [None, None, "c"]]

    def test_append_row_goes_after_last_used_row(self):
        sheet = blank_sheet()
        sheet.set_value(1, 1, "header")
        sheet.set_value(4, 2, "last")
        row = sheet.append_row(["x", "y"])
        assert row == 5
        assert sheet.read_range(5, 1, 1, 2) == [["x", "y"]]

    def test_delete_row_shifts_up(self):
        sheet = blank_sheet()
        sheet.write_range(1, 1, [["one"], ["two"], ["three"]])
        sheet.delete_row(2)
        assert sheet.read_rows(1, 1) == [["one"], ["three"]]

    def test_background_set_read_and_clear(self):
        sheet = blank_sheet()
        sheet.set_background(3, 1, 4, "f4c7c3")
        assert sheet.get_background(3, 1) == "F4C7C3"
        assert sheet.get_background(3, 4) == "F4C7C3"
        assert sheet.get_background(3, 5) is None

        sheet.set_background(3, 1, 4, None)
        assert sheet.get_background(3, 1) is None

    def test_list_validation_reuses_one_rule(self):
        sheet = blank_sheet()
        sheet.set_list_validation(3, 9, ["paid", "renew"])
        sheet.set_list_validation(4, 10, ["paid", "renew"])
        sheet.set_list_validation(4, 10, ["paid", "renew"])

        assert len(sheet.worksheet.data_validations.dataValidation) == 1
        assert sheet.get_list_validation(3, 9) == ["paid", "renew"]
        assert sheet.get_list_validation(4, 10) == ["paid", "renew"]
        assert sheet.get_list_validation(5, 10) is None

    def test_clear_list_validation_only_inside_block(self):
        sheet = blank_sheet()
        for row, column in [(2, 9), (3, 9), (4, 10), (5, 12)]:
            sheet.set_list_validation(row, column, ["paid", "renew"])

        sheet.clear_list_validation(3, 9, 10)

        assert sheet.get_list_validation(2, 9) == ["paid", "renew"]
        assert sheet.get_list_validation(3, 9) is None
        assert sheet.get_list_validation(4, 10) is None
        assert sheet.get_list_validation(5, 12) == ["paid", "renew"]

    def test_clear_removes_values(self):
        sheet = blank_sheet()
        sheet.write_range(1, 1, [["a", "b"], ["c", "d"]])
        sheet.clear()
        assert sheet.last_row() == 0


# ============================================================================
# 3. WorkbookStore
# ============================================================================

class TestWorkbookStore:

    def test_missing_sheet_raises_404(self, make_store):
        store = make_store()
        with pytest.raises(SheetNotFoundException) as exc_info:
            store.sheet("Nope")
        assert exc_info.value.http_status == 404
        assert "Tracker" in exc_info.value.context["available_sheets"]

    def test_get_or_create_sheet(self, make_store):
        store = make_store()
        assert "Renewal Status" not in store.sheet_names()
        store.get_or_create_sheet("Renewal Status")
        assert "Renewal Status" in store.sheet_names()

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(WorkbookNotFoundException):
            WorkbookStore.load(str(tmp_path / "missing.xlsx"))

    def test_save_and_reload_keeps_dates(self, tmp_path, make_workbook, row_values):
        path = str(tmp_path / "tracker.xlsx")
        make_workbook(rows=[row_values("Acme", start=date(2026, 3, 1))]).save(path)

        store = WorkbookStore.load(path)
        store.sheet("Tracker").set_value(3, 8, date(2027, 2, 28))
        store.save()

        reloaded = WorkbookStore.load(path).sheet("Tracker")
        assert reloaded.get_value(3, 2) == "Acme"
        assert reloaded.get_value(3, 7) == date(2026, 3, 1)
        assert reloaded.get_value(3, 8) == date(2027, 2, 28)

    def test_save_without_path_is_noop(self, make_store):
        make_store().save()
