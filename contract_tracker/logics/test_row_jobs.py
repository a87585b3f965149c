"""
Tests for the row-moving batch jobs: intake, archive, duplicate removal, sort.

Run with:
    python3 -m pytest contract_tracker/logics/test_row_jobs.py -v
"""

from datetime import date, datetime

from contract_tracker.logics.archive_jobs import archive_terminated_rows, remove_archived_duplicates
from contract_tracker.logics.intake import import_form_responses
from contract_tracker.logics.config.tracker_columns import MONTHLY_STATUSES
from contract_tracker.logics.month_grid import MonthGrid, MonthLabel
from contract_tracker.logics.tracker_sort import sort_by_contract_start

STAMP = datetime(2026, 3, 1, 9, 30)
FIRST_HALF = [MonthLabel(2026, 1).shift(i).token for i in range(6)]


def companies(sheet, start_row=3):
    return [values[1] for values in sheet.read_rows(start_row, 2)]


# ============================================================================
# 1. Intake
# ============================================================================

class TestIntake:

    def test_new_companies_are_appended(self, make_store, row_values):
        store = make_store(
            rows=[row_values("Delta", pilot="P4")],
            archive_rows=[row_values("Gamma")],
            form_rows=[
                [STAMP, "Acme", "Kuala Lumpur", "acme@example.com"],
                [STAMP, "  Beta  ", "Penang", "beta@example.com"],
                [STAMP, "Acme", "Kuala Lumpur", "acme@example.com"],
                [STAMP, "Gamma", "Ipoh", "gamma@example.com"],
                [STAMP, "Delta", "Johor", "delta@example.com"],
                [STAMP, None, None, None],
            ],
        )

        result = import_form_responses(store)

        assert result["added"] == [{"row": 4, "company": "Acme"}, {"row": 5, "company": "Beta"}]
        assert result["skipped"] == 4
        assert result["total_responses"] == 6

        tracker = store.sheet("Tracker")
        assert tracker.read_range(4, 1, 1, 4) == [[None, "Acme", "Kuala Lumpur", "acme@example.com"]]
        assert tracker.get_value(5, 2) == "Beta"

    def test_rerun_adds_nothing(self, make_store):
        store = make_store(form_rows=[[STAMP, "Acme", "KL", "acme@example.com"]])
        import_form_responses(store)

        result = import_form_responses(store)

        assert result["added"] == []
        assert companies(store.sheet("Tracker")) == ["Acme"]

    def test_timestamp_without_company_is_skipped(self, make_store):
        store = make_store(form_rows=[[STAMP, None, None, None], [STAMP, "  ", "KL", None]])

        result = import_form_responses(store)

        assert result["added"] == []
        assert result["skipped"] == 2
        assert companies(store.sheet("Tracker")) == []

    def test_empty_form(self, make_store):
        result = import_form_responses(make_store())
        assert result == {"added": [], "skipped": 0, "total_responses": 0}


# ============================================================================
# 2. Archive
# ============================================================================

class TestArchive:

    def test_terminated_rows_move_to_archive(self, make_store, row_values):
        store = make_store(
            rows=[
                row_values("Acme", months=["paid", "paid", "terminate"]),
                row_values("Beta", months=["paid"] * 6),
                row_values("Gamma", months=["paid", "TERMINATE"]),
            ],
            months=FIRST_HALF,
        )

        result = archive_terminated_rows(store)

        assert result["count"] == 2
        assert {item["company"] for item in result["archived"]} == {"Acme", "Gamma"}
        assert companies(store.sheet("Tracker")) == ["Beta"]

        archive = store.sheet("Archive")
        assert sorted(companies(archive)) == ["Acme", "Gamma"]
        acme_row = next(item["archive_row"] for item in result["archived"] if item["company"] == "Acme")
        assert archive.get_value(acme_row, 11) == "terminate"

    def test_status_rule_follows_shifted_rows(self, make_store, row_values):
        store = make_store(
            rows=[row_values("Acme", months=["terminate"]), row_values("Beta")],
            months=FIRST_HALF,
        )
        sheet = store.sheet("Tracker")
        MonthGrid(sheet).set_cell(4, MonthLabel(2026, 2), "paid")

        archive_terminated_rows(store)

        assert companies(sheet) == ["Beta"]
        assert sheet.get_value(3, 10) == "paid"
        assert sheet.get_list_validation(3, 10) == MONTHLY_STATUSES
        assert sheet.get_list_validation(4, 10) is None

    def test_nothing_to_archive(self, make_store, row_values):
        store = make_store(rows=[row_values("Beta", months=["paid"])], months=FIRST_HALF)
        assert archive_terminated_rows(store)["count"] == 0
        assert companies(store.sheet("Tracker")) == ["Beta"]


class TestRemoveArchivedDuplicates:

    def test_case_and_space_insensitive(self, make_store, row_values):
        store = make_store(
            rows=[row_values(" acme corp "), row_values("Beta"), row_values("ACME CORP")],
            archive_rows=[row_values("Acme Corp")],
        )

        result = remove_archived_duplicates(store)

        assert result["count"] == 2
        assert companies(store.sheet("Tracker")) == ["Beta"]

    def test_empty_archive(self, make_store, row_values):
        store = make_store(rows=[row_values("Acme")])
        assert remove_archived_duplicates(store)["count"] == 0


# ============================================================================
# 3. Sort
# ============================================================================

class TestSort:

    def test_sorted_by_start_blanks_last(self, make_store, row_values):
        store = make_store(
            rows=[
                row_values("Acme", start=date(2026, 5, 1), months=["a"]),
                row_values("Beta", months=["b"]),
                row_values("Gamma", start=date(2026, 1, 1), months=["g"]),
                row_values("", start=date(2025, 1, 1)),
                row_values("Delta", start=date(2026, 3, 1)),
            ],
            months=FIRST_HALF,
        )
        sheet = store.sheet("Tracker")
        for offset in range(5):
            sheet.set_value(3 + offset, 1, offset + 1)

        result = sort_by_contract_start(store)

        assert result == {"rows_sorted": 5, "rows_without_start": 2}
        assert [values[1] for values in sheet.read_rows(3, 2)] == ["Gamma", "Delta", "Acme", "Beta", ""]
        # S/N column stays put
        assert [values[0] for values in sheet.read_rows(3, 1)] == [1, 2, 3, 4, 5]
        # Month cells travel with their row
        assert sheet.get_value(3, 9) == "g"
        assert sheet.get_value(5, 9) == "a"
        assert sheet.get_value(6, 9) == "b"

    def test_status_rule_follows_moved_cells(self, make_store, row_values):
        store = make_store(
            rows=[
                row_values("X", start=date(2024, 3, 1)),
                row_values("Y"),
                row_values("Z", start=date(2023, 1, 1)),
            ],
            months=["Jan-2023", "Feb-2023"],
        )
        sheet = store.sheet("Tracker")
        grid = MonthGrid(sheet)
        grid.set_cell(3, MonthLabel(2023, 2), "paid")
        grid.set_cell(5, MonthLabel(2023, 1), "paid")

        sort_by_contract_start(store)

        assert companies(sheet) == ["Z", "X", "Y"]
        assert sheet.get_list_validation(3, 9) == MONTHLY_STATUSES
        assert sheet.get_list_validation(4, 10) == MONTHLY_STATUSES
        assert sheet.get_list_validation(5, 9) is None
        assert sheet.get_list_validation(3, 10) is None

    def test_empty_tracker(self, make_store):
        assert sort_by_contract_start(make_store()) == {"rows_sorted": 0, "rows_without_start": 0}
