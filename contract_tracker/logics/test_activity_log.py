"""
Tests for the activity log (SQLite-backed).

Run with:
    python3 -m pytest contract_tracker/logics/test_activity_log.py -v
"""

import pytest
from datetime import date, datetime

from contract_tracker.logics.activity_log import list_activity, record_activity
from contract_tracker.logics.config.activity_types import (
    ACTIVITY_EDIT,
    ACTIVITY_RENEWAL_SYNC,
    validate_activity_type,
)
from contract_tracker.logics.core_utils import CoreUtils


@pytest.fixture
def core_utils(tmp_path):
    return CoreUtils(f"sqlite:///{tmp_path / 'activity.db'}")


class TestRecordActivity:

    def test_round_trip(self, core_utils):
        activity_id = record_activity(
            core_utils,
            ACTIVITY_RENEWAL_SYNC,
            status="success",
            user="ops",
            summary={"renewed": [{"row": 3, "contract_end": date(2027, 12, 31)}]},
            records_affected=1,
        )

        result = list_activity(core_utils)

        assert result["total"] == 1
        record = result["records"][0]
        assert record["activity_id"] == activity_id
        assert record["ActivityType"] == ACTIVITY_RENEWAL_SYNC
        assert record["User"] == "ops"
        assert record["RecordsAffected"] == 1
        assert record["SummaryData"] == {"renewed": [{"row": 3, "contract_end": "2027-12-31"}]}
        assert datetime.fromisoformat(record["CreatedDateTime"]).date() == date.today()

    def test_edit_keeps_sheet_and_row(self, core_utils):
        record_activity(core_utils, ACTIVITY_EDIT, status="rejected", user="clerk", sheet_name="Tracker", row=4)

        record = list_activity(core_utils)["records"][0]

        assert record["SheetName"] == "Tracker"
        assert record["RowNumber"] == 4
        assert record["Status"] == "rejected"
        assert record["SummaryData"] is None

    def test_invalid_type_raises(self, core_utils):
        with pytest.raises(ValueError):
            record_activity(core_utils, "Not A Type", status="success", user="ops")


class TestListActivity:

    def test_newest_first_with_filters_and_paging(self, core_utils):
        for index in range(3):
            record_activity(core_utils, ACTIVITY_EDIT, status="applied", user=f"user{index}", row=3 + index)
        record_activity(core_utils, ACTIVITY_RENEWAL_SYNC, status="success", user="ops")

        everything = list_activity(core_utils, limit=10)
        assert everything["total"] == 4
        assert everything["records"][0]["ActivityType"] == ACTIVITY_RENEWAL_SYNC

        edits = list_activity(core_utils, limit=2, offset=0, activity_type=ACTIVITY_EDIT)
        assert edits["total"] == 3
        assert [record["User"] for record in edits["records"]] == ["user2", "user1"]

        assert list_activity(core_utils, user="user0")["records"][0]["RowNumber"] == 3


def test_validate_activity_type():
    assert validate_activity_type(ACTIVITY_EDIT) is True
    assert validate_activity_type("Bogus") is False
