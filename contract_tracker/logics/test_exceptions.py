"""
Unit tests for custom tracker exceptions.

Tests that custom exceptions properly structure error information
with context, recommendations, and appropriate HTTP status codes.
"""

import pytest
from contract_tracker.logics.exceptions import (
    TrackerException,
    WorkbookNotFoundException,
    SheetNotFoundException,
    InvalidDateException,
    DuplicatePilotNumberException,
    PendingChangeNotFoundException,
    UnknownJobException,
)


class TestTrackerException:
    """Test base TrackerException functionality."""

    def test_basic_exception_creation(self):
        exc = TrackerException(
            message="Test error",
            context={"key": "value"},
            recommendation="Do something",
            http_status=400
        )

        assert exc.message == "Test error"
        assert exc.context == {"key": "value"}
        assert exc.recommendation == "Do something"
        assert exc.http_status == 400
        assert str(exc) == "Test error"

    def test_to_dict_conversion(self):
        exc = TrackerException(
            message="Test error",
            context={"row": 7},
            recommendation="Check the row"
        )

        error_dict = exc.to_dict()

        assert error_dict["success"] == False
        assert error_dict["error"] == "Test error"
        assert error_dict["context"]["row"] == 7
        assert error_dict["recommendation"] == "Check the row"

    def test_to_dict_without_optional_fields(self):
        error_dict = TrackerException(message="Simple error").to_dict()

        assert error_dict == {"success": False, "error": "Simple error"}


class TestSpecificExceptions:

    @pytest.mark.parametrize("exc, status", [
        (WorkbookNotFoundException("/tmp/tracker.xlsx"), 404),
        (SheetNotFoundException("Tracker", ["Archive"]), 404),
        (InvalidDateException("soon", "contract start"), 400),
        (DuplicatePilotNumberException("P100", 4, 3), 409),
        (PendingChangeNotFoundException("abc"), 404),
        (UnknownJobException("bogus", ["intake"]), 400),
    ])
    def test_http_status(self, exc, status):
        assert isinstance(exc, TrackerException)
        assert exc.http_status == status
        assert exc.recommendation

    def test_duplicate_pilot_context(self):
        exc = DuplicatePilotNumberException("P100", row=4, existing_row=3)
        assert exc.context == {"pilot_number": "P100", "row": 4, "existing_row": 3}
        assert "row 3" in exc.message

    def test_sheet_not_found_without_available(self):
        exc = SheetNotFoundException("Tracker")
        assert exc.context == {"sheet": "Tracker"}

    def test_unknown_job_lists_valid_jobs(self):
        exc = UnknownJobException("bogus", ["intake", "sort"])
        assert exc.to_dict()["context"]["valid_jobs"] == ["intake", "sort"]

    def test_can_be_raised_and_caught_as_base(self):
        with pytest.raises(TrackerException) as exc_info:
            raise InvalidDateException(46082.5, "contract end")
        assert exc_info.value.context == {"value": "46082.5", "field": "contract end"}
