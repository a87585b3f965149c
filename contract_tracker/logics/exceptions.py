"""
Custom exceptions for contract tracker operations.

Provides specific exception types for different failure scenarios with
structured error messages, context, and recommendations.
"""

from typing import Optional, Dict, Any, List


class TrackerException(Exception):
    """Base exception for contract tracker operations."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        recommendation: Optional[str] = None,
        http_status: int = 400
    ):
        self.message = message
        self.context = context or {}
        self.recommendation = recommendation
        self.http_status = http_status
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured error response."""
        error_dict = {
            "success": False,
            "error": self.message
        }
        if self.context:
            error_dict["context"] = self.context
        if self.recommendation:
            error_dict["recommendation"] = self.recommendation
        return error_dict


class WorkbookNotFoundException(TrackerException):
    """Raised when the tracker workbook file does not exist."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Tracker workbook not found: {path}",
            context={"path": path},
            recommendation="Check the [workbook] path setting in config.ini.",
            http_status=404
        )


class SheetNotFoundException(TrackerException):
    """Raised when an expected sheet is missing from the workbook."""

    def __init__(self, sheet_name: str, available: Optional[List[str]] = None):
        context = {"sheet": sheet_name}
        if available is not None:
            context["available_sheets"] = available

        super().__init__(
            message=f"Sheet not found: {sheet_name}",
            context=context,
            recommendation="Restore the sheet or update the [sheets] names in config.ini.",
            http_status=404
        )


class InvalidDateException(TrackerException):
    """Raised when a cell value cannot be read as a calendar date."""

    def __init__(self, value: Any, field: str):
        super().__init__(
            message=f"Could not read '{value}' as a date for {field}",
            context={"value": str(value), "field": field},
            recommendation="Enter the date as YYYY-MM-DD or pick it from the date picker.",
            http_status=400
        )


class DuplicatePilotNumberException(TrackerException):
    """Raised when a pilot number is already assigned to another row."""

    def __init__(self, pilot_number: str, row: int, existing_row: int):
        super().__init__(
            message=f"Pilot number {pilot_number} is already assigned in row {existing_row}",
            context={
                "pilot_number": pilot_number,
                "row": row,
                "existing_row": existing_row
            },
            recommendation="Pilot numbers must be unique. Enter a different pilot number.",
            http_status=409
        )


class PendingChangeNotFoundException(TrackerException):
    """Raised when a pending contract start change has expired or never existed."""

    def __init__(self, pending_id: str):
        super().__init__(
            message=f"Pending change not found: {pending_id}",
            context={"pending_id": pending_id},
            recommendation="The confirmation window may have expired. Edit the contract start again.",
            http_status=404
        )


class UnknownJobException(TrackerException):
    """Raised when a batch job name is not recognised."""

    def __init__(self, job_name: str, valid_jobs: List[str]):
        super().__init__(
            message=f"Unknown job: {job_name}",
            context={"job": job_name, "valid_jobs": valid_jobs},
            recommendation="Use one of the listed job names.",
            http_status=400
        )
