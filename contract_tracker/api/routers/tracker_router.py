"""
Tracker edit endpoints.

Each call is one cell-edit event: the new value is written to the workbook,
then the edit dispatcher reacts to it. Contract start edits come back as
"confirmation_required" with a pending_id that must be confirmed or rejected
through the pending endpoint.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import Optional, Union

from contract_tracker.api.dependencies import get_logger, get_core_utils, workbook_session
from contract_tracker.api.utils.responses import success_response, error_response
from contract_tracker.cache import store_pending_change, take_pending_change
from contract_tracker.logics.activity_log import record_activity
from contract_tracker.logics.config.activity_types import ACTIVITY_EDIT, ACTIVITY_PENDING_RESOLVED
from contract_tracker.logics.config.tracker_columns import CONTRACT_START_COLUMN, CONTRACT_END_COLUMN
from contract_tracker.logics.edit_dispatcher import (
    EditDispatcher,
    EditEvent,
    OUTCOME_APPLIED,
)
from contract_tracker.logics.exceptions import (
    TrackerException,
    InvalidDateException,
    PendingChangeNotFoundException,
)
from contract_tracker.logics.sheet_store import coerce_date
from contract_tracker.settings import TRACKER_SHEET_NAME

# Initialize router and dependencies
router = APIRouter()
logger = get_logger(__name__)

DATE_COLUMNS = (CONTRACT_START_COLUMN, CONTRACT_END_COLUMN)


class EditEventRequest(BaseModel):
    """Request model for a single-cell edit."""
    sheet: str = TRACKER_SHEET_NAME
    row: int = Field(ge=1)
    column: int = Field(ge=1)
    value: Optional[Union[int, float, str]] = None
    old_value: Optional[Union[int, float, str]] = None
    user: str = "System"


class ResolvePendingRequest(BaseModel):
    """Request model for confirming or declining a contract start change."""
    confirm: bool
    user: str = "System"


def _cell_input(column: int, value):
    """Dates typed into date columns are stored as dates; anything else as given."""
    if column in DATE_COLUMNS:
        try:
            return coerce_date(value, "edited value") or value
        except InvalidDateException:
            return value
    return value


@router.post("/api/tracker/edit")
def submit_edit(request: EditEventRequest):
    """
    Apply a single-cell edit and run the edit trigger.

    Body Parameters (JSON):
        sheet: Sheet name (default: tracker sheet)
        row, column: 1-based cell coordinates
        value: New cell value (dates as YYYY-MM-DD)
        old_value: Previous value; read from the cell when omitted.
                   Date serial numbers are accepted.
        user: Username for the activity log

    Returns:
        Edit outcome: status (ignored / applied / rejected / confirmation_required),
        alerts for the user, changes made and, for contract start edits, the
        pending change to confirm
    """
    try:
        with workbook_session() as store:
            sheet = store.sheet(request.sheet)
            if "old_value" in request.model_fields_set:
                old_value = request.old_value
            else:
                old_value = sheet.get_value(request.row, request.column)

            sheet.set_value(request.row, request.column, _cell_input(request.column, request.value))

            event = EditEvent(
                sheet_name=request.sheet,
                row=request.row,
                column=request.column,
                value=request.value,
                old_value=old_value,
            )
            outcome = EditDispatcher(store).dispatch(event)

            if outcome.pending is not None:
                store_pending_change(outcome.pending)

            record_activity(
                get_core_utils(),
                ACTIVITY_EDIT,
                status=outcome.status,
                user=request.user,
                summary=outcome.to_dict(),
                records_affected=1 if outcome.status == OUTCOME_APPLIED else 0,
                sheet_name=request.sheet,
                row=request.row,
            )

        logger.info(f"[Edit] {request.sheet}!R{request.row}C{request.column} -> {outcome.status}")
        return success_response(data=outcome.to_dict(), message=" ".join(outcome.alerts) or None)

    except TrackerException as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error handling edit event: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=error_response("Internal server error", str(e))
        )


@router.post("/api/tracker/pending/{pending_id}")
def resolve_pending_change(pending_id: str, request: ResolvePendingRequest):
    """
    Confirm or decline a pending contract start change.

    Path Parameters:
        pending_id: ID returned by the edit endpoint

    Body Parameters (JSON):
        confirm: true to apply the change, false to restore the previous value
        user: Username for the activity log

    Error Codes:
        404: Pending change expired or already resolved
    """
    try:
        pending = take_pending_change(pending_id)
        if pending is None:
            raise PendingChangeNotFoundException(pending_id)

        with workbook_session() as store:
            outcome = EditDispatcher(store).resolve(pending, request.confirm)
            record_activity(
                get_core_utils(),
                ACTIVITY_PENDING_RESOLVED,
                status=outcome.status,
                user=request.user,
                summary=outcome.to_dict(),
                records_affected=1,
                sheet_name=pending.sheet_name,
                row=pending.row,
            )

        logger.info(f"[Edit] Pending change {pending_id} resolved: {outcome.status}")
        return success_response(data=outcome.to_dict(), message=" ".join(outcome.alerts) or None)

    except TrackerException as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error resolving pending change {pending_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=error_response("Internal server error", str(e))
        )
