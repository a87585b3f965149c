"""
Activity log API router.
"""

from fastapi import APIRouter, HTTPException
from typing import Optional

from contract_tracker.api.dependencies import get_logger, get_core_utils
from contract_tracker.api.utils.responses import paginated_response, error_response
from contract_tracker.api.utils.validators import validate_pagination, validate_activity_type_param
from contract_tracker.logics.activity_log import list_activity

router = APIRouter()
logger = get_logger(__name__)


@router.get("/api/activity")
def get_activity_log(
    limit: int = 50,
    offset: int = 0,
    activity_type: Optional[str] = None,
    user: Optional[str] = None
):
    """
    List activity log entries, newest first.

    Query Parameters:
        limit: Records per page (max 100)
        offset: Records to skip
        activity_type: Filter by activity type (optional)
        user: Filter by user (optional)

    Returns:
        Paginated list of entries with decoded SummaryData
    """
    limit, offset = validate_pagination(limit, offset)
    validate_activity_type_param(activity_type)

    try:
        result = list_activity(get_core_utils(), limit, offset, activity_type, user)
        return paginated_response(result["records"], result["total"], limit, offset)

    except Exception as e:
        logger.error(f"Error listing activity log: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=error_response("Internal server error", str(e))
        )
