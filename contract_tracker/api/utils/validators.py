"""
Request validation utilities for API endpoints.
"""

from typing import Tuple, Optional
from fastapi import HTTPException
from contract_tracker.api.utils.responses import error_response
from contract_tracker.logics.config.activity_types import ACTIVITY_TYPES


def validate_pagination(
    limit: int,
    offset: int,
    max_limit: int = 100
) -> Tuple[int, int]:
    """
    Validate and normalize pagination parameters.

    Returns:
        Tuple of (validated_limit, validated_offset)

    Raises:
        HTTPException: If limit is below 1 or offset is negative (400)

    Examples:
        limit, offset = validate_pagination(50, 0)
        limit, offset = validate_pagination(200, 0)  # Normalizes to (100, 0)
    """
    errors = {}

    if limit < 1:
        errors["limit"] = "Must be at least 1"
    elif limit > max_limit:
        limit = max_limit  # Auto-correct to max

    if offset < 0:
        errors["offset"] = "Must be non-negative"

    if errors:
        raise HTTPException(
            status_code=400,
            detail=error_response("Invalid pagination parameters", errors)
        )

    return limit, offset


def validate_activity_type_param(activity_type: Optional[str]) -> Optional[str]:
    """
    Validate optional activity type filter.

    Raises:
        HTTPException: If activity_type is given and unknown (400)
    """
    if activity_type is not None and activity_type not in ACTIVITY_TYPES:
        raise HTTPException(
            status_code=400,
            detail=error_response(
                f"Invalid activity type: {activity_type}",
                {"valid_activity_types": ACTIVITY_TYPES}
            )
        )
    return activity_type
