"""
Activity log for edits and batch jobs.

Records one row per edit outcome or job run, with the job summary stored as
JSON. Jobs never read this log back; it is an audit trail only.
"""

import json
import logging
import uuid
from datetime import date, datetime
from typing import Any, Dict, Optional

import pandas as pd

from contract_tracker.logics.config.activity_types import validate_activity_type
from contract_tracker.logics.core_utils import CoreUtils
from contract_tracker.logics.db import ActivityLogModel

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def record_activity(
    core_utils: CoreUtils,
    activity_type: str,
    status: str,
    user: str,
    summary: Optional[Dict[str, Any]] = None,
    records_affected: int = 0,
    sheet_name: Optional[str] = None,
    row: Optional[int] = None
) -> str:
    """
    Create a new activity log entry.

    Args:
        core_utils: CoreUtils bound to the activity database
        activity_type: Type of activity (must be in ACTIVITY_TYPES)
        status: Outcome status, e.g. "applied", "rejected", "success"
        user: User identifier who triggered the activity
        summary: Optional summary dict (will be JSON serialized)
        records_affected: Count of rows touched
        sheet_name: Sheet the activity targeted, if any
        row: Sheet row for single-cell edits

    Returns:
        activity_id: UUID string of the new entry

    Raises:
        ValueError: If activity_type is invalid
    """
    if not validate_activity_type(activity_type):
        raise ValueError(f"Invalid activity type: {activity_type}")

    activity_id = str(uuid.uuid4())

    try:
        db_manager = core_utils.get_db_manager(ActivityLogModel, limit=1, skip=0)

        record = {
            'activity_id': activity_id,
            'ActivityType': activity_type,
            'SheetName': sheet_name,
            'RowNumber': row,
            'Status': status,
            'User': user,
            'RecordsAffected': records_affected,
            'SummaryData': json.dumps(summary, default=_json_default) if summary else None,
            'CreatedDateTime': datetime.now(),
        }

        df = pd.DataFrame([record])
        db_manager.save_to_db(df)

        logger.info(f"Created activity log: {activity_id}, type={activity_type}, status={status}")
        return activity_id

    except Exception as e:
        logger.error(f"Failed to create activity log: {e}", exc_info=True)
        raise


def list_activity(
    core_utils: CoreUtils,
    limit: int = 50,
    offset: int = 0,
    activity_type: Optional[str] = None,
    user: Optional[str] = None
) -> Dict[str, Any]:
    """
    Newest-first activity entries with their summaries decoded.

    Returns:
        {"total": int, "records": [...]}
    """
    db_manager = core_utils.get_db_manager(ActivityLogModel, limit=limit, skip=offset)
    result = db_manager.read_db({"ActivityType": activity_type, "User": user})

    records = []
    for record in result["records"]:
        record = dict(record)
        if record.get("SummaryData"):
            record["SummaryData"] = json.loads(record["SummaryData"])
        if isinstance(record.get("CreatedDateTime"), datetime):
            record["CreatedDateTime"] = record["CreatedDateTime"].isoformat()
        records.append(record)

    return {"total": result["total"], "records": records}
