"""
Batch job and report endpoints.

Jobs run against the whole tracker workbook inside one workbook session and
are recorded in the activity log. The lapsed-contract report is read-only.
"""

from datetime import date
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel
from typing import Optional

from contract_tracker.api.dependencies import get_logger, get_core_utils, get_mailer, workbook_session
from contract_tracker.api.utils.responses import success_response, error_response
from contract_tracker.cache import clear_all_caches
from contract_tracker.logics.activity_log import record_activity
from contract_tracker.logics.config.activity_types import ACTIVITY_LAPSED_REPORT
from contract_tracker.logics.config.tracker_columns import LAPSED_DISPLAY_LIMIT
from contract_tracker.logics.contract_reports import find_lapsed_contracts
from contract_tracker.logics.exceptions import TrackerException
from contract_tracker.logics.tracker_jobs import JOBS, get_job, records_affected

router = APIRouter()
logger = get_logger(__name__)


class JobRunRequest(BaseModel):
    """Request model for running a batch job."""
    user: str = "System"
    today: Optional[date] = None


@router.get("/api/jobs")
def list_jobs():
    """List runnable batch jobs with their descriptions."""
    return success_response(data=[
        {"name": job.name, "activity_type": job.activity_type, "description": job.description}
        for job in JOBS.values()
    ])


@router.post("/api/jobs/{job_name}")
def run_job(job_name: str, request: Optional[JobRunRequest] = None):
    """
    Run one batch job against the tracker workbook.

    Path Parameters:
        job_name: One of intake, archive, remove-duplicates, sort, renewal-sync,
                  highlight, clear-highlight, reminders, renewal-status

    Body Parameters (JSON, optional):
        user: Username for the activity log
        today: Override for the current date (YYYY-MM-DD)

    Returns:
        Job summary as produced by the job

    Error Codes:
        400: Unknown job name
        404: Workbook or required sheet missing
    """
    request = request or JobRunRequest()
    try:
        job = get_job(job_name)
        logger.info(f"[Jobs] Running '{job.name}' for {request.user}")

        with workbook_session() as store:
            summary = job.run(store, get_mailer(), request.today)

            # Logged inside the session: a failed log write leaves the workbook unsaved
            activity_id = record_activity(
                get_core_utils(),
                job.activity_type,
                status="success",
                user=request.user,
                summary=summary,
                records_affected=records_affected(summary),
            )

        if job.moves_rows:
            # Pending start changes point at row numbers that may no longer hold the same contract
            dropped = clear_all_caches()
            logger.info(f"[Jobs] '{job.name}' moved rows; dropped pending changes {dropped}")

        return success_response(
            data={"job": job.name, "activity_id": activity_id, "summary": summary},
            message=f"Job '{job.name}' completed"
        )

    except TrackerException as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error running job {job_name}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=error_response("Internal server error", str(e))
        )


@router.get("/api/reports/lapsed")
def get_lapsed_contracts(
    today: Optional[date] = None,
    limit: int = Query(LAPSED_DISPLAY_LIMIT, ge=1, le=500),
    user: str = "System"
):
    """
    Contracts past their end date with no renewal decision recorded.

    Query Parameters:
        today: Override for the current date (YYYY-MM-DD)
        limit: Maximum number of contracts listed (total is always reported)
        user: Username for the activity log
    """
    try:
        with workbook_session() as store:
            report = find_lapsed_contracts(store, today, limit)

        record_activity(
            get_core_utils(),
            ACTIVITY_LAPSED_REPORT,
            status="success",
            user=user,
            summary={"total": report["total"]},
            records_affected=report["total"],
        )
        return success_response(data=report, message=report["message"])

    except TrackerException as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building lapsed report: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=error_response("Internal server error", str(e))
        )
