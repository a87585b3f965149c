"""
Registry of batch jobs runnable from the API and the job script.

Every job takes (store, mailer, today) and returns a JSON-serialisable summary.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from contract_tracker.logics.archive_jobs import archive_terminated_rows, remove_archived_duplicates
from contract_tracker.logics.config.activity_types import (
    ACTIVITY_INTAKE,
    ACTIVITY_ARCHIVE,
    ACTIVITY_REMOVE_DUPLICATES,
    ACTIVITY_SORT,
    ACTIVITY_RENEWAL_SYNC,
    ACTIVITY_HIGHLIGHT,
    ACTIVITY_CLEAR_HIGHLIGHT,
    ACTIVITY_REMINDERS,
    ACTIVITY_RENEWAL_STATUS,
)
from contract_tracker.logics.contract_reports import send_renewal_reminders, refresh_renewal_status_sheet
from contract_tracker.logics.exceptions import UnknownJobException
from contract_tracker.logics.intake import import_form_responses
from contract_tracker.logics.mailer import Mailer
from contract_tracker.logics.renewal_sync import sync_renewals
from contract_tracker.logics.sheet_store import WorkbookStore
from contract_tracker.logics.tracker_sort import sort_by_contract_start
from contract_tracker.logics.urgency_highlight import highlight_urgency, clear_highlighting

logger = logging.getLogger(__name__)


@dataclass
class TrackerJob:
    name: str
    activity_type: str
    run: Callable[[WorkbookStore, Mailer, Optional[date]], Dict[str, Any]]
    description: str
    moves_rows: bool = False


JOBS: Dict[str, TrackerJob] = {
    job.name: job for job in [
        TrackerJob("intake", ACTIVITY_INTAKE,
                   lambda store, mailer, today: import_form_responses(store),
                   "Copy new form responses into the tracker"),
        TrackerJob("archive", ACTIVITY_ARCHIVE,
                   lambda store, mailer, today: archive_terminated_rows(store),
                   "Move rows with a terminate month to the archive", moves_rows=True),
        TrackerJob("remove-duplicates", ACTIVITY_REMOVE_DUPLICATES,
                   lambda store, mailer, today: remove_archived_duplicates(store),
                   "Delete tracker rows for companies already archived", moves_rows=True),
        TrackerJob("sort", ACTIVITY_SORT,
                   lambda store, mailer, today: sort_by_contract_start(store),
                   "Sort tracker rows by contract start", moves_rows=True),
        TrackerJob("renewal-sync", ACTIVITY_RENEWAL_SYNC,
                   lambda store, mailer, today: sync_renewals(store, mailer),
                   "Apply Renew / Not Renewing decisions"),
        TrackerJob("highlight", ACTIVITY_HIGHLIGHT,
                   lambda store, mailer, today: highlight_urgency(store, today),
                   "Colour rows by renewal urgency"),
        TrackerJob("clear-highlight", ACTIVITY_CLEAR_HIGHLIGHT,
                   lambda store, mailer, today: clear_highlighting(store),
                   "Remove urgency colouring"),
        TrackerJob("reminders", ACTIVITY_REMINDERS,
                   lambda store, mailer, today: send_renewal_reminders(store, mailer, today),
                   "Email renewal reminders on threshold days"),
        TrackerJob("renewal-status", ACTIVITY_RENEWAL_STATUS,
                   lambda store, mailer, today: refresh_renewal_status_sheet(store, today),
                   "Rewrite the Renewal Status sheet"),
    ]
}


def job_names() -> List[str]:
    return list(JOBS.keys())


def get_job(name: str) -> TrackerJob:
    job = JOBS.get(name)
    if job is None:
        raise UnknownJobException(name, job_names())
    return job


def records_affected(summary: Dict[str, Any]) -> int:
    """Best-effort count of rows a job touched, for the activity log."""
    for key in ("count", "rows_sorted", "highlighted", "rows_cleared", "rows_written"):
        if isinstance(summary.get(key), int):
            return summary[key]
    total = 0
    for key in ("added", "renewed", "terminated", "reminded"):
        if isinstance(summary.get(key), list):
            total += len(summary[key])
    return total
