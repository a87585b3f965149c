"""
Renewal / termination batch sync.

Applies the per-row renewal decision:

- "Not Renewing": final contract month marked "terminate", status Terminated,
  termination notice emailed.
- "Renew": contract extended by one year (first new month "renew", the other
  eleven "paid"), status Renewed, confirmation emailed.

Every other status is left alone, so re-running the job after a partial
failure only picks up rows that still carry a pending decision.
"""

import logging
from typing import Dict, Any

from contract_tracker.logics.config.tracker_columns import (
    RENEWAL_RENEW,
    RENEWAL_NOT_RENEWING,
)
from contract_tracker.logics.contract_dates import ContractDateEngine
from contract_tracker.logics.mailer import Mailer, notify, renewal_confirmation, termination_notice
from contract_tracker.logics.sheet_store import WorkbookStore
from contract_tracker.logics.tracker_rows import read_tracker_rows
from contract_tracker.settings import TRACKER_SHEET_NAME

logger = logging.getLogger(__name__)


def _count_email(summary: Dict[str, Any], result: str) -> None:
    key = {"sent": "emails_sent", "skipped": "emails_skipped", "failed": "emails_failed"}[result]
    summary[key] += 1


def sync_renewals(
    store: WorkbookStore,
    mailer: Mailer,
    tracker_sheet_name: str = TRACKER_SHEET_NAME
) -> Dict[str, Any]:
    """
    Run the renewal sync over every tracker row.

    Returns:
        Summary with renewed/terminated/skipped rows and email counts
    """
    sheet = store.sheet(tracker_sheet_name)
    engine = ContractDateEngine(sheet)
    summary = {
        "renewed": [],
        "terminated": [],
        "skipped": [],
        "emails_sent": 0,
        "emails_skipped": 0,
        "emails_failed": 0,
    }

    for row in read_tracker_rows(sheet):
        if row.renewal_status == RENEWAL_NOT_RENEWING:
            if row.contract_end is None:
                summary["skipped"].append({"row": row.row, "company": row.company, "reason": "no contract end"})
                continue
            engine.terminate(row)
            summary["terminated"].append({
                "row": row.row,
                "company": row.company,
                "contract_end": row.contract_end.isoformat(),
            })
            if row.email:
                subject, body = termination_notice(row.company, row.pilot_number, row.contract_end)
                _count_email(summary, notify(mailer, row.email, subject, body))

        elif row.renewal_status == RENEWAL_RENEW:
            term = engine.renew(row)
            if term is None:
                summary["skipped"].append({"row": row.row, "company": row.company, "reason": "no contract end"})
                continue
            new_start, new_end = term
            summary["renewed"].append({
                "row": row.row,
                "company": row.company,
                "contract_start": new_start.isoformat(),
                "contract_end": new_end.isoformat(),
            })
            if row.email:
                subject, body = renewal_confirmation(row.company, row.pilot_number, new_start, new_end)
                _count_email(summary, notify(mailer, row.email, subject, body))

    logger.info(
        f"[Sync] Renewed {len(summary['renewed'])}, terminated {len(summary['terminated'])}, "
        f"emails sent {summary['emails_sent']}, failed {summary['emails_failed']}"
    )
    return summary
