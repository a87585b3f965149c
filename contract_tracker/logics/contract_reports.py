"""
Contract reports and reminders.

- find_lapsed_contracts: read-only list of contracts past their end date with
  no renewal decision.
- send_renewal_reminders: emails customers whose contract ends a configured
  number of days from today.
- refresh_renewal_status_sheet: rewrites the Renewal Status sheet from the
  tracker.
"""

import logging
from datetime import date
from typing import Dict, Any, List, Optional

import pandas as pd

from contract_tracker.logics.config.tracker_columns import (
    LAPSE_HANDLED_STATUSES,
    LAPSED_DISPLAY_LIMIT,
    RENEWAL_STATUS_SHEET_HEADERS,
)
from contract_tracker.logics.mailer import Mailer, notify, renewal_reminder
from contract_tracker.logics.sheet_store import WorkbookStore
from contract_tracker.logics.tracker_rows import read_tracker_rows
from contract_tracker.logics.urgency_highlight import classify_urgency, months_until_end
from contract_tracker.settings import TRACKER_SHEET_NAME, RENEWAL_STATUS_SHEET_NAME, REMINDER_DAYS

logger = logging.getLogger(__name__)


def find_lapsed_contracts(
    store: WorkbookStore,
    today: Optional[date] = None,
    limit: int = LAPSED_DISPLAY_LIMIT,
    tracker_sheet_name: str = TRACKER_SHEET_NAME
) -> Dict[str, Any]:
    """
    Contracts whose end date is before today and whose renewal status is not
    one of the handled values. Only the first `limit` rows are listed; the
    total is always reported.
    """
    today = today or date.today()
    lapsed = []
    for row in read_tracker_rows(store.sheet(tracker_sheet_name)):
        if not row.company or row.contract_end is None:
            continue
        if row.contract_end >= today or row.renewal_status in LAPSE_HANDLED_STATUSES:
            continue
        lapsed.append({
            "row": row.row,
            "company": row.company,
            "pilot_number": row.pilot_number,
            "contract_end": row.contract_end.isoformat(),
            "days_lapsed": (today - row.contract_end).days,
        })

    shown = lapsed[:limit]
    lines = [f"{item['company']} (row {item['row']}): lapsed {item['days_lapsed']} day(s)" for item in shown]
    if len(lapsed) > limit:
        lines.append(f"... and {len(lapsed) - limit} more")
    message = "\n".join(lines) if lines else "No lapsed contracts"

    logger.info(f"[Reports] Found {len(lapsed)} lapsed contract(s)")
    return {"total": len(lapsed), "lapsed": shown, "message": message}


def send_renewal_reminders(
    store: WorkbookStore,
    mailer: Mailer,
    today: Optional[date] = None,
    days_before: List[int] = REMINDER_DAYS,
    tracker_sheet_name: str = TRACKER_SHEET_NAME
) -> Dict[str, Any]:
    """Email a reminder to rows without a renewal decision whose end is exactly N days away."""
    today = today or date.today()
    summary = {"reminded": [], "emails_sent": 0, "emails_skipped": 0, "emails_failed": 0}

    for row in read_tracker_rows(store.sheet(tracker_sheet_name)):
        if not row.company or not row.email or row.renewal_status or row.contract_end is None:
            continue
        days = (row.contract_end - today).days
        if days not in days_before:
            continue

        subject, body = renewal_reminder(row.company, row.pilot_number, row.contract_end, days)
        result = notify(mailer, row.email, subject, body)
        summary[f"emails_{result}"] += 1
        summary["reminded"].append({"row": row.row, "company": row.company, "days_before_end": days})

    logger.info(f"[Reports] Reminders: {len(summary['reminded'])} due, {summary['emails_sent']} sent")
    return summary


def refresh_renewal_status_sheet(
    store: WorkbookStore,
    today: Optional[date] = None,
    tracker_sheet_name: str = TRACKER_SHEET_NAME,
    status_sheet_name: str = RENEWAL_STATUS_SHEET_NAME
) -> Dict[str, Any]:
    """Rewrite the Renewal Status sheet: one line per tracked contract, soonest end first."""
    today = today or date.today()
    records = []
    for row in read_tracker_rows(store.sheet(tracker_sheet_name)):
        if not row.company:
            continue
        records.append({
            "Company Name": row.company,
            "Pilot Number": row.pilot_number,
            "Contract End": row.contract_end,
            "Months Remaining": months_until_end(row, today),
            "Renewal Status": row.renewal_status,
            "Urgency": classify_urgency(row, today) or "",
        })

    df = pd.DataFrame(records, columns=RENEWAL_STATUS_SHEET_HEADERS, dtype=object)
    df["_end"] = pd.to_datetime(df["Contract End"])
    df = df.sort_values("_end", kind="mergesort", na_position="last").drop(columns="_end")

    sheet = store.get_or_create_sheet(status_sheet_name)
    sheet.clear()
    sheet.write_range(1, 1, [RENEWAL_STATUS_SHEET_HEADERS])
    sheet.write_range(2, 1, [list(values) for values in df.itertuples(index=False, name=None)])

    logger.info(f"[Reports] Renewal Status sheet refreshed with {len(df)} contract(s)")
    return {"rows_written": len(df)}
