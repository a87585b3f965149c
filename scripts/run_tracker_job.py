#!/usr/bin/env python3
"""
Run one tracker batch job against the workbook, outside the API.

Meant for a scheduler (cron, Task Scheduler) to run the daily jobs.

Usage:
    python scripts/run_tracker_job.py <job> [--workbook PATH] [--user NAME] [--today YYYY-MM-DD] [--dry-run]

Arguments:
    job          One of: intake, archive, remove-duplicates, sort, renewal-sync,
                 highlight, clear-highlight, reminders, renewal-status
    --workbook   Path to the tracker workbook (default: [workbook] path in config.ini)
    --user       Username for the activity log (default: "scheduler")
    --today      Override for the current date
    --dry-run    Run the job but do not save the workbook, send email or log activity

Examples:
    # Nightly renewal sync
    python scripts/run_tracker_job.py renewal-sync

    # Preview the urgency colours for a given day
    python scripts/run_tracker_job.py highlight --today 2026-11-01 --dry-run
"""

import argparse
import json
import sys
import os
from datetime import date

# Add the project root to the path so we can import from contract_tracker.*
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from contract_tracker import settings
from contract_tracker.logics.exceptions import TrackerException
from contract_tracker.logics.tracker_jobs import get_job, job_names, records_affected


def run_tracker_job(
    job_name: str,
    workbook_path: str,
    user: str = "scheduler",
    today: date = None,
    dry_run: bool = False
) -> dict:
    """
    Run a job and, unless dry_run, save the workbook and record the activity.

    Returns:
        The job summary
    """
    from contract_tracker.logics.mailer import Mailer
    from contract_tracker.logics.sheet_store import WorkbookStore

    job = get_job(job_name)

    print(f"\n{'='*60}")
    print(f"Tracker job: {job.name} - {job.description}")
    print(f"{'='*60}")
    print(f"Workbook: {workbook_path}")
    print(f"User: {user}")
    print(f"Dry run: {dry_run}")
    print(f"{'='*60}\n")

    store = WorkbookStore.load(workbook_path)
    # No SMTP host means every email is reported as skipped
    mailer = Mailer(host="") if dry_run else Mailer()

    summary = job.run(store, mailer, today)

    if dry_run:
        print("DRY RUN - workbook not saved.")
    else:
        store.save()
        from contract_tracker.api.dependencies import get_core_utils
        from contract_tracker.logics.activity_log import record_activity
        record_activity(
            get_core_utils(),
            job.activity_type,
            status="success",
            user=user,
            summary=summary,
            records_affected=records_affected(summary),
        )

    print(json.dumps(summary, indent=2, default=str))
    return summary


def main():
    parser = argparse.ArgumentParser(
        description="Run one contract tracker batch job.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('job', choices=job_names(), help='Job to run')
    parser.add_argument(
        '--workbook',
        type=str,
        default=settings.WORKBOOK_PATH,
        help='Path to the tracker workbook (default: from config.ini)'
    )
    parser.add_argument(
        '--user',
        type=str,
        default='scheduler',
        help='Username for the activity log (default: scheduler)'
    )
    parser.add_argument(
        '--today',
        type=date.fromisoformat,
        default=None,
        help='Override for the current date (YYYY-MM-DD)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Run without saving the workbook or sending email'
    )

    args = parser.parse_args()

    try:
        run_tracker_job(
            job_name=args.job,
            workbook_path=args.workbook,
            user=args.user,
            today=args.today,
            dry_run=args.dry_run
        )
        sys.exit(0)

    except TrackerException as e:
        print(f"ERROR: {e.message}")
        if e.recommendation:
            print(f"  {e.recommendation}")
        sys.exit(1)
    except Exception as e:
        print(f"UNEXPECTED ERROR: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
