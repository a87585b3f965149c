"""
Shared dependencies for API routers.

Provides the activity-log database helper, the mailer, loggers and the
serialised workbook session every request runs inside.
"""

import logging
from contextlib import contextmanager
from threading import Lock
from typing import Iterator, Optional

from contract_tracker import settings
from contract_tracker.logics.core_utils import CoreUtils
from contract_tracker.logics.mailer import Mailer
from contract_tracker.logics.sheet_store import WorkbookStore


# Initialize logger for API routers
def get_logger(name: str = "api") -> logging.Logger:
    """
    Get a logger instance for API routers.

    Usage in routers:
        from contract_tracker.api.dependencies import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)


logger = get_logger(__name__)

# Core utils instance (singleton pattern)
_core_utils_instance: Optional[CoreUtils] = None
_mailer_instance: Optional[Mailer] = None

# One workbook invocation at a time, like the spreadsheet host serialises script runs
_workbook_lock = Lock()


def get_database_url() -> str:
    if settings.MODE.upper() == "DEBUG":
        return settings.SQLITE_DATABASE_URL
    elif settings.MODE.upper() == "PRODUCTION":
        return settings.PRODUCTION_DATABASE_URL
    raise ValueError("Invalid MODE specified in config.")


def get_core_utils() -> CoreUtils:
    """
    Get CoreUtils singleton instance.

    Returns:
        CoreUtils instance configured with the activity database URL
    """
    global _core_utils_instance
    if _core_utils_instance is None:
        _core_utils_instance = CoreUtils(get_database_url())
    return _core_utils_instance


def get_mailer() -> Mailer:
    """Get Mailer singleton configured from [smtp]."""
    global _mailer_instance
    if _mailer_instance is None:
        _mailer_instance = Mailer()
    return _mailer_instance


@contextmanager
def workbook_session(path: Optional[str] = None) -> Iterator[WorkbookStore]:
    """
    Load the tracker workbook, yield it, and save it if the body completes.

    Usage:
        with workbook_session() as store:
            sync_renewals(store, get_mailer())
    """
    workbook_path = path or settings.WORKBOOK_PATH
    with _workbook_lock:
        store = WorkbookStore.load(workbook_path)
        yield store
        store.save()
        logger.debug(f"[Workbook] Session committed for {workbook_path}")
