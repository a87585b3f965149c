"""
Shared cache module for the API routers.

Cache Instances:
    - pending_changes_cache: contract start edits awaiting confirmation
      (10 minutes TTL, max 100 entries)

Usage:
    from contract_tracker.cache import store_pending_change, take_pending_change

    pending_id = store_pending_change(pending)
    pending = take_pending_change(pending_id)
"""

import logging
from typing import Optional

from contract_tracker.logics.cache_utils import TTLCache
from contract_tracker.logics.contract_dates import PendingStartChange
from contract_tracker.settings import CACHE_TTL_PENDING_CHANGES

logger = logging.getLogger(__name__)

# ============ Pending Confirmation Cache ============

# Keys: "pending_change:v1:{pending_id}"
pending_changes_cache = TTLCache(max_size=100, ttl_seconds=CACHE_TTL_PENDING_CHANGES)


def generate_pending_change_cache_key(pending_id: str) -> str:
    """
    Generate cache key for a pending contract start change.

    Examples:
        generate_pending_change_cache_key("3f2a...")
        -> "pending_change:v1:3f2a..."
    """
    return f"pending_change:v1:{pending_id}"


def store_pending_change(pending: PendingStartChange) -> str:
    pending_changes_cache.set(generate_pending_change_cache_key(pending.pending_id), pending)
    logger.info(f"[Cache] Stored pending change {pending.pending_id} (row {pending.row})")
    return pending.pending_id


def take_pending_change(pending_id: str) -> Optional[PendingStartChange]:
    """Remove and return a pending change; None once expired or already resolved."""
    return pending_changes_cache.pop(generate_pending_change_cache_key(pending_id))


def clear_all_caches() -> dict:
    """Clear every cache instance; returns the number of entries dropped per cache."""
    cleared = {"pending_changes": pending_changes_cache.size()}
    pending_changes_cache.clear()
    logger.info(f"[Cache] Cleared all caches: {cleared}")
    return cleared
