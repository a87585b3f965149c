"""
Activity type constants for the activity log.

Centralized definitions so the dispatcher, jobs and API record the same names.
"""

# Activity Type Constants
ACTIVITY_EDIT = "Cell Edit"
ACTIVITY_PENDING_RESOLVED = "Pending Change Resolved"
ACTIVITY_INTAKE = "Intake"
ACTIVITY_ARCHIVE = "Archive"
ACTIVITY_REMOVE_DUPLICATES = "Remove Duplicates"
ACTIVITY_SORT = "Sort"
ACTIVITY_RENEWAL_SYNC = "Renewal Sync"
ACTIVITY_HIGHLIGHT = "Highlight"
ACTIVITY_CLEAR_HIGHLIGHT = "Clear Highlight"
ACTIVITY_REMINDERS = "Reminders"
ACTIVITY_RENEWAL_STATUS = "Renewal Status Refresh"
ACTIVITY_LAPSED_REPORT = "Lapsed Report"

# All valid activity types
ACTIVITY_TYPES = [
    ACTIVITY_EDIT,
    ACTIVITY_PENDING_RESOLVED,
    ACTIVITY_INTAKE,
    ACTIVITY_ARCHIVE,
    ACTIVITY_REMOVE_DUPLICATES,
    ACTIVITY_SORT,
    ACTIVITY_RENEWAL_SYNC,
    ACTIVITY_HIGHLIGHT,
    ACTIVITY_CLEAR_HIGHLIGHT,
    ACTIVITY_REMINDERS,
    ACTIVITY_RENEWAL_STATUS,
    ACTIVITY_LAPSED_REPORT,
]


def validate_activity_type(activity_type: str) -> bool:
    """
    Validate if activity type is valid.

    Args:
        activity_type: Activity type string to validate

    Returns:
        True if valid, False otherwise
    """
    return activity_type in ACTIVITY_TYPES
