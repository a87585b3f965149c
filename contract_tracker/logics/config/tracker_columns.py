"""
Column layout and status constants for the contract tracker workbook.

Column positions are 1-based, matching spreadsheet coordinates. The Tracker
and Archive sheets share one layout; the Form Responses sheet has its own.
"""

from enum import Enum


class EditField(Enum):
    """Tracker fields whose edits are routed by the edit dispatcher."""
    PILOT_NUMBER = "pilot_number"
    CONTRACT_START = "contract_start"
    CONTRACT_END = "contract_end"


# Tracker / Archive layout
SERIAL_COLUMN = 1
COMPANY_COLUMN = 2
LOCATION_COLUMN = 3
EMAIL_COLUMN = 4
PILOT_NUMBER_COLUMN = 5
RENEWAL_STATUS_COLUMN = 6
CONTRACT_START_COLUMN = 7
CONTRACT_END_COLUMN = 8
FIRST_MONTH_COLUMN = 9

YEAR_LABEL_ROW = 1
MONTH_LABEL_ROW = 2
HEADER_ROWS = 2
DATA_START_ROW = HEADER_ROWS + 1

TRACKER_HEADERS = [
    "S/N",
    "Company Name",
    "Location",
    "Email",
    "Pilot Number",
    "Renewal Status",
    "Contract Start",
    "Contract End",
]

# Single configuration table mapping edited columns to semantic fields
EDITABLE_COLUMNS = {
    PILOT_NUMBER_COLUMN: EditField.PILOT_NUMBER,
    CONTRACT_START_COLUMN: EditField.CONTRACT_START,
    CONTRACT_END_COLUMN: EditField.CONTRACT_END,
}

# Form Responses layout
FORM_HEADER_ROW = 1
FORM_DATA_START_ROW = 2
FORM_TIMESTAMP_COLUMN = 1
FORM_COMPANY_COLUMN = 2
FORM_LOCATION_COLUMN = 3
FORM_EMAIL_COLUMN = 4

# Monthly status cell values
STATUS_PAID = "paid"
STATUS_RENEW = "renew"
STATUS_TERMINATE = "terminate"
STATUS_NOT_PROCEED = "not proceed"

MONTHLY_STATUSES = [STATUS_PAID, STATUS_RENEW, STATUS_TERMINATE, STATUS_NOT_PROCEED]

# Renewal status values
RENEWAL_RENEW = "Renew"
RENEWAL_NOT_RENEWING = "Not Renewing"
RENEWAL_RENEWED = "Renewed"
RENEWAL_TERMINATED = "Terminated"

RENEWAL_STATUSES = ["", RENEWAL_RENEW, RENEWAL_NOT_RENEWING, RENEWAL_RENEWED, RENEWAL_TERMINATED]

# Statuses that take a row out of the lapsed-contract report
LAPSE_HANDLED_STATUSES = [
    RENEWAL_RENEW,
    RENEWAL_NOT_RENEWING,
    RENEWAL_RENEWED,
    RENEWAL_TERMINATED,
]
LAPSED_DISPLAY_LIMIT = 20

CONTRACT_TERM_MONTHS = 12

# Urgency highlighting colours (hex RGB)
URGENCY_COLORS = {
    "renewed": "B7E1CD",
    "expired": "F4C7C3",
    "one_month": "FCE8B2",
    "two_three_months": "FFF2CC",
}

RENEWAL_STATUS_SHEET_HEADERS = [
    "Company Name",
    "Pilot Number",
    "Contract End",
    "Months Remaining",
    "Renewal Status",
    "Urgency",
]
