"""
Edit-trigger dispatcher.

Single entry point for cell-edit events on the tracker. The edited cell already
holds the new value when an event arrives; the dispatcher routes by column to
the pilot number, contract start or contract end handler and reverts the cell
in place when the edit is rejected.

Contract start edits are destructive and go through two phases: dispatch()
returns a pending change (status "confirmation_required") and resolve() later
applies it or restores the previous value.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from contract_tracker.logics.config.tracker_columns import (
    EditField,
    EDITABLE_COLUMNS,
    HEADER_ROWS,
    DATA_START_ROW,
    PILOT_NUMBER_COLUMN,
)
from contract_tracker.logics.contract_dates import (
    ContractDateEngine,
    PendingStartChange,
    decode_previous_value,
)
from contract_tracker.logics.exceptions import (
    DuplicatePilotNumberException,
    InvalidDateException,
)
from contract_tracker.logics.sheet_store import Sheet, WorkbookStore, cell_text, is_blank
from contract_tracker.settings import TRACKER_SHEET_NAME

logger = logging.getLogger(__name__)

OUTCOME_IGNORED = "ignored"
OUTCOME_APPLIED = "applied"
OUTCOME_REJECTED = "rejected"
OUTCOME_CONFIRMATION_REQUIRED = "confirmation_required"
OUTCOME_REVERTED = "reverted"


@dataclass
class EditEvent:
    """One single-cell edit: where it happened, the new value and the prior one."""
    sheet_name: str
    row: int
    column: int
    value: Any
    old_value: Any = None


@dataclass
class EditOutcome:
    status: str
    edit_field: Optional[str] = None
    alerts: List[str] = field(default_factory=list)
    changes: Dict[str, Any] = field(default_factory=dict)
    pending: Optional[PendingStartChange] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "status": self.status,
            "field": self.edit_field,
            "alerts": self.alerts,
            "changes": self.changes,
        }
        if self.pending is not None:
            result["pending"] = self.pending.to_dict()
        return result


def find_duplicate_pilot(sheet: Sheet, pilot_number: str, exclude_row: int) -> Optional[int]:
    """Row already holding pilot_number (trimmed comparison), ignoring exclude_row and the headers."""
    last = sheet.last_row()
    if last < DATA_START_ROW:
        return None
    values = sheet.read_range(DATA_START_ROW, PILOT_NUMBER_COLUMN, last - DATA_START_ROW + 1, 1)
    for offset, (value,) in enumerate(values):
        row = DATA_START_ROW + offset
        if row == exclude_row:
            continue
        if cell_text(value) and cell_text(value) == pilot_number:
            return row
    return None


class EditDispatcher:
    """Routes tracker edits to their handlers."""

    def __init__(
        self,
        store: WorkbookStore,
        tracker_sheet_name: str = TRACKER_SHEET_NAME,
        today: Optional[date] = None
    ):
        self.store = store
        self.tracker_sheet_name = tracker_sheet_name
        self.today = today
        self.handlers: Dict[EditField, Callable[[Sheet, EditEvent], EditOutcome]] = {
            EditField.PILOT_NUMBER: self._handle_pilot_number,
            EditField.CONTRACT_START: self._handle_contract_start,
            EditField.CONTRACT_END: self._handle_contract_end,
        }

    def dispatch(self, event: EditEvent) -> EditOutcome:
        if event.sheet_name != self.tracker_sheet_name:
            return EditOutcome(OUTCOME_IGNORED)
        if event.row <= HEADER_ROWS:
            return EditOutcome(OUTCOME_IGNORED)

        edit_field = EDITABLE_COLUMNS.get(event.column)
        if edit_field is None:
            return EditOutcome(OUTCOME_IGNORED)

        sheet = self.store.sheet(self.tracker_sheet_name)
        try:
            outcome = self.handlers[edit_field](sheet, event)
        except (DuplicatePilotNumberException, InvalidDateException) as e:
            logger.warning(f"[EditDispatcher] Rejected {edit_field.value} edit at row {event.row}: {e.message}")
            self._revert(sheet, event, edit_field)
            outcome = EditOutcome(OUTCOME_REJECTED, alerts=[e.message], changes={"error": e.to_dict()})

        outcome.edit_field = edit_field.value
        return outcome

    def _revert(self, sheet: Sheet, event: EditEvent, edit_field: EditField) -> None:
        # A rejected pilot number is always cleared; dates go back to what the cell held
        if edit_field == EditField.PILOT_NUMBER:
            previous = None
        else:
            previous = decode_previous_value(event.old_value)

        if previous is None:
            sheet.clear_value(event.row, event.column)
        else:
            sheet.set_value(event.row, event.column, previous)

    def _handle_pilot_number(self, sheet: Sheet, event: EditEvent) -> EditOutcome:
        pilot_number = cell_text(event.value)
        if not pilot_number:
            return EditOutcome(OUTCOME_IGNORED)

        existing_row = find_duplicate_pilot(sheet, pilot_number, event.row)
        if existing_row is not None:
            raise DuplicatePilotNumberException(pilot_number, event.row, existing_row)

        changes = {"row": event.row, "pilot_number": pilot_number}
        # Only a first pilot number starts the contract; renumbering keeps the dates as they are
        if not is_blank(event.old_value):
            logger.info(f"[EditDispatcher] Row {event.row} pilot number changed from {cell_text(event.old_value)!r}")
            return EditOutcome(OUTCOME_APPLIED, changes=changes)

        engine = ContractDateEngine(sheet)
        term = engine.activate(event.row, self.today)
        if term is None:
            return EditOutcome(OUTCOME_APPLIED, changes=changes)

        start, end = term
        return EditOutcome(
            OUTCOME_APPLIED,
            alerts=[f"Contract activated for row {event.row}: {start.isoformat()} to {end.isoformat()}"],
            changes={
                **changes,
                "contract_start": start.isoformat(),
                "contract_end": end.isoformat(),
            },
        )

    def _handle_contract_start(self, sheet: Sheet, event: EditEvent) -> EditOutcome:
        if is_blank(event.value):
            return EditOutcome(OUTCOME_IGNORED)

        pending = ContractDateEngine(sheet).propose_start_change(event.row, event.value, event.old_value)
        return EditOutcome(
            OUTCOME_CONFIRMATION_REQUIRED,
            alerts=[
                f"Changing the contract start for row {event.row} clears every monthly status cell "
                f"and restarts a 12-month term from {pending.new_start.replace(day=1).isoformat()}. Continue?"
            ],
            pending=pending,
        )

    def _handle_contract_end(self, sheet: Sheet, event: EditEvent) -> EditOutcome:
        if is_blank(event.value):
            return EditOutcome(OUTCOME_IGNORED)

        changes = ContractDateEngine(sheet).apply_end_change(event.row, event.value)
        return EditOutcome(OUTCOME_APPLIED, changes=changes)

    def resolve(self, pending: PendingStartChange, confirmed: bool) -> EditOutcome:
        """Second phase of a contract start edit."""
        sheet = self.store.sheet(pending.sheet_name)
        engine = ContractDateEngine(sheet)

        if confirmed:
            changes = engine.apply_start_change(pending)
            return EditOutcome(OUTCOME_APPLIED, edit_field=EditField.CONTRACT_START.value, changes=changes)

        engine.reject_start_change(pending)
        return EditOutcome(
            OUTCOME_REVERTED,
            edit_field=EditField.CONTRACT_START.value,
            alerts=[f"Contract start change for row {pending.row} cancelled; previous value restored"],
        )
