"""
Lead editor (form state).

Holds the draft of a create-or-edit form:
- open_create() seeds the blank template, open_edit(lead) copies an existing lead
- set_field() replaces one scalar field
- the timeline input buffer + skip flag feed add_description()
- submit() creates or updates, then closes and resets; on failure the editor
  stays open with the draft intact
- cancel() discards everything without confirmation

The draft is seeded once when the editor opens and is not refreshed from
incoming live snapshots.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Optional

from domain.lead import Lead, LeadDraft
from domain.time import utc_now
from domain.timeline import can_add_entry, new_entry
from repositories.lead_repository import LeadStoreError
from services import lead_service
from services.lead_service import LeadStore
from services.notifications import (
    LEAD_CREATED,
    LEAD_SAVE_FAILED,
    LEAD_UPDATED,
    LoggingNotifier,
    Notifier,
)

logger = logging.getLogger(__name__)


class EditorStateError(RuntimeError):
    """Raised when an editor operation is not valid in the current state."""


class EditorMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class LeadEditor:
    def __init__(
        self,
        store: Optional[LeadStore] = None,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], datetime] = utc_now,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store or lead_service.default_store()
        self._notifier = notifier or LoggingNotifier()
        self._clock = clock
        self._today = today
        self._reset()

    def _reset(self) -> None:
        self.is_open: bool = False
        self.editing: Optional[Lead] = None
        self.draft: LeadDraft = LeadDraft.empty()
        self.description_input: str = ""
        self.skip_day: bool = False

    @property
    def mode(self) -> EditorMode:
        return EditorMode.EDIT if self.editing is not None else EditorMode.CREATE

    def open_create(self) -> None:
        self._reset()
        self.is_open = True

    def open_edit(self, lead: Lead) -> None:
        self._reset()
        self.editing = lead
        self.draft = LeadDraft.from_lead(lead)
        self.is_open = True

    def cancel(self) -> None:
        self._reset()

    def set_field(self, name: str, value: Any) -> None:
        self._require_open()
        self.draft = self.draft.with_field(name, value)

    def set_description_input(self, text: str) -> None:
        self.description_input = text

    def set_skip_day(self, skipped: bool) -> None:
        self.skip_day = skipped

    @property
    def can_add_description(self) -> bool:
        return can_add_entry(self.description_input, self.skip_day)

    def add_description(self) -> None:
        """Append a dated entry from the input buffer, then clear the buffer and skip flag."""

        self._require_open()
        if not self.can_add_description:
            raise EditorStateError("Nothing to add: enter text or mark the day as skipped")

        entry = new_entry(self.description_input, self.skip_day, today=self._today())
        self.draft = self.draft.with_description(entry)
        self.description_input = ""
        self.skip_day = False

    def submit(self) -> bool:
        """
        Save the draft.

        Returns True and resets the editor when the store accepted the write;
        returns False, keeping the editor open and the draft intact, otherwise.
        """

        self._require_open()
        now = self._clock()

        try:
            if self.editing is not None:
                lead_service.update_lead(self.editing, self.draft, store=self._store, now=now)
                message = LEAD_UPDATED
            else:
                lead_service.create_lead(self.draft, store=self._store, now=now)
                message = LEAD_CREATED
        except LeadStoreError:
            logger.exception("Error saving lead (mode=%s)", self.mode.value)
            self._notifier.error(LEAD_SAVE_FAILED)
            return False

        self._notifier.success(message)
        self._reset()
        return True

    def delete(self, confirm: Callable[[str], bool]) -> bool:
        """Delete the lead being edited after confirmation; closes the editor on success."""

        self._require_open()
        if self.editing is None:
            raise EditorStateError("Delete is only available when editing an existing lead")

        deleted = lead_service.delete_lead_with_confirmation(
            self.editing.id, confirm, self._notifier, store=self._store
        )
        if deleted:
            self._reset()
        return deleted

    def _require_open(self) -> None:
        if not self.is_open:
            raise EditorStateError("Lead editor is not open")


__all__ = ["EditorMode", "EditorStateError", "LeadEditor"]
