"""Dialog lifecycle state machine.

Each edit dialog moves through closed -> open -> closing -> closed. Closing a
dialog with unsaved edits asks for confirmation first; the edit is "unsaved"
when the current form differs from the snapshot taken when it opened.
"""

import copy
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from ledgerview.domain.errors import InvalidTransitionError, invalid_transition


class DialogState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    CLOSING = "closing"


class DialogStateMachine:
    """Tracks one dialog's state and its form snapshot."""

    def __init__(self, name: str = "dialog"):
        self.name = name
        self.state = DialogState.CLOSED
        self.snapshot: Optional[dict[str, Any]] = None
        self.form: Optional[dict[str, Any]] = None

    @property
    def is_open(self) -> bool:
        return self.state is DialogState.OPEN

    @property
    def is_dirty(self) -> bool:
        """True when the form has edits not present in the opening snapshot."""
        if self.state is DialogState.CLOSED:
            return False
        return self.form != self.snapshot

    def _require(self, state: DialogState, action: str) -> None:
        if self.state is not state:
            raise InvalidTransitionError(invalid_transition(action, self.state.value))

    def open(self, form: Optional[Mapping[str, Any]] = None) -> None:
        """Open the dialog, snapshotting the initial form state.

        Raises:
            InvalidTransitionError: If the dialog is not closed
        """
        self._require(DialogState.CLOSED, "open")
        initial = dict(form or {})
        self.snapshot = copy.deepcopy(initial)
        self.form = initial
        self.state = DialogState.OPEN

    def update(self, **changes: Any) -> None:
        """Apply field edits to the current form.

        Raises:
            InvalidTransitionError: If the dialog is not open
        """
        self._require(DialogState.OPEN, "edit")
        self.form.update(changes)

    def replace(self, form: Mapping[str, Any]) -> None:
        """Replace the whole current form.

        Raises:
            InvalidTransitionError: If the dialog is not open
        """
        self._require(DialogState.OPEN, "edit")
        self.form = dict(form)

    def mark_saved(self) -> None:
        """Treat the current form as persisted, clearing the dirty flag."""
        self._require(DialogState.OPEN, "save")
        self.snapshot = copy.deepcopy(self.form)

    def request_close(self, confirm: Optional[Callable[[], bool]] = None) -> bool:
        """Start closing the dialog.

        With unsaved edits, ``confirm`` is asked whether to discard them; a
        refusal (or no ``confirm`` at all) keeps the dialog open.

        Returns:
            True if the dialog moved to closing

        Raises:
            InvalidTransitionError: If the dialog is not open
        """
        self._require(DialogState.OPEN, "close")
        if self.is_dirty and (confirm is None or not confirm()):
            return False
        self.state = DialogState.CLOSING
        return True

    def finish_close(self) -> None:
        """Complete closing and discard form state.

        Raises:
            InvalidTransitionError: If the dialog is not closing
        """
        self._require(DialogState.CLOSING, "finish closing")
        self.state = DialogState.CLOSED
        self.snapshot = None
        self.form = None
