"""Two-step confirmation guarding the lifetime distance reset."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from PySide6.QtCore import QObject, Signal, Slot


class ResetConfirmState(Enum):
    """Confirmation state machine states."""

    IDLE = "idle"  # Reset button offered
    AWAITING_CONFIRM_1 = "awaiting_confirm_1"  # "Sure?" shown
    AWAITING_CONFIRM_2 = "awaiting_confirm_2"  # "Really sure?" shown


class ResetAction(Enum):
    """User inputs driving the confirmation flow."""

    REQUEST = "request"
    CONFIRM = "confirm"
    CANCEL = "cancel"


def advance(state: ResetConfirmState, action: ResetAction) -> Tuple[ResetConfirmState, bool]:
    """
    Compute the next confirmation state.

    Returns:
        (next state, True if the reset must execute now)
    """
    if action == ResetAction.CANCEL:
        return ResetConfirmState.IDLE, False

    if state == ResetConfirmState.IDLE and action == ResetAction.REQUEST:
        return ResetConfirmState.AWAITING_CONFIRM_1, False
    if state == ResetConfirmState.AWAITING_CONFIRM_1 and action == ResetAction.CONFIRM:
        return ResetConfirmState.AWAITING_CONFIRM_2, False
    if state == ResetConfirmState.AWAITING_CONFIRM_2 and action == ResetAction.CONFIRM:
        return ResetConfirmState.IDLE, True

    # Anything else is out of sequence and ignored
    return state, False


class ResetTotalsConfirmation(QObject):
    """
    Guards the destructive "reset totals" action behind two confirmations.

    State machine:
        IDLE ──(request)──> AWAITING_CONFIRM_1
        AWAITING_CONFIRM_1 ──(confirm)──> AWAITING_CONFIRM_2
        AWAITING_CONFIRM_2 ──(confirm)──> IDLE (emit confirmed)
        AWAITING_CONFIRM_* ──(cancel)──> IDLE
    """

    # Signals
    state_changed = Signal(str)  # ResetConfirmState value
    confirmed = Signal()  # Reset must execute

    def __init__(self):
        super().__init__()
        self._state = ResetConfirmState.IDLE

    @property
    def state(self) -> ResetConfirmState:
        """Current confirmation state."""
        return self._state

    @Slot()
    def request(self) -> None:
        self._apply(ResetAction.REQUEST)

    @Slot()
    def confirm(self) -> None:
        self._apply(ResetAction.CONFIRM)

    @Slot()
    def cancel(self) -> None:
        self._apply(ResetAction.CANCEL)

    def _apply(self, action: ResetAction) -> None:
        new_state, execute = advance(self._state, action)
        if new_state != self._state:
            self._state = new_state
            self.state_changed.emit(new_state.value)
        if execute:
            self.confirmed.emit()
