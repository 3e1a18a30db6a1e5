"""
Tests for the two-step reset confirmation.
"""

import pytest

from scooter_dash.services.reset_confirm import (
    ResetAction,
    ResetConfirmState,
    ResetTotalsConfirmation,
    advance,
)

IDLE = ResetConfirmState.IDLE
CONFIRM_1 = ResetConfirmState.AWAITING_CONFIRM_1
CONFIRM_2 = ResetConfirmState.AWAITING_CONFIRM_2


class TestAdvance:
    """Tests for the pure transition function."""

    @pytest.mark.parametrize(
        "state,action,expected",
        [
            (IDLE, ResetAction.REQUEST, (CONFIRM_1, False)),
            (CONFIRM_1, ResetAction.CONFIRM, (CONFIRM_2, False)),
            (CONFIRM_2, ResetAction.CONFIRM, (IDLE, True)),
            (CONFIRM_1, ResetAction.CANCEL, (IDLE, False)),
            (CONFIRM_2, ResetAction.CANCEL, (IDLE, False)),
            (IDLE, ResetAction.CANCEL, (IDLE, False)),
            # Out of sequence
            (IDLE, ResetAction.CONFIRM, (IDLE, False)),
            (CONFIRM_1, ResetAction.REQUEST, (CONFIRM_1, False)),
            (CONFIRM_2, ResetAction.REQUEST, (CONFIRM_2, False)),
        ],
    )
    def test_transitions(self, state, action, expected):
        assert advance(state, action) == expected


class TestResetTotalsConfirmation:
    """Tests for the Qt wrapper."""

    def test_full_sequence_confirms_once(self):
        flow = ResetTotalsConfirmation()
        confirmed = []
        states = []
        flow.confirmed.connect(lambda: confirmed.append(True))
        flow.state_changed.connect(states.append)

        flow.request()
        flow.confirm()
        assert confirmed == []
        flow.confirm()

        assert confirmed == [True]
        assert flow.state == IDLE
        assert states == ["awaiting_confirm_1", "awaiting_confirm_2", "idle"]

    def test_cancel_from_second_step(self):
        flow = ResetTotalsConfirmation()
        confirmed = []
        flow.confirmed.connect(lambda: confirmed.append(True))

        flow.request()
        flow.confirm()
        flow.cancel()
        flow.confirm()

        assert confirmed == []
        assert flow.state == IDLE

    def test_confirm_without_request_does_nothing(self):
        flow = ResetTotalsConfirmation()
        states = []
        flow.state_changed.connect(states.append)
        flow.confirm()
        assert states == []
        assert flow.state == IDLE
