"""Tests for voice transition classification."""

import pytest

from watchmen.core.events import DECISION_TABLE, EventKind, Transition, classify

VOICE = [100, 200]


class TestTransitionFromChannels:
    def test_join_voice_channel(self) -> None:
        t = Transition.from_channels(None, 100, VOICE)
        assert t == Transition(connected=True)

    def test_leave_voice_channel(self) -> None:
        t = Transition.from_channels(200, None, VOICE)
        assert t == Transition(disconnected=True)

    def test_move_between_voice_channels(self) -> None:
        t = Transition.from_channels(100, 200, VOICE)
        assert t == Transition(changed=True)

    def test_move_from_unknown_channel_into_voice(self) -> None:
        """Only one side needs to be a voice channel."""
        t = Transition.from_channels(999, 100, VOICE)
        assert t.changed is True

    def test_non_voice_channels_produce_nothing(self) -> None:
        t = Transition.from_channels(None, 555, VOICE)
        assert t == Transition()


class TestClassify:
    @pytest.mark.parametrize(
        ("transition", "rate_limit_ok", "expected"),
        [
            (Transition(connected=True), True, EventKind.ENTERED),
            (Transition(disconnected=True), True, EventKind.DISCONNECT),
            (Transition(changed=True), True, EventKind.CHANGE),
            (Transition(connected=True), False, EventKind.ENTERED_ERR),
            (Transition(disconnected=True), False, EventKind.DISCONNECT_ERR),
            (Transition(changed=True), False, EventKind.CHANGE_ERR),
            (Transition(), True, EventKind.DEFAULT),
            (Transition(), False, EventKind.DEFAULT),
        ],
    )
    def test_decision(self, transition, rate_limit_ok, expected) -> None:
        assert classify(transition, rate_limit_ok) is expected

    def test_connected_wins_over_changed(self) -> None:
        t = Transition(connected=True, changed=True)
        assert classify(t, True) is EventKind.ENTERED
        assert classify(t, False) is EventKind.ENTERED_ERR

    def test_rate_limited_rows_come_after_ok_rows(self) -> None:
        kinds = [kind for _, kind in DECISION_TABLE]
        assert kinds.index(EventKind.CHANGE) < kinds.index(EventKind.ENTERED_ERR)


class TestEventKindFromKey:
    def test_value_key(self) -> None:
        assert EventKind.from_key("MESSAGE_ENTERED") is EventKind.ENTERED

    def test_member_name_alias(self) -> None:
        assert EventKind.from_key("CHANGE_ERR") is EventKind.CHANGE_ERR

    def test_unknown_key(self) -> None:
        assert EventKind.from_key("MESSAGE_BIRTHDAY") is None
