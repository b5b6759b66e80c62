# watchmen/core/events.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional


class EventKind(str, Enum):
    CONNECT = "MESSAGE_CONNECT"
    ENTERED = "MESSAGE_ENTERED"
    DISCONNECT = "MESSAGE_DISCONNECT"
    CHANGE = "MESSAGE_CHANGE"
    ENTERED_ERR = "MESSAGE_ENTERED_ERR"
    DISCONNECT_ERR = "MESSAGE_DISCONNECT_ERR"
    CHANGE_ERR = "MESSAGE_CHANGE_ERR"
    DEFAULT = "DEFAULT"

    @classmethod
    def from_key(cls, key: str) -> Optional["EventKind"]:
        """
        Resolve a messages.json key. Accepts the stored value
        ("MESSAGE_ENTERED") or the member name ("ENTERED").
        Returns None for unknown keys.
        """
        try:
            return cls(key)
        except ValueError:
            return cls.__members__.get(key)


@dataclass(frozen=True)
class Transition:
    """
    What a single voice-state change did, relative to the guild's voice channels.
    """

    connected: bool = False
    disconnected: bool = False
    changed: bool = False

    @classmethod
    def from_channels(
        cls,
        old_channel_id: int | None,
        new_channel_id: int | None,
        voice_channel_ids: Iterable[int],
    ) -> "Transition":
        voice_ids = set(voice_channel_ids)
        is_voice = old_channel_id in voice_ids or new_channel_id in voice_ids

        return cls(
            connected=is_voice and old_channel_id is None,
            disconnected=is_voice and new_channel_id is None,
            changed=is_voice and old_channel_id is not None and new_channel_id is not None,
        )


Rule = tuple[Callable[[Transition, bool], bool], EventKind]

# First matching row wins. Rate-limit-ok rows must stay above the _ERR rows.
DECISION_TABLE: tuple[Rule, ...] = (
    (lambda t, ok: ok and t.connected, EventKind.ENTERED),
    (lambda t, ok: ok and t.disconnected, EventKind.DISCONNECT),
    (lambda t, ok: ok and t.changed, EventKind.CHANGE),
    (lambda t, ok: t.connected, EventKind.ENTERED_ERR),
    (lambda t, ok: t.disconnected, EventKind.DISCONNECT_ERR),
    (lambda t, ok: t.changed, EventKind.CHANGE_ERR),
)


def classify(transition: Transition, rate_limit_ok: bool) -> EventKind:
    for guard, kind in DECISION_TABLE:
        if guard(transition, rate_limit_ok):
            return kind
    return EventKind.DEFAULT
