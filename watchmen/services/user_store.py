# watchmen/services/user_store.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from watchmen.core.timecore import from_iso, now_utc, to_iso

logger = logging.getLogger("watchmen.store")


@dataclass
class UserRecord:
    id: str
    # set once when the user is first seen, never refreshed
    last_connected_time: datetime
    last_message_sent: datetime | None = None

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "lastConnectedTime": to_iso(self.last_connected_time),
            "lastMessageSent": to_iso(self.last_message_sent) if self.last_message_sent else None,
        }

    @classmethod
    def from_json(cls, raw: dict) -> "UserRecord":
        sent = raw.get("lastMessageSent")
        return cls(
            id=str(raw["id"]),
            last_connected_time=from_iso(raw["lastConnectedTime"]),
            last_message_sent=from_iso(sent) if sent else None,
        )


class UserStore:
    """
    In-memory user-id -> UserRecord map backed by a JSON snapshot file.

    Every mutation rewrites the whole snapshot synchronously. There is no
    locking: all access happens on the event loop thread.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        cooldown_seconds: int = 60,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.path = Path(path)
        self.cooldown = timedelta(seconds=cooldown_seconds)
        self.clock = clock
        self._users: dict[str, UserRecord] = {}

    def __len__(self) -> int:
        return len(self._users)

    def all(self) -> list[UserRecord]:
        return list(self._users.values())

    # ---------------- persistence ----------------

    def load(self) -> None:
        """
        Read the snapshot. A missing file is created empty; any other
        read error is logged and the store continues empty.
        """
        self._users.clear()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            records = [UserRecord.from_json(item) for item in raw]
        except FileNotFoundError:
            logger.info("No user snapshot at %s, creating an empty one", self.path)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("[]", encoding="utf-8")
            return
        except (OSError, ValueError, TypeError, KeyError, AttributeError):
            logger.exception("Failed to read user snapshot %s, starting empty", self.path)
            return

        for record in records:
            self._users[record.id] = record
        logger.info("Loaded %d users from %s", len(self._users), self.path)

    def save(self) -> None:
        data = json.dumps([u.to_json() for u in self._users.values()])
        self.path.write_text(data, encoding="utf-8")

    # ---------------- records ----------------

    def find_or_create(self, user_id) -> UserRecord | None:
        if not user_id:
            return None

        key = str(user_id)
        user = self._users.get(key)
        if user is None:
            user = UserRecord(id=key, last_connected_time=self.clock())
            self._users[key] = user
            self.save()
            logger.debug("New user record %s", key)
        return user

    def record_message_sent(self, user_id) -> None:
        user = self.find_or_create(user_id)
        if user is None:
            return
        user.last_message_sent = self.clock()
        self.save()

    def can_notify(self, user_id) -> bool:
        user = self._users.get(str(user_id))
        if user is None or user.last_message_sent is None:
            return True
        return self.clock() - user.last_message_sent >= self.cooldown
