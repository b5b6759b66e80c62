# watchmen/services/templates.py
from __future__ import annotations

import json
import random
from pathlib import Path

from watchmen.core.events import EventKind

PLACEHOLDER = "{username}"


class TemplateLoadError(RuntimeError):
    pass


class MessageTemplates:
    """
    Event kind -> list of message templates, read once from messages.json.
    """

    def __init__(self, templates: dict[EventKind, list[str]] | None = None, rng: random.Random | None = None):
        self._templates: dict[EventKind, list[str]] = dict(templates or {})
        self._rng = rng or random.Random()

    @classmethod
    def load(cls, path: str | Path, rng: random.Random | None = None) -> "MessageTemplates":
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise TemplateLoadError(f"Cannot read message templates from {path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise TemplateLoadError(f"{path} must contain a JSON object keyed by event kind")

        templates: dict[EventKind, list[str]] = {}
        for key, values in raw.items():
            kind = EventKind.from_key(key)
            if kind is None:
                continue
            if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                raise TemplateLoadError(f"{path}: '{key}' must be a list of strings")
            templates[kind] = list(values)

        return cls(templates, rng=rng)

    def kinds(self) -> list[EventKind]:
        return list(self._templates)

    def sample(self, kind: EventKind, username: str | None = None) -> str:
        options = self._templates.get(kind)
        if not options:
            return ""
        template = self._rng.choice(options)
        return template.replace(PLACEHOLDER, username or "", 1)
