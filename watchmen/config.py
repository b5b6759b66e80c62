from __future__ import annotations

from dataclasses import dataclass
import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger("watchmen.config")


def _int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer, using %d", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    token: str
    channel_id: int

    # ---------------- Files ----------------
    users_path: str = "users.json"
    messages_path: str = "messages.json"

    # ---------------- Timing ----------------
    cooldown_seconds: int = 60          # min gap between two announcements for one user
    delete_after_seconds: int = 60      # announcements are removed after this long

    # ---------------- Logging ----------------
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv(override=False)

    # ---------- Token selection ----------
    token = (
        os.getenv("BOT_TOKEN", "").strip()
        or os.getenv("DISCORD_TOKEN", "").strip()
        or os.getenv("DISCORD_BOT_TOKEN", "").strip()
    )
    # never log the token value
    logger.debug("BOT_TOKEN present=%s len=%d", bool(token), len(token))

    if not token:
        raise RuntimeError(
            "Missing bot token.\n"
            "Set BOT_TOKEN=... (fallbacks: DISCORD_TOKEN / DISCORD_BOT_TOKEN)."
        )

    # ---------- Announcement channel ----------
    raw_channel = os.getenv("CHANNEL_ID", "").strip()
    if not raw_channel:
        raise RuntimeError("Missing CHANNEL_ID (the text channel to announce in).")
    try:
        channel_id = int(raw_channel)
    except ValueError:
        channel_id = 0
    if channel_id <= 0:
        raise RuntimeError(f"CHANNEL_ID must be a channel snowflake, got {raw_channel!r}.")

    return Settings(
        token=token,
        channel_id=channel_id,
        users_path=(os.getenv("USERS_FILE") or "").strip() or "users.json",
        messages_path=(os.getenv("MESSAGES_FILE") or "").strip() or "messages.json",
        cooldown_seconds=_int_env("COOLDOWN_SECONDS", 60),
        delete_after_seconds=_int_env("DELETE_AFTER_SECONDS", 60),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )
