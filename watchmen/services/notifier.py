# watchmen/services/notifier.py
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import discord

from watchmen.core.events import EventKind
from watchmen.services.templates import MessageTemplates

logger = logging.getLogger("watchmen.notifier")


class ChannelNotFoundError(RuntimeError):
    pass


class Notifier:
    """
    Posts sampled templates to the announcement channel and deletes each
    message after `delete_after` seconds.

    Sends and deletions run as background tasks owned by the notifier, so
    `cancel_pending()` can drop them on shutdown. `sleep` is injectable for tests.
    """

    def __init__(
        self,
        bot,
        templates: MessageTemplates,
        channel_id: int,
        *,
        delete_after: float = 60,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.bot = bot
        self.templates = templates
        self.channel_id = channel_id
        self.delete_after = delete_after
        self._sleep = sleep
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> set[asyncio.Task]:
        return {t for t in self._tasks if not t.done()}

    def resolve_channel(self, channel: discord.abc.Messageable | None = None):
        target = channel if channel is not None else self.bot.get_channel(self.channel_id)
        if target is None:
            raise ChannelNotFoundError(f"Announcement channel {self.channel_id} not found")
        # categories and forums resolve too, but can't take messages
        if not callable(getattr(target, "send", None)):
            raise ChannelNotFoundError(f"Channel {getattr(target, 'id', self.channel_id)} is not a text channel")
        return target

    def announce(
        self,
        kind: EventKind,
        username: str | None = None,
        channel: discord.abc.Messageable | None = None,
    ) -> asyncio.Task | None:
        """
        Sample a template for `kind` and post it without waiting for delivery.
        Returns the send task, or None when the template is empty.
        Raises ChannelNotFoundError if the target channel can't be resolved.
        """
        target = self.resolve_channel(channel)

        text = self.templates.sample(kind, username)
        if not text:
            logger.debug("No template text for %s, nothing sent", kind.value)
            return None

        logger.debug("Announcing %s for %r", kind.value, username)
        return self._spawn(self._send(target, text))

    def cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    # ---------------- internals ----------------

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _send(self, channel, text: str) -> None:
        try:
            message = await channel.send(text)
        except discord.HTTPException as exc:
            logger.warning("Failed to send announcement: %s", exc)
            return
        self._spawn(self._delete_later(message))

    async def _delete_later(self, message) -> None:
        await self._sleep(self.delete_after)
        try:
            await message.delete()
        except discord.HTTPException as exc:
            # already gone, or we lost Manage Messages
            logger.warning("Failed to delete announcement: %s", exc)
