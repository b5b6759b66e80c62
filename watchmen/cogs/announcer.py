# watchmen/cogs/announcer.py

import logging

import discord
from discord.ext import commands

from watchmen.core.events import EventKind, Transition, classify
from watchmen.services.notifier import ChannelNotFoundError, Notifier
from watchmen.services.user_store import UserStore

logger = logging.getLogger("watchmen.announcer")


class VoiceAnnouncerCog(commands.Cog):
    """
    Announces voice channel joins, leaves and moves in the configured text channel.
    - One CONNECT announcement when the bot comes online
    - Per-user cooldown: inside the window the *_ERR templates are used instead
    - Every attempt restarts the user's cooldown, even when nothing was posted
    """

    def __init__(self, bot: commands.Bot, settings, store: UserStore, notifier: Notifier):
        self.bot = bot
        self.settings = settings
        self.store = store
        self.notifier = notifier
        self._announced_online = False

    def cog_unload(self):
        self.notifier.cancel_pending()

    async def _fatal(self, exc: Exception) -> None:
        logger.critical("Stopping: %s", exc)
        self.bot.fatal_error = exc
        await self.bot.close()

    # ---------------- ready ----------------

    @commands.Cog.listener()
    async def on_ready(self):
        if self._announced_online:
            return
        self._announced_online = True

        logger.info("Online as %s | guilds=%d", self.bot.user, len(self.bot.guilds))
        try:
            self.notifier.announce(EventKind.CONNECT)
        except ChannelNotFoundError as exc:
            await self._fatal(exc)

    # ---------------- voice state updates ----------------

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ):
        old_id = before.channel.id if before.channel is not None else None
        new_id = after.channel.id if after.channel is not None else None
        voice_ids = [ch.id for ch in member.guild.voice_channels]

        try:
            self.handle_voice_update(
                user_id=member.id,
                display_name=member.display_name,
                old_channel_id=old_id,
                new_channel_id=new_id,
                voice_channel_ids=voice_ids,
            )
        except ChannelNotFoundError as exc:
            await self._fatal(exc)

    def handle_voice_update(
        self,
        *,
        user_id,
        display_name: str | None,
        old_channel_id: int | None,
        new_channel_id: int | None,
        voice_channel_ids,
    ) -> EventKind | None:
        """
        Returns the announced kind, or None when the event was discarded.
        """
        user = self.store.find_or_create(user_id)
        if user is None:
            return None

        # mute/deafen/stream toggles land here with the same channel on both sides
        if old_channel_id == new_channel_id:
            return None

        transition = Transition.from_channels(old_channel_id, new_channel_id, voice_channel_ids)
        kind = classify(transition, self.store.can_notify(user.id))

        self.notifier.announce(kind, display_name)
        self.store.record_message_sent(user.id)
        return kind

