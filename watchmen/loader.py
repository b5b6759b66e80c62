# watchmen/loader.py
from __future__ import annotations

import logging

from watchmen.cogs.announcer import VoiceAnnouncerCog
from watchmen.services.notifier import Notifier

logger = logging.getLogger("watchmen.loader")


async def load_all(bot, settings, store, templates):
    logger.info("Starting loader...")

    # set by the announcer when it has to stop the bot
    bot.fatal_error = None

    notifier = Notifier(
        bot,
        templates,
        settings.channel_id,
        delete_after=settings.delete_after_seconds,
    )

    # ---------------- VOICE ANNOUNCER ----------------
    # the announcer is the whole bot: a failure here must stop startup
    try:
        await bot.add_cog(VoiceAnnouncerCog(bot, settings, store, notifier))
        logger.info("VoiceAnnouncerCog loaded")
    except Exception:
        logger.exception("VoiceAnnouncerCog FAILED")
        raise

    logger.info("Loaded cogs: %s", ", ".join(bot.cogs.keys()))
