# watchmen/main.py
import asyncio
import logging

import discord
from discord.ext import commands

from watchmen.config import load_settings
from watchmen.loader import load_all
from watchmen.services.templates import MessageTemplates
from watchmen.services.user_store import UserStore

logger = logging.getLogger("watchmen.main")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # discord.py is chatty at INFO
    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("discord.http").setLevel(logging.WARNING)


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True
    intents.voice_states = True
    intents.members = True
    intents.presences = True
    return intents


async def run():
    settings = load_settings()
    setup_logging(settings.log_level)
    logger.info("USERS=%s | MESSAGES=%s", settings.users_path, settings.messages_path)

    # templates are required; a bad file aborts before we ever connect
    templates = MessageTemplates.load(settings.messages_path)

    store = UserStore(settings.users_path, cooldown_seconds=settings.cooldown_seconds)
    store.load()

    bot = commands.Bot(command_prefix=commands.when_mentioned, intents=build_intents())

    @bot.event
    async def setup_hook():
        await load_all(bot, settings, store, templates)

    try:
        await bot.start(settings.token)
    finally:
        if not bot.is_closed():
            await bot.close()

    fatal = getattr(bot, "fatal_error", None)
    if fatal is not None:
        raise fatal


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
