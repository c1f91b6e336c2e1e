"""V-Bucks missions Telegram bot – long-running entry point.

Loads settings from ``.env``, wires the daily cache and the page
fetcher into the bot, and polls Telegram until interrupted.
"""

from __future__ import annotations

import functools
import logging
import sys

from cache_store import MissionCacheStore
from config import ConfigError, load_settings
from mission_source import fetch_missions
from telegram_bot import MissionBot

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
log = logging.getLogger("vbucks-missions")


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as exc:
        log.error("Error loading settings: %s", exc)
        return 1

    logging.getLogger().setLevel(settings.log_level.upper())
    # httpx logs every request at INFO, including the bot token in the URL
    logging.getLogger("httpx").setLevel(logging.WARNING)

    log.info("=== V-Bucks missions bot starting ===")
    log.info("Cache: %s | Source: %s", settings.cache_file, settings.missions_url)

    store = MissionCacheStore(settings.cache_file)
    fetch = functools.partial(
        fetch_missions,
        settings.missions_url,
        timeout_s=settings.fetch_timeout_s,
    )
    bot = MissionBot(settings.telegram_bot_token, store, fetch)
    bot.run()

    log.info("=== V-Bucks missions bot stopped ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
