"""Telegram bot for daily V-Bucks missions.

Uses python-telegram-bot (long polling) to answer:
- /start  : welcome text followed by today's missions
- /vbucks : today's missions
- /help   : command list
Any other command gets a pointer to /help.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from telegram import Update
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import Application, CommandHandler, ContextTypes, MessageHandler, filters

from cache_store import MissionCacheStore
from mission_formatter import format_telegram
from models import MissionRecord

log = logging.getLogger("vbucks-missions.telegram")

WELCOME_TEXT = (
    "Welcome to the Fortnite V-Bucks Missions Bot!\n\n"
    "This bot will notify you of daily V-Bucks missions in Fortnite Save the World.\n\n"
    "Here are today's missions:"
)
HELP_TEXT = (
    "Available commands:\n"
    "/vbucks - Show today's V-Bucks missions\n"
    "/help - Show this help message"
)
UNKNOWN_TEXT = "Unknown command. Try /help"

COMMANDS = ("start", "vbucks", "help")

Reply = tuple[str, Optional[str]]


def parse_command(text: str) -> str:
    """Return the bare command name from ``"/cmd@BotName args"``."""
    first = (text or "").strip().split(maxsplit=1)
    if not first:
        return ""
    return first[0].lstrip("/").split("@", 1)[0].lower()


class MissionBot:
    """Answers mission commands from the shared cache store."""

    def __init__(
        self,
        token: str,
        store: MissionCacheStore,
        fetch: Callable[[], list[MissionRecord]],
    ) -> None:
        self._token = token
        self.store = store
        self._fetch = fetch
        self.application: Application | None = None

    # ------------------------------------------------------------------
    # Replies
    # ------------------------------------------------------------------

    def missions_text(self) -> str:
        """Today's missions as MarkdownV2; an empty list if the refresh fails."""
        try:
            missions = self.store.get_or_refresh(self._fetch)
        except Exception:
            log.exception("Failed to get missions")
            missions = []
        return format_telegram(missions)

    def replies_for(self, command: str) -> list[Reply]:
        """Return the ``(text, parse_mode)`` messages answering *command*."""
        if command == "start":
            return [
                (WELCOME_TEXT, None),
                (self.missions_text(), ParseMode.MARKDOWN_V2),
            ]
        if command == "vbucks":
            return [(self.missions_text(), ParseMode.MARKDOWN_V2)]
        if command == "help":
            return [(HELP_TEXT, None)]
        return [(UNKNOWN_TEXT, None)]

    # ------------------------------------------------------------------
    # Telegram handlers
    # ------------------------------------------------------------------

    async def handle_command(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        message = update.effective_message
        if message is None or not message.text:
            return

        log.info("Received message from chat ID: %s", message.chat_id)
        command = parse_command(message.text)
        # Cache refreshes block on HTTP, keep them off the event loop
        replies = await asyncio.to_thread(self.replies_for, command)

        for text, parse_mode in replies:
            try:
                await message.reply_text(text, parse_mode=parse_mode)
            except TelegramError:
                log.exception("Failed to send reply for /%s", command)

    def build_application(self) -> Application:
        app = Application.builder().token(self._token).build()
        app.add_handler(CommandHandler(list(COMMANDS), self.handle_command))
        app.add_handler(MessageHandler(filters.COMMAND, self.handle_command))
        self.application = app
        return app

    def run(self) -> None:
        """Poll Telegram for updates until interrupted."""
        app = self.application or self.build_application()
        log.info("Starting Telegram polling")
        app.run_polling(allowed_updates=Update.ALL_TYPES)
