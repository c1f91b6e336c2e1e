"""Unit tests for the Telegram mission bot (command dispatch and replies)."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import CommandHandler, MessageHandler

from cache_store import MissionCacheStore
from mission_source import MissionFetchError
from models import MissionRecord
from telegram_bot import COMMANDS, HELP_TEXT, UNKNOWN_TEXT, WELCOME_TEXT, MissionBot, parse_command

NO_MISSIONS = "*No V\\-Bucks missions found today*"


def _mission(**kw) -> MissionRecord:
    defaults = dict(area="Stonewood", power_level="80", amount="500", mission_type="PL Defend")
    defaults.update(kw)
    return MissionRecord(**defaults)


def _store(tmp_path: Path) -> MissionCacheStore:
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    return MissionCacheStore(tmp_path / "cache.json", clock=lambda: now)


def _bot(tmp_path: Path, fetch=None) -> MissionBot:
    return MissionBot("123:abc", _store(tmp_path), fetch or (lambda: [_mission()]))


def _update(text: str) -> MagicMock:
    update = MagicMock()
    update.effective_message.text = text
    update.effective_message.chat_id = 42
    update.effective_message.reply_text = AsyncMock()
    return update


class TestParseCommand:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("/vbucks", "vbucks"),
            ("/start@VBucksBot", "start"),
            ("/HELP extra words", "help"),
            ("", ""),
        ],
    )
    def test_parse(self, text, expected):
        assert parse_command(text) == expected


class TestRepliesFor:
    def test_start_sends_welcome_then_missions(self, tmp_path: Path):
        replies = _bot(tmp_path).replies_for("start")
        assert replies[0] == (WELCOME_TEXT, None)
        text, mode = replies[1]
        assert mode == ParseMode.MARKDOWN_V2
        assert "in Stonewood" in text
        assert len(replies) == 2

    def test_vbucks_sends_missions(self, tmp_path: Path):
        replies = _bot(tmp_path).replies_for("vbucks")
        assert len(replies) == 1
        text, mode = replies[0]
        assert mode == ParseMode.MARKDOWN_V2
        assert text.endswith("*Total: 500 V\\-Bucks*")

    def test_help(self, tmp_path: Path):
        assert _bot(tmp_path).replies_for("help") == [(HELP_TEXT, None)]

    def test_unknown_command(self, tmp_path: Path):
        assert _bot(tmp_path).replies_for("settings") == [(UNKNOWN_TEXT, None)]

    def test_fetch_failure_reports_no_missions(self, tmp_path: Path):
        def fetch():
            raise MissionFetchError("down")

        bot = _bot(tmp_path, fetch)
        assert bot.replies_for("vbucks") == [(NO_MISSIONS, ParseMode.MARKDOWN_V2)]

    def test_uses_cache_between_commands(self, tmp_path: Path):
        calls = []

        def fetch():
            calls.append(1)
            return [_mission()]

        bot = _bot(tmp_path, fetch)
        bot.replies_for("vbucks")
        bot.replies_for("start")
        assert len(calls) == 1


class TestHandleCommand:
    def test_replies_with_parse_mode(self, tmp_path: Path):
        update = _update("/vbucks")
        asyncio.run(_bot(tmp_path).handle_command(update, MagicMock()))

        reply = update.effective_message.reply_text
        reply.assert_awaited_once()
        assert reply.await_args.kwargs["parse_mode"] == ParseMode.MARKDOWN_V2
        assert "Stonewood" in reply.await_args.args[0]

    def test_start_sends_two_messages(self, tmp_path: Path):
        update = _update("/start")
        asyncio.run(_bot(tmp_path).handle_command(update, MagicMock()))
        assert update.effective_message.reply_text.await_count == 2

    def test_send_failure_is_logged_not_raised(self, tmp_path: Path):
        update = _update("/help")
        update.effective_message.reply_text.side_effect = TelegramError("bad request")
        asyncio.run(_bot(tmp_path).handle_command(update, MagicMock()))
        update.effective_message.reply_text.assert_awaited_once()

    def test_ignores_updates_without_text(self, tmp_path: Path):
        update = _update("")
        asyncio.run(_bot(tmp_path).handle_command(update, MagicMock()))
        update.effective_message.reply_text.assert_not_awaited()


class TestBuildApplication:
    def test_known_commands_then_command_fallback(self, tmp_path: Path):
        bot = _bot(tmp_path)
        app = bot.build_application()
        assert bot.application is app

        handlers = app.handlers[0]
        assert len(handlers) == 2
        assert isinstance(handlers[0], CommandHandler)
        assert handlers[0].commands == frozenset(COMMANDS)
        assert handlers[0].callback == bot.handle_command
        assert isinstance(handlers[1], MessageHandler)
        assert handlers[1].callback == bot.handle_command
