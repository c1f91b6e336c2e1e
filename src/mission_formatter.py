"""Mission list formatters.

- format_table: Markdown table for the stdout report
- format_telegram: numbered list in Telegram MarkdownV2 with a V-Bucks total
"""

from __future__ import annotations

import re
from typing import Sequence

from models import MissionRecord

TABLE_HEADER = "| Area | Power Level | Mission Type | V-Bucks |"
TABLE_SEPARATOR = "|------|-------------|--------------|---------|"
TABLE_EMPTY_ROW = "| No V-Bucks missions found | - | - | - |"

# Characters Telegram MarkdownV2 requires to be escaped outside entities
MARKDOWN_SPECIAL_CHARS = frozenset("\\_*[]()~`>#+-=|{}.!")

_INT_RE = re.compile(r"[+-]?[0-9]+")


def escape_markdown(text: str) -> str:
    """Prefix every MarkdownV2 special character in *text* with a backslash."""
    return "".join("\\" + ch if ch in MARKDOWN_SPECIAL_CHARS else ch for ch in text)


def parse_amount(amount: str) -> int:
    """Parse a raw amount token; anything that isn't a plain integer is 0."""
    if _INT_RE.fullmatch(amount.strip()):
        return int(amount)
    return 0


def total_amount(records: Sequence[MissionRecord]) -> int:
    return sum(parse_amount(r.amount) for r in records)


def format_table(records: Sequence[MissionRecord]) -> str:
    """Render *records* as a plain 4-column Markdown table (no escaping)."""
    lines = [TABLE_HEADER, TABLE_SEPARATOR]
    if not records:
        lines.append(TABLE_EMPTY_ROW)
    for r in records:
        lines.append(f"| {r.area} | {r.power_level} | {r.mission_type} | {r.amount} |")
    return "\n".join(lines)


def format_telegram(records: Sequence[MissionRecord]) -> str:
    """Render *records* for a MarkdownV2 Telegram message."""
    if not records:
        return "*No V\\-Bucks missions found today*"

    lines = ["*V\\-Bucks Missions Today*", ""]
    for i, r in enumerate(records, 1):
        lines.append(
            f"{i}\\. PL {escape_markdown(r.power_level)} "
            f"{escape_markdown(r.mission_type)} in {escape_markdown(r.area)} "
            f"\\- *{escape_markdown(r.amount)} V\\-Bucks*"
        )
    lines.append("")
    lines.append(f"*Total: {total_amount(records)} V\\-Bucks*")
    return "\n".join(lines)
