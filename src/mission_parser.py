"""Mission fragment parser.

Turns one scraped line such as ``"500 80PL Defend in Stonewood"`` into a
:class:`MissionRecord`. The page layout is not under our control, so lines
that don't fit the ``<amount> <power level> [type...] in <area>`` shape are
dropped (``None``) instead of raising.
"""

from __future__ import annotations

import logging
from typing import Iterable

from mission_filter import should_skip
from models import MissionRecord

logger = logging.getLogger(__name__)

AREA_SEPARATOR = " in "

_ASCII_DIGITS = frozenset("0123456789")


def split_power_level(token: str) -> tuple[str, str]:
    """Split *token* into its leading ASCII digits and the remainder.

    ``"80PL"`` -> ``("80", "PL")``, ``"90"`` -> ``("90", "")``,
    ``"PL"`` -> ``("", "PL")``.
    """
    idx = 0
    while idx < len(token) and token[idx] in _ASCII_DIGITS:
        idx += 1
    return token[:idx], token[idx:]


def parse_mission(fragment: str) -> MissionRecord | None:
    """Parse a single fragment. Returns None if the fragment is malformed."""
    text = (fragment or "").strip()

    head, sep, tail = text.partition(AREA_SEPARATOR)
    if not sep:
        return None
    area = tail.strip()

    fields = head.split()
    if len(fields) < 2:
        return None

    amount = fields[0]
    power_level, suffix = split_power_level(fields[1])
    rest = " ".join(fields[2:])

    # Text glued to the power level (e.g. "80PL") belongs to the mission type
    if suffix:
        mission_type = suffix + " " + rest
    else:
        mission_type = rest

    return MissionRecord(
        area=area,
        power_level=power_level,
        amount=amount,
        mission_type=mission_type.strip(),
    )


def parse_missions(fragments: Iterable[str]) -> list[MissionRecord]:
    """Filter and parse *fragments*, keeping document order."""
    missions: list[MissionRecord] = []
    dropped = 0
    for fragment in fragments:
        if should_skip(fragment):
            continue
        mission = parse_mission(fragment)
        if mission is None:
            dropped += 1
            logger.debug("Dropped malformed fragment: %r", fragment[:80])
            continue
        missions.append(mission)
    if dropped:
        logger.debug("parse_missions: dropped %d malformed fragment(s)", dropped)
    return missions
