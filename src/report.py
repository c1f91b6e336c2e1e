"""Print today's V-Bucks missions as a Markdown table.

One-shot counterpart of the Telegram bot; shares its cache file.
Exits non-zero when the mission page cannot be fetched.
"""

from __future__ import annotations

import functools
import logging
import sys
from typing import Callable, TextIO

from cache_store import MissionCacheStore
from config import ConfigError, load_settings
from mission_formatter import format_table
from mission_source import MissionFetchError, fetch_missions
from models import MissionRecord

log = logging.getLogger("vbucks-missions.report")


def run_report(
    store: MissionCacheStore,
    fetch: Callable[[], list[MissionRecord]],
    out: TextIO | None = None,
) -> int:
    """Write the mission table to *out*. Returns the process exit code."""
    out = out or sys.stdout
    try:
        missions = store.get_or_refresh(fetch)
    except MissionFetchError as exc:
        log.error("Failed to fetch missions: %s", exc)
        return 1

    out.write(format_table(missions) + "\n")
    return 0


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )
    try:
        settings = load_settings(require_token=False)
    except ConfigError as exc:
        log.error("Error loading settings: %s", exc)
        return 1
    logging.getLogger().setLevel(settings.log_level.upper())

    store = MissionCacheStore(settings.cache_file)
    fetch = functools.partial(
        fetch_missions,
        settings.missions_url,
        timeout_s=settings.fetch_timeout_s,
    )
    return run_report(store, fetch)


if __name__ == "__main__":
    sys.exit(main())
