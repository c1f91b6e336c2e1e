"""Daily mission cache.

The mission list changes once a day. A snapshot stays authoritative from
00:10 UTC until the end of the same UTC day; before 00:10 nothing is
considered fresh, so the first request after the reset always refetches.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, time, timezone
from pathlib import Path
from typing import Callable

from models import CacheSnapshot, MissionRecord

logger = logging.getLogger(__name__)

DAILY_RESET = time(0, 10, tzinfo=timezone.utc)


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Freshness
# ---------------------------------------------------------------------------

def daily_reset_at(now: datetime) -> datetime:
    """Return 00:10:00 UTC on *now*'s UTC calendar day."""
    return datetime.combine(_utc(now).date(), DAILY_RESET)


def is_snapshot_fresh(captured_at: datetime, now: datetime) -> bool:
    """Return ``True`` if a snapshot taken at *captured_at* is valid at *now*.

    Both instants must be strictly after today's reset, and on the same
    UTC calendar day.
    """
    captured_at = _utc(captured_at)
    now = _utc(now)
    reset = daily_reset_at(now)
    return captured_at > reset and now > reset and captured_at.date() == now.date()


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class MissionCacheStore:
    """JSON file holding the latest :class:`CacheSnapshot`.

    Args:
        path: Cache file location.
        clock: Zero-arg callable returning the current aware UTC time.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.path = Path(path)
        self._clock = clock or _utc_now
        self._refresh_lock = threading.Lock()

    def now(self) -> datetime:
        return _utc(self._clock())

    def load(self) -> tuple[CacheSnapshot, bool]:
        """Read the cache file.

        Returns ``(snapshot, is_valid)``. A missing, unreadable or corrupt
        file yields an empty snapshot and ``False``.
        """
        now = self.now()
        empty = CacheSnapshot(captured_at=now, records=[])
        if not self.path.exists():
            return empty, False
        try:
            raw = self.path.read_text(encoding="utf-8")
            snapshot = CacheSnapshot.model_validate_json(raw)
        except OSError as exc:
            logger.warning("Failed to read cache file %s: %s", self.path, exc)
            return empty, False
        except (json.JSONDecodeError, ValueError) as exc:
            logger.warning("Failed to parse cache file %s: %s", self.path, exc)
            return empty, False

        return snapshot, is_snapshot_fresh(snapshot.captured_at, now)

    def save(self, records: list[MissionRecord]) -> CacheSnapshot | None:
        """Overwrite the cache with *records* stamped with the current time.

        Returns the written snapshot, or None if it could not be persisted.
        """
        snapshot = CacheSnapshot(captured_at=self.now(), records=list(records))
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError:
            logger.exception("Failed to write cache file %s", self.path)
            return None
        logger.info("Cached %d mission(s) to %s", len(snapshot.records), self.path)
        return snapshot

    def get_or_refresh(
        self,
        fetch: Callable[[], list[MissionRecord]],
    ) -> list[MissionRecord]:
        """Return today's missions, calling *fetch* on a cache miss.

        Refreshes are serialized; callers that waited on the lock reuse the
        snapshot written by the caller ahead of them. Errors from *fetch*
        propagate.
        """
        snapshot, valid = self.load()
        if valid:
            return snapshot.records

        with self._refresh_lock:
            snapshot, valid = self.load()
            if valid:
                logger.debug("Cache refreshed by a concurrent caller")
                return snapshot.records

            logger.info("Cache miss, fetching missions")
            records = fetch()
            self.save(records)
            return records
