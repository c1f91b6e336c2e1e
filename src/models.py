"""Data models (Pydantic) for the V-Bucks mission watcher.

- MissionRecord: one parsed timed mission
- CacheSnapshot: the persisted daily cache file
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# --- Mission ---

class MissionRecord(BaseModel):
    """A timed mission that rewards V-Bucks.

    ``power_level`` holds digits only (empty when the source text had none).
    ``amount`` is kept as the raw token; totals parse it leniently.
    """

    model_config = ConfigDict(frozen=True)

    area: str
    power_level: str
    amount: str
    mission_type: str


# --- Cache ---

class CacheSnapshot(BaseModel):
    """Timestamped mission list, replaced wholesale on each refresh."""

    captured_at: datetime
    records: list[MissionRecord] = Field(default_factory=list)
