"""Per-client cache of model preferences and locally observed downtimes."""

from __future__ import annotations

from datetime import datetime

from botkit.cognitive.models import DOWNTIME_THRESHOLD_MINUTES, Downtime, ModelPreferences


class SelectionState:
    """Owns the cached preferences and the process-local downtime list.

    Local downtimes are append-only for the lifetime of the owning client; stale
    entries are ignored by `active_downtimes` rather than removed. Every accessor
    returns copies so callers cannot mutate the cache.
    """

    def __init__(self, threshold_minutes: int = DOWNTIME_THRESHOLD_MINUTES) -> None:
        self.threshold_minutes = threshold_minutes
        self._preferences: ModelPreferences | None = None
        self._downtimes: list[Downtime] = []

    @property
    def preferences(self) -> ModelPreferences | None:
        if self._preferences is None:
            return None
        return self._preferences.model_copy(deep=True)

    @property
    def local_downtimes(self) -> list[Downtime]:
        return [downtime.model_copy() for downtime in self._downtimes]

    def replace_preferences(self, preferences: ModelPreferences) -> None:
        self._preferences = preferences.model_copy(deep=True)

    def record_downtime(self, downtime: Downtime) -> None:
        self._downtimes.append(downtime.model_copy())

    def prune_downtimes(self, now: datetime) -> None:
        """Drop expired entries from the cached preferences' downtime list."""
        if self._preferences is None:
            return
        self._preferences.downtimes = [
            d for d in self._preferences.downtimes if d.is_active(now, self.threshold_minutes)
        ]

    def active_downtimes(self, now: datetime) -> list[Downtime]:
        persisted = self._preferences.downtimes if self._preferences is not None else []
        return [
            downtime.model_copy()
            for downtime in [*persisted, *self._downtimes]
            if downtime.is_active(now, self.threshold_minutes)
        ]

    def merged_preferences(self, now: datetime) -> ModelPreferences:
        """Cached preferences with the persisted and local downtimes combined, for saving."""
        base = self._preferences or ModelPreferences()
        merged = base.model_copy(deep=True)
        merged.downtimes = self.active_downtimes(now)
        return merged

    def copy(self) -> SelectionState:
        clone = SelectionState(self.threshold_minutes)
        clone._preferences = self.preferences
        clone._downtimes = self.local_downtimes
        return clone
