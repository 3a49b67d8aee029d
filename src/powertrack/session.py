"""
Foreground/background session accounting.

Exactly one category is open at a time. Closing it folds the elapsed time
and the metric consumed since the last state change into that category's
totals. The tracker does no locking of its own; the owning engine
serializes access.
"""

import logging
from typing import Callable

log = logging.getLogger(__name__)

# (earlier, later) -> amount consumed, never negative
Consumption = Callable[[float, float], float]


def level_drop(earlier: float, later: float) -> float:
    """Consumption for a metric that falls as the battery drains."""
    return max(0.0, earlier - later)


def energy_gain(earlier: float, later: float) -> float:
    """Consumption for a metric that grows as energy is drawn."""
    return max(0.0, later - earlier)


class SessionTracker:
    def __init__(self, now: float, metric: float, consumption: Consumption = level_drop):
        self._consumption = consumption
        self.is_foreground = True
        self.reset(now, metric)

    def reset(self, now: float, metric: float) -> None:
        """
        Zero the totals and re-baseline at now. The open category stays
        open: only lifecycle events move between foreground and background.
        """
        self.app_start_time = now
        self.last_state_change_time = now
        self.last_state_change_metric = metric
        self.foreground_duration = 0.0
        self.background_duration = 0.0
        self.foreground_usage = 0.0
        self.background_usage = 0.0

    def enter_foreground(self, now: float, metric: float) -> bool:
        """Close the background session. Returns False if already foreground."""
        if self.is_foreground:
            return False
        elapsed, used = self._close(now, metric)
        self.background_duration += elapsed
        self.background_usage += used
        self.is_foreground = True
        log.debug("Foreground after %.0fs in background (used %.2f)", elapsed, used)
        return True

    def enter_background(self, now: float, metric: float) -> bool:
        """Close the foreground session. Returns False if already background."""
        if not self.is_foreground:
            return False
        elapsed, used = self._close(now, metric)
        self.foreground_duration += elapsed
        self.foreground_usage += used
        self.is_foreground = False
        log.debug("Background after %.0fs in foreground (used %.2f)", elapsed, used)
        return True

    def _close(self, now: float, metric: float):
        elapsed = max(0.0, now - self.last_state_change_time)
        used = self._consumption(self.last_state_change_metric, metric)
        self.last_state_change_time = now
        self.last_state_change_metric = metric
        return elapsed, used

    # Queries

    def _open_usage(self, metric: float) -> float:
        return self._consumption(self.last_state_change_metric, metric)

    def _open_elapsed(self, now: float) -> float:
        return max(0.0, now - self.last_state_change_time)

    def foreground_usage_at(self, metric: float) -> float:
        if self.is_foreground:
            return self.foreground_usage + self._open_usage(metric)
        return self.foreground_usage

    def background_usage_at(self, metric: float) -> float:
        if not self.is_foreground:
            return self.background_usage + self._open_usage(metric)
        return self.background_usage

    def foreground_duration_minutes(self, now: float) -> int:
        total = self.foreground_duration
        if self.is_foreground:
            total += self._open_elapsed(now)
        return int(total // 60)

    def background_duration_minutes(self, now: float) -> int:
        total = self.background_duration
        if not self.is_foreground:
            total += self._open_elapsed(now)
        return int(total // 60)

    def total_duration_minutes(self, now: float) -> int:
        return int(max(0.0, now - self.app_start_time) // 60)
