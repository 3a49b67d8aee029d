"""
Battery level tracking engine.

Tracks charge percentage consumed since start, split into foreground and
background sessions, and the per-minute drain rate over the last hour.
"""

import logging
import time
from typing import Optional

from .config import TrackerConfig
from .intervals import IntervalRecord
from .reports import BatteryStatus, SessionReport
from .samplers import UNAVAILABLE_LEVEL, BatterySampler
from .session import level_drop
from .tracker import BaseTracker, Clock, require_sampler

log = logging.getLogger(__name__)

SAMPLER_METHODS = ("read_level_percent", "read_is_charging", "read_is_power_saving")


class BatteryTracker(BaseTracker):
    """
    Tracks battery percentage drain for the running app.

    Drain is always counted as a drop in level: a rise while charging counts
    as zero, never as negative consumption. When the sampler cannot read the
    level, the last known level stands in, so that tick consumes nothing.
    """

    consumption = staticmethod(level_drop)

    def __init__(
        self,
        sampler: BatterySampler,
        config: Optional[TrackerConfig] = None,
        clock: Clock = time.time,
    ):
        require_sampler(sampler, SAMPLER_METHODS, "BatterySampler")
        super().__init__(config, clock)
        self.sampler = sampler
        self._last_known_level = None
        self.start_level = UNAVAILABLE_LEVEL
        with self._lock:
            self._reset(self._clock())

    def _reset(self, now: float) -> None:
        level = self._read_level()
        self.start_level = level
        self._last_checked_level = level
        self._last_checked_time = now
        self._start(now, level)

    def _read_level(self) -> int:
        level = self.sampler.read_level_percent()
        if 0 <= level <= 100:
            if self._last_known_level is None and self._session is not None:
                self._adopt_baseline(level)
            self._last_known_level = level
            return level
        if self._last_known_level is not None:
            log.debug("Battery level unavailable, using last known %d%%", self._last_known_level)
            return self._last_known_level
        return level

    def _adopt_baseline(self, level: int) -> None:
        # Started without a reading: the first real level becomes the start
        log.debug("First battery reading %d%%, adopting as baseline", level)
        self.start_level = level
        self._last_checked_level = level
        if self._session.last_state_change_metric == UNAVAILABLE_LEVEL:
            self._session.last_state_change_metric = level
        if self._intervals.last_interval_metric == UNAVAILABLE_LEVEL:
            self._intervals.last_interval_metric = level

    def _current_metric(self) -> float:
        return self._read_level()

    def on_tick(self, now: Optional[float] = None) -> Optional[IntervalRecord]:
        """Close the current measurement interval if it is due."""
        with self._lock:
            now = self._now(now)
            if not self._intervals.due(now):
                return None
            return self._intervals.check(now, self._read_level())

    def reset_tracking(self) -> None:
        """Restart every counter, baseline and the interval history from now."""
        with self._lock:
            self._reset(self._clock())
            log.debug("Battery tracking reset at %d%%", self.start_level)

    # Platform pass-through

    def get_battery_level(self) -> int:
        with self._lock:
            return self._read_level()

    def is_charging(self) -> bool:
        return self.sampler.read_is_charging()

    def is_power_save_mode_enabled(self) -> bool:
        return self.sampler.read_is_power_saving()

    # Reports

    def sample_consumption_rate(self) -> float:
        """
        Percent per hour drained since the previous call.

        Unlike the get_* queries this advances the "last checked" baseline.
        While charging it returns 0 and moves the baseline to the current
        level. Less than the minimum window since the last check also
        returns 0, but keeps the baseline so the drop is reported later.
        """
        with self._lock:
            now = self._clock()
            level = self._read_level()
            if self.sampler.read_is_charging():
                self._last_checked_level = level
                self._last_checked_time = now
                return 0.0

            elapsed = now - self._last_checked_time
            if elapsed < self.config.min_rate_window_seconds:
                return 0.0

            used = level_drop(self._last_checked_level, level)
            self._last_checked_level = level
            self._last_checked_time = now
            return used / (elapsed / 3600.0)

    def get_status(self) -> BatteryStatus:
        """Current level and flags. Advances the consumption-rate baseline."""
        with self._lock:
            return BatteryStatus(
                level=self._read_level(),
                is_charging=self.sampler.read_is_charging(),
                is_power_saving=self.sampler.read_is_power_saving(),
                app_consumption_rate=self.sample_consumption_rate(),
            )

    def get_usage_since_start(self) -> float:
        with self._lock:
            level = self._read_level()
            return level_drop(self.start_level, level)

    def get_session_report(self) -> SessionReport:
        with self._lock:
            now = self._clock()
            level = self._read_level()
            return SessionReport(
                start_level=self.start_level,
                current_level=level,
                total_duration_minutes=self._session.total_duration_minutes(now),
                consumed_since_start=level_drop(self.start_level, level),
                foreground_duration_minutes=self._session.foreground_duration_minutes(now),
                background_duration_minutes=self._session.background_duration_minutes(now),
            )
