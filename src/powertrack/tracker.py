"""
Shared machinery for the battery and power tracking engines.

An engine owns a SessionTracker and an IntervalAggregator over one metric
and guards both with a single re-entrant lock, so every public operation
appears atomic to concurrent callers. Engines never schedule anything
themselves: a driver calls on_tick() and forwards lifecycle events.
"""

import time
from abc import ABC, abstractmethod
from threading import RLock
from typing import Callable, Optional, Tuple

from .config import TrackerConfig
from .errors import InvalidSamplerError
from .intervals import IntervalAggregator, IntervalRecord
from .lifecycle import LifecycleEvent
from .session import SessionTracker, level_drop

Clock = Callable[[], float]


def require_sampler(sampler, methods: Tuple[str, ...], kind: str) -> None:
    """Raise InvalidSamplerError unless sampler provides every method."""
    missing = [name for name in methods if not callable(getattr(sampler, name, None))]
    if missing:
        raise InvalidSamplerError(
            f"{type(sampler).__name__} is not a {kind}: missing {', '.join(missing)}"
        )


class BaseTracker(ABC):
    consumption = staticmethod(level_drop)

    def __init__(self, config: Optional[TrackerConfig] = None, clock: Clock = time.time):
        self.config = config or TrackerConfig()
        self._clock = clock
        self._lock = RLock()
        self._session = None
        self._intervals = None

    def _start(self, now: float, metric: float) -> None:
        """Build session and interval state, or re-baseline it on reset."""
        if self._session is not None:
            self._session.reset(now, metric)
            self._intervals.reset(now, metric)
            return
        self._session = SessionTracker(now, metric, self.consumption)
        self._intervals = IntervalAggregator(
            now,
            metric,
            width=self.config.interval_seconds,
            capacity=self.config.interval_capacity,
            consumption=self.consumption,
        )

    def _now(self, now: Optional[float] = None) -> float:
        return self._clock() if now is None else now

    @abstractmethod
    def _current_metric(self) -> float:
        """The value sessions and intervals are measured on."""

    @abstractmethod
    def on_tick(self, now: Optional[float] = None):
        ...

    @abstractmethod
    def reset_tracking(self) -> None:
        ...

    # Lifecycle

    def on_lifecycle_event(self, event: LifecycleEvent, now: Optional[float] = None) -> bool:
        """Apply a lifecycle edge. Returns False when it repeats the current state."""
        with self._lock:
            now = self._now(now)
            metric = self._current_metric()
            if event is LifecycleEvent.ENTERED_FOREGROUND:
                return self._session.enter_foreground(now, metric)
            if event is LifecycleEvent.ENTERED_BACKGROUND:
                return self._session.enter_background(now, metric)
            raise ValueError(f"Unknown lifecycle event: {event!r}")

    def is_foreground(self) -> bool:
        with self._lock:
            return self._session.is_foreground

    # Session queries

    def get_foreground_usage(self) -> float:
        with self._lock:
            return self._session.foreground_usage_at(self._current_metric())

    def get_background_usage(self) -> float:
        with self._lock:
            return self._session.background_usage_at(self._current_metric())

    def get_foreground_duration_minutes(self) -> int:
        with self._lock:
            return self._session.foreground_duration_minutes(self._clock())

    def get_background_duration_minutes(self) -> int:
        with self._lock:
            return self._session.background_duration_minutes(self._clock())

    def get_total_duration_minutes(self) -> int:
        with self._lock:
            return self._session.total_duration_minutes(self._clock())

    # Interval queries

    def get_average_consumption(self, intervals: Optional[int] = None) -> Optional[float]:
        """Mean hourly rate over the most recent intervals, None before the first one closes."""
        with self._lock:
            return self._intervals.average_rate(intervals)

    def get_interval_history(self, max_intervals: Optional[int] = None) -> Tuple[IntervalRecord, ...]:
        with self._lock:
            return self._intervals.records(max_intervals)

    def get_interval_data(self, max_intervals: Optional[int] = None) -> list:
        return [record.to_dict() for record in self.get_interval_history(max_intervals)]
