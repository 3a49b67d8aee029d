"""
Fixed-width interval aggregation.

Each time a window of `width` seconds has elapsed, check() closes it and
stores the hourly consumption rate observed over it. Only the most recent
`capacity` records are kept. A check that arrives late closes a single
longer window; elapsed time is never split into windows that were not
actually observed.
"""

import logging
from collections import deque
from dataclasses import asdict, dataclass
from typing import Optional, Tuple

from .config import INTERVAL_CAPACITY, INTERVAL_SECONDS
from .session import Consumption, level_drop

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntervalRecord:
    interval_start: float
    interval_end: float
    start_metric: float
    end_metric: float
    rate_per_hour: float

    @property
    def duration_minutes(self) -> float:
        return (self.interval_end - self.interval_start) / 60.0

    def to_dict(self) -> dict:
        """Flat mapping for display layers (times in epoch milliseconds)."""
        return {
            "startTimeMillis": int(self.interval_start * 1000),
            "endTimeMillis": int(self.interval_end * 1000),
            "durationMinutes": self.duration_minutes,
            "startMetric": self.start_metric,
            "endMetric": self.end_metric,
            "consumptionRate": self.rate_per_hour,
        }


class IntervalAggregator:
    def __init__(
        self,
        now: float,
        metric: float,
        width: float = INTERVAL_SECONDS,
        capacity: int = INTERVAL_CAPACITY,
        consumption: Consumption = level_drop,
    ):
        self.width = width
        self._consumption = consumption
        # deque append with maxlen evicts the oldest in the same step
        self._records = deque(maxlen=capacity)
        self.reset(now, metric)

    @property
    def capacity(self) -> int:
        return self._records.maxlen

    def __len__(self) -> int:
        return len(self._records)

    def reset(self, now: float, metric: float) -> None:
        self._records.clear()
        self.last_interval_time = now
        self.last_interval_metric = metric

    def due(self, now: float) -> bool:
        return now - self.last_interval_time >= self.width

    def check(self, now: float, metric: float) -> Optional[IntervalRecord]:
        """Close the current window if it has run its full width."""
        if not self.due(now):
            return None

        used = self._consumption(self.last_interval_metric, metric)
        hours = (now - self.last_interval_time) / 3600.0
        rate = used / hours if hours > 0 else 0.0

        record = IntervalRecord(
            interval_start=self.last_interval_time,
            interval_end=now,
            start_metric=self.last_interval_metric,
            end_metric=metric,
            rate_per_hour=rate,
        )
        self._records.append(record)
        log.debug("Interval closed: %s", asdict(record))

        self.last_interval_time = now
        self.last_interval_metric = metric
        return record

    def records(self, max_count: Optional[int] = None) -> Tuple[IntervalRecord, ...]:
        """The last max_count records, oldest first (all when None)."""
        records = tuple(self._records)
        if max_count is None:
            return records
        if max_count <= 0:
            return ()
        return records[-max_count:]

    def average_rate(self, count: Optional[int] = None) -> Optional[float]:
        """
        Mean rate over the last `count` records. None, zero or a count larger
        than what is stored all mean "every stored record". Returns None when
        nothing has been recorded yet.
        """
        if not self._records:
            return None
        if count is None or count <= 0:
            count = len(self._records)
        selected = self.records(min(count, len(self._records)))
        return sum(r.rate_per_hour for r in selected) / len(selected)
