"""
Power tracking engine.

Each tick reads current and voltage, integrates drawn energy (trapezoidal
rule over the magnitude of instantaneous power) and keeps the most recent
samples for averaging. Sessions and intervals run on the cumulative energy
in microwatt-hours, so interval rates come out in microwatts.
"""

import logging
import time
from collections import deque
from typing import Optional

from .config import TrackerConfig
from .reports import EnergyConsumptionReport, PowerConsumptionData, mean_of_present
from .samplers import BatterySampler, PowerSample, PowerSampler
from .session import energy_gain
from .tracker import BaseTracker, Clock, require_sampler

log = logging.getLogger(__name__)

SAMPLER_METHODS = ("read_current_microamps", "read_voltage_millivolts")


class PowerTracker(BaseTracker):
    consumption = staticmethod(energy_gain)

    def __init__(
        self,
        sampler: PowerSampler,
        battery_sampler: Optional[BatterySampler] = None,
        config: Optional[TrackerConfig] = None,
        clock: Clock = time.time,
    ):
        require_sampler(sampler, SAMPLER_METHODS, "PowerSampler")
        if battery_sampler is not None:
            require_sampler(battery_sampler, ("read_is_charging",), "BatterySampler")
        super().__init__(config, clock)
        self.sampler = sampler
        self.battery_sampler = battery_sampler
        self._samples = deque(maxlen=self.config.sample_buffer_size)
        with self._lock:
            self._reset(self._clock())

    def _reset(self, now: float) -> None:
        self.start_time = now
        self.total_energy = 0.0
        self._samples.clear()
        self._last_sample_time = now
        # No reading yet: the first sample only sets the baseline
        self._last_power = None
        self._last_checked_energy = 0.0
        self._last_checked_time = now
        self._start(now, 0.0)

    def _current_metric(self) -> float:
        return self.total_energy

    def _integrate(self, sample: PowerSample) -> None:
        power = abs(sample.instant_power_microwatts or 0)
        if self._last_power is not None:
            hours = max(0.0, sample.timestamp - self._last_sample_time) / 3600.0
            self.total_energy += (self._last_power + power) / 2.0 * hours
        self._last_power = power
        self._last_sample_time = sample.timestamp

    def on_tick(self, now: Optional[float] = None) -> PowerSample:
        """Take a measurement, then close the current interval if it is due."""
        with self._lock:
            now = self._now(now)
            sample = PowerSample.from_readings(
                self.sampler.read_current_microamps(),
                self.sampler.read_voltage_millivolts(),
                now,
            )
            self._integrate(sample)
            self._samples.append(sample)
            self._intervals.check(now, self.total_energy)
            return sample

    def reset_tracking(self) -> None:
        """Drop accumulated energy, samples, sessions and intervals."""
        with self._lock:
            self._reset(self._clock())
            log.debug("Power tracking reset")

    def _is_charging(self) -> bool:
        if self.battery_sampler is None:
            return False
        return self.battery_sampler.read_is_charging()

    # Reports

    def get_current_power_measurement(self) -> PowerSample:
        with self._lock:
            if not self._samples:
                return self.on_tick()
            return self._samples[-1]

    def get_average_current_draw(self) -> Optional[int]:
        with self._lock:
            return mean_of_present(s.current_microamps for s in self._samples)

    def get_average_voltage(self) -> Optional[int]:
        with self._lock:
            return mean_of_present(s.voltage_millivolts for s in self._samples)

    def get_average_power(self) -> Optional[int]:
        with self._lock:
            return mean_of_present(s.instant_power_microwatts for s in self._samples)

    def get_energy_consumption_report(self) -> EnergyConsumptionReport:
        with self._lock:
            return EnergyConsumptionReport(
                duration_seconds=self._clock() - self.start_time,
                average_current_microamps=self.get_average_current_draw(),
                average_voltage_millivolts=self.get_average_voltage(),
                average_power_microwatts=self.get_average_power(),
                total_energy_microwatt_hours=self.total_energy,
            )

    def get_power_consumption_data(self) -> PowerConsumptionData:
        with self._lock:
            return PowerConsumptionData(
                energy_used_microwatt_hours=self.total_energy,
                average_power_microwatts=self.get_average_power(),
                duration_seconds=self._clock() - self.start_time,
            )

    def sample_consumption_rate(self) -> float:
        """
        Microwatts drawn on average since the previous call.

        Advances the "last checked" baseline, same rules as
        BatteryTracker.sample_consumption_rate.
        """
        with self._lock:
            now = self._clock()
            if self._is_charging():
                self._last_checked_energy = self.total_energy
                self._last_checked_time = now
                return 0.0

            elapsed = now - self._last_checked_time
            if elapsed < self.config.min_rate_window_seconds:
                return 0.0

            used = energy_gain(self._last_checked_energy, self.total_energy)
            self._last_checked_energy = self.total_energy
            self._last_checked_time = now
            return used / (elapsed / 3600.0)
