"""Immutable snapshots handed to display layers."""

from dataclasses import dataclass
from statistics import mean
from typing import Iterable, Optional


@dataclass(frozen=True)
class BatteryStatus:
    level: int
    is_charging: bool
    is_power_saving: bool
    app_consumption_rate: float


@dataclass(frozen=True)
class SessionReport:
    start_level: int
    current_level: int
    total_duration_minutes: int
    consumed_since_start: float
    foreground_duration_minutes: int = 0
    background_duration_minutes: int = 0


@dataclass(frozen=True)
class EnergyConsumptionReport:
    duration_seconds: float
    average_current_microamps: Optional[int]
    average_voltage_millivolts: Optional[int]
    average_power_microwatts: Optional[int]
    total_energy_microwatt_hours: Optional[float]


@dataclass(frozen=True)
class PowerConsumptionData:
    energy_used_microwatt_hours: float
    average_power_microwatts: Optional[int]
    duration_seconds: float

    @property
    def consumption_rate_watts(self) -> Optional[float]:
        """Average draw in watts (Wh per hour), None before any time has passed."""
        if self.duration_seconds <= 0:
            return None
        hours = self.duration_seconds / 3600.0
        return self.energy_used_microwatt_hours / (hours * 1_000_000)


def mean_of_present(values: Iterable[Optional[int]]) -> Optional[int]:
    """Integer mean of the values that are not None, or None if there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return int(mean(present))
