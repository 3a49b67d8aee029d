"""
Sampler capabilities - the boundary between the tracking engines and the
platform's battery APIs.

Platform adapters subclass BatterySampler / PowerSampler and implement
the read_* methods. A reading that cannot be taken is reported as absent
(None, or UNAVAILABLE_LEVEL for the level) rather than raised.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

# Level reported when the platform cannot tell us the charge
UNAVAILABLE_LEVEL = -1


@dataclass(frozen=True)
class BatterySample:
    level_percent: int
    is_charging: bool
    is_power_saving: bool
    timestamp: float

    @property
    def level_available(self) -> bool:
        return 0 <= self.level_percent <= 100


@dataclass(frozen=True)
class PowerSample:
    current_microamps: Optional[int]
    voltage_millivolts: Optional[int]
    instant_power_microwatts: Optional[int]
    timestamp: float

    @classmethod
    def from_readings(
        cls, current_microamps: Optional[int], voltage_millivolts: Optional[int], timestamp: float
    ) -> "PowerSample":
        """Build a sample, deriving power (uA * mV / 1000 = uW) when both readings exist."""
        if current_microamps is not None and voltage_millivolts is not None:
            power = current_microamps * voltage_millivolts // 1000
        else:
            power = None
        return cls(current_microamps, voltage_millivolts, power, timestamp)


class BatterySampler(ABC):
    """Reads battery charge level and charging/power-save state."""

    @abstractmethod
    def read_level_percent(self) -> int:
        """Charge level 0-100, or UNAVAILABLE_LEVEL."""

    @abstractmethod
    def read_is_charging(self) -> bool:
        ...

    @abstractmethod
    def read_is_power_saving(self) -> bool:
        ...

    def sample(self, now: Optional[float] = None) -> BatterySample:
        return BatterySample(
            level_percent=self.read_level_percent(),
            is_charging=self.read_is_charging(),
            is_power_saving=self.read_is_power_saving(),
            timestamp=time.time() if now is None else now,
        )


class PowerSampler(ABC):
    """Reads instantaneous battery current and voltage."""

    @abstractmethod
    def read_current_microamps(self) -> Optional[int]:
        ...

    @abstractmethod
    def read_voltage_millivolts(self) -> Optional[int]:
        ...

    def sample(self, now: Optional[float] = None) -> PowerSample:
        return PowerSample.from_readings(
            self.read_current_microamps(),
            self.read_voltage_millivolts(),
            time.time() if now is None else now,
        )
