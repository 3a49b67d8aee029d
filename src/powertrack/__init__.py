"""
powertrack - battery and power consumption tracking.

This package provides:
- Battery level and power draw samplers (INA219 UPS hat, Linux sysfs)
- Foreground/background session accounting
- Per-minute consumption intervals over a rolling hour
- System tray indicator and conky status output
"""

__version__ = "1.0.0"

from .battery import BatteryTracker
from .config import TrackerConfig
from .errors import (
    ConfigError,
    InvalidSamplerError,
    PowertrackError,
    TrackerNotInitializedError,
)
from .intervals import IntervalRecord
from .lifecycle import ActivityCounter, LifecycleEvent
from .power import PowerTracker
from .registry import get_battery_tracker, get_power_tracker, initialize
from .reports import (
    BatteryStatus,
    EnergyConsumptionReport,
    PowerConsumptionData,
    SessionReport,
)
from .samplers import (
    UNAVAILABLE_LEVEL,
    BatterySample,
    BatterySampler,
    PowerSample,
    PowerSampler,
)

__all__ = [
    "ActivityCounter",
    "BatterySample",
    "BatterySampler",
    "BatteryStatus",
    "BatteryTracker",
    "ConfigError",
    "EnergyConsumptionReport",
    "IntervalRecord",
    "InvalidSamplerError",
    "LifecycleEvent",
    "PowerConsumptionData",
    "PowerSample",
    "PowerSampler",
    "PowerTracker",
    "PowertrackError",
    "SessionReport",
    "TrackerConfig",
    "TrackerNotInitializedError",
    "UNAVAILABLE_LEVEL",
    "get_battery_tracker",
    "get_power_tracker",
    "initialize",
]
