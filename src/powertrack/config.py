"""
Tracker configuration.
Module constants are the defaults; TrackerConfig.from_env() lets a
deployment override them through POWERTRACK_* environment variables.
"""

import os
from dataclasses import dataclass, fields

from .errors import ConfigError

# Interval aggregation
INTERVAL_SECONDS = 60.0
INTERVAL_CAPACITY = 60  # 1 hour of 1-minute intervals

# Instantaneous rate query
MIN_RATE_WINDOW_SECONDS = 60.0

# Power engine rolling sample buffer
SAMPLE_BUFFER_SIZE = 60

# Driver cadence
TICK_SECONDS = 1

# INA219 wiring (3S Li-ion UPS hat)
SHUNT_OHMS = 0.1
I2C_ADDRESS = 0x41
I2C_BUS = 1
CHARGE_CURRENT_THRESHOLD_MA = 10  # above this = charging

# Linux power_supply class
SYSFS_POWER_SUPPLY = "/sys/class/power_supply"
SYSFS_BATTERY_NAME = "BAT0"
SYSFS_PLATFORM_PROFILE = "/sys/firmware/acpi/platform_profile"

ENV_PREFIX = "POWERTRACK_"

# Where readings come from: "ina219" (UPS hat) or "sysfs" (laptop battery)
SOURCES = ("ina219", "sysfs")
DEFAULT_SOURCE = "ina219"


@dataclass(frozen=True)
class TrackerConfig:
    interval_seconds: float = INTERVAL_SECONDS
    interval_capacity: int = INTERVAL_CAPACITY
    min_rate_window_seconds: float = MIN_RATE_WINDOW_SECONDS
    sample_buffer_size: int = SAMPLE_BUFFER_SIZE
    tick_seconds: int = TICK_SECONDS
    shunt_ohms: float = SHUNT_OHMS
    i2c_address: int = I2C_ADDRESS
    i2c_bus: int = I2C_BUS
    charge_current_threshold_ma: float = CHARGE_CURRENT_THRESHOLD_MA
    sysfs_battery_name: str = SYSFS_BATTERY_NAME
    source: str = DEFAULT_SOURCE

    def __post_init__(self):
        if self.interval_seconds <= 0:
            raise ConfigError("interval_seconds must be positive")
        if self.interval_capacity < 1:
            raise ConfigError("interval_capacity must be at least 1")
        if self.sample_buffer_size < 1:
            raise ConfigError("sample_buffer_size must be at least 1")
        if self.tick_seconds < 1:
            raise ConfigError("tick_seconds must be at least 1")
        if self.source not in SOURCES:
            raise ConfigError(f"source must be one of {', '.join(SOURCES)}, not {self.source!r}")

    @classmethod
    def from_env(cls, environ=None) -> "TrackerConfig":
        """Build a config, overriding defaults from POWERTRACK_<FIELD> variables."""
        environ = os.environ if environ is None else environ
        overrides = {}
        for field in fields(cls):
            raw = environ.get(ENV_PREFIX + field.name.upper())
            if raw is None or raw == "":
                continue
            overrides[field.name] = _parse(field.name, field.type, raw)
        return cls(**overrides)


def _parse(name: str, kind, raw: str):
    # field.type is a string when annotations are postponed
    kind_name = kind if isinstance(kind, str) else kind.__name__
    try:
        if kind_name == "int":
            return int(raw, 0)
        if kind_name == "float":
            return float(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name.upper()}={raw!r} is not a valid {kind_name}") from None
    return raw
