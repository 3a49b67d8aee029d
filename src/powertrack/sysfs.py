"""
Samplers backed by the Linux power_supply class (/sys/class/power_supply).
"""

import logging
from pathlib import Path
from typing import Optional

from .config import SYSFS_PLATFORM_PROFILE, SYSFS_POWER_SUPPLY, TrackerConfig
from .samplers import UNAVAILABLE_LEVEL, BatterySampler, PowerSampler

log = logging.getLogger(__name__)

CHARGING_STATUSES = {"Charging", "Full"}


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text().strip()
    except OSError as e:
        log.debug("Cannot read %s: %s", path, e)
        return None


def _read_int(path: Path) -> Optional[int]:
    text = _read_text(path)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        log.debug("Unexpected content in %s: %r", path, text)
        return None


class _SysfsBattery:
    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        root: str = SYSFS_POWER_SUPPLY,
        platform_profile: str = SYSFS_PLATFORM_PROFILE,
    ):
        self.config = config or TrackerConfig()
        self.battery_dir = Path(root) / self.config.sysfs_battery_name
        self.platform_profile = Path(platform_profile)


class SysfsBatterySampler(_SysfsBattery, BatterySampler):
    def read_level_percent(self) -> int:
        level = _read_int(self.battery_dir / "capacity")
        if level is None or not 0 <= level <= 100:
            return UNAVAILABLE_LEVEL
        return level

    def read_is_charging(self) -> bool:
        return _read_text(self.battery_dir / "status") in CHARGING_STATUSES

    def read_is_power_saving(self) -> bool:
        return _read_text(self.platform_profile) == "low-power"


class SysfsPowerSampler(_SysfsBattery, PowerSampler):
    """
    current_now is in microamps and voltage_now in microvolts. Batteries that
    only report power_now (microwatts) get their current derived from it.
    """

    def read_current_microamps(self) -> Optional[int]:
        current = _read_int(self.battery_dir / "current_now")
        if current is not None:
            return current
        power = _read_int(self.battery_dir / "power_now")
        voltage = self.read_voltage_millivolts()
        if power is None or not voltage:
            return None
        return power * 1000 // voltage

    def read_voltage_millivolts(self) -> Optional[int]:
        voltage = _read_int(self.battery_dir / "voltage_now")
        if voltage is None or voltage <= 0:
            return None
        return voltage // 1000
