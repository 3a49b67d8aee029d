"""
Process-wide tracker instances for front-ends that want one shared pair.

Library users can construct BatteryTracker / PowerTracker directly instead.
"""

import logging
from threading import Lock
from typing import Optional

from .battery import BatteryTracker
from .config import TrackerConfig
from .errors import TrackerNotInitializedError
from .power import PowerTracker

log = logging.getLogger(__name__)

_battery_tracker = None
_power_tracker = None
_registry_lock = Lock()


def initialize(battery_sampler, power_sampler=None, config: Optional[TrackerConfig] = None):
    """
    Create the shared trackers. Calling it again replaces them.

    Returns (battery_tracker, power_tracker); power_tracker is None when no
    power sampler is given.
    """
    global _battery_tracker, _power_tracker
    config = config or TrackerConfig()
    battery = BatteryTracker(battery_sampler, config=config)
    power = None
    if power_sampler is not None:
        power = PowerTracker(power_sampler, battery_sampler=battery_sampler, config=config)
    with _registry_lock:
        _battery_tracker, _power_tracker = battery, power
    log.debug("Trackers initialized (power tracking %s)", "on" if power else "off")
    return battery, power


def get_battery_tracker() -> BatteryTracker:
    with _registry_lock:
        if _battery_tracker is None:
            raise TrackerNotInitializedError("powertrack.initialize() has not been called")
        return _battery_tracker


def get_power_tracker() -> PowerTracker:
    with _registry_lock:
        if _power_tracker is None:
            raise TrackerNotInitializedError(
                "No power tracker: call powertrack.initialize() with a power sampler"
            )
        return _power_tracker


def shutdown() -> None:
    """Forget the shared trackers."""
    global _battery_tracker, _power_tracker
    with _registry_lock:
        _battery_tracker = _power_tracker = None


def open_samplers(config: Optional[TrackerConfig] = None):
    """(battery_sampler, power_sampler) for config.source."""
    config = config or TrackerConfig()
    if config.source == "sysfs":
        from .sysfs import SysfsBatterySampler, SysfsPowerSampler

        return SysfsBatterySampler(config), SysfsPowerSampler(config)

    from .hardware import Ina219BatterySampler, Ina219PowerSampler, open_ina219

    device = open_ina219(config)
    return (
        Ina219BatterySampler(device, config),
        Ina219PowerSampler(device, config),
    )
