"""
Samplers for an INA219 current/voltage sensor on I2C (Raspberry Pi UPS hats).
Battery level is estimated from pack voltage with a 3S Li-ion discharge curve.
"""

import logging
from typing import Optional

from ina219 import INA219, DeviceRangeError

from .config import TrackerConfig
from .samplers import UNAVAILABLE_LEVEL, BatterySampler, PowerSampler

log = logging.getLogger(__name__)

# 3S Li-ion discharge curve (voltage -> percent)
# More data points in the flat middle region for better accuracy
DISCHARGE_CURVE = [
    (12.60, 100),
    (12.50, 95),
    (12.40, 90),
    (12.30, 85),
    (12.20, 80),
    (12.00, 75),
    (11.90, 70),
    (11.80, 65),
    (11.70, 60),
    (11.60, 55),
    (11.50, 50),
    (11.40, 45),
    (11.30, 40),
    (11.20, 35),
    (11.10, 30),
    (11.00, 25),
    (10.80, 20),
    (10.60, 15),
    (10.40, 10),
    (10.20, 7),
    (10.00, 5),
    (9.80, 3),
    (9.60, 2),
    (9.40, 1),
    (9.00, 0),
]


def voltage_to_percent(voltage: float) -> float:
    """Convert pack voltage to charge percentage along the discharge curve."""
    if voltage >= DISCHARGE_CURVE[0][0]:
        return 100.0
    if voltage <= DISCHARGE_CURVE[-1][0]:
        return 0.0

    for (v_high, p_high), (v_low, p_low) in zip(DISCHARGE_CURVE, DISCHARGE_CURVE[1:]):
        if v_low <= voltage <= v_high:
            ratio = (voltage - v_low) / (v_high - v_low)
            return p_low + ratio * (p_high - p_low)
    return 0.0


def open_ina219(config: Optional[TrackerConfig] = None) -> INA219:
    """Open and configure the INA219 described by config."""
    config = config or TrackerConfig()
    ina = INA219(config.shunt_ohms, address=config.i2c_address, busnum=config.i2c_bus)
    ina.configure()
    log.debug("INA219 configured at 0x%02x on bus %d", config.i2c_address, config.i2c_bus)
    return ina


class _Ina219Reader:
    def __init__(self, device=None, config: Optional[TrackerConfig] = None):
        self.config = config or TrackerConfig()
        self.device = device if device is not None else open_ina219(self.config)

    def _read(self, name: str) -> Optional[float]:
        try:
            return getattr(self.device, name)()
        except DeviceRangeError:
            log.debug("INA219 %s out of range", name)
        except OSError as e:
            log.warning("INA219 %s read failed: %s", name, e)
        return None


class Ina219PowerSampler(_Ina219Reader, PowerSampler):
    """Current and voltage straight from the shunt monitor."""

    def read_current_microamps(self) -> Optional[int]:
        current_ma = self._read("current")
        return None if current_ma is None else int(round(current_ma * 1000))

    def read_voltage_millivolts(self) -> Optional[int]:
        voltage = self._read("voltage")
        return None if voltage is None else int(round(voltage * 1000))


class Ina219BatterySampler(_Ina219Reader, BatterySampler):
    """
    Charge level inferred from voltage; charging inferred from current sign
    (positive current above the threshold = charging).
    """

    def read_level_percent(self) -> int:
        voltage = self._read("voltage")
        if voltage is None:
            return UNAVAILABLE_LEVEL
        return int(round(voltage_to_percent(voltage)))

    def read_is_charging(self) -> bool:
        current_ma = self._read("current")
        return current_ma is not None and current_ma > self.config.charge_current_threshold_ma

    def read_is_power_saving(self) -> bool:
        # The UPS hat has no power-save mode
        return False
