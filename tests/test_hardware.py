import pytest

ina219 = pytest.importorskip("ina219")

from powertrack.config import TrackerConfig  # noqa: E402
from powertrack.hardware import (  # noqa: E402
    Ina219BatterySampler,
    Ina219PowerSampler,
    voltage_to_percent,
)
from powertrack.samplers import UNAVAILABLE_LEVEL  # noqa: E402


class FakeIna219:
    def __init__(self, voltage=11.5, current=-850.0, error=None):
        self._voltage = voltage
        self._current = current
        self.error = error

    def voltage(self):
        if self.error:
            raise self.error
        return self._voltage

    def current(self):
        if self.error:
            raise self.error
        return self._current


def test_voltage_to_percent_follows_curve():
    assert voltage_to_percent(13.0) == 100.0
    assert voltage_to_percent(8.5) == 0.0
    assert voltage_to_percent(11.5) == pytest.approx(50.0)
    assert voltage_to_percent(11.55) == pytest.approx(52.5)


def test_power_sampler_units():
    sampler = Ina219PowerSampler(FakeIna219(), TrackerConfig())

    sample = sampler.sample(now=1.0)

    assert sample.current_microamps == -850_000
    assert sample.voltage_millivolts == 11_500
    assert sample.instant_power_microwatts == -9_775_000


def test_battery_sampler_level_and_charging():
    sampler = Ina219BatterySampler(FakeIna219(voltage=11.5, current=120.0), TrackerConfig())

    assert sampler.read_level_percent() == 50
    assert sampler.read_is_charging() is True
    assert sampler.read_is_power_saving() is False


def test_small_current_is_not_charging():
    sampler = Ina219BatterySampler(FakeIna219(current=5.0), TrackerConfig())

    assert sampler.read_is_charging() is False


def test_range_error_means_absent_reading():
    device = FakeIna219(error=ina219.DeviceRangeError(0.32))

    assert Ina219PowerSampler(device, TrackerConfig()).read_current_microamps() is None
    assert Ina219BatterySampler(device, TrackerConfig()).read_level_percent() == UNAVAILABLE_LEVEL


def test_bus_error_means_absent_reading():
    device = FakeIna219(error=OSError(121, "Remote I/O error"))

    assert Ina219PowerSampler(device, TrackerConfig()).read_voltage_millivolts() is None
    assert Ina219BatterySampler(device, TrackerConfig()).read_is_charging() is False
