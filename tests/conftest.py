import pytest

from powertrack.config import TrackerConfig
from powertrack.samplers import BatterySampler, PowerSampler

T0 = 1_700_000_000.0


class FakeClock:
    def __init__(self, now: float = T0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class FakeBatterySampler(BatterySampler):
    def __init__(self, level=100, charging=False, power_saving=False):
        self.level = level
        self.charging = charging
        self.power_saving = power_saving

    def read_level_percent(self):
        return self.level

    def read_is_charging(self):
        return self.charging

    def read_is_power_saving(self):
        return self.power_saving


class FakePowerSampler(PowerSampler):
    def __init__(self, current=1_000_000, voltage=4_000):
        self.current = current
        self.voltage = voltage

    def read_current_microamps(self):
        return self.current

    def read_voltage_millivolts(self):
        return self.voltage


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def battery_sampler():
    return FakeBatterySampler()


@pytest.fixture
def power_sampler():
    return FakePowerSampler()


@pytest.fixture
def config():
    return TrackerConfig()
