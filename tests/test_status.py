import pytest

from powertrack import status
from powertrack.display import battery_icon, format_microwatts, format_minutes, format_rate
from powertrack.samplers import UNAVAILABLE_LEVEL, BatterySample, PowerSample
from powertrack.status import format_status


def test_status_lines():
    battery = BatterySample(84, True, False, 0.0)
    power = PowerSample.from_readings(-1_000_000, 12_000, 0.0)

    assert format_status(battery, power) == ["> 84% CHG", "${color4}  12.00 W"]


def test_status_without_power_or_level():
    battery = BatterySample(UNAVAILABLE_LEVEL, False, True, 0.0)
    power = PowerSample.from_readings(None, 12_000, 0.0)

    assert format_status(battery, power) == ["> N/A SAVE"]


def test_formatters():
    assert format_rate(None) == "--"
    assert format_rate(12.345) == "12.3 %/h"
    assert format_minutes(45) == "45m"
    assert format_minutes(135) == "2h 15m"
    assert format_microwatts(None) == "--"
    assert format_microwatts(2_500_000) == "2.50 W"


def test_battery_icon():
    assert battery_icon(95, False) == "battery-full"
    assert battery_icon(60, True) == "battery-good-charging"
    assert battery_icon(25, False) == "battery-low"
    assert battery_icon(5, False) == "battery-empty"
    assert battery_icon(UNAVAILABLE_LEVEL, False) == "battery-missing"


def test_main_without_sensor_library_prints_na(monkeypatch, capsys):
    def missing(config):
        raise ImportError("No module named 'ina219'")

    monkeypatch.setattr(status, "open_samplers", missing)

    with pytest.raises(SystemExit) as exc:
        status.main()

    assert exc.value.code == 0
    assert capsys.readouterr().out == "> N/A\n"
