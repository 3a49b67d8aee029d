import pytest

from powertrack.errors import InvalidSamplerError
from powertrack.lifecycle import LifecycleEvent
from powertrack.power import PowerTracker
from powertrack.samplers import PowerSample

from .conftest import T0, FakeBatterySampler

FOUR_WATTS = 4_000_000  # 1 A at 4 V, in microwatts


@pytest.fixture
def tracker(power_sampler, clock):
    return PowerTracker(power_sampler, clock=clock)


def tick_every(tracker, clock, seconds, count):
    for _ in range(count):
        clock.advance(seconds)
        tracker.on_tick()


def test_sample_derives_instant_power(tracker, clock):
    clock.advance(1)
    sample = tracker.on_tick()

    assert sample == PowerSample(1_000_000, 4_000, FOUR_WATTS, T0 + 1)


def test_missing_reading_leaves_power_absent(tracker, clock, power_sampler):
    power_sampler.voltage = None
    clock.advance(1)

    sample = tracker.on_tick()

    assert sample.voltage_millivolts is None
    assert sample.instant_power_microwatts is None
    assert tracker.get_average_voltage() is None
    assert tracker.get_average_current_draw() == 1_000_000


def test_energy_integration_starts_at_first_sample(tracker, clock):
    tick_every(tracker, clock, 1, 60)

    expected = FOUR_WATTS * 59 / 3600
    assert tracker.total_energy == pytest.approx(expected)

    (record,) = tracker.get_interval_history()
    assert record.start_metric == 0
    assert record.end_metric == pytest.approx(expected)
    assert record.rate_per_hour == pytest.approx(FOUR_WATTS * 59 / 60)


def test_discharge_current_sign_does_not_matter(tracker, clock, power_sampler):
    power_sampler.current = -1_000_000
    tick_every(tracker, clock, 1, 61)

    assert tracker.total_energy == pytest.approx(FOUR_WATTS * 60 / 3600)
    assert tracker.get_average_power() == -FOUR_WATTS


def test_trapezoid_over_changing_power(tracker, clock, power_sampler):
    tick_every(tracker, clock, 1, 1)
    power_sampler.current = 0
    tick_every(tracker, clock, 3600, 1)

    assert tracker.total_energy == pytest.approx(FOUR_WATTS / 2)


def test_averages_and_reports(tracker, clock, power_sampler):
    tick_every(tracker, clock, 1, 2)
    power_sampler.current = 500_000
    tick_every(tracker, clock, 1, 2)

    assert tracker.get_average_current_draw() == 750_000
    assert tracker.get_average_voltage() == 4_000
    assert tracker.get_average_power() == 3_000_000

    report = tracker.get_energy_consumption_report()
    assert report.duration_seconds == 4
    assert report.average_power_microwatts == 3_000_000
    assert report.total_energy_microwatt_hours == tracker.total_energy

    data = tracker.get_power_consumption_data()
    assert data.duration_seconds == 4
    assert data.consumption_rate_watts == pytest.approx(tracker.total_energy / (4 / 3600) / 1e6)


def test_sample_buffer_keeps_last_sixty(tracker, clock, power_sampler):
    tick_every(tracker, clock, 1, 60)
    power_sampler.current = 2_000_000
    tick_every(tracker, clock, 1, 60)

    assert tracker.get_average_current_draw() == 2_000_000


def test_current_measurement_samples_when_empty(tracker):
    sample = tracker.get_current_power_measurement()

    assert sample.instant_power_microwatts == FOUR_WATTS
    assert tracker.get_current_power_measurement() is sample


def test_consumption_rate_in_microwatts(tracker, clock):
    tick_every(tracker, clock, 60, 60)

    rate = tracker.sample_consumption_rate()

    assert rate == pytest.approx(FOUR_WATTS * 3540 / 3600)
    assert tracker.sample_consumption_rate() == 0.0


def test_consumption_rate_zero_while_charging(power_sampler, clock):
    battery = FakeBatterySampler(charging=True)
    tracker = PowerTracker(power_sampler, battery_sampler=battery, clock=clock)
    tick_every(tracker, clock, 60, 10)

    assert tracker.sample_consumption_rate() == 0.0

    battery.charging = False
    tick_every(tracker, clock, 60, 60)
    assert tracker.sample_consumption_rate() == pytest.approx(FOUR_WATTS)


def test_sessions_split_energy(tracker, clock):
    tick_every(tracker, clock, 1, 60)
    foreground_energy = tracker.total_energy
    tracker.on_lifecycle_event(LifecycleEvent.ENTERED_BACKGROUND)
    tick_every(tracker, clock, 1, 60)

    assert tracker.get_foreground_usage() == pytest.approx(foreground_energy)
    assert tracker.get_background_usage() == pytest.approx(tracker.total_energy - foreground_energy)
    assert tracker.get_foreground_duration_minutes() == 1
    assert tracker.get_background_duration_minutes() == 1
    assert tracker.get_total_duration_minutes() == 2


def test_reset_tracking(tracker, clock):
    tick_every(tracker, clock, 1, 120)
    tracker.on_lifecycle_event(LifecycleEvent.ENTERED_BACKGROUND)

    tracker.reset_tracking()

    assert tracker.total_energy == 0
    assert tracker.get_interval_history() == ()
    assert tracker.get_average_consumption() is None
    assert tracker.get_average_power() is None
    assert tracker.get_energy_consumption_report().duration_seconds == 0
    assert tracker.get_total_duration_minutes() == 0
    assert not tracker.is_foreground()

    # first tick after reset only sets the baseline
    clock.advance(1)
    tracker.on_tick()
    assert tracker.total_energy == 0


def test_interval_capacity(tracker, clock):
    tick_every(tracker, clock, 60, 65)

    history = tracker.get_interval_history()
    assert len(history) == 60
    assert history[0].interval_start == T0 + 5 * 60


def test_rejects_bad_samplers(power_sampler):
    with pytest.raises(InvalidSamplerError):
        PowerTracker(object())
    with pytest.raises(InvalidSamplerError):
        PowerTracker(power_sampler, battery_sampler=object())
