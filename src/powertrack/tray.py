#!/usr/bin/env python3
"""
Battery and power tray indicator.
Drives the trackers once per tick from the GLib main loop and treats the
screensaver as the app lifecycle: screen locked = background.
"""

import argparse
import logging

import gi
gi.require_version("Gtk", "3.0")
gi.require_version("AyatanaAppIndicator3", "0.1")
from gi.repository import Gtk, Gio, AyatanaAppIndicator3, GLib

from .config import TrackerConfig
from .display import battery_icon, format_microwatts, format_minutes, format_rate
from .errors import ConfigError
from .lifecycle import LifecycleEvent
from .registry import initialize, open_samplers

log = logging.getLogger(__name__)

# Refresh the menu every N ticks
REFRESH_TICKS = 5


class ScreenSaverLifecycle:
    """Forwards org.freedesktop.ScreenSaver ActiveChanged as lifecycle events."""

    def __init__(self, *listeners):
        self.listeners = listeners
        self.subscription = None
        try:
            self.bus = Gio.bus_get_sync(Gio.BusType.SESSION, None)
        except GLib.Error as e:
            log.warning("No session bus, lifecycle tracking disabled: %s", e.message)
            self.bus = None
            return
        self.subscription = self.bus.signal_subscribe(
            None,
            "org.freedesktop.ScreenSaver",
            "ActiveChanged",
            None,
            None,
            Gio.DBusSignalFlags.NONE,
            self._on_active_changed,
        )

    def _on_active_changed(self, connection, sender, path, interface, signal, params):
        (active,) = params.unpack()
        event = LifecycleEvent.ENTERED_BACKGROUND if active else LifecycleEvent.ENTERED_FOREGROUND
        for listener in self.listeners:
            listener.on_lifecycle_event(event)

    def close(self):
        if self.bus is not None and self.subscription is not None:
            self.bus.signal_unsubscribe(self.subscription)
            self.subscription = None


class PowerIndicator:
    """System tray indicator showing battery drain and power draw."""

    def __init__(self, config: TrackerConfig):
        self.indicator = AyatanaAppIndicator3.Indicator.new(
            "powertrack", "battery-good", AyatanaAppIndicator3.IndicatorCategory.HARDWARE
        )
        self.indicator.set_status(AyatanaAppIndicator3.IndicatorStatus.ACTIVE)
        self.indicator.set_title("Battery: --%")

        battery_sampler, power_sampler = open_samplers(config)
        self.battery, self.power = initialize(battery_sampler, power_sampler, config)
        self.lifecycle = ScreenSaverLifecycle(self.battery, self.power)
        self.ticks = 0

        self._build_menu()
        GLib.timeout_add_seconds(config.tick_seconds, self.tick)
        self.refresh()

    def _add_info(self, label: str) -> Gtk.MenuItem:
        item = Gtk.MenuItem(label=label)
        item.set_sensitive(False)
        self.menu.append(item)
        return item

    def _build_menu(self):
        """Build the indicator menu."""
        self.menu = Gtk.Menu()

        self.level_item = self._add_info("Battery: --%")
        self.state_item = self._add_info("State: --")
        self.rate_item = self._add_info("Drain: --")

        self.menu.append(Gtk.SeparatorMenuItem())

        self.session_item = self._add_info("Session: --")
        self.foreground_item = self._add_info("Foreground: --")
        self.background_item = self._add_info("Background: --")

        self.menu.append(Gtk.SeparatorMenuItem())

        self.avg_short_item = self._add_info("Avg (5 min): --")
        self.avg_long_item = self._add_info("Avg (1 h): --")

        self.menu.append(Gtk.SeparatorMenuItem())

        self.current_item = self._add_info("Current: --")
        self.voltage_item = self._add_info("Voltage: --")
        self.power_item = self._add_info("Power: --")
        self.energy_item = self._add_info("Energy: --")

        self.menu.append(Gtk.SeparatorMenuItem())

        reset_item = Gtk.MenuItem(label="Reset tracking")
        reset_item.connect("activate", self.reset)
        self.menu.append(reset_item)

        quit_item = Gtk.MenuItem(label="Quit")
        quit_item.connect("activate", self.quit)
        self.menu.append(quit_item)

        self.menu.show_all()
        self.indicator.set_menu(self.menu)

    def tick(self) -> bool:
        """Timer callback: advance both trackers, refresh the menu now and then."""
        self.battery.on_tick()
        self.power.on_tick()
        self.ticks += 1
        if self.ticks % REFRESH_TICKS == 0:
            self.refresh()
        return True

    def refresh(self):
        """Update the indicator with current tracker state."""
        status = self.battery.get_status()
        report = self.battery.get_session_report()

        icon = battery_icon(status.level, status.is_charging)
        self.indicator.set_icon_full(icon, f"Battery {status.level}%")
        self.indicator.set_label(f"{status.level}%", "")
        self.indicator.set_title(f"Battery {status.level}%")

        self.level_item.set_label(f"Battery: {status.level}%")
        flags = ["charging" if status.is_charging else "discharging"]
        if status.is_power_saving:
            flags.append("power saver")
        self.state_item.set_label(f"State: {', '.join(flags)}")
        self.rate_item.set_label(f"Drain: {format_rate(status.app_consumption_rate)}")

        self.session_item.set_label(
            f"Session: {report.consumed_since_start:.0f}% in "
            f"{format_minutes(report.total_duration_minutes)}"
        )
        self.foreground_item.set_label(
            f"Foreground: {self.battery.get_foreground_usage():.0f}% in "
            f"{format_minutes(report.foreground_duration_minutes)}"
        )
        self.background_item.set_label(
            f"Background: {self.battery.get_background_usage():.0f}% in "
            f"{format_minutes(report.background_duration_minutes)}"
        )

        self.avg_short_item.set_label(
            f"Avg (5 min): {format_rate(self.battery.get_average_consumption(5))}"
        )
        self.avg_long_item.set_label(
            f"Avg (1 h): {format_rate(self.battery.get_average_consumption())}"
        )

        sample = self.power.get_current_power_measurement()
        if sample.current_microamps is not None:
            self.current_item.set_label(f"Current: {sample.current_microamps / 1000:.1f} mA")
        else:
            self.current_item.set_label("Current: --")
        if sample.voltage_millivolts is not None:
            self.voltage_item.set_label(f"Voltage: {sample.voltage_millivolts / 1000:.2f} V")
        else:
            self.voltage_item.set_label("Voltage: --")
        self.power_item.set_label(
            f"Power: {format_microwatts(sample.instant_power_microwatts)} "
            f"(avg {format_microwatts(self.power.get_average_power())})"
        )
        data = self.power.get_power_consumption_data()
        self.energy_item.set_label(f"Energy: {data.energy_used_microwatt_hours / 1000:.1f} mWh")

    def reset(self, widget):
        self.battery.reset_tracking()
        self.power.reset_tracking()
        self.refresh()

    def quit(self, widget):
        """Clean up and quit."""
        self.lifecycle.close()
        Gtk.main_quit()


def main():
    """Entry point for the tray indicator."""
    parser = argparse.ArgumentParser(description="Battery and power tray indicator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    try:
        config = TrackerConfig.from_env()
    except ConfigError as e:
        parser.error(str(e))

    PowerIndicator(config)
    Gtk.main()


if __name__ == "__main__":
    main()
