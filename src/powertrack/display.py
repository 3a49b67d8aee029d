"""Text formatting shared by the tray and the status printer."""

from typing import Optional


def format_rate(rate: Optional[float]) -> str:
    return "--" if rate is None else f"{rate:.1f} %/h"


def format_minutes(minutes: int) -> str:
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_microwatts(value: Optional[float]) -> str:
    return "--" if value is None else f"{value / 1_000_000:.2f} W"


def battery_icon(level: int, charging: bool) -> str:
    """Icon name for a charge level."""
    if not 0 <= level <= 100:
        return "battery-missing"
    if level >= 80:
        name = "full"
    elif level >= 50:
        name = "good"
    elif level >= 20:
        name = "low"
    else:
        name = "empty"

    if charging:
        return f"battery-{name}-charging"
    return f"battery-{name}"
