"""
Battery status helper for conky and other scripts.
Prints one reading of battery level and power draw.
"""

import logging
import sys

from .config import TrackerConfig
from .display import format_microwatts
from .errors import ConfigError
from .registry import open_samplers

log = logging.getLogger(__name__)


def format_status(battery_sample, power_sample) -> list:
    """Conky-formatted output lines."""
    if battery_sample.level_available:
        level = f"{battery_sample.level_percent}%"
    else:
        level = "N/A"
    flags = ""
    if battery_sample.is_charging:
        flags += " CHG"
    if battery_sample.is_power_saving:
        flags += " SAVE"

    lines = [f"> {level}{flags}"]
    if power_sample.instant_power_microwatts is not None:
        lines.append(f"${{color4}}  {format_microwatts(abs(power_sample.instant_power_microwatts))}")
    return lines


def main():
    """Entry point for battery status output."""
    logging.basicConfig(level=logging.WARNING, format="%(message)s")
    try:
        config = TrackerConfig.from_env()
        battery_sampler, power_sampler = open_samplers(config)
    except ImportError:
        print("> N/A")
        sys.exit(0)
    except (ConfigError, OSError) as e:
        log.warning("Cannot open battery sensor: %s", e)
        print("> ERR")
        sys.exit(1)

    for line in format_status(battery_sampler.sample(), power_sampler.sample()):
        print(line)


if __name__ == "__main__":
    main()
