"""Exceptions raised by powertrack."""


class PowertrackError(Exception):
    """Base class for all powertrack errors."""


class TrackerNotInitializedError(PowertrackError, RuntimeError):
    """A tracker was requested from the registry before initialize()."""


class InvalidSamplerError(PowertrackError, TypeError):
    """An engine was given an object that is not the expected sampler."""


class ConfigError(PowertrackError, ValueError):
    """A configuration value could not be parsed."""
