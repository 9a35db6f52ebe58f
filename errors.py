"""
errors.py

Exception hierarchy for the flower wall.
"""


class FlowerwallError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(FlowerwallError):
    """Degenerate configuration – rejected at startup, never clamped."""


class MalformedSample(FlowerwallError):
    """An input vector failed validation and was discarded."""


class SensorError(FlowerwallError):
    """The sensor transport could not be opened."""
