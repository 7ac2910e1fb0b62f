"""Exception hierarchy for the rep counting core."""


class RepCounterError(Exception):
    """Base class for all rep counter errors."""


class ConfigurationError(RepCounterError):
    """Invalid counter configuration, rejected at construction time."""


class SensorUnavailable(RepCounterError):
    """The inertial sensor source cannot deliver samples."""


class ClassifierError(RepCounterError):
    """The activity classifier failed on a window."""


class SinkUnreachable(RepCounterError):
    """A fire-and-forget sink (sync or haptics) could not be reached."""
