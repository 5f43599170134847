"""Exception hierarchy for benchlog.

All exceptions derive from BenchLogError, enabling broad catch patterns
at the application boundary while allowing fine-grained handling internally.
"""


class BenchLogError(Exception):
    """Base exception for all benchlog errors."""


class InvalidTypeError(BenchLogError):
    """A handler was registered under an unknown message type.

    Raised before the registry is touched, so a failed registration never
    leaves a partial entry behind.
    """


class ConfigError(BenchLogError):
    """A configuration value is invalid.

    Raised for an out-of-range verbosity, a percentile outside [0, 100],
    a histogram requested without percentiles, or an unknown option name
    passed as an override.
    """


class HandlerInitError(BenchLogError):
    """A handler failed to initialize for a reason other than configuration.

    The underlying exception is chained as ``__cause__``.
    """


class LoggerStateError(BenchLogError):
    """The logger was used in the wrong lifecycle state.

    Raised when dispatching before ``init()``, initializing twice, or
    registering handlers while the logger is running.
    """
