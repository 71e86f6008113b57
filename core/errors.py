class LogDeferError(Exception):
    """Base class for every error raised by logdefer."""


class ConfigurationError(LogDeferError, ValueError):
    """Bad callback, unknown verbosity name or unusable chart width."""


class DuplicateNameError(LogDeferError, ValueError):
    """A timer or event name was already used in this record."""

    def __init__(self, kind: str, name: str):
        super().__init__(f"{kind} {name!r} already registered")
        self.kind = kind
        self.name = name


class MissingInputError(LogDeferError, ValueError):
    """The visualizer was called without any timers."""


class SessionClosedError(LogDeferError, RuntimeError):
    """The session was already finalized and its record handed off."""
