"""Errors raised by the roster engine."""


class TrackerError(Exception):
    """Base class for every rejection the engine can produce."""


class Unauthorized(TrackerError):
    """Raised when the caller is not the GM."""


class NotFound(TrackerError):
    """Raised when a request references an entity id that is not in the roster."""


class InvalidInput(TrackerError):
    """Raised when a request payload or a bar value cannot be parsed."""


class PersistenceFailure(TrackerError):
    """Raised when the state file cannot be written."""
