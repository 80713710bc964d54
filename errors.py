"""
Error types raised by the routine assistant core.

None of these is fatal: callers surface them as a status message and keep
the session running.
"""
from typing import Optional


class RoutineAssistantError(Exception):
    """Base class for recoverable assistant errors."""


class CatalogueUnavailable(RoutineAssistantError):
    """The catalogue document could not be fetched or parsed."""


class PersistenceFailure(RoutineAssistantError):
    """Persisted state could not be read or written."""


class RelayConfigurationError(RoutineAssistantError):
    """The relay endpoint is not configured; no request was attempted."""


class RelayRequestError(RoutineAssistantError):
    """The relay answered with a non-2xx status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
