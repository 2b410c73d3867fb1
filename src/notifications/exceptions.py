"""Error kinds raised by the Notifications service.

Validation failures use ``protean.exceptions.ValidationError`` and missing
records use ``protean.exceptions.ObjectNotFoundError``. The two kinds below
cover what Protean has no exception for.
"""

from contextlib import contextmanager

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class NotificationsError(Exception):
    """Base class for service errors that are neither validation nor not-found."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ConflictError(NotificationsError):
    """A record that must be unique already exists."""


class StorageError(NotificationsError):
    """The storage provider failed. ``details`` carries the underlying message."""

    def __init__(self, operation: str, details: str):
        super().__init__(f"Storage failure during {operation}", details=details)
        self.operation = operation


@contextmanager
def storage_errors(operation: str):
    """Surface unexpected storage failures as ``StorageError``.

    Typed domain errors pass through untouched. Usable as a decorator.
    """
    try:
        yield
    except (ValidationError, ObjectNotFoundError, NotificationsError):
        raise
    except Exception as exc:
        logger.error("Storage operation failed", operation=operation, error=str(exc))
        raise StorageError(operation, str(exc)) from exc
