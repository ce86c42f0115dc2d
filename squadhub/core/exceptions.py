"""
Service-layer error taxonomy.

Every service in the project raises one of these instead of returning error
codes. The API layer maps them to HTTP responses via ``status_code``.
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError
from django.db import IntegrityError
from django.db import InterfaceError
from django.db import OperationalError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for errors raised by the service layer"""

    status_code = 400
    kind = "error"

    def __init__(self, message="", errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def __str__(self):
        return self.message


class ValidationError(ServiceError):
    """Malformed input: bad identifiers, empty matrices, missing fields."""

    status_code = 400
    kind = "validation_error"


class NotFound(ServiceError):
    status_code = 404
    kind = "not_found"


class Denied(ServiceError):
    status_code = 403
    kind = "denied"


class Conflict(ServiceError):
    status_code = 409
    kind = "conflict"


class PreconditionFailed(ServiceError):
    """A state-machine transition was attempted from an invalid source state."""

    status_code = 412
    kind = "precondition_failed"


class Unavailable(ServiceError):
    """Transient datastore failure. Safe to retry with backoff."""

    status_code = 503
    kind = "unavailable"


class RateLimited(Unavailable):
    status_code = 429
    kind = "rate_limited"

    def __init__(self, message="Too many attempts", retry_after=None):
        super().__init__(message)
        self.retry_after = retry_after


@contextmanager
def translate_db_errors(operation):
    """Re-raise datastore exceptions as service errors.

    ``operation`` is a short description used in log lines and messages.
    """
    try:
        yield
    except IntegrityError as e:
        logger.warning(f"Integrity error during {operation}: {e}")
        raise Conflict(f"Conflicting write during {operation}") from e
    except (OperationalError, InterfaceError) as e:
        logger.error(f"Datastore unavailable during {operation}: {e}")
        raise Unavailable(f"Datastore unavailable during {operation}") from e
    except DatabaseError as e:
        logger.error(f"Datastore error during {operation}: {e}")
        raise Unavailable(f"Datastore error during {operation}") from e
