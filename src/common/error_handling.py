"""
Centralized error handling for the job board.

Defines the error taxonomy shared by services and the web layer:

- RemoteStoreError: the database rejected or failed a call. Caught at the
  route, surfaced as a transient notification, local state left as it was.
- JobValidationError: form/CSV input rejected before any store call,
  reported per field.
- AuthenticationError / NotFoundError: credential and lookup failures.

Unauthenticated saves and non-admin dashboard access are not exceptions;
they are signalled through return values and HTTP status codes.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")


class JobBoardError(Exception):
    """Base class for job board errors."""


class RemoteStoreError(JobBoardError):
    """A read or write against the remote store failed."""

    def __init__(self, operation: str, message: str, cause: Optional[Exception] = None):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.message = message
        self.cause = cause


class JobValidationError(JobBoardError):
    """Input was rejected before reaching the store."""

    def __init__(self, field_errors: Dict[str, str]):
        joined = "; ".join(f"{name}: {msg}" for name, msg in field_errors.items())
        super().__init__(f"Invalid input ({joined})")
        self.field_errors = field_errors

    @classmethod
    def from_pydantic(cls, exc: Any) -> "JobValidationError":
        """Build from a pydantic ValidationError, one message per field."""
        field_errors: Dict[str, str] = {}
        for err in exc.errors():
            loc = err.get("loc") or ("__root__",)
            name = ".".join(str(part) for part in loc) or "__root__"
            # Keep the first message per field, as inline form errors do
            field_errors.setdefault(name, err.get("msg", "Invalid value"))
        return cls(field_errors)


class AuthenticationError(JobBoardError):
    """Sign-in or sign-up was rejected."""


class NotFoundError(JobBoardError):
    """The requested record does not exist."""


@dataclass
class Notification:
    """
    User-visible transient message (the UI's toast).

    Returned by the web layer alongside error responses so clients can show
    a title and description without parsing exception text.
    """

    title: str
    description: str
    variant: str = "default"  # "default" or "destructive"
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "variant": self.variant,
            "timestamp": self.timestamp,
        }


def store_operation(operation_name: str, log_success: bool = False):
    """
    Decorator for repository calls with consistent error handling.

    Any exception raised by the wrapped call is logged at ERROR level and
    re-raised as RemoteStoreError, so callers only ever need to catch one
    type for store failures. RemoteStoreError and NotFoundError pass through
    untouched. There is no retry.

    Usage:
        @store_operation("insert saved job")
        def add(self, user_id, job_id):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            logger = logging.getLogger(func.__module__)
            try:
                result = func(*args, **kwargs)
            except (RemoteStoreError, NotFoundError):
                raise
            except Exception as e:
                logger.error(f"[store] [{operation_name}] ✗ Failed: {e}")
                raise RemoteStoreError(operation_name, str(e), cause=e) from e
            if log_success:
                logger.info(f"[store] [{operation_name}] ✓ Completed")
            return result

        return wrapper

    return decorator
