"""
Error handling utilities for standardized error logging and handling.

This module provides reusable error handling patterns for the CLI and
service layers.
"""

import logging
import sys
import traceback
from functools import wraps
from typing import Any, Callable, TypeVar

import httpx

from .constants import EXIT_GENERAL_ERROR, HTTP_STATUS_UNAUTHORIZED, HTTP_STATUS_FORBIDDEN, HTTP_STATUS_NOT_FOUND

# Type variable for generic function decorators
F = TypeVar("F", bound=Callable[..., Any])


def http_status_of(error: BaseException) -> int:
    """Status code carried by an httpx error, 0 when there is no response."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return 0


def describe_http_error(error: httpx.HTTPError) -> str:
    """
    Short human readable description of an HTTP error.

    Used both for the operator log and for ``error`` fields of events.
    """
    status = http_status_of(error)
    if status == HTTP_STATUS_UNAUTHORIZED:
        return "Authentication failed (401): check the gateway user and password"
    if status == HTTP_STATUS_FORBIDDEN:
        return "Access denied (403): the gateway user may not read this path"
    if status == HTTP_STATUS_NOT_FOUND:
        return "Not found (404)"
    if status >= 500:
        return f"Server error ({status})"
    if status:
        return f"HTTP error ({status})"
    return f"{type(error).__name__}: {error}"


def handle_http_error(error: httpx.HTTPError, operation: str, *, log_traceback: bool = True) -> None:
    """
    Handle HTTP errors with standardized logging.

    Args:
        error: The HTTP error to handle
        operation: Description of the operation that failed
        log_traceback: Whether to log the full traceback
    """
    logging.error("%s during %s: %s", describe_http_error(error), operation, error)

    if log_traceback:
        logging.debug("Traceback: %s", traceback.format_exc())


def handle_generic_error(error: Exception, operation: str, *, log_traceback: bool = True) -> None:
    """
    Handle generic errors with standardized logging.

    Args:
        error: The exception to handle
        operation: Description of the operation that failed
        log_traceback: Whether to log the full traceback
    """
    logging.error("Unexpected error during %s: %s", operation, error)

    if log_traceback:
        logging.error("Traceback: %s", traceback.format_exc())


def with_error_handling(operation: str, *, exit_code: int = EXIT_GENERAL_ERROR) -> Callable[[F], F]:
    """
    Decorator logging any error of the wrapped function and exiting.

    Args:
        operation: Description of the operation for logging
        exit_code: Exit code used on error

    Example:
        @with_error_handling("list locks")
        def locks_command():
            ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except httpx.HTTPError as e:
                handle_http_error(e, operation)
                sys.exit(exit_code)
            except OSError as e:
                handle_generic_error(e, operation, log_traceback=False)
                sys.exit(exit_code)

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = [
    "http_status_of",
    "describe_http_error",
    "handle_http_error",
    "handle_generic_error",
    "with_error_handling",
]
