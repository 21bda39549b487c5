"""Structured logging for primavera.

This module provides structured logging functions that attach a flat
dict of string fields to every record, so resolver diagnostics (the
offending context, the tied candidates, the handler name) can be
filtered and correlated by whatever handler the host application installs
on the ``primavera`` logger.

Example:
    >>> from primavera import log_info, log_error
    >>>
    >>> log_info("Resolution started", {
    ...     "correlation_id": "abc-123",
    ...     "domain": "management/users"
    ... })
    >>>
    >>> try:
    ...     await resolver.resolve(context, data)
    ... except Exception as e:
    ...     log_error(f"Resolution failed: {e}", {
    ...         "correlation_id": "abc-123",
    ...         "error_type": type(e).__name__
    ...     })
"""

from __future__ import annotations

import logging
from typing import Any

from .types import LogContext

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "primavera"

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_logger = logging.getLogger(LOGGER_NAME)


def get_logger() -> logging.Logger:
    """Return the package logger."""
    return _logger


def set_level(level: str) -> None:
    """Set the package log level by name (trace, debug, info, warn, error).

    Raises:
        ValueError: If the level name is unknown.
    """
    try:
        _logger.setLevel(_LEVELS[level.lower()])
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


def log_error(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an ERROR level message with structured fields.

    Use this for failed resolutions and handler errors.

    Args:
        message: The log message.
        fields: Optional structured fields for context. Can be a dict
                or a LogContext instance.

    Example:
        >>> log_error("No handler matches the message context", {
        ...     "context": "{'domain': 'Y'}"
        ... })
    """
    _emit(logging.ERROR, message, fields)


def log_warn(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a WARN level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _emit(logging.WARNING, message, fields)


def log_info(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an INFO level message with structured fields.

    Use this for lifecycle events such as bridge start and stop.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _emit(logging.INFO, message, fields)


def log_debug(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a DEBUG level message with structured fields.

    Args:
        message: The log message.
        fields: Optional structured fields for context.

    Example:
        >>> log_debug("Registered resolver", {"pattern": "{'domain': 'Test'}"})
    """
    _emit(logging.DEBUG, message, fields)


def log_trace(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a TRACE level message with structured fields.

    Use this for very verbose logging, like per-registration scores.
    This level is typically disabled in production.

    Args:
        message: The log message.
        fields: Optional structured fields for context.
    """
    _emit(TRACE, message, fields)


def _emit(
    level: int,
    message: str,
    fields: dict[str, Any] | LogContext | None,
) -> None:
    if not _logger.isEnabledFor(level):
        return

    fields_dict = _normalize_fields(fields)
    if fields_dict:
        rendered = " ".join(f"{k}={v}" for k, v in fields_dict.items())
        message = f"{message} {rendered}"

    _logger.log(level, message, extra={"fields": fields_dict or {}})


def _normalize_fields(
    fields: dict[str, Any] | LogContext | None,
) -> dict[str, str] | None:
    """Normalize fields to a dict of strings.

    Args:
        fields: Input fields as dict, LogContext, or None.

    Returns:
        Dict with string values, or None if no fields.
    """
    if fields is None:
        return None

    if isinstance(fields, LogContext):
        # Convert LogContext to dict, excluding None values
        return {k: str(v) for k, v in fields.model_dump().items() if v is not None}

    return {k: str(v) for k, v in fields.items()}


__all__ = [
    "TRACE",
    "LOGGER_NAME",
    "get_logger",
    "set_level",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
