"""Pydantic models for primavera.

This module provides type-safe models for configuration, structured
logging context, and resolver metrics, using Pydantic v2 for validation
and serialization.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FlowConfig(BaseModel):
    """Configuration for the flow resolver.

    Example:
        >>> config = FlowConfig(placeholder_marker="$msg", log_level="debug")
        >>> builder = ContextBuilder.from_config(config)
    """

    placeholder_marker: str = Field(
        default="$data",
        min_length=1,
        description="Prefix that marks a template value as a payload reference.",
    )
    log_level: str = Field(
        default="info",
        pattern="^(trace|debug|info|warn|error)$",
        description="Log level for the primavera logger (trace, debug, info, warn, error).",
    )
    publish_events: bool = Field(
        default=True,
        description="Whether registrations and resolutions are published on the event bridge.",
    )

    model_config = {"extra": "forbid"}


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(
        ...     correlation_id="abc-123",
        ...     handler="save_user",
        ... )
        >>> log_info("Resolved", context)
    """

    correlation_id: str | None = Field(
        default=None,
        description="Correlation ID for request tracing.",
    )
    handler: str | None = Field(
        default=None,
        description="Qualified name of the resolved handler.",
    )
    owner: str | None = Field(
        default=None,
        description="Name of the owner factory, if any.",
    )
    weight: int | None = Field(
        default=None,
        description="Weight of the champion candidate.",
    )
    context: str | None = Field(
        default=None,
        description="Rendered message context.",
    )

    model_config = {"extra": "allow"}


class ResolverMetrics(BaseModel):
    """Counters collected by a Resolver.

    Example:
        >>> metrics = resolver.metrics()
        >>> print(f"{metrics.no_match} unmatched of {metrics.resolutions}")
    """

    resolutions: int = Field(default=0, description="Total resolve() calls.")
    succeeded: int = Field(default=0, description="Resolutions whose handler returned.")
    no_match: int = Field(default=0, description="Resolutions that found no candidate.")
    ambiguous: int = Field(default=0, description="Resolutions that hit a weight collision.")
    handler_errors: int = Field(default=0, description="Handlers or owners that raised.")
    registrations: int = Field(default=0, description="Registrations visible at snapshot time.")


__all__ = ["FlowConfig", "LogContext", "ResolverMetrics"]
