"""Primavera flow

Pattern-matching service resolution: handlers declare the message
contexts they accept, and each message is dispatched to the single most
specific match.

Example:
    >>> from primavera import Registry, Resolver, build_context
    >>>
    >>> registry = Registry()
    >>> registry.register({"domain": "Test", "action": "Do"}, lambda data, ctx: data)
    >>>
    >>> context = build_context({"domain": "$data.source", "action": "Do"}, {"source": "Test"})
    >>> await Resolver(registry).resolve(context, {"source": "Test"})
    {'source': 'Test'}

    >>> # Declarative registration
    >>> from primavera import resolve
    >>> class UserService:
    ...     @resolve({"domain": "management/users", "action": "SaveUser"})
    ...     async def save_user(self, payload, context):
    ...         return {"saved": payload["id"]}
"""

from __future__ import annotations

from primavera.config import configure, load_config
from primavera.event_bridge import EventBridge, EventNames
from primavera.exceptions import (
    AmbiguousMatchError,
    FlowError,
    InvalidContextError,
    InvalidPatternError,
    NoMatchError,
)
from primavera.flow import (
    Candidate,
    ContextBuilder,
    Registration,
    Registry,
    Resolver,
    build_context,
    resolve,
    resolve_with,
    resolver_for,
)
from primavera.logging import (
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from primavera.types import FlowConfig, LogContext, ResolverMetrics

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "version",
    # Configuration
    "FlowConfig",
    "load_config",
    "configure",
    # Logging
    "LogContext",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
    # Exceptions
    "FlowError",
    "NoMatchError",
    "AmbiguousMatchError",
    "InvalidPatternError",
    "InvalidContextError",
    # Events
    "EventBridge",
    "EventNames",
    # Flow
    "Registration",
    "Registry",
    "Candidate",
    "Resolver",
    "ResolverMetrics",
    "ContextBuilder",
    "build_context",
    "resolve",
    "resolve_with",
    "resolver_for",
]


def version() -> str:
    """Return the package version.

    Example:
        >>> import primavera
        >>> primavera.version()
        '0.1.0'
    """
    return __version__
