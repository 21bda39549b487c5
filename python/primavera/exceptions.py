"""Custom exceptions for primavera.

This module provides the hierarchy of exceptions raised by the flow
resolver. Errors thrown by a resolved handler are never wrapped: they
reach the caller of ``Resolver.resolve`` unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .flow.resolver import Candidate


class FlowError(Exception):
    """Base exception for all primavera flow errors.

    Example:
        >>> try:
        ...     await resolver.resolve(context, data)
        ... except FlowError as e:
        ...     print(f"Flow error: {e}")
    """

    pass


class NoMatchError(FlowError):
    """Raised when no registration achieves a positive weight.

    Not retriable without changing the registrations or the context.

    Attributes:
        context: The context that matched nothing.

    Example:
        >>> try:
        ...     await resolver.resolve({"domain": "Y"}, data)
        ... except NoMatchError as e:
        ...     print(f"Nothing handles {e.context}")
    """

    def __init__(self, context: Mapping[str, Any]) -> None:
        self.context = context
        super().__init__(f"No resolver candidates match the message context {dict(context)!r}")


class AmbiguousMatchError(FlowError):
    """Raised when two or more registrations tie at the maximum weight.

    Signals an authoring conflict between registered patterns. Not
    retriable without fixing the specificity of the registrations.

    Attributes:
        context: The context being resolved.
        candidates: Every candidate sharing the top weight.
        weight: The tied weight.
    """

    def __init__(self, context: Mapping[str, Any], candidates: Sequence[Candidate]) -> None:
        self.context = context
        self.candidates = tuple(candidates)
        self.weight = self.candidates[0].weight if self.candidates else 0
        names = ", ".join(c.registration.handler_name for c in self.candidates)
        super().__init__(
            f"Weight collision ({self.weight}) between resolvers [{names}] "
            f"for message context {dict(context)!r}"
        )


class InvalidPatternError(FlowError, TypeError):
    """Raised when a pattern or template is not a mapping."""

    pass


class InvalidContextError(FlowError, TypeError):
    """Raised when the context handed to the resolver is not a mapping."""

    pass


__all__ = [
    "FlowError",
    "NoMatchError",
    "AmbiguousMatchError",
    "InvalidPatternError",
    "InvalidContextError",
]
