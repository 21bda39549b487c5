r"""Pattern-matching resolution of messages to handlers.

Handlers register against a pattern (attribute path -> matcher). A message
context is resolved to the single most specific matching handler:

- Registry: append-only sequence of registrations
- Resolver: weights every registration and invokes the unique champion
- build_context: substitutes ``$data.*`` placeholders from the payload

Usage:

    from primavera.flow import Registry, Resolver, build_context

    registry = Registry()
    registry.register({"domain": "Test", "action": "Do"}, do_test)

    context = build_context({"domain": "Test", "action": "$data.action"}, payload)
    result = await Resolver(registry).resolve(context, payload)

Decorators:
``resolve``, ``resolve_with`` and ``resolver_for`` express the same thing
declaratively against the process-wide default registry.
"""

from __future__ import annotations

from .context import DEFAULT_MARKER, ContextBuilder, build_context, is_placeholder
from .decorators import resolve, resolve_with, resolver_for
from .pattern import MISSING, lookup, matches
from .registry import Registration, Registry
from .resolver import Candidate, Resolver

__all__ = [
    # Registry
    "Registration",
    "Registry",
    # Resolver
    "Candidate",
    "Resolver",
    # Context building
    "DEFAULT_MARKER",
    "ContextBuilder",
    "build_context",
    "is_placeholder",
    # Matching
    "MISSING",
    "lookup",
    "matches",
    # Decorators
    "resolve",
    "resolve_with",
    "resolver_for",
]
