"""Placeholder substitution from a pattern template into a concrete context.

A template value that is a string beginning with the placeholder marker
(``"$data"`` by default) refers to the payload about to be dispatched:

- ``"$data.source"`` becomes ``payload["source"]``
- ``"$data.order.items[0]"`` walks nested mappings and sequences
- ``"$data"`` alone becomes the whole payload
- a path that does not resolve becomes ``None``

Both template and payload are deep-copied first, so neither is ever
mutated and the returned context shares no structure with them.

Example:
    >>> build_context({"domain": "$data.source"}, {"source": "Test"})
    {'domain': 'Test'}
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from ..exceptions import InvalidPatternError
from ..types import FlowConfig
from .pattern import MISSING, lookup

DEFAULT_MARKER = "$data"


def is_placeholder(value: Any, marker: str = DEFAULT_MARKER) -> bool:
    """Check whether a template value references the payload.

    Example:
        >>> is_placeholder("$data.user.id")
        True
        >>> is_placeholder("$database")
        False
    """
    if not isinstance(value, str) or not value.startswith(marker):
        return False
    return len(value) == len(marker) or value[len(marker)] == "."


def substitute(value: str, payload: Any, marker: str = DEFAULT_MARKER) -> Any:
    """Resolve a single placeholder against a payload."""
    path = value[len(marker) + 1 :]
    if not path:
        return payload

    found = lookup(payload, path)
    return None if found is MISSING else found


def build_context(
    template: Mapping[str, Any],
    payload: Any,
    *,
    marker: str = DEFAULT_MARKER,
) -> dict[str, Any]:
    """Produce a concrete context from a pattern template and a payload.

    Args:
        template: Attribute map whose values may be placeholders.
        payload: The data about to be dispatched.
        marker: Placeholder prefix.

    Returns:
        A new dict with every placeholder replaced by its payload value.

    Raises:
        InvalidPatternError: If template is not a mapping.
    """
    if not isinstance(template, Mapping):
        raise InvalidPatternError(
            f"template must be a mapping, got {type(template).__name__}"
        )

    context = copy.deepcopy(dict(template))
    data = copy.deepcopy(payload)

    for attribute, value in context.items():
        if is_placeholder(value, marker):
            context[attribute] = substitute(value, data, marker)

    return context


class ContextBuilder:
    """build_context bound to a configured placeholder marker.

    Example:
        >>> builder = ContextBuilder.from_config(FlowConfig(placeholder_marker="$msg"))
        >>> builder.build({"domain": "$msg.source"}, {"source": "Test"})
        {'domain': 'Test'}
    """

    def __init__(self, marker: str = DEFAULT_MARKER) -> None:
        self._marker = marker

    @classmethod
    def from_config(cls, config: FlowConfig) -> ContextBuilder:
        return cls(marker=config.placeholder_marker)

    @property
    def marker(self) -> str:
        return self._marker

    def build(self, template: Mapping[str, Any], payload: Any) -> dict[str, Any]:
        return build_context(template, payload, marker=self._marker)

    def __call__(self, template: Mapping[str, Any], payload: Any) -> dict[str, Any]:
        return self.build(template, payload)

    def __repr__(self) -> str:
        return f"ContextBuilder(marker={self._marker!r})"


__all__ = [
    "DEFAULT_MARKER",
    "is_placeholder",
    "substitute",
    "build_context",
    "ContextBuilder",
]
