"""Matcher evaluation and attribute-path lookup.

A pattern maps attribute paths to matchers. A matcher is one of:

- a compiled regular expression, tested with ``search`` against ``str(value)``
- a callable predicate, invoked with the value (awaited if it returns an
  awaitable); its result is coerced to bool
- anything else, compared with ``==``

Attribute paths are dot-addressable. A path that is itself a key of the
mapping wins over dotted traversal, so ``{"a.b": 1}`` and ``{"a": {"b": 1}}``
both satisfy the path ``"a.b"``. Sequence indices may be written as
``items.0`` or ``items[0]``.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Mapping, Sequence
from typing import Any

_INDEX = re.compile(r"\[(\d+)\]")


class _Missing:
    """Sentinel for a path that does not resolve."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    """Split an attribute path into segments.

    Example:
        >>> split_path("order.items[0].sku")
        ['order', 'items', '0', 'sku']
    """
    return [part for part in _INDEX.sub(r".\1", path).split(".") if part]


def lookup(source: Any, path: str) -> Any:
    """Resolve an attribute path against a mapping, sequence or object.

    Args:
        source: Root value to walk.
        path: Dot-separated path.

    Returns:
        The value found, or MISSING if any segment does not resolve or
        the path has no segments at all.

    Example:
        >>> lookup({"user": {"name": "ana"}}, "user.name")
        'ana'
        >>> lookup({"user": {}}, "user.name") is MISSING
        True
    """
    if isinstance(source, Mapping) and path in source:
        return source[path]

    parts = split_path(path)
    if not parts:
        return MISSING

    current = source
    for part in parts:
        current = _step(current, part)
        if current is MISSING:
            return MISSING
    return current


def has_path(source: Any, path: str) -> bool:
    """Check whether a path resolves (to any value, including None)."""
    return lookup(source, path) is not MISSING


def _step(current: Any, part: str) -> Any:
    if isinstance(current, Mapping):
        return current[part] if part in current else MISSING

    if isinstance(current, (str, bytes, bytearray)):
        return MISSING

    if isinstance(current, Sequence):
        if not part.isdigit():
            return MISSING
        index = int(part)
        return current[index] if index < len(current) else MISSING

    if current is None or part.startswith("_"):
        return MISSING

    return getattr(current, part, MISSING)


async def matches(value: Any, matcher: Any) -> bool:
    """Check a context value against a single matcher.

    Args:
        value: Candidate value taken from the context.
        matcher: Regex, predicate or literal.

    Returns:
        True if the value satisfies the matcher.

    Example:
        >>> await matches("Test", "Test")
        True
        >>> await matches("users/42", re.compile(r"^users/\\d+$"))
        True
        >>> await matches(7, lambda v: v > 5)
        True
    """
    if isinstance(matcher, re.Pattern):
        return matcher.search(str(value)) is not None

    if callable(matcher):
        result = matcher(value)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    return bool(value == matcher)


__all__ = ["MISSING", "split_path", "lookup", "has_path", "matches"]
