"""Decorator helpers over explicit registration and resolution.

- ``resolve(pattern)`` registers a function or method as a handler.
- ``resolver_for(pattern)`` builds an async dispatcher for one template.
- ``resolve_with(pattern)`` turns a method into a requestor that may
  adjust the message and its own copy of the pattern before dispatching.

Example:
    >>> class UserService:
    ...     @resolve({"domain": "management/users", "action": "SaveUser"})
    ...     async def save_user(self, payload, context):
    ...         ...
    ...
    >>> class UsersController:
    ...     @resolve_with({"domain": "management/users", "action": "$data.action"})
    ...     def save(self, message):
    ...         return message
    ...
    >>> await UsersController().save({"action": "SaveUser", "name": "ana"})
"""

from __future__ import annotations

import copy
import functools
import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from .context import ContextBuilder
from .registry import Registry
from .resolver import Resolver


def _defined_in_class_body(fn: Callable[..., Any]) -> bool:
    parts = getattr(fn, "__qualname__", "").split(".")
    return len(parts) > 1 and parts[-2] != "<locals>"


class _OwnedHandler:
    """Placeholder left in a class body until the class exists.

    Stacked ``@resolve`` decorators accumulate their patterns here. On
    ``__set_name__`` every pattern is registered, innermost first, with the
    class as owner, and the attribute is replaced by the plain function.
    """

    def __init__(self, fn: Callable[..., Any]) -> None:
        self._fn = fn
        self._patterns: list[tuple[Mapping[str, Any], Registry | None]] = []

    def add(self, pattern: Mapping[str, Any], registry: Registry | None) -> _OwnedHandler:
        self._patterns.append((pattern, registry))
        return self

    def __set_name__(self, owner: type, name: str) -> None:
        for pattern, registry in self._patterns:
            target = registry if registry is not None else Registry.instance()
            target.register(pattern, self._fn, owner)
        setattr(owner, name, self._fn)


def resolve(
    pattern: Mapping[str, Any],
    *,
    registry: Registry | None = None,
) -> Callable[[Callable[..., Any]], Any]:
    """Register the decorated function as the handler for a pattern.

    On a method, the enclosing class becomes the owner: each dispatch
    constructs a fresh instance and calls ``method(instance, data, context)``.
    On a plain function, dispatch calls ``fn(data, context)``. Stacking
    the decorator registers the same handler under each pattern.

    Args:
        pattern: Attribute path to matcher mapping.
        registry: Target registry (default: process-wide instance).
    """

    def decorator(fn: Callable[..., Any]) -> Any:
        if isinstance(fn, _OwnedHandler):
            return fn.add(pattern, registry)
        if _defined_in_class_body(fn):
            return _OwnedHandler(fn).add(pattern, registry)

        target = registry if registry is not None else Registry.instance()
        target.register(pattern, fn)
        return fn

    return decorator


def resolver_for(
    pattern: Mapping[str, Any],
    *,
    registry: Registry | None = None,
    builder: ContextBuilder | None = None,
    resolver: Resolver | None = None,
) -> Callable[[Any], Awaitable[Any]]:
    """Build an async dispatcher for a pattern template.

    The returned callable deep-copies the message, substitutes placeholders
    from it into a context, and resolves that context. Every call goes
    through the same Resolver, exposed as ``dispatch.resolver`` so its
    metrics can be read.

    Args:
        pattern: Pattern template, possibly containing placeholders.
        registry: Registry to resolve against (default: process-wide instance).
        builder: Context builder (default: one configured from the registry).
        resolver: Resolver to dispatch through (default: one over ``registry``).

    Example:
        >>> dispatch = resolver_for({"domain": "Test", "action": "Do"})
        >>> await dispatch({"message": "OK"})
        {'message': 'OK'}
        >>> dispatch.resolver.metrics().succeeded
        1
    """
    bound = resolver if resolver is not None else Resolver(registry)
    context_builder = builder or ContextBuilder.from_config(bound.registry.config)

    async def dispatch(data: Any) -> Any:
        if inspect.isawaitable(data):
            data = await data

        payload = copy.deepcopy(data)
        context = context_builder.build(pattern, payload)
        return await bound.resolve(context, payload)

    dispatch.resolver = bound  # type: ignore[attr-defined]
    return dispatch


def resolve_with(
    pattern: Mapping[str, Any],
    *,
    registry: Registry | None = None,
    builder: ContextBuilder | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Awaitable[Any]]]:
    """Turn a function into a requestor that dispatches its result.

    The decorated function receives a copy of the message and, if its
    signature has room for it, a private copy of the pattern it may
    modify. Its return value is dispatched through ``resolver_for`` with
    that (possibly modified) pattern copy. The declared pattern is never
    changed.

    Example:
        >>> class Client:
        ...     @resolve_with({"domain": "Test"})
        ...     def tamper(self, message, pattern):
        ...         pattern["action"] = "Do"
        ...         return message
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
        signature = inspect.signature(fn)
        positional = [
            p
            for p in signature.parameters.values()
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        ]
        has_varargs = any(p.kind is p.VAR_POSITIONAL for p in signature.parameters.values())
        bound: Resolver | None = None

        @functools.wraps(fn)
        async def requestor(*args: Any) -> Any:
            nonlocal bound
            if not args:
                raise TypeError(f"{fn.__qualname__}() missing the message argument")

            *leading, message = args
            message = copy.deepcopy(message)
            use_pattern = copy.deepcopy(dict(pattern))

            if has_varargs or len(positional) >= len(leading) + 2:
                result = fn(*leading, message, use_pattern)
            else:
                result = fn(*leading, message)
            if inspect.isawaitable(result):
                result = await result

            # Bound on first use so the default registry is looked up at call time.
            if bound is None:
                bound = Resolver(registry)
            dispatch = resolver_for(use_pattern, builder=builder, resolver=bound)
            return await dispatch(result)

        return requestor

    return decorator


__all__ = ["resolve", "resolver_for", "resolve_with"]
