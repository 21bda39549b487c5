"""Append-only registry of (pattern, handler, owner) registrations.

Registrations are kept in declaration order and are never removed for the
lifetime of the process. Every Resolver reads a snapshot of the sequence,
so registering while resolutions are in flight is safe.

Example:
    >>> registry = Registry()
    >>> registry.register({"domain": "Test", "action": "Do"}, do_test)
    >>> resolver = Resolver(registry)
    >>> await resolver.resolve({"domain": "Test", "action": "Do"}, {"message": "OK"})
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ..event_bridge import EventBridge, EventNames
from ..exceptions import InvalidPatternError
from ..logging import log_debug, log_warn
from ..types import FlowConfig


@dataclass(frozen=True, eq=False)
class Registration:
    """A registered handler and the pattern that selects it.

    Attributes:
        pattern: Read-only mapping of attribute path to matcher.
        handler: Callable invoked as ``handler(data, context)``, or as
            ``handler(receiver, data, context)`` when an owner is set.
        owner: Optional zero-argument factory producing a fresh receiver
            for every dispatch (a class with a no-arg constructor works).
        sequence: Position in registration order.
    """

    pattern: Mapping[str, Any]
    handler: Callable[..., Any]
    owner: Callable[[], Any] | None = None
    sequence: int = 0

    @property
    def handler_name(self) -> str:
        """Qualified name of the handler, for diagnostics."""
        return getattr(self.handler, "__qualname__", None) or repr(self.handler)

    @property
    def owner_name(self) -> str | None:
        """Name of the owner factory, if any."""
        if self.owner is None:
            return None
        return getattr(self.owner, "__qualname__", None) or repr(self.owner)

    def __repr__(self) -> str:
        owner = f", owner={self.owner_name}" if self.owner is not None else ""
        return f"Registration({dict(self.pattern)!r} -> {self.handler_name}{owner})"


class Registry:
    """Ordered, append-only collection of registrations.

    A process-wide default instance is available through ``instance()``
    for the decorator helpers; applications that wire things explicitly
    construct their own Registry and hand it to each Resolver.

    Thread-safe for concurrent registration and snapshot reads.
    """

    _instance: Registry | None = None

    def __init__(
        self,
        event_bridge: EventBridge | None = None,
        config: FlowConfig | None = None,
    ) -> None:
        self._registrations: list[Registration] = []
        self._snapshot: tuple[Registration, ...] = ()
        self._lock = threading.RLock()
        self._event_bridge = event_bridge
        self._config = config or FlowConfig()

    @classmethod
    def instance(cls) -> Registry:
        """Get the process-wide default registry.

        Example:
            >>> assert Registry.instance() is Registry.instance()
        """
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the process-wide default registry. Primarily for testing."""
        cls._instance = None

    def register(
        self,
        pattern: Mapping[str, Any],
        handler: Callable[..., Any],
        owner: Callable[[], Any] | None = None,
    ) -> Registration:
        """Append a registration.

        The pattern is copied so later changes to the caller's mapping
        cannot alter what was registered.

        Args:
            pattern: Attribute path to matcher mapping.
            handler: Handler callable.
            owner: Optional zero-argument receiver factory.

        Returns:
            The new Registration.

        Raises:
            InvalidPatternError: If pattern is not a mapping.
        """
        if not isinstance(pattern, Mapping):
            raise InvalidPatternError(
                f"pattern must be a mapping, got {type(pattern).__name__}"
            )

        with self._lock:
            registration = Registration(
                pattern=MappingProxyType(dict(pattern)),
                handler=handler,
                owner=owner,
                sequence=len(self._registrations),
            )
            self._registrations.append(registration)
            self._snapshot = tuple(self._registrations)

        log_debug(
            "Registered resolver",
            {"pattern": dict(registration.pattern), "handler": registration.handler_name},
        )
        if self._config.publish_events:
            try:
                self.event_bridge.publish(EventNames.HANDLER_REGISTERED, registration)
            except Exception as e:
                log_warn(
                    f"Listener for {EventNames.HANDLER_REGISTERED} failed: {e}",
                    {"handler": registration.handler_name, "error_type": type(e).__name__},
                )
        return registration

    def registrations(self) -> tuple[Registration, ...]:
        """Return an immutable snapshot in registration order."""
        with self._lock:
            return self._snapshot

    def clear(self) -> None:
        """Remove every registration.

        Only for test isolation; production code never unregisters.
        """
        with self._lock:
            self._registrations.clear()
            self._snapshot = ()
        log_debug("Cleared all registrations from registry")

    @property
    def event_bridge(self) -> EventBridge:
        """The bridge registrations are published on."""
        return self._event_bridge if self._event_bridge is not None else EventBridge.instance()

    @property
    def config(self) -> FlowConfig:
        return self._config

    def __len__(self) -> int:
        return len(self._snapshot)

    def __iter__(self) -> Iterator[Registration]:
        return iter(self.registrations())

    def __repr__(self) -> str:
        return f"Registry(registrations={len(self)})"


__all__ = ["Registration", "Registry"]
