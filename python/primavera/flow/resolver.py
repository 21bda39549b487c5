"""Best-match resolution of a message context to a single handler.

Every registration is weighted against the context: each attribute the
pattern declares must be present in the context and satisfy its matcher,
adding one to the weight; a single miss drops the weight to zero. The
unique highest positive weight wins and its handler is invoked with
``(data, context)``. A tie at the top is an authoring error and fails
with AmbiguousMatchError instead of picking arbitrarily.

Example:
    >>> registry = Registry()
    >>> registry.register({"domain": "Test"}, generic)
    >>> registry.register({"domain": "Test", "action": "Do"}, specific)
    >>> resolver = Resolver(registry)
    >>> await resolver.resolve({"domain": "Test", "action": "Do"}, payload)
    # specific(payload, context) wins with weight 2
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..event_bridge import EventBridge, EventNames
from ..exceptions import AmbiguousMatchError, InvalidContextError, NoMatchError
from ..logging import log_debug, log_error, log_trace, log_warn
from ..types import FlowConfig, LogContext, ResolverMetrics
from .pattern import MISSING, lookup, matches
from .registry import Registration, Registry


@dataclass(frozen=True)
class Candidate:
    """A registration that scored a positive weight for one context."""

    registration: Registration
    weight: int

    @property
    def handler(self) -> Any:
        return self.registration.handler

    @property
    def owner(self) -> Any:
        return self.registration.owner


class Resolver:
    """Weighted pattern-matching dispatcher over a Registry.

    Holds no per-resolution state, so one Resolver may serve any number
    of concurrent resolutions. Only the metrics counters are shared, and
    they are updated under a lock.

    Args:
        registry: Registry to resolve against (default: process-wide instance).
        event_bridge: Bridge for outcome events (default: process-wide instance).
        config: Flow configuration (default: FlowConfig()).
    """

    def __init__(
        self,
        registry: Registry | None = None,
        event_bridge: EventBridge | None = None,
        config: FlowConfig | None = None,
    ) -> None:
        self._registry = registry if registry is not None else Registry.instance()
        self._event_bridge = event_bridge
        self._config = config or self._registry.config
        self._metrics = ResolverMetrics()
        self._metrics_lock = threading.Lock()

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def event_bridge(self) -> EventBridge:
        return self._event_bridge if self._event_bridge is not None else EventBridge.instance()

    async def resolve(self, context: Mapping[str, Any], data: Any) -> Any:
        """Find the champion for a context and invoke it with (data, context).

        Args:
            context: Concrete attribute map.
            data: Payload forwarded unchanged to the handler.

        Returns:
            Whatever the handler returns (awaited if it is awaitable).

        Raises:
            NoMatchError: If no registration scores a positive weight.
            AmbiguousMatchError: If the highest weight is shared.
            Exception: Anything the owner factory or handler raises, unchanged.
        """
        self._count("resolutions")

        try:
            champion = await self.find(context)
        except NoMatchError as e:
            self._count("no_match")
            self._publish(EventNames.RESOLUTION_FAILED, context, e)
            raise
        except AmbiguousMatchError as e:
            self._count("ambiguous")
            self._publish(EventNames.RESOLUTION_FAILED, context, e)
            raise

        registration = champion.registration
        try:
            result = self._invoke(registration, data, context)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            self._count("handler_errors")
            log_error(
                f"Resolver {registration.handler_name} failed: {e}",
                LogContext(
                    handler=registration.handler_name,
                    owner=registration.owner_name,
                    weight=champion.weight,
                    context=repr(dict(context)),
                    error_type=type(e).__name__,
                ),
            )
            self._publish(EventNames.HANDLER_ERROR, context, e)
            raise

        self._count("succeeded")
        self._publish(EventNames.RESOLUTION_COMPLETED, context, registration)
        return result

    async def find(self, context: Mapping[str, Any]) -> Candidate:
        """Select the champion for a context without invoking it.

        Raises:
            InvalidContextError: If context is not a mapping.
            NoMatchError: If no registration scores a positive weight.
            AmbiguousMatchError: If the highest weight is shared.
        """
        if not isinstance(context, Mapping):
            raise InvalidContextError(
                f"context must be a mapping, got {type(context).__name__}"
            )

        candidates = await self.candidates(context)

        if not candidates:
            log_error(
                "No resolver candidates match the message context",
                LogContext(context=repr(dict(context))),
            )
            raise NoMatchError(context)

        top = candidates[0].weight
        tied = [c for c in candidates if c.weight == top]
        if len(tied) > 1:
            log_error(
                "Weight collision between resolvers for message context",
                LogContext(
                    context=repr(dict(context)),
                    weight=top,
                    handlers=", ".join(c.registration.handler_name for c in tied),
                ),
            )
            raise AmbiguousMatchError(context, tied)

        champion = candidates[0]
        if len(candidates) > 1:
            log_debug(
                f"Found competition between {champion.registration.handler_name}({top}) "
                f"and {candidates[1].registration.handler_name}({candidates[1].weight})"
            )
        return champion

    async def candidates(self, context: Mapping[str, Any]) -> list[Candidate]:
        """Score every registration and return the positive ones, heaviest first.

        The sort is stable, so equal weights keep registration order.
        """
        scored: list[Candidate] = []
        for registration in self._registry.registrations():
            weight = await self.score(registration, context)
            log_trace(f"Scored {registration.handler_name}: {weight}")
            if weight > 0:
                scored.append(Candidate(registration=registration, weight=weight))

        scored.sort(key=lambda c: c.weight, reverse=True)
        return scored

    async def score(self, registration: Registration, context: Mapping[str, Any]) -> int:
        """Weight of one registration against a context.

        One point per declared attribute that is present and matches;
        zero as soon as any declared attribute is absent or fails.
        """
        weight = 0
        for attribute, matcher in registration.pattern.items():
            value = lookup(context, attribute)
            if value is MISSING or not await matches(value, matcher):
                return 0
            weight += 1
        return weight

    def metrics(self) -> ResolverMetrics:
        """Snapshot of this resolver's counters."""
        with self._metrics_lock:
            return self._metrics.model_copy(
                update={"registrations": len(self._registry)}
            )

    def _invoke(self, registration: Registration, data: Any, context: Mapping[str, Any]) -> Any:
        if registration.owner is None:
            return registration.handler(data, context)

        receiver = registration.owner()
        return registration.handler(receiver, data, context)

    def _count(self, counter: str) -> None:
        with self._metrics_lock:
            setattr(self._metrics, counter, getattr(self._metrics, counter) + 1)

    def _publish(self, event: str, *args: Any) -> None:
        # Listener failures must not replace the resolution outcome.
        if not self._config.publish_events:
            return
        try:
            self.event_bridge.publish(event, *args)
        except Exception as e:
            log_warn(
                f"Listener for {event} failed: {e}",
                {"event": event, "error_type": type(e).__name__},
            )


__all__ = ["Candidate", "Resolver"]
