"""In-process event bridge for flow observability.

This module provides the EventBridge class that wraps pyee's EventEmitter
so that registrations and resolution outcomes can be observed without
coupling the resolver to any particular consumer.

Example:
    >>> from primavera import EventBridge, EventNames
    >>>
    >>> bridge = EventBridge.instance()
    >>> bridge.start()
    >>>
    >>> def on_failure(context, error):
    ...     print(f"Could not resolve {context}: {error}")
    ...
    >>> bridge.subscribe(EventNames.RESOLUTION_FAILED, on_failure)
    >>>
    >>> bridge.stop()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pyee.base import EventEmitter

from .logging import log_debug, log_info


class EventNames:
    """Constants for event names used in the event bridge.

    Attributes:
        HANDLER_REGISTERED: Emitted when a registration is appended (Registration).
        RESOLUTION_COMPLETED: Emitted after the champion returned (context, Registration).
        RESOLUTION_FAILED: Emitted on no-match or ambiguity (context, FlowError).
        HANDLER_ERROR: Emitted when the champion or its owner raised (context, Exception).
    """

    HANDLER_REGISTERED = "flow.handler.registered"
    RESOLUTION_COMPLETED = "flow.resolution.completed"
    RESOLUTION_FAILED = "flow.resolution.failed"
    HANDLER_ERROR = "flow.handler.error"


class EventBridge:
    """In-process event bus for flow registrations and resolutions.

    Implemented as a singleton so the registry and every resolver share
    the same bus by default. Listener exceptions propagate to the
    publisher, as with any pyee emitter.

    Events:
        flow.handler.registered: Registration appended (Registration)
        flow.resolution.completed: Handler returned (context, Registration)
        flow.resolution.failed: No match or weight collision (context, FlowError)
        flow.handler.error: Handler or owner raised (context, Exception)
    """

    _instance: EventBridge | None = None

    def __init__(self) -> None:
        self._emitter = EventEmitter()
        self._active = False

    @classmethod
    def instance(cls) -> EventBridge:
        """Get the singleton EventBridge instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance.

        Stops the current instance if active before resetting.
        Primarily for testing.
        """
        if cls._instance is not None:
            cls._instance.stop()
        cls._instance = None

    def start(self) -> None:
        """Activate the event bridge.

        Events will only be published when the bridge is active.
        Calling start() multiple times is safe.
        """
        if self._active:
            return
        self._active = True
        log_info("EventBridge started")

    def stop(self) -> None:
        """Deactivate the event bridge and remove all listeners.

        Calling stop() multiple times is safe.
        """
        if not self._active:
            return
        self._active = False
        self._emitter.remove_all_listeners()
        log_info("EventBridge stopped")

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe to an event.

        Args:
            event: Event name to subscribe to.
            handler: Callback invoked with the published arguments.
        """
        self._emitter.on(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Subscribed to {event}: {handler_name}")

    def subscribe_once(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe to an event for a single invocation."""
        self._emitter.once(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Subscribed once to {event}: {handler_name}")

    def unsubscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Unsubscribe a handler from an event."""
        self._emitter.remove_listener(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Unsubscribed from {event}: {handler_name}")

    def publish(self, event: str, *args: Any, **kwargs: Any) -> None:
        """Publish an event to all subscribers.

        Dropped (with a debug log) while the bridge is inactive.

        Args:
            event: Event name to publish.
            *args: Positional arguments passed to handlers.
            **kwargs: Keyword arguments passed to handlers.
        """
        if not self._active:
            log_debug(f"EventBridge not active, dropping event: {event}")
            return

        log_debug(f"Publishing event: {event}")
        self._emitter.emit(event, *args, **kwargs)

    def listener_count(self, event: str) -> int:
        """Get the number of listeners for an event."""
        return len(self._emitter.listeners(event))

    @property
    def is_active(self) -> bool:
        """True if the bridge is active and will deliver events."""
        return self._active


__all__ = ["EventBridge", "EventNames"]
