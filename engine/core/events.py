"""
Typed event bus for decoupled communication.

Uses Enums for event types to prevent magic strings. The dialogue
framework publishes its outward notifications here (node changed,
action requested, NPC created/removed) so UI layers and scripts can
react without holding a reference to the dialogue system.

Usage:
    # Subscribe
    event_bus.subscribe(DialogueEvent.NODE_CHANGED, on_node_changed)

    # Publish
    event_bus.publish(DialogueEvent.NODE_CHANGED, npc_id=1, text="Hi")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref


logger = logging.getLogger(__name__)


class DialogueEvent(Enum):
    """Dialogue lifecycle events."""
    DIALOGUE_OPENED = auto()
    DIALOGUE_CLOSED = auto()
    NODE_CHANGED = auto()
    ACTION_REQUESTED = auto()
    # Fired when a deferred local event action is delivered
    LOCAL_EVENT = auto()


class NpcEvent(Enum):
    """NPC roster events."""
    NPC_CREATED = auto()
    NPC_REMOVED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Event consumption (stops propagation)
    """

    def __init__(self):
        # Map of event type -> list of (priority, handler, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        # Events published while a dispatch is running are delivered after it
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, use weak reference (handler auto-removed if deleted)
        """
        handlers = self._handlers.setdefault(event_type, [])

        if weak:
            if hasattr(handler, '__self__'):
                handler_ref = WeakMethod(handler)
            else:
                handler_ref = ref(handler)
        else:
            handler_ref = handler

        # Keep highest priority first, FIFO among equals
        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, (priority, handler_ref, one_shot))

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """Remove a handler from an event type."""
        if event_type not in self._handlers:
            return

        self._handlers[event_type] = [
            (p, h, o) for p, h, o in self._handlers[event_type]
            if self._get_handler(h) != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        """Publish a pre-created event."""
        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

    def clear(self, event_type: Enum | None = None) -> None:
        """
        Clear handlers.

        Args:
            event_type: If specified, only clear handlers for this type.
                       If None, clear all handlers.
        """
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def has_subscribers(self, event_type: Enum) -> bool:
        """Check whether anything listens for an event type."""
        return bool(self._handlers.get(event_type))

    def _dispatch(self, event: Event) -> None:
        """Dispatch event to handlers, then drain anything queued meanwhile."""
        handlers = self._handlers.get(event.type)
        if handlers:
            self._is_publishing = True
            to_remove = []

            try:
                for i, (_, handler_ref, one_shot) in enumerate(handlers):
                    handler = self._get_handler(handler_ref)

                    if handler is None:
                        # Weak reference was garbage collected
                        to_remove.append(i)
                        continue

                    try:
                        handler(event)
                    except Exception:
                        logger.exception("Error in event handler for %s", event.type)

                    if one_shot:
                        to_remove.append(i)

                    if event.consumed:
                        break
            finally:
                for i in reversed(to_remove):
                    handlers.pop(i)
                self._is_publishing = False

        while self._event_queue:
            self._dispatch(self._event_queue.pop(0))

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        """Resolve handler from reference."""
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
