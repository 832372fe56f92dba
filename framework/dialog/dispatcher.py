"""
Action dispatcher - delivers the one-shot action of a terminal choice.

Event and command actions are deferred by a short delay after the
dialogue closes so the dialogue UI is fully torn down before whatever
the action opens next (a shop, another dialogue) starts.

Usage:
    dispatcher = ActionDispatcher(scheduler, event_bus, delay=0.15)
    dispatcher.register_local_handler("shop:open", open_shop)
    dispatcher.dispatch(action)

    # In game loop:
    scheduler.update(dt)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from engine.core.events import DialogueEvent, EventBus
from engine.core.scheduler import ScheduledTask, Scheduler
from framework.dialog.models import ActionKind, DispatchAction


logger = logging.getLogger(__name__)


ActionHandler = Callable[..., None]


class RemoteTransport(ABC):
    """Sends events to the remote side (e.g. a game server)."""

    @abstractmethod
    def send(self, event_name: str, *payload: Any) -> None:
        """
        Send an event.

        Args:
            event_name: Remote event name
            *payload: Empty for no payload, else the action args mapping
        """
        pass


class ActionDispatcher:
    """
    Routes dispatch actions to their targets after a fixed delay.

    Targets:
    - event: handlers registered by event name, plus a
      DialogueEvent.LOCAL_EVENT on the event bus
    - server_event: the RemoteTransport
    - command: handlers registered by command name, else the
      command executor
    """

    def __init__(
        self,
        scheduler: Scheduler,
        event_bus: Optional[EventBus] = None,
        delay: float = 0.15,
        remote: Optional[RemoteTransport] = None,
        command_executor: Optional[ActionHandler] = None,
    ):
        self.scheduler = scheduler
        self.event_bus = event_bus
        self.delay = delay
        self.remote = remote
        self.command_executor = command_executor

        self._local_handlers: dict[str, list[ActionHandler]] = {}
        self._command_handlers: dict[str, ActionHandler] = {}
        self._pending: list[ScheduledTask] = []

    def register_local_handler(self, event_name: str, handler: ActionHandler) -> None:
        """Call handler(args) (or handler() without args) when event_name fires."""
        self._local_handlers.setdefault(event_name, []).append(handler)

    def register_command(self, command: str, handler: ActionHandler) -> None:
        self._command_handlers[command] = handler

    @property
    def pending(self) -> list[ScheduledTask]:
        """Deferred actions that have not fired or been cancelled."""
        self._pending = [task for task in self._pending if task.pending]
        return list(self._pending)

    def dispatch(self, action: DispatchAction) -> Optional[ScheduledTask]:
        """
        Schedule an action.

        Close actions need nothing beyond the teardown the caller already
        did and return None.

        Returns:
            The scheduled task, or None for close

        Raises:
            MalformedAction: If an event/command action has no target.
                Nothing is scheduled in that case.
        """
        action.validate_target()

        if action.kind is ActionKind.CLOSE:
            return None

        task = self.scheduler.call_later(
            self.delay,
            self._deliver,
            action,
            name=f"{action.kind.value}:{action.target}",
        )
        self._pending = [task for task in self._pending if task.pending]
        self._pending.append(task)
        logger.debug("Scheduled %s '%s' in %.3fs", action.kind.value, action.target, self.delay)
        return task

    def cancel_pending(self) -> int:
        """Invalidate every deferred action that has not fired yet."""
        count = sum(1 for task in self._pending if task.cancel())
        self._pending.clear()
        if count:
            logger.debug("Cancelled %d stale deferred action(s)", count)
        return count

    def _deliver(self, action: DispatchAction) -> None:
        payload = () if action.args is None else (action.args,)

        if action.kind is ActionKind.EVENT:
            self._deliver_local(action.target, payload)
        elif action.kind is ActionKind.SERVER_EVENT:
            if self.remote is None:
                logger.error("No remote transport configured, dropping '%s'", action.target)
                return
            self.remote.send(action.target, *payload)
        elif action.kind is ActionKind.COMMAND:
            handler = self._command_handlers.get(action.target, self.command_executor)
            if handler is None:
                logger.warning("No handler for command '%s'", action.target)
                return
            if action.target in self._command_handlers:
                handler(*payload)
            else:
                handler(action.target, *payload)

        logger.debug("Delivered %s '%s'", action.kind.value, action.target)

    def _deliver_local(self, event_name: str, payload: tuple[Any, ...]) -> None:
        handlers = self._local_handlers.get(event_name, [])
        for handler in list(handlers):
            try:
                handler(*payload)
            except Exception:
                logger.exception("Local handler for '%s' failed", event_name)

        if self.event_bus:
            self.event_bus.publish(
                DialogueEvent.LOCAL_EVENT,
                name=event_name,
                args=payload[0] if payload else None,
            )
        elif not handlers:
            logger.warning("No handler for local event '%s'", event_name)
