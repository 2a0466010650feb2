"""Synchronous dispatch of match events to their viewers."""

import logging
from collections import defaultdict
from typing import Callable, TypeVar

from chaosball.events.types import MatchEvent

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=MatchEvent)


class EventBus:
    """
    Routes each emitted event to the handlers registered for its class.

    The orchestrator emits after it has committed a snapshot, so a handler
    that reads orchestrator.state sees the committed match. Handlers run
    in registration order on the caller's thread.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[MatchEvent], list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        self._handlers[event_type].append(handler)

    def emit(self, event: MatchEvent) -> None:
        """
        Deliver an event to every handler of its exact class.

        A handler that raises is logged and the remaining handlers still run.
        """
        for handler in list(self._handlers[type(event)]):
            try:
                handler(event)
            except Exception:
                logger.exception(f"{type(event).__name__} handler {handler!r} failed")
