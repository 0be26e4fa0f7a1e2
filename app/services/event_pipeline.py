"""Hand-off of canonical events to the bot engine.

The bot engine subscribes handlers per event kind; the webhook router
dispatches every normalized event here once it is complete (attachments
prefetched).
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Optional, Union

from app.types import CanonicalEvent, EventKind

logger = logging.getLogger(__name__)

EventHandler = Callable[[CanonicalEvent], Union[None, Awaitable[None]]]


class EventPipeline:
    """Subscription table keyed by `EventKind`; handlers may be sync or async."""

    def __init__(self) -> None:
        self._handlers: Dict[EventKind, List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_kind: EventKind, handler: EventHandler) -> None:
        self._handlers[event_kind].append(handler)

    def clear(self) -> None:
        self._handlers.clear()

    async def dispatch(self, event: CanonicalEvent) -> int:
        """Run every handler subscribed to the event's kind.

        Handler exceptions propagate to the caller. Returns the number of
        handlers that ran.
        """
        handlers = list(self._handlers.get(event.event_kind, []))
        if not handlers:
            logger.debug("no handler for %s event %s", event.event_kind.value, event.id)
            return 0
        for handler in handlers:
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        return len(handlers)


# Global pipeline instance (singleton)
_event_pipeline: Optional[EventPipeline] = None


def get_event_pipeline() -> EventPipeline:
    """Get or create the event pipeline instance."""
    global _event_pipeline
    if _event_pipeline is None:
        _event_pipeline = EventPipeline()
    return _event_pipeline
