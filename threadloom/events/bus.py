"""Run event bus — publish/subscribe with pattern matching."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Awaitable, Callable

from ..types import RunEvent

logger = logging.getLogger(__name__)

Handler = Callable[[RunEvent], Awaitable[None]]


class EventBus:
    """Event bus with wildcard and pattern subscriptions (e.g. 'tool:*').

    Handler failures are logged and never reach the emitting run.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._wildcard: list[Handler] = []
        self._lock = threading.Lock()

    def on(self, event_type: str, handler: Handler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)

    def on_all(self, handler: Handler) -> None:
        with self._lock:
            self._wildcard.append(handler)

    def off(self, event_type: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._wildcard if event_type == "*" else self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

    def has_subscribers(self) -> bool:
        with self._lock:
            return bool(self._wildcard) or any(self._handlers.values())

    async def emit(self, event: RunEvent) -> None:
        event_type = getattr(event, "type", "")
        with self._lock:
            exact = list(self._handlers.get(event_type, [])) + list(self._wildcard)
            patterns = [
                (pat, list(handlers)) for pat, handlers in self._handlers.items() if pat.endswith(":*")
            ]
        for h in exact:
            try:
                await h(event)
            except Exception:
                logger.exception("Event handler error for %s", event_type)
        # 'tool:*' matches 'tool:start', 'tool:end'
        for pat, handlers in patterns:
            if event_type.startswith(pat[:-1]):
                for h in handlers:
                    try:
                        await h(event)
                    except Exception:
                        logger.exception("Pattern handler error for %s", pat)
