"""Synchronous observer registry for client lifecycle events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

EVENT_KINDS = ("request", "response", "retry", "fallback", "error", "aborted")

Handler = Callable[..., None]
Unsubscribe = Callable[[], None]


class EventEmitter:
    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {kind: [] for kind in EVENT_KINDS}

    def _handlers_for(self, kind: str) -> list[Handler]:
        handlers = self._handlers.get(kind)
        if handlers is None:
            raise ValueError(f"unknown event kind: {kind}")
        return handlers

    def subscribe(self, kind: str, handler: Handler) -> Unsubscribe:
        handlers = self._handlers_for(kind)
        # Wrap so the same callable can be subscribed twice and removed independently.
        def entry(*args: Any) -> None:
            handler(*args)

        handlers.append(entry)

        def unsubscribe() -> None:
            if entry in handlers:
                handlers.remove(entry)

        return unsubscribe

    def emit(self, kind: str, *args: Any) -> None:
        for handler in list(self._handlers_for(kind)):
            try:
                handler(*args)
            except Exception:
                logger.exception("Handler for %s event failed", kind)

    def listener_count(self, kind: str) -> int:
        return len(self._handlers_for(kind))
