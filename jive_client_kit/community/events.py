from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Union

from .models import LifecycleEvent

logger = logging.getLogger("community.events")

EventCallback = Callable[[Any], Union[None, Awaitable[None]]]


class CommunityEvents:
    """
    Observers for community lifecycle events.

    Callbacks may be plain functions or coroutine functions. A failing observer
    is logged and skipped, the registration flow keeps going.
    """

    def __init__(self):
        self._observers: Dict[LifecycleEvent, List[EventCallback]] = {e: [] for e in LifecycleEvent}

    def subscribe(self, event: Union[LifecycleEvent, str], callback: EventCallback) -> None:
        self._observers[LifecycleEvent(event)].append(callback)

    def unsubscribe(self, event: Union[LifecycleEvent, str], callback: EventCallback) -> None:
        observers = self._observers[LifecycleEvent(event)]
        if callback in observers:
            observers.remove(callback)

    def observers(self, event: Union[LifecycleEvent, str]) -> List[EventCallback]:
        return list(self._observers[LifecycleEvent(event)])

    async def emit(self, event: Union[LifecycleEvent, str], payload: Any) -> None:
        event = LifecycleEvent(event)
        logger.debug("emit %s to %d observers", event.value, len(self._observers[event]))
        for callback in list(self._observers[event]):
            try:
                result = callback(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.warning(f"{event.value} observer {callback!r} failed: {e}", exc_info=e)
