"""
Active-profile change events and the in-process bus that delivers them.

Screens subscribe once instead of re-reading the store on their own refresh
triggers. Handlers may be plain functions or coroutine functions.
"""

import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..entities.profile import PatientProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveProfileChanged:
    """Raised when the active profile pointer moves."""

    previous: Optional[PatientProfile]
    current: Optional[PatientProfile]
    occurred_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def previous_id(self) -> Optional[str]:
        return self.previous.id if self.previous else None

    @property
    def current_id(self) -> Optional[str]:
        return self.current.id if self.current else None


ProfileHandler = Callable[[ActiveProfileChanged], Union[None, Awaitable[Any]]]


class ProfileEventBus:
    """Observable for active-profile changes."""

    def __init__(self) -> None:
        self._handlers: List[ProfileHandler] = []

    def subscribe(self, handler: ProfileHandler) -> Callable[[], None]:
        """Register a handler; the returned callable unsubscribes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    async def publish(self, event: ActiveProfileChanged) -> None:
        """Deliver an event to every handler in subscription order.

        A failing handler is logged and does not stop delivery to the rest.
        """
        logger.debug(
            f"Active profile changed: {event.previous_id} -> {event.current_id} "
            f"({len(self._handlers)} subscribers)"
        )
        for handler in list(self._handlers):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Active profile handler %r failed", handler)
