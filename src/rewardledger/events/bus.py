"""
Event bus for ledger notifications.

Synchronous in-process bus with glob-style pattern matching, so claims
and funding activity can be observed without coupling to the ledger.
"""

from __future__ import annotations

import fnmatch
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable


# Standard event types
EVENT_REWARD_CLAIMED = "reward.claimed"
EVENT_FUNDS_ACKNOWLEDGED = "funds.acknowledged"
EVENT_PULL_EXECUTED = "pull.executed"
EVENT_PULL_CONFIGURED = "pull.configured"
EVENT_REGISTRY_CHANGED = "registry.changed"
EVENT_ADMIN_TRANSFERRED = "admin.transferred"

ALL_EVENT_TYPES = [
    EVENT_REWARD_CLAIMED,
    EVENT_FUNDS_ACKNOWLEDGED,
    EVENT_PULL_EXECUTED,
    EVENT_PULL_CONFIGURED,
    EVENT_REGISTRY_CHANGED,
    EVENT_ADMIN_TRANSFERRED,
]


@dataclass
class Event:
    """An event emitted by the ledger."""

    event_type: str
    source: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: f"evt-{time.monotonic_ns()}")


EventHandler = Callable[[Event], Any]


class EventBus(ABC):
    """Abstract base class for event bus implementations."""

    @abstractmethod
    def emit(self, event: Event) -> None:
        """Emit an event to all matching subscribers."""

    @abstractmethod
    def subscribe(self, pattern: str, handler: EventHandler) -> None:
        """Subscribe a handler to events matching a glob-style pattern.

        Args:
            pattern: Glob-style pattern (e.g., ``reward.*``, ``*``).
            handler: Callable invoked with the matching Event.
        """

    @abstractmethod
    def unsubscribe(self, handler: EventHandler) -> None:
        """Remove a handler from all subscriptions."""


class InMemoryEventBus(EventBus):
    """Synchronous in-process event bus that also keeps a history."""

    def __init__(self, history_size: int = 1000) -> None:
        self._subscriptions: list[tuple[str, EventHandler]] = []
        self._history: list[Event] = []
        self._history_size = history_size

    def emit(self, event: Event) -> None:
        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[0]
        for pattern, handler in list(self._subscriptions):
            if fnmatch.fnmatch(event.event_type, pattern):
                handler(event)

    def subscribe(self, pattern: str, handler: EventHandler) -> None:
        self._subscriptions.append((pattern, handler))

    def unsubscribe(self, handler: EventHandler) -> None:
        self._subscriptions = [
            (p, h) for p, h in self._subscriptions if h is not handler
        ]

    def history(self, pattern: str = "*") -> list[Event]:
        """Return retained events whose type matches *pattern*."""
        return [e for e in self._history if fnmatch.fnmatch(e.event_type, pattern)]
