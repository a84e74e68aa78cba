"""Event bus for the reward ledger."""

from .bus import (
    ALL_EVENT_TYPES,
    EVENT_ADMIN_TRANSFERRED,
    EVENT_FUNDS_ACKNOWLEDGED,
    EVENT_PULL_CONFIGURED,
    EVENT_PULL_EXECUTED,
    EVENT_REGISTRY_CHANGED,
    EVENT_REWARD_CLAIMED,
    Event,
    EventBus,
    EventHandler,
    InMemoryEventBus,
)

__all__ = [
    "Event",
    "EventBus",
    "EventHandler",
    "InMemoryEventBus",
    "EVENT_REWARD_CLAIMED",
    "EVENT_FUNDS_ACKNOWLEDGED",
    "EVENT_PULL_EXECUTED",
    "EVENT_PULL_CONFIGURED",
    "EVENT_REGISTRY_CHANGED",
    "EVENT_ADMIN_TRANSFERRED",
    "ALL_EVENT_TYPES",
]
