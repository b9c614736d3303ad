"""Pub/sub topics and publisher for engine events."""

from .publisher import (
    EventPublisher,
    LIFECYCLE_TRANSITION,
    SESSION_CREATED,
    LIVE_TICK,
    LIVE_JOIN_PENDING,
    LIVE_JOINED,
)

__all__ = [
    "EventPublisher",
    "LIFECYCLE_TRANSITION",
    "SESSION_CREATED",
    "LIVE_TICK",
    "LIVE_JOIN_PENDING",
    "LIVE_JOINED",
]
