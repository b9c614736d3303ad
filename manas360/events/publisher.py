"""Event publisher module for pub/sub event publishing."""

import logging
from typing import Any
from pubsub import pub

logger = logging.getLogger(__name__)

# Topics consumed by the rendering layer. Every message carries one `event` argument.
LIFECYCLE_TRANSITION = "lifecycle.transition"
SESSION_CREATED = "sessions.created"
LIVE_TICK = "live.tick"
LIVE_JOIN_PENDING = "live.join_pending"
LIVE_JOINED = "live.joined"


class EventPublisher:
    """Publishes engine events using pubsub.pub for pub/sub architecture."""

    def __init__(self, topic: str):
        """Initialize event publisher.

        Args:
            topic: Pub/sub topic name for events
        """
        self.topic = topic
        logger.info(f"EventPublisher initialized with topic: {topic}")

    def publish(self, event: Any) -> None:
        """Publish an event to the pub/sub topic.

        Args:
            event: Event object to publish
        """
        pub.sendMessage(self.topic, event=event)
        logger.debug(f"Published {type(event).__name__} on {self.topic}")
