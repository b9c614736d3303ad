"""Event models published to the rendering layer."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .session import Role, Session


class ViewState(Enum):
    """What the acting user is currently looking at."""
    DASHBOARD = "dashboard"
    VR_LAUNCHER = "vr_launcher"
    WAITING_ROOM = "waiting_room"
    VIDEO_ROOM = "video_room"
    FEEDBACK = "feedback"


class Tier(Enum):
    """Urgency tier derived from the time left before a session starts."""
    ROOM_CLOSED = "room_closed"
    LIVE_NOW = "live_now"
    FINAL_MINUTES = "final_minutes"
    GOING_LIVE = "going_live"
    COMING_SOON = "coming_soon"


@dataclass(frozen=True)
class SessionContext:
    """Per-actor view-state and active session."""
    role: Role
    view_state: ViewState = ViewState.DASHBOARD
    active_session: Optional[Session] = None


@dataclass(frozen=True)
class TierSnapshot:
    """Everything derived from one clock sample on one tick."""
    session_id: str
    remaining_seconds: int
    tier: Tier
    join_enabled: bool
    waiting_count: int
    label: str
    cta: str
    urgency: str
    countdown: str
    sampled_at: datetime


@dataclass(frozen=True)
class JoinEvent:
    """Join confirmation lifecycle event."""
    session_id: str
    event_type: str  # "pending", "joined"
    timestamp: datetime


@dataclass(frozen=True)
class SessionEvent:
    """Registry change event."""
    session: Session
    event_type: str  # "created"
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
