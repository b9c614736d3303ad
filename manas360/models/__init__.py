"""Data models for the MANAS360 session engine."""

from .session import (
    SessionKind,
    SessionStatus,
    Role,
    VRAccessTier,
    User,
    GroupTheme,
    VREnvironment,
    VRModule,
    Session,
    IndividualSession,
    GroupSession,
    VRSession,
)
from .descriptor import SessionDescriptor
from .events import (
    ViewState,
    Tier,
    SessionContext,
    TierSnapshot,
    JoinEvent,
    SessionEvent,
)

__all__ = [
    "SessionKind",
    "SessionStatus",
    "Role",
    "VRAccessTier",
    "User",
    # Catalog entries
    "GroupTheme",
    "VREnvironment",
    "VRModule",
    # Session variants
    "Session",
    "IndividualSession",
    "GroupSession",
    "VRSession",
    "SessionDescriptor",
    # Events
    "ViewState",
    "Tier",
    "SessionContext",
    "TierSnapshot",
    "JoinEvent",
    "SessionEvent",
]
