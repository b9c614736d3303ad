"""Session-related data models."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import ClassVar, FrozenSet, Optional, Tuple


class SessionKind(Enum):
    """Discriminant for the three session shapes."""
    INDIVIDUAL = "individual"
    GROUP = "group"
    VR = "vr"


class SessionStatus(Enum):
    """Booking status of a session."""
    SCHEDULED = "scheduled"
    WAITING = "waiting"
    LIVE = "live"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Role(Enum):
    """Role of the acting user."""
    THERAPIST = "therapist"
    PATIENT = "patient"


class VRAccessTier(Enum):
    """Access tier chosen when an immersive session is launched."""
    BASIC = "basic"
    PREMIUM = "premium"
    CLINICAL = "clinical"


@dataclass(frozen=True)
class User:
    """An actor using the portal."""
    id: str
    name: str
    role: Role


@dataclass(frozen=True)
class GroupTheme:
    """Catalog entry for a drop-in group theme."""
    id: str
    slug: str
    name: str
    emoji: str
    social_proof_stat: str = ""
    social_proof_icon: str = ""


@dataclass(frozen=True)
class VREnvironment:
    """Catalog entry for an immersive environment."""
    id: str
    name: str
    icon: str
    thumbnail: str
    therapy_type: str
    target_conditions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class VRModule:
    """Catalog entry for a CBT module that can be planned in a VR session."""
    id: str
    name: str
    description: str = ""


# Seconds before start under which a session counts as imminent
IMMINENT_SECONDS = 60

# Spots left at or under which a group session is flagged critical
CRITICAL_SPOTS = 3


@dataclass(frozen=True, kw_only=True)
class Session:
    """Fields shared by every session shape.

    ``is_encrypted`` cannot be passed to the constructor; every session is
    end-to-end encrypted.
    """
    kind: ClassVar[SessionKind]

    id: str
    therapist_name: str
    start_time: datetime
    duration_minutes: int
    status: SessionStatus = SessionStatus.SCHEDULED
    notes: Optional[str] = None
    is_encrypted: bool = field(default=True, init=False)

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise ValueError(f"duration_minutes must be positive, got {self.duration_minutes}")
        if self.start_time.tzinfo is None:
            raise ValueError("start_time must be timezone-aware")

    @property
    def is_group(self) -> bool:
        return self.kind is SessionKind.GROUP

    @property
    def is_vr(self) -> bool:
        return self.kind is SessionKind.VR

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(minutes=self.duration_minutes)

    def is_imminent(self, now: datetime) -> bool:
        """True when the session starts in under a minute."""
        return (self.start_time - now).total_seconds() < IMMINENT_SECONDS


@dataclass(frozen=True, kw_only=True)
class IndividualSession(Session):
    """One-to-one video session."""
    kind: ClassVar[SessionKind] = SessionKind.INDIVIDUAL

    patient_name: str


@dataclass(frozen=True, kw_only=True)
class GroupSession(Session):
    """Capacity-bounded drop-in session around a theme."""
    kind: ClassVar[SessionKind] = SessionKind.GROUP

    theme: GroupTheme
    current_participants: int = 0
    max_participants: int = 15

    def __post_init__(self):
        super().__post_init__()
        if self.max_participants <= 0:
            raise ValueError(f"max_participants must be positive, got {self.max_participants}")
        if not 0 <= self.current_participants <= self.max_participants:
            raise ValueError(
                f"current_participants must be within 0..{self.max_participants}, "
                f"got {self.current_participants}"
            )

    @property
    def spots_left(self) -> int:
        return self.max_participants - self.current_participants

    @property
    def is_critical(self) -> bool:
        return self.spots_left <= CRITICAL_SPOTS


@dataclass(frozen=True, kw_only=True)
class VRSession(Session):
    """Immersive CBT session in a catalog environment."""
    kind: ClassVar[SessionKind] = SessionKind.VR

    patient_name: str
    vr_environment: VREnvironment
    modules_planned: FrozenSet[str] = frozenset()
    vr_tier: Optional[VRAccessTier] = None
