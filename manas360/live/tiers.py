"""Urgency tiers derived from the seconds left before a session starts."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..models.events import Tier


@dataclass(frozen=True)
class TierDirective:
    """Presentation hints carried by a tier. Opaque to the engine."""
    tier: Tier
    label: str
    color: str
    glow: str
    animation: str
    cta: str
    urgency: str
    join_enabled: bool


DIRECTIVES = {
    Tier.ROOM_CLOSED: TierDirective(
        tier=Tier.ROOM_CLOSED,
        label="🏁 ROOM CLOSED",
        color="#64748b",
        glow="rgba(100, 116, 139, 0.2)",
        animation="none",
        cta="SESSION COMPLETED",
        urgency="Room is now closed",
        join_enabled=False,
    ),
    Tier.LIVE_NOW: TierDirective(
        tier=Tier.LIVE_NOW,
        label="🔴 LIVE NOW",
        color="#FF1744",
        glow="rgba(255, 23, 108, 0.8)",
        animation="urgentFlash 0.5s ease-in-out infinite",
        cta="JOIN NOW!",
        urgency="STARTING NOW!",
        join_enabled=True,
    ),
    Tier.FINAL_MINUTES: TierDirective(
        tier=Tier.FINAL_MINUTES,
        label="⚡ FINAL MINUTES",
        color="#00D9FF",
        glow="rgba(0, 217, 255, 0.6)",
        animation="neonPulse 1s ease-in-out infinite",
        cta="TAP TO JOIN",
        urgency="Only a few mins left!",
        join_enabled=True,
    ),
    Tier.GOING_LIVE: TierDirective(
        tier=Tier.GOING_LIVE,
        label="✨ GOING LIVE",
        color="#39FF14",
        glow="rgba(57, 255, 20, 0.6)",
        animation="neonPulse 1.5s ease-in-out infinite",
        cta="TAP TO JOIN",
        urgency="{minutes} mins remain",
        join_enabled=True,
    ),
    Tier.COMING_SOON: TierDirective(
        tier=Tier.COMING_SOON,
        label="📅 COMING SOON",
        color="#00D9FF",
        glow="rgba(0, 217, 255, 0.4)",
        animation="neonPulse 3s ease-in-out infinite",
        cta="JOIN WAITLIST",
        urgency="Starting shortly",
        join_enabled=True,
    ),
}

# Upper bounds (inclusive, seconds remaining) checked in order; first match wins
THRESHOLDS = (
    (0, Tier.ROOM_CLOSED),
    (120, Tier.LIVE_NOW),
    (360, Tier.FINAL_MINUTES),
    (600, Tier.GOING_LIVE),
)

# Most urgent first
URGENCY_ORDER = (Tier.ROOM_CLOSED, Tier.LIVE_NOW, Tier.FINAL_MINUTES, Tier.GOING_LIVE, Tier.COMING_SOON)


def remaining_seconds(start_time: datetime, now: datetime) -> int:
    """Whole seconds until start_time, floored (negative once started)."""
    millis = (start_time - now) // timedelta(milliseconds=1)
    return millis // 1000


def classify(remaining: int) -> Tier:
    for bound, tier in THRESHOLDS:
        if remaining <= bound:
            return tier
    return Tier.COMING_SOON


def urgency_text(tier: Tier, remaining: int) -> str:
    text = DIRECTIVES[tier].urgency
    if tier is Tier.GOING_LIVE:
        return text.format(minutes=math.ceil(remaining / 60))
    return text


def format_countdown(seconds: int) -> str:
    """MM:SS, clamped at zero."""
    s = max(0, seconds)
    return f"{s // 60:02d}:{s % 60:02d}"
