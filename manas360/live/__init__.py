"""Live countdown and urgency tier classification."""

from .tiers import TierDirective, DIRECTIVES, classify, remaining_seconds, format_countdown
from .waitlist import WaitlistHeuristic
from .indicator import GoingLiveIndicator

__all__ = [
    "TierDirective",
    "DIRECTIVES",
    "classify",
    "remaining_seconds",
    "format_countdown",
    "WaitlistHeuristic",
    "GoingLiveIndicator",
]
