"""Approximate "people waiting" counter shown next to the countdown.

This is an engagement heuristic, not occupancy data. A session's real
participant count lives on ``GroupSession.current_participants``.
"""

import logging
import random
from typing import Optional

logger = logging.getLogger(__name__)


class WaitlistHeuristic:
    """Counter that grows by at most one per step with a fixed probability."""

    def __init__(self,
                 initial: int = 8,
                 maximum: int = 15,
                 probability: float = 0.05,
                 rng: Optional[random.Random] = None):
        if not 0 <= probability <= 1:
            raise ValueError(f"probability must be within [0, 1], got {probability}")
        self.maximum = maximum
        self.count = min(initial, maximum)
        self.probability = probability
        self.rng = rng or random.Random()
        self.frozen = False

    def step(self) -> int:
        """Maybe add one waiting person. Returns the current count."""
        if self.frozen or self.count >= self.maximum:
            return self.count
        if self.rng.random() < self.probability:
            self.count += 1
            logger.debug(f"Waitlist grew to {self.count}")
        return self.count

    def freeze(self) -> None:
        self.frozen = True
