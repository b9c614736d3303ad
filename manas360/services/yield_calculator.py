"""Bookable revenue projection over the session registry."""

import logging
import math
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, Iterable

from ..config import PortalConfig
from ..models.session import Session, SessionKind

logger = logging.getLogger(__name__)


@dataclass
class YieldReport:
    """Revenue split for a set of sessions.

    ``payout + platform_share == total_revenue`` always holds.
    """
    total_revenue: int
    payout: int
    platform_share: int
    currency: str = "INR"
    per_session: Dict[str, int] = field(default_factory=dict)


class YieldCalculator:
    """Attributes revenue per session type and splits it with the operator."""

    def __init__(self,
                 group_rate: int = 499,
                 vr_rate: int = 2499,
                 individual_rate: int = 1499,
                 payout_fraction: float = 0.60,
                 currency: str = "INR"):
        # str() first: 0.6 becomes 3/5, not the nearest binary float
        fraction = Fraction(str(payout_fraction))
        if not 0 <= fraction <= 1:
            raise ValueError(f"payout_fraction must be within [0, 1], got {payout_fraction}")
        self.group_rate = group_rate
        self.vr_rate = vr_rate
        self.individual_rate = individual_rate
        self.payout_fraction = fraction
        self.currency = currency

    @classmethod
    def from_config(cls, config: PortalConfig) -> "YieldCalculator":
        return cls(
            group_rate=config.get('yield.group_rate', 499),
            vr_rate=config.get('yield.vr_rate', 2499),
            individual_rate=config.get('yield.individual_rate', 1499),
            payout_fraction=config.get('yield.payout_fraction', 0.60),
            currency=config.get('yield.currency', 'INR'),
        )

    def session_revenue(self, session: Session) -> int:
        if session.kind is SessionKind.VR:
            return self.vr_rate
        if session.kind is SessionKind.GROUP:
            return session.current_participants * self.group_rate
        return self.individual_rate

    def compute(self, sessions: Iterable[Session]) -> YieldReport:
        per_session = {s.id: self.session_revenue(s) for s in sessions}
        total = sum(per_session.values())
        payout = math.floor(total * self.payout_fraction)
        report = YieldReport(
            total_revenue=total,
            payout=payout,
            platform_share=total - payout,
            currency=self.currency,
            per_session=per_session,
        )
        logger.debug(f"Yield over {len(per_session)} sessions: total={total} payout={payout}")
        return report
