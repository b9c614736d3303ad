"""Live countdown for a session: tier classification, waiting count and join."""

import logging
import random
import threading
from typing import Callable, Optional
from datetime import datetime

from ..config import PortalConfig
from ..events import EventPublisher, LIVE_TICK, LIVE_JOIN_PENDING, LIVE_JOINED
from ..models.events import JoinEvent, Tier, TierSnapshot
from ..models.session import Session
from ..scheduling import ScheduledTask, Scheduler
from .tiers import DIRECTIVES, classify, format_countdown, remaining_seconds, urgency_text
from .waitlist import WaitlistHeuristic

logger = logging.getLogger(__name__)

# Tiers at which the waiting count stops moving
FROZEN_WAITLIST_TIERS = (Tier.LIVE_NOW, Tier.ROOM_CLOSED)


class GoingLiveIndicator:
    """Classifies a session's urgency tier every tick and drives the join action.

    Owns exactly one periodic tick and at most one pending join confirmation.
    Both are cancelled by ``dispose``; callbacks that still arrive afterwards
    are dropped.
    """

    def __init__(self,
                 session_id: str,
                 start_time: datetime,
                 scheduler: Scheduler,
                 tick_seconds: float = 1.0,
                 join_delay_seconds: float = 2.0,
                 waitlist: Optional[WaitlistHeuristic] = None):
        """Initialize the indicator.

        Args:
            session_id: Id of the session being counted down
            start_time: Scheduled start of the session
            scheduler: Scheduler for the tick and the join confirmation; its clock
                is sampled once per tick
            tick_seconds: Tick cadence
            join_delay_seconds: Delay between a join request and its completion
            waitlist: Waiting-count heuristic (defaults to a fresh one)
        """
        self.session_id = session_id
        self.start_time = start_time
        self.scheduler = scheduler
        self.clock = scheduler.clock
        self.tick_seconds = tick_seconds
        self.join_delay_seconds = join_delay_seconds
        self.waitlist = waitlist or WaitlistHeuristic()

        self.snapshot: Optional[TierSnapshot] = None
        self._closed = False
        self._disposed = False
        self._tick_task: Optional[ScheduledTask] = None
        self._join_task: Optional[ScheduledTask] = None
        self.lock = threading.RLock()

        self.tick_publisher = EventPublisher(LIVE_TICK)
        self.pending_publisher = EventPublisher(LIVE_JOIN_PENDING)
        self.joined_publisher = EventPublisher(LIVE_JOINED)

    @classmethod
    def for_session(cls,
                    session: Session,
                    scheduler: Scheduler,
                    config: Optional[PortalConfig] = None,
                    rng: Optional[random.Random] = None) -> "GoingLiveIndicator":
        """Build an indicator for a session using the `live` config section."""
        get = config.get if config else (lambda key, default=None: default)
        waitlist = WaitlistHeuristic(
            initial=get('live.initial_waitlist', 8),
            maximum=get('live.waitlist_max', 15),
            probability=get('live.waitlist_probability', 0.05),
            rng=rng,
        )
        return cls(
            session_id=session.id,
            start_time=session.start_time,
            scheduler=scheduler,
            tick_seconds=get('live.tick_seconds', 1.0),
            join_delay_seconds=get('live.join_delay_seconds', 2.0),
            waitlist=waitlist,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def join_pending(self) -> bool:
        return self._join_task is not None

    def start(self) -> None:
        """Take the first sample now and register the periodic tick."""
        with self.lock:
            if self._disposed:
                raise RuntimeError(f"Indicator for {self.session_id} has been disposed")
            if self._tick_task is not None:
                return
            self.tick()
            self._tick_task = self.scheduler.call_every(self.tick_seconds, self.tick)
        logger.info(f"Started countdown for {self.session_id} ({self.snapshot.tier.name})")

    def tick(self) -> Optional[TierSnapshot]:
        """Sample the clock once and derive every field of the snapshot from it."""
        with self.lock:
            if self._disposed:
                logger.debug(f"Dropped stale tick for disposed indicator {self.session_id}")
                return None

            now = self.clock.now()
            remaining = remaining_seconds(self.start_time, now)
            tier = Tier.ROOM_CLOSED if self._closed else classify(remaining)
            if tier is Tier.ROOM_CLOSED:
                if not self._closed:
                    logger.info(f"Room closed for {self.session_id}")
                self._closed = True
                remaining = min(remaining, 0)

            if tier in FROZEN_WAITLIST_TIERS:
                self.waitlist.freeze()
            waiting = self.waitlist.step()

            directive = DIRECTIVES[tier]
            self.snapshot = TierSnapshot(
                session_id=self.session_id,
                remaining_seconds=remaining,
                tier=tier,
                join_enabled=directive.join_enabled,
                waiting_count=waiting,
                label=directive.label,
                cta=directive.cta,
                urgency=urgency_text(tier, remaining),
                countdown=format_countdown(remaining),
                sampled_at=now,
            )
            snapshot = self.snapshot

        self.tick_publisher.publish(snapshot)
        return snapshot

    def _is_closed_now(self) -> bool:
        if not self._closed and remaining_seconds(self.start_time, self.clock.now()) <= 0:
            self._closed = True
        return self._closed

    def join(self, on_complete: Optional[Callable[[], None]] = None) -> bool:
        """Request to join; on_complete runs once after the confirmation delay.

        Returns:
            True if the join was accepted, False if it was ignored because the
            room is closed, a join is already pending or the indicator is disposed
        """
        with self.lock:
            if self._disposed:
                logger.debug(f"Ignored join on disposed indicator {self.session_id}")
                return False
            if self._is_closed_now():
                logger.info(f"Ignored join for {self.session_id}: room closed")
                return False
            if self._join_task is not None:
                logger.debug(f"Ignored join for {self.session_id}: already pending")
                return False

            self._join_task = self.scheduler.call_later(
                self.join_delay_seconds, lambda: self._complete_join(on_complete))
            pending = JoinEvent(session_id=self.session_id, event_type="pending", timestamp=self.clock.now())

        logger.info(f"Join pending for {self.session_id}")
        self.pending_publisher.publish(pending)
        return True

    def _complete_join(self, on_complete: Optional[Callable[[], None]]) -> None:
        with self.lock:
            if self._disposed:
                logger.debug(f"Dropped stale join confirmation for {self.session_id}")
                return
            self._join_task = None
            joined = JoinEvent(session_id=self.session_id, event_type="joined", timestamp=self.clock.now())

        logger.info(f"Joined {self.session_id}")
        self.joined_publisher.publish(joined)
        if on_complete:
            on_complete()

    def dispose(self) -> None:
        """Cancel the tick and any pending join. Safe to call more than once."""
        with self.lock:
            if self._disposed:
                return
            self._disposed = True
            for task in (self._tick_task, self._join_task):
                if task is not None:
                    task.cancel()
            self._tick_task = None
            self._join_task = None
        logger.info(f"Disposed countdown for {self.session_id}")
