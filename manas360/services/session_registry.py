"""In-memory session registry kept in start-time order."""

import bisect
import logging
import threading
from datetime import datetime
from typing import Dict, Iterator, List, Optional

from ..models.session import Session

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Holds every session for the lifetime of the process.

    Sessions are kept ascending by ``start_time``; sessions with equal start
    times keep insertion order. There is no removal path.
    """

    def __init__(self):
        self._sessions: List[Session] = []
        self._by_id: Dict[str, Session] = {}
        self.lock = threading.RLock()

    def insert(self, session: Session) -> None:
        """Insert a session at its start-time position.

        Raises:
            ValueError: If a session with the same id is already registered
        """
        with self.lock:
            if session.id in self._by_id:
                raise ValueError(f"Session {session.id} is already registered")
            bisect.insort_right(self._sessions, session, key=lambda s: s.start_time)
            self._by_id[session.id] = session
        logger.debug(f"Registered session {session.id} starting {session.start_time.isoformat()}")

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._by_id

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        with self.lock:
            return iter(list(self._sessions))

    def get(self, session_id: str) -> Optional[Session]:
        return self._by_id.get(session_id)

    def all(self) -> List[Session]:
        with self.lock:
            return list(self._sessions)

    def next_session(self, now: datetime) -> Optional[Session]:
        """Earliest session that has not started yet."""
        with self.lock:
            index = bisect.bisect_right(self._sessions, now, key=lambda s: s.start_time)
            return self._sessions[index] if index < len(self._sessions) else None

    def group_sessions(self) -> List[Session]:
        return [s for s in self.all() if s.is_group]

    def individual_sessions(self) -> List[Session]:
        """Every non-group session, immersive ones included."""
        return [s for s in self.all() if not s.is_group]

    def vr_sessions(self) -> List[Session]:
        return [s for s in self.all() if s.is_vr]
