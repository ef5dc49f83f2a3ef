"""In-memory registry of calculator sessions.

Each session owns one FieldDerivationEngine for one editing context. Sessions
expire after SESSION_TTL seconds without activity.
"""

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field

from investmate.config import SESSION_TTL
from investmate.services.engine import FieldDerivationEngine

logger = logging.getLogger(__name__)


@dataclass
class CalculatorSession:
    session_id: str
    engine: FieldDerivationEngine
    symbol: str | None = None
    expires_at: float = 0.0
    # Serialises change events for this session's engine
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class SessionStore:
    """Thread-safe session registry with idle expiry."""

    def __init__(self, default_ttl: int = SESSION_TTL):
        self._sessions: dict[str, CalculatorSession] = {}
        self._default_ttl = default_ttl
        self._lock = threading.Lock()

    def create(
        self, engine: FieldDerivationEngine, symbol: str | None = None
    ) -> CalculatorSession:
        session = CalculatorSession(
            session_id=uuid.uuid4().hex,
            engine=engine,
            symbol=symbol,
            expires_at=time.time() + self._default_ttl,
        )
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info(f"Opened calculator session {session.session_id} (symbol={symbol})")
        return session

    def get(self, session_id: str) -> CalculatorSession | None:
        """Return a live session and push back its expiry."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            now = time.time()
            if now > session.expires_at:
                del self._sessions[session_id]
                return None
            session.expires_at = now + self._default_ttl
            return session

    def discard(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info(f"Closed calculator session {session_id}")
        return removed is not None

    def purge_expired(self) -> int:
        now = time.time()
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if now > s.expires_at]
            for sid in expired:
                del self._sessions[sid]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Global session registry
calculator_sessions = SessionStore()
