"""In-memory store of open intake sessions."""

import threading
from dataclasses import dataclass, field, replace
from uuid import uuid4

from tutor_showcase.domain.intake import IntakeSession, IntakeStep


@dataclass
class ConversationStore:
    """Holds at most one intake session per user.

    Sessions are not persisted and vanish on restart. Concurrent messages from
    the same user are applied last-write-wins, except that a write-back for a
    publish cycle that was cleared or replaced meanwhile is dropped.
    """

    _sessions: dict[int, IntakeSession] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def start(self, user_id: int, document_key: str) -> IntakeSession:
        """Open a new session at the title step, replacing any prior one."""
        session = IntakeSession(
            session_id=uuid4(),
            user_id=user_id,
            document_key=document_key,
            step=IntakeStep.AWAITING_TITLE,
        )
        with self._lock:
            self._sessions[user_id] = session
        return session

    def get(self, user_id: int) -> IntakeSession | None:
        with self._lock:
            return self._sessions.get(user_id)

    def save(self, session: IntakeSession) -> bool:
        """Store an updated session if it is still the user's current cycle."""
        with self._lock:
            current = self._sessions.get(session.user_id)
            if current is None or current.session_id != session.session_id:
                return False
            self._sessions[session.user_id] = session
            return True

    def advance(self, session: IntakeSession, **changes: object) -> IntakeSession:
        """Apply field changes to a session and store the result."""
        updated = replace(session, **changes)
        self.save(updated)
        return updated

    def clear(self, user_id: int) -> bool:
        """Remove the user's session; returns whether one existed."""
        with self._lock:
            return self._sessions.pop(user_id, None) is not None

    def finish(self, session: IntakeSession) -> bool:
        """Remove the session only if it is still the user's current cycle."""
        with self._lock:
            current = self._sessions.get(session.user_id)
            if current is None or current.session_id != session.session_id:
                return False
            del self._sessions[session.user_id]
            return True

    def is_current(self, session: IntakeSession) -> bool:
        with self._lock:
            current = self._sessions.get(session.user_id)
            return current is not None and current.session_id == session.session_id

    def sessions(self) -> list[IntakeSession]:
        with self._lock:
            return list(self._sessions.values())
