"""
Session Registry
In-process map of live test sessions keyed by (student, test)
"""
from __future__ import annotations

import threading


class SessionRegistry:
    """Thread-safe holder of at most one live session per (student, test)"""

    def __init__(self) -> None:
        self._sessions: dict = {}
        self._lock = threading.Lock()

    @staticmethod
    def key(student_id, test_id):
        return (student_id, test_id)

    def add(self, session):
        """Register a session, closing any previous one for the same pair"""
        key = self.key(session.student_id, session.test_id)
        with self._lock:
            previous = self._sessions.get(key)
            self._sessions[key] = session
        if previous is not None and previous is not session:
            previous.close()
        return session

    def get(self, student_id, test_id):
        with self._lock:
            return self._sessions.get(self.key(student_id, test_id))

    def discard(self, student_id, test_id):
        """Remove and close a session; returns it or None"""
        with self._lock:
            session = self._sessions.pop(self.key(student_id, test_id), None)
        if session is not None:
            session.close()
        return session

    def release(self, session):
        """Remove ``session`` if it is still the registered one for its pair"""
        key = self.key(session.student_id, session.test_id)
        with self._lock:
            if self._sessions.get(key) is not session:
                return False
            del self._sessions[key]
        session.close()
        return True

    def clear(self):
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()

    def __len__(self):
        with self._lock:
            return len(self._sessions)
