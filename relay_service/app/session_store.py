"""In-memory conversation store with a sliding turn window."""
from __future__ import annotations

from threading import RLock
from typing import Dict, Iterator, List

from .schemas import Turn

DEFAULT_MAX_TURNS = 20


class SessionStore:
    """Thread-safe in-memory store for conversation turns.

    One store is built per application and handed to the request handlers and
    the expiry reaper. Absence is never an error: unknown identifiers read as
    an empty history.
    """

    def __init__(self, max_turns: int = DEFAULT_MAX_TURNS) -> None:
        if max_turns < 1:
            raise ValueError("max_turns must be positive")
        self._sessions: Dict[str, List[Turn]] = {}
        self._max_turns = max_turns
        self._lock = RLock()

    def get(self, session_id: str) -> List[Turn]:
        with self._lock:
            return list(self._sessions.get(session_id, []))

    def append(self, session_id: str, turn: Turn) -> List[Turn]:
        """Append ``turn``, creating the session if needed, and return the history."""
        with self._lock:
            history = self._sessions.setdefault(session_id, [])
            history.append(turn)
            if len(history) > self._max_turns:
                # oldest first
                del history[: len(history) - self._max_turns]
            return list(history)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def size(self) -> int:
        with self._lock:
            return len(self._sessions)

    def all_identifiers(self) -> Iterator[str]:
        # Iterates a snapshot so callers may delete while walking.
        with self._lock:
            snapshot = list(self._sessions)
        yield from snapshot
