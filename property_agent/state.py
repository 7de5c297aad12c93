"""Per-session memory of the last concrete search, used to answer follow-ups."""
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from .config import DEFAULT_SESSION_ID, STATE_MAX_SESSIONS, STATE_TTL_SECONDS
from .models import SearchFilter


class ConversationStateStore:
    """Maps session id -> last non-empty SearchFilter, with TTL and an LRU bound.

    Entries are copied on the way in and out, so callers can't mutate stored state.
    """

    def __init__(
        self,
        ttl_seconds: float = STATE_TTL_SECONDS,
        max_sessions: int = STATE_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, SearchFilter]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: Optional[str] = None) -> Optional[SearchFilter]:
        key = session_id or DEFAULT_SESSION_ID
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, filters = entry
            if self._clock() - stored_at > self.ttl_seconds:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return filters.copy()

    def remember(self, filters: SearchFilter, session_id: Optional[str] = None) -> bool:
        """Store filters if they carry at least one concrete criterion. Returns True if stored."""
        if not filters.has_criteria():
            return False
        key = session_id or DEFAULT_SESSION_ID
        with self._lock:
            self._entries[key] = (self._clock(), filters.copy())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_sessions:
                self._entries.popitem(last=False)
        return True

    def forget(self, session_id: Optional[str] = None) -> None:
        with self._lock:
            self._entries.pop(session_id or DEFAULT_SESSION_ID, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
