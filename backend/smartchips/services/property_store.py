import threading
import time
from typing import Any, Dict, Optional, Tuple


class PropertyStore:
    """In-process key/value store for per-user tokens and pending OAuth states."""

    def __init__(self):
        self._lock = threading.Lock()
        self.store: Dict[str, Tuple[Optional[float], Any]] = {}

    def get(self, key: str):
        with self._lock:
            entry = self.store.get(key)
            if not entry:
                return None
            expires_at, value = entry
            if expires_at is not None and time.time() > expires_at:
                self.store.pop(key, None)
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None):
        now = time.time()
        expires_at = now + ttl_seconds if ttl_seconds is not None else None
        with self._lock:
            self._purge_expired(now)
            self.store[key] = (expires_at, value)

    def delete(self, key: str):
        with self._lock:
            self.store.pop(key, None)

    def _purge_expired(self, now: float):
        expired = [
            key
            for key, (expires_at, _) in self.store.items()
            if expires_at is not None and now > expires_at
        ]
        for key in expired:
            del self.store[key]
