import time
from typing import Callable, Dict, Optional, Tuple

class ResultMemo:
    """
    In-memory map of resolved locator -> rendered PDF bytes.
    Each entry expires a fixed `ttl` seconds after it was stored; reads do not
    extend it. Expired entries are dropped when read and swept on every set().
    Unbounded apart from expiry.
    """
    def __init__(self, ttl: float = 300.0, clock: Callable[[], float] = time.monotonic):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = float(ttl)
        self._clock = clock
        self._entries: Dict[str, Tuple[float, bytes]] = {}

    def get(self, key: str) -> Optional[bytes]:
        ent = self._entries.get(key)
        if ent is None:
            return None
        expires_at, data = ent
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return data

    def set(self, key: str, data: bytes) -> None:
        # every store sweeps dead entries so keys that are never read again don't pile up
        self.purge_expired()
        # last write wins for concurrent misses on the same key
        self._entries[key] = (self._clock() + self.ttl, bytes(data))

    def purge_expired(self) -> int:
        now = self._clock()
        dead = [k for k, (exp, _) in self._entries.items() if now >= exp]
        for k in dead:
            del self._entries[k]
        return len(dead)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        self.purge_expired()
        return len(self._entries)
