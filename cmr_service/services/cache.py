"""
cache.py

Result cache keyed by a hash of the uploaded bytes.

Analyzing the same document twice costs a second provider call, so
finished DocumentRecords are kept for a while (30 minutes by default).

The cache is an object passed into the analysis service, not a
module-level dict. Anything with get() / set() can replace the
in-memory version (for example a Redis-backed one).

Two requests for the same new document may both miss and both call
the provider. That is accepted; requests are not serialized per key.
"""

import hashlib
import logging
import threading
import time
from typing import Callable, Dict, Optional, Protocol, Tuple

from cmr_service.schemas.document import DocumentRecord

logger = logging.getLogger(__name__)


def content_key(namespace: str, data: bytes) -> str:
    """Cache key for a document: "<namespace>:<sha256 hex>"."""
    return f"{namespace}:{hashlib.sha256(data).hexdigest()}"


class ResultCache(Protocol):
    def get(self, key: str) -> Optional[DocumentRecord]:
        ...

    def set(self, key: str, value: DocumentRecord) -> None:
        ...


class InMemoryResultCache:
    """
    Thread-safe in-process cache with a time-to-live.

    Entries are never changed after they are written. Expired entries
    are dropped when they are read. ttl_seconds <= 0 keeps entries
    forever.
    """

    def __init__(
        self,
        ttl_seconds: float = 30 * 60,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, DocumentRecord]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[DocumentRecord]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            stored_at, value = entry
            if self.ttl_seconds > 0 and self._clock() - stored_at > self.ttl_seconds:
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None

            return value

    def set(self, key: str, value: DocumentRecord) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
