"""Last-request-wins guard for collection fetches.

Every fetch of a collection takes a token; only a response whose token is still
the newest for that collection may be applied. Older responses that arrive late
are dropped so they never overwrite fresher data.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FetchToken:
    collection: str
    sequence: int


class FetchSequencer:
    def __init__(self) -> None:
        self._latest: Dict[str, int] = {}
        self._lock = threading.Lock()

    def begin(self, collection: str) -> FetchToken:
        with self._lock:
            sequence = self._latest.get(collection, 0) + 1
            self._latest[collection] = sequence
        return FetchToken(collection=collection, sequence=sequence)

    def is_current(self, token: FetchToken) -> bool:
        with self._lock:
            return self._latest.get(token.collection) == token.sequence

    def apply(self, token: FetchToken, result: T, sink: Callable[[T], None]) -> bool:
        """Hand ``result`` to ``sink`` if ``token`` is still current; report whether it was."""
        if not self.is_current(token):
            logger.info(
                "stale fetch dropped",
                extra={"collection": token.collection, "sequence": token.sequence},
            )
            return False
        sink(result)
        return True

    def latest(self, collection: str) -> Optional[int]:
        with self._lock:
            return self._latest.get(collection)
