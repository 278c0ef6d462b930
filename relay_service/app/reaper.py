"""Periodic eviction of conversations older than the retention window."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional

from .identifiers import parse_timestamp
from .session_store import SessionStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class ExpiryReaper:
    """Evicts sessions by the creation time embedded in their identifier.

    Age is measured from creation, not last use. Identifiers that do not carry
    a timestamp (caller-supplied ones) are never evicted.
    """

    def __init__(
        self,
        store: SessionStore,
        ttl_seconds: float = 3600,
        interval_seconds: float = 3600,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._store = store
        self._ttl_ms = int(ttl_seconds * 1000)
        self._interval = interval_seconds
        self._clock = clock or _now_ms
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep(self, now_ms: Optional[int] = None) -> List[str]:
        now_ms = self._clock() if now_ms is None else now_ms
        cutoff = now_ms - self._ttl_ms
        evicted = []
        for session_id in self._store.all_identifiers():
            created = parse_timestamp(session_id)
            if created is None:
                continue
            if created < cutoff and self._store.delete(session_id):
                evicted.append(session_id)
        if evicted:
            logger.info("Evicted %d expired conversation(s)", len(evicted))
        return evicted

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.sweep()
            except Exception:  # noqa: BLE001
                logger.exception("Conversation sweep failed")

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
