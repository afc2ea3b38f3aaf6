"""
Activity recording.

Every request under the API prefix (except health checks and the login
endpoint) produces an activity entry: who made it, which method and
path, the status code, user agent, client address and duration.

Entries are written by an ``AuditRecorder`` running as a single
background task.  The middleware only enqueues the entry once the
handler has produced its response and never waits for the write.
Because there is one consumer, writes to the log are serialised and
the cap of the ``AuditStore`` always holds.  A failing write is logged and dropped; it
is never reported to the client.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, Iterable, Optional

from fastapi import FastAPI, Request

from ..stores.audit import AuditStore

logger = logging.getLogger(__name__)

DEFAULT_SKIP_SUFFIXES = ("/health", "/auth/login")


class AuditRecorder:
    """Queue-backed writer of activity entries."""

    def __init__(self, store: AuditStore, max_pending: int = 1000) -> None:
        self.store = store
        self.max_pending = max_pending
        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None
        self.dropped = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the worker on the running event loop."""
        if self.running:
            return
        self._queue = asyncio.Queue(maxsize=self.max_pending)
        evicted = await self.store.enforce_cap()
        if evicted:
            logger.info("Trimmed %d old activity entries", evicted)
        self._task = asyncio.create_task(self._run(), name="activity-recorder")

    async def submit(self, entry: Dict[str, Any]) -> None:
        """Queue ``entry`` for writing.  Never blocks and never raises."""
        if self._queue is None or not self.running:
            logger.warning("Activity recorder not running; dropping entry for %s", entry.get("action"))
            self.dropped += 1
            return
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning("Activity queue full; dropping entry for %s", entry.get("action"))

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            entry = await self._queue.get()
            try:
                await self.store.record(entry)
            except Exception:
                logger.exception("Failed to log activity %s", entry.get("action"))
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every queued entry has been handled."""
        if self._queue is not None and self.running:
            await self._queue.join()

    async def stop(self, timeout: float = 5.0) -> None:
        """Drain pending entries (bounded by ``timeout``) and stop the worker."""
        if self._task is None:
            return
        try:
            await asyncio.wait_for(self.join(), timeout)
        except asyncio.TimeoutError:
            logger.warning("Activity recorder stopped with %d pending entries", self._queue.qsize())
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None


def build_entry(request: Request, status_code: int, duration_ms: int) -> Dict[str, Any]:
    method = request.method
    path = request.url.path
    return {
        "userId": getattr(request.state, "user_id", None),
        "action": f"{method} {path}",
        "method": method,
        "endpoint": path,
        "statusCode": status_code,
        "userAgent": request.headers.get("user-agent"),
        "ip": request.client.host if request.client else None,
        "duration": f"{duration_ms}ms",
    }


def install_activity_logger(
    app: FastAPI,
    prefix: str,
    skip_suffixes: Iterable[str] = DEFAULT_SKIP_SUFFIXES,
) -> None:
    """Register the middleware that feeds ``app.state.recorder``."""
    skip_paths = {prefix + suffix for suffix in skip_suffixes}

    @app.middleware("http")
    async def activity_logger(request: Request, call_next):
        path = request.url.path
        if not path.startswith(prefix) or path.rstrip("/") in skip_paths:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)

        recorder: Optional[AuditRecorder] = getattr(request.app.state, "recorder", None)
        if recorder is not None:
            entry = build_entry(request, response.status_code, duration_ms)
            await recorder.submit(entry)
        return response
