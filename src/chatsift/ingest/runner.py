"""Background execution of imports, one live request per logical file.

An interactive import workflow runs the pipeline off its event loop. When the
user re-imports the same file before the previous run finished, the old result
is no longer wanted: a queued run is cancelled and a running one is abandoned,
its eventual result discarded. Pipeline work itself is never interrupted.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Self

from chatsift.exceptions import ImportSupersededError
from chatsift.ingest.pipeline import ImportPipeline

if TYPE_CHECKING:
    from types import TracebackType

    from chatsift.ingest.models import ImportOutcome
    from chatsift.ingest.pipeline import Source

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Request:
    generation: int
    outer: Future[ImportOutcome] = field(default_factory=Future)
    inner: Future[ImportOutcome] | None = None


class ImportRunner:
    """Run ``ImportPipeline.normalize`` on a thread pool, keyed by logical file."""

    def __init__(self, pipeline: ImportPipeline | None = None, *, max_workers: int = 2) -> None:
        self.pipeline = pipeline or ImportPipeline()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="chatsift-import")
        # Cancelling a queued future runs its done callback, which re-enters the lock.
        self._lock = threading.RLock()
        self._active: dict[str, _Request] = {}

    def submit(
        self,
        key: str,
        source: Source,
        filename: str | None = None,
        *,
        split_lines: bool = False,
    ) -> Future[ImportOutcome]:
        """Schedule an import, superseding any unfinished import for ``key``."""
        with self._lock:
            previous = self._active.get(key)
            request = _Request(generation=previous.generation + 1 if previous else 1)
            self._active[key] = request
            if previous is not None:
                self._supersede(key, previous)

        inner = self._executor.submit(self.pipeline.normalize, source, filename, split_lines=split_lines)
        with self._lock:
            request.inner = inner
        inner.add_done_callback(lambda done: self._settle(key, request, done))
        logger.debug("Submitted import %s (generation %d)", key, request.generation)
        return request.outer

    def cancel(self, key: str) -> bool:
        """Abandon the live import for ``key``; returns False if there was none."""
        with self._lock:
            request = self._active.pop(key, None)
            if request is None:
                return False
            self._supersede(key, request)
        return True

    def active_keys(self) -> list[str]:
        with self._lock:
            return list(self._active)

    def shutdown(self, *, wait: bool = True) -> None:
        with self._lock:
            for key, request in list(self._active.items()):
                self._supersede(key, request)
            self._active.clear()
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    @staticmethod
    def _supersede(key: str, request: _Request) -> None:
        # Caller holds the lock.
        if request.inner is not None and request.inner.cancel():
            logger.debug("Cancelled queued import %s (generation %d)", key, request.generation)
        if not request.outer.done():
            request.outer.set_exception(ImportSupersededError(key))
            logger.info("Import %s (generation %d) superseded", key, request.generation)

    def _settle(self, key: str, request: _Request, inner: Future[ImportOutcome]) -> None:
        with self._lock:
            if self._active.get(key) is request:
                del self._active[key]
            if request.outer.done() or inner.cancelled():
                logger.debug("Discarding result of superseded import %s", key)
                return
            exc = inner.exception()
            if exc is not None:
                request.outer.set_exception(exc)
            else:
                request.outer.set_result(inner.result())
