"""
Background re-embedding of changed companies.

Company create/update/delete handlers publish a ``CompanyEvent`` and
return immediately. ``EmbeddingWorker`` drains the events on a single
daemon thread, in publish order, and runs the matching orchestrator
operation:

    - ``UPSERTED`` -> ``SearchOrchestrator.embed_single``
    - ``DELETED``  -> ``SearchOrchestrator.remove_embedding``

Each publish returns a ``concurrent.futures.Future`` that callers may
wait on (tests, CLI) or ignore (HTTP handlers). A failing event completes
its future exceptionally and is logged; the worker keeps running.

No Redis, no Celery: the queue is an in-process ``queue.Queue``.
"""

from __future__ import annotations

import queue
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum

from connectq.core import ConnectQError, EmbedResult, get_logger
from connectq.search import SearchOrchestrator

logger = get_logger(__name__)


class CompanyEventType(str, Enum):
    """Kind of change made to a company row."""

    UPSERTED = "upserted"
    DELETED = "deleted"


@dataclass(frozen=True)
class CompanyEvent:
    """A committed change to one company."""

    type: CompanyEventType
    company_id: str


class EmbeddingWorker:
    """
    Single-threaded FIFO executor for company events.

    Usage::

        worker = EmbeddingWorker(orchestrator)
        worker.start()
        future = worker.publish(CompanyEvent(CompanyEventType.UPSERTED, company_id))
        result = future.result(timeout=30)   # optional
        worker.stop()
    """

    def __init__(self, orchestrator: SearchOrchestrator) -> None:
        self._orchestrator = orchestrator
        self._queue: queue.Queue[tuple[CompanyEvent, Future] | None] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def pending(self) -> int:
        """Approximate number of events waiting to be processed."""
        return self._queue.qsize()

    def start(self) -> None:
        """Start the worker thread. Calling start twice is a no-op."""
        with self._lock:
            if self.is_running:
                return
            self._thread = threading.Thread(
                target=self._run,
                name="embedding-worker",
                daemon=True,
            )
            self._thread.start()
        logger.info("Embedding worker started")

    def stop(self, timeout: float | None = 10.0) -> None:
        """
        Stop after draining events already queued.

        Events published after ``stop`` are rejected.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._queue.put(None)
            self._thread = None

        thread.join(timeout)
        if thread.is_alive():
            logger.warning("Embedding worker did not stop within %.1fs", timeout or 0)
        else:
            logger.info("Embedding worker stopped")

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    def publish(self, event: CompanyEvent) -> Future[EmbedResult]:
        """
        Queue an event for background processing.

        Returns:
            A future resolved with the operation's ``EmbedResult``. When
            the worker is not running the future is already failed with
            ``ConnectQError`` and nothing is queued.
        """
        future: Future[EmbedResult] = Future()
        if not self.is_running:
            logger.warning(
                "Embedding worker not running; dropping %s event for %s",
                event.type.value,
                event.company_id,
            )
            future.set_exception(
                ConnectQError(
                    "Embedding worker is not running",
                    details=f"{event.type.value} {event.company_id}",
                )
            )
            return future

        self._queue.put((event, future))
        logger.debug("Queued %s event for company %s", event.type.value, event.company_id)
        return future

    # ------------------------------------------------------------------
    # Worker thread
    # ------------------------------------------------------------------

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                event, future = item
                if not future.set_running_or_notify_cancel():
                    continue
                try:
                    result = self._handle(event)
                except Exception as e:
                    logger.error(
                        "Background %s for company %s failed: %s",
                        event.type.value,
                        event.company_id,
                        e,
                    )
                    future.set_exception(e)
                else:
                    if not result.success:
                        logger.error(
                            "Background %s for company %s failed: %s",
                            event.type.value,
                            event.company_id,
                            result.message,
                        )
                    future.set_result(result)
            finally:
                self._queue.task_done()

    def _handle(self, event: CompanyEvent) -> EmbedResult:
        if event.type is CompanyEventType.UPSERTED:
            return self._orchestrator.embed_single(event.company_id)
        return self._orchestrator.remove_embedding(event.company_id)
