"""
Tests for the background EmbeddingWorker.

A real worker thread is used with a MagicMock orchestrator, so event
routing, FIFO order, and future completion are exercised as in the
running API. Every test stops its worker.
"""

import threading
from unittest.mock import MagicMock

import pytest

from connectq.api.tasks import CompanyEvent, CompanyEventType, EmbeddingWorker
from connectq.core.exceptions import ConnectQError, NotFoundError
from connectq.core.types import EmbedResult

_TIMEOUT = 5


@pytest.fixture
def orchestrator():
    mock = MagicMock()
    mock.embed_single.return_value = EmbedResult(success=True, message="embedded", count=1)
    mock.remove_embedding.return_value = EmbedResult(success=True, message="removed", count=1)
    return mock


@pytest.fixture
def worker(orchestrator):
    w = EmbeddingWorker(orchestrator)
    w.start()
    yield w
    w.stop()


def _upserted(company_id):
    return CompanyEvent(CompanyEventType.UPSERTED, company_id)


def _deleted(company_id):
    return CompanyEvent(CompanyEventType.DELETED, company_id)


class TestLifecycle:
    def test_start_and_stop(self, orchestrator):
        w = EmbeddingWorker(orchestrator)
        assert w.is_running is False
        w.start()
        assert w.is_running is True
        w.stop()
        assert w.is_running is False

    def test_start_twice_is_noop(self, worker):
        thread = worker._thread
        worker.start()
        assert worker._thread is thread

    def test_stop_without_start(self, orchestrator):
        EmbeddingWorker(orchestrator).stop()

    def test_stop_drains_queued_events(self, orchestrator):
        w = EmbeddingWorker(orchestrator)
        w.start()
        futures = [w.publish(_upserted(f"c{i}")) for i in range(5)]
        w.stop()
        assert all(f.done() for f in futures)
        assert orchestrator.embed_single.call_count == 5


class TestPublish:
    """publish() routes events and resolves the returned future."""

    def test_upsert_calls_embed_single(self, worker, orchestrator):
        result = worker.publish(_upserted("c1")).result(timeout=_TIMEOUT)
        assert result.message == "embedded"
        orchestrator.embed_single.assert_called_once_with("c1")

    def test_delete_calls_remove_embedding(self, worker, orchestrator):
        result = worker.publish(_deleted("c1")).result(timeout=_TIMEOUT)
        assert result.message == "removed"
        orchestrator.remove_embedding.assert_called_once_with("c1")
        orchestrator.embed_single.assert_not_called()

    def test_unsuccessful_result_is_returned(self, worker, orchestrator):
        orchestrator.embed_single.return_value = EmbedResult(success=False, message="quota")
        result = worker.publish(_upserted("c1")).result(timeout=_TIMEOUT)
        assert result.success is False

    def test_exception_fails_future_and_worker_survives(self, worker, orchestrator):
        orchestrator.embed_single.side_effect = [NotFoundError("company", "gone"), EmbedResult(True, "ok", 1)]

        with pytest.raises(NotFoundError):
            worker.publish(_upserted("gone")).result(timeout=_TIMEOUT)

        assert worker.publish(_upserted("c2")).result(timeout=_TIMEOUT).message == "ok"
        assert worker.is_running is True

    def test_events_processed_in_publish_order(self, worker, orchestrator):
        seen = []
        lock = threading.Lock()

        def record(company_id):
            with lock:
                seen.append(("upsert", company_id))
            return EmbedResult(True, "ok", 1)

        def record_delete(company_id):
            with lock:
                seen.append(("delete", company_id))
            return EmbedResult(True, "ok", 1)

        orchestrator.embed_single.side_effect = record
        orchestrator.remove_embedding.side_effect = record_delete

        futures = [
            worker.publish(_upserted("a")),
            worker.publish(_upserted("b")),
            worker.publish(_deleted("a")),
            worker.publish(_upserted("c")),
        ]
        for f in futures:
            f.result(timeout=_TIMEOUT)

        assert seen == [("upsert", "a"), ("upsert", "b"), ("delete", "a"), ("upsert", "c")]

    def test_stopped_worker_rejects(self, orchestrator):
        w = EmbeddingWorker(orchestrator)
        future = w.publish(_upserted("c1"))
        assert future.done()
        with pytest.raises(ConnectQError, match="not running"):
            future.result()
        orchestrator.embed_single.assert_not_called()
