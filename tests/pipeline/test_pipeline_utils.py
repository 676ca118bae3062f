import logging
import queue
import threading

from streamdigest.pipeline import BufferSink
from streamdigest.pipeline.utils import abort_stage, create_worker_thread, drain_queue, join_worker


class FailingAbortSink(BufferSink):
    def abort(self) -> None:
        raise OSError("already gone")


def test_drain_queue_unblocks_producer():
    q: queue.Queue[int] = queue.Queue(maxsize=2)
    q.put(1)
    q.put(2)

    assert drain_queue(q) == 2
    q.put_nowait(3)
    assert drain_queue(q) == 1
    assert drain_queue(q) == 0


def test_abort_stage_logs_errors(caplog):
    caplog.set_level(logging.DEBUG)
    sink = BufferSink()
    abort_stage(sink)
    assert sink.aborted

    abort_stage(FailingAbortSink("Failing"))
    assert "Ignoring error while aborting Failing: already gone" in caplog.text

    abort_stage(None)


def test_join_worker(caplog):
    release = threading.Event()
    thread = create_worker_thread(lambda: release.wait(timeout=10), name="waiting-worker")

    assert thread.daemon
    assert not join_worker(thread, timeout=0.01)
    assert "waiting-worker still running" in caplog.text

    release.set()
    assert join_worker(thread, timeout=5)
