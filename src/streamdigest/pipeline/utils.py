"""Thread and queue helpers shared by the stream's producer and sink worker."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable

from .base import StreamStage

log = logging.getLogger(__name__)


def drain_queue(q: queue.Queue) -> int:
    """
    Discard everything waiting in ``q`` so a blocked ``put()`` can proceed.

    :returns: Number of discarded items
    """
    discarded = 0
    while True:
        try:
            q.get_nowait()
        except queue.Empty:
            return discarded
        discarded += 1


def join_worker(thread: threading.Thread, timeout: float, logger: logging.Logger | None = None) -> bool:
    """
    Join a worker thread, warning if it is still running after ``timeout`` seconds.

    :returns: True if the thread finished
    """
    thread.join(timeout=timeout)
    if thread.is_alive():
        (logger or log).warning(f"Worker {thread.name} still running after {timeout}s")
        return False
    return True


def abort_stage(stage: StreamStage | None, logger: logging.Logger | None = None) -> None:
    """Abort ``stage`` after a failure. Errors while aborting are only logged."""
    if stage is None:
        return
    try:
        stage.abort()
    except Exception as e:
        (logger or log).debug(f"Ignoring error while aborting {stage.name}: {e}")


def create_worker_thread(target: Callable[[], None], name: str) -> threading.Thread:
    """Start ``target`` in a named daemon thread and return the thread."""
    thread = threading.Thread(target=target, name=name, daemon=True)
    thread.start()
    return thread
