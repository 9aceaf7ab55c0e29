# common/logger/persistence.py
"""
Non-blocking log persistence with pluggable backends.

Log calls only enqueue; a daemon thread drains the queue in small batches
and hands each entry to every active backend (see LOG_BACKENDS).
"""

import queue
import sys
import threading
import time
from typing import Any, Dict, List, Optional
from .log_backends import get_active_backends

_MAX_QUEUE = 10_000
_MAX_BATCH = 100


class LogPersistenceHandler:
    """
    Single queue + worker thread shared by every persisting logger.
    """

    _instance: Optional["LogPersistenceHandler"] = None
    _lock = threading.Lock()
    _initialized: bool

    def __new__(cls) -> "LogPersistenceHandler":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._initialized = False
                    cls._instance = instance
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        self._queue: "queue.Queue[Dict[str, Any]]" = queue.Queue(maxsize=_MAX_QUEUE)
        self._shutdown_event = threading.Event()
        self._worker_thread: Optional[threading.Thread] = None

        self._total_logs = 0
        self._failed_logs = 0
        self._total_write_time = 0.0

        self._initialized = True
        self._start_worker()

    def _start_worker(self) -> None:
        if self._worker_thread is not None and self._worker_thread.is_alive():
            return

        self._worker_thread = threading.Thread(
            target=self._process_queue,
            daemon=True,
            name="LogPersistenceWorker",
        )
        self._worker_thread.start()

    def _next_batch(self) -> List[Dict[str, Any]]:
        batch = [self._queue.get(timeout=0.5)]
        while len(batch) < _MAX_BATCH:
            try:
                batch.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return batch

    def _process_queue(self) -> None:
        while not self._shutdown_event.is_set():
            try:
                batch = self._next_batch()
            except queue.Empty:
                continue

            try:
                self._write_batch(batch)
            except Exception as e:
                print(f"LogPersistenceWorker error: {e}", file=sys.stderr)
                self._failed_logs += len(batch)
            finally:
                for _ in batch:
                    self._queue.task_done()

    def _write_batch(self, batch: List[Dict[str, Any]]) -> None:
        start_time = time.perf_counter()
        try:
            for backend in get_active_backends():
                for entry in batch:
                    try:
                        backend.write(entry)
                    except Exception as e:
                        print(
                            f"Backend '{backend.name}' write failed: {e}",
                            file=sys.stderr,
                        )
            self._total_logs += len(batch)
        finally:
            self._total_write_time += time.perf_counter() - start_time

    def enqueue_log(self, log_entry: Dict[str, Any]) -> bool:
        """
        Queue an entry without blocking.

        Returns:
            False when the queue is full and the entry was dropped.
        """
        try:
            self._queue.put_nowait(log_entry)
            return True
        except queue.Full:
            print("Log queue full, dropping log entry", file=sys.stderr)
            self._failed_logs += 1
            return False

    def get_metrics(self) -> Dict[str, Any]:
        avg_write_time = (
            self._total_write_time / self._total_logs if self._total_logs > 0 else 0
        )
        return {
            "total_logs": self._total_logs,
            "failed_logs": self._failed_logs,
            "queue_size": self._queue.qsize(),
            "avg_write_time_ms": avg_write_time * 1000,
            "worker_alive": (
                self._worker_thread.is_alive() if self._worker_thread else False
            ),
        }

    def shutdown(self, timeout: float = 5.0) -> None:
        """Drain the queue, then stop the worker."""
        self._queue.join()
        self._shutdown_event.set()
        if self._worker_thread and self._worker_thread.is_alive():
            self._worker_thread.join(timeout=timeout)


_persistence_handler = LogPersistenceHandler()


def persist_log(log_entry: Dict[str, Any]) -> bool:
    """Enqueue an entry for every active backend (non-blocking)."""
    return _persistence_handler.enqueue_log(log_entry)


def get_persistence_metrics() -> Dict[str, Any]:
    return _persistence_handler.get_metrics()


def shutdown_persistence(timeout: float = 5.0) -> None:
    _persistence_handler.shutdown(timeout)


__all__ = [
    "persist_log",
    "get_persistence_metrics",
    "shutdown_persistence",
    "LogPersistenceHandler",
]
