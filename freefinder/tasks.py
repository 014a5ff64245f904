"""Background execution of I/O work with results applied by the owner.

Work runs off the owning thread; its completion callback does not. The owner
calls ``drain_results`` from its idle loop, and completions run there in the
order they finished.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Any, Protocol

logger = logging.getLogger(__name__)

Completion = Callable[[Any, BaseException | None], None]


@dataclass(frozen=True)
class TaskResult:
    """One finished unit of work waiting to be applied by the owner."""

    task_id: int
    value: Any
    error: BaseException | None
    apply: Completion


class TaskRunner(Protocol):
    def submit(self, work: Callable[[], Any], apply: Completion) -> int: ...

    def drain_results(self) -> int: ...

    def shutdown(self) -> None: ...


class _TaskIds:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next_id = 1

    def next(self) -> int:
        with self._lock:
            task_id = self._next_id
            self._next_id += 1
            return task_id


def _apply_all(results: Queue[TaskResult]) -> int:
    applied = 0
    while True:
        try:
            result = results.get_nowait()
        except Empty:
            break
        result.apply(result.value, result.error)
        applied += 1
    return applied


class BackgroundTaskRunner:
    """Thread-pool runner; completions are queued for ``drain_results``."""

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="freefinder-io")
        self._results: Queue[TaskResult] = Queue()
        self._ids = _TaskIds()
        self._closed = False

    def submit(self, work: Callable[[], Any], apply: Completion) -> int:
        task_id = self._ids.next()
        if self._closed:
            return task_id

        def on_done(future: Future) -> None:
            if future.cancelled():
                return
            error = future.exception()
            value = None if error is not None else future.result()
            self._results.put(TaskResult(task_id, value, error, apply))

        future = self._executor.submit(work)
        future.add_done_callback(on_done)
        return task_id

    def drain_results(self) -> int:
        """Apply every completed task; return how many were applied."""
        return _apply_all(self._results)

    def shutdown(self) -> None:
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)


class InlineTaskRunner:
    """Runs work at submit time but still defers applying it to ``drain_results``.

    Used by the one-shot CLI and by tests: results never land before the
    owner asks for them, which keeps the asynchronous ordering observable.
    """

    def __init__(self) -> None:
        self._results: Queue[TaskResult] = Queue()
        self._ids = _TaskIds()

    def submit(self, work: Callable[[], Any], apply: Completion) -> int:
        task_id = self._ids.next()
        try:
            value = work()
        except Exception as exc:
            logger.debug("inline task %d failed", task_id, exc_info=True)
            self._results.put(TaskResult(task_id, None, exc, apply))
        else:
            self._results.put(TaskResult(task_id, value, None, apply))
        return task_id

    def drain_results(self) -> int:
        return _apply_all(self._results)

    def shutdown(self) -> None:
        self._results = Queue()


__all__ = [
    "TaskResult",
    "TaskRunner",
    "BackgroundTaskRunner",
    "InlineTaskRunner",
]
