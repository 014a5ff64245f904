"""Tests for background and inline task runners."""

from __future__ import annotations

import threading
import time
import unittest

from freefinder.tasks import BackgroundTaskRunner, InlineTaskRunner


class InlineTaskRunnerTests(unittest.TestCase):
    def test_results_are_applied_only_when_drained(self) -> None:
        runner = InlineTaskRunner()
        applied: list[tuple[object, object]] = []

        runner.submit(lambda: 41 + 1, lambda value, error: applied.append((value, error)))

        self.assertEqual(applied, [])
        self.assertEqual(runner.drain_results(), 1)
        self.assertEqual(applied, [(42, None)])
        self.assertEqual(runner.drain_results(), 0)

    def test_failures_are_delivered_to_apply(self) -> None:
        runner = InlineTaskRunner()
        errors: list[BaseException | None] = []

        def work() -> None:
            raise OSError("boom")

        runner.submit(work, lambda value, error: errors.append(error))
        runner.drain_results()

        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], OSError)

    def test_follow_up_work_submitted_while_draining_is_applied_in_same_drain(self) -> None:
        runner = InlineTaskRunner()
        order: list[str] = []

        def first(value, error) -> None:
            order.append("first")
            runner.submit(lambda: None, lambda value, error: order.append("second"))

        runner.submit(lambda: None, first)

        self.assertEqual(runner.drain_results(), 2)
        self.assertEqual(order, ["first", "second"])

    def test_shutdown_discards_pending_results(self) -> None:
        runner = InlineTaskRunner()
        applied: list[object] = []
        runner.submit(lambda: 1, lambda value, error: applied.append(value))
        runner.shutdown()
        self.assertEqual(runner.drain_results(), 0)
        self.assertEqual(applied, [])


class BackgroundTaskRunnerTests(unittest.TestCase):
    def test_work_runs_off_thread_and_applies_on_drain(self) -> None:
        runner = BackgroundTaskRunner(max_workers=2)
        self.addCleanup(runner.shutdown)
        owner = threading.get_ident()
        worker_threads: list[int] = []
        applied_threads: list[int] = []

        def work() -> str:
            worker_threads.append(threading.get_ident())
            return "done"

        runner.submit(work, lambda value, error: applied_threads.append(threading.get_ident()))

        deadline = time.monotonic() + 5.0
        while not applied_threads and time.monotonic() < deadline:
            runner.drain_results()
            time.sleep(0.01)

        self.assertEqual(applied_threads, [owner])
        self.assertNotEqual(worker_threads, [owner])

    def test_submit_after_shutdown_never_applies(self) -> None:
        runner = BackgroundTaskRunner(max_workers=1)
        runner.shutdown()
        applied: list[object] = []
        runner.submit(lambda: 1, lambda value, error: applied.append(value))
        time.sleep(0.05)
        runner.drain_results()
        self.assertEqual(applied, [])


if __name__ == "__main__":
    unittest.main()
