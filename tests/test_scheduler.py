from __future__ import annotations

import threading
import time
import unittest

from freewrite.config import AutosaveConfig
from freewrite.document import DocumentModel
from freewrite.scheduler import ManualScheduler, ThreadScheduler
from freewrite.store import DOCUMENT_CONTENT_KEY, MemoryStore


class ManualSchedulerTests(unittest.TestCase):
    def test_runs_due_callbacks_in_order(self) -> None:
        scheduler = ManualScheduler()
        calls: list[str] = []
        scheduler.call_later(2.0, lambda: calls.append("late"))
        scheduler.call_later(1.0, lambda: calls.append("early"))
        scheduler.call_later(1.0, lambda: calls.append("early-second"))

        scheduler.advance(1.0)
        self.assertEqual(calls, ["early", "early-second"])
        scheduler.advance(1.0)
        self.assertEqual(calls, ["early", "early-second", "late"])
        self.assertEqual(scheduler.now, 2.0)

    def test_cancelled_task_never_runs(self) -> None:
        scheduler = ManualScheduler()
        calls: list[int] = []
        task = scheduler.call_later(1.0, lambda: calls.append(1))
        task.cancel()
        self.assertTrue(task.cancelled)
        self.assertEqual(scheduler.pending, 0)
        scheduler.advance(5.0)
        self.assertEqual(calls, [])
        self.assertFalse(task.fired)

    def test_callbacks_scheduled_while_advancing(self) -> None:
        scheduler = ManualScheduler()
        calls: list[float] = []

        def _first() -> None:
            calls.append(scheduler.now)
            scheduler.call_later(0.5, lambda: calls.append(scheduler.now))

        scheduler.call_later(1.0, _first)
        scheduler.advance(2.0)
        self.assertEqual(calls, [1.0, 1.5])


class ThreadSchedulerTests(unittest.TestCase):
    def test_runs_callback_on_timer_thread(self) -> None:
        fired = threading.Event()
        ThreadScheduler().call_later(0.01, fired.set)
        self.assertTrue(fired.wait(2.0))

    def test_cancel_before_firing(self) -> None:
        fired = threading.Event()
        task = ThreadScheduler().call_later(0.2, fired.set)
        task.cancel()
        self.assertTrue(task.cancelled)
        self.assertFalse(fired.wait(0.4))

    def test_document_autosaves_with_threads(self) -> None:
        store = MemoryStore()
        document = DocumentModel(
            store,
            scheduler=ThreadScheduler(),
            config=AutosaveConfig(autosave_delay_seconds=0.05, saving_indicator_seconds=0.05),
        )
        document.set_content("a")
        document.set_content("ab")

        deadline = time.monotonic() + 3.0
        while time.monotonic() < deadline:
            if store.writes and not document.is_saving:
                break
            time.sleep(0.01)

        self.assertEqual(store.writes, [(DOCUMENT_CONTENT_KEY, "ab")])
        self.assertFalse(document.is_saving)


if __name__ == "__main__":
    unittest.main()
