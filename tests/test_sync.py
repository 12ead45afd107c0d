import threading
import time

from planner.data.sync import SyncIndicator, WriteQueue


def test_indicator_counts_nested_usage():
    indicator = SyncIndicator()
    with indicator:
        with indicator:
            assert indicator.active == 2
        assert indicator.is_syncing
    assert not indicator.is_syncing


def test_same_key_runs_in_submission_order():
    queue = WriteQueue(serialize=True, max_workers=4)
    order = []

    def _write(label, delay):
        time.sleep(delay)
        order.append(label)

    queue.submit("2024-03-10", _write, "first", 0.2)
    queue.submit("2024-03-10", _write, "second", 0.0)
    queue.submit("2024-03-10", _write, "third", 0.0)
    assert queue.drain(timeout=5)
    assert order == ["first", "second", "third"]
    queue.shutdown()


def test_different_keys_run_concurrently():
    queue = WriteQueue(serialize=True, max_workers=2)
    started = threading.Event()
    release = threading.Event()
    seen = []

    def _blocker():
        started.set()
        release.wait(timeout=5)

    def _quick():
        seen.append("quick")

    queue.submit("categories", _blocker)
    assert started.wait(timeout=5)
    queue.submit("2024-03-10", _quick)
    deadline = time.monotonic() + 5
    while not seen and time.monotonic() < deadline:
        time.sleep(0.01)
    assert seen == ["quick"]
    release.set()
    assert queue.drain(timeout=5)
    queue.shutdown()


def test_failing_task_is_logged_and_chain_continues(caplog):
    queue = WriteQueue(serialize=True)
    results = []

    def _boom():
        raise RuntimeError("boom")

    queue.submit("k", _boom)
    queue.submit("k", results.append, "after")
    assert queue.drain(timeout=5)
    assert results == ["after"]
    assert "Background task for k failed" in caplog.text
    assert queue.pending == 0
    queue.shutdown()
