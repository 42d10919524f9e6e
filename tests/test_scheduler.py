"""
Unit Tests for the Interval Trigger.

Test Coverage:
    - Callback fires once per elapsed interval
    - cancel() stops the thread and is idempotent
    - Callback exceptions do not kill the trigger
    - Intervals beyond the thread wait limit do not kill the trigger
    - Invalid intervals are rejected
"""
import threading
from unittest.mock import patch

import pytest

from polling.scheduler import IntervalTrigger


def _virtual_wait(limit):
    """Build a replacement for _wait that advances a virtual clock."""
    clock = {"now": 0.0}

    def fake_wait(trigger, timeout):
        if trigger._stop_event.is_set():
            return True
        clock["now"] += timeout
        return clock["now"] > limit

    return fake_wait


def test_fires_once_per_interval():
    """Test that five virtual minutes at a one minute interval fire five times."""
    calls = []
    trigger = IntervalTrigger(60, lambda: calls.append(1))

    with patch.object(IntervalTrigger, "_wait", _virtual_wait(5 * 60)):
        trigger.start()
        trigger._thread.join(timeout=2)

    assert len(calls) == 5


def test_callback_errors_do_not_stop_trigger():
    """Test that an exception in one firing does not end the loop."""
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("first firing fails")

    trigger = IntervalTrigger(60, flaky)

    with patch.object(IntervalTrigger, "_wait", _virtual_wait(3 * 60)):
        trigger.start()
        trigger._thread.join(timeout=2)

    assert len(calls) == 3


def test_cancel_stops_thread():
    """Test that cancel() wakes the waiting thread and ends it."""
    fired = threading.Event()
    trigger = IntervalTrigger(3600, fired.set)

    trigger.start()
    assert trigger.is_active
    trigger.cancel()
    trigger._thread.join(timeout=2)

    assert not trigger._thread.is_alive()
    assert not fired.is_set()
    assert not trigger.is_active


def test_cancel_is_idempotent():
    """Test that cancelling twice, or before start, is harmless."""
    trigger = IntervalTrigger(60, lambda: None)
    trigger.cancel()
    trigger.cancel()
    assert not trigger.is_active


@pytest.mark.parametrize("interval", [0, -1])
def test_invalid_interval(interval):
    """Test that non-positive intervals are rejected."""
    with pytest.raises(ValueError):
        IntervalTrigger(interval, lambda: None)


def test_interval_beyond_wait_limit_keeps_thread_alive():
    """Test that an interval longer than a thread wait allows does not kill the trigger."""
    trigger = IntervalTrigger(threading.TIMEOUT_MAX * 2, lambda: None)

    trigger.start()
    try:
        trigger._thread.join(timeout=0.2)
        assert trigger._thread.is_alive()
    finally:
        trigger.cancel()
        trigger._thread.join(timeout=2)

    assert not trigger._thread.is_alive()
