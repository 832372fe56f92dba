import pytest
from engine.core.scheduler import Scheduler

def test_task_fires_after_delay(scheduler):
    fired = []
    scheduler.call_later(0.15, fired.append, "go")

    scheduler.update(0.1)
    assert fired == []

    scheduler.update(0.05)
    assert fired == ["go"]

def test_task_fires_once(scheduler):
    fired = []
    task = scheduler.call_later(0.1, fired.append, 1)

    scheduler.update(0.2)
    scheduler.update(0.2)

    assert fired == [1]
    assert task.fired
    assert not task.pending

def test_cancelled_task_does_not_fire(scheduler):
    fired = []
    task = scheduler.call_later(0.1, fired.append, 1)

    assert task.cancel() is True
    assert task.cancel() is False

    scheduler.update(1.0)
    assert fired == []
    assert task.cancelled

def test_due_order_and_fifo_ties(scheduler):
    order = []
    scheduler.call_later(0.2, order.append, "late")
    scheduler.call_later(0.1, order.append, "a")
    scheduler.call_later(0.1, order.append, "b")

    ran = scheduler.update(0.5)

    assert order == ["a", "b", "late"]
    assert ran == 3

def test_now_advances_with_updates():
    scheduler = Scheduler(start_time=2.0)
    scheduler.update(0.5)
    assert scheduler.now == pytest.approx(2.5)

def test_negative_delay_runs_next_update(scheduler):
    fired = []
    scheduler.call_later(-1.0, fired.append, "x")
    scheduler.update(0.0)
    assert fired == ["x"]

def test_failing_task_is_logged(scheduler, caplog):
    fired = []

    def broken():
        raise RuntimeError("boom")

    scheduler.call_later(0.1, broken, name="broken")
    scheduler.call_later(0.1, fired.append, "after")
    scheduler.update(0.1)

    assert fired == ["after"]
    assert "broken" in caplog.text

def test_pending_and_cancel_all(scheduler):
    scheduler.call_later(0.1, lambda: None)
    scheduler.call_later(0.2, lambda: None)

    assert len(scheduler.pending) == 2
    assert scheduler.cancel_all() == 2
    assert scheduler.pending == []
