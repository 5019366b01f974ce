import threading

from src.core.clock import SystemClock, ThreadingScheduler


def test_system_clock_moves_forward() -> None:
    clock = SystemClock()
    assert clock.now() <= clock.now()


def test_threading_scheduler_runs_callback() -> None:
    fired = threading.Event()
    ThreadingScheduler().call_later(0.01, fired.set)
    assert fired.wait(timeout=2)


def test_threading_scheduler_survives_failing_callback() -> None:
    fired = threading.Event()

    def boom() -> None:
        raise RuntimeError("boom")

    scheduler = ThreadingScheduler()
    scheduler.call_later(0.01, boom)
    scheduler.call_later(0.02, fired.set)
    assert fired.wait(timeout=2)
