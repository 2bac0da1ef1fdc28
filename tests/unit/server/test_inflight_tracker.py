import threading

import pytest

from src.server import InFlightTracker


@pytest.mark.unit
def test_wait_idle_returns_immediately_without_requests():
    tracker = InFlightTracker(lambda environ, start_response: [b""])
    assert tracker.wait_idle(0.01) is True


@pytest.mark.unit
def test_wait_idle_waits_for_running_request():
    entered = threading.Event()
    release = threading.Event()

    def slow_app(environ, start_response):
        entered.set()
        release.wait(5)
        return [b"done"]

    tracker = InFlightTracker(slow_app)
    worker = threading.Thread(target=tracker, args=({}, None))
    worker.start()
    assert entered.wait(5)

    assert tracker.active == 1
    assert tracker.wait_idle(0.05) is False

    release.set()
    assert tracker.wait_idle(5) is True
    worker.join(5)
    assert tracker.active == 0


@pytest.mark.unit
def test_counter_is_released_when_app_raises():
    def broken_app(environ, start_response):
        raise RuntimeError("boom")

    tracker = InFlightTracker(broken_app)
    with pytest.raises(RuntimeError):
        tracker({}, None)
    assert tracker.active == 0
