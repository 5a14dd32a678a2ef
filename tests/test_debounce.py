from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from calcviz.debounce import Debouncer


class _FakeThreadTimer:
    created: list["_FakeThreadTimer"] = []

    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.daemon = False
        self.started = False
        self.cancelled = False
        _FakeThreadTimer.created.append(self)

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True


class _FakeLoopHandle:
    def __init__(self, callback):
        self._callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self._callback()


class _FakeAsyncLoop:
    def __init__(self) -> None:
        self.handles: list[_FakeLoopHandle] = []

    def call_later(self, _delay: float, callback):
        handle = _FakeLoopHandle(callback)
        self.handles.append(handle)
        return handle


@pytest.fixture(autouse=True)
def _clear_timers():
    _FakeThreadTimer.created.clear()
    yield


def test_trailing_call_gets_last_arguments() -> None:
    seen = []
    with patch("calcviz.debounce.threading.Timer", _FakeThreadTimer):
        d = Debouncer(seen.append, wait_ms=300)
        d("a")
        d("b")
        d("c")

        timers = _FakeThreadTimer.created
        assert [t.cancelled for t in timers] == [True, True, False]
        assert all(t.daemon and t.started for t in timers)
        assert timers[-1].delay == pytest.approx(0.3)

        timers[0].callback()
        timers[-1].callback()

    assert seen == ["c"]
    assert not d.pending


def test_uses_running_loop_when_available() -> None:
    seen = []
    loop = _FakeAsyncLoop()
    with patch("calcviz.debounce.asyncio.get_running_loop", return_value=loop):
        d = Debouncer(seen.append, wait_ms=10)
        d(1)
        d(2)
        assert len(loop.handles) == 2
        assert loop.handles[0].cancelled

        loop.handles[1].fire()

    assert seen == [2]


def test_flush_runs_pending_call_immediately() -> None:
    seen = []
    with patch("calcviz.debounce.threading.Timer", _FakeThreadTimer):
        d = Debouncer(seen.append)
        d("x")
        d.flush()
        assert seen == ["x"]
        assert _FakeThreadTimer.created[0].cancelled

        # a late timer must not fire a second time
        _FakeThreadTimer.created[0].callback()

    assert seen == ["x"]


def test_cancel_drops_pending_call() -> None:
    seen = []
    with patch("calcviz.debounce.threading.Timer", _FakeThreadTimer):
        d = Debouncer(seen.append)
        d("x")
        d.cancel()
        d.flush()
        _FakeThreadTimer.created[0].callback()

    assert seen == []


def test_callback_errors_are_logged_and_do_not_stop_later_calls(caplog) -> None:
    state = {"n": 0}

    def _callback(_payload):
        state["n"] += 1
        if state["n"] == 1:
            raise RuntimeError("boom")

    with patch("calcviz.debounce.threading.Timer", _FakeThreadTimer):
        d = Debouncer(_callback, wait_ms=1)
        with caplog.at_level(logging.ERROR, logger="calcviz.debounce"):
            d("first")
            _FakeThreadTimer.created[0].callback()
            d("second")
            _FakeThreadTimer.created[1].callback()

    assert state["n"] == 2
    assert "debounced callback failed" in caplog.text


def test_wait_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Debouncer(lambda: None, wait_ms=0)
