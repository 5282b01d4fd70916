from __future__ import annotations

from typing import List

import pytest


class FakeTimer:
    """Stands in for threading.Timer; the test decides when it fires."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        return self.function(*self.args, **self.kwargs)


@pytest.fixture
def timers() -> List[FakeTimer]:
    return []


@pytest.fixture
def timer_factory(timers):
    def factory(interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args=args, kwargs=kwargs)
        timers.append(timer)
        return timer

    return factory
