import pytest

from happyfarm.session import FarmSession


class ManualClock:
    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def session(clock):
    return FarmSession(clock=clock)
