# coding: utf-8

"""
Request Throttling

Static throttles used to stay under the service's transactions-per-second
ceiling. The workflow calls wait() before each throttled request.
"""

import time
from typing import Callable


class Throttle:
    """Throttle interface"""

    def wait(self) -> None:
        raise NotImplementedError


class NoThrottle(Throttle):
    """Throttle that never waits"""

    def wait(self) -> None:
        return None


class FixedDelayThrottle(Throttle):
    """
    Fixed Delay Throttle

    Sleeps for a constant delay before every throttled call. Not adaptive:
    the delay does not depend on the time elapsed since the previous call.
    """

    def __init__(self, delay_seconds: float = 0.25, sleep: Callable[[float], None] = time.sleep):
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {delay_seconds}")
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def wait(self) -> None:
        if self.delay_seconds:
            self._sleep(self.delay_seconds)

    def __repr__(self) -> str:
        return f"FixedDelayThrottle(delay_seconds={self.delay_seconds})"
