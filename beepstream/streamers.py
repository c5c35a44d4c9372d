"""Small utility streamers: silence, callbacks and streamer iteration."""

from __future__ import annotations

from typing import Callable, Optional

from .streamer import Streamer, StreamerFunc


def silence(num: int) -> Streamer:
    """Stream ``num`` samples of silence, or silence forever if ``num`` is negative."""
    remaining = num

    def fill(samples):
        nonlocal remaining
        if remaining == 0:
            return 0, False
        count = len(samples) if remaining < 0 else min(remaining, len(samples))
        samples[:count] = 0.0
        if remaining > 0:
            remaining -= count
        return count, True

    return StreamerFunc(fill)


def callback(func: Optional[Callable[[], None]]) -> Streamer:
    """Return a streamer that produces no samples but calls ``func`` on its first use."""
    pending = func

    def fire(_samples):
        nonlocal pending
        if pending is not None:
            call, pending = pending, None
            call()
        return 0, False

    return StreamerFunc(fire)


class _Iteration(Streamer):
    def __init__(self, generate: Callable[[], Optional[Streamer]]) -> None:
        self._generate = generate
        self._current: Optional[Streamer] = None
        self._started = False

    def stream(self, samples):
        if not self._started:
            self._current = self._generate()
            self._started = True
        if self._current is None:
            return 0, False
        produced = 0
        while len(samples) and self._current is not None:
            count, alive = self._current.stream(samples)
            if not alive:
                self._current = self._generate()
            samples = samples[count:]
            produced += count
        return produced, True


def iterate(generate: Callable[[], Optional[Streamer]]) -> Streamer:
    """Stream streamers obtained from ``generate`` one after another until it returns ``None``.

    Errors from the generated streamers are not propagated.
    """
    return _Iteration(generate)