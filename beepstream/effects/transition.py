"""Gain transitions over the course of a stream, such as fades and cross-fades."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from ..streamer import Streamer

TransitionFunc = Callable[[float], float]


def transition_linear(percent: float) -> float:
    """Progress the gain linearly."""
    return float(percent)


def transition_equal_power(percent: float) -> float:
    """Progress the gain so that mixing with the inverse transition keeps constant power."""
    return math.cos((1.0 - percent) * 0.5 * math.pi)


@dataclass
class TransitionStreamer(Streamer):
    """Scales the source by a gain moving from ``start_gain`` to ``end_gain`` over ``length`` samples."""

    source: Streamer
    length: int
    start_gain: float
    end_gain: float
    transition_func: TransitionFunc
    _pos: int = field(default=0, init=False, repr=False)

    def _progress(self, pos: int) -> float:
        if self.length == 0:
            ratio = math.inf if pos > 0 else math.nan
        else:
            ratio = pos / self.length
        return min(ratio, 1.0)

    def stream(self, samples):
        n, ok = self.source.stream(samples)
        values = np.array(
            [self.transition_func(self._progress(self._pos + i)) for i in range(n)],
            dtype=float,
        )
        gains = self.start_gain + (self.end_gain - self.start_gain) * values
        samples[:n] *= gains[:, None]
        self._pos += n
        return n, ok

    def err(self):
        return self.source.err()


def transition(s, length, start_gain, end_gain, transition_func) -> TransitionStreamer:
    """Move the gain of ``s`` from ``start_gain`` to ``end_gain`` over ``length`` samples."""
    return TransitionStreamer(s, length, start_gain, end_gain, transition_func)