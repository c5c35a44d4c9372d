"""Infinite periodic tone generators: sine, square, triangle and sawtooth waves."""

from __future__ import annotations

import math
from typing import Callable

import numpy as np

from ..streamer import StreamResult, Streamer


class _ToneGenerator(Streamer):
    """Streams ``wave(t)`` where ``t`` is the phase in ``[0, 1)`` advancing by ``dt``."""

    def __init__(self, dt: float, wave: Callable[[float], float]) -> None:
        self._dt = dt
        self._t = 0.0
        self._wave = wave

    def stream(self, samples: np.ndarray) -> StreamResult:
        for row in samples:
            row[:] = self._wave(self._t)
            self._t = math.modf(self._t + self._dt)[0]
        return len(samples), True


def _phase_step(name: str, sample_rate: int, freq: float) -> float:
    dt = freq / float(sample_rate)
    if dt >= 0.5:
        raise ValueError(
            f"{name} tone generator: samplerate must be at least 2 times greater than frequency"
        )
    return dt


def _sine(t: float) -> float:
    return math.sin(t * 2.0 * math.pi)


def _square(t: float) -> float:
    return 1.0 if t < 0.5 else -1.0


def _triangle(t: float) -> float:
    return 2.0 * (1 - t) - 1 if t < 0.5 else 2.0 * t - 1.0


def _sawtooth(t: float) -> float:
    return 2.0 * t - 1.0


def _sawtooth_reversed(t: float) -> float:
    return 2.0 * (1 - t) - 1


def sine_tone(sample_rate: int, freq: float) -> Streamer:
    """Return an infinite sine wave; ``freq`` must be below half the sample rate."""
    return _ToneGenerator(_phase_step("sine", sample_rate, freq), _sine)


def square_tone(sample_rate: int, freq: float) -> Streamer:
    """Return an infinite square wave; ``freq`` must be below half the sample rate."""
    return _ToneGenerator(_phase_step("square", sample_rate, freq), _square)


def triangle_tone(sample_rate: int, freq: float) -> Streamer:
    """Return an infinite triangle wave; ``freq`` must be below half the sample rate."""
    return _ToneGenerator(_phase_step("triangle", sample_rate, freq), _triangle)


def sawtooth_tone(sample_rate: int, freq: float) -> Streamer:
    """Return an infinite rising sawtooth wave; ``freq`` must be below half the sample rate."""
    return _ToneGenerator(_phase_step("sawtooth", sample_rate, freq), _sawtooth)


def sawtooth_tone_reversed(sample_rate: int, freq: float) -> Streamer:
    """Return an infinite falling sawtooth wave; ``freq`` must be below half the sample rate."""
    return _ToneGenerator(_phase_step("sawtooth", sample_rate, freq), _sawtooth_reversed)