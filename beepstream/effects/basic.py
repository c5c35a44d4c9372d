"""Simple per-sample effects: gain, panning, volume, mono downmix and channel swap."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..streamer import StreamResult, Streamer


@dataclass
class Gain(Streamer):
    """Amplifies the wrapped streamer linearly: output is multiplied by ``1 + gain``."""

    streamer: Streamer
    gain: float = 0.0

    def stream(self, samples: np.ndarray) -> StreamResult:
        n, ok = self.streamer.stream(samples)
        samples[:n] *= 1 + self.gain
        return n, ok

    def err(self) -> Optional[BaseException]:
        return self.streamer.err()


@dataclass
class Pan(Streamer):
    """Balances the wrapped streamer between the channels.

    ``pan`` of -1 sends both channels through the left one, +1 through the right
    one and 0 changes nothing.
    """

    streamer: Streamer
    pan: float = 0.0

    def stream(self, samples: np.ndarray) -> StreamResult:
        n, ok = self.streamer.stream(samples)
        block = samples[:n]
        if self.pan < 0:
            right = block[:, 1].copy()
            block[:, 0] += -self.pan * right
            block[:, 1] -= -self.pan * right
        elif self.pan > 0:
            left = block[:, 0].copy()
            block[:, 0] -= self.pan * left
            block[:, 1] += self.pan * left
        return n, ok

    def err(self) -> Optional[BaseException]:
        return self.streamer.err()


@dataclass
class Volume(Streamer):
    """Adjusts volume exponentially: the gain is ``base ** volume``.

    A ``volume`` of 0 changes nothing; ``silent`` mutes the output entirely.
    """

    streamer: Streamer
    base: float
    volume: float = 0.0
    silent: bool = False

    def stream(self, samples: np.ndarray) -> StreamResult:
        n, ok = self.streamer.stream(samples)
        gain = 0.0 if self.silent else math.pow(self.base, self.volume)
        samples[:n] *= gain
        return n, ok

    def err(self) -> Optional[BaseException]:
        return self.streamer.err()


class _Mono(Streamer):
    def __init__(self, streamer: Streamer) -> None:
        self._streamer = streamer

    def stream(self, samples: np.ndarray) -> StreamResult:
        n, ok = self._streamer.stream(samples)
        block = samples[:n]
        mixed = (block[:, 0] + block[:, 1]) / 2
        block[:, 0] = mixed
        block[:, 1] = mixed
        return n, ok

    def err(self) -> Optional[BaseException]:
        return self._streamer.err()


class _Swap(Streamer):
    def __init__(self, streamer: Streamer) -> None:
        self._streamer = streamer

    def stream(self, samples: np.ndarray) -> StreamResult:
        n, ok = self._streamer.stream(samples)
        samples[:n] = samples[:n, ::-1].copy()
        return n, ok

    def err(self) -> Optional[BaseException]:
        return self._streamer.err()


def mono(s: Streamer) -> Streamer:
    """Downmix ``s`` so both channels carry the average of left and right."""
    return _Mono(s)


def swap(s: Streamer) -> Streamer:
    """Swap the left and right channels of ``s``."""
    return _Swap(s)