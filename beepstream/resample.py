"""Resampling streamers to a different sample rate by polynomial interpolation."""

from __future__ import annotations

import math
import sys
from typing import List, Optional, Tuple

import numpy as np

from .streamer import StreamResult, Streamer

_BUFFER_SIZE = 512


def _check_ratio(ratio: float) -> None:
    if ratio <= 0 or math.isinf(ratio) or math.isnan(ratio):
        raise ValueError(f"resample: invalid ratio: {ratio:f}")


def resample(quality: int, old: int, new: int, s: Streamer) -> "Resampler":
    """Resample ``s`` from sample rate ``old`` to ``new``.

    ``quality`` (1 to 64) is the number of points on each side used for interpolation.
    """
    return resample_ratio(quality, float(old) / float(new), s)


def resample_ratio(quality: int, ratio: float, s: Streamer) -> "Resampler":
    """Resample ``s`` by ``ratio`` (old rate divided by new rate)."""
    if quality < 1 or quality > 64:
        raise ValueError(f"resample: invalid quality: {quality}")
    _check_ratio(ratio)
    return Resampler(s, ratio, quality)


def _lagrange(points: List[Tuple[float, float, float]], x: float) -> Tuple[float, float]:
    """Evaluate at ``x`` the polynomial through ``(x, left, right)`` points, per channel."""
    left = right = 0.0
    for j, (xj, yl, yr) in enumerate(points):
        weight = 1.0
        for m, (xm, _, _) in enumerate(points):
            if j == m:
                continue
            weight *= (x - xm) / (xj - xm)
        left += yl * weight
        right += yr * weight
    return left, right


class Resampler(Streamer):
    """Streamer produced by :func:`resample`; its ratio can change while streaming."""

    def __init__(self, s: Streamer, ratio: float, quality: int) -> None:
        self._s = s
        self._ratio = ratio
        self._num_points = quality * 2
        # buf1 keeps the previous contents of buf2 since interpolation may need old samples.
        self._buf1 = np.zeros((_BUFFER_SIZE, 2))
        self._buf2 = np.zeros((_BUFFER_SIZE, 2))
        # Start just behind buf2 so the first stream call fills it and aligns off to 0.
        self._off = -_BUFFER_SIZE
        self._pos = 0.0
        self._end = sys.maxsize

    def _sample_at(self, x: int) -> np.ndarray:
        if x < self._off:
            return self._buf1[x - (self._off - _BUFFER_SIZE)]
        return self._buf2[x - self._off]

    def stream(self, samples: np.ndarray) -> StreamResult:
        n = 0
        while n < len(samples):
            want_pos = self._pos * self._ratio
            base = int(want_pos)
            window_start = base - (self._num_points - 1) // 2
            window_end = base + self._num_points // 2 + 1

            while window_end > self._off + _BUFFER_SIZE:
                sn, _ = self._s.stream(self._buf1)
                if sn < len(self._buf1):
                    self._end = self._off + _BUFFER_SIZE + sn
                self._buf1, self._buf2 = self._buf2, self._buf1
                self._off += _BUFFER_SIZE

            if base >= self._end:
                return n, n > 0

            window_start = max(window_start, 0)
            window_end = min(window_end, self._end)

            points = []
            for x in range(window_start, window_end):
                row = self._sample_at(x)
                points.append((float(x), float(row[0]), float(row[1])))
            samples[n, 0], samples[n, 1] = _lagrange(points, want_pos)

            n += 1
            self._pos += 1
        return n, True

    def err(self) -> Optional[BaseException]:
        return self._s.err()

    def ratio(self) -> float:
        """Return the current resampling ratio."""
        return self._ratio

    def set_ratio(self, ratio: float) -> None:
        """Change the resampling ratio without a glitch in the stream."""
        _check_ratio(ratio)
        self._pos *= self._ratio / ratio
        self._ratio = ratio