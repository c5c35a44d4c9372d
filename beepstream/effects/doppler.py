"""Sound at a distance: delay, attenuation and the Doppler effect."""

from __future__ import annotations

import math
from typing import Callable, Optional

import numpy as np

from ..resample import Resampler, resample_ratio
from ..streamer import StreamResult, Streamer


class _Doppler(Streamer):
    def __init__(
        self,
        quality: int,
        samples_per_meter: float,
        s: Streamer,
        distance: Callable[[int], float],
    ) -> None:
        self._r: Resampler = resample_ratio(quality, 1, s)
        self._distance = distance
        self._samples_per_meter = samples_per_meter
        self._space = np.zeros((int(distance(0) * samples_per_meter), 2))

    def stream(self, samples: np.ndarray) -> StreamResult:
        want = len(samples)
        distance = self._distance(want)
        space_len = int(distance * self._samples_per_meter)
        total = want + space_len - len(self._space)

        ratio = want / total if total != 0 else (math.inf if want else math.nan)
        self._r.set_ratio(ratio)

        start = len(self._space)
        self._space = np.concatenate([self._space, np.zeros((total, 2))])
        rn, _ = self._r.stream(self._space[start:])
        self._space = self._space[: start + rn]
        self._space[start:] /= distance * distance

        if len(self._space) == 0:
            return 0, False
        n = min(want, len(self._space))
        samples[:n] = self._space[:n]
        self._space = self._space[n:]
        return n, True

    def err(self) -> Optional[BaseException]:
        return self._r.err()


def doppler(
    quality: int,
    samples_per_meter: float,
    s: Streamer,
    distance: Callable[[int], float],
) -> Streamer:
    """Simulate ``s`` playing at a changing distance.

    ``samples_per_meter`` is the sample rate divided by the speed of sound.
    ``distance`` is called with the number of samples about to be streamed and
    returns the current distance; the sound is delayed accordingly, attenuated
    by the squared distance and stretched as the distance changes.
    """
    return _Doppler(quality, samples_per_meter, s, distance)