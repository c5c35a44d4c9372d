"""Parametric equalizer built from second-order filter sections."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..streamer import StreamResult, Streamer


@dataclass(frozen=True)
class MonoEqualizerSection:
    """One equalizer band applied identically to both channels.

    ``f0`` is the centre frequency and ``bf`` the bandwidth, both in Hz. ``gb``
    is the level in dB at which the bandwidth is measured, ``g0`` the reference
    gain in dB and ``g`` the boost (positive) or cut (negative) gain in dB.
    """

    f0: float
    bf: float
    gb: float
    g0: float
    g: float

    def _coefficients(self, fs: float) -> Tuple[List[float], List[float]]:
        beta = (
            math.tan(self.bf / 2.0 * math.pi / (fs / 2.0))
            * math.sqrt(abs(math.pow(math.pow(10, self.gb / 20.0), 2.0) - math.pow(math.pow(10.0, self.g0 / 20.0), 2.0)))
            / math.sqrt(abs(math.pow(math.pow(10.0, self.g / 20.0), 2.0) - math.pow(math.pow(10.0, self.gb / 20.0), 2.0)))
        )
        ref = math.pow(10.0, self.g0 / 20.0)
        boost = math.pow(10.0, self.g / 20.0)
        cos = math.cos(self.f0 * math.pi / (fs / 2.0))
        b = [
            (ref + boost * beta) / (1 + beta),
            (-2 * ref * cos) / (1 + beta),
            (ref - boost * beta) / (1 + beta),
        ]
        a = [
            1.0,
            -2 * cos / (1 + beta),
            (1 - beta) / (1 + beta),
        ]
        return a, b

    def _section(self, fs: float) -> "_Section":
        a, b = self._coefficients(fs)
        return _Section((a, a), (b, b))


@dataclass(frozen=True)
class StereoEqualizerSection:
    """One equalizer band with separate settings for the left and right channels."""

    left: MonoEqualizerSection
    right: MonoEqualizerSection

    def _section(self, fs: float) -> "_Section":
        left_a, left_b = self.left._coefficients(fs)
        right_a, right_b = self.right._coefficients(fs)
        return _Section((left_a, right_a), (left_b, right_b))


EqualizerSection = Union[MonoEqualizerSection, StereoEqualizerSection]


class _Section:
    def __init__(self, a: Tuple[List[float], List[float]], b: Tuple[List[float], List[float]]) -> None:
        self.a = a
        self.b = b

    def apply(self, x: np.ndarray) -> None:
        """Filter ``x`` in place, starting from a state at rest."""
        for channel in (0, 1):
            a, b = self.a[channel], self.b[channel]
            order = len(a) - 1
            xs = x[:, channel].tolist()
            ys: List[float] = []
            for i in range(len(xs)):
                acc = 0.0
                for j in range(min(order, i) + 1):
                    acc += b[j] * xs[i - j]
                for j in range(min(order, i)):
                    acc -= a[j + 1] * ys[i - j - 1]
                ys.append(acc / a[0])
            x[:, channel] = ys


class Equalizer(Streamer):
    """Streams the wrapped streamer through a chain of equalizer sections.

    Every block handed to ``stream`` is filtered on its own, starting at rest.
    """

    def __init__(self, streamer: Streamer, sections: Sequence[_Section]) -> None:
        self._streamer = streamer
        self._sections = list(sections)

    def stream(self, samples: np.ndarray) -> StreamResult:
        n, ok = self._streamer.stream(samples)
        for section in self._sections:
            section.apply(samples)
        return n, ok

    def err(self) -> Optional[BaseException]:
        return self._streamer.err()


def new_equalizer(
    streamer: Streamer, sample_rate: int, sections: Sequence[EqualizerSection]
) -> Equalizer:
    """Equalize ``streamer``, whose sample rate must be ``sample_rate``."""
    fs = float(sample_rate)
    built = []
    for section in sections:
        if not isinstance(section, (MonoEqualizerSection, StereoEqualizerSection)):
            raise TypeError(f"equalizer: unsupported section type {type(section).__name__}")
        built.append(section._section(fs))
    return Equalizer(streamer, built)