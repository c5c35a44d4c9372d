"""Sample rates, sample formats and byte encoding of samples."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Sequence, Tuple, TypeVar

T = TypeVar("T", int, float)

_NS_PER_SECOND = 10**9


def clamp(x: T, lo: T, hi: T) -> T:
    """Limit ``x`` to the closed range ``[lo, hi]``."""
    return max(min(x, hi), lo)


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _timedelta_ns(d: timedelta) -> int:
    return (d.days * 86400 + d.seconds) * _NS_PER_SECOND + d.microseconds * 1000


class SampleRate(int):
    """Number of samples per second."""

    def duration(self, n: int) -> timedelta:
        """Return how long ``n`` samples last (truncated to microseconds)."""
        ns = _trunc_div(_NS_PER_SECOND * n, int(self))
        return timedelta(microseconds=_trunc_div(ns, 1000))

    def samples(self, d: timedelta) -> int:
        """Return the number of samples that last for ``d``."""
        return _trunc_div(_timedelta_ns(d) * int(self), _NS_PER_SECOND)


def _float_to_signed(precision: int, x: float) -> int:
    half = 2.0 ** (precision * 8 - 1)
    if x < 0:
        compl = int(-x * half)
        return (1 << (precision * 8)) - compl
    return int(min(x * half, half - 1))


def _float_to_unsigned(precision: int, x: float) -> int:
    full = 2.0 ** (precision * 8)
    return int(min((x + 1) / 2 * full, full - 1))


def _signed_to_float(precision: int, value: int) -> float:
    half = 2.0 ** (precision * 8 - 1)
    if value >= 1 << (precision * 8 - 1):
        return -float((1 << (precision * 8)) - value) / half
    return float(value) / half


def _unsigned_to_float(precision: int, value: int) -> float:
    return float(value) / 2.0 ** (precision * 8) * 2 - 1


@dataclass(frozen=True)
class Format:
    """Layout of encoded audio: rate, interleaved channels and bytes per sample."""

    sample_rate: SampleRate
    num_channels: int
    precision: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "sample_rate", SampleRate(self.sample_rate))

    def width(self) -> int:
        """Number of bytes per frame (one sample in every channel)."""
        return self.num_channels * self.precision

    def encode_signed(self, sample: Sequence[float]) -> bytes:
        """Encode one stereo sample as ``width()`` bytes of signed integers."""
        return self._encode(True, sample)

    def encode_unsigned(self, sample: Sequence[float]) -> bytes:
        """Encode one stereo sample as ``width()`` bytes of unsigned integers."""
        return self._encode(False, sample)

    def decode_signed(self, data: bytes) -> Tuple[float, float]:
        """Decode one stereo sample from signed integer bytes."""
        return self._decode(True, data)

    def decode_unsigned(self, data: bytes) -> Tuple[float, float]:
        """Decode one stereo sample from unsigned integer bytes."""
        return self._decode(False, data)

    def _encode_value(self, signed: bool, x: float) -> bytes:
        bits = self.precision * 8
        value = _float_to_signed(self.precision, x) if signed else _float_to_unsigned(self.precision, x)
        return (value & ((1 << bits) - 1)).to_bytes(self.precision, "little")

    def _decode_value(self, signed: bool, data: bytes) -> float:
        value = int.from_bytes(bytes(data[: self.precision]), "little")
        if signed:
            return _signed_to_float(self.precision, value)
        return _unsigned_to_float(self.precision, value)

    def _encode(self, signed: bool, sample: Sequence[float]) -> bytes:
        left, right = float(sample[0]), float(sample[1])
        if self.num_channels == 1:
            values = [clamp((left + right) / 2, -1.0, 1.0)]
        elif self.num_channels >= 2:
            values = [clamp(left, -1.0, 1.0), clamp(right, -1.0, 1.0)]
            values += [0.0] * (self.num_channels - 2)
        else:
            raise ValueError(f"format: encode: invalid number of channels: {self.num_channels}")
        return b"".join(self._encode_value(signed, v) for v in values)

    def _decode(self, signed: bool, data: bytes) -> Tuple[float, float]:
        if self.num_channels < 1:
            raise ValueError(f"format: decode: invalid number of channels: {self.num_channels}")
        if len(data) < self.width():
            raise ValueError(f"format: decode: need {self.width()} bytes, got {len(data)}")
        if self.num_channels == 1:
            x = self._decode_value(signed, data)
            return x, x
        p = self.precision
        return self._decode_value(signed, data[:p]), self._decode_value(signed, data[p : 2 * p])