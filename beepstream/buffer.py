"""In-memory storage of encoded audio samples."""

from __future__ import annotations

import numpy as np

from .format import Format
from .streamer import StreamResult, StreamSeeker, Streamer

_CHUNK = 512


class Buffer:
    """Growable store of audio samples encoded in a given format."""

    def __init__(self, format: Format) -> None:
        self.format = format
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data) // self.format.width()

    def pop(self, n: int) -> None:
        """Remove ``n`` samples from the start; existing streamers are unaffected."""
        if n < 0 or n > len(self):
            raise ValueError(f"buffer: cannot pop {n} samples from {len(self)}")
        del self._data[: n * self.format.width()]

    def append(self, streamer: Streamer) -> None:
        """Drain ``streamer`` and append everything it produces."""
        samples = np.zeros((_CHUNK, 2))
        while True:
            n, ok = streamer.stream(samples)
            if not ok:
                break
            for sample in samples[:n]:
                self._data += self.format.encode_signed(sample)

    def streamer(self, start: int, stop: int) -> StreamSeeker:
        """Return a seekable streamer over samples ``start`` (inclusive) to ``stop``."""
        if start < 0 or stop > len(self) or stop < start:
            raise ValueError(f"buffer: invalid range [{start}, {stop}) for length {len(self)}")
        width = self.format.width()
        return _BufferStreamer(self.format, bytes(self._data[start * width : stop * width]))


class _BufferStreamer(StreamSeeker):
    def __init__(self, format: Format, data: bytes) -> None:
        self._format = format
        self._data = data
        self._pos = 0

    def stream(self, samples: np.ndarray) -> StreamResult:
        if self._pos >= len(self._data):
            return 0, False
        width = self._format.width()
        count = min(len(samples), (len(self._data) - self._pos) // width)
        end = self._pos + count * width
        chunks = (self._data[off : off + width] for off in range(self._pos, end, width))
        for row, chunk in zip(samples, chunks):
            row[:] = self._format.decode_signed(chunk)
        self._pos = end
        return count, True

    def len(self) -> int:
        return len(self._data) // self._format.width()

    def position(self) -> int:
        return self._pos // self._format.width()

    def seek(self, p: int) -> None:
        if p < 0 or self.len() < p:
            raise ValueError(f"buffer: seek position {p} out of range [0, {self.len()}]")
        self._pos = p * self._format.width()