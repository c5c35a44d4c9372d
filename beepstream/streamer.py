"""Core streaming protocol: streamers fill arrays of stereo samples."""

from __future__ import annotations

import abc
from typing import Callable, Optional, Tuple

import numpy as np

StreamResult = Tuple[int, bool]


class Streamer(abc.ABC):
    """A finite or infinite source of stereo audio samples.

    ``stream`` receives a float array of shape ``(n, 2)``: column 0 is the left
    channel and column 1 the right one. It writes at most ``n`` samples to the
    front of the array and returns ``(count, ok)``. The valid patterns are:

    1. ``count == n and ok``: all requested samples were produced.
    2. ``0 < count < n and ok``: the streamer produced its last samples.
    3. ``count == 0 and not ok``: the streamer is drained; it stays drained.

    A streamer whose ``err`` returns an exception must only return pattern 3.
    """

    @abc.abstractmethod
    def stream(self, samples: np.ndarray) -> StreamResult:
        """Fill ``samples`` from the front and return ``(count, ok)``."""

    def err(self) -> Optional[BaseException]:
        """Return the error that stopped streaming, or ``None``."""
        return None


class StreamSeeker(Streamer):
    """A finite streamer that can seek to any position."""

    @abc.abstractmethod
    def len(self) -> int:
        """Return the total number of samples."""

    @abc.abstractmethod
    def position(self) -> int:
        """Return the current position, between 0 and ``len()``."""

    @abc.abstractmethod
    def seek(self, p: int) -> None:
        """Move to position ``p``; raise and keep the position on failure."""


class StreamCloser(Streamer):
    """A streamer backed by a resource that must be released."""

    @abc.abstractmethod
    def close(self) -> None:
        """Release the underlying resource; no more samples are produced."""


class StreamSeekCloser(StreamSeeker, StreamCloser):
    """A seekable streamer backed by a resource that must be released."""


class StreamerFunc(Streamer):
    """A streamer made from a plain streaming function."""

    def __init__(self, func: Callable[[np.ndarray], StreamResult]) -> None:
        self._func = func

    def stream(self, samples: np.ndarray) -> StreamResult:
        return self._func(samples)

    def err(self) -> Optional[BaseException]:
        return None