"""Streamers built from other streamers: take, loop, sequence, mix and duplicate."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from .mixer import Mixer
from .streamer import StreamResult, StreamSeeker, Streamer, StreamerFunc


class _Take(Streamer):
    def __init__(self, num: int, s: Streamer) -> None:
        self._s = s
        self._remains = num

    def stream(self, samples: np.ndarray) -> StreamResult:
        if self._remains <= 0:
            return 0, False
        to_stream = min(self._remains, len(samples))
        n, ok = self._s.stream(samples[:to_stream])
        self._remains -= n
        return n, ok

    def err(self) -> Optional[BaseException]:
        return self._s.err()


def take(num: int, s: Streamer) -> Streamer:
    """Stream at most ``num`` samples from ``s``, propagating its errors."""
    return _Take(num, s)


class _Loop(Streamer):
    def __init__(self, count: int, s: StreamSeeker) -> None:
        self._s = s
        self._remains = count

    def stream(self, samples: np.ndarray) -> StreamResult:
        if self._remains == 0 or self._s.err() is not None:
            return 0, False
        n = 0
        while len(samples) > 0:
            sn, sok = self._s.stream(samples)
            if not sok:
                if self._remains > 0:
                    self._remains -= 1
                if self._remains == 0:
                    break
                try:
                    self._s.seek(0)
                except Exception:
                    return n, True
                continue
            samples = samples[sn:]
            n += sn
        return n, True

    def err(self) -> Optional[BaseException]:
        return self._s.err()


def loop(count: int, s: StreamSeeker) -> Streamer:
    """Play ``s`` ``count`` times, or forever if ``count`` is negative.

    Prefer :func:`loop2`, whose :func:`loop_times` counts repeats instead of plays.
    """
    return _Loop(count, s)


class _Loop2(Streamer):
    def __init__(self, s: StreamSeeker) -> None:
        self.s = s
        self.remains = -1  # number of seeks remaining; negative means forever
        self.start = 0
        self.end = sys.maxsize
        self._err: Optional[BaseException] = None

    def stream(self, samples: np.ndarray) -> StreamResult:
        if self._err is not None:
            return 0, False
        n = 0
        while len(samples) > 0:
            to_stream = len(samples)
            if self.remains != 0:
                until_end = self.end - self.s.position()
                if until_end <= 0:
                    if self.remains > 0:
                        self.remains -= 1
                    try:
                        self.s.seek(self.start)
                    except Exception as exc:
                        self._err = exc
                        return n, True
                    continue
                to_stream = min(until_end, to_stream)

            sn, sok = self.s.stream(samples[:to_stream])
            n += sn
            if sn < to_stream or not sok:
                self._err = self.s.err()
                return n, n > 0
            samples = samples[sn:]
        return n, True

    def err(self) -> Optional[BaseException]:
        return self._err


LoopOption = Callable[[_Loop2], None]


def loop_times(times: int) -> LoopOption:
    """Repeat the stream (or looped section) ``times`` more times; 0 plays it once."""
    if times < 0:
        raise ValueError("invalid argument to LoopTimes; times cannot be negative")

    def _apply(target: _Loop2) -> None:
        target.remains = times

    return _apply


def loop_start(pos: int) -> LoopOption:
    """Set the position the loop returns to; samples before it play once."""
    if pos < 0:
        raise ValueError("invalid argument to LoopStart; pos cannot be negative")

    def _apply(target: _Loop2) -> None:
        target.start = pos

    return _apply


def loop_end(pos: int) -> LoopOption:
    """Set the exclusive position where the loop jumps back; later samples play once."""
    if pos < 0:
        raise ValueError("invalid argument to LoopEnd; pos cannot be negative")

    def _apply(target: _Loop2) -> None:
        target.end = pos

    return _apply


def loop_between(start: int, end: int) -> LoopOption:
    """Set both the start and the end of the looped section."""
    set_start = loop_start(start)
    set_end = loop_end(end)

    def _apply(target: _Loop2) -> None:
        set_start(target)
        set_end(target)

    return _apply


def loop2(s: StreamSeeker, *args: LoopOption) -> Streamer:
    """Repeat ``s`` according to the options; without :func:`loop_times` it loops forever.

    Raises ``ValueError`` if the start is not before the stream length or the end.
    """
    result = _Loop2(s)
    for option in args:
        option(result)

    n = s.len()
    if result.start >= n:
        raise ValueError(
            f"invalid argument to Loop2; start position {result.start} must be smaller "
            f"than the source streamer length {n}"
        )
    if result.start >= result.end:
        raise ValueError(
            f"invalid argument to Loop2; start position {result.start} must be smaller "
            f"than the end position {result.end}"
        )
    result.end = min(result.end, n)
    return result


def seq(*args: Streamer) -> Streamer:
    """Stream the given streamers one after another; errors are not propagated."""
    streamers = list(args)
    index = 0

    def _stream(samples: np.ndarray) -> StreamResult:
        nonlocal index
        n, ok = 0, False
        while index < len(streamers) and len(samples) > 0:
            sn, sok = streamers[index].stream(samples)
            samples = samples[sn:]
            n, ok = n + sn, ok or sok
            if not sok:
                index += 1
        return n, ok

    return StreamerFunc(_stream)


def mix(*args: Streamer) -> Streamer:
    """Stream the given streamers mixed together, draining when all are drained."""
    mixer = Mixer(*args)
    mixer.keep_alive(False)
    return mixer


@dataclass
class _DupState:
    source: Streamer
    buffers: List[np.ndarray] = field(default_factory=lambda: [np.empty((0, 2)), np.empty((0, 2))])


class _Dup(Streamer):
    def __init__(self, state: _DupState, mine: int) -> None:
        self._state = state
        self._mine = mine

    def stream(self, samples: np.ndarray) -> StreamResult:
        state = self._state
        buf = state.buffers[self._mine]
        n = min(len(samples), len(buf))
        samples[:n] = buf[:n]
        ok = len(buf) > 0
        state.buffers[self._mine] = buf[n:]

        rest = samples[n:]
        if len(rest) > 0:
            sn, sok = state.source.stream(rest)
            n += sn
            ok = ok or sok
            other = 1 - self._mine
            state.buffers[other] = np.concatenate([state.buffers[other], rest[:sn]])
        return n, ok

    def err(self) -> Optional[BaseException]:
        return self._state.source.err()


def dup(s: Streamer) -> Tuple[Streamer, Streamer]:
    """Return two streamers that both stream the same data as ``s``."""
    state = _DupState(s)
    return _Dup(state, 0), _Dup(state, 1)