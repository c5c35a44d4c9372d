import re

import numpy as np
import pytest

from beepstream.compositors import (
    dup,
    loop,
    loop2,
    loop_between,
    loop_end,
    loop_start,
    loop_times,
    mix,
    seq,
    take,
)
from beepstream.streamer import StreamSeeker


class Track(StreamSeeker):
    def __init__(self, data):
        self.data = np.asarray(data, dtype=float)
        self.at = 0

    def stream(self, samples):
        chunk = self.data[self.at :][: len(samples)]
        if not len(chunk):
            return 0, False
        samples[: len(chunk)] = chunk
        self.at += len(chunk)
        return len(chunk), True

    def len(self):
        return len(self.data)

    def position(self):
        return self.at

    def seek(self, p):
        self.at = p


class DelayedErrorStreamer(Track):
    def __init__(self, data, num, error):
        super().__init__(data)
        self.left = num
        self.error = error

    def stream(self, samples):
        if self.left == 0:
            return 0, False
        n, ok = super().stream(samples[: min(self.left, len(samples))])
        self.left -= n
        return n, ok

    def err(self):
        return self.error if self.left == 0 else None


class SeekErrorStreamer(Track):
    def __init__(self, data, error):
        super().__init__(data)
        self.error = error

    def seek(self, p):
        raise self.error


def random_track(rng, n):
    data = rng.uniform(-1, 1, size=(n, 2))
    return Track(data), data


def pairs(*values):
    return np.repeat(np.array(values, dtype=float), 2).reshape(-1, 2)


SEQUENTIAL = pairs(0, 1, 2, 3, 4)


def collect(s):
    buf = np.zeros((479, 2))

    def chunks():
        while True:
            n, ok = s.stream(buf)
            if not ok:
                return
            yield buf[:n].copy()

    return np.vstack([np.empty((0, 2)), *chunks()])


def collect_num(num, s):
    return collect(take(num, s))


def test_take():
    rng = np.random.default_rng(1)
    for _ in range(4):
        s, data = random_track(rng, int(rng.integers(1000, 5000)))
        count = int(rng.integers(0, len(data)))
        assert np.array_equal(collect(take(count, s)), data[:count])


def test_take_zero_is_drained():
    assert take(0, Track(SEQUENTIAL)).stream(np.zeros((3, 2))) == (0, False)


@pytest.mark.parametrize("count", range(5))
def test_loop(count):
    s, data = random_track(np.random.default_rng(count), 10)
    want = np.vstack([np.empty((0, 2))] + [data] * count)
    assert np.array_equal(collect(loop(count, s)), want)


@pytest.mark.parametrize(
    "option, msg",
    [
        (
            loop_start(5),
            "invalid argument to Loop2; start position 5 must be smaller than the source streamer length 5",
        ),
        (
            loop_between(4, 4),
            "invalid argument to Loop2; start position 4 must be smaller than the end position 4",
        ),
    ],
)
def test_loop2_invalid_positions(option, msg):
    with pytest.raises(ValueError, match=re.escape(msg)):
        loop2(Track(SEQUENTIAL), option)


@pytest.mark.parametrize("option", [loop_times, loop_start, loop_end])
def test_negative_options_rejected(option):
    with pytest.raises(ValueError):
        option(-1)


@pytest.mark.parametrize(
    "options, num, expected",
    [
        ((), 16, (0, 1, 2, 3, 4, 0, 1, 2, 3, 4, 0, 1, 2, 3, 4, 0)),
        ((loop_between(2, 4),), 10, (0, 1, 2, 3, 2, 3, 2, 3, 2, 3)),
    ],
)
def test_loop2_indefinitely(options, num, expected):
    assert np.array_equal(collect_num(num, loop2(Track(SEQUENTIAL), *options)), pairs(*expected))


@pytest.mark.parametrize(
    "options, expected",
    [
        ((loop_times(0),), (0, 1, 2, 3, 4)),
        ((loop_times(1),), (0, 1, 2, 3, 4, 0, 1, 2, 3, 4)),
        ((loop_times(2),), (0, 1, 2, 3, 4, 0, 1, 2, 3, 4, 0, 1, 2, 3, 4)),
        ((loop_times(2), loop_start(2)), (0, 1, 2, 3, 4, 2, 3, 4, 2, 3, 4)),
        ((loop_times(2), loop_end(4)), (0, 1, 2, 3, 0, 1, 2, 3, 0, 1, 2, 3, 4)),
        ((loop_times(2), loop_between(2, 4)), (0, 1, 2, 3, 2, 3, 2, 3, 4)),
    ],
)
def test_loop2_finite(options, expected):
    assert np.array_equal(collect(loop2(Track(SEQUENTIAL), *options)), pairs(*expected))


def test_loop2_stream_from_middle_of_loop():
    l = loop2(Track(SEQUENTIAL), loop_times(2), loop_between(2, 4))
    buf = np.zeros((3, 2))
    for expected in ((0, 1, 2), (3, 2, 3)):
        assert l.stream(buf) == (3, True)
        assert np.array_equal(buf, pairs(*expected))


@pytest.mark.parametrize(
    "make, first, expected",
    [
        (lambda e: DelayedErrorStreamer(SEQUENTIAL, 5, e), 5, (0, 1, 2, 3, 2, 0, 0, 0, 0, 0)),
        (lambda e: SeekErrorStreamer(SEQUENTIAL, e), 4, (0, 1, 2, 3, 0, 0, 0, 0, 0, 0)),
    ],
)
def test_loop2_error_handling(make, first, expected):
    error = RuntimeError("expected error")
    l = loop2(make(error), loop_times(3), loop_between(2, 4))
    buf = np.zeros((10, 2))
    assert l.stream(buf) == (first, True)
    assert np.array_equal(buf, pairs(*expected))
    assert l.err() is error
    assert l.stream(buf) == (0, False)
    assert l.err() is error


def test_seq():
    rng = np.random.default_rng(7)
    parts = [random_track(rng, int(rng.integers(100, 3000))) for _ in range(5)]
    got = collect(seq(*(s for s, _ in parts)))
    assert np.array_equal(got, np.vstack([d for _, d in parts]))


def test_seq_empty_is_drained():
    assert seq().stream(np.zeros((4, 2))) == (0, False)


def test_mix():
    rng = np.random.default_rng(11)
    parts = [random_track(rng, int(rng.integers(100, 3000))) for _ in range(5)]
    want = np.zeros((max(len(d) for _, d in parts), 2))
    for _, d in parts:
        want[: len(d)] += d
    got = collect(mix(*(s for s, _ in parts)))
    assert got.shape == want.shape
    assert np.allclose(got, want, atol=1e-9)


def test_dup():
    rng = np.random.default_rng(3)
    for _ in range(3):
        s, data = random_track(rng, int(rng.integers(1000, 5000)))
        copies = dup(s)
        received = ([], [])
        while True:
            oks = []
            for copy, sink in zip(copies, received):
                buf = np.zeros((int(rng.integers(0, 1000)), 2))
                n, ok = copy.stream(buf)
                sink.append(buf[:n].copy())
                oks.append(ok)
            if not any(oks):
                break
        for sink in received:
            assert np.array_equal(np.vstack(sink), data)