import numpy as np

from beepstream.streamer import Streamer
from beepstream.streamers import callback, iterate, silence


class _Rows(Streamer):
    def __init__(self, data):
        self.rest = np.asarray(data, dtype=float)

    def stream(self, samples):
        if not len(self.rest):
            return 0, False
        n = min(len(samples), len(self.rest))
        samples[:n], self.rest = self.rest[:n], self.rest[n:]
        return n, True


def _gather(s, size=64):
    buf = np.zeros((size, 2))
    parts = [np.empty((0, 2))]
    while (result := s.stream(buf))[1]:
        parts.append(buf[: result[0]].copy())
    return np.vstack(parts)


def test_silence_finite():
    s = silence(5)
    buf = np.ones((3, 2))
    assert s.stream(buf) == (3, True)
    assert not buf.any()

    buf = np.ones((3, 2))
    assert s.stream(buf) == (2, True)
    assert not buf[:2].any()
    assert np.array_equal(buf[2], [1.0, 1.0])

    assert s.stream(buf) == (0, False)


def test_silence_zero_is_drained():
    assert silence(0).stream(np.zeros((4, 2))) == (0, False)


def test_silence_infinite():
    s = silence(-1)
    for _ in range(5):
        buf = np.ones((100, 2))
        assert s.stream(buf) == (100, True)
        assert not buf.any()


def test_silence_collect_length():
    assert len(_gather(silence(1000))) == 1000


def test_callback_called_once():
    calls = []
    s = callback(lambda: calls.append(True))
    results = [s.stream(np.zeros((4, 2))) for _ in range(2)]
    assert results == [(0, False), (0, False)]
    assert calls == [True]


def test_callback_with_none():
    assert callback(None).stream(np.zeros((4, 2))) == (0, False)


def test_iterate_streams_in_order():
    first = np.arange(20, dtype=float).reshape(10, 2)
    second = -np.arange(14, dtype=float).reshape(7, 2)
    sources = iter([_Rows(first), _Rows(second)])
    s = iterate(lambda: next(sources, None))
    assert np.array_equal(_gather(s), np.vstack([first, second]))
    assert s.stream(np.zeros((4, 2))) == (0, False)


def test_iterate_empty_generator():
    generated = []

    def generate():
        generated.append(True)
        return None

    s = iterate(generate)
    assert [s.stream(np.zeros((4, 2))) for _ in range(2)] == [(0, False), (0, False)]
    assert generated == [True]


def test_iterate_partial_last_chunk():
    sources = iter([_Rows(np.ones((5, 2)))])
    s = iterate(lambda: next(sources, None))
    buf = np.zeros((8, 2))
    assert s.stream(buf) == (5, True)
    assert np.array_equal(buf[:5], np.ones((5, 2)))