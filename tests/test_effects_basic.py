import numpy as np
import pytest

from beepstream.effects.basic import Gain, Pan, Volume, mono, swap
from beepstream.streamer import Streamer

DATA = np.array([[0.5, -0.25], [0.1, 0.2], [-0.4, 0.3], [0.0, -1.0], [0.75, 0.125]])


class _Data(Streamer):
    def __init__(self, data):
        self.data = np.asarray(data, dtype=float)
        self.pos = 0
        self.error = None

    def stream(self, samples):
        if self.pos >= len(self.data):
            return 0, False
        n = min(len(samples), len(self.data) - self.pos)
        samples[:n] = self.data[self.pos : self.pos + n]
        self.pos += n
        return n, True

    def err(self):
        return self.error


def _collect(s, chunk=3):
    parts = []
    while True:
        buf = np.zeros((chunk, 2))
        n, ok = s.stream(buf)
        if not ok:
            break
        parts.append(buf[:n].copy())
    return np.concatenate(parts) if parts else np.zeros((0, 2))


def test_gain_zero_is_identity():
    assert np.array_equal(_collect(Gain(_Data(DATA), 0.0)), DATA)


def test_gain_one_doubles():
    assert np.allclose(_collect(Gain(_Data(DATA), 1.0)), DATA * 2)


def test_gain_minus_one_silences():
    assert np.array_equal(_collect(Gain(_Data(DATA), -1.0)), np.zeros_like(DATA))


def test_gain_only_touches_streamed_samples():
    buf = np.full((8, 2), 7.0)
    n, ok = Gain(_Data(DATA), 1.0).stream(buf)
    assert (n, ok) == (len(DATA), True)
    assert np.all(buf[len(DATA) :] == 7.0)


def test_gain_propagates_error():
    src = _Data(DATA)
    src.error = RuntimeError("boom")
    assert Gain(src, 0.5).err() is src.error


def test_drained_source_stays_drained():
    buf = np.zeros((4, 2))
    assert Gain(_Data(np.zeros((0, 2))), 1.0).stream(buf) == (0, False)


def test_pan_zero_is_identity():
    assert np.array_equal(_collect(Pan(_Data(DATA), 0.0)), DATA)


def test_pan_full_left():
    out = _collect(Pan(_Data(DATA), -1.0))
    assert np.allclose(out[:, 0], DATA.sum(axis=1))
    assert np.allclose(out[:, 1], 0.0)


def test_pan_full_right():
    out = _collect(Pan(_Data(DATA), 1.0))
    assert np.allclose(out[:, 0], 0.0)
    assert np.allclose(out[:, 1], DATA.sum(axis=1))


@pytest.mark.parametrize("pan", [-1.0, -0.3, 0.0, 0.6, 1.0])
def test_pan_preserves_channel_sum(pan):
    out = _collect(Pan(_Data(DATA), pan))
    assert np.allclose(out.sum(axis=1), DATA.sum(axis=1))


def test_pan_propagates_error():
    src = _Data(DATA)
    src.error = ValueError("bad")
    assert Pan(src, 0.2).err() is src.error


def test_volume_zero_is_identity():
    assert np.allclose(_collect(Volume(_Data(DATA), base=2.0, volume=0.0)), DATA)


def test_volume_base_two_doubles_and_halves():
    assert np.allclose(_collect(Volume(_Data(DATA), base=2.0, volume=1.0)), DATA * 2)
    assert np.allclose(_collect(Volume(_Data(DATA), base=2.0, volume=-1.0)), DATA / 2)


def test_volume_silent_mutes():
    out = _collect(Volume(_Data(DATA), base=2.0, volume=3.0, silent=True))
    assert np.array_equal(out, np.zeros_like(DATA))


def test_volume_propagates_error():
    src = _Data(DATA)
    src.error = OSError("io")
    assert Volume(src, base=2.0).err() is src.error


def test_mono_makes_channels_equal_and_keeps_sum():
    out = _collect(mono(_Data(DATA)))
    assert np.array_equal(out[:, 0], out[:, 1])
    assert np.allclose(out.sum(axis=1), DATA.sum(axis=1))


def test_swap_swaps_channels():
    out = _collect(swap(_Data(DATA)))
    assert np.array_equal(out[:, 0], DATA[:, 1])
    assert np.array_equal(out[:, 1], DATA[:, 0])


def test_swap_twice_is_identity():
    assert np.array_equal(_collect(swap(swap(_Data(DATA)))), DATA)


def test_mono_and_swap_propagate_errors():
    src = _Data(DATA)
    src.error = RuntimeError("x")
    assert mono(src).err() is src.error
    assert swap(src).err() is src.error