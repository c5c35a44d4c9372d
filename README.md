# beepstream

A small library for building audio pipelines out of *streamers*: objects that fill a block of
stereo samples on request. Streamers can be mixed, sequenced, looped, resampled and run
through effects. The package also includes tone generators and WAVE encoding and decoding.
It depends on NumPy.

## Installing

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Core idea

Every streamer has a `stream(samples)` method. `samples` is a writable NumPy float array of
shape `(n, 2)`: column 0 is the left channel, column 1 the right one. The method fills the
array from the front and returns `(count, ok)`:

- `count == n` and `ok`: every requested sample was produced.
- `0 < count < n` and `ok`: the last samples were produced and the streamer is now drained.
- `count == 0` and not `ok`: the streamer is drained.

`err()` returns the exception that stopped streaming, or `None`.

Seekable streamers (`StreamSeeker`) also provide `len()`, `position()` and `seek(p)`;
`seek` raises on failure and leaves the position unchanged. `StreamCloser` adds `close()`,
and `StreamSeekCloser` combines both.

## Building blocks

- `beepstream.streamer`: the abstract classes `Streamer`, `StreamSeeker`, `StreamCloser`,
  `StreamSeekCloser`, and `StreamerFunc` for wrapping a plain function.
- `beepstream.format`: `SampleRate`, an `int` with `duration(n)` (a `timedelta`) and
  `samples(d)` (from a `timedelta`); `Format(sample_rate, num_channels, precision)` with
  `width()`, `encode_signed`, `encode_unsigned`, `decode_signed` and `decode_unsigned` for
  interleaved little-endian integer samples; and `clamp(x, lo, hi)`.
- `beepstream.buffer`: `Buffer(format)`, an in-memory store of encoded samples. `append`
  drains a streamer into it, `pop(n)` drops samples from the start, `len(buffer)` counts
  them, and `streamer(start, stop)` returns a seekable streamer over that range.
- `beepstream.ctrl`: `Ctrl(streamer, paused)`. While `paused` it streams silence; with
  `streamer` set to `None` it acts as drained.
- `beepstream.mixer`: `Mixer(*streamers)` mixes streamers, removing them as they drain. By
  default it streams silence when empty; `keep_alive(False)` makes it drain instead. It also
  has `add`, `clear` and `len(mixer)`.
- `beepstream.streamers`: `silence(num)`, `callback(func)` (calls `func` on first use and
  produces nothing) and `iterate(generate)` (streams streamers from `generate` until it
  returns `None`).
- `beepstream.compositors`: `take`, `seq`, `mix`, `dup`, `loop`, and `loop2` with the options
  `loop_times`, `loop_start`, `loop_end` and `loop_between`. `loop2` raises `ValueError`
  when the loop start is not before the stream length or the loop end.
- `beepstream.resample`: `resample(quality, old, new, s)`, `resample_ratio(quality, ratio, s)`
  and `Resampler`, which interpolates with a polynomial through `2 * quality` points and
  lets the ratio change while it plays (`ratio()`, `set_ratio()`). `quality` must be 1 to 64.

## Effects

`beepstream.effects` contains:

- `basic`: `Gain(streamer, gain)`, `Pan(streamer, pan)`,
  `Volume(streamer, base, volume, silent)`, `mono(s)` and `swap(s)`.
- `transition`: `transition(s, length, start_gain, end_gain, transition_func)`, returning a
  `TransitionStreamer`, with the curves `transition_linear` and `transition_equal_power`.
- `doppler`: `doppler(quality, samples_per_meter, s, distance)`, a sound at a changing
  distance: delayed, attenuated by the squared distance and stretched as the distance moves.
- `equalizer`: a parametric equalizer built with `new_equalizer(streamer, sample_rate,
  sections)` from `MonoEqualizerSection(f0, bf, gb, g0, g)` or
  `StereoEqualizerSection(left, right)` values. Each block passed to `Equalizer.stream` is
  filtered on its own, starting from rest.

## Generators

`beepstream.generators` contains `silence.silence` and, in `tones`, `sine_tone`,
`square_tone`, `triangle_tone`, `sawtooth_tone` and `sawtooth_tone_reversed`. The tone
functions raise `ValueError` if the sample rate is not more than twice the frequency.

## WAVE files

`beepstream.wav.encode.encode(w, s, format)` writes a streamer to a seekable binary file as
8-, 16- or 24-bit PCM; `WavHeader` is the 44-byte header it writes.
`beepstream.wav.decode.decode(r)` reads a file and returns a seekable, closable `Decoder`
together with its `Format`. It reads 8-, 16- and 24-bit PCM, WAVE_FORMAT_EXTENSIBLE PCM, and
32-bit IEEE float. On an invalid header it closes `r` and raises `ValueError`.

## What it does not do

The package does not play sound through a sound card, and it does not decode MP3, FLAC,
Ogg Vorbis or MIDI. Its only file format is WAVE; to hear a pipeline, write it to a WAVE
file with `encode`.

## Example

```python
import io
from datetime import timedelta

from beepstream.compositors import seq, take
from beepstream.effects.basic import Volume
from beepstream.format import Format, SampleRate
from beepstream.generators.tones import sine_tone, square_tone
from beepstream.wav.encode import encode

rate = SampleRate(44100)
one_second = rate.samples(timedelta(seconds=1))

melody = seq(
    take(one_second, sine_tone(rate, 440.0)),
    take(one_second, square_tone(rate, 220.0)),
)
quieter = Volume(melody, base=2, volume=-1)

out = io.BytesIO()
encode(out, quieter, Format(sample_rate=rate, num_channels=2, precision=2))
```