"""Writing audio streams as WAVE files."""

from __future__ import annotations

import io
import struct
from dataclasses import dataclass
from typing import BinaryIO

import numpy as np

from ..format import Format
from ..streamer import Streamer

_HEADER_STRUCT = struct.Struct("<4si4s4sihhiihh4si")
_CHUNK = 512


@dataclass
class WavHeader:
    """The canonical 44-byte header of a PCM WAVE file."""

    riff_mark: bytes = b"RIFF"
    file_size: int = -1
    wave_mark: bytes = b"WAVE"
    fmt_mark: bytes = b"fmt "
    format_size: int = 16
    format_type: int = 1
    num_chans: int = 0
    sample_rate: int = 0
    byte_rate: int = 0
    bytes_per_frame: int = 0
    bits_per_sample: int = 0
    data_mark: bytes = b"data"
    data_size: int = -1

    def pack(self) -> bytes:
        """Return the header as little-endian bytes."""
        return _HEADER_STRUCT.pack(
            self.riff_mark,
            self.file_size,
            self.wave_mark,
            self.fmt_mark,
            self.format_size,
            self.format_type,
            self.num_chans,
            self.sample_rate,
            self.byte_rate,
            self.bytes_per_frame,
            self.bits_per_sample,
            self.data_mark,
            self.data_size,
        )


def encode(w: BinaryIO, s: Streamer, format: Format) -> None:
    """Write everything streamed from ``s`` to the seekable binary file ``w`` as WAVE.

    The format precision must be 1, 2 or 3 bytes.
    """
    if format.num_channels <= 0:
        raise ValueError("wav: invalid number of channels (less than 1)")
    if format.precision not in (1, 2, 3):
        raise ValueError("wav: unsupported precision, 1, 2 or 3 is supported")

    header = WavHeader(
        num_chans=format.num_channels,
        sample_rate=int(format.sample_rate),
        byte_rate=int(format.sample_rate) * format.num_channels * format.precision,
        bytes_per_frame=format.num_channels * format.precision,
        bits_per_sample=format.precision * 8,
    )
    w.write(header.pack())

    encode_sample = format.encode_unsigned if format.precision == 1 else format.encode_signed
    samples = np.zeros((_CHUNK, 2))
    written = 0
    while True:
        n, ok = s.stream(samples)
        if not ok:
            break
        chunk = b"".join(encode_sample(row) for row in samples[:n])
        w.write(chunk)
        written += len(chunk)

    # 44 - 8: the header without the RIFF mark and the RIFF chunk size.
    header.file_size = 44 - 8 + written
    header.data_size = written
    w.seek(0, io.SEEK_SET)
    w.write(header.pack())
    w.seek(0, io.SEEK_END)