"""Reading WAVE files as seekable streamers."""

from __future__ import annotations

import struct
from typing import BinaryIO, Optional, Tuple

import numpy as np

from ..format import Format, SampleRate
from ..streamer import StreamResult, StreamSeekCloser
from .encode import WavHeader

_INT16 = struct.Struct("<h")
_INT32 = struct.Struct("<i")
_FORMAT_CHUNK = struct.Struct("<hiihh")
_EXTENSIBLE_TAIL = struct.Struct("<hhi")
_GUID = struct.Struct("<ihh8s")
_PCM_GUID = (0x00000001, 0x0000, 0x0010, bytes([0x80, 0x00, 0x00, 0xAA, 0x00, 0x38, 0x9B, 0x71]))

_FORMAT_PCM = 1
_FORMAT_FLOAT = 3
_FORMAT_EXTENSIBLE = -2


def _read(r: BinaryIO, size: int, what: str) -> bytes:
    data = r.read(size)
    if data is None or len(data) < size:
        raise ValueError(f"wav: {what}")
    return bytes(data)


def _read_int32(r: BinaryIO, what: str) -> int:
    return _INT32.unpack(_read(r, 4, what))[0]


def _read_int16(r: BinaryIO, what: str) -> int:
    return _INT16.unpack(_read(r, 2, what))[0]


def _apply_format_chunk(header: WavHeader, body: bytes) -> None:
    (
        header.num_chans,
        header.sample_rate,
        header.byte_rate,
        header.bytes_per_frame,
        header.bits_per_sample,
    ) = _FORMAT_CHUNK.unpack(body)


def _read_fmt_chunk(r: BinaryIO, header: WavHeader) -> None:
    header.format_size = _read_int32(r, "missing format chunk size")
    header.format_type = _read_int16(r, "missing format type")
    if header.format_type == _FORMAT_EXTENSIBLE:
        body = _read(
            r,
            _FORMAT_CHUNK.size + _EXTENSIBLE_TAIL.size + _GUID.size,
            "missing format chunk body",
        )
        _apply_format_chunk(header, body[: _FORMAT_CHUNK.size])
        sub_format = _GUID.unpack(body[_FORMAT_CHUNK.size + _EXTENSIBLE_TAIL.size :])
        if sub_format != _PCM_GUID:
            d1, d2, d3, d4 = sub_format
            raise ValueError(
                f"wav: unsupported sub format type - {d1:08x}-{d2:04x}-{d3:04x}-{d4.hex()}"
            )
    else:
        _apply_format_chunk(header, _read(r, _FORMAT_CHUNK.size, "missing format chunk body"))
        if header.format_size > 16:
            _read(r, header.format_size - 16, "missing extended format chunk body")


def _read_header(r: BinaryIO) -> Tuple[WavHeader, int]:
    header = WavHeader(
        riff_mark=b"",
        file_size=0,
        wave_mark=b"",
        fmt_mark=b"\x00" * 4,
        format_size=0,
        format_type=0,
        data_mark=b"\x00" * 4,
        data_size=0,
    )

    header.riff_mark = _read(r, 4, "missing RIFF mark")
    if header.riff_mark != b"RIFF":
        raise ValueError(
            f"wav: missing RIFF at the beginning > {header.riff_mark.decode('latin-1')}"
        )
    header.file_size = _read_int32(r, "missing RIFF file size")
    header.wave_mark = _read(r, 4, "missing RIFF file type")
    if header.wave_mark != b"WAVE":
        raise ValueError("wav: unsupported file type")

    header_size = 4 + 4 + 4
    chunk_type = b""
    while chunk_type != b"data":
        chunk_type = _read(r, 4, "missing chunk type")
        if chunk_type == b"fmt ":
            header.fmt_mark = chunk_type
            _read_fmt_chunk(r, header)
            header_size += 4 + 4 + header.format_size
        elif chunk_type == b"data":
            header.data_mark = chunk_type
            header.data_size = _read_int32(r, "missing data chunk size")
            header_size += 4 + 4
        else:
            size = _read_int32(r, "missing unknown chunk size")
            if size % 2 != 0:
                size += 1
            _read(r, size, "missing unknown chunk body")
            header_size += 4 + 4 + size

    if header.fmt_mark != b"fmt ":
        raise ValueError("wav: missing format chunk marker")
    if header.data_mark != b"data":
        raise ValueError("wav: missing data chunk marker")
    if header.format_type not in (_FORMAT_PCM, _FORMAT_EXTENSIBLE, _FORMAT_FLOAT):
        raise ValueError(f"wav: unsupported format type - {header.format_type}")
    if header.num_chans <= 0:
        raise ValueError("wav: invalid number of channels (less than 1)")
    if header.bits_per_sample not in (8, 16, 24) and not (
        header.format_type == _FORMAT_FLOAT and header.bits_per_sample == 32
    ):
        raise ValueError(
            "wav: unsupported number of bits per sample, 8 or 16 or 24 or 32 are supported"
        )
    if header.bytes_per_frame <= 0:
        raise ValueError("wav: invalid number of bytes per frame (less than 1)")
    return header, header_size


def decode(r: BinaryIO) -> Tuple["Decoder", Format]:
    """Read a WAVE header from the binary file ``r`` and return a streamer and its format.

    The returned decoder owns ``r``: close the decoder, not ``r``. If the header
    is invalid, ``r`` is closed and ``ValueError`` is raised.
    """
    try:
        header, header_size = _read_header(r)
    except BaseException:
        close = getattr(r, "close", None)
        if close is not None:
            close()
        raise
    format = Format(
        SampleRate(header.sample_rate),
        header.num_chans,
        header.bits_per_sample // 8,
    )
    return Decoder(r, header, header_size), format


class Decoder(StreamSeekCloser):
    """Streams the sample data of a WAVE file."""

    def __init__(self, r: BinaryIO, header: WavHeader, header_size: int) -> None:
        self.header = header
        self._r = r
        self._header_size = header_size
        self._pos = 0
        self._err: Optional[BaseException] = None

    def _channel(self, frames: np.ndarray, offset: int) -> np.ndarray:
        bits = self.header.bits_per_sample
        if bits == 8:
            return frames[:, offset] / 256.0 * 2 - 1
        if bits == 16:
            raw = np.ascontiguousarray(frames[:, offset : offset + 2]).view("<i2")[:, 0]
            return raw / 32768.0
        if bits == 24:
            part = frames[:, offset : offset + 3].astype(np.int32)
            value = part[:, 0] | (part[:, 1] << 8) | (part[:, 2] << 16)
            value = np.where(value >= 1 << 23, value - (1 << 24), value)
            return value / float(1 << 23)
        raw = np.ascontiguousarray(frames[:, offset : offset + 4]).view("<f4")[:, 0]
        return raw.astype(np.float64)

    def _convert(self, data: bytes, samples: np.ndarray) -> None:
        frames = np.frombuffer(data, dtype=np.uint8).reshape(-1, self.header.bytes_per_frame)
        precision = self.header.bits_per_sample // 8
        right = precision if self.header.num_chans >= 2 else 0
        samples[:, 0] = self._channel(frames, 0)
        samples[:, 1] = self._channel(frames, right)

    def stream(self, samples: np.ndarray) -> StreamResult:
        if self._err is not None or self._pos >= self.header.data_size:
            return 0, False
        per_frame = self.header.bytes_per_frame
        wanted = min(len(samples) * per_frame, self.header.data_size - self._pos)
        try:
            data = self._r.read(wanted) or b""
        except OSError as exc:
            self._err = exc
            data = b""
        count = len(data) // per_frame
        if count:
            self._convert(bytes(data[: count * per_frame]), samples[:count])
        self._pos += len(data)
        return count, True

    def err(self) -> Optional[BaseException]:
        return self._err

    def len(self) -> int:
        return self.header.data_size // self.header.bytes_per_frame

    def position(self) -> int:
        return self._pos // self.header.bytes_per_frame

    def seek(self, p: int) -> None:
        seek = getattr(self._r, "seek", None)
        if seek is None:
            raise TypeError("wav: seek: resource is not seekable")
        if p < 0 or self.len() < p:
            raise ValueError(f"wav: seek position {p} out of range [0, {self.len()}]")
        pos = p * self.header.bytes_per_frame
        try:
            seek(pos + self._header_size)
        except OSError as exc:
            raise OSError(f"wav: seek error: {exc}") from exc
        self._pos = pos

    def close(self) -> None:
        close = getattr(self._r, "close", None)
        if close is not None:
            close()