"""Dynamic mixing of any number of streamers."""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from .streamer import StreamResult, Streamer

_CHUNK = 512


class Mixer(Streamer):
    """Mixes streamers together, dropping them as they drain.

    By default the mixer keeps producing silence when it is empty; call
    ``keep_alive(False)`` to make it drain instead.
    """

    def __init__(self, *args: Streamer) -> None:
        self._streamers: List[Streamer] = list(args)
        self._stop_when_empty = False

    def keep_alive(self, keep_alive: bool) -> None:
        """Choose between streaming silence (True) and draining (False) when empty."""
        self._stop_when_empty = not keep_alive

    def __len__(self) -> int:
        return len(self._streamers)

    def add(self, *args: Streamer) -> None:
        """Add streamers to the mix."""
        self._streamers.extend(args)

    def clear(self) -> None:
        """Remove every streamer."""
        self._streamers.clear()

    def stream(self, samples: np.ndarray) -> StreamResult:
        if self._stop_when_empty and not self._streamers:
            return 0, False

        tmp = np.zeros((_CHUNK, 2))
        n = 0
        while len(samples) > 0:
            to_stream = min(len(tmp), len(samples))
            samples[:to_stream] = 0.0

            sn_max = 0
            si = 0
            while si < len(self._streamers):
                sn, sok = self._streamers[si].stream(tmp[:to_stream])
                samples[:sn] += tmp[:sn]
                sn_max = max(sn_max, sn)

                if sn < to_stream or not sok:
                    # The streamer may have cleared the mixer through a callback.
                    if self._streamers:
                        last = self._streamers.pop()
                        if si < len(self._streamers):
                            self._streamers[si] = last
                        si -= 1
                    if self._stop_when_empty and not self._streamers:
                        return n + sn_max, True
                si += 1

            samples = samples[to_stream:]
            n += to_stream

        return n, True

    def err(self) -> Optional[BaseException]:
        """Always ``None``: failing streamers are simply drained and removed."""
        return None