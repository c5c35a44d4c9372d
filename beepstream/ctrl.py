"""Pausing and stopping a wrapped streamer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .streamer import Streamer


@dataclass
class Ctrl(Streamer):
    """Wraps a streamer so it can be paused or stopped.

    While ``paused`` the output is silence. Setting ``streamer`` to ``None``
    makes the control act as drained.
    """

    streamer: Optional[Streamer] = None
    paused: bool = False

    def stream(self, samples):
        source = self.streamer
        if source is None:
            return 0, False
        if not self.paused:
            return source.stream(samples)
        samples[:] = 0.0
        return len(samples), True

    def err(self):
        return None if self.streamer is None else self.streamer.err()