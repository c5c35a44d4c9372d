"""Silence generator."""

from __future__ import annotations

import numpy as np

from ..streamer import StreamResult, Streamer, StreamerFunc


def silence(num: int) -> Streamer:
    """Stream ``num`` samples of silence, or silence forever if ``num`` is negative."""
    if num < 0:

        def _forever(samples: np.ndarray) -> StreamResult:
            samples[:] = 0.0
            return len(samples), True

        return StreamerFunc(_forever)

    remaining = num

    def _finite(samples: np.ndarray) -> StreamResult:
        nonlocal remaining
        if remaining <= 0:
            return 0, False
        if remaining < len(samples):
            samples = samples[:remaining]
        samples[:] = 0.0
        remaining -= len(samples)
        return len(samples), True

    return StreamerFunc(_finite)