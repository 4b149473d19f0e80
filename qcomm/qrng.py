# qcomm/qrng.py
from __future__ import annotations

import secrets
from typing import Optional

import numpy as np


class QRNG:
    """
    Shared quantum-random source for the core.

    Wraps a numpy ``Generator`` seeded from OS entropy. Pass ``seed`` to get a
    reproducible stream (tests, benchmarks). Not thread-safe; ``QuantumCore``
    only touches it under its own lock.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seeded = seed is not None
        if seed is None:
            seed = secrets.randbits(128)
        self._gen = np.random.Generator(np.random.PCG64(seed))

    def gen_range(self, low: int, high: int) -> int:
        """Uniform integer in ``[low, high)``."""
        if high <= low:
            raise ValueError(f"Empty range [{low}, {high})")
        return int(self._gen.integers(low, high))

    def uniform(self) -> float:
        """Uniform float in ``[0, 1)``."""
        return float(self._gen.random())

