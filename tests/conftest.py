# tests/conftest.py
import pytest

from qcomm.core import QuantumCore
from qcomm.qrng import QRNG


class FixedRNG:
    """Random source replaying preset uniform draws; gen_range returns `low`."""

    def __init__(self, draws):
        self.draws = list(draws)

    def uniform(self) -> float:
        return self.draws.pop(0)

    def gen_range(self, low: int, high: int) -> int:
        return low


@pytest.fixture
def fixed_rng():
    return FixedRNG


@pytest.fixture
def core():
    """Four-qubit core with a seeded random source."""
    return QuantumCore(max_qubits=4, rng=QRNG(seed=1234))
