# tests/test_measurement.py
import numpy as np
import pytest

from qcomm.qrng import QRNG
from qcomm.quantum_backend import QuantumGate
from qcomm.state import QuantumState


def _bell_state() -> QuantumState:
    st = QuantumState("bell", 2)
    st.apply_gate(QuantumGate.HADAMARD, [0])
    st.apply_gate(QuantumGate.CNOT, [0, 1])
    return st


@pytest.mark.parametrize("qubit, bits", [(0, [0, 0, 1]), (1, [0, 1, 0]), (2, [1, 0, 0])])
def test_bits_are_most_significant_first(qubit: int, bits: list[int]):
    """Qubit q is bit q of the basis index; the returned vector starts at the top qubit."""
    st = QuantumState("s", 3)
    st.apply_gate(QuantumGate.PAULI_X, [qubit])
    assert st.measure("m", QRNG(seed=0)) == bits


@pytest.mark.parametrize("seed", list(range(32)))
def test_bell_state_only_yields_correlated_outcomes(seed: int):
    st = _bell_state()
    out = st.measure("m", QRNG(seed=seed))
    assert out in ([0, 0], [1, 1])


def test_bell_state_hits_both_outcomes():
    rng = QRNG(seed=99)
    seen = set()
    for _ in range(64):
        seen.add(tuple(_bell_state().measure("m", rng)))
    assert seen == {(0, 0), (1, 1)}


@pytest.mark.parametrize("seed", list(range(8)))
def test_repeated_measurement_is_stable_after_collapse(seed: int):
    rng = QRNG(seed=seed)
    st = QuantumState("s", 3)
    st.create_superposition(rng)
    first = st.measure("first", rng)
    second = st.measure("second", rng)
    assert first == second


def test_collapse_resets_amplitudes_and_phases():
    rng = QRNG(seed=5)
    st = QuantumState("s", 2)
    st.create_superposition(rng)
    bits = st.measure("m", rng)

    index = int("".join(map(str, bits)), 2)
    expected = np.zeros(4)
    expected[index] = 1.0
    assert np.array_equal(st.amplitudes, expected)
    assert np.all(st.phases == 0.0)
    assert st.fidelity == 1.0


def test_measurement_is_cached_by_id():
    st = QuantumState("s", 2)
    st.apply_gate(QuantumGate.PAULI_X, [1])
    bits = st.measure("key-1", QRNG(seed=0))
    assert st.get_measurement("key-1") == bits == [1, 0]
    assert st.get_measurement("missing") is None


@pytest.mark.parametrize("u, bits", [(0.25, [0, 0]), (0.75, [0, 1]), (0.0, [0, 0])])
def test_lowest_index_reaching_the_draw_wins(fixed_rng, u: float, bits: list[int]):
    st = QuantumState("s", 2)
    st.apply_gate(QuantumGate.HADAMARD, [0])  # P = [.5, .5, 0, 0]
    assert st.measure("m", fixed_rng([u])) == bits


def test_draw_beyond_total_probability_defaults_to_zero(fixed_rng):
    st = QuantumState("s", 2)
    st.apply_gate(QuantumGate.PAULI_X, [0])
    st.apply_gate(QuantumGate.PAULI_X, [1])
    assert st.measure("m", fixed_rng([2.0])) == [0, 0]


def test_zero_draw_never_selects_an_empty_basis_state(fixed_rng):
    st = QuantumState("s", 2)
    st.apply_gate(QuantumGate.PAULI_X, [1])
    assert st.measure("m", fixed_rng([0.0])) == [1, 0]


def test_superposition_is_uniform_with_bounded_phases():
    st = QuantumState("s", 3)
    st.create_superposition(QRNG(seed=3))
    assert np.allclose(st.amplitudes, np.full(8, 1 / np.sqrt(8)))
    assert st.fidelity == pytest.approx(1.0)
    assert np.all((st.phases >= 0.0) & (st.phases < 2 * np.pi))


def test_phases_do_not_change_probabilities():
    st = QuantumState("s", 2)
    st.apply_gate(QuantumGate.HADAMARD, [0])
    before = st.probabilities().copy()
    st.apply_gate(QuantumGate.T, [0])
    st.apply_gate(QuantumGate.PAULI_Z, [0])
    assert np.array_equal(st.probabilities(), before)


def test_snapshot_is_detached():
    st = QuantumState("s", 1)
    snap = st.copy()
    snap.apply_gate(QuantumGate.PAULI_X, [0])
    assert st.amplitudes[0] == 1.0
