# tests/test_core_diagnostic.py
import numpy as np
import pytest

from qcomm.core import DiagnosticQuantumApi, ProtocolQuantumApi, QuantumCore
from qcomm.errors import InvalidQubitsError, QubitIndexError
from qcomm.operations import BellPairResult, PrepareCommState
from qcomm.qrng import QRNG


def test_core_exposes_both_surfaces(core: QuantumCore):
    assert isinstance(core, ProtocolQuantumApi)
    assert isinstance(core, DiagnosticQuantumApi)


def test_bell_pair_without_states(core: QuantumCore):
    res = core.create_bell_pair(0, 1)
    assert isinstance(res, BellPairResult)
    assert (res.qubit1, res.qubit2) == (0, 1)
    assert res.fidelity == 1.0
    assert res.entanglement_strength == 0.95
    assert res.creation_time_ns >= 0


def test_bell_pair_leaves_registered_states_alone(core: QuantumCore):
    core.create_comm_state("s", 2)
    core.perform_operation("s", PrepareCommState(encoding=[1, 0]))
    before = core.get_state_info("s").amplitudes.copy()

    core.create_bell_pair(0, 1)

    assert np.array_equal(core.get_state_info("s").amplitudes, before)


def test_bell_pair_fidelity_is_state_average(core: QuantumCore):
    core.create_comm_state("a", 2)
    core.create_comm_state("b", 3)
    core.create_entangled_state("b")
    assert core.create_bell_pair(2, 3).fidelity == pytest.approx(1.0)
    assert core.average_fidelity() == pytest.approx(1.0)


@pytest.mark.parametrize("q1, q2, error", [(0, 4, QubitIndexError), (-1, 0, QubitIndexError), (2, 2, InvalidQubitsError)])
def test_bell_pair_validation(core: QuantumCore, q1: int, q2: int, error):
    with pytest.raises(error):
        core.create_bell_pair(q1, q2)


def test_bell_pair_bookkeeping_on_named_circuits(core: QuantumCore):
    core.create_circuit("Hadamard_0", 1)
    core.create_circuit("CNOT_0_1", 2)
    core.create_circuit("Bell_pair_0_1", 2)
    ops_before = core.get_system_status()["total_quantum_operations"]

    core.create_bell_pair(0, 1)

    assert core.get_circuit_info("Hadamard_0")["depth"] == 1
    assert core.get_circuit_info("CNOT_0_1")["depth"] == 1
    assert core.get_circuit_info("Bell_pair_0_1")["expected_fidelity"] == pytest.approx(1.0)
    assert core.get_system_status()["total_quantum_operations"] == ops_before + 2


def test_measure_qubits_returns_one_bool_per_index(core: QuantumCore):
    out = core.measure_qubits([0, 1, 2, 3, 0])
    assert len(out) == 5
    assert all(isinstance(b, bool) for b in out)
    assert core.get_system_status()["total_measurements"] == 5


def test_measure_qubits_validates_all_indices_first(core: QuantumCore):
    with pytest.raises(QubitIndexError):
        core.measure_qubits([0, 1, 9])
    assert core.get_system_status()["total_measurements"] == 0


def test_measure_qubits_is_roughly_fair():
    core = QuantumCore(4, rng=QRNG(seed=2024))
    draws = core.measure_qubits([0, 1, 2, 3] * 500)
    assert 0.45 < sum(draws) / len(draws) < 0.55


def test_measure_qubits_ignores_state_amplitudes():
    """Registers pinned to |1...1> do not bias the diagnostic sampler."""
    core = QuantumCore(4, rng=QRNG(seed=8))
    core.create_comm_state("ones", 4)
    core.perform_operation("ones", PrepareCommState(encoding=[1, 1, 1, 1]))
    draws = core.measure_qubits([0] * 400)
    assert 0 < sum(draws) < 400
    assert core.get_state_info("ones").amplitudes[15] == 1.0
