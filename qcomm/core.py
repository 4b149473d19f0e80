# qcomm/core.py
from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from qcomm.circuit import QuantumCircuit
from qcomm.errors import (
    InsufficientQubitsError,
    InvalidQubitsError,
    QuantumOperationError,
    QubitIndexError,
    QubitLimitError,
    UnknownCircuitError,
    UnknownStateError,
)
from qcomm.operations import (
    SUCCESS,
    BellPairResult,
    CreateBellState,
    CreateEntanglement,
    ErrorCorrection,
    MeasureRandom,
    PrepareCommState,
    QuantumOperation,
    Teleport,
    available_operations,
)
from qcomm.qrng import QRNG
from qcomm.quantum_backend import CapabilityProvider, QuantumGate
from qcomm.settings import Settings
from qcomm.simulation_backend import SimulatedCapabilityProvider
from qcomm.state import QuantumState, RandomSource, as_indices, validate_qubits

log = logging.getLogger("qcomm.core")

ENTANGLEMENT_STRENGTH = 0.95


class ProtocolQuantumApi(ABC):
    """Stateful surface: named registers, real amplitudes, Born-rule outcomes."""

    @abstractmethod
    def create_comm_state(self, state_id: Optional[str], qubit_count: int) -> str: ...

    @abstractmethod
    def create_entangled_state(self, state_id: str) -> None: ...

    @abstractmethod
    def generate_quantum_random(self, state_id: str, bit_count: int) -> List[int]: ...

    @abstractmethod
    def perform_operation(self, state_id: str, operation: QuantumOperation) -> List[int]: ...

    @abstractmethod
    def create_circuit(self, circuit_id: Optional[str], qubit_count: int) -> str: ...

    @abstractmethod
    def add_gate_to_circuit(self, circuit_id: str, gate: QuantumGate | str, qubits: Sequence[int]) -> None: ...

    @abstractmethod
    def execute_circuit(self, circuit_id: str, state_id: str) -> None: ...

    @abstractmethod
    def cleanup_old_states(self, max_age: Optional[float] = None, *, now: Optional[float] = None) -> int: ...


class DiagnosticQuantumApi(ABC):
    """
    Throughput surface: synthetic Bell pairs and coin-flip measurements.

    Nothing here reads or writes a registered state's amplitudes; results are
    not suitable as key material.
    """

    @abstractmethod
    def create_bell_pair(self, qubit1: int, qubit2: int) -> BellPairResult: ...

    @abstractmethod
    def measure_qubits(self, indices: Sequence[int]) -> List[bool]: ...


class QuantumCore(ProtocolQuantumApi, DiagnosticQuantumApi):
    """
    Owns every QuantumState and QuantumCircuit plus the shared QRNG.

    All public methods run under one re-entrant lock, so a core can be shared
    between threads. States live until `cleanup_old_states` removes them.
    """

    def __init__(
        self,
        max_qubits: int = 4,
        *,
        rng: Optional[RandomSource] = None,
        provider: Optional[CapabilityProvider] = None,
        enable_hardware: bool = True,
        max_circuit_depth: Optional[int] = None,
        fidelity_threshold: float = 1.0,
        error_correction: bool = False,
        cleanup_interval: float = 300.0,
    ):
        if max_qubits < 1:
            raise ValueError("max_qubits must be positive")
        self.max_qubits = max_qubits
        self.max_circuit_depth = max_circuit_depth
        self.fidelity_threshold = fidelity_threshold
        self.error_correction = error_correction
        self.cleanup_interval = cleanup_interval

        self._states: Dict[str, QuantumState] = {}
        self._circuits: Dict[str, QuantumCircuit] = {}
        self._rng: RandomSource = rng if rng is not None else QRNG()
        self._lock = threading.RLock()

        self.provider: CapabilityProvider = provider or SimulatedCapabilityProvider()
        # Status only; the simulator never branches on this flag.
        self.hardware_enabled = self.provider.detect() if enable_hardware else False

        self.total_measurements = 0
        self.total_quantum_operations = 0
        log.info(f"Quantum core ready: max_qubits={max_qubits}, hardware={self.hardware_enabled}")

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> QuantumCore:
        return cls(
            max_qubits=settings.MAX_QUBITS,
            enable_hardware=settings.ENABLE_HARDWARE,
            max_circuit_depth=settings.MAX_CIRCUIT_DEPTH,
            fidelity_threshold=settings.FIDELITY_THRESHOLD,
            error_correction=settings.ENABLE_ERROR_CORRECTION,
            cleanup_interval=settings.CLEANUP_INTERVAL_SECONDS,
            **kwargs,
        )

    # ---------- internal helpers ----------

    def _state(self, state_id: str) -> QuantumState:
        try:
            return self._states[state_id]
        except KeyError:
            raise UnknownStateError(state_id)

    def _circuit(self, circuit_id: str) -> QuantumCircuit:
        try:
            return self._circuits[circuit_id]
        except KeyError:
            raise UnknownCircuitError(circuit_id)

    def _check_register_size(self, qubit_count: int) -> None:
        if qubit_count > self.max_qubits:
            raise QubitLimitError(qubit_count, self.max_qubits)
        if qubit_count < 1:
            raise QuantumOperationError(f"Register needs at least one qubit, got {qubit_count}")

    def _measure(self, state: QuantumState, prefix: str) -> List[int]:
        self.total_measurements += 1
        return state.measure(f"{prefix}_{time.time_ns()}", self._rng)

    def _record_operation(self, kind: str, duration_ns: int) -> None:
        self.total_quantum_operations += 1
        log.debug(f"Quantum operation '{kind}' completed in {duration_ns}ns")

    @staticmethod
    def _check_indices(qubits: Sequence[int], bound: int, operation: str) -> List[int]:
        out = as_indices(qubits, operation)
        for q in out:
            if q < 0 or q >= bound:
                raise QubitIndexError(q, bound, operation)
        return out

    # ---------- protocol mode: states ----------

    def create_comm_state(self, state_id: Optional[str] = None, qubit_count: int = 2) -> str:
        """
        Register a fresh ``|0...0>`` state and return its id.

        Without `state_id` a unique handle is generated. A caller-supplied id
        that is already registered is replaced by the new state.
        """
        with self._lock:
            self._check_register_size(qubit_count)
            sid = state_id if state_id is not None else uuid4().hex
            if sid in self._states:
                log.debug(f"Replacing existing state id={sid}")
            self._states[sid] = QuantumState(sid, qubit_count)
            return sid

    def create_entangled_state(self, state_id: str) -> None:
        """Turn qubits 0 and 1 of the state into a Bell pair (H then CNOT)."""
        with self._lock:
            state = self._state(state_id)
            if state.qubit_count < 2:
                raise InsufficientQubitsError(2, state.qubit_count, "entanglement")
            state.apply_gate(QuantumGate.HADAMARD, [0])
            state.apply_gate(QuantumGate.CNOT, [0, 1])

    def generate_quantum_random(self, state_id: str, bit_count: int) -> List[int]:
        """
        Superpose, measure, and return at most ``min(bit_count, qubit_count)`` bits.
        The result is never padded.
        """
        with self._lock:
            if bit_count < 0:
                raise QuantumOperationError(f"bit_count must be non-negative, got {bit_count}")
            state = self._state(state_id)
            state.create_superposition(self._rng)
            bits = self._measure(state, f"random_{state_id}")
            return bits[:bit_count]

    def perform_operation(self, state_id: str, operation: QuantumOperation) -> List[int]:
        """Run one protocol operation on a registered state and return its bits."""
        with self._lock:
            state = self._state(state_id)
            start = time.perf_counter_ns()

            if isinstance(operation, CreateEntanglement):
                result = self._op_entangle(state, operation)
            elif isinstance(operation, MeasureRandom):
                result = self._measure(state, "op_measure")
            elif isinstance(operation, Teleport):
                result = self._op_teleport(state, operation)
            elif isinstance(operation, PrepareCommState):
                result = self._op_prepare(state, operation)
            elif isinstance(operation, CreateBellState):
                qubits = validate_qubits(QuantumGate.CNOT, [operation.qubit1, operation.qubit2], state.qubit_count)
                state.apply_gate(QuantumGate.HADAMARD, [qubits[0]])
                state.apply_gate(QuantumGate.CNOT, qubits)
                result = list(SUCCESS)
            elif isinstance(operation, ErrorCorrection):
                result = self._op_error_correction(state, operation)
            else:
                raise QuantumOperationError(f"Unsupported operation: {operation!r}")

            self._record_operation(type(operation).__name__, time.perf_counter_ns() - start)
            return result

    def _op_entangle(self, state: QuantumState, op: CreateEntanglement) -> List[int]:
        qubits = self._check_indices(op.qubits, state.qubit_count, "CreateEntanglement")
        if len(qubits) < 2:
            raise InsufficientQubitsError(2, len(qubits), "entanglement")
        if len(set(qubits)) != len(qubits):
            raise InvalidQubitsError("CreateEntanglement", qubits, "qubits must be distinct")
        head = qubits[0]
        state.apply_gate(QuantumGate.HADAMARD, [head])
        for q in qubits[1:]:
            state.apply_gate(QuantumGate.CNOT, [head, q])
        return list(SUCCESS)

    def _op_teleport(self, state: QuantumState, op: Teleport) -> List[int]:
        source, target = self._check_indices([op.source, op.target], state.qubit_count, "Teleport")
        if source == target:
            raise InvalidQubitsError("Teleport", [source, target], "source and target must differ")
        aux = min(state.qubit_count - 1, source + 1)
        if aux == source:
            raise InvalidQubitsError("Teleport", [source, target], "no auxiliary qubit above source")

        # Entangle aux with source, then rotate source/target into the Bell basis.
        state.apply_gate(QuantumGate.HADAMARD, [aux])
        state.apply_gate(QuantumGate.CNOT, [aux, source])
        state.apply_gate(QuantumGate.CNOT, [source, target])
        state.apply_gate(QuantumGate.HADAMARD, [source])

        bell = self._measure(state, "teleport_bell")
        if bell[0] == 1:
            state.apply_gate(QuantumGate.PAULI_Z, [aux])
        if bell[1] == 1:
            state.apply_gate(QuantumGate.PAULI_X, [aux])
        return bell

    def _op_prepare(self, state: QuantumState, op: PrepareCommState) -> List[int]:
        for i, bit in enumerate(op.encoding[: state.qubit_count]):
            if bit == 1:
                state.apply_gate(QuantumGate.PAULI_X, [i])
        return list(op.encoding)

    def _op_error_correction(self, state: QuantumState, op: ErrorCorrection) -> List[int]:
        data = self._check_indices(op.data_qubits, state.qubit_count, "ErrorCorrection")
        ancilla = self._check_indices(op.ancilla_qubits, state.qubit_count, "ErrorCorrection")
        overlap = sorted(set(data) & set(ancilla))
        if overlap:
            raise InvalidQubitsError("ErrorCorrection", overlap, "data and ancilla qubits overlap")
        for d in data:
            for a in ancilla:
                state.apply_gate(QuantumGate.CNOT, [d, a])
        return self._measure(state, "error_correction")

    # ---------- protocol mode: circuits ----------

    def create_circuit(self, circuit_id: Optional[str] = None, qubit_count: int = 2) -> str:
        with self._lock:
            self._check_register_size(qubit_count)
            cid = circuit_id if circuit_id is not None else uuid4().hex
            self._circuits[cid] = QuantumCircuit(cid, qubit_count, max_depth=self.max_circuit_depth)
            return cid

    def add_gate_to_circuit(self, circuit_id: str, gate: QuantumGate | str, qubits: Sequence[int]) -> None:
        with self._lock:
            self._circuit(circuit_id).add_gate(gate, qubits)

    def execute_circuit(self, circuit_id: str, state_id: str) -> None:
        with self._lock:
            circuit = self._circuit(circuit_id)
            state = self._state(state_id)
            circuit.execute(state)

    def optimize_circuit(self, circuit_id: str) -> int:
        with self._lock:
            removed = self._circuit(circuit_id).optimize()
            log.debug(f"Optimized circuit {circuit_id}: removed {removed} gate(s)")
            return removed

    def get_circuit_info(self, circuit_id: str) -> Optional[dict]:
        with self._lock:
            circuit = self._circuits.get(circuit_id)
            return circuit.to_dict() if circuit is not None else None

    # ---------- protocol mode: housekeeping ----------

    def cleanup_old_states(self, max_age: Optional[float] = None, *, now: Optional[float] = None) -> int:
        """
        Drop every state at least `max_age` seconds old. Returns how many went.

        `max_age` defaults to the core's `cleanup_interval`.
        """
        if max_age is None:
            max_age = self.cleanup_interval
        with self._lock:
            current = time.time() if now is None else now
            stale = [sid for sid, st in self._states.items() if current - st.created_at >= max_age]
            for sid in stale:
                del self._states[sid]
            if stale:
                log.info(f"Cleaned up {len(stale)} state(s) older than {max_age}s")
            return len(stale)

    def get_state_info(self, state_id: str) -> Optional[QuantumState]:
        """Snapshot of a registered state, or None."""
        with self._lock:
            state = self._states.get(state_id)
            return state.copy() if state is not None else None

    def get_measurement(self, state_id: str, measurement_id: str) -> Optional[List[int]]:
        with self._lock:
            return self._state(state_id).get_measurement(measurement_id)

    @staticmethod
    def available_operations() -> List[QuantumOperation]:
        return available_operations()

    # ---------- diagnostic mode ----------

    def average_fidelity(self) -> float:
        """Mean sum(amplitude**2) over registered states; 1.0 when there are none."""
        with self._lock:
            if not self._states:
                return 1.0
            total = sum(float((st.amplitudes * st.amplitudes).sum()) for st in self._states.values())
            return total / len(self._states)

    def _logical_gate(self, key: str, kind: str) -> None:
        start = time.perf_counter_ns()
        circuit = self._circuits.get(key)
        if circuit is not None:
            circuit.depth += 1
        self._record_operation(kind, time.perf_counter_ns() - start)

    def create_bell_pair(self, qubit1: int, qubit2: int) -> BellPairResult:
        """
        Book-keep a Hadamard/CNOT pair on two logical qubits.

        No registered state is modified; the reported fidelity is the current
        average over all states.
        """
        with self._lock:
            start = time.perf_counter_ns()
            q1, q2 = self._check_indices([qubit1, qubit2], self.max_qubits, "Bell pair")
            if q1 == q2:
                raise InvalidQubitsError("Bell pair", [q1, q2], "cannot pair a qubit with itself")

            self._logical_gate(f"Hadamard_{q1}", "hadamard")
            self._logical_gate(f"CNOT_{q1}_{q2}", "cnot")

            fidelity = self.average_fidelity()
            circuit = self._circuits.get(f"Bell_pair_{q1}_{q2}")
            if circuit is not None:
                circuit.expected_fidelity *= fidelity

            return BellPairResult(
                qubit1=q1,
                qubit2=q2,
                fidelity=fidelity,
                entanglement_strength=ENTANGLEMENT_STRENGTH,
                creation_time_ns=time.perf_counter_ns() - start,
            )

    def measure_qubits(self, indices: Sequence[int]) -> List[bool]:
        """Independent fair coin per index, unrelated to any state's amplitudes."""
        with self._lock:
            start = time.perf_counter_ns()
            qubits = self._check_indices(indices, self.max_qubits, "measurement")
            results = []
            for _ in qubits:
                results.append(self._rng.gen_range(0, 1000) / 1000.0 < 0.5)
                self.total_measurements += 1
            self._record_operation("measurement", time.perf_counter_ns() - start)
            return results

    # ---------- status ----------

    def get_hardware_status(self) -> Dict[str, Any]:
        with self._lock:
            return self.provider.status()

    def get_system_status(self) -> Dict[str, Any]:
        with self._lock:
            avg = self.average_fidelity()
            return {
                "active_states": len(self._states),
                "max_qubits": self.max_qubits,
                "total_circuits": len(self._circuits),
                "average_fidelity": avg,
                "fidelity_threshold": self.fidelity_threshold,
                "fidelity_ok": avg >= self.fidelity_threshold - 1e-9,
                "total_measurements": self.total_measurements,
                "total_quantum_operations": self.total_quantum_operations,
                "born_rule_measurements": True,
                "real_teleportation": True,
                "proper_phase_gates": True,
                "enhanced_gates": True,
                "circuit_optimization": True,
                "error_correction_enabled": self.error_correction,
                "hardware_enabled": self.hardware_enabled,
                "hardware_interface": self.provider.status(),
            }
