# qcomm/circuit.py
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from qcomm.errors import CircuitDepthError
from qcomm.quantum_backend import QuantumGate
from qcomm.state import QuantumState, validate_qubits

Operation = Tuple[QuantumGate, List[int]]


class QuantumCircuit:
    """
    Ordered gate list that can be replayed onto a QuantumState.

    Every modeled gate is lossless, so ``expected_fidelity`` stays 1.0.
    """

    def __init__(self, circuit_id: str, qubit_count: int, *, max_depth: Optional[int] = None):
        self.id = circuit_id
        self.qubit_count = qubit_count
        self.max_depth = max_depth
        self.operations: List[Operation] = []
        self.depth = 0
        self.expected_fidelity = 1.0

    def _calculate_fidelity(self) -> float:
        # Empty or not, a circuit of modeled gates is lossless.
        return 1.0

    def add_gate(self, gate: QuantumGate | str, qubits: Sequence[int]) -> None:
        gate = QuantumGate.parse(gate)
        targets = validate_qubits(gate, qubits, self.qubit_count)
        if self.max_depth is not None and self.depth >= self.max_depth:
            raise CircuitDepthError(self.id, self.max_depth)
        self.operations.append((gate, targets))
        self.depth += 1
        self.expected_fidelity = self._calculate_fidelity()

    def execute(self, state: QuantumState) -> None:
        """
        Apply the gates in order. A failing gate stops execution; the gates
        already applied are not rolled back.
        """
        for gate, qubits in self.operations:
            state.apply_gate(gate, qubits)

    def optimize(self) -> int:
        """
        Cancel adjacent identical Pauli pairs in one pass.

        Only immediate neighbours on the same qubit list cancel, and a gate that
        follows a cancelled pair starts fresh. Returns the number of removed gates.
        """
        optimized: List[Operation] = []
        last: Optional[Operation] = None
        for gate, qubits in self.operations:
            if last is not None:
                if gate.is_pauli and gate == last[0] and qubits == last[1]:
                    last = None
                    continue
                optimized.append(last)
            last = (gate, list(qubits))
        if last is not None:
            optimized.append(last)

        removed = len(self.operations) - len(optimized)
        self.operations = optimized
        self.depth = len(self.operations)
        self.expected_fidelity = self._calculate_fidelity()
        return removed

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "qubit_count": self.qubit_count,
            "operations": [(gate.value, list(qubits)) for gate, qubits in self.operations],
            "depth": self.depth,
            "expected_fidelity": self.expected_fidelity,
        }
