# qcomm/errors.py
from __future__ import annotations

from typing import Optional, Sequence


class QuantumOperationError(ValueError):
    """Base error for every rejected quantum-core call.

    Validation happens before any mutation, so a raised error means the
    target state or circuit is unchanged (``QuantumCircuit.execute`` is the
    one exception: gates before the failing one stay applied).
    """


class QubitIndexError(QuantumOperationError):
    """A qubit index is outside ``0..bound-1``."""

    def __init__(self, index: int, bound: int, operation: str):
        self.index = index
        self.bound = bound
        self.operation = operation
        super().__init__(f"Qubit index {index} out of range for {operation} (bound {bound})")


class InvalidQubitsError(QuantumOperationError):
    """The qubit list is well-indexed but unusable (arity, duplicates, overlaps)."""

    def __init__(self, operation: str, qubits: Sequence[int], reason: str):
        self.operation = operation
        self.qubits = list(qubits)
        self.reason = reason
        super().__init__(f"{operation} on qubits {self.qubits}: {reason}")


class InsufficientQubitsError(QuantumOperationError):
    def __init__(self, required: int, actual: int, operation: str):
        self.required = required
        self.actual = actual
        self.operation = operation
        super().__init__(f"{operation} needs at least {required} qubits, got {actual}")


class QubitLimitError(QuantumOperationError):
    """Requested register size exceeds the configured maximum."""

    def __init__(self, requested: int, maximum: int):
        self.requested = requested
        self.maximum = maximum
        super().__init__(f"Requested qubits ({requested}) exceeds maximum ({maximum})")


class UnknownStateError(QuantumOperationError):
    def __init__(self, state_id: str):
        self.state_id = state_id
        super().__init__(f"State not found: {state_id}")


class UnknownCircuitError(QuantumOperationError):
    def __init__(self, circuit_id: str):
        self.circuit_id = circuit_id
        super().__init__(f"Circuit not found: {circuit_id}")


class CircuitDepthError(QuantumOperationError):
    def __init__(self, circuit_id: str, max_depth: Optional[int]):
        self.circuit_id = circuit_id
        self.max_depth = max_depth
        super().__init__(f"Circuit {circuit_id} reached its maximum depth ({max_depth})")
