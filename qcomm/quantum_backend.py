# qcomm/quantum_backend.py
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any, Dict, List

from qcomm.errors import QuantumOperationError


class QuantumGate(StrEnum):
    """
    Closed set of unitary gates understood by the simulator.
    """

    # Single-qubit
    HADAMARD = "H"
    PAULI_X = "X"
    PAULI_Y = "Y"
    PAULI_Z = "Z"
    PHASE = "PHASE"
    T = "T"
    S = "S"

    # Two-qubit
    CNOT = "CNOT"

    @property
    def arity(self) -> int:
        return 2 if self is QuantumGate.CNOT else 1

    @property
    def is_pauli(self) -> bool:
        return self in (QuantumGate.PAULI_X, QuantumGate.PAULI_Y, QuantumGate.PAULI_Z)

    @classmethod
    def parse(cls, gate: QuantumGate | str) -> QuantumGate:
        """Accept an enum member, its value ("H", "CNOT") or its name ("HADAMARD")."""
        if isinstance(gate, QuantumGate):
            return gate
        key = gate.strip().upper()
        try:
            return cls(key)
        except ValueError:
            pass
        try:
            return cls[key]
        except KeyError:
            raise QuantumOperationError(f"Unsupported gate: {gate}")


class CapabilityProvider(ABC):
    """
    Reports what quantum backend is available to the core.

    Providers are status-only: the simulator computes the same numbers no
    matter what `detect()` returns.
    """

    @abstractmethod
    def detect(self) -> bool:
        """Probe for a physical backend; return True if one is usable."""
        ...

    @abstractmethod
    def status(self) -> Dict[str, Any]:
        """
        Diagnostic snapshot with keys
        'available', 'architecture', 'qubits', 'operations', 'error_rates'.
        """
        ...

    @abstractmethod
    def error_rate(self, operation: str) -> float:
        """Error rate for an operation class ('single_qubit', 'two_qubit', 'measurement')."""
        ...

    @abstractmethod
    def update_error_rate(self, operation: str, error_rate: float) -> None:
        ...

    @property
    @abstractmethod
    def supported_operations(self) -> List[str]:
        ...
