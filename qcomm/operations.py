# qcomm/operations.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union


@dataclass(frozen=True)
class CreateEntanglement:
    """Hadamard on ``qubits[0]``, then CNOT from it to every other listed qubit."""
    qubits: List[int]


@dataclass(frozen=True)
class MeasureRandom:
    """Measure the whole register once. ``qubits`` is informational only."""
    qubits: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class Teleport:
    source: int
    target: int


@dataclass(frozen=True)
class PrepareCommState:
    """Flip qubit ``i`` for every ``encoding[i] == 1``."""
    encoding: List[int]


@dataclass(frozen=True)
class CreateBellState:
    qubit1: int
    qubit2: int


@dataclass(frozen=True)
class ErrorCorrection:
    """CNOT every data qubit onto every ancilla, then measure the syndrome."""
    data_qubits: List[int]
    ancilla_qubits: List[int]


QuantumOperation = Union[
    CreateEntanglement,
    MeasureRandom,
    Teleport,
    PrepareCommState,
    CreateBellState,
    ErrorCorrection,
]

# Success marker returned by operations that produce no measurement
SUCCESS = [1]


@dataclass
class BellPairResult:
    """Outcome of a diagnostic Bell-pair request."""
    qubit1: int
    qubit2: int
    fidelity: float
    entanglement_strength: float = 0.95
    creation_time_ns: int = 0

    def to_dict(self) -> dict:
        return {
            "qubit1": self.qubit1,
            "qubit2": self.qubit2,
            "fidelity": round(self.fidelity, 6),
            "entanglement_strength": self.entanglement_strength,
            "creation_time_ns": self.creation_time_ns,
        }


def available_operations() -> List[QuantumOperation]:
    """One example of every operation kind the protocol surface accepts."""
    return [
        CreateEntanglement(qubits=[0, 1]),
        MeasureRandom(qubits=[0]),
        Teleport(source=0, target=1),
        PrepareCommState(encoding=[0, 1]),
        CreateBellState(qubit1=0, qubit2=1),
        ErrorCorrection(data_qubits=[0, 1], ancilla_qubits=[2, 3]),
    ]
