# qcomm/state.py
from __future__ import annotations

import copy
import math
import time
from typing import Dict, List, Optional, Protocol, Sequence

import numpy as np

from qcomm.errors import InvalidQubitsError, QubitIndexError
from qcomm.quantum_backend import QuantumGate

INV_SQRT2 = 1.0 / math.sqrt(2.0)

# Phase offset added where the target bit is set
PHASE_SHIFTS = {
    QuantumGate.PAULI_Z: math.pi,
    QuantumGate.PHASE: math.pi,
    QuantumGate.T: math.pi / 4.0,
    QuantumGate.S: math.pi / 2.0,
}


class RandomSource(Protocol):
    def gen_range(self, low: int, high: int) -> int: ...

    def uniform(self) -> float: ...


def as_indices(qubits: Sequence[int], operation: str) -> List[int]:
    """Plain-int copy of `qubits`; anything that is not an integer index is rejected."""
    out = []
    for q in qubits:
        if isinstance(q, bool) or not isinstance(q, (int, np.integer)):
            raise InvalidQubitsError(operation, list(qubits), "qubit indices must be integers")
        out.append(int(q))
    return out


def validate_qubits(gate: QuantumGate, qubits: Sequence[int], qubit_count: int) -> List[int]:
    """
    Check a gate's target list against a register of `qubit_count` qubits.

    Returns the targets as a plain list of ints. Raises a
    QuantumOperationError subclass without touching anything.
    """
    targets = as_indices(qubits, gate.name)
    if len(targets) != gate.arity:
        raise InvalidQubitsError(gate.name, targets, f"expects {gate.arity} qubit(s)")
    for q in targets:
        if q < 0 or q >= qubit_count:
            raise QubitIndexError(q, qubit_count, gate.name)
    if gate is QuantumGate.CNOT and targets[0] == targets[1]:
        raise InvalidQubitsError(gate.name, targets, "control and target must differ")
    return targets


class QuantumState:
    """
    Multi-qubit register with real amplitudes and bookkeeping phases.

    Amplitude ``i`` is the coefficient of computational basis state ``i``
    (qubit ``q`` is bit ``q`` of the index). Phases are tracked alongside but
    never enter measurement probabilities. ``fidelity`` is always
    ``sum(amplitudes**2)`` of the current vector.

    Attributes
    ----------
    id : str
        Handle the state is registered under.
    qubit_count : int
        Number of qubits; vectors have length ``2**qubit_count``.
    measurements : dict[str, list[int]]
        Outcome bit vectors (MSB first) keyed by measurement id.
    created_at : float
        Creation time in epoch seconds.
    """

    def __init__(self, state_id: str, qubit_count: int):
        if qubit_count < 1:
            raise ValueError("qubit_count must be positive")
        self.id = state_id
        self.qubit_count = qubit_count
        size = 2 ** qubit_count
        self.amplitudes = np.zeros(size, dtype=float)
        self.amplitudes[0] = 1.0
        self.phases = np.zeros(size, dtype=float)
        self.measurements: Dict[str, List[int]] = {}
        self.fidelity = 1.0
        self.created_at = time.time()
        self._update_fidelity()

    # ---------- internal helpers ----------

    def _normalize(self) -> None:
        norm_sq = float(np.sum(self.amplitudes * self.amplitudes))
        if norm_sq > 0.0:
            self.amplitudes /= math.sqrt(norm_sq)

    def _update_fidelity(self) -> None:
        self.fidelity = float(np.sum(self.amplitudes * self.amplitudes))

    def _indices(self) -> np.ndarray:
        return np.arange(self.amplitudes.size)

    def _swap_pairs(self, lower: np.ndarray, upper: np.ndarray) -> None:
        """Exchange amplitude and phase between each (lower[k], upper[k])."""
        self.amplitudes[lower], self.amplitudes[upper] = (
            self.amplitudes[upper].copy(),
            self.amplitudes[lower].copy(),
        )
        self.phases[lower], self.phases[upper] = self.phases[upper].copy(), self.phases[lower].copy()

    def _hadamard(self, qubit: int) -> None:
        mask = 1 << qubit
        idx = self._indices()
        flipped = idx ^ mask
        # Each index receives amplitude[i]/sqrt2 from itself and from its partner.
        self.amplitudes = (self.amplitudes + self.amplitudes[flipped]) * INV_SQRT2
        # Both members of a pair end up with the phase of the member whose bit is set.
        self.phases = self.phases[idx | mask].copy()
        self._normalize()

    def _pauli_x(self, qubit: int) -> None:
        mask = 1 << qubit
        # Only pairs whose lower index sits in the first half of the vector are swapped.
        idx = self._indices()[: self.amplitudes.size // 2]
        upper = idx ^ mask
        keep = idx < upper
        self._swap_pairs(idx[keep], upper[keep])

    def _pauli_y(self, qubit: int) -> None:
        mask = 1 << qubit
        lower = self._indices()[(self._indices() & mask) == 0]
        upper = lower | mask
        amp_lo, amp_hi = self.amplitudes[lower].copy(), self.amplitudes[upper].copy()
        ph_lo, ph_hi = self.phases[lower].copy(), self.phases[upper].copy()
        self.amplitudes[lower] = amp_hi
        self.amplitudes[upper] = amp_lo
        self.phases[lower] = ph_hi + math.pi / 2.0
        self.phases[upper] = ph_lo - math.pi / 2.0

    def _cnot(self, control: int, target: int) -> None:
        cmask, tmask = 1 << control, 1 << target
        idx = self._indices()
        lower = idx[((idx & cmask) != 0) & ((idx & tmask) == 0)]
        self._swap_pairs(lower, lower | tmask)

    def _shift_phase(self, qubit: int, angle: float) -> None:
        mask = 1 << qubit
        self.phases[(self._indices() & mask) != 0] += angle

    # ---------- public API ----------

    def apply_gate(self, gate: QuantumGate | str, qubits: Sequence[int]) -> None:
        """
        Apply `gate` to `qubits` (``[q]`` or ``[control, target]`` for CNOT).

        Raises
        ------
        QuantumOperationError
            On a bad index, wrong number of targets or CNOT control == target.
            The state is left untouched.
        """
        gate = QuantumGate.parse(gate)
        targets = validate_qubits(gate, qubits, self.qubit_count)

        if gate is QuantumGate.HADAMARD:
            self._hadamard(targets[0])
        elif gate is QuantumGate.PAULI_X:
            self._pauli_x(targets[0])
        elif gate is QuantumGate.PAULI_Y:
            self._pauli_y(targets[0])
        elif gate is QuantumGate.CNOT:
            self._cnot(targets[0], targets[1])
        else:
            self._shift_phase(targets[0], PHASE_SHIFTS[gate])

        self._update_fidelity()

    def create_superposition(self, rng: RandomSource) -> None:
        """Spread amplitude evenly over all basis states with random phases."""
        size = self.amplitudes.size
        self.amplitudes = np.full(size, 1.0 / math.sqrt(size))
        self.phases = np.array([rng.gen_range(0, 1000) * 2.0 * math.pi / 1000.0 for _ in range(size)])
        self._normalize()
        self._update_fidelity()

    def probabilities(self) -> np.ndarray:
        """Born-rule probabilities; phases play no part."""
        return self.amplitudes * self.amplitudes

    def measure(self, measurement_id: str, rng: RandomSource) -> List[int]:
        """
        Measure every qubit at once and collapse onto the outcome.

        A single uniform draw ``u`` selects the lowest basis index whose
        cumulative probability reaches ``u``; if rounding leaves no such index
        the outcome is 0. Returns the outcome as bits, most significant first,
        and caches them under `measurement_id`.
        """
        probs = self.probabilities()
        u = rng.uniform()
        cumulative = np.cumsum(probs)
        hits = np.flatnonzero((cumulative >= u) & (probs > 0.0))
        outcome = int(hits[0]) if hits.size else 0

        self.amplitudes.fill(0.0)
        self.amplitudes[outcome] = 1.0
        self.phases.fill(0.0)

        bits: List[int] = []
        index = outcome
        for _ in range(self.qubit_count):
            bits.append(index & 1)
            index >>= 1
        bits.reverse()

        self.measurements[measurement_id] = bits
        self._update_fidelity()
        return list(bits)

    def get_measurement(self, measurement_id: str) -> Optional[List[int]]:
        bits = self.measurements.get(measurement_id)
        return list(bits) if bits is not None else None

    def copy(self) -> QuantumState:
        """Detached snapshot; mutating it never affects this state."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "qubit_count": self.qubit_count,
            "amplitudes": [round(float(a), 12) for a in self.amplitudes],
            "phases": [round(float(p), 12) for p in self.phases],
            "fidelity": round(self.fidelity, 12),
            "measurements": {k: list(v) for k, v in self.measurements.items()},
            "created_at": self.created_at,
        }
