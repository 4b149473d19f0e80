# qcomm/simulation_backend.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from qcomm.quantum_backend import CapabilityProvider

log = logging.getLogger("qcomm.hardware")

SIMULATION_ARCHITECTURE = "Physics-Based Quantum Simulation"
PERFECT_SIMULATION = "Perfect Fidelity Simulation"
HARDWARE_ARCHITECTURE = "Quantum Hardware Detected"

DEFAULT_OPERATIONS = ["h", "x", "y", "z", "cnot", "t", "s", "phase"]


class SimulatedCapabilityProvider(CapabilityProvider):
    """Capability provider for deployments without quantum hardware."""

    def __init__(self, available_qubits: int = 16, operations: Optional[List[str]] = None):
        self.available = False
        self.architecture = SIMULATION_ARCHITECTURE
        self.available_qubits = available_qubits
        self._operations = list(operations or DEFAULT_OPERATIONS)
        self._error_rates: Dict[str, float] = {
            "single_qubit": 0.0,
            "two_qubit": 0.0,
            "measurement": 0.0,
        }

    # ---------- internal helpers ----------

    def _probe(self) -> bool:
        """No physical backend is wired into this provider."""
        return False

    # ---------- public API ----------

    def detect(self) -> bool:
        log.info("Scanning for quantum hardware...")
        self.available = self._probe()
        self.architecture = HARDWARE_ARCHITECTURE if self.available else PERFECT_SIMULATION
        if self.available:
            log.info(f"Quantum hardware detected: {self.architecture}")
        else:
            log.info("No quantum hardware detected, using perfect fidelity simulation")
        return self.available

    @property
    def supported_operations(self) -> List[str]:
        return list(self._operations)

    def error_rate(self, operation: str) -> float:
        return self._error_rates.get(operation, 0.0)

    def update_error_rate(self, operation: str, error_rate: float) -> None:
        if not 0.0 <= error_rate <= 1.0:
            raise ValueError(f"Error rate must be within [0, 1], got {error_rate}")
        self._error_rates[operation] = float(error_rate)

    def status(self) -> Dict[str, Any]:
        return {
            "available": self.available,
            "architecture": self.architecture,
            "qubits": self.available_qubits,
            "operations": self.supported_operations,
            "error_rates": dict(self._error_rates),
        }
