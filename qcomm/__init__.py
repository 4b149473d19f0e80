# qcomm/__init__.py
import importlib.metadata

from .circuit import QuantumCircuit
from .core import DiagnosticQuantumApi, ProtocolQuantumApi, QuantumCore
from .errors import QuantumOperationError
from .operations import (
    BellPairResult, CreateBellState, CreateEntanglement, ErrorCorrection, MeasureRandom, PrepareCommState, Teleport
)
from .qrng import QRNG
from .quantum_backend import CapabilityProvider, QuantumGate
from .simulation_backend import SimulatedCapabilityProvider
from .state import QuantumState

__version__ = importlib.metadata.version("qcomm")
