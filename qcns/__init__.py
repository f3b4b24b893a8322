"""QCNS: state-vector quantum circuit simulator with a network composer.

Build circuits with :class:`QuantumCircuit`, link small per-node circuits
with :class:`QuantumNetwork`, and read results from
:class:`SimulationResult`.
"""

from qcns.engine.circuit import QuantumCircuit, GateRecord, APPEND
from qcns.engine.network import QuantumNetwork, NetworkNode, Entanglement
from qcns.engine.registers import QuantumRegister, ClassicalRegister
from qcns.engine.simulator import Simulator, SimulationResult

__version__ = "1.0.0"

__all__ = [
    "APPEND",
    "ClassicalRegister",
    "Entanglement",
    "GateRecord",
    "NetworkNode",
    "QuantumCircuit",
    "QuantumNetwork",
    "QuantumRegister",
    "SimulationResult",
    "Simulator",
]
