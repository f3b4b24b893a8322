"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from qcns.engine.circuit import QuantumCircuit  # noqa: E402
from qcns.engine.network import QuantumNetwork  # noqa: E402


@pytest.fixture
def bell_circuit():
    """H on qubit 0 then CX 0->1, both qubits measured."""
    return QuantumCircuit(2, 2).h(0).cx(0, 1).measure_all()


@pytest.fixture
def ghz_circuit():
    return QuantumCircuit(3, 3).h(0).cx(0, 1).cx(1, 2)


@pytest.fixture
def two_node_network():
    """Alice and Bob with one EPR pair between their qubit 0."""
    network = QuantumNetwork("lab")
    alice = network.add_node("Alice", qubits=1)
    bob = network.add_node("Bob", qubits=1)
    network.add_entanglement(alice.id, 0, bob.id, 0)
    return network


@pytest.fixture
def config_dir(tmp_path):
    """Isolated directory for SimulatorConfig files."""
    return tmp_path / "qcns-config"
