"""Quantum network composer.

A network is a set of nodes, each owning a small circuit, plus EPR links
between single qubits of two nodes. :meth:`QuantumNetwork.to_circuit`
flattens it into one circuit: node registers are laid side by side in
insertion order, every link becomes an ``H`` + ``CX`` Bell-pair preamble,
and each node's gates are replayed after the preamble on shifted wires.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .circuit import QuantumCircuit
from .errors import (
    EmptyNetworkError, NodeNotFoundError, EntanglementNotFoundError,
    QubitAlreadyEntangledError, QubitIndexOutOfRangeError, SnapshotFormatError,
    UnknownGateError, ValidationError,
)
from .gate_mapper import GateMapper

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"
SNAPSHOT_TYPE = "quantum-network"

# Columns taken by the Bell-pair preamble (H then CX)
PREAMBLE_COLUMNS = 2


def _as_position(position) -> tuple:
    """``(x, y)`` from a pair or an ``{"x": .., "y": ..}`` mapping."""
    if isinstance(position, dict):
        return (position.get("x", 0), position.get("y", 0))
    try:
        position = tuple(position)
    except TypeError:
        raise ValidationError(f"Node position must be a pair, got {position!r}") from None
    if len(position) != 2:
        raise ValidationError(f"Node position needs two coordinates, got {position!r}")
    return position


class NetworkNode:
    """A named node with its own circuit of ``qubits`` qubits and classical bits."""

    def __init__(self, node_id: int, name: str, qubits: int = 2, position=(0, 0)):
        self.id = node_id
        self.name = name
        self.circuit = QuantumCircuit(qubits, qubits, name=name)
        self.position = _as_position(position)

    @property
    def qubits(self) -> int:
        return self.circuit.num_qubits

    def add_gate(self, gate_name: str, *args) -> NetworkNode:
        """Call the circuit builder for ``gate_name`` (aliases accepted)."""
        builder = getattr(self.circuit, GateMapper.normalize(gate_name), None)
        if builder is None:
            raise UnknownGateError(gate_name)
        builder(*args)
        return self

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "qubits": self.qubits,
            "position": {"x": self.position[0], "y": self.position[1]},
            "circuit": self.circuit.to_snapshot(),
        }

    def __repr__(self) -> str:
        return f"NetworkNode(id={self.id}, name={self.name!r}, qubits={self.qubits})"


@dataclass(frozen=True)
class Entanglement:
    """An EPR link between ``node1``'s ``qubit1`` and ``node2``'s ``qubit2``."""
    node1: int
    qubit1: int
    node2: int
    qubit2: int
    kind: str = "EPR"

    @property
    def id(self) -> str:
        return f"{self.node1}-{self.qubit1}_{self.node2}-{self.qubit2}"

    def endpoints(self) -> tuple[tuple[int, int], tuple[int, int]]:
        return (self.node1, self.qubit1), (self.node2, self.qubit2)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "node1": self.node1,
            "qubit1": self.qubit1,
            "node2": self.node2,
            "qubit2": self.qubit2,
            "kind": self.kind,
        }


class QuantumNetwork:
    """Nodes and entanglements, flattenable into a single circuit."""

    def __init__(self, name: str = "Quantum Network"):
        self.name = name
        self.nodes: dict[int, NetworkNode] = {}
        self.entanglements: dict[str, Entanglement] = {}
        self._next_node_id = 0

    @property
    def next_node_id(self) -> int:
        return self._next_node_id

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, name: str | None = None, qubits: int = 2,
                 position=(0, 0)) -> NetworkNode:
        node_id = self._next_node_id
        node = NetworkNode(node_id, name or f"Node {node_id}", qubits, position)
        self._next_node_id += 1
        self.nodes[node_id] = node
        logger.debug("Added node %d (%s) with %d qubit(s)", node_id, node.name, qubits)
        return node

    def remove_node(self, node_id: int):
        """Remove a node and every entanglement touching it."""
        if node_id not in self.nodes:
            raise NodeNotFoundError(node_id)
        doomed = [eid for eid, ent in self.entanglements.items()
                  if node_id in (ent.node1, ent.node2)]
        for eid in doomed:
            del self.entanglements[eid]
        del self.nodes[node_id]
        logger.debug("Removed node %d and %d entanglement(s)", node_id, len(doomed))

    def get_node(self, node_id: int) -> NetworkNode:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def nodes_list(self) -> list[NetworkNode]:
        return list(self.nodes.values())

    # ------------------------------------------------------------------
    # Entanglements
    # ------------------------------------------------------------------

    def _entangled_endpoints(self) -> set[tuple[int, int]]:
        used = set()
        for ent in self.entanglements.values():
            used.update(ent.endpoints())
        return used

    def add_entanglement(self, node1: int, qubit1: int, node2: int, qubit2: int,
                         kind: str = "EPR") -> Entanglement:
        """Link two node qubits.

        Raises:
            NodeNotFoundError: either node is missing.
            QubitIndexOutOfRangeError: a qubit index is outside its node.
            QubitAlreadyEntangledError: an endpoint is already linked, or
                both endpoints are the same qubit.
        """
        first = self.get_node(node1)
        second = self.get_node(node2)
        for node, qubit in ((first, qubit1), (second, qubit2)):
            if isinstance(qubit, bool) or not isinstance(qubit, int):
                raise ValidationError(f"Qubit index must be an integer, got {qubit!r}")
            if not 0 <= qubit < node.qubits:
                raise QubitIndexOutOfRangeError(qubit, node.qubits, f"node {node.id}")
        if node1 == node2 and qubit1 == qubit2:
            raise QubitAlreadyEntangledError(node1, qubit1)
        used = self._entangled_endpoints()
        for endpoint in ((node1, qubit1), (node2, qubit2)):
            if endpoint in used:
                raise QubitAlreadyEntangledError(*endpoint)

        entanglement = Entanglement(node1, qubit1, node2, qubit2, kind)
        self.entanglements[entanglement.id] = entanglement
        return entanglement

    def remove_entanglement(self, entanglement_id: str):
        if entanglement_id not in self.entanglements:
            raise EntanglementNotFoundError(entanglement_id)
        del self.entanglements[entanglement_id]

    def entanglements_list(self) -> list[Entanglement]:
        return list(self.entanglements.values())

    # ------------------------------------------------------------------
    # Flattening
    # ------------------------------------------------------------------

    def offsets(self) -> dict[int, int]:
        """First global wire of each node, in insertion order."""
        offsets = {}
        total = 0
        for node_id, node in self.nodes.items():
            offsets[node_id] = total
            total += node.qubits
        return offsets

    def to_circuit(self) -> QuantumCircuit:
        if not self.nodes:
            raise EmptyNetworkError()
        offsets = self.offsets()
        total = sum(node.qubits for node in self.nodes.values())
        circuit = QuantumCircuit(total, total, name=self.name)

        # Endpoints are disjoint, so every pair fits in the same two columns
        for ent in self.entanglements.values():
            a = offsets[ent.node1] + ent.qubit1
            b = offsets[ent.node2] + ent.qubit2
            circuit.place("h", 0, (a,))
            circuit.place("cx", 1, (a, b))
        width = PREAMBLE_COLUMNS if self.entanglements else 0

        for node_id, node in self.nodes.items():
            offset = offsets[node_id]
            for op in node.circuit.operations():
                circuit.place(
                    op.name, op.column + width,
                    tuple(w + offset for w in op.wires), op.params,
                    op.clbit + offset if op.clbit is not None else None)

        logger.info("Flattened network '%s': %d node(s), %d entanglement(s), %d qubit(s)",
                    self.name, len(self.nodes), len(self.entanglements), total)
        return circuit

    def run(self, **kwargs):
        """Flatten and simulate; keyword arguments go to ``QuantumCircuit.run``."""
        return self.to_circuit().run(**kwargs)

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def stats(self) -> dict:
        return {
            "name": self.name,
            "nodes": len(self.nodes),
            "entanglements": len(self.entanglements),
            "total_qubits": sum(node.qubits for node in self.nodes.values()),
            "total_gates": sum(node.circuit.gate_count() for node in self.nodes.values()),
        }

    def clear(self):
        """Drop every node and entanglement. Node ids are not reused."""
        self.nodes.clear()
        self.entanglements.clear()

    def to_snapshot(self) -> dict:
        return {
            "version": SNAPSHOT_VERSION,
            "type": SNAPSHOT_TYPE,
            "name": self.name,
            "nodes": [node.to_dict() for node in self.nodes.values()],
            "entanglements": [ent.to_dict() for ent in self.entanglements.values()],
            "next_node_id": self._next_node_id,
            "metadata": self.stats(),
        }

    @classmethod
    def from_snapshot(cls, data: dict) -> QuantumNetwork:
        if not isinstance(data, dict):
            raise SnapshotFormatError("Network snapshot must be a JSON object")
        if data.get("type", SNAPSHOT_TYPE) != SNAPSHOT_TYPE:
            raise SnapshotFormatError(f"Not a network snapshot: type={data.get('type')!r}")

        network = cls(data.get("name", "Quantum Network"))
        for node_data in data.get("nodes", []):
            try:
                node_id = int(node_data["id"])
                qubits = int(node_data.get("qubits", 2))
            except (KeyError, TypeError, ValueError):
                raise SnapshotFormatError(f"Node needs an integer 'id': {node_data!r}") from None
            if node_id in network.nodes:
                raise SnapshotFormatError(f"Duplicate node id {node_id}")
            node = NetworkNode(node_id, node_data.get("name") or f"Node {node_id}",
                               qubits, node_data.get("position", (0, 0)))
            if node_data.get("circuit"):
                node.circuit = QuantumCircuit.from_snapshot(node_data["circuit"])
                if node.circuit.num_qubits != qubits:
                    raise SnapshotFormatError(
                        f"Node {node_id} declares {qubits} qubit(s) but its circuit has "
                        f"{node.circuit.num_qubits}")
            network.nodes[node_id] = node

        for ent in data.get("entanglements", []):
            try:
                network.add_entanglement(ent["node1"], ent["qubit1"],
                                         ent["node2"], ent["qubit2"],
                                         ent.get("kind", "EPR"))
            except (KeyError, TypeError):
                raise SnapshotFormatError(f"Malformed entanglement: {ent!r}") from None

        next_id = max([data.get("next_node_id", 0)] + [i + 1 for i in network.nodes])
        network._next_node_id = next_id
        return network
