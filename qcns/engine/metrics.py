"""Structural metrics of a circuit: size, depth and an execution-cost estimate."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict

from .circuit import QuantumCircuit
from .gate_mapper import GateMapper
from .gate_registry import GateRegistry

# Cost units per gate; anything unlisted is priced by arity
DEFAULT_GATE_COSTS: dict[str, int] = {
    "swap": 30,
    "cswap": 30,
    "ccx": 50,
    "measure": 1,
    "barrier": 0,
}
_ARITY_COSTS = {1: 1, 2: 10, 3: 50}


@dataclass
class MetricsReport:
    width: int
    depth: int
    gate_count: int
    gate_counts: dict[str, int] = field(default_factory=dict)
    execution_cost: int = 0
    state_space_dimension: int = 0
    t_depth: int = 0
    two_qubit_depth: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class CircuitMetrics:
    """Computes a :class:`MetricsReport`; per-gate costs can be overridden."""

    def __init__(self, gate_costs: dict[str, int] | None = None):
        self._registry = GateRegistry.instance()
        self.gate_costs = dict(DEFAULT_GATE_COSTS)
        for name, cost in (gate_costs or {}).items():
            self.set_gate_cost(name, cost)

    def gate_cost(self, gate_name: str) -> int:
        name = GateMapper.normalize(gate_name)
        if name in self.gate_costs:
            return self.gate_costs[name]
        return _ARITY_COSTS.get(self._registry.get(name).num_qubits, 1)

    def set_gate_cost(self, gate_name: str, cost: int):
        self.gate_costs[GateMapper.normalize(gate_name)] = int(cost)

    def _per_wire_max(self, circuit: QuantumCircuit, predicate) -> int:
        best = 0
        for row in circuit.gates:
            count = sum(1 for rec in row if rec is not None and predicate(rec))
            best = max(best, count)
        return best

    def depth(self, circuit: QuantumCircuit) -> int:
        """Longest per-wire run of gates; barriers do not count."""
        return self._per_wire_max(circuit, lambda rec: rec.name != "barrier")

    def t_depth(self, circuit: QuantumCircuit) -> int:
        return self._per_wire_max(circuit, lambda rec: rec.name in ("t", "tdg"))

    def two_qubit_depth(self, circuit: QuantumCircuit) -> int:
        return self._per_wire_max(
            circuit, lambda rec: rec.name != "barrier" and len(rec.wires) == 2)

    def calculate(self, circuit: QuantumCircuit | None) -> MetricsReport:
        if circuit is None:
            return MetricsReport(width=0, depth=0, gate_count=0)
        ops = circuit.operations()
        counts: dict[str, int] = {}
        for op in ops:
            counts[op.name] = counts.get(op.name, 0) + 1
        return MetricsReport(
            width=circuit.num_qubits,
            depth=self.depth(circuit),
            gate_count=len(ops),
            gate_counts=counts,
            execution_cost=sum(self.gate_cost(op.name) for op in ops),
            state_space_dimension=2 ** circuit.num_qubits,
            t_depth=self.t_depth(circuit),
            two_qubit_depth=self.two_qubit_depth(circuit),
        )

    @staticmethod
    def format_for_display(report: MetricsReport) -> dict[str, str]:
        formatted = {
            "Circuit Width": f"{report.width} qubits",
            "Circuit Depth": str(report.depth),
            "Total Gates": str(report.gate_count),
            "Est. Execution Cost": f"{report.execution_cost} units",
            "State Space Dim": str(report.state_space_dimension),
        }
        if report.gate_counts:
            formatted["Gate Types"] = ", ".join(
                f"{name.upper()}: {count}" for name, count in report.gate_counts.items())
        return formatted
