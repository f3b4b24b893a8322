"""Quantum circuit data model.

A circuit is a grid ``gates[wire][column]`` of :class:`GateRecord`
references. A multi-wire gate is one record written into the cell of each
of its wires in a single column; the record keeps its own ordered wire
tuple, so the grid is only used for placement and column lookups.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass, field

from .errors import (
    ValidationError, ArityMismatchError, QubitIndexOutOfRangeError, DuplicateQubitError,
    ClassicalRegisterUnavailableError, CellOccupiedError, SnapshotFormatError,
)
from .gate_mapper import GateMapper
from .gate_registry import GateRegistry
from .registers import QuantumRegister, ClassicalRegister
from .simulator import Simulator, SimulationResult

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"
SNAPSHOT_TYPE = "quantum-circuit"


class _Append:
    """Marker for 'place after everything already in the circuit'."""

    def __repr__(self) -> str:
        return "APPEND"


APPEND = _Append()


@dataclass(eq=False)
class GateRecord:
    """One placed gate.

    ``wires`` is ordered: for controlled gates the controls come first.
    ``clbit`` is set only for measurements.
    """
    name: str
    id: int
    wires: tuple[int, ...]
    column: int
    params: dict[str, float] = field(default_factory=dict)
    clbit: int | None = None

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "column": self.column,
            "wires": list(self.wires),
            "params": dict(self.params),
        }
        if self.clbit is not None:
            d["clbit"] = self.clbit
        return d


def _as_int(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{what} must be an integer, got {value!r}")
    return int(value)


class QuantumCircuit:
    """A fixed number of qubit wires, an optional classical register and a gate grid.

    Builder methods return ``self`` so calls chain::

        QuantumCircuit(2, 2).h(0).cx(0, 1).measure_all()
    """

    def __init__(self, qubits: int | QuantumRegister = 1,
                 clbits: int | ClassicalRegister = 0, name: str = ""):
        self.qreg = qubits if isinstance(qubits, QuantumRegister) else QuantumRegister(qubits)
        if isinstance(clbits, ClassicalRegister):
            self.creg: ClassicalRegister | None = clbits
        elif clbits == 0:
            self.creg = None
        else:
            self.creg = ClassicalRegister(clbits)
        self.name = name
        self._gates: list[list[GateRecord | None]] = [[] for _ in range(self.qreg.size)]
        self._next_id = 0
        self._last_result: SimulationResult | None = None
        self._registry = GateRegistry.instance()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def num_qubits(self) -> int:
        return self.qreg.size

    @property
    def num_clbits(self) -> int:
        return self.creg.size if self.creg is not None else 0

    @property
    def num_columns(self) -> int:
        return len(self._gates[0])

    @property
    def gates(self) -> list[list[GateRecord | None]]:
        """Read-only view of the grid (copied rows)."""
        return [list(row) for row in self._gates]

    @property
    def last_result(self) -> SimulationResult | None:
        return self._last_result

    def gate_at(self, wire: int, column: int) -> GateRecord | None:
        wire = self._check_wire(wire)
        if column < 0 or column >= self.num_columns:
            return None
        return self._gates[wire][column]

    def gates_at_column(self, column: int) -> list[GateRecord]:
        """Distinct records in ``column``, ordered by their lowest wire."""
        if column < 0 or column >= self.num_columns:
            return []
        seen: list[GateRecord] = []
        for row in self._gates:
            record = row[column]
            if record is not None and not any(record is r for r in seen):
                seen.append(record)
        return seen

    def operations(self) -> list[GateRecord]:
        """Every distinct record, column by column, in wire order."""
        ops: list[GateRecord] = []
        for column in range(self.num_columns):
            ops.extend(self.gates_at_column(column))
        return ops

    def gate_count(self) -> int:
        return len(self.operations())

    def frontier(self) -> int:
        """Right-most column holding any gate, or -1 when empty."""
        for column in range(self.num_columns - 1, -1, -1):
            if any(row[column] is not None for row in self._gates):
                return column
        return -1

    def measurement_map(self) -> list[tuple[int, int]]:
        """``(wire, clbit)`` for each measurement, in circuit order."""
        return [(op.wires[0], op.clbit) for op in self.operations()
                if op.name == "measure"]

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def _check_wire(self, wire) -> int:
        wire = _as_int(wire, "Qubit index")
        if wire < 0 or wire >= self.num_qubits:
            raise QubitIndexOutOfRangeError(wire, self.num_qubits)
        return wire

    def place(self, gate_name: str, column=APPEND, wires=(), params=None,
              clbit: int | None = None) -> GateRecord:
        """Validate and write one gate into the grid.

        With ``APPEND`` the gate lands one column after the right-most
        occupied column on any wire. An explicit column must have free
        cells on all of the gate's wires.

        Raises:
            UnknownGateError, ArityMismatchError, QubitIndexOutOfRangeError,
            DuplicateQubitError, MissingParameterError,
            ClassicalRegisterUnavailableError, CellOccupiedError
        """
        return self._place(gate_name, column, wires, params, clbit)

    def _place(self, gate_name, column, wires, params, clbit,
               record_id: int | None = None) -> GateRecord:
        name = GateMapper.normalize(gate_name)
        gate_def = self._registry.get(name)

        if isinstance(wires, numbers.Integral) and not isinstance(wires, bool):
            wires = (wires,)
        try:
            wires = tuple(wires)
        except TypeError:
            raise ValidationError(f"Wires for '{name}' must be a sequence, got {wires!r}") from None
        if gate_def.num_qubits == 0:
            if not wires:
                raise ArityMismatchError(name, self.num_qubits, 0)
        elif len(wires) != gate_def.num_qubits:
            raise ArityMismatchError(name, gate_def.num_qubits, len(wires))
        wires = tuple(self._check_wire(w) for w in wires)
        if len(set(wires)) != len(wires):
            raise DuplicateQubitError(wires)

        params = gate_def.check_params(params)

        if name == "measure":
            if clbit is None or self.creg is None:
                raise ClassicalRegisterUnavailableError(
                    "Classical register not available for measurement")
            clbit = _as_int(clbit, "Classical bit index")
            if not 0 <= clbit < self.num_clbits:
                raise ClassicalRegisterUnavailableError(
                    f"Classical bit index {clbit} out of range "
                    f"for register of {self.num_clbits} bit(s)")
        elif clbit is not None:
            raise ValidationError(f"Gate '{name}' does not take a classical bit")

        if column is APPEND:
            target = self.frontier() + 1
        else:
            target = _as_int(column, "Column")
            if target < 0:
                raise ValidationError(f"Column must be non-negative, got {target}")
            if target < self.num_columns:
                for w in wires:
                    if self._gates[w][target] is not None:
                        raise CellOccupiedError(w, target)

        if record_id is None:
            record_id = self._next_id
        self._next_id = max(self._next_id, record_id + 1)

        record = GateRecord(name=name, id=record_id, wires=wires, column=target,
                            params=params, clbit=clbit)
        self._ensure_columns(target + 1)
        for w in wires:
            self._gates[w][target] = record
        self._last_result = None
        logger.debug("Placed %s on wires %s at column %d", name, wires, target)
        return record

    def _ensure_columns(self, count: int):
        for row in self._gates:
            while len(row) < count:
                row.append(None)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def _add(self, name, wires, **params) -> QuantumCircuit:
        self._place(name, APPEND, wires, params, None)
        return self

    def id(self, qubit):
        return self._add("id", (qubit,))

    def x(self, qubit):
        return self._add("x", (qubit,))

    def y(self, qubit):
        return self._add("y", (qubit,))

    def z(self, qubit):
        return self._add("z", (qubit,))

    def h(self, qubit):
        return self._add("h", (qubit,))

    def s(self, qubit):
        return self._add("s", (qubit,))

    def sdg(self, qubit):
        return self._add("sdg", (qubit,))

    def t(self, qubit):
        return self._add("t", (qubit,))

    def tdg(self, qubit):
        return self._add("tdg", (qubit,))

    def sx(self, qubit):
        return self._add("sx", (qubit,))

    def sxdg(self, qubit):
        return self._add("sxdg", (qubit,))

    def p(self, lam, qubit):
        return self._add("p", (qubit,), **{"lambda": lam})

    phase = p

    def rx(self, theta, qubit):
        return self._add("rx", (qubit,), theta=theta)

    def ry(self, theta, qubit):
        return self._add("ry", (qubit,), theta=theta)

    def rz(self, theta, qubit):
        return self._add("rz", (qubit,), theta=theta)

    def u1(self, lam, qubit):
        return self._add("u1", (qubit,), **{"lambda": lam})

    def u2(self, phi, lam, qubit):
        return self._add("u2", (qubit,), phi=phi, **{"lambda": lam})

    def u3(self, theta, phi, lam, qubit):
        return self._add("u3", (qubit,), theta=theta, phi=phi, **{"lambda": lam})

    def cx(self, control, target):
        return self._add("cx", (control, target))

    cnot = cx

    def cy(self, control, target):
        return self._add("cy", (control, target))

    def cz(self, control, target):
        return self._add("cz", (control, target))

    def ch(self, control, target):
        return self._add("ch", (control, target))

    def cp(self, lam, control, target):
        return self._add("cp", (control, target), **{"lambda": lam})

    def swap(self, qubit1, qubit2):
        return self._add("swap", (qubit1, qubit2))

    def iswap(self, qubit1, qubit2):
        return self._add("iswap", (qubit1, qubit2))

    def crx(self, theta, control, target):
        return self._add("crx", (control, target), theta=theta)

    def cry(self, theta, control, target):
        return self._add("cry", (control, target), theta=theta)

    def crz(self, theta, control, target):
        return self._add("crz", (control, target), theta=theta)

    def cu(self, theta, phi, lam, gamma, control, target):
        return self._add("cu", (control, target), theta=theta, phi=phi,
                         gamma=gamma, **{"lambda": lam})

    def ccx(self, control1, control2, target):
        return self._add("ccx", (control1, control2, target))

    toffoli = ccx

    def cswap(self, control, target1, target2):
        return self._add("cswap", (control, target1, target2))

    fredkin = cswap

    def measure(self, qubit, clbit):
        self._place("measure", APPEND, (qubit,), None, clbit)
        return self

    def measure_all(self):
        """Measure qubit i into classical bit i for every qubit."""
        if self.creg is None or self.num_clbits < self.num_qubits:
            raise ClassicalRegisterUnavailableError(
                "Classical register must have at least as many bits as qubits")
        for q in range(self.num_qubits):
            self.measure(q, q)
        return self

    def barrier(self, qubits=None):
        """Barrier across ``qubits`` (all qubits when omitted)."""
        wires = range(self.num_qubits) if qubits is None else qubits
        return self._add("barrier", tuple(wires))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, shots: int = 0, seed: int | None = None, rng=None,
            include_unitary: bool | None = None, mode=None,
            simulator: Simulator | None = None) -> SimulationResult:
        """Simulate the circuit and memoize the result as ``last_result``."""
        simulator = simulator or Simulator()
        result = simulator.run(self, shots=shots, seed=seed, rng=rng,
                               include_unitary=include_unitary, mode=mode)
        self._last_result = result
        return result

    # ------------------------------------------------------------------
    # Interchange
    # ------------------------------------------------------------------

    def to_snapshot(self) -> dict:
        return {
            "version": SNAPSHOT_VERSION,
            "type": SNAPSHOT_TYPE,
            "name": self.name,
            "qreg": self.qreg.to_dict(),
            "creg": self.creg.to_dict() if self.creg is not None else None,
            "num_columns": self.num_columns,
            "operations": [op.to_dict() for op in self.operations()],
        }

    @classmethod
    def from_snapshot(cls, data: dict) -> QuantumCircuit:
        """Rebuild a circuit from :meth:`to_snapshot` output.

        Record ids and columns are preserved. Structural problems raise
        SnapshotFormatError; bad gates raise the same errors as ``place``.
        """
        if not isinstance(data, dict):
            raise SnapshotFormatError("Snapshot must be a JSON object")
        if data.get("type", SNAPSHOT_TYPE) != SNAPSHOT_TYPE:
            raise SnapshotFormatError(f"Not a circuit snapshot: type={data.get('type')!r}")
        if "qreg" not in data or not isinstance(data.get("operations", []), list):
            raise SnapshotFormatError("Snapshot requires 'qreg' and an 'operations' list")

        qreg = QuantumRegister.from_dict(data["qreg"])
        creg = ClassicalRegister.from_dict(data["creg"]) if data.get("creg") else 0
        circuit = cls(qreg, creg, name=data.get("name", ""))

        seen_ids: set[int] = set()
        for op in data.get("operations", []):
            try:
                name, column, wires = op["name"], op["column"], op["wires"]
            except (KeyError, TypeError):
                raise SnapshotFormatError(
                    f"Operation needs 'name', 'column' and 'wires': {op!r}") from None
            record_id = op.get("id")
            if record_id is not None:
                record_id = _as_int(record_id, "Operation id")
                if record_id in seen_ids:
                    raise SnapshotFormatError(f"Duplicate operation id {record_id}")
                seen_ids.add(record_id)
            circuit._place(name, column, wires, op.get("params"), op.get("clbit"),
                           record_id=record_id)

        num_columns = data.get("num_columns", circuit.num_columns)
        circuit._ensure_columns(_as_int(num_columns, "num_columns"))
        return circuit

    def to_text(self, include_comments: bool = True) -> str:
        """OpenQASM 3 source for this circuit."""
        from ..core.qasm import QasmTranspiler
        return QasmTranspiler.transpile(self, include_comments=include_comments)

    @classmethod
    def from_text(cls, text: str) -> QuantumCircuit:
        from ..core.qasm import QasmTranspiler
        return QasmTranspiler.parse(text)

    def __repr__(self) -> str:
        return (f"QuantumCircuit(qubits={self.num_qubits}, clbits={self.num_clbits}, "
                f"columns={self.num_columns})")
