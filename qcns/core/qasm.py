"""OpenQASM text interchange.

``QasmTranspiler.transpile`` emits deterministic OpenQASM 3 for a circuit;
``QasmTranspiler.parse`` reads that output back, along with the legacy
``measure q[i] -> c[j];`` form and OpenQASM 2 ``qreg``/``creg``
declarations. Register identifiers in the text are local to it: the
rebuilt circuit always uses the default register names.
"""

from __future__ import annotations

import ast
import logging
import math
import operator
import re

from qcns.engine.circuit import QuantumCircuit
from qcns.engine.errors import QasmSyntaxError, ValidationError
from qcns.engine.gate_mapper import GateMapper
from qcns.engine.gate_registry import GateRegistry

logger = logging.getLogger(__name__)

QUBIT_REGISTER = "q"
CLBIT_REGISTER = "c"

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
_QUBIT_DECL = re.compile(rf"^qubit(?:\[\s*(\d+)\s*\])?\s+({_IDENT})$")
_BIT_DECL = re.compile(rf"^bit(?:\[\s*(\d+)\s*\])?\s+({_IDENT})$")
_QREG_DECL = re.compile(rf"^qreg\s+({_IDENT})\s*\[\s*(\d+)\s*\]$")
_CREG_DECL = re.compile(rf"^creg\s+({_IDENT})\s*\[\s*(\d+)\s*\]$")
_MEASURE_V3 = re.compile(rf"^({_IDENT})\s*\[\s*(\d+)\s*\]\s*=\s*measure\s+(.+)$")
_MEASURE_V2 = re.compile(rf"^measure\s+(.+?)\s*->\s*({_IDENT})\s*\[\s*(\d+)\s*\]$")
_GATE = re.compile(rf"^({_IDENT})\s*(?:\((.*)\))?\s+(.+)$")
_OPERAND = re.compile(rf"^({_IDENT})(?:\s*\[\s*(\d+)\s*\])?$")
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS = {ast.USub: operator.neg, ast.UAdd: operator.pos}
_CONSTANTS = {"pi": math.pi, "tau": math.tau, "euler": math.e}


def evaluate_angle(text: str, line: int | None = None) -> float:
    """Evaluate a numeric angle such as ``pi/2`` or ``-3*pi/4``.

    Only numbers, the constants pi/tau/euler and arithmetic operators are
    accepted; the expression is walked as a syntax tree, never executed.
    """
    source = text.strip().replace("π", "pi")
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError:
        raise QasmSyntaxError(f"invalid angle expression {text!r}", line) from None

    def walk(node):
        if isinstance(node, ast.Expression):
            return walk(node.body)
        if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) \
                and not isinstance(node.value, bool):
            return float(node.value)
        if isinstance(node, ast.Name) and node.id in _CONSTANTS:
            return _CONSTANTS[node.id]
        if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
            left, right = walk(node.left), walk(node.right)
            if isinstance(node.op, ast.Div) and right == 0:
                raise QasmSyntaxError(f"division by zero in {text!r}", line)
            return _BINARY_OPS[type(node.op)](left, right)
        if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
            return _UNARY_OPS[type(node.op)](walk(node.operand))
        raise QasmSyntaxError(f"unsupported token in angle expression {text!r}", line)

    return float(walk(tree))


def _format_param(value: float) -> str:
    return repr(float(value))


class QasmTranspiler:
    """Circuit <-> OpenQASM conversion."""

    VERSION = "3.0"

    @staticmethod
    def transpile(circuit: QuantumCircuit, include_comments: bool = True) -> str:
        registry = GateRegistry.instance()
        lines = [f"OPENQASM {QasmTranspiler.VERSION};", 'include "stdgates.inc";']
        if include_comments:
            title = f" {circuit.name}" if circuit.name else ""
            lines.append(f"// qcns circuit{title}: {circuit.num_qubits} qubit(s), "
                         f"{circuit.num_clbits} bit(s)")
        lines.append(f"qubit[{circuit.num_qubits}] {QUBIT_REGISTER};")
        if circuit.creg is not None:
            lines.append(f"bit[{circuit.num_clbits}] {CLBIT_REGISTER};")

        for op in circuit.operations():
            operands = ", ".join(f"{QUBIT_REGISTER}[{w}]" for w in op.wires)
            if op.name == "measure":
                lines.append(f"{CLBIT_REGISTER}[{op.clbit}] = measure {operands};")
                continue
            gate_def = registry.get(op.name)
            head = op.name
            if gate_def.param_names:
                args = ", ".join(_format_param(op.params[p]) for p in gate_def.param_names)
                head = f"{op.name}({args})"
            lines.append(f"{head} {operands};")
        return "\n".join(lines) + "\n"

    @staticmethod
    def parse(text: str) -> QuantumCircuit:
        """Rebuild a circuit by appending each statement in order."""
        return _QasmParser(text).parse()


class _QasmParser:

    def __init__(self, text: str):
        if not isinstance(text, str):
            raise QasmSyntaxError("QASM source must be a string")
        # Keep line numbers stable when dropping block comments
        self._text = _BLOCK_COMMENT.sub(lambda m: "\n" * m.group(0).count("\n"), text)
        self._registry = GateRegistry.instance()
        self._qreg: tuple[str, int] | None = None
        self._creg: tuple[str, int] | None = None
        self._circuit: QuantumCircuit | None = None

    def parse(self) -> QuantumCircuit:
        buffer = ""
        start = 1
        for lineno, raw in enumerate(self._text.splitlines(), 1):
            line = raw.split("//", 1)[0]
            if not buffer.strip():
                start = lineno
            buffer += " " + line
            while ";" in buffer:
                statement, buffer = buffer.split(";", 1)
                statement = " ".join(statement.split())
                if statement:
                    self._statement(statement, start)
                start = lineno
        if buffer.strip():
            raise QasmSyntaxError("statement is missing a terminating ';'", start)
        if self._qreg is None:
            raise QasmSyntaxError("no qubit register declared")
        circuit = self._ensure_circuit(None)
        logger.debug("Parsed QASM into %r", circuit)
        return circuit

    # ------------------------------------------------------------------

    def _statement(self, stmt: str, line: int):
        if stmt.startswith("OPENQASM"):
            version = stmt[len("OPENQASM"):].strip()
            if not re.fullmatch(r"[23](\.\d+)?", version):
                raise QasmSyntaxError(f"unsupported OpenQASM version {version!r}", line)
            return
        if stmt.startswith("include"):
            return

        for pattern, size_group, name_group, quantum in (
                (_QUBIT_DECL, 1, 2, True), (_QREG_DECL, 2, 1, True),
                (_BIT_DECL, 1, 2, False), (_CREG_DECL, 2, 1, False)):
            match = pattern.match(stmt)
            if match:
                size = int(match.group(size_group) or 1)
                self._declare(match.group(name_group), size, quantum, line)
                return

        match = _MEASURE_V3.match(stmt)
        if match:
            clreg, clbit, target = match.group(1), int(match.group(2)), match.group(3)
            self._measure(target, clreg, clbit, line)
            return
        match = _MEASURE_V2.match(stmt)
        if match:
            self._measure(match.group(1), match.group(2), int(match.group(3)), line)
            return

        match = _GATE.match(stmt)
        if not match:
            raise QasmSyntaxError(f"cannot parse statement {stmt!r}", line)
        self._gate(match.group(1), match.group(2), match.group(3), line)

    def _declare(self, name: str, size: int, quantum: bool, line: int):
        if self._circuit is not None:
            raise QasmSyntaxError("register declared after the first operation", line)
        if size < 1:
            raise QasmSyntaxError(f"register '{name}' must have at least one bit", line)
        if quantum:
            if self._qreg is not None:
                raise QasmSyntaxError("only one qubit register is supported", line)
            self._qreg = (name, size)
        else:
            if self._creg is not None:
                raise QasmSyntaxError("only one bit register is supported", line)
            self._creg = (name, size)

    def _ensure_circuit(self, line: int | None) -> QuantumCircuit:
        if self._circuit is None:
            if self._qreg is None:
                raise QasmSyntaxError("operation before any qubit register declaration", line)
            clbits = self._creg[1] if self._creg is not None else 0
            self._circuit = QuantumCircuit(self._qreg[1], clbits)
        return self._circuit

    def _qubits(self, operand: str, line: int) -> list[int]:
        """Indices named by ``q[i]``, or every qubit for a bare ``q``."""
        match = _OPERAND.match(operand.strip())
        if not match:
            raise QasmSyntaxError(f"invalid qubit operand {operand!r}", line)
        name, index = match.group(1), match.group(2)
        if name != self._qreg[0]:
            raise QasmSyntaxError(f"unknown qubit register '{name}'", line)
        if index is None:
            return list(range(self._qreg[1]))
        return [int(index)]

    def _place(self, name, wires, params, clbit, line):
        try:
            self._circuit.place(name, wires=wires, params=params, clbit=clbit)
        except QasmSyntaxError:
            raise
        except ValidationError as exc:
            raise QasmSyntaxError(str(exc), line) from exc

    def _measure(self, target: str, clreg: str, clbit: int, line: int):
        self._ensure_circuit(line)
        if self._creg is None or clreg != self._creg[0]:
            raise QasmSyntaxError(f"unknown bit register '{clreg}'", line)
        wires = self._qubits(target, line)
        if len(wires) != 1:
            raise QasmSyntaxError("measure needs a single qubit", line)
        self._place("measure", wires, None, clbit, line)

    def _gate(self, name: str, arg_text: str | None, operand_text: str, line: int):
        self._ensure_circuit(line)
        try:
            canonical = GateMapper.normalize(name)
        except ValidationError as exc:
            raise QasmSyntaxError(f"unknown gate '{name}'", line) from exc
        gate_def = self._registry.get(canonical)

        operands = [self._qubits(op, line) for op in operand_text.split(",")]

        if canonical == "barrier":
            wires = [w for group in operands for w in group]
            self._place(canonical, wires, None, None, line)
            return

        args = [a for a in (arg_text or "").split(",") if a.strip()]
        if len(args) != gate_def.num_params:
            raise QasmSyntaxError(
                f"gate '{name}' takes {gate_def.num_params} parameter(s), got {len(args)}", line)
        params = {p: evaluate_angle(a, line) for p, a in zip(gate_def.param_names, args)}

        if gate_def.num_qubits == 1 and len(operands) == 1 and len(operands[0]) > 1:
            # Broadcast over a whole register
            for wire in operands[0]:
                self._place(canonical, [wire], params, None, line)
            return
        if any(len(group) != 1 for group in operands):
            raise QasmSyntaxError(f"gate '{name}' needs indexed qubit operands", line)
        self._place(canonical, [group[0] for group in operands], params, None, line)
