"""Exception hierarchy for the simulation engine.

Three families mirror who is at fault:

- ``ValidationError``: the caller passed something the contract forbids
  (bad index, unknown gate, malformed snapshot). Raised by the call that
  received the bad input, before anything is mutated.
- ``StructuralError``: a network operation refers to nodes or
  entanglements that do not exist or would break the one-link-per-qubit
  rule.
- ``QCNSArithmeticError``: numerical misuse (division by zero, matrix
  dimension mismatch). Only reachable through programming errors.

``SimulationError`` covers invariant violations discovered while evolving
a circuit.
"""

from __future__ import annotations


class QCNSError(Exception):
    """Base class for every error raised by qcns."""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationError(QCNSError, ValueError):
    """Input violates an API contract."""


class RegisterError(ValidationError):
    """Invalid register size or name."""


class QubitIndexOutOfRangeError(ValidationError, IndexError):
    def __init__(self, qubit, num_qubits: int, context: str = "circuit"):
        self.qubit = qubit
        self.num_qubits = num_qubits
        super().__init__(
            f"Qubit index {qubit} out of range for {context} "
            f"with {num_qubits} qubit(s)")


class ClbitIndexOutOfRangeError(ValidationError, IndexError):
    def __init__(self, clbit, num_clbits: int):
        self.clbit = clbit
        self.num_clbits = num_clbits
        super().__init__(
            f"Classical bit index {clbit} out of range [0, {num_clbits - 1}]")


class DuplicateQubitError(ValidationError):
    def __init__(self, wires):
        self.wires = tuple(wires)
        super().__init__(f"Gate wires must be distinct, got {list(self.wires)}")


class ArityMismatchError(ValidationError):
    def __init__(self, gate_name: str, expected: int, got: int):
        self.gate_name = gate_name
        super().__init__(
            f"Gate '{gate_name}' acts on {expected} qubit(s), got {got}")


class MissingParameterError(ValidationError):
    def __init__(self, gate_name: str, missing):
        self.gate_name = gate_name
        self.missing = tuple(missing)
        super().__init__(
            f"Gate '{gate_name}' requires parameter(s): {', '.join(self.missing)}")


class UnknownGateError(ValidationError):
    def __init__(self, gate_name):
        self.gate_name = gate_name
        super().__init__(f"Unknown gate: {gate_name!r}")


class UnknownExpressionError(ValidationError):
    def __init__(self, expression):
        self.expression = expression
        super().__init__(f"Unknown matrix expression: {expression!r}")


class ClassicalRegisterUnavailableError(ValidationError):
    """Measurement requested without a usable classical register."""


class CellOccupiedError(ValidationError):
    def __init__(self, wire: int, column: int):
        self.wire = wire
        self.column = column
        super().__init__(f"Cell (wire {wire}, column {column}) is already occupied")


class SnapshotFormatError(ValidationError):
    """Snapshot dictionary is missing fields or has the wrong type."""


class QasmSyntaxError(ValidationError):
    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Network structure
# ---------------------------------------------------------------------------

class StructuralError(QCNSError):
    """Network graph operation refers to missing or conflicting elements."""


class EmptyNetworkError(StructuralError):
    def __init__(self):
        super().__init__("Network must have at least one node")


class NodeNotFoundError(StructuralError, KeyError):
    def __init__(self, node_id):
        self.node_id = node_id
        super().__init__(f"Node {node_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class EntanglementNotFoundError(StructuralError, KeyError):
    def __init__(self, entanglement_id):
        self.entanglement_id = entanglement_id
        super().__init__(f"Entanglement {entanglement_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class QubitAlreadyEntangledError(StructuralError):
    def __init__(self, node_id, qubit):
        self.node_id = node_id
        self.qubit = qubit
        super().__init__(f"Qubit {qubit} of node {node_id} is already entangled")


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

class QCNSArithmeticError(QCNSError, ArithmeticError):
    """Numerical misuse inside the engine."""


class DivisionByZeroError(QCNSArithmeticError, ZeroDivisionError):
    def __init__(self):
        super().__init__("Division by zero")


class DimensionMismatchError(QCNSArithmeticError):
    def __init__(self, left_shape, right_shape):
        self.left_shape = tuple(left_shape)
        self.right_shape = tuple(right_shape)
        super().__init__(
            f"Matrix dimensions incompatible: {self.left_shape} x {self.right_shape}")


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

class SimulationError(QCNSError, RuntimeError):
    """Internal invariant violated while evolving a circuit."""


class UnsupportedGateError(SimulationError):
    def __init__(self, gate_name: str, num_qubits: int):
        self.gate_name = gate_name
        super().__init__(
            f"Gate '{gate_name}' on {num_qubits} wires is not supported "
            f"by the state-vector path")
