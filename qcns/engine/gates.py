"""Gate matrix templates and the GateDefinition dataclass."""

from __future__ import annotations

import math

import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from .complex_math import DTYPE
from .expressions import Entry, evaluate_entry, template_params
from .errors import MissingParameterError, ValidationError


class GateType(Enum):
    SINGLE = "single"
    CONTROLLED = "controlled"
    MULTI = "multi"
    MEASUREMENT = "measurement"
    BARRIER = "barrier"


Template = tuple[tuple[Entry, ...], ...]


@dataclass(frozen=True)
class GateDefinition:
    """Immutable definition of a quantum gate.

    ``template`` is a square matrix of literal numbers and symbolic
    catalogue keys (see :mod:`qcns.engine.expressions`); it is ``None`` for
    directives. Matrix rows and columns are indexed by the gate's local
    basis with the first wire as the most significant bit, so for
    controlled gates the control comes first.

    ``decomposition`` lists ``(gate_name, local_wires)`` steps that
    reproduce this gate using simpler ones; the simulator uses it for
    three-wire gates other than the Toffoli.
    """
    name: str
    display_name: str
    description: str
    gate_type: GateType
    num_qubits: int
    param_names: tuple[str, ...]
    template: Template | None
    symbol: str
    num_controls: int = 0
    decomposition: tuple[tuple[str, tuple[int, ...]], ...] = ()

    def __post_init__(self):
        if self.template is None:
            return
        dim = 2 ** self.num_qubits
        if len(self.template) != dim or any(len(row) != dim for row in self.template):
            raise ValidationError(
                f"Gate '{self.name}' template must be {dim}x{dim}")
        used = template_params(self.template)
        undeclared = [p for p in used if p not in self.param_names]
        if undeclared:
            raise ValidationError(
                f"Gate '{self.name}' template uses undeclared parameter(s) "
                f"{', '.join(undeclared)}")

    @property
    def is_directive(self) -> bool:
        return self.template is None

    @property
    def num_params(self) -> int:
        return len(self.param_names)

    def check_params(self, params: Mapping[str, float] | None) -> dict[str, float]:
        """Return a float copy of ``params``; missing or non-finite values raise."""
        if params is not None and not isinstance(params, Mapping):
            raise ValidationError(
                f"Parameters of gate '{self.name}' must be a mapping, got {params!r}")
        params = dict(params or {})
        missing = [p for p in self.param_names if p not in params]
        if missing:
            raise MissingParameterError(self.name, missing)
        checked = {}
        for key, value in params.items():
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise ValidationError(
                    f"Parameter '{key}' of gate '{self.name}' must be a number, "
                    f"got {value!r}") from None
            if not math.isfinite(number):
                raise ValidationError(
                    f"Parameter '{key}' of gate '{self.name}' must be finite, got {number}")
            checked[key] = number
        return checked

    def matrix(self, params: Mapping[str, float] | None = None) -> np.ndarray:
        """Evaluate the template into a fresh complex128 matrix."""
        if self.template is None:
            raise ValidationError(f"Directive '{self.name}' has no matrix")
        params = self.check_params(params)
        return np.array(
            [[evaluate_entry(entry, params, self.name) for entry in row]
             for row in self.template],
            dtype=DTYPE)


# --- Single-qubit templates ---

I_TEMPLATE: Template = ((1, 0),
                        (0, 1))

X_TEMPLATE: Template = ((0, 1),
                        (1, 0))

Y_TEMPLATE: Template = ((0, "-i"),
                        ("i", 0))

Z_TEMPLATE: Template = ((1, 0),
                        (0, -1))

H_TEMPLATE: Template = (("1/sqrt(2)", "1/sqrt(2)"),
                        ("1/sqrt(2)", "-1/sqrt(2)"))

S_TEMPLATE: Template = ((1, 0),
                        (0, "i"))

S_DAG_TEMPLATE: Template = ((1, 0),
                            (0, "-i"))

T_TEMPLATE: Template = ((1, 0),
                        (0, "e^(i*pi/4)"))

T_DAG_TEMPLATE: Template = ((1, 0),
                            (0, "e^(-i*pi/4)"))

SX_TEMPLATE: Template = (("(1+i)/2", "(1-i)/2"),
                         ("(1-i)/2", "(1+i)/2"))

SX_DAG_TEMPLATE: Template = (("(1-i)/2", "(1+i)/2"),
                             ("(1+i)/2", "(1-i)/2"))

# --- Parameterized single-qubit templates ---

RX_TEMPLATE: Template = (("cos(theta/2)", "-i*sin(theta/2)"),
                         ("-i*sin(theta/2)", "cos(theta/2)"))

RY_TEMPLATE: Template = (("cos(theta/2)", "-sin(theta/2)"),
                         ("sin(theta/2)", "cos(theta/2)"))

RZ_TEMPLATE: Template = (("e^(-i*theta/2)", 0),
                         (0, "e^(i*theta/2)"))

PHASE_TEMPLATE: Template = ((1, 0),
                            (0, "e^(i*lambda)"))

U2_TEMPLATE: Template = (("1/sqrt(2)", "-e^(i*lambda)/sqrt(2)"),
                         ("e^(i*phi)/sqrt(2)", "e^(i*(phi+lambda))/sqrt(2)"))

U3_TEMPLATE: Template = (("cos(theta/2)", "-e^(i*lambda)*sin(theta/2)"),
                         ("e^(i*phi)*sin(theta/2)", "e^(i*(phi+lambda))*cos(theta/2)"))


# --- Two-qubit templates ---

def controlled(block: Template) -> Template:
    """Embed a 2x2 block as the |1>-control half of a 4x4 template."""
    (a, b), (c, d) = block
    return ((1, 0, 0, 0),
            (0, 1, 0, 0),
            (0, 0, a, b),
            (0, 0, c, d))


CX_TEMPLATE = controlled(X_TEMPLATE)
CY_TEMPLATE = controlled(Y_TEMPLATE)
CZ_TEMPLATE = controlled(Z_TEMPLATE)
CH_TEMPLATE = controlled(H_TEMPLATE)
CP_TEMPLATE = controlled(PHASE_TEMPLATE)
CRX_TEMPLATE = controlled(RX_TEMPLATE)
CRY_TEMPLATE = controlled(RY_TEMPLATE)
CRZ_TEMPLATE = controlled(RZ_TEMPLATE)
CU_TEMPLATE = controlled((
    ("e^(i*gamma)*cos(theta/2)", "-e^(i*(gamma+lambda))*sin(theta/2)"),
    ("e^(i*(gamma+phi))*sin(theta/2)", "e^(i*(gamma+phi+lambda))*cos(theta/2)"),
))

SWAP_TEMPLATE: Template = ((1, 0, 0, 0),
                           (0, 0, 1, 0),
                           (0, 1, 0, 0),
                           (0, 0, 0, 1))

ISWAP_TEMPLATE: Template = ((1, 0, 0, 0),
                            (0, 0, "i", 0),
                            (0, "i", 0, 0),
                            (0, 0, 0, 1))


# --- Three-qubit templates ---

def _permutation_template(swap_a: int, swap_b: int) -> Template:
    rows = []
    for i in range(8):
        j = swap_b if i == swap_a else swap_a if i == swap_b else i
        rows.append(tuple(1 if k == j else 0 for k in range(8)))
    return tuple(rows)


# Toffoli (CCX): |110> <-> |111>
TOFFOLI_TEMPLATE = _permutation_template(6, 7)

# Fredkin (CSWAP): |101> <-> |110>
FREDKIN_TEMPLATE = _permutation_template(5, 6)

# CSWAP(c, a, b) = CX(b, a) . CCX(c, a, b) . CX(b, a)
FREDKIN_DECOMPOSITION = (("cx", (2, 1)), ("ccx", (0, 1, 2)), ("cx", (2, 1)))
