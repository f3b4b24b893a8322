"""Catalogue of closed-form matrix entries.

Gate matrix templates refer to non-literal entries by a symbolic key such as
``"cos(theta/2)"``. Each key maps to a plain Python function of the gate's
parameter mapping; keys are looked up, never parsed or ``eval``-ed. A key
that is not in the catalogue is an error.
"""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from typing import Callable, Mapping, Union

from .errors import UnknownExpressionError, MissingParameterError

Entry = Union[int, float, complex, str]

_SQRT1_2 = 1.0 / math.sqrt(2.0)


@dataclass(frozen=True)
class Expression:
    """A named closed-form entry and the parameters it reads."""
    key: str
    param_names: tuple[str, ...]
    func: Callable[[Mapping[str, float]], complex]

    def __call__(self, params: Mapping[str, float]) -> complex:
        return complex(self.func(params))


def _e(angle: float) -> complex:
    return cmath.exp(1j * angle)


_CATALOGUE = (
    # constants
    Expression("i", (), lambda p: 1j),
    Expression("-i", (), lambda p: -1j),
    Expression("1/sqrt(2)", (), lambda p: _SQRT1_2),
    Expression("-1/sqrt(2)", (), lambda p: -_SQRT1_2),
    Expression("(1+i)/2", (), lambda p: (1 + 1j) / 2),
    Expression("(1-i)/2", (), lambda p: (1 - 1j) / 2),
    Expression("e^(i*pi/4)", (), lambda p: _e(math.pi / 4)),
    Expression("e^(-i*pi/4)", (), lambda p: _e(-math.pi / 4)),
    Expression("e^(i*pi/2)", (), lambda p: _e(math.pi / 2)),
    Expression("e^(-i*pi/2)", (), lambda p: _e(-math.pi / 2)),

    # theta
    Expression("cos(theta/2)", ("theta",),
               lambda p: math.cos(p["theta"] / 2)),
    Expression("sin(theta/2)", ("theta",),
               lambda p: math.sin(p["theta"] / 2)),
    Expression("-sin(theta/2)", ("theta",),
               lambda p: -math.sin(p["theta"] / 2)),
    Expression("-i*sin(theta/2)", ("theta",),
               lambda p: -1j * math.sin(p["theta"] / 2)),
    Expression("e^(-i*theta/2)", ("theta",),
               lambda p: _e(-p["theta"] / 2)),
    Expression("e^(i*theta/2)", ("theta",),
               lambda p: _e(p["theta"] / 2)),

    # lambda / phi
    Expression("e^(i*lambda)", ("lambda",),
               lambda p: _e(p["lambda"])),
    Expression("-e^(i*lambda)/sqrt(2)", ("lambda",),
               lambda p: -_e(p["lambda"]) * _SQRT1_2),
    Expression("e^(i*phi)/sqrt(2)", ("phi",),
               lambda p: _e(p["phi"]) * _SQRT1_2),
    Expression("e^(i*(phi+lambda))/sqrt(2)", ("phi", "lambda"),
               lambda p: _e(p["phi"] + p["lambda"]) * _SQRT1_2),

    # U3
    Expression("-e^(i*lambda)*sin(theta/2)", ("theta", "lambda"),
               lambda p: -_e(p["lambda"]) * math.sin(p["theta"] / 2)),
    Expression("e^(i*phi)*sin(theta/2)", ("theta", "phi"),
               lambda p: _e(p["phi"]) * math.sin(p["theta"] / 2)),
    Expression("e^(i*(phi+lambda))*cos(theta/2)", ("theta", "phi", "lambda"),
               lambda p: _e(p["phi"] + p["lambda"]) * math.cos(p["theta"] / 2)),

    # CU: U3 with a global phase gamma on the controlled block
    Expression("e^(i*gamma)*cos(theta/2)", ("theta", "gamma"),
               lambda p: _e(p["gamma"]) * math.cos(p["theta"] / 2)),
    Expression("-e^(i*(gamma+lambda))*sin(theta/2)", ("theta", "lambda", "gamma"),
               lambda p: -_e(p["gamma"] + p["lambda"]) * math.sin(p["theta"] / 2)),
    Expression("e^(i*(gamma+phi))*sin(theta/2)", ("theta", "phi", "gamma"),
               lambda p: _e(p["gamma"] + p["phi"]) * math.sin(p["theta"] / 2)),
    Expression("e^(i*(gamma+phi+lambda))*cos(theta/2)",
               ("theta", "phi", "lambda", "gamma"),
               lambda p: _e(p["gamma"] + p["phi"] + p["lambda"]) * math.cos(p["theta"] / 2)),
)

EXPRESSIONS: dict[str, Expression] = {expr.key: expr for expr in _CATALOGUE}


def lookup(key: str) -> Expression:
    try:
        return EXPRESSIONS[key]
    except KeyError:
        raise UnknownExpressionError(key) from None


def evaluate_entry(entry: Entry, params: Mapping[str, float] | None = None,
                   gate_name: str = "?") -> complex:
    """Resolve one template entry to a complex value.

    Literal numbers pass through unchanged. Strings are catalogue keys;
    an unknown key raises UnknownExpressionError and a parameter the
    expression needs but ``params`` lacks raises MissingParameterError.
    """
    if isinstance(entry, str):
        expr = lookup(entry)
        params = params or {}
        missing = [name for name in expr.param_names if name not in params]
        if missing:
            raise MissingParameterError(gate_name, missing)
        return expr(params)
    if isinstance(entry, (int, float, complex)):
        return complex(entry)
    raise UnknownExpressionError(entry)


def template_params(template) -> tuple[str, ...]:
    """Parameter names referenced by a template, in first-use order.

    Also validates every symbolic entry against the catalogue.
    """
    names: list[str] = []
    for row in template:
        for entry in row:
            if isinstance(entry, str):
                for name in lookup(entry).param_names:
                    if name not in names:
                        names.append(name)
    return tuple(names)
