"""Single-qubit analysis of pure states.

All functions accept either a :class:`StateVector` or a 1-D amplitude
array of length 2^n. Mixed states appear only as single-qubit reduced
density matrices.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .complex_math import DTYPE
from .errors import DimensionMismatchError
from .state_vector import StateVector


@dataclass(frozen=True)
class BlochVector:
    """Bloch coordinates of one qubit.

    ``purity`` is the vector length: 1 on the sphere surface (pure),
    below 1 when the qubit is entangled with the rest of the register.
    """
    x: float
    y: float
    z: float
    purity: float
    qubit: int | None = None

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def is_pure(self, tolerance: float = 1e-10) -> bool:
        return abs(self.purity - 1.0) < tolerance

    def pauli_expectations(self) -> dict[str, float]:
        return {"X": self.x, "Y": self.y, "Z": self.z}


def _as_state(state) -> StateVector:
    if isinstance(state, StateVector):
        return state
    return StateVector.from_amplitudes(state)


def reduced_density_matrix(state, qubit: int) -> np.ndarray:
    """2x2 density matrix of ``qubit`` after tracing out the others."""
    return _as_state(state).get_reduced_density_matrix(qubit)


def density_to_bloch(rho: np.ndarray, qubit: int | None = None) -> BlochVector:
    rho = np.asarray(rho, dtype=DTYPE)
    if rho.shape != (2, 2):
        raise DimensionMismatchError(rho.shape, (2, 2))
    x = 2.0 * float(np.real(rho[0, 1]))
    y = 2.0 * float(np.imag(rho[1, 0]))  # = -2*Im(rho[0,1])
    z = float(np.real(rho[0, 0] - rho[1, 1]))
    return BlochVector(x, y, z, math.sqrt(x * x + y * y + z * z), qubit)


def bloch_vector(state, qubit: int) -> BlochVector:
    return density_to_bloch(reduced_density_matrix(state, qubit), qubit)


def all_bloch_vectors(state) -> list[BlochVector]:
    state = _as_state(state)
    return [bloch_vector(state, q) for q in range(state.num_qubits)]


def to_spherical(vector: BlochVector) -> tuple[float, float, float]:
    """``(theta, phi, r)`` with theta from +z and phi from +x."""
    x, y, z = vector.as_tuple()
    r = math.sqrt(x * x + y * y + z * z)
    theta = math.acos(max(-1.0, min(1.0, z / r))) if r > 0 else 0.0
    phi = math.atan2(y, x)
    return theta, phi, r


def from_spherical(theta: float, phi: float, r: float = 1.0) -> BlochVector:
    return BlochVector(
        r * math.sin(theta) * math.cos(phi),
        r * math.sin(theta) * math.sin(phi),
        r * math.cos(theta),
        abs(r),
    )


_NAMED_STATES = (
    ("|0⟩", (0.0, 0.0, 1.0)),
    ("|1⟩", (0.0, 0.0, -1.0)),
    ("|+⟩", (1.0, 0.0, 0.0)),
    ("|−⟩", (-1.0, 0.0, 0.0)),
    ("|+i⟩", (0.0, 1.0, 0.0)),
    ("|−i⟩", (0.0, -1.0, 0.0)),
)


def identify_state(vector: BlochVector, tolerance: float = 0.01) -> str | None:
    """Name of the cardinal state ``vector`` points at, or None."""
    if abs(vector.purity - 1.0) > tolerance:
        return None
    for name, target in _NAMED_STATES:
        if all(abs(a - b) < tolerance for a, b in zip(vector.as_tuple(), target)):
            return name
    return None


def state_fidelity(psi, phi) -> float:
    """Fidelity between two pure states: |<psi|phi>|^2."""
    a = psi.data if isinstance(psi, StateVector) else np.asarray(psi, dtype=DTYPE)
    b = phi.data if isinstance(phi, StateVector) else np.asarray(phi, dtype=DTYPE)
    if a.shape != b.shape:
        raise DimensionMismatchError(a.shape, b.shape)
    return float(np.abs(np.vdot(a, b)) ** 2)
