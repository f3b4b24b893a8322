"""Core quantum state representation using state vectors."""

from __future__ import annotations

import numpy as np

from .complex_math import DTYPE
from .errors import (
    QubitIndexOutOfRangeError, DuplicateQubitError, DimensionMismatchError, ValidationError,
)


class StateVector:
    """Represents an n-qubit quantum state as a complex numpy array.

    Qubit 0 is the most significant bit of a basis index. Gates are applied
    by tensor contraction over the touched axes, so the full 2^n x 2^n
    operator is never built.
    """

    def __init__(self, num_qubits: int):
        if isinstance(num_qubits, bool) or not isinstance(num_qubits, int) or num_qubits < 1:
            raise ValidationError(f"num_qubits must be a positive integer, got {num_qubits!r}")
        self._num_qubits = num_qubits
        self._data = np.zeros(2 ** num_qubits, dtype=DTYPE)
        self._data[0] = 1.0 + 0.0j  # |00...0>

    @property
    def num_qubits(self) -> int:
        return self._num_qubits

    @property
    def dimension(self) -> int:
        return 2 ** self._num_qubits

    @property
    def data(self) -> np.ndarray:
        return self._data

    @data.setter
    def data(self, value: np.ndarray):
        value = np.asarray(value)
        if value.shape != (self.dimension,):
            raise DimensionMismatchError(value.shape, (self.dimension,))
        self._data = value.astype(DTYPE)

    @property
    def probabilities(self) -> np.ndarray:
        """Returns |amplitude|^2 for each basis state."""
        return np.abs(self._data) ** 2

    def label(self, index: int) -> str:
        """Basis label for ``index``, qubit 0 leftmost."""
        return format(index, f"0{self._num_qubits}b")

    def labels(self) -> list[str]:
        return [self.label(i) for i in range(self.dimension)]

    def norm(self) -> float:
        return float(np.sqrt(np.sum(self.probabilities)))

    def _check_wires(self, wires) -> list[int]:
        wires = [int(q) for q in wires]
        for q in wires:
            if q < 0 or q >= self._num_qubits:
                raise QubitIndexOutOfRangeError(q, self._num_qubits, "state")
        if len(set(wires)) != len(wires):
            raise DuplicateQubitError(wires)
        return wires

    def apply_gate(self, gate_matrix: np.ndarray, target_qubits):
        """Applies a gate matrix to the target qubits by tensor contraction.

        The first target is the most significant bit of the gate's local
        index. Cost is O(2^n * 4^k) for k targets.
        """
        n = self._num_qubits
        target_qubits = self._check_wires(target_qubits)
        k = len(target_qubits)
        if gate_matrix.shape != (2 ** k, 2 ** k):
            raise DimensionMismatchError(gate_matrix.shape, (2 ** k, 2 ** k))

        state_tensor = self._data.reshape([2] * n)
        gate_tensor = gate_matrix.reshape([2] * (2 * k))

        # Contract the gate's input axes with the target axes of the state
        input_axes = list(range(k, 2 * k))
        result = np.tensordot(gate_tensor, state_tensor,
                              axes=(input_axes, target_qubits))

        # Target axes are now in front; move them back
        result = np.moveaxis(result, list(range(k)), target_qubits)
        self._data = np.ascontiguousarray(result).reshape(2 ** n)

    def apply_toffoli(self, control1: int, control2: int, target: int):
        """Flip ``target`` on every basis state where both controls are 1."""
        control1, control2, target = self._check_wires((control1, control2, target))
        n = self._num_qubits
        indices = np.arange(2 ** n)
        c1 = (indices >> (n - 1 - control1)) & 1
        c2 = (indices >> (n - 1 - control2)) & 1
        t_mask = 1 << (n - 1 - target)
        # Lower half of each swapped pair: controls set, target clear
        lower = indices[(c1 == 1) & (c2 == 1) & ((indices & t_mask) == 0)]
        upper = lower | t_mask
        self._data[lower], self._data[upper] = self._data[upper].copy(), self._data[lower].copy()

    def marginal_probability(self, qubit: int) -> float:
        """Probability that ``qubit`` reads 1."""
        (qubit,) = self._check_wires((qubit,))
        n = self._num_qubits
        mask = 1 << (n - 1 - qubit)
        indices = np.arange(2 ** n)
        return float(np.sum(self.probabilities[(indices & mask) != 0]))

    def get_reduced_density_matrix(self, qubit: int) -> np.ndarray:
        """Computes the reduced density matrix for a single qubit by partial trace.

        Returns a 2x2 complex matrix.
        """
        (qubit,) = self._check_wires((qubit,))
        n = self._num_qubits
        # (2^a, 2, 2^b) where a = qubits before, b = qubits after
        psi = self._data.reshape(2 ** qubit, 2, 2 ** (n - qubit - 1))
        return np.einsum('aib,ajb->ij', psi, np.conj(psi))

    def copy(self) -> StateVector:
        """Deep copy of this state vector."""
        sv = StateVector.__new__(StateVector)
        sv._num_qubits = self._num_qubits
        sv._data = self._data.copy()
        return sv

    @classmethod
    def from_amplitudes(cls, amplitudes) -> StateVector:
        amplitudes = np.asarray(amplitudes, dtype=DTYPE)
        dim = amplitudes.shape[0] if amplitudes.ndim == 1 else 0
        if dim < 2 or dim & (dim - 1):
            raise DimensionMismatchError(amplitudes.shape, ("2^n",))
        sv = cls(dim.bit_length() - 1)
        sv._data = amplitudes.copy()
        return sv

    def __repr__(self) -> str:
        return f"StateVector(num_qubits={self._num_qubits})"
