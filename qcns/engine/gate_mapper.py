"""Gate name aliasing.

Callers (QASM text, snapshots written by other tools, interactive input)
spell gates in many ways: ``CNOT``, ``cx``, ``controlled-x``, ``Toffoli``.
:class:`GateMapper` folds every accepted spelling onto the canonical
lower-case registry name. The mapping is case-insensitive and total over
its domain; anything else raises :class:`UnknownGateError`.
"""

from __future__ import annotations

from .errors import UnknownGateError
from .gate_registry import GateRegistry

# Keys are lower-case spellings.
_ALIASES: dict[str, str] = {
    # identity
    "i": "id", "id": "id", "identity": "id",
    # Pauli
    "x": "x", "pauli-x": "x", "not": "x",
    "y": "y", "pauli-y": "y",
    "z": "z", "pauli-z": "z",
    # Hadamard
    "h": "h", "hadamard": "h",
    # phase family
    "s": "s",
    "t": "t",
    "sdg": "sdg", "s†": "sdg", "s-dagger": "sdg", "s_dag": "sdg",
    "tdg": "tdg", "t†": "tdg", "t-dagger": "tdg", "t_dag": "tdg",
    "sx": "sx", "sqrt-x": "sx", "√x": "sx",
    "sxdg": "sxdg", "√x†": "sxdg",
    "p": "p", "phase": "p", "phase-gate": "p",
    # rotations
    "rx": "rx", "rot-x": "rx",
    "ry": "ry", "rot-y": "ry",
    "rz": "rz", "rot-z": "rz",
    # universal single-qubit
    "u1": "u1", "u2": "u2", "u3": "u3", "u": "u3",
    # two-qubit
    "cx": "cx", "cnot": "cx", "controlled-x": "cx",
    "cy": "cy", "controlled-y": "cy",
    "cz": "cz", "controlled-z": "cz",
    "ch": "ch", "controlled-h": "ch",
    "cp": "cp", "cphase": "cp", "controlled-phase": "cp",
    "swap": "swap",
    "iswap": "iswap", "i-swap": "iswap",
    "crx": "crx", "controlled-rx": "crx",
    "cry": "cry", "controlled-ry": "cry",
    "crz": "crz", "controlled-rz": "crz",
    "cu": "cu", "controlled-u": "cu",
    # three-qubit
    "ccx": "ccx", "toffoli": "ccx", "ccnot": "ccx",
    "controlled-controlled-x": "ccx",
    "cswap": "cswap", "fredkin": "cswap", "controlled-swap": "cswap",
    # directives
    "measure": "measure", "m": "measure",
    "barrier": "barrier",
}


class GateMapper:
    """Static helpers translating caller spellings to registry names."""

    @staticmethod
    def normalize(gate_name: str) -> str:
        """Return the canonical name for ``gate_name``.

        Raises:
            UnknownGateError: ``gate_name`` is not a string or is not a
                recognised spelling.
        """
        if not isinstance(gate_name, str) or not gate_name.strip():
            raise UnknownGateError(gate_name)
        canonical = _ALIASES.get(gate_name.strip().lower())
        if canonical is None:
            raise UnknownGateError(gate_name)
        return canonical

    @staticmethod
    def is_valid(gate_name: str) -> bool:
        try:
            GateMapper.normalize(gate_name)
        except UnknownGateError:
            return False
        return True

    @staticmethod
    def normalize_all(gate_names) -> list[str]:
        return [GateMapper.normalize(name) for name in gate_names]

    @staticmethod
    def display_name(gate_name: str) -> str:
        return GateRegistry.instance().get(GateMapper.normalize(gate_name)).display_name

    @staticmethod
    def arity(gate_name: str) -> int:
        """Number of wires; 0 means any number (barrier)."""
        return GateRegistry.instance().get(GateMapper.normalize(gate_name)).num_qubits

    @staticmethod
    def parameters(gate_name: str) -> tuple[str, ...]:
        return GateRegistry.instance().get(GateMapper.normalize(gate_name)).param_names

    @staticmethod
    def aliases() -> dict[str, str]:
        return dict(_ALIASES)
