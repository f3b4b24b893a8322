"""Quantum and classical registers.

A register is a fixed-size, named, immutable sequence of bit handles. The
circuit uses its registers to size the gate grid and to validate indices;
handles carry no state of their own.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import RegisterError, QubitIndexOutOfRangeError, ClbitIndexOutOfRangeError


@dataclass(frozen=True)
class Qubit:
    register: str
    index: int

    def __str__(self) -> str:
        return f"{self.register}[{self.index}]"


@dataclass(frozen=True)
class Clbit:
    register: str
    index: int

    def __str__(self) -> str:
        return f"{self.register}[{self.index}]"


class _Register:
    """Shared behaviour of QuantumRegister and ClassicalRegister."""

    kind = "Register"
    default_name = "reg"
    _handle_type: type = Qubit

    def __init__(self, size: int, name: str | None = None):
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise RegisterError(f"Register size must be a positive integer, got {size!r}")
        if name is None:
            name = self.default_name
        if not isinstance(name, str) or not name.strip():
            raise RegisterError("Register name must be a non-empty string")
        self._size = size
        self._name = name.strip()
        self._handles = tuple(self._handle_type(self._name, i) for i in range(size))

    @property
    def size(self) -> int:
        return self._size

    @property
    def name(self) -> str:
        return self._name

    @property
    def handles(self) -> tuple:
        return self._handles

    def _index_error(self, index):
        raise NotImplementedError

    def __getitem__(self, index: int):
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < self._size:
            self._index_error(index)
        return self._handles[index]

    def __len__(self) -> int:
        return self._size

    def __iter__(self):
        return iter(self._handles)

    def __eq__(self, other) -> bool:
        return (type(self) is type(other)
                and self._size == other._size and self._name == other._name)

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._size, self._name))

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self._name}', {self._size})"

    def to_dict(self) -> dict:
        return {"type": self.kind, "size": self._size, "name": self._name}

    @classmethod
    def from_dict(cls, data: dict):
        if not isinstance(data, dict) or data.get("type", cls.kind) != cls.kind:
            raise RegisterError(f"Invalid data: not a {cls.kind}")
        return cls(data.get("size"), data.get("name", cls.default_name))


class QuantumRegister(_Register):
    kind = "QuantumRegister"
    default_name = "qreg"
    _handle_type = Qubit

    def _index_error(self, index):
        raise QubitIndexOutOfRangeError(index, self._size, f"register '{self._name}'")

    def qubit(self, index: int) -> Qubit:
        return self[index]


class ClassicalRegister(_Register):
    kind = "ClassicalRegister"
    default_name = "creg"
    _handle_type = Clbit

    def _index_error(self, index):
        raise ClbitIndexOutOfRangeError(index, self._size)

    def bit(self, index: int) -> Clbit:
        return self[index]

    def label(self, index: int) -> str:
        """Measurement key for a bit, e.g. ``creg[0]``."""
        return str(self[index])
