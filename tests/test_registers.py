"""Tests for quantum and classical registers."""

import pytest

from qcns.engine.errors import RegisterError, QubitIndexOutOfRangeError, ClbitIndexOutOfRangeError
from qcns.engine.registers import QuantumRegister, ClassicalRegister, Qubit, Clbit


class TestQuantumRegister:

    def test_defaults(self):
        reg = QuantumRegister(3)
        assert reg.size == 3 and len(reg) == 3
        assert reg.name == "qreg"
        assert list(reg) == [Qubit("qreg", 0), Qubit("qreg", 1), Qubit("qreg", 2)]

    def test_name_is_stripped(self):
        assert QuantumRegister(1, "  data ").name == "data"

    @pytest.mark.parametrize("size", [0, -1, 1.5, True, "2"])
    def test_invalid_size(self, size):
        with pytest.raises(RegisterError):
            QuantumRegister(size)

    @pytest.mark.parametrize("name", ["", "   ", 7])
    def test_invalid_name(self, name):
        with pytest.raises(RegisterError):
            QuantumRegister(2, name)

    def test_index_out_of_range(self):
        reg = QuantumRegister(2)
        with pytest.raises(QubitIndexOutOfRangeError):
            reg[2]
        with pytest.raises(IndexError):
            reg[-1]

    def test_round_trip(self):
        reg = QuantumRegister(4, "data")
        assert QuantumRegister.from_dict(reg.to_dict()) == reg

    def test_from_dict_rejects_other_kind(self):
        with pytest.raises(RegisterError):
            QuantumRegister.from_dict(ClassicalRegister(2).to_dict())


class TestClassicalRegister:

    def test_labels(self):
        reg = ClassicalRegister(2)
        assert reg.label(1) == "creg[1]"
        assert reg.bit(0) == Clbit("creg", 0)

    def test_index_out_of_range(self):
        with pytest.raises(ClbitIndexOutOfRangeError):
            ClassicalRegister(2)[5]

    def test_handles_are_immutable(self):
        bit = ClassicalRegister(1)[0]
        with pytest.raises(AttributeError):
            bit.index = 3
