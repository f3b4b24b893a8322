"""Extensible gate registry using the Singleton pattern."""

from __future__ import annotations

from .gates import (
    GateDefinition, GateType,
    I_TEMPLATE, X_TEMPLATE, Y_TEMPLATE, Z_TEMPLATE, H_TEMPLATE,
    S_TEMPLATE, S_DAG_TEMPLATE, T_TEMPLATE, T_DAG_TEMPLATE,
    SX_TEMPLATE, SX_DAG_TEMPLATE,
    RX_TEMPLATE, RY_TEMPLATE, RZ_TEMPLATE, PHASE_TEMPLATE, U2_TEMPLATE, U3_TEMPLATE,
    CX_TEMPLATE, CY_TEMPLATE, CZ_TEMPLATE, CH_TEMPLATE, CP_TEMPLATE,
    CRX_TEMPLATE, CRY_TEMPLATE, CRZ_TEMPLATE, CU_TEMPLATE,
    SWAP_TEMPLATE, ISWAP_TEMPLATE,
    TOFFOLI_TEMPLATE, FREDKIN_TEMPLATE, FREDKIN_DECOMPOSITION,
)
from .errors import UnknownGateError


def _single(name, display, description, template, symbol, params=()):
    return GateDefinition(
        name=name, display_name=display, description=description,
        gate_type=GateType.SINGLE, num_qubits=1, param_names=params,
        template=template, symbol=symbol)


def _controlled(name, display, description, template, symbol, params=()):
    return GateDefinition(
        name=name, display_name=display, description=description,
        gate_type=GateType.CONTROLLED, num_qubits=2, param_names=params,
        template=template, symbol=symbol, num_controls=1)


class GateRegistry:
    """Singleton registry mapping canonical gate names to GateDefinitions."""

    _instance: GateRegistry | None = None

    def __init__(self):
        self._gates: dict[str, GateDefinition] = {}

    @classmethod
    def instance(cls) -> GateRegistry:
        if cls._instance is None:
            cls._instance = cls()
            cls._instance._register_builtins()
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset the singleton (for testing)."""
        cls._instance = None

    def _register_builtins(self):
        # Single-qubit fixed gates
        self.register(_single("id", "I", "Single qubit identity gate",
                              I_TEMPLATE, "I"))
        self.register(_single("x", "X", "Pauli X (PI rotation over X-axis) aka \"NOT\" gate",
                              X_TEMPLATE, "X"))
        self.register(_single("y", "Y", "Pauli Y (PI rotation over Y-axis)",
                              Y_TEMPLATE, "Y"))
        self.register(_single("z", "Z", "Pauli Z (PI rotation over Z-axis)",
                              Z_TEMPLATE, "Z"))
        self.register(_single("h", "H", "Hadamard gate",
                              H_TEMPLATE, "H"))
        self.register(_single("s", "S", "PI/2 rotation over Z-axis",
                              S_TEMPLATE, "S"))
        self.register(_single("sdg", "S†", "(-PI/2) rotation over Z-axis",
                              S_DAG_TEMPLATE, "S†"))
        self.register(_single("t", "T", "PI/4 rotation over Z-axis",
                              T_TEMPLATE, "T"))
        self.register(_single("tdg", "T†", "(-PI/4) rotation over Z-axis",
                              T_DAG_TEMPLATE, "T†"))
        self.register(_single("sx", "√X", "Square root of NOT",
                              SX_TEMPLATE, "√X"))
        self.register(_single("sxdg", "√X†", "Inverse square root of NOT",
                              SX_DAG_TEMPLATE, "√X†"))

        # Single-qubit parameterized gates
        self.register(_single("rx", "RX", "Rotation around the X-axis by angle theta",
                              RX_TEMPLATE, "Rx", ("theta",)))
        self.register(_single("ry", "RY", "Rotation around the Y-axis by angle theta",
                              RY_TEMPLATE, "Ry", ("theta",)))
        self.register(_single("rz", "RZ", "Rotation around the Z-axis by angle theta",
                              RZ_TEMPLATE, "Rz", ("theta",)))
        self.register(_single("p", "P", "Phase shift by angle lambda",
                              PHASE_TEMPLATE, "P", ("lambda",)))
        self.register(_single("u1", "U1", "Single-qubit phase gate U1(lambda)",
                              PHASE_TEMPLATE, "U1", ("lambda",)))
        self.register(_single("u2", "U2", "Single-qubit gate U2(phi, lambda)",
                              U2_TEMPLATE, "U2", ("phi", "lambda")))
        self.register(_single("u3", "U3", "General single-qubit unitary U3(theta, phi, lambda)",
                              U3_TEMPLATE, "U3", ("theta", "phi", "lambda")))

        # Two-qubit gates
        self.register(_controlled("cx", "CNOT", "Controlled-NOT gate (CNOT)",
                                  CX_TEMPLATE, "CX"))
        self.register(_controlled("cy", "CY", "Controlled-Y gate",
                                  CY_TEMPLATE, "CY"))
        self.register(_controlled("cz", "CZ", "Controlled-Z gate",
                                  CZ_TEMPLATE, "CZ"))
        self.register(_controlled("ch", "CH", "Controlled-Hadamard gate",
                                  CH_TEMPLATE, "CH"))
        self.register(_controlled("cp", "CP", "Controlled phase shift by angle lambda",
                                  CP_TEMPLATE, "CP", ("lambda",)))
        self.register(_controlled("crx", "CRX", "Controlled rotation around the X-axis",
                                  CRX_TEMPLATE, "CRx", ("theta",)))
        self.register(_controlled("cry", "CRY", "Controlled rotation around the Y-axis",
                                  CRY_TEMPLATE, "CRy", ("theta",)))
        self.register(_controlled("crz", "CRZ", "Controlled rotation around the Z-axis",
                                  CRZ_TEMPLATE, "CRz", ("theta",)))
        self.register(_controlled("cu", "CU", "Controlled-U3 with relative phase gamma",
                                  CU_TEMPLATE, "CU", ("theta", "phi", "lambda", "gamma")))

        self.register(GateDefinition(
            name="swap", display_name="SWAP", description="Swaps the states of two qubits",
            gate_type=GateType.MULTI, num_qubits=2, param_names=(),
            template=SWAP_TEMPLATE, symbol="SW"))

        self.register(GateDefinition(
            name="iswap", display_name="iSWAP",
            description="Swaps two qubits with a phase of i on |01> and |10>",
            gate_type=GateType.MULTI, num_qubits=2, param_names=(),
            template=ISWAP_TEMPLATE, symbol="iSW"))

        # Three-qubit gates
        self.register(GateDefinition(
            name="ccx", display_name="Toffoli", description="Toffoli (CCX) gate",
            gate_type=GateType.CONTROLLED, num_qubits=3, param_names=(),
            template=TOFFOLI_TEMPLATE, symbol="CCX", num_controls=2))

        self.register(GateDefinition(
            name="cswap", display_name="Fredkin", description="Fredkin (CSWAP) gate",
            gate_type=GateType.CONTROLLED, num_qubits=3, param_names=(),
            template=FREDKIN_TEMPLATE, symbol="CSW", num_controls=1,
            decomposition=FREDKIN_DECOMPOSITION))

        # Measurement
        self.register(GateDefinition(
            name="measure", display_name="Measure", description="Measurement gate",
            gate_type=GateType.MEASUREMENT, num_qubits=1, param_names=(),
            template=None, symbol="M"))

        # Barrier; spans any number of wires
        self.register(GateDefinition(
            name="barrier", display_name="Barrier",
            description="Barrier directive for circuit scheduling and optimization control",
            gate_type=GateType.BARRIER, num_qubits=0, param_names=(),
            template=None, symbol="║"))

    def register(self, gate_def: GateDefinition):
        self._gates[gate_def.name] = gate_def

    def get(self, name: str) -> GateDefinition:
        if name not in self._gates:
            raise UnknownGateError(name)
        return self._gates[name]

    def has(self, name: str) -> bool:
        return name in self._gates

    def all_gates(self) -> list[GateDefinition]:
        return list(self._gates.values())

    def single_qubit_gates(self) -> list[GateDefinition]:
        return [g for g in self._gates.values()
                if g.gate_type == GateType.SINGLE]

    def multi_qubit_gates(self) -> list[GateDefinition]:
        return [g for g in self._gates.values()
                if g.gate_type in (GateType.CONTROLLED, GateType.MULTI)]

    def parameterized_gates(self) -> list[GateDefinition]:
        return [g for g in self._gates.values() if g.num_params > 0]

    def directives(self) -> list[GateDefinition]:
        return [g for g in self._gates.values() if g.is_directive]

    def gate_names(self) -> list[str]:
        return list(self._gates.keys())
