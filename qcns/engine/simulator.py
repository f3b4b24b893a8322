"""Quantum circuit simulator - applies circuits to state vectors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from .complex_math import DTYPE, format_complex
from .errors import (
    ValidationError, SimulationError, UnsupportedGateError, UnknownGateError,
    QCNSArithmeticError,
)
from .gate_registry import GateRegistry
from .gates import GateDefinition
from .measurement import MeasurementEngine, MeasurementMode
from .state_vector import StateVector

if TYPE_CHECKING:
    from .circuit import QuantumCircuit

logger = logging.getLogger(__name__)

DEFAULT_MAX_UNITARY_QUBITS = 10
DEFAULT_MAX_QUBITS = 16
NORM_TOLERANCE = 1e-6


@dataclass
class SimulationResult:
    """Result of a full simulation run."""
    state_vector: np.ndarray
    probabilities: dict[str, float]
    num_qubits: int
    unitary_matrix: np.ndarray | None = None
    measurements: dict[str, int] = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)
    shots: int = 0
    seed: int | None = None
    mode: str = MeasurementMode.JOINT.value

    @property
    def probability_array(self) -> np.ndarray:
        return np.abs(self.state_vector) ** 2

    def most_likely(self) -> str:
        return max(self.probabilities, key=self.probabilities.get)

    def amplitudes(self, precision: int = 4, threshold: float = 0.0) -> list[dict]:
        """Display rows ``{state, amplitude, probability}`` for each basis state.

        States with probability at or below ``threshold`` are left out.
        """
        rows = []
        for i, amp in enumerate(self.state_vector):
            label = format(i, f"0{self.num_qubits}b")
            prob = self.probabilities[label]
            if threshold > 0 and prob <= threshold:
                continue
            rows.append({
                "state": f"|{label}⟩",
                "amplitude": format_complex(complex(amp), precision),
                "probability": round(prob, precision),
            })
        return rows

    def to_dict(self, include_state: bool = False) -> dict:
        d = {
            "num_qubits": self.num_qubits,
            "probabilities": dict(self.probabilities),
            "measurements": dict(self.measurements),
            "counts": dict(self.counts),
            "shots": self.shots,
            "seed": self.seed,
            "mode": self.mode,
        }
        if include_state:
            d["amplitudes"] = self.amplitudes()
        if self.unitary_matrix is not None:
            d["unitary_matrix"] = [[format_complex(complex(v), 4) for v in row]
                                   for row in self.unitary_matrix]
        return d


def expand_operator(matrix: np.ndarray, wires, num_qubits: int) -> np.ndarray:
    """Lift a k-wire gate matrix to the full 2^n space.

    ``kron`` with identity puts the gate's wires first; a transpose of the
    2n tensor axes then returns every qubit to its canonical position.
    """
    wires = list(wires)
    k = len(wires)
    n = num_qubits
    full = np.kron(matrix, np.eye(2 ** (n - k), dtype=DTYPE))
    order = wires + [q for q in range(n) if q not in wires]
    tensor = full.reshape([2] * (2 * n))
    axes = [order.index(q) for q in range(n)] + [n + order.index(q) for q in range(n)]
    return np.transpose(tensor, axes).reshape(2 ** n, 2 ** n)


class Simulator:
    """Executes a QuantumCircuit on a StateVector.

    The run goes Init (|0...0>), Evolve (records column by column, each
    once, directives skipped), Finalize (probabilities, sampling, optional
    unitary).
    """

    def __init__(self, max_unitary_qubits: int = DEFAULT_MAX_UNITARY_QUBITS,
                 measurement_mode: MeasurementMode | str = MeasurementMode.JOINT,
                 max_qubits: int = DEFAULT_MAX_QUBITS):
        self._gate_registry = GateRegistry.instance()
        self.max_unitary_qubits = max_unitary_qubits
        self.measurement_mode = MeasurementMode.parse(measurement_mode)
        self.max_qubits = max_qubits

    @classmethod
    def from_config(cls, config) -> Simulator:
        return cls(max_unitary_qubits=config.max_unitary_qubits,
                   measurement_mode=config.measurement_mode,
                   max_qubits=config.max_qubits)

    def run(self, circuit: QuantumCircuit, shots: int = 0,
            seed: int | None = None,
            rng: np.random.Generator | None = None,
            include_unitary: bool | None = None,
            mode: MeasurementMode | str | None = None) -> SimulationResult:
        """Full simulation: evolve the state, then sample measurements.

        Args:
            circuit: The quantum circuit to simulate.
            shots: Number of joint samples for ``counts``; 0 skips them.
            seed: Optional seed for reproducibility (creates rng if not given).
            rng: Optional pre-seeded Generator (takes precedence over seed).
            include_unitary: Build the circuit unitary. ``None`` builds it
                whenever the circuit is small enough.
            mode: Measurement mode override for this run.
        """
        n = circuit.num_qubits
        if n > self.max_qubits:
            raise ValidationError(
                f"Circuit has {n} qubits; simulator limit is {self.max_qubits}")
        if isinstance(shots, bool) or not isinstance(shots, int) or shots < 0:
            raise ValidationError(f"shots must be a non-negative integer, got {shots!r}")
        mode = MeasurementMode.parse(mode) if mode is not None else self.measurement_mode
        if rng is None:
            rng = np.random.default_rng(seed)

        logger.debug("Simulating %d operation(s) on %d qubit(s)", circuit.gate_count(), n)

        state = self.final_state(circuit)
        norm = state.norm()
        if not np.isfinite(norm) or abs(norm - 1.0) > NORM_TOLERANCE:
            raise SimulationError(f"State lost normalization (norm={norm!r})")

        probs = state.probabilities
        probabilities = {state.label(i): float(p) for i, p in enumerate(probs)}

        measure_map = circuit.measurement_map()
        outcomes = MeasurementEngine.sample(state, measure_map, mode, rng)
        measurements = {}
        if circuit.creg is not None:
            measurements = {circuit.creg.label(clbit): outcomes[clbit]
                            for clbit in sorted(outcomes)}

        counts = MeasurementEngine.sample_counts(
            state, shots, measure_map, circuit.num_clbits, rng) if shots else {}

        unitary = None
        if include_unitary is None or include_unitary:
            if n <= self.max_unitary_qubits:
                unitary = self.unitary(circuit)
            else:
                logger.warning("Skipping unitary for %d qubits (limit %d)",
                               n, self.max_unitary_qubits)

        return SimulationResult(
            state_vector=state.data.copy(),
            probabilities=probabilities,
            num_qubits=n,
            unitary_matrix=unitary,
            measurements=measurements,
            counts=counts,
            shots=shots,
            seed=seed,
            mode=mode.value,
        )

    def final_state(self, circuit: QuantumCircuit) -> StateVector:
        """Evolve without sampling."""
        state = StateVector(circuit.num_qubits)
        for op in circuit.operations():
            gate_def = self._definition(op.name)
            if not gate_def.is_directive:
                self._apply(state, gate_def, op.wires, op.params)
        return state

    def unitary(self, circuit: QuantumCircuit) -> np.ndarray:
        """Product of every gate operator, first gate rightmost."""
        n = circuit.num_qubits
        total = np.eye(2 ** n, dtype=DTYPE)
        for op in circuit.operations():
            gate_def = self._definition(op.name)
            if gate_def.is_directive:
                continue
            try:
                full = expand_operator(gate_def.matrix(op.params), op.wires, n)
            except QCNSArithmeticError as exc:
                raise SimulationError(f"Cannot expand '{op.name}': {exc}") from exc
            total = full @ total
        return total

    def _definition(self, name: str) -> GateDefinition:
        try:
            return self._gate_registry.get(name)
        except UnknownGateError as exc:
            raise SimulationError(f"Circuit holds unregistered gate '{name}'") from exc

    def _apply(self, state: StateVector, gate_def: GateDefinition, wires, params):
        """Apply one gate. Three-wire gates use the Toffoli path or a decomposition."""
        try:
            if gate_def.num_qubits in (1, 2):
                state.apply_gate(gate_def.matrix(params), wires)
            elif gate_def.name == "ccx":
                state.apply_toffoli(*wires)
            elif gate_def.decomposition:
                for step_name, local_wires in gate_def.decomposition:
                    step = self._definition(step_name)
                    self._apply(state, step, tuple(wires[i] for i in local_wires), params)
            else:
                raise UnsupportedGateError(gate_def.name, len(wires))
        except QCNSArithmeticError as exc:
            raise SimulationError(f"Cannot apply '{gate_def.name}': {exc}") from exc
