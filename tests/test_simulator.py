"""Tests for state evolution, sampling and the unitary builder."""

import math

import numpy as np
import pytest

from qcns.engine.circuit import QuantumCircuit
from qcns.engine.errors import SimulationError, UnsupportedGateError, ValidationError
from qcns.engine.gate_registry import GateRegistry
from qcns.engine.gates import GateDefinition, GateType, TOFFOLI_TEMPLATE
from qcns.engine.measurement import MeasurementEngine, MeasurementMode
from qcns.engine.simulator import Simulator, expand_operator
from qcns.engine.state_vector import StateVector

TOL = 1e-9


def _nonzero(probabilities):
    return {k: v for k, v in probabilities.items() if v > TOL}


class TestStateVector:

    def test_initial_state(self):
        sv = StateVector(3)
        assert sv.data[0] == 1 and np.sum(sv.probabilities) == pytest.approx(1.0)
        assert sv.labels()[1] == "001"

    def test_qubit_zero_is_most_significant(self):
        sv = StateVector(3)
        sv.apply_gate(np.array([[0, 1], [1, 0]], dtype=complex), [0])
        assert sv.data[4] == 1  # |100>

    def test_toffoli_kernel(self):
        sv = StateVector(3)
        x = np.array([[0, 1], [1, 0]], dtype=complex)
        sv.apply_gate(x, [0])
        sv.apply_gate(x, [2])
        sv.apply_toffoli(0, 2, 1)
        assert sv.data[0b111] == 1

    def test_reduced_density_matrix_of_bell_qubit(self):
        state = QuantumCircuit(2).h(0).cx(0, 1).run().state_vector
        rho = StateVector.from_amplitudes(state).get_reduced_density_matrix(1)
        assert np.allclose(rho, np.eye(2) / 2)

    def test_copy_is_independent(self):
        sv = StateVector(1)
        clone = sv.copy()
        clone.apply_gate(np.array([[0, 1], [1, 0]], dtype=complex), [0])
        assert sv.data[0] == 1


class TestEvolution:

    def test_probabilities_sum_to_one(self):
        qc = QuantumCircuit(4).h(0).rx(0.3, 1).cu(0.1, 0.2, 0.3, 0.4, 0, 3).iswap(1, 2).ccx(0, 1, 3)
        result = qc.run()
        assert sum(result.probabilities.values()) == pytest.approx(1.0, abs=TOL)
        assert len(result.probabilities) == 16

    @pytest.mark.parametrize("first,second", [("h", "h"), ("x", "x"), ("s", "sdg"), ("t", "tdg")])
    def test_self_inverse_pairs_restore_ground_state(self, first, second):
        qc = QuantumCircuit(1).h(0)
        getattr(qc, first)(0)
        getattr(qc, second)(0)
        qc.h(0)
        assert qc.run().probabilities["0"] == pytest.approx(1.0)

    def test_bell_distribution(self, bell_circuit):
        result = bell_circuit.run(seed=3)
        assert _nonzero(result.probabilities) == pytest.approx({"00": 0.5, "11": 0.5})

    def test_ghz_distribution(self, ghz_circuit):
        assert _nonzero(ghz_circuit.run().probabilities) == pytest.approx(
            {"000": 0.5, "111": 0.5})

    @pytest.mark.parametrize("bits", range(8))
    def test_toffoli_truth_table(self, bits):
        qc = QuantumCircuit(3)
        for q in range(3):
            if bits >> (2 - q) & 1:
                qc.x(q)
        qc.ccx(0, 1, 2)
        expected = bits ^ 1 if bits >> 1 == 0b11 else bits
        assert qc.run().probabilities[format(expected, "03b")] == pytest.approx(1.0)

    @pytest.mark.parametrize("bits", range(8))
    def test_fredkin_truth_table(self, bits):
        qc = QuantumCircuit(3)
        for q in range(3):
            if bits >> (2 - q) & 1:
                qc.x(q)
        qc.cswap(0, 1, 2)
        label = format(bits, "03b")
        if label[0] == "1":
            label = label[0] + label[2] + label[1]
        assert qc.run().probabilities[label] == pytest.approx(1.0)

    @pytest.mark.parametrize("n", [3, 4, 5])
    def test_single_qubit_gate_lands_on_its_wire(self, n):
        for wire in range(n):
            expected = "".join("1" if q == wire else "0" for q in range(n))
            result = QuantumCircuit(n).x(wire).run(include_unitary=False)
            assert result.probabilities[expected] == pytest.approx(1.0), wire

    @pytest.mark.parametrize("wires", [(0, 3), (3, 0), (1, 3), (3, 1), (2, 0)])
    def test_two_qubit_gate_lands_on_its_wires(self, wires):
        control, target = wires
        expected = "".join("1" if q in wires else "0" for q in range(4))
        result = QuantumCircuit(4).x(control).cx(control, target).run(include_unitary=False)
        assert result.probabilities[expected] == pytest.approx(1.0)

    def test_swap_and_controlled_rotation_conventions(self):
        assert QuantumCircuit(2).x(0).swap(0, 1).run().probabilities["01"] == pytest.approx(1)
        assert QuantumCircuit(2).x(0).crz(math.pi, 0, 1).run().probabilities["10"] == \
            pytest.approx(1)
        assert QuantumCircuit(3).x(0).run().probabilities["100"] == pytest.approx(1)

    def test_directives_do_not_evolve(self):
        qc = QuantumCircuit(2, 2).h(0).barrier().measure(0, 0)
        assert _nonzero(qc.run().probabilities) == pytest.approx({"00": 0.5, "10": 0.5})

    def test_state_vector_is_a_copy(self, bell_circuit):
        result = bell_circuit.run()
        result.state_vector[:] = 0
        assert sum(bell_circuit.run().probabilities.values()) == pytest.approx(1.0)

    def test_amplitude_rows(self):
        rows = QuantumCircuit(1).h(0).run().amplitudes()
        assert rows[0] == {"state": "|0⟩", "amplitude": "0.7071", "probability": 0.5}

    def test_qubit_limit(self):
        with pytest.raises(ValidationError):
            Simulator(max_qubits=2).run(QuantumCircuit(3))


class TestUnitary:

    def test_cx_unitary(self):
        u = QuantumCircuit(2).cx(0, 1).run().unitary_matrix
        expected = np.array([[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]])
        assert np.allclose(u, expected)

    def test_reversed_wires(self):
        u = QuantumCircuit(2).cx(1, 0).run().unitary_matrix
        # |01> -> |11>
        assert u[3, 1] == pytest.approx(1)

    def test_unitary_reproduces_state(self):
        qc = QuantumCircuit(3).h(0).cry(0.7, 0, 2).cswap(2, 0, 1).t(1)
        result = qc.run()
        assert np.allclose(result.unitary_matrix[:, 0], result.state_vector)

    @pytest.mark.parametrize("seed", range(6))
    def test_random_circuits_match_unitary(self, seed):
        rng = np.random.default_rng(seed)
        n = 3 + seed % 2
        qc = QuantumCircuit(n)
        for _ in range(12):
            kind = rng.integers(5)
            wires = [int(w) for w in rng.permutation(n)[:3]]
            if kind == 0:
                qc.h(wires[0])
            elif kind == 1:
                qc.u3(*rng.uniform(0, 2 * math.pi, 3), wires[0])
            elif kind == 2:
                qc.crx(float(rng.uniform(0, math.pi)), wires[0], wires[1])
            elif kind == 3:
                qc.iswap(wires[0], wires[1])
            else:
                qc.ccx(*wires)
        result = qc.run()
        assert np.allclose(result.unitary_matrix[:, 0], result.state_vector)

    def test_expand_operator_on_middle_wire(self):
        x = np.array([[0, 1], [1, 0]], dtype=complex)
        full = expand_operator(x, [1], 3)
        assert np.allclose(full, np.kron(np.kron(np.eye(2), x), np.eye(2)))

    def test_skipped_above_limit(self, caplog):
        sim = Simulator(max_unitary_qubits=2)
        with caplog.at_level("WARNING", logger="qcns.engine.simulator"):
            result = sim.run(QuantumCircuit(3).h(0))
        assert result.unitary_matrix is None
        assert "Skipping unitary" in caplog.text

    def test_opt_out(self):
        assert QuantumCircuit(1).h(0).run(include_unitary=False).unitary_matrix is None


class TestMeasurement:

    def test_joint_mode_preserves_correlations(self, bell_circuit):
        for seed in range(25):
            m = bell_circuit.run(seed=seed).measurements
            assert set(m) == {"creg[0]", "creg[1]"}
            assert m["creg[0]"] == m["creg[1]"]

    def test_independent_mode_is_available(self, bell_circuit):
        outcomes = {tuple(bell_circuit.run(seed=s, mode="independent").measurements.values())
                    for s in range(40)}
        # Marginals are 1/2 each, so uncorrelated pairs show up
        assert (0, 1) in outcomes or (1, 0) in outcomes

    def test_seed_is_reproducible(self, bell_circuit):
        a = bell_circuit.run(shots=100, seed=11)
        b = bell_circuit.run(shots=100, seed=11)
        assert a.measurements == b.measurements and a.counts == b.counts

    def test_counts(self, bell_circuit):
        counts = bell_circuit.run(shots=500, seed=5).counts
        assert sum(counts.values()) == 500
        assert set(counts) <= {"00", "11"}

    def test_counts_without_measurements_use_basis_labels(self):
        counts = QuantumCircuit(2).x(1).run(shots=10, seed=0).counts
        assert counts == {"01": 10}

    def test_unmeasured_bits_read_zero(self):
        counts = QuantumCircuit(2, 3).x(0).measure(0, 2).run(shots=5, seed=0).counts
        assert counts == {"001": 5}

    def test_deterministic_measurement(self):
        result = QuantumCircuit(2, 2).x(1).measure_all().run(seed=0)
        assert result.measurements == {"creg[0]": 0, "creg[1]": 1}

    def test_negative_shots(self, bell_circuit):
        with pytest.raises(ValidationError):
            bell_circuit.run(shots=-1)

    def test_unknown_mode(self):
        with pytest.raises(ValidationError):
            MeasurementMode.parse("weak")

    def test_engine_sample_joint(self):
        sv = StateVector(2)
        sv.apply_gate(np.array([[0, 1], [1, 0]], dtype=complex), [1])
        rng = np.random.default_rng(0)
        assert MeasurementEngine.sample_joint(sv, [(1, 0), (0, 1)], rng) == {0: 1, 1: 0}


class TestFailures:

    def test_unregistered_three_wire_gate(self):
        registry = GateRegistry.instance()
        registry.register(GateDefinition(
            name="ccx_copy", display_name="CCX'", description="", gate_type=GateType.MULTI,
            num_qubits=3, param_names=(), template=TOFFOLI_TEMPLATE, symbol="C"))
        try:
            sim = Simulator()
            with pytest.raises(UnsupportedGateError):
                sim._apply(StateVector(3), registry.get("ccx_copy"), (0, 1, 2), {})
        finally:
            GateRegistry.reset()

    def test_unsupported_is_simulation_error(self):
        assert issubclass(UnsupportedGateError, SimulationError)

    @pytest.mark.parametrize("angle", [float("nan"), float("inf"), -float("inf")])
    def test_non_finite_angle_rejected_at_placement(self, angle):
        qc = QuantumCircuit(1, 1)
        with pytest.raises(ValidationError):
            qc.rx(angle, 0)
        assert qc.gate_count() == 0

    def test_zero_norm_state_is_not_sampled(self):
        sv = StateVector(1)
        sv.data = np.zeros(2)
        with pytest.raises(SimulationError):
            MeasurementEngine.sample_index(sv, np.random.default_rng(0))
        with pytest.raises(SimulationError):
            MeasurementEngine.sample_counts(sv, 10, rng=np.random.default_rng(0))
