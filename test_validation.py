"""Validation test harness -- basic correctness checks.

These tests verify fundamental quantum-mechanical identities that any
correct simulator must satisfy, plus the round trips the simulator's
file formats promise.

Run: python test_validation.py
"""

from __future__ import annotations

import sys
import os
import traceback

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import numpy as np

# ---- Engine imports -------------------------------------------------------
from qcns.engine.circuit import QuantumCircuit
from qcns.engine.network import QuantumNetwork
from qcns.engine.analysis import all_bloch_vectors
from qcns.core.qasm import QasmTranspiler


TOLERANCE = 1e-8
PASS_COUNT = 0


def _report(name: str, passed: bool, details: str = ""):
    global PASS_COUNT
    status = "PASS" if passed else "FAIL"
    print(f"  [{status}] {name}")
    if details and not passed:
        print(f"         {details}")
    assert passed, f"{name}: {details}"
    PASS_COUNT += 1


# =========================================================================
# Test 1: Bell state has correct amplitudes and entanglement
# =========================================================================

def test_bell_state():
    """H(q0) -> CX(q0,q1) produces |00>+|11> / sqrt(2)."""
    print("\nTest 1: Bell State Correctness")
    print("-" * 40)

    qc = QuantumCircuit(2).h(0).cx(0, 1)
    result = qc.run(include_unitary=False)
    amps = result.state_vector

    expected = np.array([1, 0, 0, 1]) / np.sqrt(2)
    _report("Amplitudes match (|00>+|11>)/sqrt(2)",
            np.allclose(amps, expected, atol=TOLERANCE),
            f"got {np.round(amps, 6)}")

    for vector in all_bloch_vectors(amps):
        _report(f"Qubit {vector.qubit} maximally mixed",
                abs(vector.purity) < 1e-6,
                f"purity = {vector.purity:.6f}")


# =========================================================================
# Test 2: Normalization is preserved through a deep circuit
# =========================================================================

def test_normalization():
    """A long circuit of mixed gates keeps the state normalized."""
    print("\nTest 2: Normalization Preservation")
    print("-" * 40)

    rng = np.random.default_rng(42)
    qc = QuantumCircuit(4)
    for _ in range(30):
        q = int(rng.integers(4))
        qc.u3(*rng.uniform(0, 2 * np.pi, 3), q)
        qc.cx(q, (q + 1) % 4)
    qc.ccx(0, 1, 2)
    qc.cswap(3, 0, 1)

    result = qc.run(include_unitary=False)
    norm = np.linalg.norm(result.state_vector)
    _report("Norm == 1", abs(norm - 1) < TOLERANCE, f"norm = {norm:.12f}")

    total = sum(result.probabilities.values())
    _report("Probabilities sum to 1", abs(total - 1) < TOLERANCE, f"sum = {total:.12f}")


# =========================================================================
# Test 3: Unitary matrix is unitary and matches the final state
# =========================================================================

def test_unitary():
    """U U^dagger == I and U|0...0> equals the simulated state."""
    print("\nTest 3: Circuit Unitary")
    print("-" * 40)

    qc = QuantumCircuit(3).h(0).rx(0.3, 1).ccx(0, 1, 2).swap(0, 2)
    result = qc.run(include_unitary=True)
    U = result.unitary_matrix

    _report("U is unitary", np.allclose(U @ U.conj().T, np.eye(8), atol=TOLERANCE))
    _report("First column equals final state",
            np.allclose(U[:, 0], result.state_vector, atol=TOLERANCE))


# =========================================================================
# Test 4: Toffoli truth table
# =========================================================================

def test_toffoli():
    """CCX flips the target only when both controls are |1>."""
    print("\nTest 4: Toffoli Truth Table")
    print("-" * 40)

    for bits in range(8):
        qc = QuantumCircuit(3)
        label = format(bits, "03b")
        for q, ch in enumerate(label):
            if ch == "1":
                qc.x(q)
        qc.ccx(0, 1, 2)
        expected = label[:2] + (str(1 - int(label[2])) if label[:2] == "11" else label[2])
        got = qc.run(include_unitary=False).most_likely()
        _report(f"|{label}> -> |{expected}>", got == expected, f"got |{got}>")


# =========================================================================
# Test 5: Seeded counts are reproducible and match the distribution
# =========================================================================

def test_counts():
    """Seeded shots reproduce exactly; frequencies track probabilities."""
    print("\nTest 5: Seeded Sampling")
    print("-" * 40)

    qc = QuantumCircuit(2, 2).h(0).cx(0, 1).measure_all()
    first = qc.run(shots=4000, seed=11).counts
    second = qc.run(shots=4000, seed=11).counts
    _report("Same seed, same counts", first == second, f"{first} vs {second}")
    _report("Only correlated outcomes", set(first) <= {"00", "11"}, f"keys {sorted(first)}")
    ratio = first.get("00", 0) / 4000
    _report("P(00) ~ 0.5", abs(ratio - 0.5) < 0.05, f"ratio = {ratio:.3f}")


# =========================================================================
# Test 6: Snapshot and QASM round trips
# =========================================================================

def test_round_trips():
    """Snapshot and OpenQASM text rebuild an equivalent circuit."""
    print("\nTest 6: Round Trips")
    print("-" * 40)

    qc = QuantumCircuit(3, 3).h(0).crz(0.7, 0, 2).u2(0.1, 0.2, 1).measure(2, 0)
    state = qc.run(include_unitary=False).state_vector

    restored = QuantumCircuit.from_snapshot(qc.to_snapshot())
    _report("Snapshot preserves the layout", restored.to_snapshot() == qc.to_snapshot())

    parsed = QasmTranspiler.parse(QasmTranspiler.transpile(qc))
    parsed_state = parsed.run(include_unitary=False).state_vector
    _report("QASM preserves the state", np.allclose(parsed_state, state, atol=TOLERANCE))


# =========================================================================
# Test 7: Entangled network nodes form a Bell pair
# =========================================================================

def test_network_bell_pair():
    """An EPR link between two single-qubit nodes yields (|00>+|11>)/sqrt(2)."""
    print("\nTest 7: Network Entanglement")
    print("-" * 40)

    net = QuantumNetwork("validation")
    alice = net.add_node("Alice", qubits=1)
    bob = net.add_node("Bob", qubits=1)
    net.add_entanglement(alice.id, 0, bob.id, 0)

    probs = net.run(include_unitary=False).probabilities
    _report("P(00) == P(11) == 0.5",
            abs(probs["00"] - 0.5) < TOLERANCE and abs(probs["11"] - 0.5) < TOLERANCE,
            f"probabilities = {probs}")


# =========================================================================
# Main
# =========================================================================

def main():
    global PASS_COUNT
    PASS_COUNT = 0
    fail_count = 0

    print("=" * 50)
    print("QCNS - Validation Test Suite")
    print("=" * 50)

    tests = [
        test_bell_state,
        test_normalization,
        test_unitary,
        test_toffoli,
        test_counts,
        test_round_trips,
        test_network_bell_pair,
    ]

    for test_fn in tests:
        try:
            test_fn()
        except Exception:
            print(f"\n  [ERROR] {test_fn.__name__} failed:")
            traceback.print_exc()
            fail_count += 1

    print("\n" + "=" * 50)
    print(f"Results: {PASS_COUNT} checks passed, {fail_count} test(s) failed")
    if fail_count == 0:
        print("ALL TESTS PASSED")
    else:
        print("SOME TESTS FAILED")
    print("=" * 50)

    return 0 if fail_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
