"""Measurement logic and sampling for quantum states.

Measurements are sampled from the final state; they never collapse it.
A measurement map is a sequence of ``(wire, clbit)`` pairs in circuit
order; when two pairs write the same classical bit the later one wins.
"""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from .state_vector import StateVector
from .errors import ValidationError, SimulationError

logger = logging.getLogger(__name__)


class MeasurementMode(Enum):
    """How per-wire outcomes are drawn."""
    JOINT = "joint"              # one basis index from the full distribution
    INDEPENDENT = "independent"  # one Bernoulli draw per wire from its marginal

    @classmethod
    def parse(cls, value) -> MeasurementMode:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValidationError(
                f"Unknown measurement mode {value!r}; "
                f"expected one of {[m.value for m in cls]}") from None


def _normalized(probs: np.ndarray) -> np.ndarray:
    total = probs.sum()
    if not np.isfinite(total) or total <= 1e-15:
        raise SimulationError(f"Cannot sample from a state with total probability {total!r}")
    return probs / total


def _bit(index: int, wire: int, num_qubits: int) -> int:
    return (int(index) >> (num_qubits - 1 - wire)) & 1


class MeasurementEngine:
    """Samples classical outcomes from a state vector."""

    @staticmethod
    def sample_index(state: StateVector, rng: np.random.Generator | None = None) -> int:
        """Draw one basis index from the Born distribution."""
        rng = rng or np.random.default_rng()
        probs = _normalized(state.probabilities)
        return int(rng.choice(len(probs), p=probs))

    @staticmethod
    def sample_joint(state: StateVector, measure_map,
                     rng: np.random.Generator | None = None) -> dict[int, int]:
        """One joint draw: every measured wire reads the same basis index."""
        if not measure_map:
            return {}
        index = MeasurementEngine.sample_index(state, rng)
        n = state.num_qubits
        return {clbit: _bit(index, wire, n) for wire, clbit in measure_map}

    @staticmethod
    def sample_independent(state: StateVector, measure_map,
                           rng: np.random.Generator | None = None) -> dict[int, int]:
        """Independent marginal draws; drops correlations between wires."""
        rng = rng or np.random.default_rng()
        outcomes: dict[int, int] = {}
        for wire, clbit in measure_map:
            p1 = state.marginal_probability(wire)
            outcomes[clbit] = 1 if rng.random() < p1 else 0
        return outcomes

    @staticmethod
    def sample(state: StateVector, measure_map,
               mode: MeasurementMode | str = MeasurementMode.JOINT,
               rng: np.random.Generator | None = None) -> dict[int, int]:
        mode = MeasurementMode.parse(mode)
        if mode is MeasurementMode.INDEPENDENT:
            return MeasurementEngine.sample_independent(state, measure_map, rng)
        return MeasurementEngine.sample_joint(state, measure_map, rng)

    @staticmethod
    def sample_counts(state: StateVector, shots: int, measure_map=None,
                      num_clbits: int = 0,
                      rng: np.random.Generator | None = None) -> dict[str, int]:
        """Sample ``shots`` joint outcomes without collapse.

        With a measurement map the keys are classical-register bitstrings
        (bit 0 leftmost, unmeasured bits read 0). Without one every qubit
        is read and the keys are basis labels.

        Uses numpy multinomial for efficiency.
        """
        if shots < 0:
            raise ValidationError(f"shots must be non-negative, got {shots}")
        if shots == 0:
            return {}
        rng = rng or np.random.default_rng()
        probs = _normalized(state.probabilities)
        counts_array = rng.multinomial(shots, probs)
        n = state.num_qubits
        logger.debug("Sampled %d shot(s) over %d basis state(s)", shots, len(probs))

        if not measure_map:
            return {format(i, f'0{n}b'): int(c)
                    for i, c in enumerate(counts_array) if c > 0}

        counts: dict[str, int] = {}
        for index in np.nonzero(counts_array)[0]:
            bits = ["0"] * num_clbits
            for wire, clbit in measure_map:
                bits[clbit] = str(_bit(index, wire, n))
            key = "".join(bits)
            counts[key] = counts.get(key, 0) + int(counts_array[index])
        return counts
