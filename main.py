"""QCNS - command line entry point.

Usage:
    python main.py bell.qasm --shots 1024 --seed 7
    python main.py lab.qnet --network --unitary
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from qcns.core.config import SimulatorConfig
from qcns.core.qasm import QasmTranspiler
from qcns.core.serialization import CircuitSerializer, NetworkSerializer
from qcns.engine.errors import QCNSError
from qcns.engine.measurement import MeasurementMode
from qcns.engine.simulator import Simulator

logger = logging.getLogger("qcns")


def load_circuit(path: Path, as_network: bool = False):
    """Load a circuit from ``.qasm``, ``.qcns`` or ``.qnet`` (flattened)."""
    if as_network or path.suffix == NetworkSerializer.FILE_EXTENSION:
        return NetworkSerializer.load(path).to_circuit()
    if path.suffix == CircuitSerializer.FILE_EXTENSION:
        return CircuitSerializer.load(path)
    return QasmTranspiler.parse(path.read_text(encoding="utf-8"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quantum circuit and network simulator")
    parser.add_argument("file", type=Path, help=".qasm, .qcns or .qnet file")
    parser.add_argument("--shots", type=int, default=None,
                        help="joint samples for the counts histogram")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--unitary", action="store_true",
                        help="include the circuit unitary in the output")
    parser.add_argument("--mode", choices=[m.value for m in MeasurementMode], default=None)
    parser.add_argument("--network", action="store_true",
                        help="treat FILE as a network snapshot")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = SimulatorConfig.load()
    logging.basicConfig(level=config.logging_level,
                        format="%(levelname)s %(name)s: %(message)s")

    shots = config.default_shots if args.shots is None else args.shots
    try:
        circuit = load_circuit(args.file, args.network)
        simulator = Simulator.from_config(config)
        result = circuit.run(shots=shots, seed=args.seed, include_unitary=args.unitary,
                             mode=args.mode, simulator=simulator)
    except (QCNSError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    output = result.to_dict()
    output["probabilities"] = {k: v for k, v in output["probabilities"].items()
                               if v > config.tolerance}
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == '__main__':
    sys.exit(main())
