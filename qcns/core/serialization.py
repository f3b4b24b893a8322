"""JSON save/load for quantum circuits and networks."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from qcns.engine.circuit import QuantumCircuit
from qcns.engine.errors import SnapshotFormatError
from qcns.engine.network import QuantumNetwork

logger = logging.getLogger(__name__)


def _read_json(filepath: Path) -> dict:
    with open(filepath, 'r', encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise SnapshotFormatError(f"{filepath}: invalid JSON ({exc})") from exc


def _write_json(filepath: Path, data: dict):
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


class CircuitSerializer:
    """JSON save/load for quantum circuits."""

    FILE_EXTENSION = ".qcns"

    @staticmethod
    def save(circuit: QuantumCircuit, filepath: Path | str):
        filepath = Path(filepath)
        _write_json(filepath, circuit.to_snapshot())
        logger.info("Saved circuit to %s", filepath)

    @staticmethod
    def load(filepath: Path | str) -> QuantumCircuit:
        filepath = Path(filepath)
        return QuantumCircuit.from_snapshot(_read_json(filepath))

    @staticmethod
    def dumps(circuit: QuantumCircuit) -> str:
        return json.dumps(circuit.to_snapshot(), indent=2, ensure_ascii=False)

    @staticmethod
    def loads(text: str) -> QuantumCircuit:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SnapshotFormatError(f"Invalid JSON ({exc})") from exc
        return QuantumCircuit.from_snapshot(data)


class NetworkSerializer:
    """JSON save/load for quantum networks."""

    FILE_EXTENSION = ".qnet"

    @staticmethod
    def save(network: QuantumNetwork, filepath: Path | str):
        filepath = Path(filepath)
        _write_json(filepath, network.to_snapshot())
        logger.info("Saved network to %s", filepath)

    @staticmethod
    def load(filepath: Path | str) -> QuantumNetwork:
        filepath = Path(filepath)
        return QuantumNetwork.from_snapshot(_read_json(filepath))
