"""Tests for circuit and network files plus configuration persistence."""

import json
import logging

import pytest

from qcns.core.config import SimulatorConfig
from qcns.core.serialization import CircuitSerializer, NetworkSerializer
from qcns.engine.circuit import QuantumCircuit
from qcns.engine.errors import SnapshotFormatError


class TestCircuitSerializer:

    def test_save_and_load(self, tmp_path, bell_circuit):
        path = tmp_path / f"bell{CircuitSerializer.FILE_EXTENSION}"
        CircuitSerializer.save(bell_circuit, path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["type"] == "quantum-circuit"
        loaded = CircuitSerializer.load(path)
        assert loaded.to_snapshot() == bell_circuit.to_snapshot()

    def test_string_round_trip(self, ghz_circuit):
        text = CircuitSerializer.dumps(ghz_circuit)
        assert CircuitSerializer.loads(text).to_snapshot() == ghz_circuit.to_snapshot()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.qcns"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotFormatError):
            CircuitSerializer.load(path)
        with pytest.raises(SnapshotFormatError):
            CircuitSerializer.loads("[1, 2")


class TestNetworkSerializer:

    def test_save_and_load(self, tmp_path, two_node_network):
        path = tmp_path / f"lab{NetworkSerializer.FILE_EXTENSION}"
        NetworkSerializer.save(two_node_network, path)
        loaded = NetworkSerializer.load(path)
        assert loaded.to_snapshot() == two_node_network.to_snapshot()
        assert list(loaded.entanglements) == ["0-0_1-0"]

    def test_mismatched_node_circuit(self, two_node_network):
        snap = two_node_network.to_snapshot()
        snap["nodes"][0]["circuit"] = QuantumCircuit(3, 3).to_snapshot()
        with pytest.raises(SnapshotFormatError):
            type(two_node_network).from_snapshot(snap)


class TestSimulatorConfig:

    def test_defaults(self, config_dir):
        config = SimulatorConfig.load(config_dir)
        assert config.measurement_mode == "joint"
        assert config.default_shots == 0
        assert config.max_unitary_qubits == 10
        assert config.max_qubits == 16
        assert config.tolerance == 1e-9
        assert config.logging_level == logging.WARNING

    def test_save_and_load(self, config_dir):
        config = SimulatorConfig.load(config_dir)
        config.default_shots = 256
        config.log_level = "debug"
        config.save()
        loaded = SimulatorConfig.load(config_dir)
        assert loaded.default_shots == 256
        assert loaded.logging_level == logging.DEBUG

    def test_unknown_keys_ignored(self, config_dir):
        config_dir.mkdir(parents=True)
        (config_dir / "config.json").write_text(
            json.dumps({"theme": "dark", "max_qubits": 8}), encoding="utf-8")
        config = SimulatorConfig.load(config_dir)
        assert config.max_qubits == 8
        assert not hasattr(config, "theme")

    def test_corrupt_file_falls_back_with_warning(self, config_dir, caplog):
        config_dir.mkdir(parents=True)
        (config_dir / "config.json").write_text("{oops", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="qcns.core.config"):
            config = SimulatorConfig.load(config_dir)
        assert config.max_unitary_qubits == 10
        assert "Ignoring unreadable config" in caplog.text
