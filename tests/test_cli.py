"""Tests for the command line entry point."""

import json

import pytest

import main
from qcns.core.qasm import QasmTranspiler
from qcns.core.serialization import CircuitSerializer, NetworkSerializer
from qcns.engine.circuit import QuantumCircuit


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))


class TestMain:

    def test_runs_qasm(self, tmp_path, capsys, bell_circuit):
        path = tmp_path / "bell.qasm"
        path.write_text(QasmTranspiler.transpile(bell_circuit), encoding="utf-8")
        assert main.main([str(path), "--shots", "200", "--seed", "5"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert set(output["probabilities"]) == {"00", "11"}
        assert sum(output["counts"].values()) == 200
        assert output["seed"] == 5
        assert "unitary_matrix" not in output

    def test_runs_snapshot_with_unitary(self, tmp_path, capsys, bell_circuit):
        path = tmp_path / "bell.qcns"
        CircuitSerializer.save(bell_circuit, path)
        assert main.main([str(path), "--unitary"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert len(output["unitary_matrix"]) == 4

    def test_runs_network(self, tmp_path, capsys, two_node_network):
        path = tmp_path / "lab.qnet"
        NetworkSerializer.save(two_node_network, path)
        assert main.main([str(path)]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["probabilities"]["00"] == pytest.approx(0.5)

    def test_reports_errors(self, tmp_path, capsys):
        path = tmp_path / "broken.qasm"
        path.write_text("OPENQASM 3.0;\nh q[0];\n", encoding="utf-8")
        assert main.main([str(path)]) == 1
        assert main.main([str(tmp_path / "missing.qcns")]) == 1

    def test_bad_parameter_in_snapshot(self, tmp_path, capsys):
        path = tmp_path / "bad.qcns"
        snap = QuantumCircuit(1).rx(0.5, 0).to_snapshot()
        snap["operations"][0]["params"]["theta"] = "abc"
        path.write_text(json.dumps(snap), encoding="utf-8")
        assert main.main([str(path)]) == 1
        assert capsys.readouterr().out == ""
