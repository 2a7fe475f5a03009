"""Tests for the command-line interface."""

import json

import pytest

from qsweep.cli import build_parser, main


def run_cli(capsys, *argv):
    code = main(list(argv))
    out, err = capsys.readouterr()
    return code, out, err


def test_list(capsys):
    code, out, _ = run_cli(capsys, "list")
    assert code == 0
    entries = json.loads(out)["entries"]
    assert "grover/5" in entries
    assert "vqe/beh2" in entries


def test_counts(capsys):
    code, out, _ = run_cli(capsys, "counts", "qpe/4")
    assert code == 0
    data = json.loads(out)
    assert data["key"] == "qpe/4"
    assert data["n_qubits"] == 5
    assert data["gate_counts"]["crz"] == 4


def test_simulate(capsys):
    code, out, _ = run_cli(capsys, "simulate", "vqe/h2", "--seed", "3")
    assert code == 0
    data = json.loads(out)
    assert data["seed"] == 3
    assert data["occupation"] == 2
    assert data["hartree_fock"] == [1, 1, 0, 0]


def test_unknown_key_is_an_error(capsys):
    code, out, err = run_cli(capsys, "simulate", "grover/7")
    assert code == 2
    assert out == ""
    assert "grover/7" in err


def test_no_command_prints_help(capsys):
    code, out, _ = run_cli(capsys)
    assert code == 0
    assert "usage" in out.lower()


def test_log_level_choices():
    parser = build_parser()
    assert parser.parse_args(["--log-level", "debug", "list"]).log_level == "debug"
    with pytest.raises(SystemExit):
        parser.parse_args(["--log-level", "loud", "list"])
