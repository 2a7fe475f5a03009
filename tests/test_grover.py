"""Tests for Grover search."""

import numpy as np
import pytest

from qsweep.algorithms import grover
from qsweep.algorithms.grover import GroverParameters
from qsweep.circuit import Conjugation
from qsweep.errors import ParameterError


def marked_index(n):
    return int("".join(str(b) for b in grover.marked_pattern(n)), 2)


def input_marginal(state, n):
    """Probabilities of the n input qubits, tracing out trailing scratch qubits."""
    probs = np.abs(state) ** 2
    return probs.reshape(2 ** n, -1).sum(axis=1)


# ---------------------------------------------------------------------------
# Iteration count
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("n,expected", [
    (2, 1), (3, 2), (4, 3), (5, 4), (10, 25), (15, 142), (20, 804), (25, 4549),
])
def test_iteration_count(n, expected):
    assert grover.iteration_count(n) == expected


@pytest.mark.parametrize("n", [0, -3])
def test_iteration_count_rejects_empty_register(n):
    with pytest.raises(ParameterError):
        grover.iteration_count(n)


@pytest.mark.parametrize("n", [0, -1, 2.0])
def test_parameters_validated(n):
    with pytest.raises(ParameterError):
        GroverParameters(n_qubits=n)


def test_marked_pattern_alternates():
    assert grover.marked_pattern(5) == (0, 1, 0, 1, 0)
    assert grover.is_marked((0, 1, 0, 1))
    assert not grover.is_marked((1, 0, 1, 0))


# ---------------------------------------------------------------------------
# Oracle and diffusion
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("n", [1, 2, 3, 4])
def test_oracle_flips_only_marked_phase(state_after, n):
    def apply(qc, q):
        grover.prepare_uniform(qc, q)
        grover.oracle(qc, q)

    state = state_after(n, apply).reshape(2 ** n, -1)
    # scratch qubit is back in |0>
    np.testing.assert_allclose(state[:, 1:], 0, atol=1e-12)
    expected = np.full(2 ** n, 1 / np.sqrt(2 ** n))
    expected[marked_index(n)] *= -1
    np.testing.assert_allclose(state[:, 0], expected, atol=1e-12)


def test_diffusion_is_reflection_about_uniform(unitary_of):
    n = 3
    s = np.full(2 ** n, 1 / np.sqrt(2 ** n))
    u = unitary_of(n, grover.diffusion)
    np.testing.assert_allclose(u, np.eye(2 ** n) - 2 * np.outer(s, s), atol=1e-12)


def test_oracle_and_diffusion_are_conjugation_blocks():
    qc = grover.build_search(GroverParameters(n_qubits=3))
    blocks = [op for op in qc.ops if isinstance(op, Conjugation)]
    assert len(blocks) == 2 * grover.iteration_count(3)


# ---------------------------------------------------------------------------
# Full search
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("n", [2, 3, 4, 5])
def test_search_amplifies_marked_item(state_after, n):
    def apply(qc, q):
        grover.search(qc, q)

    probs = input_marginal(state_after(n, apply), n)
    assert probs[marked_index(n)] > 0.9


def test_circuit_width_includes_scratch():
    qc = grover.build_search(GroverParameters(n_qubits=6))
    assert qc.n_qubits == 7
    counts = qc.count_ops()
    assert counts["mcx"] == grover.iteration_count(6)
    assert counts["mcz"] == grover.iteration_count(6)
    assert "measure" not in counts


def test_run_search_finds_pattern():
    found = [grover.run_search(GroverParameters(n_qubits=4), seed=s).found for s in range(10)]
    assert sum(found) >= 8


def test_run_search_result_fields():
    result = grover.run_search(GroverParameters(n_qubits=2), seed=0)
    assert result.iterations == 1
    assert result.outcome == (0, 1)
    assert result.found
