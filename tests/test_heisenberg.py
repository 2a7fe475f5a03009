"""Tests for Trotterized Heisenberg evolution."""

import numpy as np
import pytest
from scipy.linalg import expm

from qsweep import gates as g
from qsweep.algorithms import heisenberg
from qsweep.algorithms.heisenberg import HeisenbergParameters
from qsweep.errors import ParameterError


PAULI_PAIRS = [
    (heisenberg.xx_evolution, g.X),
    (heisenberg.yy_evolution, g.Y),
    (heisenberg.zz_evolution, g.Z),
]


# ---------------------------------------------------------------------------
# Pauli-pair exponentials
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("evolve,pauli", PAULI_PAIRS)
@pytest.mark.parametrize("theta", [0.0, 0.3, 0.5, -1.1, np.pi / 3])
def test_pair_exponential_matches_expm(unitary_of, evolve, pauli, theta):
    u = unitary_of(2, lambda qc, q: evolve(qc, q[0], q[1], theta))
    np.testing.assert_allclose(u, expm(-1j * theta * np.kron(pauli, pauli)), atol=1e-10)


def test_trotter_step_on_pair(unitary_of):
    coupling, dt = 1.0, 0.5
    u = unitary_of(2, lambda qc, q: heisenberg.trotter_step(qc, q, coupling, dt))
    expected = np.eye(4)
    for _, pauli in PAULI_PAIRS:
        expected = expm(-1j * coupling * dt * np.kron(pauli, pauli)) @ expected
    np.testing.assert_allclose(u, expected, atol=1e-10)


def test_trotter_step_is_exact_for_commuting_pair(unitary_of):
    # XX, YY and ZZ commute on two qubits, so one step is exact
    theta = 0.4
    u = unitary_of(2, lambda qc, q: heisenberg.trotter_step(qc, q, 1.0, theta))
    h = sum(np.kron(p, p) for _, p in PAULI_PAIRS)
    np.testing.assert_allclose(u, expm(-1j * theta * h), atol=1e-10)


# ---------------------------------------------------------------------------
# Steps and parameters
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("total,dt,expected", [
    (5.0, 0.5, 10), (1.2, 0.5, 3), (0.0, 0.5, 0), (1.0, 1.0, 1),
])
def test_step_count(total, dt, expected):
    assert heisenberg.step_count(total, dt) == expected


@pytest.mark.parametrize("n", [5, 10, 15, 20, 25])
def test_default_steps_independent_of_chain(n):
    assert HeisenbergParameters(chain_length=n).steps == 10


@pytest.mark.parametrize("kwargs", [
    {"chain_length": 0},
    {"chain_length": 3, "dt": 0.0},
    {"chain_length": 3, "dt": -0.1},
    {"chain_length": 3, "total_time": -1.0},
])
def test_parameters_validated(kwargs):
    with pytest.raises(ParameterError):
        HeisenbergParameters(**kwargs)


def test_gate_counts_scale_with_pairs_and_steps():
    params = HeisenbergParameters(chain_length=4, total_time=1.0)
    qc = heisenberg.build_evolution(params)
    counts = qc.count_ops()
    pairs, steps = 3, 2
    assert qc.n_qubits == 4
    assert counts["rz"] == 3 * pairs * steps
    assert counts["cx"] == 2 * 3 * pairs * steps
    assert counts["rx"] == 4 * pairs * steps
    assert counts["h"] == 4 + 4 * pairs * steps


def test_single_spin_has_no_interactions():
    qc = heisenberg.build_evolution(HeisenbergParameters(chain_length=1))
    assert qc.count_ops() == {"h": 1, "reset": 1}


# ---------------------------------------------------------------------------
# Readout
# ---------------------------------------------------------------------------

def test_magnetization_bounds():
    assert heisenberg.magnetization((0, 0, 0, 0), 4) == 0.0
    assert heisenberg.magnetization((1, 1, 1, 1), 4) == 1.0
    assert heisenberg.magnetization((1, 0, 1, 1), 4) == 0.75


def test_magnetization_length_mismatch():
    with pytest.raises(ParameterError):
        heisenberg.magnetization((1, 0), 3)


def test_run_evolution():
    result = heisenberg.run_evolution(HeisenbergParameters(chain_length=4), seed=3)
    assert result.steps == 10
    assert len(result.outcome) == 4
    assert 0.0 <= result.magnetization <= 1.0
    assert result.magnetization == sum(result.outcome) / 4
