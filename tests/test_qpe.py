"""Tests for quantum phase estimation."""

import numpy as np
import pytest

from qsweep.algorithms import qpe
from qsweep.algorithms.qpe import PhaseEstimationParameters
from qsweep.errors import ParameterError


# ---------------------------------------------------------------------------
# Readout
# ---------------------------------------------------------------------------

def test_estimated_phase_lsb_first():
    assert qpe.estimated_phase([1, 0, 1, 0]) == 0.3125
    assert qpe.estimated_phase((0, 0, 0, 1)) == 0.5
    assert qpe.estimated_phase((1,)) == 0.5


def test_empty_outcome_rejected():
    with pytest.raises(ParameterError):
        qpe.estimated_phase([])


def test_true_phase_of_rz_reference():
    assert qpe.true_phase(4 * np.pi) == pytest.approx(1.0)
    assert qpe.true_phase(1.0) == pytest.approx(1 / (4 * np.pi))


def test_estimation_error():
    theta = 4 * np.pi * 0.3
    assert qpe.estimation_error([1, 0, 1, 0], theta) == pytest.approx(0.0125)


@pytest.mark.parametrize("m", [0, -2])
def test_parameters_validated(m):
    with pytest.raises(ParameterError):
        PhaseEstimationParameters(n_counting=m)


# ---------------------------------------------------------------------------
# Fourier transforms
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("n", [1, 2, 3])
def test_qft_roundtrip(state_after, n):
    rng = np.random.default_rng(n)
    psi = rng.normal(size=2 ** n) + 1j * rng.normal(size=2 ** n)
    psi /= np.linalg.norm(psi)

    def apply(qc, q):
        qpe.qft(qc, q)
        qpe.inverse_qft(qc, q)

    np.testing.assert_allclose(state_after(n, apply, initial_state=psi), psi, atol=1e-10)


@pytest.mark.parametrize("n", [1, 2, 3])
def test_qft_is_adjoint_of_inverse(unitary_of, n):
    forward = unitary_of(n, qpe.qft)
    inverse = unitary_of(n, qpe.inverse_qft)
    np.testing.assert_allclose(forward @ inverse, np.eye(2 ** n), atol=1e-10)
    np.testing.assert_allclose(forward, inverse.conj().T, atol=1e-10)


def test_qft_of_zero_is_uniform(state_after):
    sv = state_after(3, qpe.qft)
    np.testing.assert_allclose(sv, np.full(8, 1 / np.sqrt(8)), atol=1e-10)


# ---------------------------------------------------------------------------
# Full estimation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("m,k", [(1, 1), (3, 5), (4, 5), (5, 19)])
def test_exact_phase_is_recovered_deterministically(m, k):
    theta = 4 * np.pi * k / 2 ** m
    params = PhaseEstimationParameters(n_counting=m, theta=theta)
    for seed in range(3):
        est = qpe.run_estimation(params, seed=seed)
        assert est.estimated_phase == pytest.approx(k / 2 ** m)
        assert est.error == pytest.approx(0.0, abs=1e-12)


def test_five_sixteenths_reads_1010():
    params = PhaseEstimationParameters(n_counting=4, theta=5 * np.pi / 4)
    assert qpe.run_estimation(params, seed=0).outcome == (1, 0, 1, 0)


def test_default_theta_within_one_bin_mostly():
    m = 6
    params = PhaseEstimationParameters(n_counting=m)
    errors = [qpe.run_estimation(params, seed=s).error for s in range(20)]
    assert sum(e <= 1 / 2 ** m for e in errors) >= 12


def test_circuit_structure():
    qc = qpe.build_estimation(PhaseEstimationParameters(n_counting=5))
    counts = qc.count_ops()
    assert qc.n_qubits == 6
    assert counts["crz"] == 5
    assert counts["cp"] == 5 * 4 // 2
    assert counts["swap"] == 2
    assert counts["reset"] == 6
    assert "measure" not in counts


def test_carrier_reset_after_decoding_and_readout():
    m = 4
    qc, bits = qpe._build(PhaseEstimationParameters(n_counting=m), measure=True)
    names = [inst.name for inst in qc.instructions]
    carrier_reset = next(
        i for i, inst in enumerate(qc.instructions) if inst.name == "reset" and inst.qubits == (m,)
    )
    last_measure = max(i for i, name in enumerate(names) if name == "measure")
    last_swap = max(i for i, name in enumerate(names) if name == "swap")
    assert len(bits) == m
    assert carrier_reset > last_measure > last_swap
    assert names[:carrier_reset].count("reset") == 0


def test_controlled_powers_use_exact_angles():
    theta = 0.3
    qc = qpe.build_estimation(PhaseEstimationParameters(n_counting=4, theta=theta))
    angles = [inst.params[0] for inst in qc.instructions if inst.name == "crz"]
    assert angles == [theta, 2 * theta, 4 * theta, 8 * theta]


def test_error_shrinks_with_more_counting_qubits():
    def median_error(m):
        params = PhaseEstimationParameters(n_counting=m)
        return np.median([qpe.run_estimation(params, seed=s).error for s in range(15)])

    assert median_error(8) < median_error(4)
    assert median_error(4) <= 1 / 2 ** 4
