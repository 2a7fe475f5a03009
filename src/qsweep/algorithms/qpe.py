"""
Quantum phase estimation of the Rz(theta) eigenphase.

The carrier qubit is prepared in |1>, an eigenstate of Rz(theta) with
eigenvalue exp(i theta / 2), so the phase being estimated is
theta / (4 pi). Counting qubit k (least significant first) controls
Rz(2^k theta) on the carrier; after the inverse QFT the counting
register reads the phase as a little-endian binary fraction.

Usage:
    from qsweep.algorithms.qpe import PhaseEstimationParameters, run_estimation

    est = run_estimation(PhaseEstimationParameters(n_counting=6), seed=3)
    print(est.estimated_phase, est.true_phase, est.error)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from qsweep.backends import StatevectorBackend
from qsweep.circuit import Circuit
from qsweep.errors import ParameterError
from qsweep.register import Qubit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseEstimationParameters:
    """Counting-register size and the angle of the reference Rz unitary."""
    n_counting: int
    theta: float = 1.0

    def __post_init__(self) -> None:
        m = self.n_counting
        if isinstance(m, bool) or not isinstance(m, int) or m < 1:
            raise ParameterError(f"n_counting must be a positive integer, got {m!r}")


@dataclass
class PhaseEstimate:
    """Readout of one measured estimation run."""
    n_counting: int
    theta: float
    outcome: tuple[int, ...]
    estimated_phase: float
    true_phase: float
    error: float


# ---------------------------------------------------------------------------
# Readout
# ---------------------------------------------------------------------------

def estimated_phase(bits: Sequence[int]) -> float:
    """
    Phase encoded by a counting-register outcome, least significant bit first.

    >>> estimated_phase([1, 0, 1, 0])
    0.3125
    """
    m = len(bits)
    if m == 0:
        raise ParameterError("Cannot read a phase from an empty outcome")
    return sum(int(b) << i for i, b in enumerate(bits)) / 2 ** m


def true_phase(theta: float) -> float:
    """Eigenphase of Rz(theta) on |1>, as a fraction of a full turn."""
    return theta / (4 * np.pi)


def estimation_error(bits: Sequence[int], theta: float) -> float:
    return abs(estimated_phase(bits) - true_phase(theta))


# ---------------------------------------------------------------------------
# Fourier transforms
# ---------------------------------------------------------------------------

def inverse_qft(qc: Circuit, qubits: Sequence[Qubit]) -> None:
    """
    Inverse quantum Fourier transform, little-endian on both sides.

    Phases are removed from the most significant qubit down, each
    followed by a Hadamard, and the register is reversed at the end.
    """
    m = len(qubits)
    for i in reversed(range(m)):
        for j in reversed(range(i + 1, m)):
            qc.cp(-np.pi / 2 ** (j - i), qubits[j], qubits[i])
        qc.h(qubits[i])
    for i in range(m // 2):
        qc.swap(qubits[i], qubits[m - 1 - i])


def qft(qc: Circuit, qubits: Sequence[Qubit]) -> None:
    """Forward transform: the exact adjoint of :func:`inverse_qft`."""
    qc.adjoint(lambda rec: inverse_qft(rec, qubits))


# ---------------------------------------------------------------------------
# Circuit construction
# ---------------------------------------------------------------------------

def controlled_powers(qc: Circuit, counting: Sequence[Qubit], carrier: Qubit, theta: float) -> None:
    """Controlled Rz(2^k theta) from counting qubit k onto the carrier."""
    for k, control in enumerate(counting):
        qc.crz((2 ** k) * theta, control, carrier)


def estimate_phase(qc: Circuit, counting: Sequence[Qubit], theta: float,
                   measure: bool = False) -> tuple[int, ...]:
    """
    Kick the eigenphase into ``counting``, decode it and optionally read it.

    The carrier stays live through the inverse QFT and the measurement of
    the counting register; it is reset when its scope closes, after both.
    Returns the classical bits of the measurement, or ``()``.
    """
    bits: tuple[int, ...] = ()
    for q in counting:
        qc.h(q)
    with qc.allocate(1, "carrier") as carrier:
        qc.x(carrier[0])
        controlled_powers(qc, counting, carrier[0], theta)
        inverse_qft(qc, counting)
        if measure:
            bits = qc.measure(counting)
    return bits


def _build(params: PhaseEstimationParameters, measure: bool) -> tuple[Circuit, tuple[int, ...]]:
    qc = Circuit(name=f"qpe_{params.n_counting}")
    with qc.allocate(params.n_counting, "counting") as counting:
        bits = estimate_phase(qc, counting, params.theta, measure=measure)
    logger.debug("built %r", qc)
    return qc, bits


def build_estimation(params: PhaseEstimationParameters, measure: bool = False) -> Circuit:
    return _build(params, measure)[0]


def run_estimation(params: PhaseEstimationParameters, seed: int | None = None,
                   backend: StatevectorBackend | None = None) -> PhaseEstimate:
    """Build, simulate and decode one estimation run."""
    backend = backend or StatevectorBackend(seed=seed)
    qc, bits = _build(params, measure=True)
    outcome = backend.run(qc).outcome(bits)
    phase = estimated_phase(outcome)
    exact = true_phase(params.theta)
    return PhaseEstimate(
        n_counting=params.n_counting,
        theta=params.theta,
        outcome=outcome,
        estimated_phase=phase,
        true_phase=exact,
        error=abs(phase - exact),
    )
