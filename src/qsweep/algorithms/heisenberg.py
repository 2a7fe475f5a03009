"""
Trotterized time evolution of the 1D Heisenberg XXX chain.

    H = J * sum_i (X_i X_{i+1} + Y_i Y_{i+1} + Z_i Z_{i+1})

Each Pauli-pair exponential exp(-i J dt P⊗P) is a conjugation block: a
basis change plus a CNOT maps P⊗P onto Z on the second qubit, where a
single Rz(2 J dt) does the work.

Usage:
    from qsweep.algorithms.heisenberg import HeisenbergParameters, run_evolution

    result = run_evolution(HeisenbergParameters(chain_length=4), seed=7)
    print(result.steps, result.magnetization)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from qsweep.backends import StatevectorBackend
from qsweep.circuit import Circuit
from qsweep.errors import ParameterError
from qsweep.register import Qubit, QubitRegister

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeisenbergParameters:
    """
    Evolution parameters.

    Parameters
    ----------
    chain_length : int
        Number of spins (qubits), at least 1.
    coupling : float
        Exchange coupling J.
    dt : float
        Trotter time step, strictly positive.
    total_time : float
        Total evolution time, non-negative.
    """
    chain_length: int
    coupling: float = 1.0
    dt: float = 0.5
    total_time: float = 5.0

    def __post_init__(self) -> None:
        n = self.chain_length
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise ParameterError(f"chain_length must be a positive integer, got {n!r}")
        if not self.dt > 0:
            raise ParameterError(f"dt must be positive, got {self.dt!r}")
        if not self.total_time >= 0:
            raise ParameterError(f"total_time must be non-negative, got {self.total_time!r}")

    @property
    def steps(self) -> int:
        return step_count(self.total_time, self.dt)


@dataclass
class EvolutionResult:
    """Result of one measured evolution run."""
    chain_length: int
    steps: int
    outcome: tuple[int, ...]
    magnetization: float


def step_count(total_time: float, dt: float) -> int:
    """Number of Trotter steps: ceil(total_time / dt)."""
    if not dt > 0:
        raise ParameterError(f"dt must be positive, got {dt!r}")
    if not total_time >= 0:
        raise ParameterError(f"total_time must be non-negative, got {total_time!r}")
    return math.ceil(total_time / dt)


def magnetization(outcome: tuple[int, ...], chain_length: int) -> float:
    """Fraction of spins measured in |1>."""
    if len(outcome) != chain_length or chain_length < 1:
        raise ParameterError(
            f"Outcome of length {len(outcome)} does not match chain length {chain_length}"
        )
    return sum(outcome) / chain_length


# ---------------------------------------------------------------------------
# Pauli-pair exponentials
# ---------------------------------------------------------------------------

def _zz_kernel(qc: Circuit, q0: Qubit, q1: Qubit, theta: float, basis) -> None:
    def setup(rec: Circuit) -> None:
        basis(rec)
        rec.cx(q0, q1)

    qc.conjugate(setup, lambda rec: rec.rz(2 * theta, q1))


def xx_evolution(qc: Circuit, q0: Qubit, q1: Qubit, theta: float) -> None:
    """exp(-i theta X⊗X)."""
    _zz_kernel(qc, q0, q1, theta, lambda rec: rec.h(q0).h(q1))


def yy_evolution(qc: Circuit, q0: Qubit, q1: Qubit, theta: float) -> None:
    """exp(-i theta Y⊗Y)."""
    _zz_kernel(qc, q0, q1, theta, lambda rec: rec.rx(np.pi / 2, q0).rx(np.pi / 2, q1))


def zz_evolution(qc: Circuit, q0: Qubit, q1: Qubit, theta: float) -> None:
    """exp(-i theta Z⊗Z)."""
    _zz_kernel(qc, q0, q1, theta, lambda rec: None)


def trotter_step(qc: Circuit, qubits: QubitRegister, coupling: float, dt: float) -> None:
    """One first-order step over every nearest-neighbour pair."""
    theta = coupling * dt
    for i in range(len(qubits) - 1):
        q0, q1 = qubits[i], qubits[i + 1]
        xx_evolution(qc, q0, q1, theta)
        yy_evolution(qc, q0, q1, theta)
        zz_evolution(qc, q0, q1, theta)


def evolve(qc: Circuit, qubits: QubitRegister, params: HeisenbergParameters) -> int:
    """Equal superposition followed by all Trotter steps. Returns the step count."""
    steps = params.steps
    for q in qubits:
        qc.h(q)
    for _ in range(steps):
        trotter_step(qc, qubits, params.coupling, params.dt)
    return steps


def _build(params: HeisenbergParameters, measure: bool) -> tuple[Circuit, int, tuple[int, ...]]:
    qc = Circuit(name=f"heisenberg_{params.chain_length}")
    bits: tuple[int, ...] = ()
    with qc.allocate(params.chain_length, "chain") as chain:
        steps = evolve(qc, chain, params)
        if measure:
            bits = qc.measure(chain)
    logger.debug("built %r with %d Trotter steps", qc, steps)
    return qc, steps, bits


def build_evolution(params: HeisenbergParameters, measure: bool = False) -> Circuit:
    return _build(params, measure)[0]


def run_evolution(params: HeisenbergParameters, seed: int | None = None,
                  backend: StatevectorBackend | None = None) -> EvolutionResult:
    """Build, simulate and measure the chain once."""
    backend = backend or StatevectorBackend(seed=seed)
    qc, steps, bits = _build(params, measure=True)
    outcome = backend.run(qc).outcome(bits)
    return EvolutionResult(
        chain_length=params.chain_length,
        steps=steps,
        outcome=outcome,
        magnetization=magnetization(outcome, params.chain_length),
    )
