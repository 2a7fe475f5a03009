"""
Sweep driver: one entry operation per (algorithm, size) pair.

``ENTRY_POINTS`` maps keys such as ``"grover/10"`` or ``"vqe/lih"`` to
zero-argument callables that build a fresh, unmeasured circuit. The
helpers below run one entry through the simulator, the logical counter
or an external estimator.

Usage:
    from qsweep import driver

    qc = driver.ENTRY_POINTS["qpe/8"]()
    result = driver.simulate("grover/5", seed=2)
    counts = driver.logical_counts("heisenberg/10")
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Sequence

from qsweep import config
from qsweep.algorithms import grover, heisenberg, qpe, vqe
from qsweep.circuit import Circuit
from qsweep.estimation import LogicalCounts, PhysicalEstimate, ResourceEstimator, estimate_resources

logger = logging.getLogger(__name__)


def grover_params(n: int) -> grover.GroverParameters:
    return grover.GroverParameters(n_qubits=n)


def heisenberg_params(n: int) -> heisenberg.HeisenbergParameters:
    return heisenberg.HeisenbergParameters(
        chain_length=n,
        coupling=config.COUPLING,
        dt=config.TIME_STEP,
        total_time=config.TOTAL_TIME,
    )


def qpe_params(m: int) -> qpe.PhaseEstimationParameters:
    return qpe.PhaseEstimationParameters(n_counting=m, theta=config.QPE_THETA)


def vqe_params(molecule: str) -> vqe.AnsatzParameters:
    return vqe.AnsatzParameters(molecule=molecule, angle=config.VQE_ANGLE)


# algorithm -> (parameter factory, circuit builder, simulation runner)
FAMILIES: dict[str, tuple[Callable, Callable, Callable]] = {
    "grover": (grover_params, grover.build_search, grover.run_search),
    "heisenberg": (heisenberg_params, heisenberg.build_evolution, heisenberg.run_evolution),
    "qpe": (qpe_params, qpe.build_estimation, qpe.run_estimation),
    "vqe": (vqe_params, vqe.build_ansatz, vqe.run_ansatz),
}


def _build_entry(family: str, size) -> Circuit:
    make_params, build, _ = FAMILIES[family]
    return build(make_params(size))


ENTRY_POINTS: dict[str, Callable[[], Circuit]] = {
    f"{family}/{size}": partial(_build_entry, family, size)
    for family, sizes in config.SWEEP_SIZES.items()
    for size in sizes
}


def _split(key: str) -> tuple[str, str | int]:
    if key not in ENTRY_POINTS:
        raise KeyError(f"Unknown entry: '{key}'. Available: {sorted(ENTRY_POINTS)}")
    family, size = key.split("/")
    return family, (size if family == "vqe" else int(size))


def build(key: str) -> Circuit:
    """Build the circuit for one entry."""
    _split(key)
    return ENTRY_POINTS[key]()


def simulate(key: str, seed: int | None = None):
    """Run one entry on the statevector simulator and return its readout."""
    family, size = _split(key)
    make_params, _, run = FAMILIES[family]
    logger.info("simulating %s (seed=%s)", key, seed)
    return run(make_params(size), seed=seed)


def logical_counts(key: str) -> LogicalCounts:
    return LogicalCounts.from_circuit(build(key))


def estimate(
    key: str,
    estimator: ResourceEstimator,
    profiles: Sequence[config.HardwareProfile] = config.PROFILES,
) -> Sequence[PhysicalEstimate]:
    """Build one entry and hand it to an external estimator."""
    logger.info("estimating %s", key)
    return estimate_resources(build(key), estimator, profiles)
