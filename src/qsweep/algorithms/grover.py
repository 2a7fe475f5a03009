"""
Grover search for a single marked item.

The oracle marks the alternating pattern 0101... (qubit i holds i % 2)
with a phase kick from a scratch qubit in |->. Both the oracle and the
diffusion operator are conjugation blocks.

Usage:
    from qsweep.algorithms.grover import GroverParameters, build_search, run_search

    qc = build_search(GroverParameters(n_qubits=10))   # for estimation
    result = run_search(GroverParameters(n_qubits=4), seed=1)
    print(result.iterations, result.found)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from qsweep.backends import StatevectorBackend
from qsweep.circuit import Circuit
from qsweep.errors import ParameterError
from qsweep.register import QubitRegister

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroverParameters:
    """Search over 2^n_qubits items with one marked item."""
    n_qubits: int

    def __post_init__(self) -> None:
        if isinstance(self.n_qubits, bool) or not isinstance(self.n_qubits, int) or self.n_qubits < 1:
            raise ParameterError(f"n_qubits must be a positive integer, got {self.n_qubits!r}")


@dataclass
class GroverResult:
    """Result of one measured search run."""
    n_qubits: int
    iterations: int
    outcome: tuple[int, ...]

    @property
    def found(self) -> bool:
        return is_marked(self.outcome)


def iteration_count(n_qubits: int) -> int:
    """
    Optimal number of Grover iterations for one marked item among 2^n.

    round(π/4 / asin(1/√(2^n)) − 1/2), halves rounded away from zero.
    """
    if isinstance(n_qubits, bool) or not isinstance(n_qubits, int) or n_qubits < 1:
        raise ParameterError(f"n_qubits must be a positive integer, got {n_qubits!r}")
    x = 0.25 * math.pi / math.asin(1.0 / math.sqrt(2.0 ** n_qubits)) - 0.5
    return max(0, math.floor(x + 0.5))


def marked_pattern(n_qubits: int) -> tuple[int, ...]:
    """The bit-string the oracle marks: 0, 1, 0, 1, ..."""
    return tuple(i % 2 for i in range(n_qubits))


def is_marked(outcome: tuple[int, ...]) -> bool:
    return tuple(outcome) == marked_pattern(len(outcome))


def prepare_uniform(qc: Circuit, qubits: QubitRegister) -> None:
    """Hadamard on every qubit."""
    for q in qubits:
        qc.h(q)


def oracle(qc: Circuit, qubits: QubitRegister) -> None:
    """
    Phase-flip the alternating pattern.

    Even-indexed qubits are flipped so the marked pattern reads all-ones,
    a scratch qubit in |-> takes a multi-controlled X from every input,
    and the flips are undone. The scratch register lives inside the
    block body and is released before the block completes.
    """
    def flip_even(rec: Circuit) -> None:
        for q in qubits[::2]:
            rec.x(q)

    def kick(rec: Circuit) -> None:
        with rec.allocate(1, "scratch") as scratch:
            target = scratch[0]
            rec.conjugate(
                lambda r: r.x(target).h(target),
                lambda r: r.mcx(list(qubits), target),
            )

    qc.conjugate(flip_even, kick)


def diffusion(qc: Circuit, qubits: QubitRegister) -> None:
    """Reflection about the uniform superposition."""
    def to_all_ones(rec: Circuit) -> None:
        for q in qubits:
            rec.h(q)
        for q in qubits:
            rec.x(q)

    qc.conjugate(to_all_ones, lambda rec: rec.mcz(qubits[:-1], qubits[-1]))


def search(qc: Circuit, qubits: QubitRegister) -> int:
    """Uniform preparation followed by the optimal number of iterations."""
    iterations = iteration_count(len(qubits))
    prepare_uniform(qc, qubits)
    for _ in range(iterations):
        oracle(qc, qubits)
        diffusion(qc, qubits)
    return iterations


def _build(params: GroverParameters, measure: bool) -> tuple[Circuit, int, tuple[int, ...]]:
    qc = Circuit(name=f"grover_{params.n_qubits}")
    bits: tuple[int, ...] = ()
    with qc.allocate(params.n_qubits, "input") as qubits:
        iterations = search(qc, qubits)
        if measure:
            bits = qc.measure(qubits)
    logger.debug("built %r with %d iterations", qc, iterations)
    return qc, iterations, bits


def build_search(params: GroverParameters, measure: bool = False) -> Circuit:
    """Build the full search circuit; measurement is for verification runs."""
    return _build(params, measure)[0]


def run_search(params: GroverParameters, seed: int | None = None,
               backend: StatevectorBackend | None = None) -> GroverResult:
    """Build, simulate and read out one search run."""
    backend = backend or StatevectorBackend(seed=seed)
    qc, iterations, bits = _build(params, measure=True)
    result = backend.run(qc)
    return GroverResult(
        n_qubits=params.n_qubits,
        iterations=iterations,
        outcome=result.outcome(bits),
    )
