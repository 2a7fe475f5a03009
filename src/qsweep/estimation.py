"""
Hand-off to an external resource estimator.

The estimator itself is not part of qsweep. This module defines what it
receives (:class:`ExpandedCircuit`, built from a consumed circuit, plus
hardware profiles), what it returns (:class:`PhysicalEstimate` per
profile), and the logical-level summary qsweep can compute on its own
(:class:`LogicalCounts`).

Usage:
    from qsweep.estimation import LogicalCounts, estimate_resources

    counts = LogicalCounts.from_circuit(qc)
    estimates = estimate_resources(qc, my_estimator)
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Protocol, Sequence

from qsweep import gates as g
from qsweep.circuit import Circuit, Instruction, instruction_depth
from qsweep.config import PROFILES, HardwareProfile

logger = logging.getLogger(__name__)

MULTI_CONTROLLED = frozenset({"mcx", "mcz"})


@dataclass
class LogicalCounts:
    """
    Logical resource summary of an expanded circuit.

    Attributes
    ----------
    n_qubits : int
        Peak number of simultaneously live qubits.
    gate_counts : dict[str, int]
        Expanded instruction count per gate name (measure/reset included).
    rotation_count : int
        Arbitrary-angle rotations, controlled or not.
    multi_controlled_count : int
        Multi-controlled X/Z gates.
    measurement_count : int
        Single-qubit measurements.
    depth : int
        Gate depth, ignoring resets and measurements.
    """
    n_qubits: int
    gate_counts: dict[str, int] = field(default_factory=dict)
    rotation_count: int = 0
    multi_controlled_count: int = 0
    measurement_count: int = 0
    depth: int = 0

    @classmethod
    def from_circuit(cls, circuit: Circuit) -> LogicalCounts:
        return cls.from_instructions(circuit.instructions, circuit.n_qubits)

    @classmethod
    def from_instructions(cls, instructions: Sequence[Instruction], n_qubits: int) -> LogicalCounts:
        counts = Counter(inst.name for inst in instructions if inst.name != "snapshot")
        return cls(
            n_qubits=n_qubits,
            gate_counts=dict(sorted(counts.items())),
            rotation_count=sum(n for name, n in counts.items() if name in g.ROTATION_GATES),
            multi_controlled_count=sum(n for name, n in counts.items() if name in MULTI_CONTROLLED),
            measurement_count=counts.get("measure", 0),
            depth=instruction_depth(instructions, n_qubits),
        )

    @property
    def total_gates(self) -> int:
        return sum(n for name, n in self.gate_counts.items() if name not in ("measure", "reset"))

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PhysicalEstimate:
    """One estimator answer for one hardware profile."""
    profile: str
    physical_qubits: int
    runtime_ns: float
    logical_qubits: int | None = None
    code_distance: int | None = None


@dataclass(frozen=True)
class ExpandedCircuit:
    """
    What an estimator receives: the circuit's name, its logical width and
    the expanded instruction list returned by ``Circuit.consume()``.
    """
    name: str
    n_qubits: int
    instructions: tuple[Instruction, ...]

    def counts(self) -> LogicalCounts:
        return LogicalCounts.from_instructions(self.instructions, self.n_qubits)


class ResourceEstimator(Protocol):
    """Anything that turns an expanded circuit into physical estimates."""

    def estimate(self, circuit: ExpandedCircuit,
                 profiles: Sequence[HardwareProfile]) -> Sequence[PhysicalEstimate]:
        ...


def estimate_resources(
    circuit: Circuit,
    estimator: ResourceEstimator,
    profiles: Sequence[HardwareProfile] = PROFILES,
) -> Sequence[PhysicalEstimate]:
    """
    Consume ``circuit`` and pass its expanded instructions to ``estimator``.

    The estimator gets an :class:`ExpandedCircuit`, never the consumed
    ``Circuit`` itself. Its answer is returned unchanged and its
    exceptions propagate. A circuit can be handed off once; a second
    hand-off, or one with a live register, raises ``ResourceLifecycleError``.
    """
    expanded = ExpandedCircuit(
        name=circuit.name,
        n_qubits=circuit.n_qubits,
        instructions=tuple(circuit.consume()),
    )
    logger.debug(
        "estimating %s (%d instructions) on profiles %s",
        expanded.name, len(expanded.instructions), ", ".join(p.name for p in profiles),
    )
    return estimator.estimate(expanded, profiles)
