"""
Quantum circuit representation.

Provides a builder-style API for constructing circuits over scoped
qubit registers, with conjugation blocks (``setup; body; setup†``) as
first-class operations.

Example
-------
>>> from qsweep import Circuit
>>> qc = Circuit(name="bell")
>>> with qc.allocate(2) as q:
...     _ = qc.h(q[0]).cx(q[0], q[1])
...     bits = qc.measure(q)
>>> qc.n_qubits, bits
(2, (0, 1))
"""

from __future__ import annotations

import logging
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Sequence, Union

import numpy as np

from qsweep import gates as g
from qsweep.errors import ConstructionError, ParameterError, ResourceLifecycleError
from qsweep.register import Qubit, QubitAllocator, QubitRegister

logger = logging.getLogger(__name__)

NON_UNITARY = frozenset({"measure", "reset"})
DIRECTIVES = frozenset({"snapshot"})


# ---------------------------------------------------------------------------
# Instruction: a single operation in the circuit
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Instruction:
    """A single gate, measurement, reset or snapshot on specific qubits."""
    name: str
    qubits: tuple[int, ...]
    params: tuple[float, ...] = ()
    classical_bits: tuple[int, ...] = ()  # for measurements
    label: str = ""  # for snapshots

    @property
    def is_unitary(self) -> bool:
        return self.name not in NON_UNITARY and self.name not in DIRECTIVES

    @property
    def controls(self) -> tuple[int, ...]:
        return g.split_qubits(self.name, self.qubits)[0]

    @property
    def targets(self) -> tuple[int, ...]:
        return g.split_qubits(self.name, self.qubits)[1]

    def matrix(self) -> np.ndarray:
        """Unitary on the target qubits. Raises for non-gates."""
        if not self.is_unitary:
            raise ValueError(f"'{self.name}' has no unitary matrix.")
        return g.get_matrix(self.name, self.params)

    def inverse(self) -> Instruction | None:
        """Adjoint instruction; ``None`` for directives that have no effect."""
        if self.name in DIRECTIVES:
            return None
        if self.name in NON_UNITARY:
            raise ConstructionError(f"'{self.name}' on qubits {self.qubits} is not invertible")
        if self.name in g.ROTATION_GATES:
            return Instruction(self.name, self.qubits, tuple(-p for p in self.params))
        if self.name in g.ADJOINT_PAIRS:
            return Instruction(g.ADJOINT_PAIRS[self.name], self.qubits)
        # Self-inverse gates (X, Y, Z, H, CX, CZ, MCX, MCZ, SWAP)
        return self

    def flatten(self) -> Iterator[Instruction]:
        yield self


# ---------------------------------------------------------------------------
# Conjugation: setup; body; inverse(setup)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Conjugation:
    """
    Composite operation ``setup; body; inverse(setup)``.

    The setup is stored once and mirrored on expansion, so the undo half
    is always the exact adjoint of what was done.
    """
    setup: tuple[GateOp, ...]
    body: tuple[GateOp, ...]

    def inverse(self) -> Conjugation:
        # (S† B S)† = S† B† S: only the body is inverted.
        return Conjugation(self.setup, inverse_ops(self.body))

    def flatten(self) -> Iterator[Instruction]:
        for op in self.setup:
            yield from op.flatten()
        for op in self.body:
            yield from op.flatten()
        for op in inverse_ops(self.setup):
            yield from op.flatten()


GateOp = Union[Instruction, Conjugation]


def inverse_ops(ops: Sequence[GateOp]) -> tuple[GateOp, ...]:
    """Adjoint of an operation sequence: reversed order, each op inverted."""
    inverted = []
    for op in reversed(ops):
        inv = op.inverse()
        if inv is not None:
            inverted.append(inv)
    return tuple(inverted)


def _non_invertible(ops: Iterable[GateOp]) -> Instruction | None:
    for op in ops:
        for inst in op.flatten():
            if inst.name in NON_UNITARY:
                return inst
    return None


def conjugate(setup: Sequence[GateOp], body: Sequence[GateOp]) -> Conjugation:
    """
    Build the symmetric composition ``setup; body; inverse(setup)``.

    Raises
    ------
    ConstructionError
        If the setup contains a measurement or reset.
    """
    bad = _non_invertible(setup)
    if bad is not None:
        raise ConstructionError(
            f"Conjugation setup must be unitary; found '{bad.name}' on qubits {bad.qubits}"
        )
    return Conjugation(tuple(setup), tuple(body))


def instruction_depth(instructions: Iterable[Instruction], n_qubits: int) -> int:
    """Longest chain of gates through any qubit; resets and measurements are free."""
    qubit_depth = [0] * n_qubits
    for inst in instructions:
        if not inst.is_unitary:
            continue
        max_d = max(qubit_depth[q] for q in inst.qubits)
        for q in inst.qubits:
            qubit_depth[q] = max_d + 1
    return max(qubit_depth, default=0)


# Things Circuit.conjugate/adjoint accept: recorded ops or a builder callable
Block = Union[Sequence[GateOp], Callable[["Circuit"], object]]


class _ClassicalBits:
    """Classical bit counter shared between a circuit and its recorders."""

    def __init__(self) -> None:
        self.count = 0

    def allocate(self, n: int) -> tuple[int, ...]:
        bits = tuple(range(self.count, self.count + n))
        self.count += n
        return bits


# ---------------------------------------------------------------------------
# Circuit
# ---------------------------------------------------------------------------

class Circuit:
    """
    Quantum circuit built over scoped qubit registers.

    Qubits are not declared up front: they are allocated with
    :meth:`allocate`, and the circuit width is the peak number of
    simultaneously live qubits. Gates take :class:`Qubit` handles, never
    raw indices, so a released register cannot be touched again.

    Parameters
    ----------
    name : str, optional
        Circuit name, used in logs and passed on to estimators.
    """

    def __init__(self, name: str = "circuit") -> None:
        self.name = name
        self._ops: list[GateOp] = []
        self._allocator = QubitAllocator()
        self._clbits = _ClassicalBits()
        self._is_recorder = False
        self._consumed = False

    def _recorder(self) -> Circuit:
        """Child circuit that records ops on the same allocator."""
        child = Circuit(self.name)
        child._allocator = self._allocator
        child._clbits = self._clbits
        child._is_recorder = True
        return child

    # -- Properties ---------------------------------------------------------

    @property
    def ops(self) -> tuple[GateOp, ...]:
        """Top-level operations, with conjugation blocks unexpanded."""
        return tuple(self._ops)

    @property
    def instructions(self) -> list[Instruction]:
        """Fully expanded instruction list."""
        if not self._is_recorder:
            self._allocator.check_released()
        return [inst for op in self._ops for inst in op.flatten()]

    @property
    def n_qubits(self) -> int:
        """Logical width: peak number of simultaneously allocated qubits."""
        return self._allocator.peak

    @property
    def n_clbits(self) -> int:
        return self._clbits.count

    @property
    def depth(self) -> int:
        """Circuit depth (longest path through any qubit)."""
        return instruction_depth(self.instructions, self.n_qubits)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def count_ops(self) -> dict[str, int]:
        """Number of expanded instructions per name."""
        return dict(Counter(inst.name for inst in self.instructions))

    # -- Registers ----------------------------------------------------------

    @contextmanager
    def allocate(self, n: int, label: str = "q") -> Iterator[QubitRegister]:
        """
        Allocate ``n`` fresh qubits for the duration of a ``with`` block.

        On every exit path, including exceptions, each qubit is reset to
        |0> and the register is released.
        """
        register = self._allocator.allocate(n, label)
        try:
            yield register
        finally:
            for qubit in register:
                self._add("reset", (qubit,))
            self._allocator.release(register)

    # -- Internal helpers ---------------------------------------------------

    def _resolve(self, qubits: Sequence[Qubit]) -> tuple[int, ...]:
        indices = []
        for q in qubits:
            if not isinstance(q, Qubit):
                raise TypeError(f"Expected a Qubit handle, got {type(q).__name__}")
            if q.register.allocator is not self._allocator:
                raise ResourceLifecycleError(f"{q!r} belongs to another circuit")
            indices.append(q.index)
        if len(set(indices)) != len(indices):
            raise ParameterError(f"Duplicate qubits in {tuple(qubits)}")
        return tuple(indices)

    def _add(self, name: str, qubits: Sequence[Qubit], params: tuple = ()) -> Circuit:
        """Add an instruction and return self for chaining."""
        inst = Instruction(name=name, qubits=self._resolve(qubits), params=params)
        self._ops.append(inst)
        return self

    def _record(self, block: Block) -> tuple[GateOp, ...]:
        if not callable(block):
            return tuple(block)
        recorder = self._recorder()
        depth = self._allocator.depth
        block(recorder)
        if self._allocator.depth != depth:
            raise ResourceLifecycleError("A register allocated inside a block outlived it")
        return tuple(recorder._ops)

    # -- Single-qubit gates -------------------------------------------------

    def x(self, qubit: Qubit) -> Circuit:
        """Pauli-X gate."""
        return self._add("x", (qubit,))

    def y(self, qubit: Qubit) -> Circuit:
        """Pauli-Y gate."""
        return self._add("y", (qubit,))

    def z(self, qubit: Qubit) -> Circuit:
        """Pauli-Z gate."""
        return self._add("z", (qubit,))

    def h(self, qubit: Qubit) -> Circuit:
        """Hadamard gate."""
        return self._add("h", (qubit,))

    def s(self, qubit: Qubit) -> Circuit:
        """S gate."""
        return self._add("s", (qubit,))

    def sdg(self, qubit: Qubit) -> Circuit:
        """S-dagger gate."""
        return self._add("sdg", (qubit,))

    def t(self, qubit: Qubit) -> Circuit:
        """T gate."""
        return self._add("t", (qubit,))

    def tdg(self, qubit: Qubit) -> Circuit:
        """T-dagger gate."""
        return self._add("tdg", (qubit,))

    # -- Parameterized single-qubit gates -----------------------------------

    def rx(self, theta: float, qubit: Qubit) -> Circuit:
        """Rotation around X-axis."""
        return self._add("rx", (qubit,), (float(theta),))

    def ry(self, theta: float, qubit: Qubit) -> Circuit:
        """Rotation around Y-axis."""
        return self._add("ry", (qubit,), (float(theta),))

    def rz(self, phi: float, qubit: Qubit) -> Circuit:
        """Rotation around Z-axis."""
        return self._add("rz", (qubit,), (float(phi),))

    def p(self, lam: float, qubit: Qubit) -> Circuit:
        """Phase gate."""
        return self._add("p", (qubit,), (float(lam),))

    # -- Controlled gates ---------------------------------------------------

    def cx(self, control: Qubit, target: Qubit) -> Circuit:
        """Controlled-NOT (CNOT) gate."""
        return self._add("cx", (control, target))

    def cz(self, control: Qubit, target: Qubit) -> Circuit:
        """Controlled-Z gate."""
        return self._add("cz", (control, target))

    def cp(self, lam: float, control: Qubit, target: Qubit) -> Circuit:
        """Controlled-Phase gate."""
        return self._add("cp", (control, target), (float(lam),))

    def crx(self, theta: float, control: Qubit, target: Qubit) -> Circuit:
        """Controlled-Rx gate."""
        return self._add("crx", (control, target), (float(theta),))

    def cry(self, theta: float, control: Qubit, target: Qubit) -> Circuit:
        """Controlled-Ry gate."""
        return self._add("cry", (control, target), (float(theta),))

    def crz(self, phi: float, control: Qubit, target: Qubit) -> Circuit:
        """Controlled-Rz gate."""
        return self._add("crz", (control, target), (float(phi),))

    def mcx(self, controls: Sequence[Qubit], target: Qubit) -> Circuit:
        """Multi-controlled X. With no controls this is a plain X."""
        if not controls:
            return self.x(target)
        return self._add("mcx", (*controls, target))

    def mcz(self, controls: Sequence[Qubit], target: Qubit) -> Circuit:
        """Multi-controlled Z. With no controls this is a plain Z."""
        if not controls:
            return self.z(target)
        return self._add("mcz", (*controls, target))

    def swap(self, q0: Qubit, q1: Qubit) -> Circuit:
        """SWAP gate."""
        return self._add("swap", (q0, q1))

    # -- Measurement and reset ----------------------------------------------

    def measure(self, qubits: Qubit | Iterable[Qubit]) -> tuple[int, ...]:
        """
        Measure qubits into freshly allocated classical bits.

        Parameters
        ----------
        qubits : Qubit or iterable of Qubit
            A single handle or a whole register.

        Returns
        -------
        tuple of int
            Classical bit indices, in the order the qubits were given.
        """
        if isinstance(qubits, Qubit):
            qubits = (qubits,)
        qubits = tuple(qubits)
        indices = self._resolve(qubits)
        clbits = self._clbits.allocate(len(indices))
        for q, c in zip(indices, clbits):
            self._ops.append(Instruction(name="measure", qubits=(q,), classical_bits=(c,)))
        return clbits

    def reset(self, qubit: Qubit) -> Circuit:
        """Reset a qubit to |0>."""
        return self._add("reset", (qubit,))

    def snapshot(self, label: str) -> Circuit:
        """Record the full statevector at this point when simulated."""
        self._ops.append(Instruction(name="snapshot", qubits=(), label=label))
        return self

    # -- Composition --------------------------------------------------------

    def append(self, op: GateOp) -> Circuit:
        """Append a pre-built operation (e.g. from :func:`conjugate`)."""
        self._ops.append(op)
        return self

    def conjugate(self, setup: Block, body: Block) -> Circuit:
        """
        Append ``setup; body; inverse(setup)`` as one conjugation block.

        Both parts may be op sequences or callables that receive a
        recorder circuit sharing this circuit's registers.
        """
        setup_ops = self._record(setup)
        body_ops = self._record(body)
        return self.append(conjugate(setup_ops, body_ops))

    def adjoint(self, block: Block) -> Circuit:
        """Append the inverse of what ``block`` records."""
        return self._extend(inverse_ops(self._record(block)))

    def _extend(self, ops: Iterable[GateOp]) -> Circuit:
        self._ops.extend(ops)
        return self

    # -- Execution hand-off -------------------------------------------------

    def consume(self) -> list[Instruction]:
        """
        Hand the expanded circuit to an executor. A circuit is consumed once.

        Raises
        ------
        ResourceLifecycleError
            If the circuit was already consumed or a register is still live.
        """
        if self._is_recorder:
            raise ConstructionError("Recorder blocks cannot be executed on their own")
        if self._consumed:
            raise ResourceLifecycleError(f"Circuit '{self.name}' was already consumed")
        instructions = self.instructions
        self._consumed = True
        logger.debug("consumed %r", self)
        return instructions

    # -- Display ------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"Circuit(name='{self.name}', n_qubits={self.n_qubits}, "
            f"n_clbits={self.n_clbits}, ops={len(self._ops)})"
        )
