"""
Scoped qubit registers.

A :class:`QubitRegister` is an owned, fixed-length sequence of
:class:`Qubit` handles handed out by a :class:`QubitAllocator`. The
allocator is an arena: registers are carved from the top of a stack of
qubit indices and must be released in strict LIFO order, so nested
scratch registers always end before the scope that created them.

Callers do not normally talk to the allocator directly; they use the
``Circuit.allocate`` context manager, which resets and releases the
register on every exit path.

Example
-------
>>> alloc = QubitAllocator()
>>> outer = alloc.allocate(3)
>>> scratch = alloc.allocate(1)
>>> scratch[0].index
3
>>> alloc.release(scratch)
>>> alloc.release(outer)
>>> alloc.peak
4
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Iterator, overload

from qsweep.errors import ParameterError, ResourceLifecycleError

logger = logging.getLogger(__name__)


class Qubit:
    """Handle to a single qubit index, valid while its register is live."""

    __slots__ = ("_index", "_register")

    def __init__(self, index: int, register: QubitRegister) -> None:
        self._index = index
        self._register = register

    @property
    def index(self) -> int:
        """Qubit index in the circuit. Raises once the register is released."""
        if not self._register.is_live:
            raise ResourceLifecycleError(
                f"Qubit {self._index} of register '{self._register.label}' "
                f"used after release"
            )
        return self._index

    @property
    def register(self) -> QubitRegister:
        return self._register

    def __repr__(self) -> str:
        return f"Qubit({self._register.label}[{self._register.position(self)}])"


class QubitRegister(Sequence):
    """
    Fixed-length sequence of qubit handles owned by one scope.

    Supports ``len``, iteration, integer indexing and slicing (a slice
    returns a plain list of handles from the same register).
    """

    def __init__(self, start: int, size: int, allocator: QubitAllocator, label: str = "q") -> None:
        self.label = label
        self._allocator = allocator
        self._live = True
        self._qubits = tuple(Qubit(start + i, self) for i in range(size))

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def allocator(self) -> QubitAllocator:
        return self._allocator

    @property
    def indices(self) -> tuple[int, ...]:
        """Circuit indices of all qubits, in register order."""
        return tuple(q.index for q in self._qubits)

    def position(self, qubit: Qubit) -> int:
        return self._qubits.index(qubit)

    def _invalidate(self) -> None:
        self._live = False

    def __len__(self) -> int:
        return len(self._qubits)

    @overload
    def __getitem__(self, item: int) -> Qubit: ...

    @overload
    def __getitem__(self, item: slice) -> list[Qubit]: ...

    def __getitem__(self, item):
        if isinstance(item, slice):
            return list(self._qubits[item])
        return self._qubits[item]

    def __iter__(self) -> Iterator[Qubit]:
        return iter(self._qubits)

    def __repr__(self) -> str:
        state = "live" if self._live else "released"
        return f"QubitRegister('{self.label}', size={len(self)}, {state})"


class QubitAllocator:
    """
    Stack arena for qubit indices.

    Attributes
    ----------
    peak : int
        Largest number of simultaneously live qubits, i.e. the logical
        width of the circuit built on this allocator.
    """

    def __init__(self) -> None:
        self._stack: list[QubitRegister] = []
        self._next = 0
        self.peak = 0

    @property
    def live(self) -> tuple[QubitRegister, ...]:
        """Live registers, outermost first."""
        return tuple(self._stack)

    @property
    def depth(self) -> int:
        return len(self._stack)

    def allocate(self, n: int, label: str = "q") -> QubitRegister:
        """Allocate ``n`` fresh qubits on top of the stack."""
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise ParameterError(f"Register size must be a positive integer, got {n!r}")
        register = QubitRegister(self._next, n, self, label)
        self._stack.append(register)
        self._next += n
        self.peak = max(self.peak, self._next)
        logger.debug("allocated %s at indices %d..%d", register, self._next - n, self._next - 1)
        return register

    def release(self, register: QubitRegister) -> None:
        """Release the innermost live register."""
        if register.allocator is not self:
            raise ResourceLifecycleError(f"{register!r} belongs to another allocator")
        if not register.is_live:
            raise ResourceLifecycleError(f"{register!r} released twice")
        if not self._stack or self._stack[-1] is not register:
            raise ResourceLifecycleError(
                f"{register!r} released while inner register "
                f"{self._stack[-1]!r} is still live"
            )
        self._stack.pop()
        self._next -= len(register)
        register._invalidate()
        logger.debug("released %s", register)

    def check_released(self) -> None:
        """Raise if any register is still live."""
        if self._stack:
            names = ", ".join(repr(r) for r in self._stack)
            raise ResourceLifecycleError(f"Registers never released: {names}")
