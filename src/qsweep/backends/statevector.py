"""
Statevector simulation backend.

Executes a fully expanded circuit one shot at a time. Gates are applied
by tensor contraction on the (2, 2, ..., 2) view of the state, and
controlled gates only touch the slice where every control is |1>, so no
operator larger than the gate's target matrix is ever built.

Qubit 0 is the most significant bit of a basis-state index.

Memory: ~16 bytes * 2^n (complex128) per state.
    20 qubits = 16 MB, 25 qubits = 512 MB.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
from numpy import ndarray

from qsweep import gates as g
from qsweep.circuit import Circuit, Instruction
from qsweep.errors import ParameterError

logger = logging.getLogger(__name__)

DEFAULT_MAX_QUBITS = 24


@dataclass
class SimulationResult:
    """
    Result of a single-shot circuit simulation.

    Attributes
    ----------
    statevector : ndarray
        Final state vector (complex128, length 2^n).
    classical_bits : tuple[int, ...]
        Value of every classical bit after the shot.
    n_qubits : int
        Number of qubits.
    snapshots : dict[str, ndarray]
        Statevectors recorded by ``snapshot`` instructions.
    """

    statevector: ndarray
    classical_bits: tuple[int, ...]
    n_qubits: int
    snapshots: dict[str, ndarray] = field(default_factory=dict)

    def outcome(self, clbits: Sequence[int]) -> tuple[int, ...]:
        """Measurement outcome for the given classical bits, in order."""
        return tuple(self.classical_bits[c] for c in clbits)

    def probabilities(self, label: str | None = None) -> dict[int, float]:
        """
        Basis-state probabilities of the final state or of a snapshot.

        Only includes states with probability > 1e-10.
        """
        vec = self.statevector if label is None else self.snapshots[label]
        probs = np.abs(vec) ** 2
        return {i: float(p) for i, p in enumerate(probs) if p > 1e-10}


class StatevectorBackend:
    """
    Single-shot statevector simulator.

    Parameters
    ----------
    seed : int | None
        Random seed for measurement and reset collapse.
    max_qubits : int
        Refuse circuits wider than this.

    Example
    -------
    >>> from qsweep import Circuit, StatevectorBackend
    >>> qc = Circuit()
    >>> with qc.allocate(2) as q:
    ...     _ = qc.x(q[0]).cx(q[0], q[1])
    ...     bits = qc.measure(q)
    >>> StatevectorBackend(seed=1).run(qc).outcome(bits)
    (1, 1)
    """

    def __init__(self, seed: int | None = None, max_qubits: int = DEFAULT_MAX_QUBITS) -> None:
        self._rng = np.random.default_rng(seed)
        self.max_qubits = max_qubits

    def run(self, circuit: Circuit, initial_state: ndarray | None = None) -> SimulationResult:
        """
        Consume and simulate a circuit.

        Parameters
        ----------
        circuit : Circuit
            Circuit to simulate. It must not have been consumed before.
        initial_state : ndarray, optional
            Initial state vector. Defaults to |0...0>.
        """
        n = circuit.n_qubits
        if n > self.max_qubits:
            raise ParameterError(
                f"Circuit '{circuit.name}' needs {n} qubits; "
                f"backend is limited to {self.max_qubits}"
            )
        instructions = circuit.consume()
        logger.debug("simulating %s (%d instructions)", circuit.name, len(instructions))
        return self.execute(instructions, n, circuit.n_clbits, initial_state)

    def execute(
        self,
        instructions: Sequence[Instruction],
        n_qubits: int,
        n_clbits: int = 0,
        initial_state: ndarray | None = None,
    ) -> SimulationResult:
        """Execute an already expanded instruction list."""
        n = n_qubits

        # Initialize state
        if initial_state is not None:
            state = np.array(initial_state, dtype=np.complex128).copy()
            if state.shape != (2**n,):
                raise ValueError(
                    f"Initial state shape {state.shape} != expected ({2**n},)"
                )
        else:
            state = np.zeros(2**n, dtype=np.complex128)
            state[0] = 1.0

        classical = [0] * n_clbits
        snapshots: dict[str, ndarray] = {}

        for inst in instructions:
            if inst.name == "snapshot":
                snapshots[inst.label] = state.copy()
            elif inst.name == "measure":
                state, outcome = self._measure_qubit(state, n, inst.qubits[0])
                classical[inst.classical_bits[0]] = outcome
            elif inst.name == "reset":
                state = self._reset_qubit(state, n, inst.qubits[0])
            else:
                state = self._apply_gate(state, inst.matrix(), inst.controls, inst.targets, n)

        return SimulationResult(
            statevector=state,
            classical_bits=tuple(classical),
            n_qubits=n,
            snapshots=snapshots,
        )

    def _apply_gate(
        self,
        state: ndarray,
        gate: ndarray,
        controls: tuple[int, ...],
        targets: tuple[int, ...],
        n: int,
    ) -> ndarray:
        """
        Apply a (possibly controlled) gate via tensor contraction.

        1. Reshape state into a rank-n tensor (2x2x...x2)
        2. Fix every control axis to 1, giving a view of the active slice
        3. Contract the target matrix with the target axes of that slice
        4. Write the slice back

        Cost: O(2^(n - c) x 4^k) for c controls and k targets.
        """
        psi = state.reshape([2] * n)
        index = [slice(None)] * n
        for c in controls:
            index[c] = 1
        index = tuple(index)
        active = psi[index]

        remaining = [q for q in range(n) if q not in controls]
        axes = [remaining.index(t) for t in targets]
        k = len(targets)

        gate_tensor = gate.reshape([2] * (2 * k))  # [out0..outk-1, in0..ink-1]
        out = np.tensordot(gate_tensor, active, axes=(list(range(k, 2 * k)), axes))
        psi[index] = np.moveaxis(out, list(range(k)), axes)
        return psi.reshape(2**n)

    def _measure_qubit(self, state: ndarray, n: int, qubit: int) -> tuple[ndarray, int]:
        """
        Perform projective measurement on a single qubit.

        Returns the collapsed state and the measurement outcome.
        """
        psi = state.reshape([2] * n)
        p0 = float(np.sum(np.abs(np.take(psi, 0, axis=qubit)) ** 2))
        outcome = 0 if self._rng.random() < p0 else 1

        # Collapse
        index = [slice(None)] * n
        index[qubit] = 1 - outcome
        collapsed = psi.copy()
        collapsed[tuple(index)] = 0
        norm = np.sqrt(p0 if outcome == 0 else max(1.0 - p0, 0.0))
        if norm > 1e-15:
            collapsed /= norm

        return collapsed.reshape(2**n), outcome

    def _reset_qubit(self, state: ndarray, n: int, qubit: int) -> ndarray:
        """Measure, then flip back to |0> if the qubit was found in |1>."""
        state, outcome = self._measure_qubit(state, n, qubit)
        if outcome == 1:
            state = self._apply_gate(state, g.X, (), (qubit,), n)
        return state
