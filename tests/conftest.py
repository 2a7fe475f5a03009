"""Shared fixtures: build small circuits and read back their unitaries."""

import numpy as np
import pytest

from qsweep import Circuit, StatevectorBackend


def circuit_unitary(n, apply):
    """
    Unitary of ``apply(qc, register)`` on ``n`` fresh qubits.

    Each column is obtained from a fresh circuit run on one basis state,
    with a snapshot taken before the register is reset and released.
    """
    dim = 2 ** n
    columns = []
    for k in range(dim):
        qc = Circuit(name=f"column_{k}")
        with qc.allocate(n) as q:
            apply(qc, q)
            qc.snapshot("u")
        basis = np.zeros(dim, dtype=np.complex128)
        basis[k] = 1.0
        result = StatevectorBackend(seed=0).run(qc, initial_state=basis)
        columns.append(result.snapshots["u"])
    return np.column_stack(columns)


def final_state(n, apply, initial_state=None):
    """Statevector right after ``apply`` on ``n`` fresh qubits."""
    qc = Circuit(name="state")
    with qc.allocate(n) as q:
        apply(qc, q)
        qc.snapshot("final")
    return StatevectorBackend(seed=0).run(qc, initial_state=initial_state).snapshots["final"]


@pytest.fixture
def unitary_of():
    return circuit_unitary


@pytest.fixture
def state_after():
    return final_state


@pytest.fixture
def backend():
    return StatevectorBackend(seed=42)
