"""
qsweep: exact, parametric quantum circuits for resource-estimation sweeps.

Features:
- Scoped qubit registers: allocate with ``with``, reset and release on exit
- Conjugation blocks (setup; body; setup†) as first-class operations
- Four swept families: Grover search, Heisenberg evolution, QPE, VQE ansatz
- Statevector backend for verification runs
- Logical counts and a hand-off protocol for external estimators

Quick Start:
    >>> from qsweep import Circuit, StatevectorBackend
    >>> qc = Circuit(name="bell")
    >>> with qc.allocate(2) as q:
    ...     _ = qc.h(q[0]).cx(q[0], q[1])
    ...     bits = qc.measure(q)
    >>> StatevectorBackend(seed=0).run(qc).outcome(bits) in {(0, 0), (1, 1)}
    True

Sweeps:
    >>> from qsweep import driver
    >>> qc = driver.ENTRY_POINTS["grover/10"]()
    >>> qc.n_qubits
    11
"""
__version__ = "0.1.0"

# Core components
from .circuit import Circuit, Conjugation, Instruction, conjugate
from .register import Qubit, QubitAllocator, QubitRegister
from .backends import SimulationResult, StatevectorBackend
from .errors import ConstructionError, ParameterError, QSweepError, ResourceLifecycleError
from . import gates

# Estimation hand-off
from .estimation import (
    ExpandedCircuit, LogicalCounts, PhysicalEstimate, ResourceEstimator, estimate_resources,
)

# Algorithms and sweeps
from . import algorithms, driver

__all__ = [
    # Core
    'Circuit',
    'Conjugation',
    'Instruction',
    'conjugate',
    'Qubit',
    'QubitAllocator',
    'QubitRegister',
    'SimulationResult',
    'StatevectorBackend',
    'gates',
    # Errors
    'QSweepError',
    'ParameterError',
    'ConstructionError',
    'ResourceLifecycleError',
    # Estimation
    'ExpandedCircuit',
    'LogicalCounts',
    'PhysicalEstimate',
    'ResourceEstimator',
    'estimate_resources',
    # Algorithms
    'algorithms',
    'driver',
]
