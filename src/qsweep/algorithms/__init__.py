"""
Circuit builders for the four swept algorithm families.

Each module exposes a frozen parameter dataclass, a ``build_*`` function
returning an unmeasured circuit for resource estimation, and a ``run_*``
function that simulates a measured circuit and reduces its outcome.

Usage:
    from qsweep.algorithms import grover, qpe

    qc = grover.build_search(grover.GroverParameters(n_qubits=10))
    est = qpe.run_estimation(qpe.PhaseEstimationParameters(n_counting=4), seed=1)
"""

from qsweep.algorithms import grover, heisenberg, qpe, vqe
from qsweep.algorithms.grover import GroverParameters, GroverResult
from qsweep.algorithms.heisenberg import EvolutionResult, HeisenbergParameters
from qsweep.algorithms.qpe import PhaseEstimate, PhaseEstimationParameters
from qsweep.algorithms.vqe import AnsatzParameters, AnsatzResult

__all__ = [
    "grover",
    "heisenberg",
    "qpe",
    "vqe",
    "GroverParameters",
    "GroverResult",
    "HeisenbergParameters",
    "EvolutionResult",
    "PhaseEstimationParameters",
    "PhaseEstimate",
    "AnsatzParameters",
    "AnsatzResult",
]
