"""
Sweep sizes, hardware profiles and logging setup.

Everything here is a module constant; the CLI and the sweep driver read
them, and tests may override them by passing explicit arguments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Sweep sizes
# ---------------------------------------------------------------------------

GROVER_SIZES = (5, 10, 15, 20, 25)
HEISENBERG_SIZES = (5, 10, 15, 20, 25)
QPE_SIZES = (4, 6, 8, 10, 12)
VQE_MOLECULES = ("h2", "lih", "beh2")

SWEEP_SIZES: dict[str, tuple] = {
    "grover": GROVER_SIZES,
    "heisenberg": HEISENBERG_SIZES,
    "qpe": QPE_SIZES,
    "vqe": VQE_MOLECULES,
}

# Heisenberg chain defaults
COUPLING = 1.0
TIME_STEP = 0.5
TOTAL_TIME = 5.0

# Angle of the QPE reference Rz unitary
QPE_THETA = 1.0

# Shared angle of every VQE excitation
VQE_ANGLE = 0.1


# ---------------------------------------------------------------------------
# Hardware profiles handed to the resource estimator
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HardwareProfile:
    """
    Physical assumptions for one resource-estimation run.

    Parameters
    ----------
    name : str
        Profile identifier understood by the estimator.
    qec_scheme : str
        Error-correction code.
    error_budget : float
        Total allowed failure probability of the run.
    gate_time_ns : float
        Physical gate time in nanoseconds.
    physical_error_rate : float
        Error probability per physical operation.
    """
    name: str
    qec_scheme: str
    error_budget: float
    gate_time_ns: float
    physical_error_rate: float


QUBIT_GATE_NS_E3 = HardwareProfile(
    name="qubit_gate_ns_e3",
    qec_scheme="surface_code",
    error_budget=1e-3,
    gate_time_ns=1.0,
    physical_error_rate=1e-3,
)

QUBIT_GATE_NS_E4 = HardwareProfile(
    name="qubit_gate_ns_e4",
    qec_scheme="surface_code",
    error_budget=1e-3,
    gate_time_ns=1.0,
    physical_error_rate=1e-4,
)

PROFILES = (QUBIT_GATE_NS_E3, QUBIT_GATE_NS_E4)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "WARNING") -> None:
    """Send qsweep log records to stderr at the given level."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("qsweep").setLevel(level)
