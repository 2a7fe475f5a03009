"""
Quantum gate definitions.

Every gate is stored as the unitary it applies to its *target* qubits
plus the number of control qubits in front of it. A controlled gate is
therefore never materialised as a full 2^k x 2^k matrix; the backend
applies the target matrix on the subspace where all controls are |1>.

Gate categories:
    - Single-qubit: X, Y, Z, H, S, Sdg, T, Tdg
    - Rotations: Rx, Ry, Rz, P (phase)
    - Controlled: CX, CZ, CRx, CRy, CRz, CP
    - Multi-controlled: MCX, MCZ (any number of controls)
    - Two-qubit: SWAP
"""

from __future__ import annotations

import numpy as np
from numpy import ndarray

# Type alias
Matrix = ndarray

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)

# ---------------------------------------------------------------------------
# Single-qubit fixed gates
# ---------------------------------------------------------------------------

I = np.eye(2, dtype=np.complex128)
"""Identity gate."""

X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
"""Pauli-X (NOT) gate."""

Y = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
"""Pauli-Y gate."""

Z = np.array([[1, 0], [0, -1]], dtype=np.complex128)
"""Pauli-Z gate."""

H = np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV
"""Hadamard gate."""

S = np.array([[1, 0], [0, 1j]], dtype=np.complex128)
"""S (phase) gate: sqrt(Z)."""

Sdg = np.array([[1, 0], [0, -1j]], dtype=np.complex128)
"""S-dagger gate."""

T = np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128)
"""T gate: sqrt(S)."""

Tdg = np.array([[1, 0], [0, np.exp(-1j * np.pi / 4)]], dtype=np.complex128)
"""T-dagger gate."""

# ---------------------------------------------------------------------------
# Single-qubit parameterized gates
# ---------------------------------------------------------------------------

def Rx(theta: float) -> Matrix:
    """Rotation around X-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def Ry(theta: float) -> Matrix:
    """Rotation around Y-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def Rz(phi: float) -> Matrix:
    """Rotation around Z-axis by angle phi."""
    return np.array(
        [[np.exp(-1j * phi / 2), 0], [0, np.exp(1j * phi / 2)]],
        dtype=np.complex128,
    )


def P(lam: float) -> Matrix:
    """Phase gate: diagonal with entries [1, exp(i*lam)]."""
    return np.array([[1, 0], [0, np.exp(1j * lam)]], dtype=np.complex128)


# ---------------------------------------------------------------------------
# Two-qubit fixed gates (4x4 matrices)
# ---------------------------------------------------------------------------

SWAP = np.array(
    [[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]],
    dtype=np.complex128,
)
"""SWAP gate."""


def controlled(matrix: Matrix, n_controls: int = 1) -> Matrix:
    """
    Expand a target unitary into its full controlled form.

    Controls come first in the qubit order, so the target block sits in
    the bottom-right corner. Only used for checks and small gates; the
    backend never builds these matrices.
    """
    dim = matrix.shape[0] * 2 ** n_controls
    full = np.eye(dim, dtype=np.complex128)
    full[dim - matrix.shape[0]:, dim - matrix.shape[0]:] = matrix
    return full


CNOT = controlled(X)
"""Controlled-NOT (CX) gate."""
CX = CNOT  # alias

CZ = controlled(Z)
"""Controlled-Z gate."""


def CP(lam: float) -> Matrix:
    """Controlled-Phase gate."""
    return controlled(P(lam))


def CRx(theta: float) -> Matrix:
    """Controlled-Rx gate."""
    return controlled(Rx(theta))


def CRy(theta: float) -> Matrix:
    """Controlled-Ry gate."""
    return controlled(Ry(theta))


def CRz(phi: float) -> Matrix:
    """Controlled-Rz gate."""
    return controlled(Rz(phi))


# ---------------------------------------------------------------------------
# Gate metadata registry
# ---------------------------------------------------------------------------
# n_controls of None means "any number of controls" (multi-controlled).

GATE_REGISTRY: dict[str, dict] = {
    # Fixed single-qubit
    "x": {"matrix": X, "n_controls": 0, "n_targets": 1, "n_params": 0},
    "y": {"matrix": Y, "n_controls": 0, "n_targets": 1, "n_params": 0},
    "z": {"matrix": Z, "n_controls": 0, "n_targets": 1, "n_params": 0},
    "h": {"matrix": H, "n_controls": 0, "n_targets": 1, "n_params": 0},
    "s": {"matrix": S, "n_controls": 0, "n_targets": 1, "n_params": 0},
    "sdg": {"matrix": Sdg, "n_controls": 0, "n_targets": 1, "n_params": 0},
    "t": {"matrix": T, "n_controls": 0, "n_targets": 1, "n_params": 0},
    "tdg": {"matrix": Tdg, "n_controls": 0, "n_targets": 1, "n_params": 0},
    # Parameterized single-qubit
    "rx": {"factory": Rx, "n_controls": 0, "n_targets": 1, "n_params": 1},
    "ry": {"factory": Ry, "n_controls": 0, "n_targets": 1, "n_params": 1},
    "rz": {"factory": Rz, "n_controls": 0, "n_targets": 1, "n_params": 1},
    "p": {"factory": P, "n_controls": 0, "n_targets": 1, "n_params": 1},
    # Controlled
    "cx": {"matrix": X, "n_controls": 1, "n_targets": 1, "n_params": 0},
    "cz": {"matrix": Z, "n_controls": 1, "n_targets": 1, "n_params": 0},
    "crx": {"factory": Rx, "n_controls": 1, "n_targets": 1, "n_params": 1},
    "cry": {"factory": Ry, "n_controls": 1, "n_targets": 1, "n_params": 1},
    "crz": {"factory": Rz, "n_controls": 1, "n_targets": 1, "n_params": 1},
    "cp": {"factory": P, "n_controls": 1, "n_targets": 1, "n_params": 1},
    # Multi-controlled
    "mcx": {"matrix": X, "n_controls": None, "n_targets": 1, "n_params": 0},
    "mcz": {"matrix": Z, "n_controls": None, "n_targets": 1, "n_params": 0},
    # Two-qubit
    "swap": {"matrix": SWAP, "n_controls": 0, "n_targets": 2, "n_params": 0},
}

ROTATION_GATES = frozenset({"rx", "ry", "rz", "p", "crx", "cry", "crz", "cp"})
"""Gates whose inverse is the same gate with the angle negated."""

ADJOINT_PAIRS = {"s": "sdg", "sdg": "s", "t": "tdg", "tdg": "t"}
"""Fixed gates whose inverse is a different fixed gate."""


def get_matrix(name: str, params: tuple[float, ...] = ()) -> Matrix:
    """
    Look up the target matrix of a gate by name, with optional parameters.

    Parameters
    ----------
    name : str
        Gate name (case-insensitive).
    params : tuple of float
        Parameters for parameterized gates.

    Returns
    -------
    numpy.ndarray
        Unitary acting on the gate's target qubits.

    Raises
    ------
    KeyError
        If gate name is not found.
    ValueError
        If wrong number of parameters provided.
    """
    info = gate_info(name)
    n_params = info["n_params"]

    if n_params == 0:
        if params:
            raise ValueError(f"Gate '{name}' takes no parameters, got {len(params)}")
        return info["matrix"]
    if len(params) != n_params:
        raise ValueError(
            f"Gate '{name}' requires {n_params} parameter(s), got {len(params)}"
        )
    return info["factory"](*params)


def gate_info(name: str) -> dict:
    """Registry entry for a gate name (case-insensitive)."""
    key = name.lower()
    if key not in GATE_REGISTRY:
        raise KeyError(f"Unknown gate: '{name}'. Available: {sorted(GATE_REGISTRY.keys())}")
    return GATE_REGISTRY[key]


def split_qubits(name: str, qubits: tuple[int, ...]) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Split an instruction's qubits into (controls, targets)."""
    n_targets = gate_info(name)["n_targets"]
    return qubits[:-n_targets], qubits[-n_targets:]


def is_unitary(m: Matrix, tol: float = 1e-9) -> bool:
    """Check if a matrix is unitary: U U† = I."""
    product = m @ m.conj().T
    return np.allclose(product, np.eye(len(m)), atol=tol)
