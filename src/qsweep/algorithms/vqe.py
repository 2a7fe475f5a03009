"""
Fixed-angle UCC-style ansatz circuits for small molecules.

Each molecule is a Hartree-Fock reference (the lowest ``n_electrons``
spin-orbitals occupied) followed by a fixed table of single and double
excitation operators, all at the same angle. There is no optimization
loop; the circuits are built for resource estimation and checked by
simulation.

Usage:
    from qsweep.algorithms.vqe import AnsatzParameters, build_ansatz, run_ansatz

    qc = build_ansatz(AnsatzParameters("lih"))
    result = run_ansatz(AnsatzParameters("h2", angle=0.0), seed=0)
    print(result.occupation, result.hartree_fock)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from qsweep.backends import StatevectorBackend
from qsweep.circuit import Circuit
from qsweep.errors import ParameterError
from qsweep.register import Qubit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Molecule:
    """Spin-orbital count, electron count and excitation index tables."""
    name: str
    n_qubits: int
    n_electrons: int
    singles: tuple[tuple[int, int], ...] = ()
    doubles: tuple[tuple[int, int, int, int], ...] = ()

    def __post_init__(self) -> None:
        if not 1 <= self.n_electrons <= self.n_qubits:
            raise ParameterError(
                f"{self.name}: electron count {self.n_electrons} outside [1, {self.n_qubits}]"
            )
        for indices in (*self.singles, *self.doubles):
            _check_indices(indices, self.n_qubits)


def _check_indices(indices: Sequence[int], n_qubits: int) -> None:
    bad = [i for i in indices if not 0 <= i < n_qubits]
    if bad:
        raise ParameterError(f"Orbital indices {bad} outside a {n_qubits}-qubit register")
    if len(set(indices)) != len(indices):
        raise ParameterError(f"Repeated orbital index in {tuple(indices)}")


MOLECULES: dict[str, Molecule] = {
    "h2": Molecule(
        name="H2", n_qubits=4, n_electrons=2,
        doubles=((0, 1, 2, 3),),
    ),
    "lih": Molecule(
        name="LiH", n_qubits=12, n_electrons=4,
        singles=((0, 4), (1, 5)),
        doubles=((0, 1, 4, 5), (2, 3, 6, 7), (0, 2, 4, 6), (1, 3, 5, 7)),
    ),
    "beh2": Molecule(
        name="BeH2", n_qubits=14, n_electrons=6,
        singles=((0, 6), (1, 7), (2, 8)),
        doubles=(
            (0, 1, 6, 7), (2, 3, 8, 9), (0, 2, 6, 8),
            (1, 3, 7, 9), (4, 5, 10, 11), (0, 4, 6, 10),
        ),
    ),
}


def get_molecule(name: str) -> Molecule:
    """Look up a molecule by name (case-insensitive)."""
    key = name.lower()
    if key not in MOLECULES:
        raise ParameterError(f"Unknown molecule: '{name}'. Available: {sorted(MOLECULES)}")
    return MOLECULES[key]


@dataclass(frozen=True)
class AnsatzParameters:
    """Molecule name and the shared excitation angle."""
    molecule: str
    angle: float = 0.1

    def __post_init__(self) -> None:
        object.__setattr__(self, "molecule", get_molecule(self.molecule).name.lower())


@dataclass
class AnsatzResult:
    """Readout of one measured ansatz run."""
    molecule: str
    angle: float
    outcome: tuple[int, ...]
    occupation: int
    hartree_fock: tuple[int, ...]

    @property
    def is_reference(self) -> bool:
        return self.outcome == self.hartree_fock


# ---------------------------------------------------------------------------
# Readout
# ---------------------------------------------------------------------------

def occupation(outcome: Sequence[int]) -> int:
    """Number of spin-orbitals measured as occupied."""
    return sum(outcome)


def hartree_fock_bits(n_qubits: int, n_electrons: int) -> tuple[int, ...]:
    """Reference bit-string: ``n_electrons`` ones followed by zeros."""
    if not 1 <= n_electrons <= n_qubits:
        raise ParameterError(f"Electron count {n_electrons} outside [1, {n_qubits}]")
    return (1,) * n_electrons + (0,) * (n_qubits - n_electrons)


def excitation_counts(molecule: str) -> tuple[int, int]:
    """(number of single excitations, number of double excitations)."""
    mol = get_molecule(molecule)
    return len(mol.singles), len(mol.doubles)


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------

def hartree_fock(qc: Circuit, qubits: Sequence[Qubit], n_electrons: int) -> None:
    """Occupy the lowest ``n_electrons`` orbitals."""
    if not 1 <= n_electrons <= len(qubits):
        raise ParameterError(f"Electron count {n_electrons} outside [1, {len(qubits)}]")
    for q in qubits[:n_electrons]:
        qc.x(q)


def single_excitation(qc: Circuit, angle: float, occupied: Qubit, virtual: Qubit) -> None:
    """
    Givens rotation between one occupied and one virtual orbital.

    |10> -> cos(angle)|10> - sin(angle)|01>
    """
    qc.conjugate(
        lambda rec: rec.cx(occupied, virtual),
        lambda rec: rec.ry(2 * angle, occupied),
    )


def double_excitation(qc: Circuit, angle: float, occ0: Qubit, occ1: Qubit,
                      virt0: Qubit, virt1: Qubit) -> None:
    """
    Pair excitation ``occ0 occ1 -> virt0 virt1`` as a 10-CNOT template.

    The parity of all four orbitals is gathered on ``virt1``, which is
    rotated in four Ry(±angle/8) pieces interleaved with CNOTs from the
    occupied pair; the prefix is then mirrored. Zero angle is the
    identity.

    |1100> -> cos(angle/4)|1100> + sin(angle/4)|0011>

    The rotation fires whenever the prefix leaves both occupied orbitals
    set, so the template also moves the lone-virtual pattern
    (orbitals in argument order):

    |0001> -> cos(angle/4)|0001> - sin(angle/4)|1110>

    Hartree-Fock references never hold that pattern on a double's orbitals.
    """
    a = angle / 8
    qc.cx(virt1, virt0).cx(virt1, occ0).cx(virt1, occ1)
    qc.ry(a, virt1).cx(occ0, virt1)
    qc.ry(-a, virt1).cx(occ1, virt1)
    qc.ry(a, virt1).cx(occ0, virt1)
    qc.ry(-a, virt1).cx(occ1, virt1)
    qc.cx(virt1, occ1).cx(virt1, occ0).cx(virt1, virt0)


def ansatz(qc: Circuit, qubits: Sequence[Qubit], molecule: Molecule, angle: float) -> None:
    """Hartree-Fock reference, then every single, then every double excitation."""
    if len(qubits) != molecule.n_qubits:
        raise ParameterError(
            f"{molecule.name} needs {molecule.n_qubits} qubits, got {len(qubits)}"
        )
    hartree_fock(qc, qubits, molecule.n_electrons)
    for occ, virt in molecule.singles:
        single_excitation(qc, angle, qubits[occ], qubits[virt])
    for o0, o1, v0, v1 in molecule.doubles:
        double_excitation(qc, angle, qubits[o0], qubits[o1], qubits[v0], qubits[v1])


def _build(params: AnsatzParameters, measure: bool) -> tuple[Circuit, tuple[int, ...]]:
    molecule = get_molecule(params.molecule)
    qc = Circuit(name=f"vqe_{params.molecule}")
    bits: tuple[int, ...] = ()
    with qc.allocate(molecule.n_qubits, "orbitals") as orbitals:
        ansatz(qc, orbitals, molecule, params.angle)
        if measure:
            bits = qc.measure(orbitals)
    logger.debug("built %r for %s", qc, molecule.name)
    return qc, bits


def build_ansatz(params: AnsatzParameters, measure: bool = False) -> Circuit:
    return _build(params, measure)[0]


def run_ansatz(params: AnsatzParameters, seed: int | None = None,
               backend: StatevectorBackend | None = None) -> AnsatzResult:
    """Build, simulate and read out the ansatz once."""
    molecule = get_molecule(params.molecule)
    backend = backend or StatevectorBackend(seed=seed)
    qc, bits = _build(params, measure=True)
    outcome = backend.run(qc).outcome(bits)
    return AnsatzResult(
        molecule=params.molecule,
        angle=params.angle,
        outcome=outcome,
        occupation=occupation(outcome),
        hartree_fock=hartree_fock_bits(molecule.n_qubits, molecule.n_electrons),
    )
