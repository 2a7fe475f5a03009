"""Simulation backends for qsweep."""

from qsweep.backends.statevector import SimulationResult, StatevectorBackend

__all__ = ["StatevectorBackend", "SimulationResult"]
