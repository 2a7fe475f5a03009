"""
Exceptions raised while building circuits.

All of them are raised at construction time, before any gate executes.
A failed build never returns a partial circuit.
"""


class QSweepError(Exception):
    """Base class for qsweep errors."""


class ParameterError(QSweepError, ValueError):
    """Invalid size, index or angle handed to a builder or readout function."""


class ConstructionError(QSweepError):
    """A circuit block cannot be built as requested (e.g. measurement in a setup)."""


class ResourceLifecycleError(QSweepError):
    """A qubit register was used after release, released out of order, or leaked."""
