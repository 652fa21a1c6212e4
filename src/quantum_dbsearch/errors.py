"""Error taxonomy for the database search simulator."""


class DatabaseSearchError(Exception):
    """Base class for every error raised by quantum_dbsearch."""


class ConfigurationError(DatabaseSearchError, ValueError):
    """Invalid register sizes, search value or database table."""


class AllocationError(DatabaseSearchError, RuntimeError):
    """A qubit index was reused, out of range, or referenced after release."""


class NumericalConsistencyError(DatabaseSearchError, ArithmeticError):
    """The amplitude array lost its normalization.

    This always indicates an internal bug, never a user error.
    """


class ResourceExhaustion(DatabaseSearchError, MemoryError):
    """The requested number of qubits cannot be held in memory."""
