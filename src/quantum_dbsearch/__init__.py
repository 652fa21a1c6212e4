"""Quantum Database Search - Grover's algorithm on an exact state-vector simulator.

This package provides tools for:
- Simulating qubit registers as a dense complex amplitude vector
- Composing gates, controlled variants and exact adjoints
- Grover's search over a classical key/value table
- Repeated-run experiments and a Qiskit Aer cross-check

Subpackages:
- quantum_dbsearch.grover: oracles, reflections and the search controller
- quantum_dbsearch.backends: Qiskit Aer backend for exported circuits
"""

__all__ = [
    # Search
    "run_search",
    "validate_search",
    "SearchResult",
    "DatabaseTable",
    # Configuration
    "SearchConfig",
    "load_config",
    "DEFAULT_TABLE",
    # Experiments
    "SearchRunSetting",
    "sweep_iterations",
    "summarize_success",
    # Errors
    "DatabaseSearchError",
    "ConfigurationError",
    "AllocationError",
    "NumericalConsistencyError",
    "ResourceExhaustion",
    # Utilities
    "bits_to_int",
    "int_to_bits",
]

from .config import DEFAULT_TABLE, SearchConfig, load_config
from .core import SearchResult
from .database import DatabaseTable
from .errors import (
    AllocationError,
    ConfigurationError,
    DatabaseSearchError,
    NumericalConsistencyError,
    ResourceExhaustion,
)
from .experiment_logging import SearchRunSetting, summarize_success, sweep_iterations
from .runner import run_search, validate_search
from .utils import bits_to_int, int_to_bits
