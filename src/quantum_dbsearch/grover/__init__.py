"""Grover's search over a key/value database.

Building blocks:
- Oracles: database encoding and value marking (self-adjoint)
- Reflections: about the marked subspace, the zero state and the start state
- Controller: state preparation followed by Grover iterates
- Circuit (quantum_dbsearch.grover.circuit): export to Qiskit, needs qiskit

Success probability after n iterates over N = 2^k keys:
    sin^2((2n + 1) * arcsin(1/sqrt(N)))

Example usage:
    >>> from quantum_dbsearch.grover import success_probability
    >>> round(success_probability(1, 2), 6)  # N = 4, one iterate
    1.0
"""

__all__ = [
    # Controller
    "run_circuit",
    "grover_iterate",
    # Oracles
    "set_register_to_int",
    "encode_database",
    "mark_value",
    "state_preparation_oracle",
    # Reflections
    "reflect_marked",
    "reflect_zero",
    "reflect_start",
    # Theory
    "optimal_iterations",
    "success_probability",
    "queries_per_search",
]

from .core import grover_iterate, run_circuit
from .oracles import encode_database, mark_value, set_register_to_int, state_preparation_oracle
from .reflections import reflect_marked, reflect_start, reflect_zero
from ..utils import optimal_iterations, queries_per_search, success_probability
