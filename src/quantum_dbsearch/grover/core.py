"""Grover search controller over the exact state vector."""

from __future__ import annotations

import logging
from typing import Sequence

from ..database import DatabaseTable
from ..errors import ConfigurationError
from ..gates import Operation, compose
from ..statevector import StateVector
from .oracles import state_preparation_oracle
from .reflections import reflect_marked, reflect_start

logger = logging.getLogger(__name__)


def grover_iterate(
    table: DatabaseTable,
    marked_qubit: int,
    key_register: Sequence[int],
    value_register: Sequence[int],
    search_value: int,
) -> Operation:
    """One Grover iterate: reflect about the marked subspace, then the start state."""
    return compose([
        reflect_marked(marked_qubit),
        reflect_start(table, marked_qubit, key_register, value_register, search_value),
    ])


def run_circuit(
    state: StateVector,
    n_iterations: int,
    table: DatabaseTable,
    marked_qubit: int,
    key_register: Sequence[int],
    value_register: Sequence[int],
    search_value: int,
) -> None:
    """Prepare the start state and apply ``n_iterations`` Grover iterates in place.

    ``n_iterations = 0`` leaves the plain prepared state, which samples like
    one classical random guess. Iterating past ``optimal_iterations`` lowers
    the success probability again; that is left to the caller.

    Args:
        state: State vector with all registers allocated and zeroed
        n_iterations: Number of Grover iterates
        table: Database table encoded by the oracle
        marked_qubit: Flag qubit
        key_register: Key qubits (most significant first)
        value_register: Value qubits (most significant first)
        search_value: Value being searched for
    """
    if n_iterations < 0:
        raise ConfigurationError(f"n_iterations must be >= 0, got {n_iterations}")

    prepare = state_preparation_oracle(
        table, marked_qubit, key_register, value_register, search_value
    )
    prepare.apply(state)

    iterate = grover_iterate(table, marked_qubit, key_register, value_register, search_value)
    for iteration in range(n_iterations):
        iterate.apply(state)
        logger.debug(
            "Grover iterate %d/%d done, P(marked)=%.6f",
            iteration + 1, n_iterations, state.probability_of_one(marked_qubit),
        )
