"""Entry point running one complete database search."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .config import DEFAULT_MAX_QUBITS, DEFAULT_TABLE
from .core import SearchResult
from .database import DatabaseTable, TableLike
from .errors import ConfigurationError, ResourceExhaustion
from .grover.core import run_circuit
from .sampler import Sampler
from .statevector import StateVector

logger = logging.getLogger(__name__)


def validate_search(
    n_iterations: int,
    n_key_qubits: int,
    n_value_qubits: int,
    search_value: int,
    table: Optional[TableLike] = None,
    max_qubits: int = DEFAULT_MAX_QUBITS,
) -> DatabaseTable:
    """Check a search configuration without touching any qubits.

    The qubit budget is checked before the table, so an infeasible size is
    reported as ``ResourceExhaustion`` without walking the key space.

    Returns:
        The validated database table

    Raises:
        ConfigurationError: On invalid sizes, search value or table, or when
            no key maps to ``search_value``
        ResourceExhaustion: If the state vector would exceed ``max_qubits``
    """
    for name, value in (
        ("n_iterations", n_iterations),
        ("n_key_qubits", n_key_qubits),
        ("n_value_qubits", n_value_qubits),
        ("search_value", search_value),
    ):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise ConfigurationError(f"{name} must be an integer, got {value!r}")

    if n_iterations < 0:
        raise ConfigurationError(f"n_iterations must be >= 0, got {n_iterations}")
    if n_key_qubits < 1:
        raise ConfigurationError(f"n_key_qubits must be >= 1, got {n_key_qubits}")
    if n_value_qubits < 1:
        raise ConfigurationError(f"n_value_qubits must be >= 1, got {n_value_qubits}")
    if not 0 <= search_value < 2 ** n_value_qubits:
        raise ConfigurationError(
            f"search_value {search_value} is outside [0, {2 ** n_value_qubits})"
        )

    n_total = 1 + n_key_qubits + n_value_qubits
    if n_total > max_qubits:
        raise ResourceExhaustion(
            f"Search needs {n_total} qubits (2^{n_total} amplitudes); limit is {max_qubits}"
        )

    database = DatabaseTable(
        DEFAULT_TABLE if table is None else table, n_key_qubits, n_value_qubits
    )
    try:
        database.find_key(search_value)
    except KeyError:
        raise ConfigurationError(
            f"No key maps to search_value {search_value}; the marked subspace would be empty"
        ) from None
    return database


def run_search(
    n_iterations: int,
    n_key_qubits: int,
    n_value_qubits: int,
    search_value: int,
    table: Optional[TableLike] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    max_qubits: int = DEFAULT_MAX_QUBITS,
    validate: bool = False,
) -> SearchResult:
    """Run Grover's search over the database once and measure every qubit.

    Args:
        n_iterations: Number of Grover iterates (0 = classical random guess)
        n_key_qubits: Size of the key register (N = 2^n_key_qubits keys)
        n_value_qubits: Size of the value register
        search_value: Value to search for
        table: Key -> value bijection. Defaults to {0: 3, 1: 2, 2: 0, 3: 1}.
        rng: Random generator used for measurement
        seed: Seed for a fresh generator when ``rng`` is not given
        max_qubits: Largest state vector considered feasible
        validate: Check normalization after every gate application

    Returns:
        SearchResult with the marked flag, key bits and value bits

    Raises:
        ConfigurationError: Before any allocation, on invalid arguments or
            when ``search_value`` is in range but not in the table's image.
            Only possible when ``n_value_qubits > n_key_qubits``; such a
            search could never succeed.
        ResourceExhaustion: If ``1 + n_key_qubits + n_value_qubits``
            exceeds ``max_qubits``
    """
    database = validate_search(
        n_iterations, n_key_qubits, n_value_qubits, search_value, table, max_qubits
    )
    sampler = Sampler(rng if rng is not None else np.random.default_rng(seed))

    state = StateVector(1 + n_key_qubits + n_value_qubits, max_qubits=max_qubits, validate=validate)
    (marked_qubit,) = state.allocate(1)
    key_register = state.allocate(n_key_qubits)
    value_register = state.allocate(n_value_qubits)
    logger.debug(
        "Search for %d with %d iterate(s): marked=%d key=%s value=%s",
        search_value, n_iterations, marked_qubit, key_register, value_register,
    )

    run_circuit(
        state, n_iterations, database, marked_qubit, key_register, value_register, search_value
    )
    state.check_normalized()

    marked_result = sampler.measure(state, marked_qubit)
    key_bits = sampler.measure_register(state, key_register)
    value_bits = sampler.measure_register(state, value_register)

    for register, results in (
        ((marked_qubit,), [marked_result]),
        (key_register, key_bits),
        (value_register, value_bits),
    ):
        sampler.reset(state, register, results)
        state.release(register)

    result = SearchResult(marked_result, tuple(key_bits), tuple(value_bits), n_iterations)
    logger.debug("Search result: %s", result)
    return result
