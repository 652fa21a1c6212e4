"""Oracle construction for the key/value database search.

The database oracle entangles each key with its value; the marking oracle
entangles the value register with a flag qubit. Both are built from
controlled bit flips only, so each is its own inverse.
"""

from __future__ import annotations

from typing import Sequence

from ..database import DatabaseTable
from ..errors import ConfigurationError
from ..gates import H, Operation, X, apply_to_each, compose, controlled_on_int
from ..utils import int_to_bits


def set_register_to_int(value: int, register: Sequence[int]) -> Operation:
    """Flip the bits of ``register`` where ``value`` has a one.

    Applied to a zeroed register this loads ``value``; applied twice it
    cancels.
    """
    try:
        bits = int_to_bits(value, len(register))
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
    return compose(X(qubit) for qubit, bit in zip(register, bits) if bit == 1)


def encode_database(
    table: DatabaseTable,
    key_register: Sequence[int],
    value_register: Sequence[int],
) -> Operation:
    """Write ``table[k]`` into ``value_register`` when ``key_register == k``.

    The per-key control patterns are disjoint, so the order of the terms
    does not matter and the whole oracle is self-adjoint.
    """
    if len(key_register) != table.n_key_qubits:
        raise ConfigurationError(
            f"Key register has {len(key_register)} qubits, table needs {table.n_key_qubits}"
        )
    if len(value_register) != table.n_value_qubits:
        raise ConfigurationError(
            f"Value register has {len(value_register)} qubits, table needs {table.n_value_qubits}"
        )
    return compose(
        controlled_on_int(key, key_register, set_register_to_int(value, value_register))
        for key, value in table.items()
    )


def mark_value(marked_qubit: int, value_register: Sequence[int], search_value: int) -> Operation:
    """Flip ``marked_qubit`` when ``value_register == search_value``."""
    return controlled_on_int(search_value, value_register, X(marked_qubit))


def state_preparation_oracle(
    table: DatabaseTable,
    marked_qubit: int,
    key_register: Sequence[int],
    value_register: Sequence[int],
    search_value: int,
) -> Operation:
    """Prepare the Grover start state from all zeros.

    1. Hadamard on every key qubit (uniform superposition over N keys)
    2. Encode the database into the value register
    3. Mark the branch holding ``search_value``

    Result: sin(theta)|1>|k*>|v*> + cos(theta)|0>(sum over the other keys),
    with theta = arcsin(1/sqrt(N)).

    The three steps form one fixed sequence; superposition must always be
    followed directly by encoding.
    """
    return compose([
        apply_to_each(H, key_register),
        encode_database(table, key_register, value_register),
        mark_value(marked_qubit, value_register, search_value),
    ])
