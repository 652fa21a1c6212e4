"""Reflection operators used by the Grover iterate."""

from __future__ import annotations

import math
from typing import Sequence

from ..database import DatabaseTable
from ..gates import Operation, Phase, X, apply_to_each, compose, invert, mcphase
from .oracles import state_preparation_oracle


def reflect_marked(marked_qubit: int) -> Operation:
    """Flip the sign of every basis state with the marked qubit set."""
    return Phase(marked_qubit, math.pi)


def reflect_zero(register: Sequence[int]) -> Operation:
    """Flip the sign of the all-zero state of ``register``.

    X on every qubit turns |0...0> into |1...1>, a phase flip controlled on
    all but the last qubit then hits exactly that state, and the X layer is
    undone.
    """
    register = list(register)
    if not register:
        raise ValueError("Cannot reflect an empty register")
    flips = apply_to_each(X, register)
    return compose([
        flips,
        mcphase(math.pi, register[:-1], register[-1]),
        flips,
    ])


def reflect_start(
    table: DatabaseTable,
    marked_qubit: int,
    key_register: Sequence[int],
    value_register: Sequence[int],
    search_value: int,
) -> Operation:
    """Reflect about the start state U|0> as U * R0 * U^-1.

    The start state itself is never materialized.
    """
    prepare = state_preparation_oracle(
        table, marked_qubit, key_register, value_register, search_value
    )
    return compose([
        invert(prepare),
        reflect_zero([marked_qubit, *key_register]),
        prepare,
    ])
