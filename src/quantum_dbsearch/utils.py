"""Utility functions shared by the simulator and the experiment driver."""

from __future__ import annotations

import math
from typing import Sequence


def int_to_bits(value: int, width: int) -> list[int]:
    """Big-endian bits of ``value`` padded to ``width``.

    Args:
        value: Non-negative integer below 2**width.
        width: Number of bits.

    Returns:
        List of 0/1 integers, most significant bit first.
    """
    if width < 0:
        raise ValueError(f"width must be non-negative, got {width}")
    if value < 0 or value >= 2 ** width:
        raise ValueError(f"{value} does not fit in {width} bits")
    return [(value >> (width - 1 - i)) & 1 for i in range(width)]


def bits_to_int(bits: Sequence[int]) -> int:
    """Decode a big-endian bit sequence into an integer."""
    value = 0
    for bit in bits:
        if bit not in (0, 1):
            raise ValueError(f"Invalid bit value: {bit!r}")
        value = (value << 1) | int(bit)
    return value


def format_bits(bits: Sequence[int]) -> str:
    """Render bits as a compact string, e.g. ``[0, 1] -> '01'``."""
    return "".join(str(int(b)) for b in bits)


def search_angle(n_key_qubits: int) -> float:
    """Return theta = arcsin(1/sqrt(N)) for N = 2**n_key_qubits."""
    return math.asin(1.0 / math.sqrt(2 ** n_key_qubits))


def classical_success_probability(n_key_qubits: int) -> float:
    """Probability of guessing the marked key at random: 1/N."""
    return 1.0 / 2 ** n_key_qubits


def success_probability(n_iterations: int, n_key_qubits: int) -> float:
    """Theoretical probability that the marked qubit is measured as one.

    sin^2((2n + 1) * theta) with theta = arcsin(1/sqrt(N)).
    """
    theta = search_angle(n_key_qubits)
    return math.sin((2 * n_iterations + 1) * theta) ** 2


def queries_per_search(n_iterations: int) -> int:
    """Number of state preparation oracle calls made by one search.

    One preparation plus two per Grover iterate (forward and adjoint).
    """
    return 2 * n_iterations + 1


def optimal_iterations(n_key_qubits: int) -> int:
    """Iteration count that maximizes the success probability.

    round(pi / (4 * theta) - 1/2), never negative.
    """
    theta = search_angle(n_key_qubits)
    return max(0, int(round(math.pi / (4 * theta) - 0.5)))


def speedup_factor(empirical_probability: float, n_key_qubits: int, n_iterations: int) -> float:
    """How much faster the quantum search performs than random guessing.

    Empirical success rate relative to 1/N, per oracle query.
    """
    classical = classical_success_probability(n_key_qubits)
    return empirical_probability / classical / queries_per_search(n_iterations)
