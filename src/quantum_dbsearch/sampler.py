"""Measurement of qubits in the exact state vector."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .gates import X
from .statevector import StateVector

logger = logging.getLogger(__name__)


class Sampler:
    """Probabilistic measurement with state collapse.

    Randomness comes only from the injected generator, so a seeded
    ``numpy.random.Generator`` makes a whole run reproducible.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def measure(self, state: StateVector, qubit: int) -> int:
        """Measure one qubit in the computational basis.

        The outcome is drawn with the Born probabilities of the current
        state, which is then collapsed onto it and renormalized.

        Returns:
            0 or 1
        """
        p_one = state.probability_of_one(qubit)
        outcome = 1 if self.rng.random() < p_one else 0
        probability = p_one if outcome == 1 else 1.0 - p_one
        state.project(qubit, outcome, probability)
        logger.debug("Measured qubit %d = %d (p=%.6f)", qubit, outcome, probability)
        return outcome

    def measure_register(self, state: StateVector, register: Sequence[int]) -> list[int]:
        """Measure qubits one after another.

        Each draw sees the collapse caused by the previous ones, so the
        result is a joint sample of the register.
        """
        return [self.measure(state, qubit) for qubit in register]

    @staticmethod
    def reset(state: StateVector, register: Sequence[int], results: Sequence[int]) -> None:
        """Flip measured ones back to zero so the register can be released."""
        for qubit, result in zip(register, results):
            if result == 1:
                X(qubit).apply(state)
