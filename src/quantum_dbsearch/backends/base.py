"""Interface for engines that sample exported search circuits."""

from abc import ABC, abstractmethod
from typing import Any

from qiskit import QuantumCircuit

Outcome = tuple[int, int, int]


class QuantumBackend(ABC):
    """Samples a measured search circuit and reports per-register outcomes."""

    @abstractmethod
    def run(self, circuit: QuantumCircuit, shots: int = 1024) -> dict[str, int]:
        """Sample ``circuit`` and return raw counts.

        Parameters
        ----------
        circuit : QuantumCircuit
            Search circuit ending in ``measure_all``
        shots : int
            Number of samples

        Returns
        -------
        dict[str, int]
            Counts keyed by Qiskit's little-endian bitstring
        """

    @abstractmethod
    def name(self) -> str:
        """Return the backend name."""

    @property
    @abstractmethod
    def is_simulator(self) -> bool:
        """Return True if this is a simulator backend."""

    def sample_outcomes(
        self,
        circuit: QuantumCircuit,
        n_key_qubits: int,
        n_value_qubits: int,
        shots: int = 1024,
    ) -> dict[Outcome, int]:
        """Sample ``circuit`` and decode counts into ``(marked, key, value)``."""
        from ..grover.circuit import decode_counts

        if shots < 1:
            raise ValueError(f"shots must be positive, got {shots}")
        counts = self.run(circuit, shots=shots)
        return decode_counts(counts, n_key_qubits, n_value_qubits)

    def get_info(self) -> dict[str, Any]:
        """Return backend information."""
        return {
            "name": self.name(),
            "is_simulator": self.is_simulator,
        }
