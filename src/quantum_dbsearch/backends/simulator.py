"""Simulator backend using Qiskit Aer."""

from typing import Optional

from qiskit import QuantumCircuit, transpile
from qiskit_aer import AerSimulator

from .base import QuantumBackend


class SimulatorBackend(QuantumBackend):
    """Local Aer simulator, used as an independent check of the exact engine."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize the simulator.

        Parameters
        ----------
        seed : int, optional
            Seed for Aer's sampler (``seed_simulator``)
        """
        self._simulator = AerSimulator()
        self._seed = seed

    def run(self, circuit: QuantumCircuit, shots: int = 1024) -> dict[str, int]:
        """Transpile to Aer's basis (multi-controlled gates included) and sample."""
        qc_transpiled = transpile(circuit, self._simulator)
        options = {} if self._seed is None else {"seed_simulator": self._seed}
        job = self._simulator.run(qc_transpiled, shots=shots, **options)
        return dict(job.result().get_counts())

    def name(self) -> str:
        return "aer_simulator"

    @property
    def is_simulator(self) -> bool:
        return True
