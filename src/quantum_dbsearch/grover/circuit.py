"""Export of the database search to a Qiskit circuit.

The exported circuit uses the same qubit indices as the exact simulator:
qubit 0 is the marked flag, followed by the key and then the value register.
Qiskit prints measured bitstrings little-endian (last qubit first), so
:func:`decode_counts` reverses them before splitting the registers.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from qiskit import QuantumCircuit

from ..database import DatabaseTable
from ..errors import ConfigurationError
from ..utils import bits_to_int
from .oracles import state_preparation_oracle
from .core import grover_iterate

Outcome = Tuple[int, int, int]


def search_registers(n_key_qubits: int, n_value_qubits: int) -> tuple[int, list[int], list[int]]:
    """Qubit layout shared by the simulator and the exported circuit."""
    marked_qubit = 0
    key_register = list(range(1, 1 + n_key_qubits))
    value_register = list(range(1 + n_key_qubits, 1 + n_key_qubits + n_value_qubits))
    return marked_qubit, key_register, value_register


def build_search_circuit(
    n_iterations: int,
    table: DatabaseTable,
    search_value: int,
    measure: bool = True,
) -> QuantumCircuit:
    """Build the complete search circuit.

    Args:
        n_iterations: Number of Grover iterates
        table: Validated database table
        search_value: Value to search for
        measure: Whether to append ``measure_all``

    Returns:
        Qiskit QuantumCircuit over ``1 + n_key_qubits + n_value_qubits`` qubits
    """
    if n_iterations < 0:
        raise ConfigurationError(f"n_iterations must be >= 0, got {n_iterations}")

    marked, key_register, value_register = search_registers(
        table.n_key_qubits, table.n_value_qubits
    )
    circuit = QuantumCircuit(1 + table.n_key_qubits + table.n_value_qubits)

    state_preparation_oracle(
        table, marked, key_register, value_register, search_value
    ).append_to(circuit)

    iterate = grover_iterate(table, marked, key_register, value_register, search_value)
    for _ in range(n_iterations):
        iterate.append_to(circuit)

    if measure:
        circuit.measure_all()

    return circuit


def decode_counts(
    counts: Dict[str, int],
    n_key_qubits: int,
    n_value_qubits: int,
) -> Dict[Outcome, int]:
    """Convert Qiskit counts into ``(marked, key, value)`` outcome counts."""
    n_total = 1 + n_key_qubits + n_value_qubits
    outcomes: Dict[Outcome, int] = {}
    for bitstring, count in counts.items():
        bits = [int(b) for b in bitstring.replace(" ", "")[::-1]]
        if len(bits) != n_total:
            raise ValueError(f"Bitstring {bitstring!r} does not cover {n_total} qubits")
        marked = bits[0]
        key = bits_to_int(bits[1:1 + n_key_qubits])
        value = bits_to_int(bits[1 + n_key_qubits:])
        outcome = (marked, key, value)
        outcomes[outcome] = outcomes.get(outcome, 0) + count
    return outcomes


def circuit_metrics(circuit: QuantumCircuit) -> dict[str, Any]:
    """Depth and gate counts of an exported circuit."""
    gate_counts = dict(circuit.count_ops())
    return {
        "circuit_depth": circuit.depth(),
        "total_gates": int(sum(gate_counts.values())),
        "gate_counts": gate_counts,
    }
