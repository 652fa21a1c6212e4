"""Shared fixtures for the database search tests."""

import numpy as np
import pytest

from quantum_dbsearch import DatabaseTable
from quantum_dbsearch.statevector import StateVector

SAMPLE_TABLE = {0: 3, 1: 2, 2: 0, 3: 1}


def basis_index(marked: int, key: int, value: int, n_key_qubits: int = 2, n_value_qubits: int = 2) -> int:
    """Index of |marked>|key>|value> in the big-endian basis ordering."""
    return (marked << (n_key_qubits + n_value_qubits)) | (key << n_value_qubits) | value


def random_amplitudes(dim: int, rng: np.random.Generator) -> np.ndarray:
    vec = rng.normal(size=dim) + 1j * rng.normal(size=dim)
    return vec / np.linalg.norm(vec)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def sample_table():
    return DatabaseTable(SAMPLE_TABLE, 2, 2)


@pytest.fixture
def search_state():
    """5-qubit state with marked, key (2) and value (2) registers allocated."""
    state = StateVector(5, validate=True)
    (marked,) = state.allocate(1)
    key = state.allocate(2)
    value = state.allocate(2)
    return state, marked, key, value
