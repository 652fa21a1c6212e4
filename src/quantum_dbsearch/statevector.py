"""Dense state vector holding every qubit of one search run.

Basis ordering is big-endian over qubit indices: qubit 0 is the most
significant bit of the basis index, qubit ``n - 1`` the least significant.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .config import DEFAULT_MAX_QUBITS, EPSILON
from .errors import (
    AllocationError,
    ConfigurationError,
    NumericalConsistencyError,
    ResourceExhaustion,
)

logger = logging.getLogger(__name__)

Register = tuple[int, ...]


class StateVector:
    """Complex amplitude array for ``n_qubits`` simulated qubits.

    The vector starts in the all-zero basis state. Qubit indices are handed
    out with :meth:`allocate` and must be returned, in the zero state, with
    :meth:`release`. Gates are applied in place with :meth:`apply_matrix`.

    Example:
        >>> state = StateVector(2)
        >>> (q0, q1) = state.allocate(2)
        >>> state.apply_matrix(np.array([[0, 1], [1, 0]]), q0)
        >>> state.probability_of_one(q0)
        1.0
    """

    def __init__(
        self,
        n_qubits: int,
        max_qubits: int = DEFAULT_MAX_QUBITS,
        validate: bool = False,
        tolerance: float = EPSILON,
    ):
        """Allocate the amplitude array.

        Args:
            n_qubits: Total number of qubits (array length is 2**n_qubits)
            max_qubits: Largest qubit count considered feasible
            validate: Check normalization after every gate application
            tolerance: Allowed deviation of the total probability from 1
        """
        if n_qubits < 1:
            raise ConfigurationError(f"n_qubits must be positive, got {n_qubits}")
        if n_qubits > max_qubits:
            raise ResourceExhaustion(
                f"{n_qubits} qubits need 2^{n_qubits} amplitudes; "
                f"the limit is {max_qubits} qubits"
            )

        dim = 2 ** n_qubits
        try:
            amplitudes = np.zeros(dim, dtype=np.complex128)
            indices = np.arange(dim, dtype=np.int64)
        except MemoryError as exc:
            raise ResourceExhaustion(f"Cannot allocate {dim} amplitudes") from exc
        amplitudes[0] = 1.0

        self.n_qubits = n_qubits
        self.validate = validate
        self.tolerance = tolerance
        self.gate_count = 0
        self._amplitudes = amplitudes
        self._indices = indices
        self._free = list(range(n_qubits))
        self._live: set[int] = set()

    @property
    def dim(self) -> int:
        return self._amplitudes.shape[0]

    @property
    def amplitudes(self) -> np.ndarray:
        """Copy of the current amplitudes."""
        return self._amplitudes.copy()

    @property
    def live_qubits(self) -> Register:
        return tuple(sorted(self._live))

    # ------------------------------------------------------------------
    # Qubit allocation
    # ------------------------------------------------------------------
    def allocate(self, size: int) -> Register:
        """Hand out ``size`` unused qubit indices as a register."""
        if size < 1:
            raise AllocationError(f"Register size must be positive, got {size}")
        if size > len(self._free):
            raise AllocationError(
                f"Cannot allocate {size} qubits: only {len(self._free)} of "
                f"{self.n_qubits} are free"
            )
        register = tuple(self._free[:size])
        del self._free[:size]
        self._live.update(register)
        return register

    def release(self, register: Sequence[int]) -> None:
        """Return qubits to the pool.

        Every qubit must already be back in the zero state.

        Raises:
            AllocationError: If a qubit is not live or not in the zero state
        """
        for qubit in register:
            self._check_qubit(qubit)
        for qubit in register:
            if self.probability_of_one(qubit) > self.tolerance:
                raise AllocationError(f"Released qubit {qubit} is not in the zero state")
        for qubit in register:
            self._live.discard(qubit)
            self._free.append(qubit)
        self._free.sort()

    def _check_qubit(self, qubit: int) -> None:
        if not 0 <= qubit < self.n_qubits:
            raise AllocationError(f"Qubit index {qubit} is out of range [0, {self.n_qubits})")
        if qubit not in self._live:
            raise AllocationError(f"Qubit {qubit} is not allocated")

    # ------------------------------------------------------------------
    # Gate application
    # ------------------------------------------------------------------
    def _mask(self, qubit: int) -> int:
        return 1 << (self.n_qubits - 1 - qubit)

    def _bits(self, qubit: int) -> np.ndarray:
        return (self._indices >> (self.n_qubits - 1 - qubit)) & 1

    def _select(self, controls: Sequence[int], pattern: Sequence[int]) -> np.ndarray:
        selected = np.ones(self.dim, dtype=bool)
        for qubit, bit in zip(controls, pattern):
            selected &= self._bits(qubit) == bit
        return selected

    def apply_matrix(
        self,
        matrix: np.ndarray,
        target: int,
        controls: Sequence[int] = (),
        pattern: Optional[Sequence[int]] = None,
    ) -> None:
        """Apply a 2x2 unitary to ``target``.

        The matrix acts only on basis states whose control bits equal
        ``pattern`` (all ones when omitted); other amplitudes are unchanged.
        """
        controls = tuple(controls)
        pattern = (1,) * len(controls) if pattern is None else tuple(pattern)
        if len(pattern) != len(controls):
            raise ValueError(
                f"Control pattern has {len(pattern)} bits for {len(controls)} controls"
            )
        self._check_qubit(target)
        for qubit in controls:
            self._check_qubit(qubit)
        if target in controls or len(set(controls)) != len(controls):
            raise AllocationError(f"Qubit aliased between target {target} and controls {controls}")

        selected = self._select(controls, pattern) & (self._bits(target) == 0)
        low = self._indices[selected]
        high = low | self._mask(target)
        a = self._amplitudes[low]
        b = self._amplitudes[high]
        self._amplitudes[low] = matrix[0, 0] * a + matrix[0, 1] * b
        self._amplitudes[high] = matrix[1, 0] * a + matrix[1, 1] * b
        self.gate_count += 1

        if self.validate:
            self.check_normalized()

    # ------------------------------------------------------------------
    # Probabilities and collapse
    # ------------------------------------------------------------------
    def norm(self) -> float:
        """Sum of squared amplitude magnitudes."""
        return float(np.vdot(self._amplitudes, self._amplitudes).real)

    def check_normalized(self) -> None:
        total = self.norm()
        if abs(total - 1.0) > self.tolerance:
            raise NumericalConsistencyError(
                f"Total probability {total!r} deviates from 1 after {self.gate_count} gates"
            )

    def probabilities(self) -> np.ndarray:
        return np.abs(self._amplitudes) ** 2

    def probability_of_one(self, qubit: int) -> float:
        self._check_qubit(qubit)
        ones = self._bits(qubit) == 1
        return float(np.sum(np.abs(self._amplitudes[ones]) ** 2))

    def project(self, qubit: int, outcome: int, probability: float) -> None:
        """Collapse ``qubit`` onto ``outcome``.

        Amplitudes inconsistent with the outcome are zeroed and the rest are
        divided by sqrt(probability).
        """
        if probability <= self.tolerance:
            raise NumericalConsistencyError(
                f"Measured qubit {qubit} = {outcome} with probability {probability!r}"
            )
        inconsistent = self._bits(qubit) != outcome
        self._amplitudes[inconsistent] = 0.0
        self._amplitudes /= np.sqrt(probability)

    def load(self, amplitudes: Sequence[complex]) -> None:
        """Replace the amplitudes with a normalized vector of the same size."""
        values = np.asarray(amplitudes, dtype=np.complex128)
        if values.shape != self._amplitudes.shape:
            raise ValueError(f"Expected {self.dim} amplitudes, got shape {values.shape}")
        total = float(np.vdot(values, values).real)
        if abs(total - 1.0) > self.tolerance:
            raise NumericalConsistencyError(f"Loaded amplitudes have total probability {total!r}")
        self._amplitudes[:] = values

    def basis_label(self, index: int) -> str:
        return format(index, f"0{self.n_qubits}b")

    def __repr__(self) -> str:
        return f"StateVector(n_qubits={self.n_qubits}, live={len(self._live)})"
