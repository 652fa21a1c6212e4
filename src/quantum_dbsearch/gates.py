"""Elementary gates and the combinators built on them.

Every operation is an immutable value that can

- apply itself to a :class:`~quantum_dbsearch.statevector.StateVector`,
- return its exact adjoint with :meth:`Operation.adjoint`,
- append itself to a Qiskit ``QuantumCircuit`` for cross-checking.

Controls are never baked into the gates themselves. ``with_controls`` wraps
an operation in a :class:`Controlled` node and the accumulated controls are
pushed down to the elementary gates when the operation is applied.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Sequence

import numpy as np

from .errors import ConfigurationError
from .utils import int_to_bits

if TYPE_CHECKING:
    from qiskit import QuantumCircuit

    from .statevector import StateVector

Bits = tuple[int, ...]

_X = np.array([[0, 1], [1, 0]], dtype=np.complex128)
_H = np.array([[1, 1], [1, -1]], dtype=np.complex128) / math.sqrt(2)


class Operation(ABC):
    """A unitary acting on qubits of a shared state vector."""

    @abstractmethod
    def apply(self, state: StateVector, controls: Bits = (), pattern: Bits = ()) -> None:
        """Apply the operation, restricted to basis states matching the controls."""

    @abstractmethod
    def adjoint(self) -> Operation:
        """Return the exact inverse."""

    @abstractmethod
    def append_to(self, circuit: QuantumCircuit, controls: Bits = (), pattern: Bits = ()) -> None:
        """Append the equivalent Qiskit instructions to ``circuit``."""

    @property
    @abstractmethod
    def num_gates(self) -> int:
        """Number of elementary gate applications."""

    def __call__(self, state: StateVector) -> None:
        self.apply(state)


@dataclass(frozen=True)
class SingleQubitGate(Operation):
    """Gate defined by a 2x2 matrix on one target qubit."""

    target: int

    @abstractmethod
    def matrix(self) -> np.ndarray:
        ...

    @abstractmethod
    def _append_gate(self, circuit: QuantumCircuit, controls: list[int]) -> None:
        ...

    def apply(self, state: StateVector, controls: Bits = (), pattern: Bits = ()) -> None:
        state.apply_matrix(self.matrix(), self.target, controls, pattern)

    def append_to(self, circuit: QuantumCircuit, controls: Bits = (), pattern: Bits = ()) -> None:
        _flip_anti_controls(circuit, controls, pattern)
        self._append_gate(circuit, list(controls))
        _flip_anti_controls(circuit, controls, pattern)

    @property
    def num_gates(self) -> int:
        return 1


@dataclass(frozen=True)
class X(SingleQubitGate):
    """Bit flip. Self-inverse."""

    def matrix(self) -> np.ndarray:
        return _X

    def adjoint(self) -> X:
        return self

    def _append_gate(self, circuit: QuantumCircuit, controls: list[int]) -> None:
        if controls:
            circuit.mcx(controls, self.target)
        else:
            circuit.x(self.target)


@dataclass(frozen=True)
class H(SingleQubitGate):
    """Hadamard. Self-inverse."""

    def matrix(self) -> np.ndarray:
        return _H

    def adjoint(self) -> H:
        return self

    def _append_gate(self, circuit: QuantumCircuit, controls: list[int]) -> None:
        if controls:
            from qiskit.circuit.library import HGate

            circuit.append(HGate().control(len(controls)), controls + [self.target])
        else:
            circuit.h(self.target)


@dataclass(frozen=True)
class Phase(SingleQubitGate):
    """Multiply the amplitude of the target's one state by exp(i * theta)."""

    theta: float

    def matrix(self) -> np.ndarray:
        return np.array([[1, 0], [0, np.exp(1j * self.theta)]], dtype=np.complex128)

    def adjoint(self) -> Phase:
        return Phase(self.target, -self.theta)

    def _append_gate(self, circuit: QuantumCircuit, controls: list[int]) -> None:
        if controls:
            circuit.mcp(self.theta, controls, self.target)
        else:
            circuit.p(self.theta, self.target)


@dataclass(frozen=True)
class Controlled(Operation):
    """Apply ``op`` only where ``controls`` read ``pattern``."""

    op: Operation
    controls: Bits
    pattern: Bits

    def apply(self, state: StateVector, controls: Bits = (), pattern: Bits = ()) -> None:
        self.op.apply(state, controls + self.controls, pattern + self.pattern)

    def adjoint(self) -> Controlled:
        return Controlled(self.op.adjoint(), self.controls, self.pattern)

    def append_to(self, circuit: QuantumCircuit, controls: Bits = (), pattern: Bits = ()) -> None:
        self.op.append_to(circuit, controls + self.controls, pattern + self.pattern)

    @property
    def num_gates(self) -> int:
        return self.op.num_gates


@dataclass(frozen=True)
class Composite(Operation):
    """Operations applied left to right."""

    ops: tuple[Operation, ...]

    def apply(self, state: StateVector, controls: Bits = (), pattern: Bits = ()) -> None:
        for op in self.ops:
            op.apply(state, controls, pattern)

    def adjoint(self) -> Composite:
        return Composite(tuple(op.adjoint() for op in reversed(self.ops)))

    def append_to(self, circuit: QuantumCircuit, controls: Bits = (), pattern: Bits = ()) -> None:
        for op in self.ops:
            op.append_to(circuit, controls, pattern)

    @property
    def num_gates(self) -> int:
        return sum(op.num_gates for op in self.ops)

    def __iter__(self):
        return iter(self.ops)

    def __len__(self) -> int:
        return len(self.ops)


def _flip_anti_controls(circuit: QuantumCircuit, controls: Bits, pattern: Bits) -> None:
    for qubit, bit in zip(controls, pattern):
        if bit == 0:
            circuit.x(qubit)


# ============================================================================
# Combinators
# ============================================================================

def compose(ops: Iterable[Operation]) -> Composite:
    """Compose operations, applied in iteration order."""
    return Composite(tuple(ops))


def invert(op: Operation) -> Operation:
    """Exact adjoint of ``op``. ``invert(invert(op)) == op``."""
    return op.adjoint()


def with_controls(
    op: Operation,
    controls: Sequence[int],
    pattern: Optional[Sequence[int]] = None,
) -> Operation:
    """Condition ``op`` on ``controls`` matching ``pattern``.

    Args:
        op: Operation to control
        controls: Control qubit indices
        pattern: Required bit per control (0 = anti-control). Defaults to all ones.

    Returns:
        The controlled operation (``op`` itself when there are no controls)
    """
    controls = tuple(controls)
    pattern = (1,) * len(controls) if pattern is None else tuple(int(b) for b in pattern)
    if len(pattern) != len(controls):
        raise ValueError(f"Control pattern has {len(pattern)} bits for {len(controls)} controls")
    if any(b not in (0, 1) for b in pattern):
        raise ValueError(f"Control pattern must contain only 0/1: {pattern}")
    if not controls:
        return op
    if isinstance(op, Controlled):
        return Controlled(op.op, controls + op.controls, pattern + op.pattern)
    return Controlled(op, controls, pattern)


def controlled_on_int(value: int, register: Sequence[int], op: Operation) -> Operation:
    """Apply ``op`` only when ``register`` holds ``value`` (big-endian).

    0-bits of ``value`` become anti-controls, 1-bits direct controls.
    """
    try:
        pattern = int_to_bits(value, len(register))
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
    return with_controls(op, register, pattern)


def apply_to_each(gate: Callable[[int], Operation], register: Sequence[int]) -> Composite:
    """One ``gate(qubit)`` per qubit, e.g. ``apply_to_each(H, key_register)``."""
    return compose(gate(qubit) for qubit in register)


def mcx(controls: Sequence[int], target: int) -> Operation:
    """Multi-controlled bit flip."""
    return with_controls(X(target), controls)


def mcphase(theta: float, controls: Sequence[int], target: int) -> Operation:
    """Multi-controlled phase rotation by ``theta``."""
    return with_controls(Phase(target, theta), controls)
