"""Classical key/value table searched by the quantum oracle."""

from __future__ import annotations

from typing import Iterator, Mapping, Sequence, Union

import numpy as np

from .errors import ConfigurationError

TableLike = Union[Mapping[int, int], Sequence[int], "DatabaseTable"]


class DatabaseTable:
    """Injective map from keys ``[0, 2**n_key_qubits)`` to register values.

    Exactly one key maps to any value in the table's image, which is what
    the Grover success law relies on.

    Example:
        >>> table = DatabaseTable({0: 3, 1: 2, 2: 0, 3: 1}, 2, 2)
        >>> table.find_key(2)
        1
    """

    def __init__(self, entries: TableLike, n_key_qubits: int, n_value_qubits: int):
        if n_key_qubits < 1:
            raise ConfigurationError(f"n_key_qubits must be >= 1, got {n_key_qubits}")
        if n_value_qubits < 1:
            raise ConfigurationError(f"n_value_qubits must be >= 1, got {n_value_qubits}")
        if n_value_qubits < n_key_qubits:
            raise ConfigurationError(
                f"{2 ** n_key_qubits} keys cannot map injectively into "
                f"{2 ** n_value_qubits} values"
            )

        if isinstance(entries, DatabaseTable):
            mapping = dict(entries.items())
        elif isinstance(entries, Mapping):
            mapping = dict(entries)
        else:
            mapping = dict(enumerate(entries))

        for key, value in mapping.items():
            if not _is_int(key) or not _is_int(value):
                raise ConfigurationError(
                    f"Table entries must be integers, got {key!r}: {value!r}"
                )
        mapping = {int(key): int(value) for key, value in mapping.items()}

        # Length first so an oversized key space is never enumerated.
        size = 2 ** n_key_qubits
        if len(mapping) != size or any(not 0 <= key < size for key in mapping):
            raise ConfigurationError(
                f"Table keys must be exactly 0..{size - 1}, got {len(mapping)} keys"
            )
        for key, value in mapping.items():
            if not 0 <= value < 2 ** n_value_qubits:
                raise ConfigurationError(
                    f"Value {value} for key {key} does not fit in {n_value_qubits} qubits"
                )
        if len(set(mapping.values())) != size:
            raise ConfigurationError("Table is not a bijection: some keys share a value")

        self.n_key_qubits = n_key_qubits
        self.n_value_qubits = n_value_qubits
        self._entries = [mapping[key] for key in range(size)]
        self._inverse = {value: key for key, value in enumerate(self._entries)}

    def __getitem__(self, key: int) -> int:
        return self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[int]:
        return iter(range(len(self._entries)))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, int) and 0 <= key < len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DatabaseTable):
            return NotImplemented
        return (
            self._entries == other._entries
            and self.n_value_qubits == other.n_value_qubits
        )

    def items(self) -> Iterator[tuple[int, int]]:
        return iter(enumerate(self._entries))

    def values(self) -> list[int]:
        return list(self._entries)

    def find_key(self, value: int) -> int:
        """Return the unique key holding ``value``.

        Raises:
            KeyError: If no key maps to ``value``
        """
        return self._inverse[value]

    def __repr__(self) -> str:
        return f"DatabaseTable({dict(self.items())}, {self.n_key_qubits}, {self.n_value_qubits})"


def _is_int(value: object) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, np.integer))
