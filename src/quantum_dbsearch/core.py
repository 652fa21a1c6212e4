"""Result type of one database search run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .utils import bits_to_int, format_bits


@dataclass(frozen=True)
class SearchResult:
    """Classical bits read out at the end of one run.

    Unpacks like the ``(marked, key_bits, value_bits)`` tuple::

        marked, key_bits, value_bits = run_search(...)
    """
    marked_result: int
    key_bits: tuple[int, ...]
    value_bits: tuple[int, ...]
    n_iterations: int = 0

    @property
    def key(self) -> int:
        return bits_to_int(self.key_bits)

    @property
    def value(self) -> int:
        return bits_to_int(self.value_bits)

    @property
    def success(self) -> bool:
        """True when the marked flag was measured as one."""
        return self.marked_result == 1

    def __iter__(self) -> Iterator:
        return iter((self.marked_result, self.key_bits, self.value_bits))

    def __str__(self) -> str:
        return (
            f"marked={self.marked_result} key={format_bits(self.key_bits)} ({self.key}) "
            f"value={format_bits(self.value_bits)} ({self.value})"
        )
