"""Run configuration for the database search.

Defaults reproduce the four-entry sample database. A configuration can also
be loaded from a JSON file::

    {
        "n_iterations": 1,
        "n_key_qubits": 2,
        "n_value_qubits": 2,
        "search_value": 2,
        "table": {"0": 3, "1": 2, "2": 0, "3": 1},
        "repeats": 100,
        "seed": 42
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Union

from .errors import ConfigurationError

# ============================================================================
# Constants
# ============================================================================
DEFAULT_TABLE: dict[int, int] = {0: 3, 1: 2, 2: 0, 3: 1}
DEFAULT_N_KEY_QUBITS = 2
DEFAULT_N_VALUE_QUBITS = 2
DEFAULT_SEARCH_VALUE = 0
DEFAULT_REPEATS = 10
DEFAULT_MAX_QUBITS = 24  # 2^24 complex128 amplitudes = 256 MiB
EPSILON = 1e-9


@dataclass(frozen=True)
class SearchConfig:
    """Parameters of a batch of database searches."""

    n_iterations: int = 0
    n_key_qubits: int = DEFAULT_N_KEY_QUBITS
    n_value_qubits: int = DEFAULT_N_VALUE_QUBITS
    search_value: int = DEFAULT_SEARCH_VALUE
    table: dict[int, int] = field(default_factory=lambda: dict(DEFAULT_TABLE))
    repeats: int = DEFAULT_REPEATS
    seed: Optional[int] = None
    max_qubits: int = DEFAULT_MAX_QUBITS

    @classmethod
    def from_dict(cls, data: dict) -> "SearchConfig":
        """Build a config from plain (e.g. JSON-decoded) data.

        Raises:
            ConfigurationError: On unknown keys or values of the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")

        values = dict(data)
        try:
            if "table" in values:
                values["table"] = {int(k): int(v) for k, v in values["table"].items()}
            for name in ("n_iterations", "n_key_qubits", "n_value_qubits",
                         "search_value", "repeats", "max_qubits"):
                if name in values:
                    values[name] = _as_int(values[name])
            if values.get("seed") is not None:
                values["seed"] = _as_int(values["seed"])
        except (AttributeError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Malformed configuration: {exc}") from exc

        config = cls(**values)
        if config.repeats < 1:
            raise ConfigurationError(f"repeats must be positive, got {config.repeats}")
        return config


def _as_int(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"expected an integer, got {value!r}")
    return int(value)


def load_config(path: Union[str, Path]) -> SearchConfig:
    """Load a :class:`SearchConfig` from a JSON file."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Configuration file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    return SearchConfig.from_dict(data)
