"""Experiment utilities for collecting database search runs into pandas DataFrames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .config import DEFAULT_MAX_QUBITS, DEFAULT_N_KEY_QUBITS, DEFAULT_N_VALUE_QUBITS
from .database import TableLike
from .errors import ConfigurationError
from .runner import run_search, validate_search
from .utils import (
    classical_success_probability,
    queries_per_search,
    speedup_factor,
    success_probability,
)


@dataclass(frozen=True)
class SearchRunSetting:
    """One sweep condition: a label and an amplification depth."""

    label: str
    n_iterations: int = 0


def sweep_iterations(
    search_value: int,
    settings: Optional[Sequence[SearchRunSetting]] = None,
    repeats: int = 10,
    n_key_qubits: int = DEFAULT_N_KEY_QUBITS,
    n_value_qubits: int = DEFAULT_N_VALUE_QUBITS,
    table: Optional[TableLike] = None,
    seed: Optional[int] = None,
    max_qubits: int = DEFAULT_MAX_QUBITS,
) -> pd.DataFrame:
    """Run the search repeatedly and collect one row per attempt.

    Each attempt allocates a fresh state vector; only the random stream is
    shared, seeded once from ``seed``.

    Parameters
    ----------
    search_value : int
        Value searched for in the table.
    settings : Sequence[SearchRunSetting]
        Conditions to sweep. Defaults to classical (0 iterates) and
        grover (1 iterate).
    repeats : int
        Attempts per setting.
    n_key_qubits, n_value_qubits : int
        Register sizes.
    table : mapping or sequence, optional
        Key -> value bijection. Defaults to the four-entry sample table.
    seed : int, optional
        Seed of the measurement random stream.
    max_qubits : int
        Feasibility bound passed to ``run_search``.
    """
    if settings is None:
        settings = (
            SearchRunSetting(label="classical", n_iterations=0),
            SearchRunSetting(label="grover", n_iterations=1),
        )

    if repeats < 1:
        raise ConfigurationError(f"repeats must be positive, got {repeats}")

    # Fail before the first attempt rather than halfway through the sweep.
    database = validate_search(0, n_key_qubits, n_value_qubits, search_value, table, max_qubits)
    for setting in settings:
        if setting.n_iterations < 0:
            raise ConfigurationError(
                f"Setting {setting.label!r} has negative n_iterations {setting.n_iterations}"
            )

    rng = np.random.default_rng(seed)
    records: list[dict] = []

    for setting in settings:
        theoretical = success_probability(setting.n_iterations, n_key_qubits)
        for repeat in range(repeats):
            result = run_search(
                setting.n_iterations,
                n_key_qubits,
                n_value_qubits,
                search_value,
                table=database,
                rng=rng,
                max_qubits=max_qubits,
            )
            records.append(
                {
                    "label": setting.label,
                    "n_iterations": setting.n_iterations,
                    "repeat": repeat,
                    "marked": result.marked_result,
                    "key": result.key,
                    "value": result.value,
                    "success": result.success,
                    "consistent": database[result.key] == result.value,
                    "theoretical_probability": theoretical,
                    "queries": queries_per_search(setting.n_iterations),
                }
            )

    return pd.DataFrame.from_records(records)


def summarize_success(df: pd.DataFrame, n_key_qubits: int = DEFAULT_N_KEY_QUBITS) -> pd.DataFrame:
    """Aggregate the empirical success rate per label/iteration pair."""

    if df.empty:
        return df

    summary = df.groupby(["label", "n_iterations"], as_index=False).agg(
        success_rate=("success", "mean"),
        attempts=("success", "size"),
        theoretical_probability=("theoretical_probability", "first"),
        queries=("queries", "first"),
    )
    summary["classical_probability"] = classical_success_probability(n_key_qubits)
    summary["speedup"] = [
        speedup_factor(rate, n_key_qubits, n)
        for rate, n in zip(summary["success_rate"], summary["n_iterations"])
    ]
    return summary
