"""Database search experiment CLI.

Repeats the search, reports the empirical success rate against the
theoretical one, and cross-checks the circuit on Qiskit Aer.
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Optional

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import SearchConfig, load_config
from .core import SearchResult
from .errors import ConfigurationError, DatabaseSearchError
from .experiment_logging import SearchRunSetting, summarize_success, sweep_iterations
from .runner import run_search, validate_search
from .utils import (
    classical_success_probability,
    format_bits,
    optimal_iterations,
    queries_per_search,
    speedup_factor,
    success_probability,
)

app = typer.Typer(help="Quantum Database Search - Grover's Algorithm Experiment CLI")
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _parse_table(text: str) -> dict[int, int]:
    """Parse ``"3,2,0,1"`` into ``{0: 3, 1: 2, 2: 0, 3: 1}``."""
    try:
        return {key: int(value) for key, value in enumerate(text.split(","))}
    except ValueError:
        raise typer.BadParameter(f"Table must be comma-separated integers: {text!r}") from None


def _resolve_config(config_path: Optional[Path], **overrides) -> SearchConfig:
    config = load_config(config_path) if config_path is not None else SearchConfig()
    changes = {name: value for name, value in overrides.items() if value is not None}
    config = dataclasses.replace(config, **changes)
    if config.repeats < 1:
        raise ConfigurationError(f"repeats must be positive, got {config.repeats}")
    return config


@app.command()
def run(
    iterations: Optional[int] = typer.Option(None, "--iterations", "-i", help="Number of Grover iterates"),
    search_value: Optional[int] = typer.Option(None, "--search-value", "-v", help="Value to search for"),
    repeats: Optional[int] = typer.Option(None, "--repeats", "-r", help="Number of attempts"),
    key_qubits: Optional[int] = typer.Option(None, "--key-qubits", help="Key register size"),
    value_qubits: Optional[int] = typer.Option(None, "--value-qubits", help="Value register size"),
    table: Optional[str] = typer.Option(None, "--table", "-t", help="Values by key, e.g. 3,2,0,1"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Measurement RNG seed"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON configuration file"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
):
    """Repeat the search and print every attempt."""
    _configure_logging(verbose)

    try:
        config = _resolve_config(
            config_path,
            n_iterations=iterations,
            search_value=search_value,
            repeats=repeats,
            n_key_qubits=key_qubits,
            n_value_qubits=value_qubits,
            table=_parse_table(table) if table is not None else None,
            seed=seed,
        )
        database = validate_search(
            config.n_iterations, config.n_key_qubits, config.n_value_qubits,
            config.search_value, config.table, config.max_qubits,
        )
    except DatabaseSearchError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    database_size = 2 ** config.n_key_qubits
    console.print("[bold blue]Running Quantum Database Search[/bold blue]")
    console.print(
        f"Database size: {database_size}, Search value: {config.search_value}, "
        f"Iterations: {config.n_iterations}"
    )
    console.print(
        f"Classical success probability: {classical_success_probability(config.n_key_qubits):.3f}, "
        f"Quantum success probability: "
        f"{success_probability(config.n_iterations, config.n_key_qubits):.3f}, "
        f"Queries per search: {queries_per_search(config.n_iterations)}\n"
    )

    rng = np.random.default_rng(config.seed)
    success_count = 0
    try:
        for attempt in range(config.repeats):
            result = run_search(
                config.n_iterations, config.n_key_qubits, config.n_value_qubits,
                config.search_value, table=database, rng=rng, max_qubits=config.max_qubits,
            )
            success_count += int(result.success)
            _print_attempt(attempt, result, success_count, config)
    except DatabaseSearchError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    rate = success_count / config.repeats
    console.print(
        f"\n[bold]Empirical success rate:[/bold] {rate:.3f} "
        f"({success_count}/{config.repeats}), "
        f"expected key: {database.find_key(config.search_value)}"
    )


@app.command()
def demo(
    search_value: int = typer.Option(0, "--search-value", "-v", help="Value to search for"),
    repeats: int = typer.Option(100, "--repeats", "-r", help="Attempts per phase"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Measurement RNG seed"),
):
    """Classical random search versus one Grover iterate on the sample table."""
    console.print("[bold green]=== Quantum Database Search Demo (N=4) ===[/bold green]\n")

    try:
        df = sweep_iterations(
            search_value,
            settings=(
                SearchRunSetting(label="classical", n_iterations=0),
                SearchRunSetting(label="grover", n_iterations=1),
            ),
            repeats=repeats,
            seed=seed,
        )
    except DatabaseSearchError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    summary = summarize_success(df)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Phase")
    table.add_column("Iterations")
    table.add_column("Queries")
    table.add_column("Theory")
    table.add_column("Empirical")
    table.add_column("Speedup")

    for row in summary.itertuples(index=False):
        table.add_row(
            row.label,
            str(row.n_iterations),
            str(row.queries),
            f"{row.theoretical_probability:.3f}",
            f"{row.success_rate:.3f}",
            f"{row.speedup:.3f}",
        )

    console.print(table)
    inconsistent = int((df["success"] & ~df["consistent"]).sum())
    status = "[green]OK[/green]" if inconsistent == 0 else f"[red]{inconsistent} mismatches[/red]"
    console.print(f"Key/value consistency of successful runs: {status}")
    console.print(f"Optimal iterations for N=4: {optimal_iterations(2)}")


@app.command()
def aer(
    iterations: int = typer.Option(1, "--iterations", "-i", help="Number of Grover iterates"),
    search_value: int = typer.Option(0, "--search-value", "-v", help="Value to search for"),
    shots: int = typer.Option(1024, "--shots", "-s", min=1, help="Number of shots"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Aer sampler seed"),
):
    """Sample the exported search circuit on Qiskit Aer."""
    try:
        from .backends import SimulatorBackend
        from .grover.circuit import build_search_circuit, circuit_metrics
    except ImportError as e:
        console.print(f"[yellow]Aer run skipped:[/yellow] {e}")
        raise typer.Exit(code=1)

    try:
        database = validate_search(iterations, 2, 2, search_value)
    except DatabaseSearchError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    circuit = build_search_circuit(iterations, database, search_value)
    metrics = circuit_metrics(circuit)
    backend = SimulatorBackend(seed=seed)
    outcomes = backend.sample_outcomes(
        circuit, database.n_key_qubits, database.n_value_qubits, shots=shots
    )

    console.print(f"[bold cyan]{backend.name()}[/bold cyan]: depth={metrics['circuit_depth']}, "
                  f"gates={metrics['total_gates']}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Marked")
    table.add_column("Key")
    table.add_column("Value")
    table.add_column("Counts")
    for (marked, key, value), count in sorted(outcomes.items(), key=lambda x: x[1], reverse=True):
        table.add_row(str(marked), str(key), str(value), str(count))
    console.print(table)

    marked_shots = sum(count for (marked, _, _), count in outcomes.items() if marked == 1)
    console.print(
        f"Success rate: {marked_shots / shots:.3f} "
        f"(theory {success_probability(iterations, database.n_key_qubits):.3f})"
    )


def _print_attempt(attempt: int, result: SearchResult, success_count: int, config: SearchConfig):
    """Print one attempt with the running success rate and speedup."""
    probability = success_count / (attempt + 1)
    speedup = speedup_factor(probability, config.n_key_qubits, config.n_iterations)
    status = "[green]One[/green]" if result.success else "[red]Zero[/red]"
    console.print(
        f"Attempt {attempt}. Success: {status}, Probability: {probability:.3f} "
        f"Speedup: {speedup:.3f} Found database index {format_bits(result.key_bits)} "
        f"(key {result.key}, value {result.value})"
    )


if __name__ == "__main__":
    app()
