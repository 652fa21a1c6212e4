#!/usr/bin/env python3
"""Generate empirical vs theoretical success probability figure.

Usage:
    python scripts/generate_figure.py
    python scripts/generate_figure.py --key-qubits 3 --repeats 500
"""

import argparse
import os
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from quantum_dbsearch import SearchRunSetting, summarize_success, sweep_iterations
from quantum_dbsearch.utils import optimal_iterations, success_probability


def main():
    parser = argparse.ArgumentParser(description="Plot Grover success probability vs iterations")
    parser.add_argument("--key-qubits", type=int, default=2)
    parser.add_argument("--max-iterations", type=int, default=4)
    parser.add_argument("--repeats", type=int, default=200)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output", default="docs/figures/success_vs_iterations.pdf")
    args = parser.parse_args()

    n_keys = 2 ** args.key_qubits
    # Identity-reversed table: key k holds value N-1-k
    table = {k: n_keys - 1 - k for k in range(n_keys)}
    search_value = 0

    settings = [SearchRunSetting(label=f"n={n}", n_iterations=n)
                for n in range(args.max_iterations + 1)]
    df = sweep_iterations(
        search_value,
        settings=settings,
        repeats=args.repeats,
        n_key_qubits=args.key_qubits,
        n_value_qubits=args.key_qubits,
        table=table,
        seed=args.seed,
    )
    summary = summarize_success(df, n_key_qubits=args.key_qubits).sort_values("n_iterations")

    x = summary["n_iterations"].to_numpy()
    y = summary["success_rate"].to_numpy() * 100
    # Binomial standard error
    yerr = np.sqrt(summary["success_rate"] * (1 - summary["success_rate"]) / args.repeats).to_numpy() * 100

    fine = np.linspace(0, args.max_iterations, 200)
    theory = [success_probability(n, args.key_qubits) * 100 for n in fine]

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(fine, theory, color='gray', linestyle='--', alpha=0.7, label='Theory $\\sin^2((2n+1)\\theta)$')
    ax.errorbar(x, y, yerr=yerr, fmt='o', markersize=8, capsize=5,
                color='#2ecc71', label=f'Simulated ({args.repeats} runs)', linewidth=2)
    ax.axhline(y=100 / n_keys, color='#e74c3c', linestyle=':', alpha=0.7,
               label=f'Classical baseline (1/{n_keys})')
    ax.axvline(x=optimal_iterations(args.key_qubits), color='gray', alpha=0.3)

    ax.set_xlabel('Grover iterations $n$', fontsize=12)
    ax.set_ylabel('Success probability [%]', fontsize=12)
    ax.set_title(f'Database Search Success vs Iterations\n($N={n_keys}$, exact state vector)', fontsize=12)
    ax.set_xlim(-0.2, args.max_iterations + 0.2)
    ax.set_ylim(0, 105)
    ax.grid(True, alpha=0.3)
    ax.legend(loc='upper right', fontsize=9)

    plt.tight_layout()

    os.makedirs(os.path.dirname(args.output) or '.', exist_ok=True)
    plt.savefig(args.output, dpi=300, bbox_inches='tight')
    plt.savefig(args.output.replace('.pdf', '.png'), dpi=300, bbox_inches='tight')
    print(f"Saved: {args.output}")
    print(f"Saved: {args.output.replace('.pdf', '.png')}")


if __name__ == "__main__":
    main()
