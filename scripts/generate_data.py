"""
Synthetic client generation script.

Writes a deterministic JSON seed file that the CLI (`client-records search
--seed-file`) and the benchmark can load into an in-memory store.
"""

from __future__ import annotations

import sys
import time
from pathlib import Path

import typer

from client_records.seed import generate_clients, write_seed_file

app = typer.Typer(help="Generate synthetic client documents as a JSON seed file.")


def _generate_seed_file(path: Path, clients: int, seed: int) -> int:
    documents = generate_clients(clients, seed=seed)
    write_seed_file(path, documents)
    return len(documents)


@app.command()
def main(
    clients: int = typer.Option(
        1_000,
        "--clients",
        "-c",
        help="Number of clients to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("data/clients.json"),
        "--output",
        "-o",
        help="Seed file path.",
    ),
) -> None:
    """
    Generate synthetic clients and write them to a JSON seed file.
    """
    start = time.perf_counter()
    typer.echo(f"Generating {clients:,} clients -> {output} (seed={seed})")
    written = _generate_seed_file(output, clients=clients, seed=seed)
    duration = time.perf_counter() - start
    typer.echo(f"Wrote {written:,} clients in {duration:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
