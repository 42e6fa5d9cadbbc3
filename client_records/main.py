from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import typer

from client_records.benchmark import available_scenarios, run_scenarios
from client_records.config import get_settings
from client_records.domain.models import Record
from client_records.infrastructure.memory_store import InMemoryDocumentStore
from client_records.reporter import print_results
from client_records.seed import generate_clients, load_seed_file
from client_records.services.records import RecordAccessService
from client_records.streams.operators import first
from client_records.utils.logging import configure_logging

app = typer.Typer(help="Client record access layer CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"collection={settings.clients_collection} order_by={settings.clients_order_by} | "
        f"ttl={settings.cache_ttl_seconds}s retries={settings.retry_max_attempts} "
        f"base_delay={settings.retry_base_delay_seconds}s | "
        f"config={settings.configuration_collection}/{settings.configuration_document}"
    )


@app.command()
def bench(
    scenario: str = typer.Option(
        "all",
        "--scenario",
        "-s",
        help="Scenario to run (cold_list, cached_list, search, total_balance, write_then_read, all, list).",
    ),
    operations: int = typer.Option(100, "--operations", "-n", help="Operations per run."),
    clients: Optional[int] = typer.Option(
        None, "--clients", "-c", help="Seeded clients (default from settings)."
    ),
    runs: Optional[int] = typer.Option(
        None, "--runs", "-r", help="Measurement runs per scenario (default from settings)."
    ),
    persist: bool = typer.Option(True, "--persist/--no-persist", help="Write results/ JSON."),
) -> None:
    """
    Run one or all benchmark scenarios and print the results.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    if scenario == "list":
        typer.echo("Available scenarios: " + ", ".join(available_scenarios()))
        return

    names = ["all"] if scenario == "all" else [scenario]
    results = run_scenarios(
        scenario_names=names,
        operations=operations,
        clients=clients,
        runs=runs,
        persist=persist,
    )
    print_results(results)
    typer.echo(json.dumps(results, indent=2))


async def _search(term: str, documents: List[dict]) -> tuple[List[Record], float]:
    settings = get_settings()
    store = InMemoryDocumentStore()
    store.seed(settings.clients_collection, documents)
    service = RecordAccessService(store, settings)
    try:
        matches = await first(service.search(term))
        total = await first(service.total_balance())
    finally:
        service.close()
    return matches, total


@app.command()
def search(
    term: str = typer.Argument("", help="Case-insensitive text matched against name, surname and email."),
    seed_file: Optional[Path] = typer.Option(
        None, "--seed-file", "-f", help="JSON list of client documents (default: synthetic clients)."
    ),
) -> None:
    """
    Search a seeded in-memory collection and print matches with the total balance.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    documents = load_seed_file(seed_file) if seed_file else generate_clients(20)
    matches, total = asyncio.run(_search(term, documents))
    for record in matches:
        typer.echo(f"{record.id}  {record.name} {record.surname}  <{record.email}>  {record.balance}")
    typer.echo(f"{len(matches)} match(es); total balance of all clients: {total:,.2f}")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
