from __future__ import annotations

from typing import Any, Dict, List

from rich import box
from rich.console import Console
from rich.table import Table


def _is_aggregated(results: List[Dict[str, Any]]) -> bool:
    first = results[0]
    return "runs" in first and isinstance(first["runs"], int) and first["runs"] > 1


def print_results(results: List[Dict[str, Any]], console: Console | None = None) -> None:
    """
    Render benchmark results as a rich table, fastest scenario first.

    Handles both single-run results and aggregated multi-run results.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    aggregated = _is_aggregated(results)

    table = Table(
        title="Client Record Access Benchmark",
        box=box.ROUNDED,
        caption="Sorted by operations/s (descending)",
    )
    table.add_column("Scenario", style="cyan", no_wrap=True)
    table.add_column("Ops", justify="right", style="magenta")
    table.add_column("Clients", justify="right", style="magenta")

    if aggregated:
        table.add_column("Runs", justify="right", style="blue")
        table.add_column("Duration (s)\n[dim](Median ± StdDev)[/dim]", justify="right", style="green")
        table.add_column("Ops/s\n[dim](Median)[/dim]", justify="right", style="bold green")
        table.add_column("Cache hit rate\n[dim](Median)[/dim]", justify="right", style="yellow")
    else:
        table.add_column("Duration (s)", justify="right", style="green")
        table.add_column("Ops/s", justify="right", style="bold green")
        table.add_column("Cache hit rate", justify="right", style="yellow")
        table.add_column("Error", style="red")

    def get_sort_key(r: Dict[str, Any]) -> float:
        if aggregated:
            return r["ops_per_sec"]["median"]
        return r.get("ops_per_sec", 0.0)

    for res in sorted(results, key=get_sort_key, reverse=True):
        scenario = res.get("scenario", "Unknown")
        operations = f"{res.get('operations', 0):,}"
        clients = f"{res.get('clients', 0):,}"

        if aggregated:
            duration = res["duration_seconds"]
            hit_rate = res.get("cache_hit_rate")
            table.add_row(
                scenario,
                operations,
                clients,
                str(res["runs"]),
                f"{duration['median']:.4f} ± {duration['stddev']:.4f}",
                f"{res['ops_per_sec']['median']:,.2f}",
                f"{hit_rate['median']:.1%}" if hit_rate else "N/A",
            )
        else:
            cache = res.get("cache") or {}
            table.add_row(
                scenario,
                operations,
                clients,
                f"{res.get('duration_seconds', 0.0):.4f}",
                f"{res.get('ops_per_sec', 0.0):,.2f}",
                f"{cache['hit_rate']:.1%}" if cache else "N/A",
                res.get("error") or "",
            )

    console.print(table)


__all__ = ["print_results"]
