"""
Benchmark for the record access layer: cache, derived streams and writes.

Each scenario runs against a fresh in-memory store seeded with synthetic
clients, is profiled with `profile_block`, and reports operations per second
plus the cache statistics of its service.

Usage (example from CLI):
    from client_records.benchmark import run_scenarios

    results = run_scenarios(scenario_names=["cold_list", "cached_list"], operations=200)

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/run-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import asyncio
import json
import statistics
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, TypedDict

from client_records.config import Settings, get_settings
from client_records.infrastructure.memory_store import InMemoryDocumentStore
from client_records.seed import generate_clients
from client_records.services.records import RecordAccessService
from client_records.streams.operators import first
from client_records.utils.logging import get_logger
from client_records.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

Scenario = Callable[[RecordAccessService, int], Awaitable[None]]


class ScenarioResult(TypedDict, total=False):
    """Per-run metrics; reporters tolerate missing values."""

    scenario: str
    operations: int
    clients: int
    duration_seconds: float
    ops_per_sec: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]
    cache: Dict[str, Any]
    store_calls: Dict[str, int]
    error: Optional[str]


async def _cold_list(service: RecordAccessService, operations: int) -> None:
    for _ in range(operations):
        service.cache.invalidate()
        await first(service.list())


async def _cached_list(service: RecordAccessService, operations: int) -> None:
    for _ in range(operations):
        await first(service.list())


async def _search(service: RecordAccessService, operations: int) -> None:
    terms = ["juan", "GARCIA", "example.com", "zz-no-match"]
    for index in range(operations):
        await first(service.search(terms[index % len(terms)]))


async def _total_balance(service: RecordAccessService, operations: int) -> None:
    for _ in range(operations):
        await first(service.total_balance())


async def _write_then_read(service: RecordAccessService, operations: int) -> None:
    records = await first(service.list())
    if not records:
        return
    for index in range(operations):
        record = records[index % len(records)]
        await service.modify(record.model_copy(update={"balance": float(index)}))
        await first(service.list())


def _scenario_factories() -> Dict[str, Scenario]:
    """Registry of available scenarios."""
    return {
        "cold_list": _cold_list,
        "cached_list": _cached_list,
        "search": _search,
        "total_balance": _total_balance,
        "write_then_read": _write_then_read,
    }


def available_scenarios() -> List[str]:
    """List available scenario names."""
    return sorted(_scenario_factories().keys())


def _resolve_scenario(name: str) -> Scenario:
    factories = _scenario_factories()
    if name not in factories:
        raise ValueError(f"Unknown scenario '{name}'. Available: {', '.join(factories)}")
    return factories[name]


def _round_float(value: float, decimals: int = 2) -> float:
    return round(value, decimals)


def _summary(values: List[float], decimals: int = 2) -> Dict[str, float]:
    return {
        "median": _round_float(statistics.median(values), decimals),
        "mean": _round_float(statistics.mean(values), decimals),
        "stddev": _round_float(statistics.stdev(values), decimals) if len(values) > 1 else 0.0,
        "min": _round_float(min(values), decimals),
        "max": _round_float(max(values), decimals),
    }


def _aggregate_runs(run_results: List[dict]) -> dict:
    """
    Aggregate multiple runs into a statistical summary (median, mean, stddev, min, max).
    """
    durations = [r["duration_seconds"] for r in run_results]
    rates = [r["ops_per_sec"] for r in run_results]
    hit_rates = [r["cache"]["hit_rate"] for r in run_results if r.get("cache")]
    cpu_percents = [r["cpu_percent"] for r in run_results if r.get("cpu_percent")]

    aggregated = {
        "duration_seconds": _summary(durations, decimals=4),
        "ops_per_sec": _summary(rates),
        "operations": run_results[0]["operations"],
        "clients": run_results[0].get("clients", 0),
    }
    if hit_rates:
        aggregated["cache_hit_rate"] = _summary(hit_rates, decimals=4)
    if cpu_percents:
        aggregated["cpu_percent"] = _summary(cpu_percents, decimals=1)
    return aggregated


def _persist_results(payload: dict, results_dir: Path) -> None:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"run-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Results persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})


async def _execute(
    scenario: Scenario, operations: int, clients: int, settings: Settings
) -> tuple[RecordAccessService, InMemoryDocumentStore]:
    store = InMemoryDocumentStore(latency_ms=settings.store_latency_ms)
    store.seed(settings.clients_collection, generate_clients(clients))
    service = RecordAccessService(store, settings)
    try:
        await scenario(service, operations)
    finally:
        service.close()
    return service, store


def _merge_result(
    name: str,
    operations: int,
    clients: int,
    stats: ProfileStats,
    service: Optional[RecordAccessService] = None,
    store: Optional[InMemoryDocumentStore] = None,
    error: Optional[str] = None,
) -> ScenarioResult:
    duration = stats.duration_seconds
    result = ScenarioResult(
        scenario=name,
        operations=operations if error is None else 0,
        clients=clients,
        duration_seconds=_round_float(duration, 4),
        ops_per_sec=_round_float(operations / duration) if duration and error is None else 0.0,
        peak_rss_bytes=stats.peak_rss_bytes,
        cpu_percent=_round_float(stats.cpu_percent, 1) if stats.cpu_percent else None,
    )
    if service is not None:
        result["cache"] = service.cache.stats.as_dict()
    if store is not None:
        result["store_calls"] = dict(store.calls)
    if error is not None:
        result["error"] = error
    return result


def _profiled_execute(
    name: str, operations: int, clients: int, settings: Settings
) -> ScenarioResult:
    scenario = _resolve_scenario(name)
    log.info(f"[SCENARIO START] {name}", extra={"scenario": name})
    service = store = None
    error = None
    with profile_block(name) as stats:
        try:
            service, store = asyncio.run(_execute(scenario, operations, clients, settings))
            log.info(f"[SCENARIO SUCCESS] {name}", extra={"scenario": name})
        except Exception as exc:  # noqa: BLE001 - intentional broad catch to record failures
            log.exception(f"[SCENARIO FAILED] {name}", extra={"scenario": name})
            error = str(exc) or type(exc).__name__
    return _merge_result(name, operations, clients, stats, service, store, error)


def run_scenarios(
    scenario_names: Optional[Iterable[str]] = None,
    operations: int = 100,
    clients: Optional[int] = None,
    runs: Optional[int] = None,
    results_dir: Path | str = "results",
    persist: bool = True,
    settings: Optional[Settings] = None,
) -> List[dict]:
    """
    Run one or more scenarios and optionally persist the results.

    Parameters
    ----------
    scenario_names : iterable[str] | None
        Scenario names to execute. If None or ["all"], executes all available.
    operations : int
        Operations performed by each run.
    clients : int | None
        Seeded collection size. Defaults to settings.benchmark_clients.
    runs : int | None
        Measurement runs per scenario. Defaults to settings.benchmark_runs.
    results_dir : Path | str
        Directory to store JSON artifacts.
    persist : bool
        Whether to write results to disk.

    Returns
    -------
    List[dict]
        One entry per scenario; aggregated (median/mean/stddev) when runs > 1.
    """
    settings = settings or get_settings()
    effective_clients = clients if clients is not None else settings.benchmark_clients
    effective_runs = runs or settings.benchmark_runs

    names = list(scenario_names) if scenario_names is not None else ["all"]
    if len(names) == 1 and names[0] == "all":
        names = available_scenarios()
    for name in names:
        _resolve_scenario(name)

    results: List[dict] = []
    for name in names:
        run_results: List[dict] = []
        for run_num in range(1, effective_runs + 1):
            log.info(
                f"[RUN {run_num}/{effective_runs}] {name}",
                extra={"scenario": name, "run": run_num, "operations": operations},
            )
            result = dict(_profiled_execute(name, operations, effective_clients, settings))
            result["run"] = run_num
            run_results.append(result)

        if effective_runs > 1:
            aggregated = _aggregate_runs(run_results)
            aggregated["scenario"] = name
            aggregated["runs"] = effective_runs
            aggregated["individual_runs"] = run_results
            results.append(aggregated)
        else:
            results.extend(run_results)

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "operations": operations,
        "clients": effective_clients,
        "scenarios": names,
        "results": results,
    }

    if persist:
        _persist_results(payload, Path(results_dir))

    return results


__all__ = [
    "ScenarioResult",
    "available_scenarios",
    "run_scenarios",
]
