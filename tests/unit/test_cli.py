from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from typer.testing import CliRunner

from client_records.main import app
from client_records.reporter import print_results

runner = CliRunner()


def test_info_shows_effective_settings():
    result = runner.invoke(app, ["info"])

    assert result.exit_code == 0
    assert "ttl=300" in result.output
    assert "retries=3" in result.output


def test_search_reads_seed_file(tmp_path: Path):
    seed_file = tmp_path / "clients.json"
    seed_file.write_text(
        json.dumps(
            [
                {"id": "c1", "nombre": "Juan", "apellido": "Perez", "saldo": 10},
                {"id": "c2", "nombre": "Maria", "apellido": "Lopez", "saldo": 5},
            ]
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["search", "JUAN", "--seed-file", str(seed_file)])

    assert result.exit_code == 0
    assert "c1  Juan Perez" in result.output
    assert "c2" not in result.output
    assert "1 match(es); total balance of all clients: 15.00" in result.output


def test_bench_lists_scenarios():
    result = runner.invoke(app, ["bench", "--scenario", "list"])

    assert result.exit_code == 0
    assert "cached_list" in result.output


def test_print_results_renders_single_run_rows():
    console = Console(record=True, width=200)
    results = [
        {"scenario": "cold_list", "operations": 10, "clients": 5, "duration_seconds": 0.5,
         "ops_per_sec": 20.0, "cache": {"hit_rate": 0.0}},
        {"scenario": "cached_list", "operations": 10, "clients": 5, "duration_seconds": 0.1,
         "ops_per_sec": 100.0, "cache": {"hit_rate": 0.9}},
    ]

    print_results(results, console=console)

    text = console.export_text()
    assert text.index("cached_list") < text.index("cold_list")
    assert "90.0%" in text


def test_print_results_handles_empty_input():
    console = Console(record=True)

    print_results([], console=console)

    assert "No results" in console.export_text()
