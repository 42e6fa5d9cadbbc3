"""
Deterministic synthetic clients for the benchmark, the CLI and tests.
"""

from __future__ import annotations

import json
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

_NAMES = ["Juan", "Maria", "Lucia", "Pedro", "Ana", "Carlos", "Sofia", "Diego", "Elena", "Pablo"]
_SURNAMES = ["Garcia", "Lopez", "Martinez", "Sanchez", "Perez", "Gomez", "Ruiz", "Diaz", "Moreno"]
_DOMAINS = ["example.com", "correo.es", "mail.test"]


def generate_clients(count: int, seed: int = 42) -> List[Dict[str, Any]]:
    """
    Build ``count`` client documents (store field names) with a seeded RNG.
    """
    rng = random.Random(seed)
    created = datetime.now(timezone.utc).isoformat()
    clients: List[Dict[str, Any]] = []
    for index in range(count):
        name = rng.choice(_NAMES)
        surname = rng.choice(_SURNAMES)
        clients.append(
            {
                "id": f"client-{index:06d}",
                "nombre": name,
                "apellido": surname,
                "email": f"{name}.{surname}{index}@{rng.choice(_DOMAINS)}".lower(),
                "saldo": round(rng.uniform(0, 10_000), 2),
                "fechaCreacion": created,
            }
        )
    return clients


def write_seed_file(path: Path, clients: List[Dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(clients, f, indent=2, ensure_ascii=False)


def load_seed_file(path: Path) -> List[Dict[str, Any]]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Seed file {path} must contain a JSON list of client documents")
    return data


__all__ = ["generate_clients", "load_seed_file", "write_seed_file"]
