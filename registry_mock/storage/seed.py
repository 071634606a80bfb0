"""
Load fixture records from a JSON document.

Expected shape (every key optional):

    {
        "user": [{"name": "John Doe"}],
        "crate": [{"name": "rand", "category_ids": []}],
        "version": [{"crate_id": "rand", "num": "1.0.0"}],
        ...
    }

Kinds are created parents-first regardless of their order in the file,
so versions can reference crates declared in the same document.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from registry_mock.domain.errors import FixtureError
from registry_mock.storage.base import RecordStore
from registry_mock.storage.factories import KIND_ORDER

logger = logging.getLogger(__name__)


def load_seed_data(store: RecordStore, data: Dict[str, Any]) -> int:
    unknown = set(data) - set(KIND_ORDER)
    if unknown:
        raise FixtureError(f"Unknown record kinds in seed data: {sorted(unknown)}")

    created = 0
    for kind in KIND_ORDER:
        for attrs in data.get(kind) or []:
            store.create(kind, **attrs)
            created += 1
    return created


def load_seed_file(store: RecordStore, path: Path) -> int:
    """
    Populate `store` from a JSON seed file and return the number of
    records created.
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise FixtureError(f"Seed file {path} must contain a JSON object")

    created = load_seed_data(store, raw)
    logger.info(f"Loaded {created} records from seed file {path}")
    return created
