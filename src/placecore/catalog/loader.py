"""
Place catalog loader.

The catalog is a local JSON file (default: `data/catalogs/places.json`) holding a
list of raw place records as the upstream data layer delivers them. Each record
goes through `placecore.catalog.mapping.place_from_record` so callers only ever
see typed `Place` models.
"""

from __future__ import annotations

import json
from pathlib import Path

from placecore.catalog.mapping import place_from_record
from placecore.core.env import resolve_project_path
from placecore.domain.models import Place


def load_places(path: str | Path) -> list[Place]:
    """Load and map a place catalog JSON file.

    Raises `ValueError` when the root is not a list or a record cannot be mapped.
    """
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"Invalid catalog root in {resolved}; expected a list of places.")

    places: list[Place] = []
    for i, record in enumerate(payload):
        if not isinstance(record, dict):
            raise ValueError(f"Catalog record #{i} is not an object")
        try:
            places.append(place_from_record(record))
        except ValueError as e:
            raise ValueError(f"Catalog record #{i}: {e}") from e
    return places


def find_place(places: list[Place], place_id: str) -> Place | None:
    for p in places:
        if p.id == place_id:
            return p
    return None
