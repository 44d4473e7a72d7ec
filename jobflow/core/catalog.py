"""Catalog helpers: parse, tabulate and filter resource/dataset listings.

Catalogs arrive from the dashboard's API as lists of dicts. They are treated as
read-only input; nothing here performs matching or scheduling, it only narrows
what the wizard shows.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Sequence

import pandas as pd

from jobflow.config import DEFAULT_PRICE_PER_HOUR
from jobflow.core.contracts import DatasetRecord, ResourceRecord
from jobflow.core.cost import effective_price


# Display fallbacks for incomplete catalog records.
RESOURCE_DISPLAY_DEFAULTS = {
    "type": "CPU",
    "cpu": 4,
    "memory": 8,
    "provider": "Anonymous",
}
DATASET_DISPLAY_DEFAULTS = {
    "size": "10MB",
    "format": "CSV",
}

RESOURCE_COLUMNS = ["id", "name", "type", "cpu", "memory", "price_per_hour", "provider"]
DATASET_COLUMNS = ["id", "name", "description", "size", "format"]


def parse_resources(records: Iterable[dict[str, Any] | ResourceRecord]) -> list[ResourceRecord]:
    out: list[ResourceRecord] = []
    for r in records or []:
        out.append(r if isinstance(r, ResourceRecord) else ResourceRecord.from_dict(r))
    return out


def parse_datasets(records: Iterable[dict[str, Any] | DatasetRecord]) -> list[DatasetRecord]:
    out: list[DatasetRecord] = []
    for d in records or []:
        out.append(d if isinstance(d, DatasetRecord) else DatasetRecord.from_dict(d))
    return out


def resources_frame(
    resources: Sequence[ResourceRecord],
    *,
    default_price: float = DEFAULT_PRICE_PER_HOUR,
) -> pd.DataFrame:
    """Return resources as a DataFrame with display defaults filled in.

    ``price_per_hour`` holds the effective price used by the cost estimate.
    """
    rows = []
    for r in resources:
        row = r.to_dict()
        for k, v in RESOURCE_DISPLAY_DEFAULTS.items():
            if row.get(k) in (None, ""):
                row[k] = v
        row["price_per_hour"] = effective_price(r, default_price=default_price)
        rows.append(row)
    return pd.DataFrame(rows, columns=RESOURCE_COLUMNS)


def datasets_frame(datasets: Sequence[DatasetRecord]) -> pd.DataFrame:
    rows = []
    for d in datasets:
        row = d.to_dict()
        for k, v in DATASET_DISPLAY_DEFAULTS.items():
            if row.get(k) in (None, ""):
                row[k] = v
        rows.append(row)
    return pd.DataFrame(rows, columns=DATASET_COLUMNS)


def filter_resources(
    df: pd.DataFrame,
    *,
    resource_type: str | None = None,
    provider: str | None = None,
    max_price: float | None = None,
) -> pd.DataFrame:
    """Client-side narrowing of a resources frame. ``None`` disables a filter."""
    mask = pd.Series(True, index=df.index)
    if resource_type:
        mask &= df["type"].astype(str).str.upper() == str(resource_type).upper()
    if provider:
        mask &= df["provider"].astype(str) == str(provider)
    if max_price is not None:
        mask &= df["price_per_hour"].astype(float) <= float(max_price)
    return df.loc[mask].reset_index(drop=True)


def names_for(ids: Iterable[str], records: Sequence[ResourceRecord | DatasetRecord]) -> list[str]:
    """Map ids to display names, keeping the id when a record has no name or is missing."""
    by_id = {r.id: r for r in records}
    out = []
    for i in ids:
        rec = by_id.get(i)
        out.append(rec.name if rec is not None and rec.name else str(i))
    return out


def load_catalog_json(path: Path) -> list[dict[str, Any]]:
    """Load a catalog listing (JSON array of objects); a missing file is an empty catalog.

    The API envelope ``{"data": [...]}`` is accepted as well.
    """
    if not path.exists():
        return []
    data = json.loads(path.read_text(encoding="utf-8") or "null")
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of records")
    return [r for r in data if isinstance(r, dict)]
