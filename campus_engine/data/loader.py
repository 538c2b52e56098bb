"""Read raw source files into plain record dicts.

Supports JSON, YAML and CSV.  Nothing here interprets the records; that is
the canonicalizer's job.  Semester-grouped calendars
(``{"Fall 2024": [...], ...}``) are flattened and each record gains a
``semester`` field.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd
import yaml

logger = logging.getLogger(__name__)

_JSON_SUFFIXES = {".json"}
_YAML_SUFFIXES = {".yaml", ".yml"}
_CSV_SUFFIXES = {".csv"}


def read_document(path: Path) -> Any:
    """Parse a JSON or YAML file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the extension is not supported or the content is invalid.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Source file does not exist: {path}")

    suffix = path.suffix.lower()
    with open(path, "r", encoding="utf-8") as f:
        if suffix in _JSON_SUFFIXES:
            try:
                return json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
        if suffix in _YAML_SUFFIXES:
            try:
                return yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    raise ValueError(f"Unsupported document type: {path.suffix}")


def _read_csv(path: Path) -> list[dict[str, Any]]:
    # Keep every cell as text; empty cells become "" rather than NaN
    df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")


def flatten_grouped(data: Any, group_field: str = "semester") -> list[dict[str, Any]]:
    """Turn ``{group: [records]}`` into a flat list tagged with *group_field*.

    A list is returned unchanged (copied); anything else yields an empty list.
    """
    if isinstance(data, list):
        return list(data)
    if not isinstance(data, dict):
        return []

    records: list[dict[str, Any]] = []
    for group, items in data.items():
        if not isinstance(items, list):
            logger.warning("Ignoring non-list group %r", group)
            continue
        for item in items:
            if isinstance(item, dict):
                records.append({group_field: group, **item})
            else:
                records.append(item)
    return records


def load_records(path: Path, key: str | None = None) -> list[Any]:
    """Load a list of raw records from a JSON, YAML or CSV file.

    Args:
        path: Source file.
        key: For documents whose top level is a mapping, the key holding the
            records.  Without a key, a top-level mapping is treated as a
            semester-grouped collection.

    Returns:
        The raw records, in file order.
    """
    path = Path(path)
    if path.suffix.lower() in _CSV_SUFFIXES:
        if not path.is_file():
            raise FileNotFoundError(f"Source file does not exist: {path}")
        records = _read_csv(path)
    else:
        data = read_document(path)
        if key is not None and isinstance(data, dict):
            data = data.get(key, [])
        records = flatten_grouped(data)

    logger.info("Read %d records from %s", len(records), path.name)
    return records
