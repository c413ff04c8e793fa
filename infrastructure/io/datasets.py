"""Dataset loading utilities."""

import json
from pathlib import Path
from typing import Any

import pandas as pd
import yaml

_RECORD_LIST_KEYS = ("papers", "records", "evaluations", "data")


def read_table(path: Path) -> pd.DataFrame:
    """
    Read tabular data file (Excel or CSV) based on file extension.

    Supported formats:
    - Excel: .xlsx, .xls
    - CSV: .csv

    Raises:
        ValueError: If file format is not supported
        FileNotFoundError: If file does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in [".xlsx", ".xls"]:
        return pd.read_excel(path, dtype=str)
    elif suffix == ".csv":
        return pd.read_csv(path, dtype=str)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Supported formats: .xlsx, .xls, .csv")


def read_document(path: Path) -> Any:
    """Parse a JSON or YAML document."""
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as f:
        if suffix == ".json":
            return json.load(f)
        if suffix in [".yaml", ".yml"]:
            return yaml.safe_load(f)
    raise ValueError(f"Unsupported document format: {suffix}. Supported formats: .json, .yaml, .yml")


def read_records(path: Path, key_field: str = "token") -> list[dict[str, Any]]:
    """
    Read a list of flat or nested records from JSON, YAML, CSV or Excel.

    Accepted document shapes:
    - a list of records
    - a mapping holding that list under ``papers``, ``records``, ``evaluations`` or ``data``
    - a mapping of key -> record; the key is copied into ``key_field`` when missing

    Tabular files yield one record per row with empty cells dropped.

    Raises:
        ValueError: If the document is neither a list nor a mapping of records
    """
    if path.suffix.lower() in [".csv", ".xlsx", ".xls"]:
        df = read_table(path)
        return [{k: v for k, v in row.items() if pd.notna(v) and v != ""} for row in df.to_dict(orient="records")]

    data = read_document(path)
    if isinstance(data, dict):
        for key in _RECORD_LIST_KEYS:
            if isinstance(data.get(key), list):
                data = data[key]
                break

    if isinstance(data, list):
        if not all(isinstance(item, dict) for item in data):
            raise ValueError(f"Expected a list of mappings in {path}")
        return data

    if isinstance(data, dict):
        records = []
        for key, value in data.items():
            if not isinstance(value, dict):
                raise ValueError(f"Expected mapping values in {path}, got {type(value).__name__} for {key!r}")
            records.append({key_field: str(key), **value} if key_field not in value else value)
        return records

    raise ValueError(f"Expected a list or mapping of records in {path}, got {type(data).__name__}")


def read_component_scores(path: Path) -> dict[str, dict[str, Any]]:
    """
    Read pre-averaged component scores: ``{paper token: {component key: {...}}}``.

    A top-level ``papers`` mapping (as exported by the aggregation service) is unwrapped.
    """
    data = read_document(path)
    if isinstance(data, dict) and isinstance(data.get("papers"), dict):
        data = data["papers"]
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping of paper token -> components in {path}, got {type(data).__name__}")
    return {str(k): v for k, v in data.items() if isinstance(v, dict)}
