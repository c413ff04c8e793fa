"""Configuration loading from YAML files."""

import json
from pathlib import Path
from typing import Any

import yaml

from domain.taxonomy.index import TaxonomyIndex
from domain.taxonomy.loader import parse_taxonomy_config
from infrastructure.config.models import RunConfig, ScoringConfig, StatsConfig
from infrastructure.constants import DATA_DIR, OUTPUT_ROOT, TAXONOMY_FILE


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML (or JSON, which YAML parses too) file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def load_taxonomy_config(path: Path) -> TaxonomyIndex:
    """
    Load taxonomy tree from a YAML or JSON file.

    This function handles file I/O, then delegates parsing to domain layer.
    """
    data = _load_yaml(path)
    return parse_taxonomy_config(data)


def load_scoring_config(data: dict[str, Any] | None) -> ScoringConfig:
    """
    Build ScoringConfig from the ``scoring`` block of experiment.yaml.

    Omitted keys keep their defaults; ``stats`` may sit at the top level of
    experiment.yaml (as in earlier configs) or inside ``scoring``.
    """
    if data is None:
        return ScoringConfig()
    if not isinstance(data, dict):
        raise ValueError(f"'scoring' must be a mapping, got {type(data)}")
    return ScoringConfig(**data)


def load_run_config(experiment_path: Path) -> RunConfig:
    """
    Load experiment.yaml and construct a fully-resolved RunConfig.

    Data file paths are resolved against ``data_dir`` unless absolute.

    Raises:
        FileNotFoundError: If experiment.yaml is missing
        ValueError: If required keys are missing or weights are inconsistent
    """
    exp = _load_yaml(experiment_path)

    for key in ("ground_truth_file", "evaluations_file"):
        if not exp.get(key):
            raise ValueError(f"experiment.yaml missing required key: {key}")

    data_dir = Path(exp.get("data_dir", str(DATA_DIR)))

    def _resolve(name: str | None) -> Path | None:
        if not name:
            return None
        p = Path(name)
        return p if p.is_absolute() else data_dir / p

    scoring_block = exp.get("scoring") or {}
    if not isinstance(scoring_block, dict):
        raise ValueError(f"'scoring' must be a mapping in {experiment_path}")
    scoring_block = dict(scoring_block)
    if "stats" in exp and "stats" not in scoring_block:
        scoring_block["stats"] = StatsConfig(**(exp.get("stats") or {}))
    scoring = load_scoring_config(scoring_block)

    cfg = RunConfig(
        taxonomy_file=Path(exp.get("taxonomy_file", str(TAXONOMY_FILE))),
        ground_truth_file=_resolve(exp["ground_truth_file"]),
        evaluations_file=_resolve(exp["evaluations_file"]),
        components_file=_resolve(exp.get("components_file")),
        scoring=scoring,
        tiering=bool(exp.get("tiering", True)),
        max_workers=exp.get("max_workers"),
        output_root=Path(exp.get("output_root", str(OUTPUT_ROOT))),
        data_dir=data_dir,
    )

    return cfg
