"""
CLI entrypoint for the ORKG evaluation accuracy report.

This script performs the following steps:
- loads .env (if present) and configs/experiment.yaml
- creates a per-run output folder under outputs/
- loads the research-field taxonomy, ground truth, evaluations and optional component scores
- compares system output against ground truth and weights evaluators by expertise
- aggregates scores per expertise tier and saves the report, config snapshot and tier table
- logs a human-readable summary of results
"""

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path

import opik
from dotenv import load_dotenv
from opik import opik_context, track

from application import (
    AccuracyReportBuilder,
    log_report_summary,
    parse_component_records,
    parse_evaluations,
    parse_ground_truth,
)
from application.constants import (
    CONFIG_SNAPSHOT_FILENAME,
    DATA_FINGERPRINT_FILENAME,
    LOG_FILENAME,
    REPORT_FILENAME,
    SUMMARY_FILENAME,
    TIER_TABLE_FILENAME,
)
from domain.evaluation import compute_tier_component_table_and_save
from infrastructure.config import load_run_config, load_taxonomy_config
from infrastructure.constants import EXPERIMENT_FILE
from infrastructure.io import ensure_exists, read_component_scores, read_records, write_json
from infrastructure.observability import configure_logging, make_run_tag, set_log_context

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Build the ORKG evaluation accuracy report")
    p.add_argument(
        "--experiment",
        type=str,
        default=str(EXPERIMENT_FILE),
        help="Path to experiment.yaml (default: configs/experiment.yaml)",
    )
    p.add_argument(
        "--env",
        type=str,
        default=".env",
        help="Path to .env file, loaded when present (default: .env)",
    )
    p.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for per-paper scoring (overrides max_workers in experiment.yaml)",
    )
    p.add_argument(
        "--no-tiering",
        action="store_true",
        help="Skip expertise-tier bucketing; only the overall summary is computed.",
    )
    p.add_argument(
        "--track",
        action="store_true",
        help="Configure Opik and send traces for this run.",
    )
    p.add_argument(
        "--console-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level",
    )
    p.add_argument(
        "--file-level",
        type=str,
        default="DEBUG",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="File log level",
    )
    return p.parse_args()


@track(
    name="Accuracy.report.run",
    type="general",
    metadata={"task": "accuracy_report"},
    capture_input=False,
    capture_output=False,
    flush=True,
)
def main() -> None:
    args = _parse_args()

    env_file = Path(args.env)
    if env_file.exists():
        load_dotenv(env_file, override=True)

    experiment_path = Path(args.experiment)
    ensure_exists(experiment_path, "experiment.yaml")

    cfg = load_run_config(experiment_path)
    max_workers = args.workers if args.workers is not None else cfg.max_workers
    tiering = cfg.tiering and not args.no_tiering

    if args.track:
        opik.configure()

    # ---- Per-run output folder ----
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_id = f"{ts}_accuracy_tiers{int(tiering)}_w{max_workers or 1}"

    run_dir = cfg.output_root / run_id
    run_dir.mkdir(parents=True, exist_ok=True)

    log_path = run_dir / LOG_FILENAME
    configure_logging(
        log_file=log_path,
        console_level=getattr(logging, args.console_level),
        file_level=getattr(logging, args.file_level),
    )
    set_log_context(run_id_full=run_id)

    logger.info("Starting run: run_id=%s (run_tag=%s)", run_id, make_run_tag(run_id))
    logger.info("Run output directory: %s", run_dir)

    # Load inputs
    logger.info("Loading taxonomy from %s...", cfg.taxonomy_file)
    index = load_taxonomy_config(cfg.taxonomy_file)
    logger.info("Taxonomy loaded: %d nodes, max depth %d", len(index), index.max_depth)

    logger.info("Loading ground truth from %s...", cfg.ground_truth_file)
    ground_truth = parse_ground_truth(read_records(cfg.ground_truth_file, key_field="paper_id"))
    logger.info("Loading evaluations from %s...", cfg.evaluations_file)
    evaluations = parse_evaluations(read_records(cfg.evaluations_file))
    logger.info("Loaded %d ground-truth record(s), %d evaluation(s)", len(ground_truth), len(evaluations))

    component_records = None
    if cfg.components_file is not None:
        logger.info("Loading component scores from %s...", cfg.components_file)
        component_records = parse_component_records(read_component_scores(cfg.components_file))
        logger.info("Component scores loaded for %d paper(s)", len(component_records))

    # Save snapshot config + data fingerprint
    write_json(run_dir / CONFIG_SNAPSHOT_FILENAME, cfg.model_dump(mode="json"))
    write_json(
        run_dir / DATA_FINGERPRINT_FILENAME,
        {
            "taxonomy_file": str(cfg.taxonomy_file),
            "ground_truth_file": str(cfg.ground_truth_file),
            "evaluations_file": str(cfg.evaluations_file),
            "components_file": str(cfg.components_file) if cfg.components_file else None,
            "taxonomy_nodes": len(index),
            "ground_truth_rows": len(ground_truth),
            "evaluation_rows": len(evaluations),
            "component_papers": len(component_records) if component_records is not None else None,
        },
    )

    opik_context.update_current_span(
        metadata={
            "run_id": run_id,
            "tiering": tiering,
            "max_workers": max_workers,
            "papers": len(evaluations),
        },
    )

    # Build report
    builder = AccuracyReportBuilder(index, cfg.scoring)
    report = builder.build(
        evaluations,
        ground_truth,
        component_records,
        max_workers=max_workers,
        tiering=tiering,
    )

    report_path = write_json(run_dir / REPORT_FILENAME, report.model_dump(mode="json"))
    logger.info("Saved report to %s", report_path)

    summary_path = run_dir / SUMMARY_FILENAME
    with summary_path.open("w", encoding="utf-8") as f:
        json.dump(
            {
                "run_id": run_id,
                "overall": report.aggregate.overall.model_dump(mode="json"),
                "tiers": {tier.value: t.overall.model_dump(mode="json") for tier, t in report.aggregate.tiers.items()},
                "status_counts": report.status_counts,
                "evaluators": report.evaluator_summary.model_dump(mode="json"),
            },
            f,
            ensure_ascii=False,
            indent=2,
        )

    table_path = compute_tier_component_table_and_save(report.aggregate, run_dir, TIER_TABLE_FILENAME)

    # Human-readable summary
    log_report_summary(report=report, report_path=report_path, table_path=table_path)

    logger.info("Detailed log: %s", log_path)


if __name__ == "__main__":
    main()
