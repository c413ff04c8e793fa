"""Summary logging for a finished accuracy report."""

import logging
from pathlib import Path

from domain.schemas import AccuracyReport, ConfidenceInterval, ScoreSummary

logger = logging.getLogger(__name__)


def _fmt(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.4f}"


def _fmt_ci(ci: ConfidenceInterval | None) -> str:
    if ci is None:
        return ""
    return f" (95% CI [{ci.lower:.4f}, {ci.upper:.4f}], n={ci.n})"


def _log_summary_line(label: str, summary: ScoreSummary) -> None:
    logger.info(
        "%s: accuracy=%s (n=%d) quality=%s (n=%d) gap=%s",
        label,
        _fmt(summary.accuracy),
        summary.accuracy_count,
        _fmt(summary.quality),
        summary.quality_count,
        _fmt(summary.gap),
    )


def log_report_summary(
    report: AccuracyReport,
    report_path: Path,
    table_path: Path | None = None,
) -> None:
    """
    Log a concise, human-readable report summary.

    Args:
        report: Built AccuracyReport
        report_path: Path to the report JSON file
        table_path: Path to the tier/component CSV (optional)
    """
    logger.info("=== Accuracy Summary ===")
    aggregate = report.aggregate

    logger.info("Papers: %d (status counts: %s)", len(report.papers), report.status_counts)
    _log_summary_line("Overall", aggregate.overall.overall)
    for key, summary in aggregate.overall.components.items():
        logger.info(
            "  %s: accuracy=%s%s quality=%s%s",
            key,
            _fmt(summary.accuracy),
            _fmt_ci(aggregate.accuracy_ci.get(key)),
            _fmt(summary.quality),
            _fmt_ci(aggregate.quality_ci.get(key)),
        )

    for tier, tier_summary in aggregate.tiers.items():
        if tier_summary.paper_count == 0:
            logger.info("Tier %s: no papers", tier.value)
            continue
        _log_summary_line(f"Tier {tier.value} ({tier_summary.paper_count} papers)", tier_summary.overall)

    if aggregate.untiered_papers:
        logger.info("Papers without evaluators (overall only): %d", len(aggregate.untiered_papers))

    evaluators = report.evaluator_summary
    logger.info(
        "Evaluators: %d, mean weight=%s (std=%s), ORKG-experienced=%d",
        evaluators.total,
        _fmt(evaluators.mean_weight),
        _fmt(evaluators.std_weight),
        evaluators.orkg_experienced,
    )
    logger.debug("Evaluators by tier: %s", evaluators.by_tier)

    if report.cohorts is not None:
        logger.info(
            "ORKG cohort difference: accuracy=%s quality=%s",
            _fmt(report.cohorts.accuracy_difference),
            _fmt(report.cohorts.quality_difference),
        )

    for key, cm in report.confusion.items():
        logger.info(
            "%s: precision=%.4f recall=%.4f f1=%.4f accuracy=%.4f",
            key,
            cm.precision,
            cm.recall,
            cm.f1,
            cm.accuracy,
        )

    logger.info("Report: %s", report_path)
    if table_path is not None:
        logger.info("Tier/component table: %s", table_path)
