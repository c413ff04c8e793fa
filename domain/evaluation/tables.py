"""Tier x component score table generation."""

from pathlib import Path

import pandas as pd

from domain.schemas import AggregateReport, GroupSummary

TABLE_COLUMNS = [
    "Tier",
    "Component",
    "Accuracy",
    "Quality",
    "Gap (quality - accuracy)",
    "Accuracy (n)",
    "Quality (n)",
]

OVERALL_LABEL = "overall"


def _group_rows(tier_label: str, group: GroupSummary) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for component, summary in list(group.components.items()) + [(OVERALL_LABEL, group.overall)]:
        rows.append(
            {
                "Tier": tier_label,
                "Component": component,
                "Accuracy": summary.accuracy,
                "Quality": summary.quality,
                "Gap (quality - accuracy)": summary.gap,
                "Accuracy (n)": summary.accuracy_count,
                "Quality (n)": summary.quality_count,
            }
        )
    return rows


def compute_tier_component_table(report: AggregateReport) -> pd.DataFrame:
    """
    Long-format table of final accuracy/quality per (tier, component).

    Tiers appear from highest to lowest expertise, followed by the tier-free
    overall group. Each group ends with its ``overall`` row. Missing scores
    stay NaN (pandas' rendering of None); they are not zero-filled.

    Args:
        report: AggregateReport from TierAggregator

    Returns:
        DataFrame with TABLE_COLUMNS
    """
    rows: list[dict[str, object]] = []
    for tier, summary in report.tiers.items():
        rows.extend(_group_rows(tier.value, summary))
    rows.extend(_group_rows(OVERALL_LABEL, report.overall))

    if not rows:
        return pd.DataFrame(columns=TABLE_COLUMNS)

    result = pd.DataFrame(rows, columns=TABLE_COLUMNS)
    for col in ["Accuracy", "Quality", "Gap (quality - accuracy)"]:
        result[col] = result[col].astype(float).round(4)
    return result


def compute_tier_component_table_and_save(report: AggregateReport, output_dir: Path, filename: str) -> Path:
    """
    Convenience wrapper: compute the tier x component table and save it as CSV.

    Returns:
        Path to the saved CSV file
    """
    table_df = compute_tier_component_table(report)
    out_path = output_dir / filename
    table_df.to_csv(out_path, index=False)
    return out_path
