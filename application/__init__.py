"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the accuracy-report workflow over an evaluation corpus.
"""

from application.evaluation import log_report_summary
from application.records import (
    GroundTruthLookup,
    evaluator_infos,
    parse_component_records,
    parse_evaluations,
    parse_ground_truth,
)
from application.report import AccuracyReportBuilder, component_credits, paper_status
from application.scoring import score_papers

__all__ = [
    # Main workflow
    "AccuracyReportBuilder",
    "score_papers",
    "log_report_summary",
    # Per-paper helpers
    "component_credits",
    "paper_status",
    # Record utilities
    "GroundTruthLookup",
    "evaluator_infos",
    "parse_ground_truth",
    "parse_evaluations",
    "parse_component_records",
]
