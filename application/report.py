"""Accuracy report assembly: per-paper comparisons plus expertise-tier aggregation."""

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence

from opik import track

from application.constants import METADATA_KEY, RESEARCH_FIELD_KEY, RESEARCH_PROBLEM_KEY, TEMPLATE_KEY
from application.records import (
    GroundTruthLookup,
    build_paper_scores,
    component_scores_from_records,
    component_scores_from_report,
    evaluator_infos,
)
from application.scoring import score_papers
from domain.evaluation.aggregation import TierAggregator, compare_cohorts, summarize_evaluators
from domain.evaluation.comparisons import (
    compare_metadata,
    compare_research_field,
    compare_research_problem,
    compare_template,
    confusion_matrix,
)
from domain.evaluation.expertise import ExpertiseWeightCalculator
from domain.evaluation.relevance import RelevanceScorer
from domain.schemas import (
    AccuracyReport,
    ComparisonStatus,
    ComponentRecord,
    EntityComparison,
    EvaluationRecord,
    GroundTruthRecord,
    PaperAccuracyReport,
    PaperScores,
    PaperStatus,
)
from domain.taxonomy.index import TaxonomyIndex
from infrastructure.config.models import ScoringConfig, StatusConfig

logger = logging.getLogger(__name__)


def paper_status(accuracy: float | None, cfg: StatusConfig | None = None) -> PaperStatus:
    """excellent >= 0.9, good >= 0.7, fair >= 0.5, else poor; unknown without an accuracy."""
    if accuracy is None:
        return PaperStatus.UNKNOWN
    cfg = cfg or StatusConfig()
    if accuracy >= cfg.excellent:
        return PaperStatus.EXCELLENT
    if accuracy >= cfg.good:
        return PaperStatus.GOOD
    if accuracy >= cfg.fair:
        return PaperStatus.FAIR
    return PaperStatus.POOR


def component_credits(
    report: PaperAccuracyReport,
    cfg: StatusConfig | None = None,
) -> dict[str, float]:
    """
    Credit of each comparable component of a paper.

    Metadata contributes its mean field similarity; field, problem and
    template contribute the credit of their status. A problem absent on both
    sides (``no_problem``) and missing comparisons are left out.
    """
    cfg = cfg or StatusConfig()
    credits: dict[str, float] = {}
    if report.metadata is not None:
        credits[METADATA_KEY] = report.metadata.accuracy

    entities: list[tuple[str, EntityComparison | None]] = [
        (RESEARCH_FIELD_KEY, report.research_field),
        (RESEARCH_PROBLEM_KEY, report.research_problem),
        (TEMPLATE_KEY, report.template),
    ]
    for key, comparison in entities:
        if comparison is None or comparison.status is ComparisonStatus.NO_PROBLEM:
            continue
        credits[key] = cfg.credits.get(comparison.status.value, 0.0)
    return credits


class AccuracyReportBuilder:
    """
    Compose ground-truth comparisons, expertise weights and tier aggregation into one report.

    Holds only read-only collaborators (taxonomy index, config); the
    per-evaluator weight cache lives for one build, which is a full recompute.
    """

    def __init__(self, index: TaxonomyIndex, config: ScoringConfig | None = None) -> None:
        self.index = index
        self.config = config or ScoringConfig()
        self.scorer = RelevanceScorer(index, self.config)
        self.aggregator = TierAggregator(self.config)

    @track(
        name="Accuracy.paper",
        type="general",
        metadata={"task": "paper_comparison"},
        capture_input=False,
        capture_output=False,
    )
    def build_paper_report(self, evaluation: EvaluationRecord, truth: GroundTruthRecord | None) -> PaperAccuracyReport:
        """Compare one paper's system output against its ground truth."""
        if truth is None:
            logger.warning("No ground truth for paper %s; comparisons skipped", evaluation.token)
            return PaperAccuracyReport(paper_id=evaluation.token)

        status_cfg = self.config.status
        report = PaperAccuracyReport(
            paper_id=evaluation.token,
            metadata=compare_metadata(truth, evaluation.metadata, status_cfg),
            research_field=compare_research_field(truth, evaluation.research_fields, self.scorer, status_cfg),
            research_problem=compare_research_problem(truth, evaluation.research_problems, status_cfg),
            template=compare_template(truth, evaluation.templates, status_cfg),
        )
        report.component_credits = component_credits(report, status_cfg)
        if report.component_credits:
            report.accuracy = sum(report.component_credits.values()) / len(report.component_credits)
        report.status = paper_status(report.accuracy, status_cfg)

        logger.debug(
            "Paper %s: accuracy=%s status=%s credits=%s",
            evaluation.token,
            "n/a" if report.accuracy is None else f"{report.accuracy:.3f}",
            report.status.value,
            report.component_credits,
        )
        return report

    def _score_paper(
        self,
        evaluation: EvaluationRecord,
        lookup: GroundTruthLookup,
        component_records: Mapping[str, Mapping[str, ComponentRecord]],
    ) -> tuple[PaperAccuracyReport, PaperScores]:
        report = self.build_paper_report(evaluation, lookup.match(evaluation))
        evaluator_ids = [info.evaluator_id for info in evaluator_infos(evaluation)]

        records = component_records.get(evaluation.token)
        if records:
            components = component_scores_from_records(records, self.config)
        else:
            components = component_scores_from_report(report, self.config)
        return report, build_paper_scores(evaluation.token, evaluator_ids, components)

    @track(
        name="Accuracy.report",
        type="general",
        metadata={"task": "accuracy_report"},
        capture_input=False,
        capture_output=False,
    )
    def build(
        self,
        evaluations: Sequence[EvaluationRecord],
        ground_truth: Iterable[GroundTruthRecord],
        component_records: Mapping[str, Mapping[str, ComponentRecord]] | None = None,
        *,
        max_workers: int | None = None,
        tiering: bool = True,
    ) -> AccuracyReport:
        """
        Build the full accuracy report for an evaluation corpus.

        Args:
            evaluations: System output + evaluator submissions, one per paper
            ground_truth: Ground-truth records (matched by DOI, then paper id)
            component_records: Optional pre-averaged component scores per paper token;
                papers without them fall back to automated comparison credits
            max_workers: Worker threads for per-paper scoring
            tiering: Bucket papers by expertise tier

        Returns:
            AccuracyReport
        """
        lookup = GroundTruthLookup(ground_truth)
        component_records = component_records or {}

        # Weights are computed once per evaluator of this corpus, before scoring fans out
        expertise = ExpertiseWeightCalculator(self.config.expertise, self.config.tiers)
        profiles = {
            info.evaluator_id: expertise.profile(info)
            for evaluation in evaluations
            for info in evaluator_infos(evaluation)
        }
        logger.info("Evaluators: %d unique profile(s)", len(profiles))

        results = score_papers(
            evaluations,
            lambda ev: self._score_paper(ev, lookup, component_records),
            max_workers=max_workers,
        )
        paper_reports = [r for r, _ in results]
        paper_scores = [s for _, s in results]

        weights = {evaluator_id: p.expertise_weight for evaluator_id, p in profiles.items()}
        aggregate = self.aggregator.aggregate(paper_scores, weights, tiering=tiering)
        keys = self.aggregator.component_keys(paper_scores)

        confusion = {}
        for key in (RESEARCH_FIELD_KEY, RESEARCH_PROBLEM_KEY, TEMPLATE_KEY):
            comparisons = [getattr(r, key) for r in paper_reports]
            statuses = [c.status for c in comparisons if c is not None]
            if statuses:
                confusion[key] = confusion_matrix(statuses)

        return AccuracyReport(
            papers=paper_reports,
            aggregate=aggregate,
            evaluators=profiles,
            evaluator_summary=summarize_evaluators(profiles.values(), self.config),
            cohorts=compare_cohorts(paper_scores, profiles, keys),
            confusion=confusion,
            status_counts=dict(Counter(r.status.value for r in paper_reports)),
        )
