"""
Expertise-tier aggregation of per-paper component scores.

Papers are bucketed by the mean expertise weight of their evaluators, and
final (automated + user) accuracy/quality scores are averaged per component,
per tier and overall. Missing scores are skipped, never zero-filled: a group
without contributing scores reports None, which is distinct from 0.0.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

import numpy as np

from domain.evaluation.bootstrap import bootstrap_mean_ci
from domain.evaluation.expertise import assign_tier
from domain.evaluation.ratings import blend_score
from domain.schemas import (
    AggregateReport,
    CohortComparison,
    ComponentScore,
    DistributionEntry,
    EvaluatorProfile,
    EvaluatorSummary,
    ExpertiseTier,
    GroupSummary,
    PaperScores,
    ScoreSummary,
    TierSummary,
)
from infrastructure.config.models import BlendConfig, ScoringConfig

logger = logging.getLogger(__name__)


def make_component_score(
    accuracy_auto: float | None,
    quality_auto: float | None,
    user_rating: float | None,
    blend: BlendConfig | None = None,
) -> ComponentScore:
    """ComponentScore with finals blended from automated scores and the (already [0, 1]) user rating."""
    return ComponentScore(
        accuracy_auto=accuracy_auto,
        quality_auto=quality_auto,
        user_rating=user_rating,
        final_accuracy=blend_score(accuracy_auto, user_rating, blend),
        final_quality=blend_score(quality_auto, user_rating, blend),
    )


def _mean(values: Sequence[float]) -> float | None:
    return float(np.mean(values)) if values else None


def _gap(quality: float | None, accuracy: float | None) -> float | None:
    if quality is None or accuracy is None:
        return None
    return quality - accuracy


def _score_summary(accuracies: Sequence[float], qualities: Sequence[float]) -> ScoreSummary:
    accuracy = _mean(accuracies)
    quality = _mean(qualities)
    return ScoreSummary(
        accuracy=accuracy,
        quality=quality,
        accuracy_count=len(accuracies),
        quality_count=len(qualities),
        gap=_gap(quality, accuracy),
    )


def summarize_group(papers: Iterable[PaperScores], component_keys: Sequence[str]) -> GroupSummary:
    """
    Per-component means of the final scores of ``papers`` and their overall.

    The overall is the mean of the non-null component means, so components
    without data do not pull it down. Its counts are the number of
    components that contributed.
    """
    papers = list(papers)
    components: dict[str, ScoreSummary] = {}
    for key in component_keys:
        accuracies: list[float] = []
        qualities: list[float] = []
        for paper in papers:
            score = paper.components.get(key)
            if score is None:
                continue
            if score.final_accuracy is not None:
                accuracies.append(score.final_accuracy)
            if score.final_quality is not None:
                qualities.append(score.final_quality)
        components[key] = _score_summary(accuracies, qualities)

    comp_acc = [s.accuracy for s in components.values() if s.accuracy is not None]
    comp_qual = [s.quality for s in components.values() if s.quality is not None]
    return GroupSummary(
        paper_count=len(papers),
        components=components,
        overall=_score_summary(comp_acc, comp_qual),
    )


class TierAggregator:
    """
    Fold per-paper component scores into tier and overall statistics.

    Always a full recompute over the papers given; the aggregator holds no
    state between calls, so identical input yields identical output.
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig()

    def component_keys(self, papers: Iterable[PaperScores]) -> list[str]:
        """Configured keys in order, then any other keys found in the papers."""
        keys = list(self.config.component_keys)
        extra = sorted({k for p in papers for k in p.components} - set(keys))
        return keys + extra

    def paper_expertise(
        self,
        papers: Iterable[PaperScores],
        evaluator_weights: Mapping[str, float],
    ) -> dict[str, float]:
        """Mean weight of each paper's evaluators; papers without evaluators are left out."""
        default = self.config.expertise.default_weight
        result: dict[str, float] = {}
        for paper in papers:
            if not paper.evaluator_ids:
                continue
            weights = [float(evaluator_weights.get(e, default)) for e in paper.evaluator_ids]
            result[paper.paper_id] = float(np.mean(weights))
        return result

    def aggregate(
        self,
        papers: Sequence[PaperScores],
        evaluator_weights: Mapping[str, float],
        *,
        tiering: bool = True,
    ) -> AggregateReport:
        """
        Aggregate final scores per component, per expertise tier and overall.

        Args:
            papers: Per-paper component scores with evaluator ids
            evaluator_weights: Evaluator id -> expertise weight
            tiering: If False, skip tier bucketing and report only the overall

        Returns:
            AggregateReport
        """
        keys = self.component_keys(papers)
        expertise = self.paper_expertise(papers, evaluator_weights)
        overall = summarize_group(papers, keys)

        tiers: dict[ExpertiseTier, TierSummary] = {}
        paper_tiers: dict[str, ExpertiseTier] = {}
        if tiering:
            buckets: dict[ExpertiseTier, list[PaperScores]] = defaultdict(list)
            for paper in papers:
                weight = expertise.get(paper.paper_id)
                if weight is None:
                    continue
                tier = assign_tier(weight, self.config.tiers)
                paper_tiers[paper.paper_id] = tier
                buckets[tier].append(paper)

            for tier, band in reversed(self.config.tiers.ordered()):
                group = summarize_group(buckets.get(tier, []), keys)
                tiers[tier] = TierSummary(
                    tier=tier,
                    min_weight=band.min_weight,
                    max_weight=band.max_weight,
                    **group.model_dump(),
                )

        stats = self.config.stats
        accuracy_ci = {}
        quality_ci = {}
        for key in keys:
            scores = [p.components[key] for p in papers if key in p.components]
            accuracy_ci[key] = bootstrap_mean_ci([s.final_accuracy for s in scores if s.final_accuracy is not None], stats)
            quality_ci[key] = bootstrap_mean_ci([s.final_quality for s in scores if s.final_quality is not None], stats)

        untiered = [p.paper_id for p in papers if p.paper_id not in expertise]
        if untiered:
            logger.info("%d paper(s) without evaluators are counted overall but not tiered", len(untiered))

        return AggregateReport(
            tiers=tiers,
            overall=overall,
            paper_expertise=expertise,
            paper_tiers=paper_tiers,
            untiered_papers=untiered,
            accuracy_ci=accuracy_ci,
            quality_ci=quality_ci,
        )


def compare_cohorts(
    papers: Sequence[PaperScores],
    profiles: Mapping[str, EvaluatorProfile],
    component_keys: Sequence[str],
) -> CohortComparison | None:
    """
    Scores of papers rated by ORKG-experienced evaluators vs. papers rated by others.

    A paper joins every cohort one of its evaluators belongs to, so it can be
    counted in both. Returns None if no paper has a known evaluator.
    """
    with_orkg: list[PaperScores] = []
    without_orkg: list[PaperScores] = []
    for paper in papers:
        flags = {profiles[e].has_orkg_experience for e in paper.evaluator_ids if e in profiles}
        if True in flags:
            with_orkg.append(paper)
        if False in flags:
            without_orkg.append(paper)

    if not with_orkg and not without_orkg:
        return None

    with_summary = summarize_group(with_orkg, component_keys)
    without_summary = summarize_group(without_orkg, component_keys)

    def _diff(a: float | None, b: float | None) -> float | None:
        return None if a is None or b is None else a - b

    return CohortComparison(
        with_orkg=with_summary,
        without_orkg=without_summary,
        accuracy_difference=_diff(with_summary.overall.accuracy, without_summary.overall.accuracy),
        quality_difference=_diff(with_summary.overall.quality, without_summary.overall.quality),
    )


def summarize_evaluators(profiles: Iterable[EvaluatorProfile], config: ScoringConfig | None = None) -> EvaluatorSummary:
    """Evaluator counts, weight spread and distributions by role, domain expertise and tier."""
    cfg = config or ScoringConfig()
    profiles = list(profiles)
    if not profiles:
        return EvaluatorSummary()

    weights = np.array([p.expertise_weight for p in profiles], dtype=float)

    def _distribution(attr: str) -> dict[str, DistributionEntry]:
        groups: dict[str, list[float]] = defaultdict(list)
        for p in profiles:
            groups[getattr(p, attr) or "Unknown"].append(p.expertise_weight)
        return {
            name: DistributionEntry(count=len(ws), mean_weight=float(np.mean(ws))) for name, ws in sorted(groups.items())
        }

    by_tier = {tier.value: 0 for tier in ExpertiseTier}
    for p in profiles:
        by_tier[assign_tier(p.expertise_weight, cfg.tiers).value] += 1

    orkg = sum(1 for p in profiles if p.has_orkg_experience)
    return EvaluatorSummary(
        total=len(profiles),
        mean_weight=float(weights.mean()),
        std_weight=float(weights.std()),
        orkg_experienced=orkg,
        orkg_share=orkg / len(profiles),
        by_role=_distribution("role"),
        by_domain_expertise=_distribution("domain_expertise"),
        by_tier=by_tier,
    )
