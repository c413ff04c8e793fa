import pytest

from domain.evaluation.aggregation import (
    TierAggregator,
    compare_cohorts,
    make_component_score,
    summarize_evaluators,
    summarize_group,
)
from domain.schemas import EvaluatorProfile, ExpertiseTier, PaperScores

WEIGHTS = {"a": 4.5, "b": 2.5}


def _papers() -> list[PaperScores]:
    return [
        PaperScores(paper_id="p1", evaluator_ids=["a"], components={"metadata": make_component_score(0.8, 0.9, None)}),
        PaperScores(paper_id="p2", evaluator_ids=["b"], components={"metadata": make_component_score(0.6, 0.0, None)}),
        PaperScores(paper_id="p3", evaluator_ids=[], components={"metadata": make_component_score(1.0, None, None)}),
    ]


def test_tiers_are_listed_highest_first_and_complete() -> None:
    report = TierAggregator().aggregate(_papers(), WEIGHTS)

    assert list(report.tiers) == [
        ExpertiseTier.EXPERT,
        ExpertiseTier.SENIOR,
        ExpertiseTier.INTERMEDIATE,
        ExpertiseTier.JUNIOR,
    ]
    assert report.paper_tiers == {"p1": ExpertiseTier.EXPERT, "p2": ExpertiseTier.INTERMEDIATE}


def test_tier_scores() -> None:
    report = TierAggregator().aggregate(_papers(), WEIGHTS)

    expert = report.tiers[ExpertiseTier.EXPERT]
    assert expert.paper_count == 1
    assert expert.components["metadata"].accuracy == pytest.approx(0.8)
    assert expert.components["metadata"].gap == pytest.approx(0.1)
    assert expert.min_weight == 4.0


def test_zero_is_a_score_and_none_is_not() -> None:
    report = TierAggregator().aggregate(_papers(), WEIGHTS)

    intermediate = report.tiers[ExpertiseTier.INTERMEDIATE].components["metadata"]
    assert intermediate.quality == 0.0
    assert intermediate.quality_count == 1

    senior = report.tiers[ExpertiseTier.SENIOR]
    assert senior.paper_count == 0
    assert senior.components["metadata"].accuracy is None
    assert senior.overall.accuracy is None

    overall = report.overall.components["metadata"]
    assert overall.accuracy == pytest.approx(0.8)
    assert overall.quality == pytest.approx(0.45)
    assert overall.quality_count == 2


def test_overall_ignores_components_without_data() -> None:
    report = TierAggregator().aggregate(_papers(), WEIGHTS)

    assert report.overall.components["content"].accuracy is None
    assert report.overall.overall.accuracy == pytest.approx(0.8)
    assert report.overall.overall.accuracy_count == 1


def test_papers_without_evaluators_count_overall_only() -> None:
    report = TierAggregator().aggregate(_papers(), WEIGHTS)

    assert report.untiered_papers == ["p3"]
    assert report.overall.paper_count == 3
    assert sum(t.paper_count for t in report.tiers.values()) == 2


def test_tiering_disabled_matches_overall() -> None:
    aggregator = TierAggregator()
    tiered = aggregator.aggregate(_papers(), WEIGHTS)
    flat = aggregator.aggregate(_papers(), WEIGHTS, tiering=False)

    assert flat.tiers == {}
    assert flat.paper_tiers == {}
    assert flat.overall == tiered.overall


def test_aggregation_is_idempotent() -> None:
    aggregator = TierAggregator()

    assert aggregator.aggregate(_papers(), WEIGHTS).model_dump() == aggregator.aggregate(_papers(), WEIGHTS).model_dump()


def test_paper_expertise_is_mean_of_evaluators() -> None:
    papers = [PaperScores(paper_id="p", evaluator_ids=["a", "b"]), PaperScores(paper_id="q", evaluator_ids=["ghost"])]
    aggregator = TierAggregator()

    expertise = aggregator.paper_expertise(papers, WEIGHTS)
    assert expertise == {"p": pytest.approx(3.5), "q": pytest.approx(1.0)}
    assert aggregator.aggregate(papers, WEIGHTS).paper_tiers == {"p": ExpertiseTier.SENIOR, "q": ExpertiseTier.JUNIOR}


def test_paper_on_a_tier_boundary_goes_to_the_higher_tier() -> None:
    weights = {"a": 3.5, "b": 4.5, "c": 2.5, "d": 3.5}
    papers = [
        PaperScores(paper_id="p", evaluator_ids=["a", "b"], components={"metadata": make_component_score(0.9, None, None)}),
        PaperScores(paper_id="q", evaluator_ids=["c", "d"], components={"metadata": make_component_score(0.4, None, None)}),
    ]

    report = TierAggregator().aggregate(papers, weights)

    assert report.paper_expertise == {"p": pytest.approx(4.0), "q": pytest.approx(3.0)}
    assert report.paper_tiers == {"p": ExpertiseTier.EXPERT, "q": ExpertiseTier.SENIOR}
    assert report.tiers[ExpertiseTier.EXPERT].components["metadata"].accuracy == pytest.approx(0.9)
    assert report.tiers[ExpertiseTier.SENIOR].components["metadata"].accuracy == pytest.approx(0.4)


def test_component_keys_keep_config_order_then_extras() -> None:
    papers = [PaperScores(paper_id="p", components={"zeta": make_component_score(1.0, None, None)})]

    assert TierAggregator().component_keys(papers) == [
        "metadata",
        "research_field",
        "research_problem",
        "template",
        "content",
        "zeta",
    ]


def test_confidence_intervals() -> None:
    report = TierAggregator().aggregate(_papers(), WEIGHTS)

    ci = report.accuracy_ci["metadata"]
    assert ci.n == 3
    assert ci.lower <= 0.8 <= ci.upper
    assert report.accuracy_ci["content"] is None
    assert report.quality_ci["metadata"].n == 2


def test_blended_component_scores() -> None:
    score = make_component_score(0.5, 0.9, 1.0)

    assert score.final_accuracy == pytest.approx(0.7)
    assert score.final_quality == pytest.approx(0.94)
    assert make_component_score(None, None, 1.0).final_accuracy is None


def test_summarize_group_empty() -> None:
    group = summarize_group([], ["metadata"])

    assert group.paper_count == 0
    assert group.overall.accuracy is None
    assert group.overall.gap is None


def _profiles() -> dict[str, EvaluatorProfile]:
    return {
        "a": EvaluatorProfile(evaluator_id="a", role="Professor", orkg_experience="used", expertise_weight=4.5),
        "b": EvaluatorProfile(evaluator_id="b", role="PhD Student", orkg_experience="never", expertise_weight=2.5),
    }


def test_compare_cohorts() -> None:
    cohorts = compare_cohorts(_papers(), _profiles(), ["metadata"])

    assert cohorts.with_orkg.paper_count == 1
    assert cohorts.without_orkg.paper_count == 1
    assert cohorts.accuracy_difference == pytest.approx(0.2)
    assert cohorts.quality_difference == pytest.approx(0.9)

    assert compare_cohorts(_papers(), {}, ["metadata"]) is None


def test_summarize_evaluators() -> None:
    summary = summarize_evaluators(_profiles().values())

    assert summary.total == 2
    assert summary.mean_weight == pytest.approx(3.5)
    assert summary.std_weight == pytest.approx(1.0)
    assert summary.orkg_experienced == 1
    assert summary.orkg_share == pytest.approx(0.5)
    assert summary.by_tier == {"expert": 1, "senior": 0, "intermediate": 1, "junior": 0}
    assert summary.by_role["Professor"].count == 1
    assert summary.by_domain_expertise["Unknown"].count == 2

    assert summarize_evaluators([]).total == 0
