import logging

import pytest
from pydantic import ValidationError

from application import (
    AccuracyReportBuilder,
    GroundTruthLookup,
    evaluator_infos,
    parse_component_records,
    parse_evaluations,
)
from application.records import parse_ground_truth
from application.report import paper_status
from domain.schemas import ComparisonStatus, ExpertiseTier, PaperStatus
from domain.taxonomy import TaxonomyIndex

GROUND_TRUTH = [
    {
        "paper_id": "p1",
        "title": "Deep Residual Learning",
        "doi": "10.1109/CVPR.2016.90",
        "publication_year": 2016,
        "venue": "CVPR",
        "author_1": "Kaiming He",
        "research_field_id": "R112130",
        "research_field_name": "Computer Vision",
        "research_problem_id": "R1001",
        "research_problem_name": "Image classification",
        "template_id": "R2001",
        "template_name": "Deep learning model",
    },
    {
        "paper_id": "p2",
        "title": "Attention Is All You Need",
        "doi": "10.48550/arXiv.1706.03762",
        "publication_year": 2017,
        "venue": "NeurIPS",
        "author_1": "Ashish Vaswani",
        "research_field_id": "R112130",
        "research_field_name": "Computer Vision",
        "template_id": "R2001",
        "template_name": "Deep learning model",
    },
]


def _evaluation(token: str, truth: dict, **blocks) -> dict:
    return {
        "token": token,
        "metadata": {
            "title": truth["title"],
            "doi": truth["doi"],
            "publicationDate": str(truth["publication_year"]),
            "venue": truth["venue"],
            "authors": [truth["author_1"]],
        },
        **blocks,
    }


def _evaluations() -> list[dict]:
    p1 = _evaluation(
        "p1",
        GROUND_TRUTH[0],
        researchFields={"selectedField": {"id": "R112130", "label": "Computer Vision"}},
        researchProblems={"selectedProblem": {"id": "R1001", "label": "Image classification"}},
        templates={"selectedTemplate": {"id": "R2001", "label": "Deep learning model"}},
        userEvaluations=[
            {
                "userInfo": {
                    "email": "ada@example.org",
                    "role": "Professor",
                    "domainExpertise": "Expert",
                    "evaluationExperience": "Extensive",
                    "orkgExperience": "used",
                }
            }
        ],
    )
    p2 = _evaluation(
        "p2",
        GROUND_TRUTH[1],
        researchFields={
            "selectedField": {"id": "R112125", "label": "Machine Learning"},
            "fields": [{"id": "R112125", "label": "Machine Learning"}, {"id": "R112130", "label": "Computer Vision"}],
        },
        researchProblems={"selectedProblem": {"label": "Sequence transduction", "source": "llm"}},
        templates={"selectedTemplate": {"label": "Transformer"}, "llm_template": {"name": "Transformer"}},
        userEvaluations=[
            {
                "userInfo": {
                    "email": "alan@example.org",
                    "role": "PhD Student",
                    "domainExpertise": "Intermediate",
                    "evaluationExperience": "Moderate",
                    "orkgExperience": "never",
                }
            },
            # same evaluator submitting twice counts once
            {"userInfo": {"email": "Alan@Example.org", "role": "PhD Student"}},
        ],
    )
    p3 = {"token": "p3", "metadata": {"title": "Unmatched paper"}}
    return [p1, p2, p3]


def _build(index: TaxonomyIndex, **kwargs):
    builder = AccuracyReportBuilder(index)
    return builder.build(parse_evaluations(_evaluations()), parse_ground_truth(GROUND_TRUTH), **kwargs)


def test_paper_reports(index: TaxonomyIndex) -> None:
    report = _build(index)
    p1, p2, p3 = report.papers

    assert p1.component_credits == {"metadata": 1.0, "research_field": 1.0, "research_problem": 1.0, "template": 1.0}
    assert p1.status is PaperStatus.EXCELLENT

    assert p2.research_field.status is ComparisonStatus.PARTIAL
    assert p2.research_problem.status is ComparisonStatus.CORRECT
    assert p2.template.status is ComparisonStatus.LLM_GENERATED
    assert p2.accuracy == pytest.approx((1.0 + 0.5 + 1.0 + 0.7) / 4)
    assert p2.status is PaperStatus.GOOD

    assert p3.accuracy is None
    assert p3.status is PaperStatus.UNKNOWN
    assert report.status_counts == {"excellent": 1, "good": 1, "unknown": 1}


def test_evaluators_and_tiers(index: TaxonomyIndex) -> None:
    report = _build(index)

    assert set(report.evaluators) == {"ada@example.org", "alan@example.org"}
    assert report.evaluators["ada@example.org"].expertise_weight == pytest.approx(5.0)
    assert report.evaluators["alan@example.org"].expertise_weight == pytest.approx(3.3)
    assert report.aggregate.paper_tiers == {"p1": ExpertiseTier.EXPERT, "p2": ExpertiseTier.SENIOR}
    assert report.aggregate.untiered_papers == ["p3"]
    assert report.evaluator_summary.total == 2
    assert report.cohorts.with_orkg.paper_count == 1


def test_automated_credits_feed_aggregation_without_component_records(index: TaxonomyIndex) -> None:
    report = _build(index)
    overall = report.aggregate.overall

    assert overall.components["research_field"].accuracy == pytest.approx(0.75)
    assert overall.components["template"].accuracy == pytest.approx(0.85)
    assert overall.components["template"].quality is None
    assert report.confusion["research_field"].tp == 1


def test_component_records_are_blended(index: TaxonomyIndex) -> None:
    components = parse_component_records(
        {"p1": {"metadata": {"accuracyScores": {"mean": 0.9}, "qualityScores": {"mean": 0.8}, "userRatings": {"mean": 0.5}}}}
    )
    report = _build(index, component_records=components)
    expert = report.aggregate.tiers[ExpertiseTier.EXPERT].components["metadata"]

    assert expert.accuracy == pytest.approx(0.9 * 0.6 + 0.5 * 0.4)
    assert expert.quality == pytest.approx(0.8 * 0.6 + 0.5 * 0.4)
    # p2 has no component records and falls back to its comparison credits
    assert report.aggregate.tiers[ExpertiseTier.SENIOR].components["research_field"].accuracy == pytest.approx(0.5)


def test_parallel_build_matches_sequential(index: TaxonomyIndex) -> None:
    assert _build(index, max_workers=4).model_dump() == _build(index).model_dump()


def _single_evaluator_corpus(user_info: dict) -> list:
    evaluation = _evaluation(
        "p1",
        GROUND_TRUTH[0],
        researchFields={"selectedField": {"id": "R112130", "label": "Computer Vision"}},
        userEvaluations=[{"userInfo": user_info}],
    )
    return parse_evaluations([evaluation])


def test_reused_builder_matches_fresh_builder(index: TaxonomyIndex) -> None:
    ground_truth = parse_ground_truth(GROUND_TRUTH)
    as_professor = _single_evaluator_corpus({"email": "a@x.org", "role": "Professor", "domainExpertise": "Expert"})
    as_student = _single_evaluator_corpus({"email": "a@x.org", "role": "Bachelor Student"})

    builder = AccuracyReportBuilder(index)
    first = builder.build(as_professor, ground_truth)
    reused = builder.build(as_student, ground_truth)
    fresh = AccuracyReportBuilder(index).build(as_student, ground_truth)

    assert first.aggregate.paper_tiers == {"p1": ExpertiseTier.EXPERT}
    assert reused.aggregate.paper_tiers == {"p1": ExpertiseTier.JUNIOR}
    assert reused.model_dump() == fresh.model_dump()


def test_anonymous_evaluators_are_scoped_to_their_paper(index: TaxonomyIndex) -> None:
    p1 = _evaluation(
        "p1",
        GROUND_TRUTH[0],
        userEvaluations=[{"userInfo": {"role": "Professor", "domainExpertise": "Expert"}}],
    )
    p2 = _evaluation("p2", GROUND_TRUTH[1], userEvaluations=[{"userInfo": {"role": "Bachelor Student"}}])

    report = AccuracyReportBuilder(index).build(parse_evaluations([p1, p2]), parse_ground_truth(GROUND_TRUTH))

    assert set(report.evaluators) == {"p1#anonymous-0", "p2#anonymous-0"}
    assert report.aggregate.paper_tiers == {"p1": ExpertiseTier.EXPERT, "p2": ExpertiseTier.JUNIOR}


def test_evaluator_infos_keep_named_ids(caplog: pytest.LogCaptureFixture) -> None:
    (evaluation,) = parse_evaluations(
        [
            {
                "token": "p9",
                "userEvaluations": [
                    {"userInfo": {"firstName": "Grace", "lastName": "Hopper"}},
                    {"userInfo": {"role": "PhD Student"}},
                    {"userInfo": {"role": "PostDoc"}},
                ],
            }
        ]
    )

    with caplog.at_level(logging.WARNING, logger="application.records"):
        ids = [info.evaluator_id for info in evaluator_infos(evaluation)]

    assert ids == ["Grace_Hopper", "p9#anonymous-1", "p9#anonymous-2"]
    assert "without email or name" in caplog.text


def test_tiering_off(index: TaxonomyIndex) -> None:
    flat = _build(index, tiering=False)

    assert flat.aggregate.tiers == {}
    assert flat.aggregate.overall == _build(index).aggregate.overall


def test_report_serializes_to_json(index: TaxonomyIndex) -> None:
    dumped = _build(index).model_dump(mode="json")

    assert dumped["aggregate"]["paper_tiers"] == {"p1": "expert", "p2": "senior"}
    assert list(dumped["aggregate"]["tiers"]) == ["expert", "senior", "intermediate", "junior"]


def test_malformed_user_evaluations_are_rejected() -> None:
    with pytest.raises(ValidationError, match="userEvaluations must be a list"):
        parse_evaluations([{"token": "p1", "userEvaluations": {"not": "a list"}}])


def test_ground_truth_lookup_prefers_doi() -> None:
    lookup = GroundTruthLookup(parse_ground_truth(GROUND_TRUTH))
    evaluation = parse_evaluations([{"token": "other", "metadata": {"doi": "https://doi.org/10.1109/cvpr.2016.90"}}])[0]

    assert len(lookup) == 2
    assert lookup.match(evaluation).paper_id == "p1"
    assert lookup.match(parse_evaluations([{"paperId": "p2"}])[0]).paper_id == "p2"
    assert lookup.match(parse_evaluations([{"token": "zzz"}])[0]) is None


def test_paper_status_bands() -> None:
    assert paper_status(0.9) is PaperStatus.EXCELLENT
    assert paper_status(0.7) is PaperStatus.GOOD
    assert paper_status(0.5) is PaperStatus.FAIR
    assert paper_status(0.49) is PaperStatus.POOR
    assert paper_status(None) is PaperStatus.UNKNOWN
