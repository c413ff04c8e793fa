import itertools

import pytest

from domain.evaluation.relevance import RelevanceScorer, composite_relevance, hierarchy_score
from domain.schemas import RelationshipType
from domain.taxonomy import TaxonomyIndex
from infrastructure.config.models import RelevanceWeights, ScoringConfig


def test_hierarchy_score_parent_prefix(index: TaxonomyIndex) -> None:
    # [Science, CS, ML] vs [Science, CS, ML, CV]: common=3, distance=1
    score = hierarchy_score(index.find_path("Machine Learning"), index.find_path("Computer Vision"))

    assert score == pytest.approx(0.6 * 3 / 4 + 0.4 / 2)
    assert score == pytest.approx(0.65)


def test_hierarchy_score_exact_and_floor(index: TaxonomyIndex) -> None:
    cv = index.find_path("Computer Vision")

    assert hierarchy_score(cv, cv) == 1.0
    assert hierarchy_score(cv, []) == pytest.approx(0.1)
    assert hierarchy_score([], []) == pytest.approx(0.1)


def test_hierarchy_score_cross_branch(index: TaxonomyIndex) -> None:
    score = hierarchy_score(index.find_path("Computer Vision"), index.find_path("Bioinformatics"))

    assert score == pytest.approx(0.6 * 1 / 4 + 0.4 / 6)


def test_identical_labels_score_one(index: TaxonomyIndex) -> None:
    result = RelevanceScorer(index).score("Machine Learning", "Machine Learning")

    assert result.word_overlap_score == 1.0
    assert result.jaccard_score == 1.0
    assert result.relevance_score == pytest.approx(1.0)
    assert result.is_exact_match is True
    assert result.relationship.type is RelationshipType.SAME


def test_composite_weights(index: TaxonomyIndex) -> None:
    result = RelevanceScorer(index).score("Machine Learning", "Computer Vision")

    assert result.hierarchy_score == pytest.approx(0.65)
    assert result.word_overlap_score == 0.0
    assert result.relevance_score == pytest.approx(0.4 * 0.65)
    assert result.relationship.type is RelationshipType.PARENT
    assert result.common_ancestors == 3
    assert result.path_jaccard_score == pytest.approx(3 / 4)


def test_unresolvable_labels_fall_back_to_lexical(index: TaxonomyIndex) -> None:
    result = RelevanceScorer(index).score("Quantum Foo", "Quantum Bar")

    assert result.hierarchy_score == pytest.approx(0.1)
    assert result.relationship.type is RelationshipType.DISTANT
    assert result.relationship.distance == -1
    assert result.relevance_score == pytest.approx(0.4 * 0.1 + 0.4 * 0.5 + 0.2 / 3)


def test_score_ids_uses_node_labels_by_default(index: TaxonomyIndex) -> None:
    scorer = RelevanceScorer(index)

    assert scorer.score_ids("R112130", "R112130").relevance_score == pytest.approx(1.0)
    by_id = scorer.score_ids("R112125", "R112130")
    by_label = scorer.score("Machine Learning", "Computer Vision")
    assert by_id.model_dump() == by_label.model_dump()


def test_scores_stay_in_unit_interval(index: TaxonomyIndex) -> None:
    scorer = RelevanceScorer(index)
    labels = [n.label for n in index] + ["Unknown Field"]
    for a, b in itertools.product(labels, repeat=2):
        result = scorer.score(a, b)
        assert 0.0 <= result.relevance_score <= 1.0
        assert 0.1 <= result.hierarchy_score <= 1.0


def test_custom_weights(index: TaxonomyIndex) -> None:
    cfg = ScoringConfig(relevance=RelevanceWeights(hierarchy=1.0, word_overlap=0.0, jaccard=0.0))
    result = RelevanceScorer(index, cfg).score("Machine Learning", "Computer Vision")

    assert result.relevance_score == pytest.approx(result.hierarchy_score)


def test_composite_relevance_is_clamped() -> None:
    assert composite_relevance(1.0, 1.0, 1.0) == pytest.approx(1.0)
    assert composite_relevance(0.0, 0.0, 0.0) == 0.0
