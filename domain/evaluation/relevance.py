"""Composite relevance score: taxonomic closeness blended with lexical similarity."""

import logging
from collections.abc import Sequence

from domain.evaluation.lexical import set_jaccard, word_metrics
from domain.schemas import PathNode, RelevanceResult
from domain.taxonomy.index import TaxonomyIndex
from domain.taxonomy.relationships import RelationshipAnalyzer, common_prefix_length
from infrastructure.config.models import HierarchyScoreConfig, RelevanceWeights, ScoringConfig

logger = logging.getLogger(__name__)


def hierarchy_score(
    path_a: Sequence[PathNode],
    path_b: Sequence[PathNode],
    cfg: HierarchyScoreConfig | None = None,
) -> float:
    """
    Taxonomic closeness of two resolved paths.

    - both paths end at the same node -> exact score (1.0)
    - no shared ancestor (or a path is unresolved) -> floor (0.1)
    - otherwise ancestry share and closeness, never below the floor:
      ``0.6 * common / max(lenA, lenB) + 0.4 / (distance + 1)``

    Example:
        [Root, Science, CS] vs [Root, Science, CS, CV]:
        common=3, distance=1 -> 0.6*3/4 + 0.4/2 = 0.65
    """
    cfg = cfg or HierarchyScoreConfig()

    if path_a and path_b and path_a[-1].id == path_b[-1].id:
        return cfg.exact_score

    common = common_prefix_length(path_a, path_b)
    if common == 0:
        return cfg.floor

    max_len = max(1, len(path_a), len(path_b))
    distance = len(path_a) + len(path_b) - 2 * common
    score = cfg.ancestry_weight * (common / max_len) + cfg.closeness_weight * (1.0 / (distance + 1))
    return min(cfg.exact_score, max(cfg.floor, score))


def composite_relevance(
    hierarchy: float,
    word_overlap: float,
    jaccard: float,
    weights: RelevanceWeights | None = None,
) -> float:
    w = weights or RelevanceWeights()
    score = w.hierarchy * hierarchy + w.word_overlap * word_overlap + w.jaccard * jaccard
    return min(1.0, max(0.0, score))


class RelevanceScorer:
    """
    Score a predicted label against a ground-truth label.

    Labels are resolved to taxonomy paths with exact, case-sensitive lookup;
    callers that want tolerant matching normalize first
    (see ``domain.taxonomy.normalize_label``). Lexical scores always use the
    raw label strings.
    """

    def __init__(self, index: TaxonomyIndex, config: ScoringConfig | None = None) -> None:
        self.index = index
        self.config = config or ScoringConfig()
        self.analyzer = RelationshipAnalyzer(index)

    @property
    def weights(self) -> RelevanceWeights:
        return self.config.relevance

    @property
    def hierarchy_config(self) -> HierarchyScoreConfig:
        return self.config.hierarchy

    def score(self, ground_truth_label: str, prediction_label: str) -> RelevanceResult:
        """
        Relevance of a predicted label to a ground-truth label.

        Unresolvable labels never raise: the hierarchy component drops to the
        floor and the relationship is ``distant`` with distance -1.
        """
        return self._score(
            self.index.find_path(ground_truth_label),
            self.index.find_path(prediction_label),
            ground_truth_label,
            prediction_label,
        )

    def score_ids(
        self,
        ground_truth_id: str,
        prediction_id: str,
        ground_truth_label: str | None = None,
        prediction_label: str | None = None,
    ) -> RelevanceResult:
        """
        Same as score() but resolving paths by node id.

        Lexical scores use the given labels, falling back to the node labels.
        """
        path_a = self.index.find_path_by_id(ground_truth_id)
        path_b = self.index.find_path_by_id(prediction_id)
        if ground_truth_label is None and path_a:
            ground_truth_label = path_a[-1].label
        if prediction_label is None and path_b:
            prediction_label = path_b[-1].label
        return self._score(path_a, path_b, ground_truth_label or "", prediction_label or "")

    def _score(
        self,
        path_a: list[PathNode],
        path_b: list[PathNode],
        label_a: str,
        label_b: str,
    ) -> RelevanceResult:
        relationship = self.analyzer.relate_paths(path_a, path_b)
        h_score = hierarchy_score(path_a, path_b, self.hierarchy_config)
        lexical = word_metrics(label_a, label_b)
        relevance = composite_relevance(h_score, lexical.word_overlap_score, lexical.jaccard_score, self.weights)

        path_jaccard = set_jaccard((n.id for n in path_a), (n.id for n in path_b)) if path_a and path_b else 0.0

        logger.debug(
            "Relevance %r vs %r: hierarchy=%.3f overlap=%.3f jaccard=%.3f -> %.3f (%s, d=%d)",
            label_a,
            label_b,
            h_score,
            lexical.word_overlap_score,
            lexical.jaccard_score,
            relevance,
            relationship.type.value,
            relationship.distance,
        )

        return RelevanceResult(
            hierarchy_score=h_score,
            word_overlap_score=lexical.word_overlap_score,
            jaccard_score=lexical.jaccard_score,
            relevance_score=relevance,
            is_exact_match=bool(path_a and path_b and path_a[-1].id == path_b[-1].id),
            common_ancestors=common_prefix_length(path_a, path_b),
            relationship=relationship,
            path_jaccard_score=path_jaccard,
        )
