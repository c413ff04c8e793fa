"""Turning raw ground-truth, evaluation and component records into scoring inputs."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from domain.evaluation.aggregation import make_component_score
from domain.evaluation.comparisons import normalize_doi
from domain.evaluation.ratings import normalize_user_rating
from domain.schemas import (
    ComponentRecord,
    ComponentScore,
    EvaluationRecord,
    GroundTruthRecord,
    PaperAccuracyReport,
    PaperScores,
    UserInfo,
)
from infrastructure.config.models import ScoringConfig

logger = logging.getLogger(__name__)


def parse_ground_truth(raw_records: Iterable[Mapping[str, Any]]) -> list[GroundTruthRecord]:
    return [GroundTruthRecord.model_validate(dict(r)) for r in raw_records]


def parse_evaluations(raw_records: Iterable[Mapping[str, Any]]) -> list[EvaluationRecord]:
    """
    Validate evaluation records.

    Raises:
        pydantic.ValidationError: On shape violations (e.g. non-list userEvaluations)
    """
    return [EvaluationRecord.model_validate(dict(r)) for r in raw_records]


def parse_component_records(raw: Mapping[str, Mapping[str, Any]]) -> dict[str, dict[str, ComponentRecord]]:
    """``{paper token: {component key: record}}`` with non-mapping entries skipped."""
    parsed: dict[str, dict[str, ComponentRecord]] = {}
    for paper_id, components in raw.items():
        parsed[str(paper_id)] = {
            str(key): ComponentRecord.model_validate(value)
            for key, value in components.items()
            if isinstance(value, Mapping)
        }
    return parsed


class GroundTruthLookup:
    """Match evaluation records to ground truth by normalized DOI, then by paper id."""

    def __init__(self, records: Iterable[GroundTruthRecord]) -> None:
        self.records = list(records)
        self._by_doi: dict[str, GroundTruthRecord] = {}
        self._by_id: dict[str, GroundTruthRecord] = {}
        for record in self.records:
            doi = normalize_doi(record.doi)
            if doi:
                self._by_doi.setdefault(doi, record)
            if record.paper_id:
                self._by_id.setdefault(record.paper_id, record)

    def __len__(self) -> int:
        return len(self.records)

    def match(self, evaluation: EvaluationRecord) -> GroundTruthRecord | None:
        doi = normalize_doi(evaluation.metadata.doi) if evaluation.metadata else ""
        if doi and doi in self._by_doi:
            return self._by_doi[doi]
        return self._by_id.get(evaluation.token)


def evaluator_infos(evaluation: EvaluationRecord) -> list[UserInfo]:
    """
    Profiles of the evaluators of one paper, first submission per evaluator.

    Submissions with no email and no name get an id scoped to this paper and
    submission, so anonymous evaluators of different papers stay separate.
    """
    seen: set[str] = set()
    infos: list[UserInfo] = []
    for position, submission in enumerate(evaluation.user_evaluations):
        info = submission.user_info
        if info is None:
            continue
        if info.is_anonymous:
            scoped_id = f"{evaluation.token}#anonymous-{position}"
            logger.warning("Paper %s: evaluator without email or name, using id %s", evaluation.token, scoped_id)
            info = info.model_copy(update={"scoped_id": scoped_id})
        if info.evaluator_id in seen:
            continue
        seen.add(info.evaluator_id)
        infos.append(info)
    return infos


def component_scores_from_records(
    records: Mapping[str, ComponentRecord],
    config: ScoringConfig,
) -> dict[str, ComponentScore]:
    """Blend pre-averaged automated scores with user ratings converted to [0, 1]."""
    scores: dict[str, ComponentScore] = {}
    for key, record in records.items():
        user = normalize_user_rating(record.user_rating, config.ratings)
        scores[key] = make_component_score(record.accuracy_auto, record.quality_auto, user, config.blend)
    return scores


def component_scores_from_report(report: PaperAccuracyReport, config: ScoringConfig) -> dict[str, ComponentScore]:
    """Automated-only component scores derived from the ground-truth comparison credits."""
    return {
        key: make_component_score(credit, None, None, config.blend)
        for key, credit in report.component_credits.items()
    }


def build_paper_scores(
    paper_id: str,
    evaluator_ids: list[str],
    components: dict[str, ComponentScore],
) -> PaperScores:
    return PaperScores(paper_id=paper_id, evaluator_ids=list(evaluator_ids), components=components)
