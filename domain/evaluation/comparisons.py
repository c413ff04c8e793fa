"""Ground-truth comparisons for metadata, research field, research problem and template."""

import re
from collections.abc import Iterable
from typing import Any

from domain.constants import NO_RESEARCH_PROBLEM
from domain.evaluation.lexical import list_similarity, text_similarity
from domain.evaluation.relevance import RelevanceScorer
from domain.schemas import (
    CandidateEntity,
    ComparisonStatus,
    ConfusionMatrix,
    EntityComparison,
    ExtractedMetadata,
    FieldAccuracy,
    FieldComparison,
    GroundTruthRecord,
    MetadataComparison,
    RelevanceResult,
    ResearchFieldsBlock,
    ResearchProblemsBlock,
    TemplatesBlock,
)
from infrastructure.config.models import StatusConfig

_DOI_RESOLVER = re.compile(r"^https?://(dx\.)?doi\.org/", re.IGNORECASE)
_DOI_PREFIX = re.compile(r"^doi:\s*", re.IGNORECASE)
_YEAR = re.compile(r"(\d{4})")

LLM_SOURCE = "llm"


def similarity_status(exact: bool, similarity: float, threshold: float) -> ComparisonStatus:
    """exact -> correct, similarity above threshold -> partial, else incorrect."""
    if exact:
        return ComparisonStatus.CORRECT
    if similarity > threshold:
        return ComparisonStatus.PARTIAL
    return ComparisonStatus.INCORRECT


def normalize_doi(doi: str | None) -> str:
    if not doi:
        return ""
    s = str(doi).strip().lower()
    s = _DOI_RESOLVER.sub("", s)
    return _DOI_PREFIX.sub("", s)


def extract_year(value: Any) -> str | None:
    """First four-digit year in a date-like value (``2021-03-04``, ``March 2021``, 2021)."""
    if value is None or value == "":
        return None
    match = _YEAR.search(str(value))
    return match.group(1) if match else None


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def _text_field(truth: str | None, extracted: str | None, threshold: float) -> FieldComparison:
    exact = bool(truth) and truth == extracted
    similarity = text_similarity(truth, extracted)
    return FieldComparison(
        ground_truth=truth,
        extracted=extracted,
        exact_match=exact,
        similarity=similarity,
        status=similarity_status(exact, similarity, threshold),
    )


def _exact_field(truth: str | None, extracted: str | None) -> FieldComparison:
    exact = bool(truth) and truth == extracted
    return FieldComparison(
        ground_truth=truth,
        extracted=extracted,
        exact_match=exact,
        similarity=1.0 if exact else 0.0,
        status=ComparisonStatus.CORRECT if exact else ComparisonStatus.INCORRECT,
    )


def compare_metadata(
    truth: GroundTruthRecord,
    extracted: ExtractedMetadata | None,
    status_cfg: StatusConfig | None = None,
) -> MetadataComparison | None:
    """
    Compare title, DOI, publication year, venue and authors.

    Overall accuracy is the mean similarity of the five fields.
    Returns None when the system produced no metadata.
    """
    if extracted is None:
        return None
    threshold = (status_cfg or StatusConfig()).partial_similarity

    doi = _exact_field(normalize_doi(truth.doi), normalize_doi(extracted.doi))
    doi.ground_truth, doi.extracted = truth.doi, extracted.doi

    truth_authors = truth.authors
    authors_exact = truth_authors == list(extracted.authors)
    authors_sim = list_similarity(truth_authors, extracted.authors)

    fields = {
        "title": _text_field(truth.title, extracted.title, threshold),
        "doi": doi,
        "publication_year": _exact_field(extract_year(truth.publication_year), extract_year(extracted.publication_date)),
        "venue": _text_field(truth.venue, extracted.venue, threshold),
        "authors": FieldComparison(
            ground_truth=truth_authors,
            extracted=list(extracted.authors),
            exact_match=authors_exact,
            similarity=authors_sim,
            status=similarity_status(authors_exact, authors_sim, threshold),
        ),
    }

    statuses = [f.status for f in fields.values()]
    return MetadataComparison(
        fields=fields,
        accuracy=sum(f.similarity for f in fields.values()) / len(fields),
        correct_fields=statuses.count(ComparisonStatus.CORRECT),
        partial_fields=statuses.count(ComparisonStatus.PARTIAL),
        incorrect_fields=statuses.count(ComparisonStatus.INCORRECT),
        total_fields=len(fields),
    )


# ---------------------------------------------------------------------------
# Research field / problem / template
# ---------------------------------------------------------------------------


def _field_relevance(
    scorer: RelevanceScorer | None,
    truth: GroundTruthRecord,
    selected: CandidateEntity | None,
) -> RelevanceResult | None:
    if scorer is None or selected is None:
        return None
    # Prefer stable ids when both resolve; labels are display-only
    if (
        truth.research_field_id
        and selected.id
        and scorer.index.contains(truth.research_field_id)
        and scorer.index.contains(selected.id)
    ):
        return scorer.score_ids(
            truth.research_field_id,
            selected.id,
            truth.research_field_name,
            selected.display_name,
        )
    if truth.research_field_name and selected.display_name:
        return scorer.score(truth.research_field_name, selected.display_name)
    return None


def compare_research_field(
    truth: GroundTruthRecord,
    block: ResearchFieldsBlock | None,
    scorer: RelevanceScorer | None = None,
    status_cfg: StatusConfig | None = None,
) -> EntityComparison | None:
    """
    Compare the selected research field (explicit selection, else the best-ranked one).

    Status: id match -> correct; ground truth among the top-k predictions or a
    name similarity above the threshold -> partial; otherwise incorrect.
    """
    if block is None:
        return None
    cfg = status_cfg or StatusConfig()

    selected = block.selected_field or (block.fields[0] if block.fields else None)
    top = block.fields[: cfg.top_k_fields]
    gt_id = truth.research_field_id

    exact = bool(gt_id) and selected is not None and selected.id == gt_id
    in_top = bool(gt_id) and any(f.id == gt_id for f in top)
    name_sim = text_similarity(truth.research_field_name, selected.display_name if selected else "")

    if exact:
        status = ComparisonStatus.CORRECT
    elif in_top or name_sim > cfg.partial_similarity:
        status = ComparisonStatus.PARTIAL
    else:
        status = ComparisonStatus.INCORRECT

    return EntityComparison(
        ground_truth_id=gt_id,
        ground_truth_name=truth.research_field_name,
        extracted_id=selected.id if selected else None,
        extracted_name=selected.display_name if selected else None,
        extracted_source=selected.source if selected else None,
        exact_match=exact,
        name_similarity=name_sim,
        status=status,
        in_top5=in_top,
        relevance=_field_relevance(scorer, truth, selected),
        candidates=[f.display_name for f in top],
    )


def has_ground_truth_problem(truth: GroundTruthRecord) -> bool:
    gt_id = (truth.research_problem_id or "").strip()
    return bool(gt_id) and gt_id != NO_RESEARCH_PROBLEM


def compare_research_problem(
    truth: GroundTruthRecord,
    block: ResearchProblemsBlock | None,
    status_cfg: StatusConfig | None = None,
) -> EntityComparison | None:
    """
    Compare the selected research problem.

    With a ground-truth problem: id match -> correct; found among the
    candidate problems or name similarity above the threshold -> partial.
    Without one: a system-generated problem is a correct detection, and no
    problem on either side is ``no_problem`` (not scored).
    """
    if block is None:
        return None
    cfg = status_cfg or StatusConfig()
    selected = block.selected_problem

    if has_ground_truth_problem(truth):
        gt_id = truth.research_problem_id
        exact = selected is not None and selected.id == gt_id
        found = any(p.id == gt_id for p in block.orkg_problems)
        name_sim = text_similarity(truth.research_problem_name, selected.display_name if selected else "")

        if exact:
            status = ComparisonStatus.CORRECT
        elif found or name_sim > cfg.partial_similarity:
            status = ComparisonStatus.PARTIAL
        else:
            status = ComparisonStatus.INCORRECT

        return EntityComparison(
            ground_truth_id=gt_id,
            ground_truth_name=truth.research_problem_name,
            extracted_id=selected.id if selected else None,
            extracted_name=selected.display_name if selected else None,
            extracted_source=selected.source if selected else None,
            exact_match=exact,
            name_similarity=name_sim,
            status=status,
            found_in_orkg=found,
            candidates=[p.display_name for p in block.orkg_problems],
        )

    llm_generated = (selected is not None and selected.source == LLM_SOURCE) or bool(block.llm_problem)
    return EntityComparison(
        ground_truth_id=None,
        ground_truth_name=NO_RESEARCH_PROBLEM,
        extracted_id=selected.id if selected else None,
        extracted_name=selected.display_name if selected else None,
        extracted_source=selected.source if selected else None,
        status=ComparisonStatus.CORRECT if llm_generated else ComparisonStatus.NO_PROBLEM,
        llm_generated=llm_generated,
    )


def compare_template(
    truth: GroundTruthRecord,
    block: TemplatesBlock | None,
    status_cfg: StatusConfig | None = None,
) -> EntityComparison | None:
    """
    Compare the selected template.

    id match -> correct; name similarity above the threshold -> partial;
    a system-generated template -> llm_generated; otherwise incorrect.
    """
    if block is None:
        return None
    cfg = status_cfg or StatusConfig()
    selected = block.selected_template

    exact = bool(truth.template_id) and selected is not None and selected.id == truth.template_id
    name_sim = text_similarity(truth.template_name, selected.display_name if selected else "")
    llm_used = (selected is not None and selected.source == LLM_SOURCE) or bool(block.llm_template)

    if exact:
        status = ComparisonStatus.CORRECT
    elif name_sim > cfg.partial_similarity:
        status = ComparisonStatus.PARTIAL
    elif llm_used:
        status = ComparisonStatus.LLM_GENERATED
    else:
        status = ComparisonStatus.INCORRECT

    return EntityComparison(
        ground_truth_id=truth.template_id,
        ground_truth_name=truth.template_name,
        extracted_id=selected.id if selected else None,
        extracted_name=selected.display_name if selected else None,
        extracted_source=selected.source if selected else None,
        exact_match=exact,
        name_similarity=name_sim,
        status=status,
        llm_generated=llm_used,
    )


# ---------------------------------------------------------------------------
# Generic field accuracy and confusion matrix
# ---------------------------------------------------------------------------


def field_accuracy(truth_value: Any, extracted_value: Any, status_cfg: StatusConfig | None = None) -> FieldAccuracy:
    """Accuracy of a single free-text field, distinguishing missing values on either side."""
    if not truth_value and not extracted_value:
        return FieldAccuracy(accuracy=1.0, precision=1.0, recall=1.0, f1=1.0, status=ComparisonStatus.BOTH_EMPTY)
    if not truth_value:
        return FieldAccuracy(accuracy=0.0, precision=0.0, recall=0.0, f1=0.0, status=ComparisonStatus.FALSE_POSITIVE)
    if not extracted_value:
        return FieldAccuracy(accuracy=0.0, precision=0.0, recall=0.0, f1=0.0, status=ComparisonStatus.FALSE_NEGATIVE)

    threshold = (status_cfg or StatusConfig()).partial_similarity
    similarity = text_similarity(str(truth_value), str(extracted_value))
    return FieldAccuracy(
        accuracy=similarity,
        precision=similarity,
        recall=similarity,
        f1=similarity,
        status=similarity_status(similarity == 1.0, similarity, threshold),
    )


def confusion_matrix(statuses: Iterable[ComparisonStatus | str]) -> ConfusionMatrix:
    """
    Detection confusion matrix over comparison statuses.

    correct -> TP, incorrect -> FP, false_negative -> FN, both_empty -> TN.
    Other statuses (partial, llm_generated, no_problem) are not counted.
    """
    cm = ConfusionMatrix()
    for raw in statuses:
        status = ComparisonStatus(raw)
        if status is ComparisonStatus.CORRECT:
            cm.tp += 1
        elif status is ComparisonStatus.INCORRECT:
            cm.fp += 1
        elif status is ComparisonStatus.FALSE_NEGATIVE:
            cm.fn += 1
        elif status is ComparisonStatus.BOTH_EMPTY:
            cm.tn += 1

    cm.precision = cm.tp / (cm.tp + cm.fp) if (cm.tp + cm.fp) else 0.0
    cm.recall = cm.tp / (cm.tp + cm.fn) if (cm.tp + cm.fn) else 0.0
    cm.f1 = 2 * cm.precision * cm.recall / (cm.precision + cm.recall) if (cm.precision + cm.recall) else 0.0
    total = cm.tp + cm.tn + cm.fp + cm.fn
    cm.accuracy = (cm.tp + cm.tn) / total if total else 0.0
    return cm
