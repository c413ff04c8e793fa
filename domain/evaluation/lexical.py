"""Token-level lexical similarity between two labels."""

from collections.abc import Iterable

from domain.schemas import LexicalMetrics


def tokenize(text: str | None) -> set[str]:
    """Lowercase, split on whitespace, drop empty tokens. No stemming."""
    if not text:
        return set()
    return {t for t in str(text).lower().split() if t}


def word_metrics(a: str | None, b: str | None) -> LexicalMetrics:
    """
    Compare ground-truth text ``a`` against predicted text ``b``.

    Word overlap is recall-like toward ``a`` (its denominator is the
    ground-truth token count, floored at 1). Jaccard is 0 for an empty union.
    Precision/recall are 0 when their denominator is empty.

    Args:
        a: Ground-truth label
        b: Predicted label

    Returns:
        LexicalMetrics with every score in [0, 1]
    """
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)
    matched = len(tokens_a & tokens_b)
    union = len(tokens_a | tokens_b)

    word_overlap = matched / max(1, len(tokens_a))
    jaccard = matched / union if union else 0.0
    precision = matched / len(tokens_b) if tokens_b else 0.0
    recall = matched / len(tokens_a) if tokens_a else 0.0
    f1 = 2 * precision * recall / (precision + recall) if (precision + recall) > 0 else 0.0

    return LexicalMetrics(
        word_overlap_score=word_overlap,
        jaccard_score=jaccard,
        precision=precision,
        recall=recall,
        f1_score=f1,
    )


def text_similarity(a: str | None, b: str | None) -> float:
    """
    Similarity used for metadata and entity-name comparisons.

    Empty input on either side gives 0; case-insensitive equality after
    trimming gives 1; otherwise the token-set Jaccard.
    """
    if not a or not b:
        return 0.0
    if str(a).strip().lower() == str(b).strip().lower():
        return 1.0
    return word_metrics(a, b).jaccard_score


def list_similarity(truth: Iterable[str], extracted: Iterable[str]) -> float:
    """
    F1 over normalized list items (e.g. author names).

    Two empty lists are a perfect match; one empty list scores 0.
    """
    truth_items = [str(t).strip().lower() for t in truth if t]
    extracted_items = [str(e).strip().lower() for e in extracted if e]

    if not truth_items and not extracted_items:
        return 1.0
    if not truth_items or not extracted_items:
        return 0.0

    extracted_set = set(extracted_items)
    matched = sum(1 for t in truth_items if t in extracted_set)
    precision = min(1.0, matched / len(extracted_items))
    recall = matched / len(truth_items)
    if precision == 0 or recall == 0:
        return 0.0
    return 2 * precision * recall / (precision + recall)


def set_jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    return len(set_a & set_b) / len(union) if union else 0.0
