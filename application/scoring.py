"""Per-paper scoring over an optional worker pool."""

import contextvars
import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from domain.schemas import EvaluationRecord
from infrastructure.observability import paper_context

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _with_paper_context(score_fn: Callable[[EvaluationRecord], R], record: EvaluationRecord) -> R:
    with paper_context(record.token):
        return score_fn(record)


def score_papers(
    records: Sequence[EvaluationRecord],
    score_fn: Callable[[EvaluationRecord], R],
    *,
    max_workers: int | None = None,
) -> list[R]:
    """
    Apply ``score_fn`` to every record and return the results in input order.

    Records are independent, so with ``max_workers > 1`` they are scored on a
    thread pool. Each task runs in a copy of the caller's context so the run
    tag reaches worker log lines. The call returns only once every record is
    scored; aggregation happens after this barrier. An exception in one record
    propagates after the pool shuts down.

    Args:
        records: Evaluation records to score
        score_fn: Pure per-record scoring function
        max_workers: Worker threads; None or 1 scores sequentially

    Returns:
        One result per record, same order as ``records``
    """
    if not records:
        return []

    if max_workers is None or max_workers <= 1 or len(records) == 1:
        logger.info("Scoring %d paper(s) sequentially", len(records))
        return [_with_paper_context(score_fn, r) for r in records]

    workers = min(max_workers, len(records))
    logger.info("Scoring %d paper(s) on %d worker threads", len(records), workers)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="score") as executor:
        futures = [
            executor.submit(contextvars.copy_context().run, _with_paper_context, score_fn, r) for r in records
        ]
        results = [f.result() for f in futures]

    logger.debug("All %d paper(s) scored", len(results))
    return results
