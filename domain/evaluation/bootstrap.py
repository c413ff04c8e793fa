"""Bootstrap confidence interval computation."""

from collections.abc import Callable, Sequence

import numpy as np

from domain.schemas import ConfidenceInterval
from infrastructure.config.models import StatsConfig


def bootstrap_ci(
    values: np.ndarray,
    stat_fn: Callable[[np.ndarray], float],
    n_boot: int,
    alpha: float,
    seed: int,
) -> tuple[float, float]:
    """
    Non-parametric bootstrap CI for a statistic of one sample (e.g., mean score).

    Args:
        values: Observed values
        stat_fn: Function that computes a statistic from a resample
        n_boot: Number of bootstrap samples
        alpha: Significance level (e.g., 0.05 for 95% CI)
        seed: Random seed for reproducibility

    Returns:
        Tuple of (lower, upper) confidence interval bounds
    """
    rng = np.random.default_rng(seed)
    n = len(values)
    stats = np.empty(n_boot, dtype=float)

    for b in range(n_boot):
        sample_idx = rng.integers(0, n, size=n)
        stats[b] = stat_fn(values[sample_idx])

    lower = float(np.percentile(stats, 100 * (alpha / 2)))
    upper = float(np.percentile(stats, 100 * (1 - alpha / 2)))
    return lower, upper


def bootstrap_mean_ci(values: Sequence[float], stats: StatsConfig | None = None) -> ConfidenceInterval | None:
    """CI of the mean of ``values``; None with fewer than two observations."""
    if len(values) < 2:
        return None
    cfg = stats or StatsConfig()
    lower, upper = bootstrap_ci(
        np.asarray(values, dtype=float),
        lambda sample: float(np.mean(sample)),
        n_boot=cfg.n_boot,
        alpha=cfg.alpha,
        seed=cfg.seed,
    )
    return ConfidenceInterval(lower=lower, upper=upper, n=len(values))
