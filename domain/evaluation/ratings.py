"""Conversion of user ratings onto the [0, 1] scale used by the score blend."""

import logging
import math

from infrastructure.config.models import BlendConfig, RatingScale, RatingsConfig

logger = logging.getLogger(__name__)


def normalize_user_rating(value: float | None, config: RatingsConfig | None = None) -> float | None:
    """
    Convert a user rating to [0, 1].

    Star ratings are divided by the star maximum; unit ratings pass through.
    Out-of-range values are clipped (and logged), never rejected. Missing
    or NaN ratings stay None.

    Examples:
        >>> normalize_user_rating(4, RatingsConfig(scale=RatingScale.STARS))
        0.8
        >>> normalize_user_rating(0.75)
        0.75
    """
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None

    cfg = config or RatingsConfig()
    scaled = value / cfg.star_max if cfg.scale is RatingScale.STARS else value

    if not 0.0 <= scaled <= 1.0:
        clipped = min(1.0, max(0.0, scaled))
        logger.warning("User rating %s (%s scale) outside [0, 1]; clipped to %.3f", value, cfg.scale.value, clipped)
        return clipped
    return scaled


def blend_score(automated: float | None, user_rating: float | None, blend: BlendConfig | None = None) -> float | None:
    """
    Final = automated * 0.6 + user * 0.4 when a user rating exists, else automated.

    Without an automated score there is no final score (None), even if a user
    rating exists.
    """
    if automated is None or math.isnan(automated):
        return None
    if user_rating is None:
        return automated
    b = blend or BlendConfig()
    return automated * b.automated_weight + user_rating * b.user_weight
