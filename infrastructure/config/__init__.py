"""
Configuration management: models, loading, and validation.

Handles:
- RunConfig: Main experiment configuration
- ScoringConfig: Relevance weights, status thresholds, tiers, expertise tables
- Taxonomy loading from YAML/JSON

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import (
    load_run_config,
    load_scoring_config,
    load_taxonomy_config,
)
from infrastructure.config.models import (
    BlendConfig,
    ExpertiseConfig,
    HierarchyScoreConfig,
    RatingScale,
    RatingsConfig,
    RelevanceWeights,
    # Main config
    RunConfig,
    ScoringConfig,
    StatsConfig,
    StatusConfig,
    TierBand,
    TierConfig,
)

__all__ = [
    # Main config (most commonly used)
    "RunConfig",
    "load_run_config",
    # Scoring
    "ScoringConfig",
    "RelevanceWeights",
    "HierarchyScoreConfig",
    "BlendConfig",
    "StatusConfig",
    "TierBand",
    "TierConfig",
    "ExpertiseConfig",
    "RatingScale",
    "RatingsConfig",
    # Stats
    "StatsConfig",
    # Loaders
    "load_scoring_config",
    "load_taxonomy_config",
]
