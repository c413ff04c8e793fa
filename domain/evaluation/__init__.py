"""
Evaluation scoring and statistical analysis.

Provides:
- Lexical similarity and composite relevance scores
- Ground-truth comparisons (metadata, research field/problem, template)
- Evaluator expertise weights, tiers and user-rating conversion
- Tier aggregation, cohort comparison and bootstrap confidence intervals
- Tier x component tables

Most functions are pure (depend only on numpy, pandas, pydantic); *_and_save helpers write outputs to disk.
"""

from domain.evaluation.aggregation import (
    TierAggregator,
    compare_cohorts,
    make_component_score,
    summarize_evaluators,
    summarize_group,
)
from domain.evaluation.bootstrap import bootstrap_ci, bootstrap_mean_ci
from domain.evaluation.comparisons import (
    compare_metadata,
    compare_research_field,
    compare_research_problem,
    compare_template,
    confusion_matrix,
    field_accuracy,
)
from domain.evaluation.expertise import (
    ExpertiseWeightCalculator,
    assign_tier,
    confidence_level,
    format_weight_components,
    is_expert,
)
from domain.evaluation.lexical import list_similarity, text_similarity, word_metrics
from domain.evaluation.ratings import blend_score, normalize_user_rating
from domain.evaluation.relevance import RelevanceScorer, composite_relevance, hierarchy_score
from domain.evaluation.tables import (
    compute_tier_component_table,
    compute_tier_component_table_and_save,
)

__all__ = [
    # Relevance
    "RelevanceScorer",
    "hierarchy_score",
    "composite_relevance",
    "word_metrics",
    "text_similarity",
    "list_similarity",
    # Comparisons
    "compare_metadata",
    "compare_research_field",
    "compare_research_problem",
    "compare_template",
    "field_accuracy",
    "confusion_matrix",
    # Expertise
    "ExpertiseWeightCalculator",
    "assign_tier",
    "confidence_level",
    "is_expert",
    "format_weight_components",
    "normalize_user_rating",
    "blend_score",
    # Aggregation
    "TierAggregator",
    "make_component_score",
    "summarize_group",
    "compare_cohorts",
    "summarize_evaluators",
    "bootstrap_ci",
    "bootstrap_mean_ci",
    # Tables
    "compute_tier_component_table",
    "compute_tier_component_table_and_save",
]
