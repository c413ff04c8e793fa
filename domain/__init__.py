"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- schemas: Pydantic models for taxonomy, evaluation records and results
- constants: Fixed scoring weights, thresholds and lookup tables
- taxonomy: Taxonomy index, path resolution and relationships
- evaluation: Relevance, comparisons, expertise and tier aggregation
"""

from domain.schemas import (
    AccuracyReport,
    AggregateReport,
    ExpertiseTier,
    RelationshipResult,
    RelationshipType,
    RelevanceResult,
    TaxonomyNode,
)

__all__ = [
    "TaxonomyNode",
    "RelationshipType",
    "RelationshipResult",
    "RelevanceResult",
    "ExpertiseTier",
    "AggregateReport",
    "AccuracyReport",
]
