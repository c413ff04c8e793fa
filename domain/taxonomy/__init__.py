"""
Taxonomy management: indexing, path resolution and relationship analysis.

This module handles the research-field hierarchy.
All functions in this module are pure (no file I/O).
"""

from domain.taxonomy.index import TaxonomyIndex
from domain.taxonomy.loader import parse_taxonomy_config
from domain.taxonomy.normalizer import normalize_label
from domain.taxonomy.relationships import (
    RelationshipAnalyzer,
    common_prefix_length,
    describe_relationship,
)

__all__ = [
    "TaxonomyIndex",
    "RelationshipAnalyzer",
    "common_prefix_length",
    "describe_relationship",
    "normalize_label",
    "parse_taxonomy_config",
]
