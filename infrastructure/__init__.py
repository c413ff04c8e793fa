"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Configuration loading (YAML, environment)
- Dataset loading (JSON, YAML, CSV, Excel)
- Observability (logging)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import (
    RunConfig,
    ScoringConfig,
    StatsConfig,
    load_run_config,
)

__all__ = [
    "load_run_config",
    "RunConfig",
    "ScoringConfig",
    "StatsConfig",
]
