"""
Core infrastructure for bodymap-pipeline.

Provides:
- Configuration management
- Classification policy constants
- Error types
"""

from bodymap_pipeline.core.config import (
    Config,
    ClassifierConfig,
    AggregationConfig,
    EXPRESSED_THRESHOLD,
    STABLE_THRESHOLD,
    SPECIFICITY_THRESHOLD,
)
from bodymap_pipeline.core.errors import InvalidInputError

__all__ = [
    "Config",
    "ClassifierConfig",
    "AggregationConfig",
    "EXPRESSED_THRESHOLD",
    "STABLE_THRESHOLD",
    "SPECIFICITY_THRESHOLD",
    "InvalidInputError",
]
