"""
Sample aggregation.

Collapses replicate samples into per-body-part summary expression.
"""

from bodymap_pipeline.aggregation.base import AggregatedData, log_transform
from bodymap_pipeline.aggregation.bodypart import (
    BodyPartAggregator,
    aggregate_body_parts,
    filter_samples,
)

__all__ = [
    "AggregatedData",
    "log_transform",
    "BodyPartAggregator",
    "aggregate_body_parts",
    "filter_samples",
]
