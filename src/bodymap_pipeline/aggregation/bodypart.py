"""
Body part aggregation.

Collapses per-sample abundance estimates (genes x samples TPM) into one
summary value per gene and body part, after dropping samples that fail
quantification QC.
"""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from bodymap_pipeline.aggregation.base import AggregatedData
from bodymap_pipeline.core.config import AggregationConfig

logger = logging.getLogger(__name__)


def filter_samples(
    metadata: pd.DataFrame,
    config: Optional[AggregationConfig] = None,
) -> pd.DataFrame:
    """Drop samples without a body part or below the mapping-rate cutoff.

    Parameters
    ----------
    metadata : pd.DataFrame
        Sample metadata indexed by sample id
    config : AggregationConfig, optional
        Column names and QC thresholds

    Returns
    -------
    pd.DataFrame
        Metadata for the retained samples, original order preserved
    """
    config = config or AggregationConfig()

    if config.body_part_col not in metadata.columns:
        raise ValueError(f"Body part column '{config.body_part_col}' not in metadata")

    keep = metadata[config.body_part_col].notna()

    if config.min_mapping_rate > 0:
        if config.mapping_rate_col not in metadata.columns:
            raise ValueError(
                f"Mapping rate column '{config.mapping_rate_col}' not in metadata"
            )
        rate = pd.to_numeric(metadata[config.mapping_rate_col], errors="coerce")
        keep &= rate >= config.min_mapping_rate

    n_dropped = int((~keep).sum())
    if n_dropped:
        logger.info(
            "Dropped %d of %d samples (missing body part or mapping rate < %.1f)",
            n_dropped, len(metadata), config.min_mapping_rate,
        )

    return metadata.loc[keep]


class BodyPartAggregator:
    """
    Aggregates replicate samples into body parts.

    Example:
        >>> aggregator = BodyPartAggregator(AggregationConfig(min_mapping_rate=50))
        >>> result = aggregator.aggregate(tpm, metadata)
        >>> result.expression  # genes x body parts medians
    """

    def __init__(self, config: Optional[AggregationConfig] = None):
        self.config = config or AggregationConfig()

    def aggregate(
        self,
        expression: pd.DataFrame,
        metadata: pd.DataFrame,
    ) -> AggregatedData:
        """
        Aggregate samples by body part.

        Args:
            expression: Abundance matrix (genes x samples).
            metadata: Sample metadata with a body part column.

        Returns:
            Aggregated data with one column per retained body part.
        """
        config = self.config

        if config.sample_col is not None:
            if config.sample_col not in metadata.columns:
                raise ValueError(f"Sample column '{config.sample_col}' not in metadata")
            metadata = metadata.set_index(config.sample_col)

        # Align samples, keeping the expression column order
        common = [s for s in expression.columns if s in metadata.index]
        if not common:
            raise ValueError("No samples shared between expression and metadata")
        if len(common) < expression.shape[1]:
            logger.warning(
                "%d samples have no metadata and are ignored",
                expression.shape[1] - len(common),
            )

        kept = filter_samples(metadata.loc[common], config)
        parts = kept[config.body_part_col].astype(str)

        counts = parts.value_counts()
        small = counts[counts < config.min_samples]
        if len(small):
            logger.info(
                "Dropping %d body parts with fewer than %d samples: %s",
                len(small), config.min_samples, ", ".join(sorted(small.index)),
            )
            parts = parts[~parts.isin(small.index)]

        if parts.empty:
            raise ValueError("No samples left after QC filtering")

        grouped = expression[parts.index].T.groupby(parts)
        if config.method == "median":
            summary = grouped.median().T
        else:
            summary = grouped.mean().T
        summary.columns.name = None

        metadata_df = pd.DataFrame({
            "n_samples": parts.value_counts().reindex(summary.columns),
            "samples": [
                ";".join(map(str, parts.index[parts == part])) for part in summary.columns
            ],
        }, index=summary.columns)

        stats = {
            "n_input_samples": int(expression.shape[1]),
            "n_retained_samples": int(len(parts)),
            "dropped_parts": sorted(small.index),
        }

        logger.info(
            "Aggregated %d samples into %d body parts (%s)",
            len(parts), summary.shape[1], config.method,
        )

        return AggregatedData(
            expression=summary,
            metadata=metadata_df,
            n_parts=summary.shape[1],
            n_genes=summary.shape[0],
            config=config,
            stats=stats,
        )


def aggregate_body_parts(
    expression: pd.DataFrame,
    metadata: pd.DataFrame,
    body_part_col: str = "body_part",
    min_mapping_rate: float = 0.0,
    min_samples: int = 1,
) -> AggregatedData:
    """Convenience function for body part aggregation."""
    config = AggregationConfig(
        body_part_col=body_part_col,
        min_mapping_rate=min_mapping_rate,
        min_samples=min_samples,
    )
    return BodyPartAggregator(config).aggregate(expression, metadata)
