"""
Shared containers and transforms for sample aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np
import pandas as pd

from bodymap_pipeline.core.config import AggregationConfig


@dataclass
class AggregatedData:
    """
    Result of aggregating replicate samples into body parts.

    Contains the summary expression matrix and per-part metadata.
    """

    expression: pd.DataFrame
    """Expression matrix (genes x body parts)."""

    metadata: pd.DataFrame
    """Per body part metadata (number of samples, sample ids)."""

    n_parts: int
    """Number of body parts (columns)."""

    n_genes: int
    """Number of genes (rows)."""

    config: AggregationConfig
    """Configuration used."""

    stats: dict[str, Any] = field(default_factory=dict)
    """Additional statistics (e.g., samples dropped by QC)."""

    def filter_genes(self, gene_names: list[str]) -> "AggregatedData":
        """Filter to specific genes."""
        gene_mask = self.expression.index.isin(gene_names)
        expr_filtered = self.expression.loc[gene_mask].copy()

        return AggregatedData(
            expression=expr_filtered,
            metadata=self.metadata.copy(),
            n_parts=self.n_parts,
            n_genes=len(expr_filtered),
            config=self.config,
            stats=self.stats,
        )

    def log_expression(self, pseudocount: float = 1.0, base: float = 2.0) -> pd.DataFrame:
        """Log-transformed copy of the summary matrix."""
        return log_transform(self.expression, pseudocount=pseudocount, base=base)


def log_transform(
    expr: Union[np.ndarray, pd.DataFrame],
    pseudocount: float = 1.0,
    base: float = 2.0,
) -> Union[np.ndarray, pd.DataFrame]:
    """
    Log transform expression.

    Args:
        expr: Expression matrix.
        pseudocount: Pseudocount to add before log.
        base: Logarithm base.

    Returns:
        Log-transformed expression (same type as input).
    """
    if base == 2.0:
        return np.log2(expr + pseudocount)
    return np.log(expr + pseudocount) / np.log(base)
