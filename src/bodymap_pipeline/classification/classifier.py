"""
Expression category classification.

Assigns every gene of a genes x body parts summary matrix to one of four
categories from its tau score and the number of body parts where it is
expressed (> 1) or stably expressed (> 5):

    Null      expressed in no body part
    Weak      expressed, but stably expressed in no body part
    Broad     stably expressed somewhere, tau < 0.85
    Specific  stably expressed somewhere, tau >= 0.85

Null genes are not scored and are left out of the emitted records; their
ids are kept on the result for counting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np
import pandas as pd

from bodymap_pipeline.aggregation.base import log_transform
from bodymap_pipeline.classification.specificity import TissueSpecificityScorer
from bodymap_pipeline.core.config import ClassifierConfig
from bodymap_pipeline.core.errors import InvalidInputError

logger = logging.getLogger(__name__)


class ExpressionCategory(str, Enum):
    """Expression category labels."""

    NULL = "Null"
    WEAK = "Weak"
    BROAD = "Broad"
    SPECIFIC = "Specific"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GeneClassification:
    """Classification record for a single gene."""

    gene: str
    score: float  # Tau in log space (0-1)
    category: ExpressionCategory
    specific_parts: tuple[str, ...] = ()
    max_part: Optional[str] = None


@dataclass
class ClassificationResult:
    """Classification of every non-Null gene of a matrix."""

    records: list[GeneClassification]
    """One record per scored gene, in input order."""

    body_parts: list[str]
    """Body parts of the input matrix, in column order."""

    null_genes: list[str] = field(default_factory=list)
    """Genes expressed in no body part (not emitted as records)."""

    excluded_genes: list[str] = field(default_factory=list)
    """Genes dropped for missing or non-finite values."""

    config: ClassifierConfig = field(default_factory=ClassifierConfig)
    """Thresholds used."""

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def by_category(self, category: ExpressionCategory | str) -> list[str]:
        """Genes assigned to ``category``."""
        category = ExpressionCategory(category)
        if category is ExpressionCategory.NULL:
            return list(self.null_genes)
        return [r.gene for r in self.records if r.category is category]

    def to_dataframe(self) -> pd.DataFrame:
        """Records as a table indexed by gene."""
        df = pd.DataFrame(
            {
                "score": [r.score for r in self.records],
                "category": [r.category.value for r in self.records],
                "specific_parts": [r.specific_parts for r in self.records],
                "max_part": [r.max_part for r in self.records],
            },
            index=pd.Index([r.gene for r in self.records], name="gene"),
        )
        return df


class ExpressionClassifier:
    """
    Classifies genes into Null / Weak / Broad / Specific.

    Example:
        >>> classifier = ExpressionClassifier()
        >>> result = classifier.classify(medians)  # genes x body parts TPM
        >>> result.by_category("Specific")
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()
        self.scorer = TissueSpecificityScorer()

    def validate(self, expression: pd.DataFrame) -> tuple[pd.DataFrame, list[str]]:
        """Check matrix structure and drop genes with non-finite values.

        Parameters
        ----------
        expression : pd.DataFrame
            Summary expression (genes x body parts)

        Returns
        -------
        tuple[pd.DataFrame, list[str]]
            Float matrix of retained genes, ids of excluded genes
        """
        if not isinstance(expression, pd.DataFrame):
            raise InvalidInputError(
                f"Expected a pandas DataFrame, got {type(expression).__name__}"
            )

        dup_genes = expression.index[expression.index.duplicated()].unique()
        if len(dup_genes):
            raise InvalidInputError(
                f"Duplicate gene ids: {', '.join(map(str, dup_genes[:5]))}"
            )
        dup_parts = expression.columns[expression.columns.duplicated()].unique()
        if len(dup_parts):
            raise InvalidInputError(
                f"Duplicate body part ids: {', '.join(map(str, dup_parts))}"
            )
        if expression.shape[1] < 2:
            raise InvalidInputError(
                f"At least 2 body parts are required, got {expression.shape[1]}"
            )

        non_numeric = [
            str(col) for col, dtype in expression.dtypes.items()
            if not pd.api.types.is_numeric_dtype(dtype)
        ]
        if non_numeric:
            raise InvalidInputError(
                f"Non-numeric body part columns: {', '.join(non_numeric)}"
            )

        values = expression.to_numpy(dtype=float)
        finite = np.isfinite(values).all(axis=1)
        excluded = list(expression.index[~finite])
        if excluded:
            logger.info(
                "Excluded %d genes with missing or non-finite values", len(excluded)
            )

        clean = expression.loc[finite].astype(float)
        if (clean.to_numpy() < 0).any():
            raise InvalidInputError("Expression values must be non-negative")

        return clean, excluded

    def classify(
        self,
        expression: pd.DataFrame,
        log_expression: Optional[pd.DataFrame] = None,
    ) -> ClassificationResult:
        """Classify all genes of a summary matrix.

        Parameters
        ----------
        expression : pd.DataFrame
            Summary expression on the original scale (genes x body parts)
        log_expression : pd.DataFrame, optional
            Matching log-space matrix used for scoring. Computed as
            log2(expression + 1) when not given.

        Returns
        -------
        ClassificationResult
            Records for every non-Null gene
        """
        cfg = self.config
        clean, excluded = self.validate(expression)
        log_clean = self._log_matrix(clean, log_expression)

        values = clean.to_numpy()
        n_expressed = (values > cfg.expressed_threshold).sum(axis=1)
        n_stable = (values > cfg.stable_threshold).sum(axis=1)

        is_null = n_expressed == 0
        null_genes = list(clean.index[is_null])

        scored = clean.loc[~is_null]
        tau = self.scorer.score(log_clean.loc[scored.index])
        max_part = self.scorer.max_part(scored) if len(scored) else pd.Series(dtype=object)

        parts = [str(p) for p in clean.columns]
        stable = values[~is_null] > cfg.stable_threshold
        n_stable_scored = n_stable[~is_null]

        records = []
        for i, gene in enumerate(scored.index):
            score = float(tau.iloc[i])

            if n_stable_scored[i] == 0:
                category = ExpressionCategory.WEAK
            elif score < cfg.specificity_threshold:
                category = ExpressionCategory.BROAD
            else:
                category = ExpressionCategory.SPECIFIC

            specific_parts: tuple[str, ...] = ()
            if category is ExpressionCategory.SPECIFIC:
                specific_parts = tuple(p for p, s in zip(parts, stable[i]) if s)
                assert specific_parts, f"Specific gene {gene} has no stable body part"

            records.append(GeneClassification(
                gene=gene,
                score=score,
                category=category,
                specific_parts=specific_parts,
                max_part=str(max_part.iloc[i]),
            ))

        logger.info(
            "Classified %d genes over %d body parts (%d Null, %d excluded)",
            len(records), len(parts), len(null_genes), len(excluded),
        )

        return ClassificationResult(
            records=records,
            body_parts=parts,
            null_genes=null_genes,
            excluded_genes=excluded,
            config=cfg,
        )

    def _log_matrix(
        self,
        clean: pd.DataFrame,
        log_expression: Optional[pd.DataFrame],
    ) -> pd.DataFrame:
        """Log-space values aligned to the validated matrix."""
        cfg = self.config
        if log_expression is None:
            return log_transform(clean, pseudocount=cfg.pseudocount, base=cfg.log_base)

        if not log_expression.columns.equals(clean.columns):
            raise InvalidInputError(
                "Log-space matrix must have the same body parts as the expression matrix"
            )
        missing = clean.index.difference(log_expression.index)
        if len(missing):
            raise InvalidInputError(
                f"{len(missing)} genes missing from the log-space matrix"
            )

        aligned = log_expression.loc[clean.index].astype(float)
        if not np.isfinite(aligned.to_numpy()).all():
            raise InvalidInputError("Log-space matrix has non-finite values")
        return aligned


def classify_genes(
    expression: pd.DataFrame,
    log_expression: Optional[pd.DataFrame] = None,
    config: Optional[ClassifierConfig] = None,
) -> ClassificationResult:
    """Convenience function for expression classification."""
    return ExpressionClassifier(config).classify(expression, log_expression)
