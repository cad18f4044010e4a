"""
Main Pipeline class that chains aggregation, classification and export.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import logging

import pandas as pd

from bodymap_pipeline.aggregation import AggregatedData, BodyPartAggregator
from bodymap_pipeline.classification import (
    ClassificationResult,
    ExpressionClassifier,
    category_counts,
    specific_genes_by_part,
)
from bodymap_pipeline.core.config import Config
from bodymap_pipeline.export import CSVWriter

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of pipeline execution."""

    aggregated: Optional[AggregatedData] = None
    classification: Optional[ClassificationResult] = None
    specific_genes: dict[str, list[str]] = field(default_factory=dict)
    output_paths: dict[str, Path] = field(default_factory=dict)
    metrics: dict[str, Any] = field(default_factory=dict)


class Pipeline:
    """Body part expression pipeline.

    Example:
        >>> from bodymap_pipeline import Pipeline, Config
        >>>
        >>> pipeline = Pipeline(Config(), output_dir="results/")
        >>> result = pipeline.run(tpm, sample_metadata)
        >>> result.metrics["n_specific"]
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        output_dir: Optional[Path] = None,
    ):
        """Initialize pipeline.

        Parameters
        ----------
        config : Config, optional
            Pipeline configuration
        output_dir : Path, optional
            Output directory; overrides ``config.output_dir``. Nothing is
            written when neither is set.
        """
        self.config = config or Config()
        if output_dir is not None:
            self.output_dir = Path(output_dir)
        else:
            self.output_dir = self.config.output_dir

        self.aggregator = BodyPartAggregator(self.config.aggregation)
        self.classifier = ExpressionClassifier(self.config.classifier)

    def run(
        self,
        expression: pd.DataFrame,
        metadata: pd.DataFrame,
    ) -> PipelineResult:
        """Aggregate samples into body parts and classify genes.

        Parameters
        ----------
        expression : pd.DataFrame
            Per-sample abundance (genes x samples, TPM)
        metadata : pd.DataFrame
            Sample metadata with a body part column

        Returns
        -------
        PipelineResult
            Aggregated matrix, classification and written paths
        """
        total_steps = 3 if self.output_dir else 2
        result = PipelineResult()

        try:
            self._update_progress(1, total_steps, "Aggregating samples by body part...")
            result.aggregated = self.aggregator.aggregate(expression, metadata)

            self._update_progress(2, total_steps, "Classifying genes...")
            result.classification = self.classifier.classify(result.aggregated.expression)
            result.specific_genes = specific_genes_by_part(result.classification)

            if self.output_dir:
                self._update_progress(3, total_steps, f"Writing tables to {self.output_dir}...")
                writer = CSVWriter(self.output_dir, float_format=self.config.float_format)
                result.output_paths["expression"] = writer.write_expression(
                    result.aggregated.expression
                )
                result.output_paths.update(writer.write_all(result.classification))

            result.metrics = self._compute_metrics(result)
            return result

        except Exception as e:
            logger.error(f"Pipeline failed: {e}")
            raise

    def classify_matrix(
        self,
        expression: pd.DataFrame,
        log_expression: Optional[pd.DataFrame] = None,
    ) -> ClassificationResult:
        """Classify a pre-computed genes x body parts matrix."""
        return self.classifier.classify(expression, log_expression)

    def _compute_metrics(self, result: PipelineResult) -> dict:
        """Compute summary metrics from results."""
        metrics = {}

        if result.aggregated is not None:
            metrics["n_genes"] = result.aggregated.n_genes
            metrics["n_body_parts"] = result.aggregated.n_parts
            metrics["n_samples"] = result.aggregated.stats.get("n_retained_samples", 0)

        if result.classification is not None:
            counts = category_counts(result.classification)
            for category, n in counts.items():
                metrics[f"n_{category.lower()}"] = int(n)
            metrics["n_excluded"] = len(result.classification.excluded_genes)

        return metrics

    def _update_progress(self, step: int, total: int, message: str) -> None:
        """Log pipeline progress."""
        logger.info(f"[{step}/{total}] {message}")


def create_pipeline(
    output_dir: Optional[str] = None,
    specificity_threshold: Optional[float] = None,
    min_mapping_rate: Optional[float] = None,
) -> Pipeline:
    """Factory function to create pipeline with common settings.

    Parameters
    ----------
    output_dir : str, optional
        Output directory
    specificity_threshold : float, optional
        Tau cutoff for Specific genes
    min_mapping_rate : float, optional
        Sample QC mapping-rate cutoff

    Returns
    -------
    Pipeline
        Configured pipeline instance
    """
    from bodymap_pipeline.core.config import AggregationConfig, ClassifierConfig

    classifier = ClassifierConfig()
    if specificity_threshold is not None:
        classifier = ClassifierConfig(specificity_threshold=specificity_threshold)

    aggregation = AggregationConfig()
    if min_mapping_rate is not None:
        aggregation = AggregationConfig(min_mapping_rate=min_mapping_rate)

    return Pipeline(
        config=Config(classifier=classifier, aggregation=aggregation),
        output_dir=Path(output_dir) if output_dir else None,
    )
