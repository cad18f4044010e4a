"""
bodymap-pipeline - Body part expression classification for RNA-seq atlases.

This package provides:
- Sample QC and aggregation of per-sample TPM into body part medians
- Tau tissue-specificity scoring
- Null / Weak / Broad / Specific expression classification
- Specific gene sets per body part for enrichment testing
- CSV export

Example:
    >>> from bodymap_pipeline import Pipeline, Config
    >>>
    >>> pipeline = Pipeline(Config(), output_dir="results/")
    >>> result = pipeline.run(tpm, sample_metadata)
    >>> result.specific_genes["Leaf"]
"""

__version__ = "0.1.0"

# Core infrastructure
from bodymap_pipeline.core.config import Config, ClassifierConfig, AggregationConfig
from bodymap_pipeline.core.errors import InvalidInputError

# Classification
from bodymap_pipeline.classification import (
    ClassificationResult,
    ExpressionCategory,
    ExpressionClassifier,
    classify_genes,
)

# Main Pipeline class
from bodymap_pipeline.pipeline import Pipeline, PipelineResult, create_pipeline

__all__ = [
    # Version
    "__version__",
    # Pipeline
    "Pipeline",
    "PipelineResult",
    "create_pipeline",
    # Core
    "Config",
    "ClassifierConfig",
    "AggregationConfig",
    "InvalidInputError",
    # Classification
    "ClassificationResult",
    "ExpressionCategory",
    "ExpressionClassifier",
    "classify_genes",
]
