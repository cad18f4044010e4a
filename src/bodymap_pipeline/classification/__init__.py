"""
Expression classification.

Tau tissue-specificity scoring and Null/Weak/Broad/Specific categories.
"""

from bodymap_pipeline.classification.specificity import (
    TissueSpecificityScorer,
    compute_tau,
    compute_tau_matrix,
)
from bodymap_pipeline.classification.classifier import (
    ClassificationResult,
    ExpressionCategory,
    ExpressionClassifier,
    GeneClassification,
    classify_genes,
)
from bodymap_pipeline.classification.summary import (
    category_counts,
    specific_genes_by_part,
    specificity_membership,
    summarize_parts,
)

__all__ = [
    "TissueSpecificityScorer",
    "compute_tau",
    "compute_tau_matrix",
    "ClassificationResult",
    "ExpressionCategory",
    "ExpressionClassifier",
    "GeneClassification",
    "classify_genes",
    "category_counts",
    "specific_genes_by_part",
    "specificity_membership",
    "summarize_parts",
]
