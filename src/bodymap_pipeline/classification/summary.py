"""
Summaries of a classification for downstream consumers.

Produces the per-part Specific gene sets handed to enrichment testing and
the membership table used for upset plots.
"""

from __future__ import annotations

import pandas as pd

from bodymap_pipeline.classification.classifier import (
    ClassificationResult,
    ExpressionCategory,
)


def category_counts(result: ClassificationResult) -> pd.Series:
    """Number of genes in each category, Null included.

    Returns
    -------
    pd.Series
        Counts indexed by category label, in Null/Weak/Broad/Specific order
    """
    counts = {
        category.value: len(result.by_category(category))
        for category in ExpressionCategory
    }
    return pd.Series(counts, name="n_genes").rename_axis("category")


def specific_genes_by_part(result: ClassificationResult) -> dict[str, list[str]]:
    """Specific genes grouped by the body parts they are specific to.

    A gene stably expressed in several parts is listed under each of
    them. Every body part of the input appears as a key.
    """
    by_part: dict[str, list[str]] = {part: [] for part in result.body_parts}
    for record in result.records:
        for part in record.specific_parts:
            by_part[part].append(record.gene)

    return {part: sorted(genes, key=str) for part, genes in by_part.items()}


def specificity_membership(result: ClassificationResult) -> pd.DataFrame:
    """Boolean Specific genes x body parts table of specific-part membership."""
    specific = [r for r in result.records if r.category is ExpressionCategory.SPECIFIC]
    data = [
        [part in r.specific_parts for part in result.body_parts]
        for r in specific
    ]
    return pd.DataFrame(
        data,
        index=pd.Index([r.gene for r in specific], name="gene"),
        columns=result.body_parts,
        dtype=bool,
    )


def summarize_parts(result: ClassificationResult) -> pd.DataFrame:
    """Per body part counts of Specific genes and of genes peaking there.

    Returns
    -------
    pd.DataFrame
        Indexed by body part with ``n_specific``, ``n_unique_specific``
        (specific to that part alone) and ``n_max`` columns
    """
    rows = {part: {"n_specific": 0, "n_unique_specific": 0, "n_max": 0}
            for part in result.body_parts}

    for record in result.records:
        if record.max_part is not None:
            rows[record.max_part]["n_max"] += 1
        for part in record.specific_parts:
            rows[part]["n_specific"] += 1
        if len(record.specific_parts) == 1:
            rows[record.specific_parts[0]]["n_unique_specific"] += 1

    df = pd.DataFrame.from_dict(rows, orient="index")
    df.index.name = "body_part"
    return df
