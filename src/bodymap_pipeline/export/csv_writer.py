"""
CSV output writer for tabular exports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd

from bodymap_pipeline.classification.classifier import ClassificationResult
from bodymap_pipeline.classification.summary import (
    category_counts,
    specific_genes_by_part,
    summarize_parts,
)

PART_SEPARATOR = ";"


class CSVWriter:
    """Writes matrices and classification results to CSV files."""

    def __init__(
        self,
        output_dir: Path,
        include_index: bool = True,
        float_format: str = "%.6g",
    ):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.include_index = include_index
        self.float_format = float_format

    def write_matrix(
        self,
        matrix: pd.DataFrame,
        filename: str,
        index_label: Optional[str] = None,
    ) -> Path:
        """Write matrix to CSV.

        Parameters
        ----------
        matrix : pd.DataFrame
            Matrix to write
        filename : str
            Output filename
        index_label : str, optional
            Label for index column

        Returns
        -------
        Path
            Path to written file
        """
        path = self.output_dir / filename
        matrix.to_csv(
            path,
            index=self.include_index,
            index_label=index_label,
            float_format=self.float_format,
        )
        return path

    def write_expression(
        self,
        expression: pd.DataFrame,
        filename: str = "bodypart_expression.csv",
    ) -> Path:
        """Write a genes x body parts summary matrix."""
        return self.write_matrix(expression, filename, index_label="gene")

    def write_classification(
        self,
        result: ClassificationResult,
        filename: str = "classification.csv",
    ) -> Path:
        """Write one row per classified gene.

        Specific parts are joined with ``;`` and left empty for genes
        that are not Specific.
        """
        df = result.to_dataframe()
        df["specific_parts"] = df["specific_parts"].map(PART_SEPARATOR.join)
        return self.write_matrix(df, filename, index_label="gene")

    def write_specific_gene_sets(
        self,
        result: ClassificationResult,
        filename: str = "specific_genes.csv",
    ) -> Path:
        """Write Specific gene sets in long format (body_part, gene)."""
        rows = [
            {"body_part": part, "gene": gene}
            for part, genes in specific_genes_by_part(result).items()
            for gene in genes
        ]
        df = pd.DataFrame(rows, columns=["body_part", "gene"])

        path = self.output_dir / filename
        df.to_csv(path, index=False)
        return path

    def write_category_counts(
        self,
        result: ClassificationResult,
        filename: str = "category_counts.csv",
    ) -> Path:
        """Write gene counts per category."""
        return self.write_matrix(category_counts(result).to_frame(), filename)

    def write_part_summary(
        self,
        result: ClassificationResult,
        filename: str = "bodypart_summary.csv",
    ) -> Path:
        """Write per body part Specific counts."""
        return self.write_matrix(summarize_parts(result), filename)

    def write_all(self, result: ClassificationResult) -> dict[str, Path]:
        """Write every classification table; returns paths by table name."""
        return {
            "classification": self.write_classification(result),
            "specific_genes": self.write_specific_gene_sets(result),
            "category_counts": self.write_category_counts(result),
            "bodypart_summary": self.write_part_summary(result),
        }


def write_classification_csv(
    result: ClassificationResult,
    output_dir: Path,
    filename: str = "classification.csv",
) -> Path:
    """Convenience function to write the classification CSV."""
    writer = CSVWriter(output_dir)
    return writer.write_classification(result, filename)
