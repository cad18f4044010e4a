"""
Output generation.

CSV writers for summary matrices and classification tables.
"""

from bodymap_pipeline.export.csv_writer import (
    CSVWriter,
    write_classification_csv,
)

__all__ = [
    "CSVWriter",
    "write_classification_csv",
]
