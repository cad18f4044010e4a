"""Pytest configuration and fixtures."""

import pytest
import numpy as np
import pandas as pd
from pathlib import Path
import tempfile


@pytest.fixture
def bodypart_expression():
    """Median TPM matrix with one gene per category."""
    return pd.DataFrame(
        {
            "Leaf": [0.2, 3.0, 10.0, 1000.0, 50.0, 1.0],
            "Root": [0.1, 2.0, 1.0, 1.0, 40.0, 1.0],
            "Shoot": [0.5, 4.0, 1.0, 1.0, 45.0, 0.0],
        },
        index=["null_gene", "weak_gene", "broad_gene", "specific_gene",
               "flat_gene", "edge_null_gene"],
    )


@pytest.fixture
def sample_tpm():
    """Per-sample TPM (genes x samples) with three replicates per body part."""
    np.random.seed(42)
    parts = {"Leaf": 50.0, "Root": 2.0, "Seed": 0.5}
    columns, data = [], []
    for part, level in parts.items():
        for rep in range(3):
            columns.append(f"{part.lower()}_{rep}")
            data.append(np.abs(np.random.randn(20)) + level)
    return pd.DataFrame(
        np.array(data).T,
        index=[f"gene_{i}" for i in range(20)],
        columns=columns,
    )


@pytest.fixture
def sample_metadata(sample_tpm):
    """Sample metadata with body parts and mapping rates."""
    parts = [c.split("_")[0].capitalize() for c in sample_tpm.columns]
    rates = [90.0, 85.0, 20.0, 88.0, 91.0, 87.0, 80.0, 75.0, 70.0]
    return pd.DataFrame(
        {"body_part": parts, "mapping_rate": rates},
        index=sample_tpm.columns,
    )


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
