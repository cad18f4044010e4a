"""
Tissue specificity scoring.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from bodymap_pipeline.core.errors import InvalidInputError


def compute_tau(values: np.ndarray) -> float:
    """Compute tissue specificity index (tau) for one gene.

    Tau ranges from 0 (ubiquitous) to 1 (tissue-specific).
    Formula: tau = sum(1 - x_i/x_max) / (n - 1)

    Parameters
    ----------
    values : np.ndarray
        Non-negative, log-space expression across body parts

    Returns
    -------
    float
        Tau specificity index
    """
    values = np.asarray(values, dtype=float)
    if values.ndim != 1:
        raise InvalidInputError(f"Expected a 1-D vector, got shape {values.shape}")
    return float(compute_tau_matrix(values[np.newaxis, :])[0])


def compute_tau_matrix(values: np.ndarray) -> np.ndarray:
    """Row-wise tau for a genes x parts array.

    Rows whose maximum is zero score 0.

    Parameters
    ----------
    values : np.ndarray
        Non-negative, log-space expression (genes x body parts)

    Returns
    -------
    np.ndarray
        Tau per row, clipped to [0, 1]
    """
    values = np.asarray(values, dtype=float)
    n = values.shape[1]

    if n < 2:
        raise InvalidInputError(
            f"Tau needs at least 2 body parts, got {n}"
        )
    if (values < 0).any():
        raise InvalidInputError("Tau is undefined for negative values")

    x_max = values.max(axis=1, keepdims=True)
    safe_max = np.where(x_max > 0, x_max, 1.0)

    tau = np.sum(1 - values / safe_max, axis=1) / (n - 1)
    tau = np.where(x_max[:, 0] > 0, tau, 0.0)

    # Guard against float round-off at the edges
    return np.clip(tau, 0.0, 1.0)


class TissueSpecificityScorer:
    """Computes tau for every gene of a log-space expression matrix."""

    def score(self, log_expression: pd.DataFrame) -> pd.Series:
        """Compute tau per gene.

        Parameters
        ----------
        log_expression : pd.DataFrame
            Log-space expression (genes x body parts)

        Returns
        -------
        pd.Series
            Tau indexed by gene, named ``tau``
        """
        tau = compute_tau_matrix(log_expression.to_numpy(dtype=float))
        return pd.Series(tau, index=log_expression.index, name="tau")

    def max_part(self, expression: pd.DataFrame) -> pd.Series:
        """Body part with the highest value for each gene (first on ties)."""
        return expression.idxmax(axis=1).rename("max_part")
