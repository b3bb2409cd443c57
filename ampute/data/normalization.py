"""
ampute.data.normalization

Column transforms applied before weighted scoring.

Design: Statistics come from the full (complete) dataset.
"""

import torch
import pandas as pd
from dataclasses import dataclass


@dataclass(frozen=True)
class NormalizationStats:
    """Statistics for column standardization."""
    center: torch.Tensor  # [d] column means
    scale: torch.Tensor   # [d] column standard deviations (1 for constant columns)


def compute_normalization_stats(x: torch.Tensor) -> NormalizationStats:
    """Compute per-column mean and standard deviation.

    Args:
        x: [n, d] complete data.

    Returns:
        NormalizationStats object.
    """
    center = x.mean(dim=0)
    if x.shape[0] > 1:
        scale = x.std(dim=0)
    else:
        scale = torch.ones_like(center)

    # Avoid division by zero
    scale = torch.where(scale < 1e-8, torch.ones_like(scale), scale)

    return NormalizationStats(center=center, scale=scale)


def standardize_columns(x: torch.Tensor) -> torch.Tensor:
    """Center and scale every column to zero mean and unit variance."""
    stats = compute_normalization_stats(x)
    return (x - stats.center.unsqueeze(0)) / stats.scale.unsqueeze(0)


def rank_transform(x: torch.Tensor) -> torch.Tensor:
    """Replace each column by its average rank divided by n.

    Ties share the mean of the ranks they span, so discrete variables map
    to evenly spread quantile levels in (0, 1].
    """
    n = x.shape[0]
    frame = pd.DataFrame(x.detach().cpu().numpy())
    ranks = frame.rank(axis=0, method="average").to_numpy()
    return torch.as_tensor(ranks / n, dtype=x.dtype)


def prepare_scoring_data(
    x: torch.Tensor,
    standardized: bool = True,
    continuous: bool = True,
) -> torch.Tensor:
    """Transform data into the space weighted scores are computed in.

    Args:
        x: [n, d] complete data.
        standardized: Standardize columns over the full dataset.
        continuous: If False, score rank/quantile transforms instead of values.

    Returns:
        [n, d] float64 tensor.
    """
    out = x.to(torch.float64)
    if not continuous:
        out = rank_transform(out)
    if standardized:
        out = standardize_columns(out)
    return out
