"""
ampute.engine.scores

Weighted scores driving MAR/MNAR amputation.

MAR:  score[i] = sum over variables observed under pattern k of W[k, p] * x[i, p]
MNAR: score[i] = sum over variables amputed under pattern k of W[k, p] * x[i, p]

MCAR does not use scores.
"""

import warnings
from dataclasses import dataclass
from typing import List, Optional, Tuple
import torch

from ampute.core.types import Mechanism
from ampute.data.normalization import prepare_scoring_data


@dataclass(frozen=True)
class ScorePlan:
    """Per-pattern scoring recipe, resolved once from the mechanism.

    Attributes:
        index: Pattern index.
        missing: [d] bool, variables amputed under this pattern.
        scoring: [d] bool, variables the score is built from (empty for MCAR).
        weights: [d] float64 effective weights, zero outside `scoring`.
    """
    index: int
    missing: torch.Tensor
    scoring: torch.Tensor
    weights: torch.Tensor

    @property
    def is_amputable(self) -> bool:
        return bool(self.missing.any())

    @property
    def is_constant(self) -> bool:
        """True if every row of this pattern gets the same score."""
        return not bool((self.weights != 0).any())


def build_score_plans(
    patterns: torch.Tensor,
    weights: Optional[torch.Tensor],
    mechanism: Mechanism,
) -> Tuple[ScorePlan, ...]:
    """Resolve the scoring variables and weights of every pattern.

    Args:
        patterns: [K, d] 0/1 patterns, 1 = observed.
        weights: [K, d] weights, or None for unit weights on the scoring set.
        mechanism: Missingness mechanism.

    Returns:
        Tuple of K ScorePlan objects.
    """
    K, d = patterns.shape
    missing = patterns == 0

    if mechanism is Mechanism.MAR:
        scoring = ~missing
    elif mechanism is Mechanism.MNAR:
        scoring = missing
    else:
        scoring = torch.zeros(K, d, dtype=torch.bool)

    if weights is None:
        weights = torch.ones(K, d, dtype=torch.float64)
    effective = torch.where(scoring, weights.to(torch.float64), torch.zeros((), dtype=torch.float64))

    plans = tuple(
        ScorePlan(index=k, missing=missing[k], scoring=scoring[k], weights=effective[k])
        for k in range(K)
    )

    if mechanism.uses_scores:
        flat = [p.index for p in plans if p.is_amputable and p.is_constant]
        if flat:
            warnings.warn(
                f"{mechanism.value} patterns {flat} have no non-zero weights on their "
                f"scoring variables; their amputation will not depend on the data",
                UserWarning,
            )

    return plans


def compute_scores(
    x: torch.Tensor,
    pattern_ids: torch.Tensor,
    plans: Tuple[ScorePlan, ...],
) -> torch.Tensor:
    """Weighted score of every row under its assigned pattern.

    Args:
        x: [n, d] scoring data (see prepare_scoring_data).
        pattern_ids: [n] pattern index per row.
        plans: Score plans indexed by pattern.

    Returns:
        [n] float64 scores.
    """
    W = torch.stack([p.weights for p in plans])  # [K, d]
    row_weights = W[pattern_ids]                  # [n, d]
    return (x.to(torch.float64) * row_weights).sum(dim=1)


def weighted_scores(
    data: torch.Tensor,
    pattern_ids: torch.Tensor,
    patterns: torch.Tensor,
    weights: Optional[torch.Tensor],
    mechanism: Mechanism,
    standardized: bool = True,
    continuous: bool = True,
) -> Tuple[torch.Tensor, Tuple[ScorePlan, ...]]:
    """Prepare data, resolve plans and compute scores in one call.

    For MCAR the returned scores are all zero.
    """
    plans = build_score_plans(patterns, weights, mechanism)
    if not mechanism.uses_scores:
        return torch.zeros(data.shape[0], dtype=torch.float64), plans

    x = prepare_scoring_data(data, standardized=standardized, continuous=continuous)
    return compute_scores(x, pattern_ids, plans), plans


def rows_by_pattern(pattern_ids: torch.Tensor, K: int) -> List[torch.Tensor]:
    """Row indices assigned to each pattern."""
    return [torch.nonzero(pattern_ids == k).flatten() for k in range(K)]
