"""
ampute.engine.candidates

Candidate functions mapping standardized scores to missingness probabilities.

With offset b and group-standardized score z (m = median of z):
    RIGHT: sigmoid(z + b)
    LEFT:  sigmoid(-z + b)
    MID:   sigmoid(-|z - m| + 0.75 + b)
    TAIL:  sigmoid(|z - m| - 0.75 + b)

For every shape the mean probability over a group is strictly increasing
in b, which is what the calibrator relies on.
"""

from typing import Callable, Dict
import torch

from ampute.core.types import CandidateType

# Shift separating the center from the tails for MID/TAIL
CENTER_SHIFT = 0.75


def standardize_group_scores(scores: torch.Tensor) -> torch.Tensor:
    """Center and scale the scores of one pattern group.

    Constant groups are only centered.
    """
    scores = scores.to(torch.float64)
    if scores.numel() == 0:
        return scores

    centered = scores - scores.mean()
    if scores.numel() < 2:
        return centered

    std = scores.std()
    if std < 1e-8:
        return centered
    return centered / std


def _right(z: torch.Tensor, b: float) -> torch.Tensor:
    return torch.sigmoid(z + b)


def _left(z: torch.Tensor, b: float) -> torch.Tensor:
    return torch.sigmoid(-z + b)


def _mid(z: torch.Tensor, b: float) -> torch.Tensor:
    dist = (z - z.median()).abs()
    return torch.sigmoid(-dist + CENTER_SHIFT + b)


def _tail(z: torch.Tensor, b: float) -> torch.Tensor:
    dist = (z - z.median()).abs()
    return torch.sigmoid(dist - CENTER_SHIFT + b)


CANDIDATE_FUNCTIONS: Dict[CandidateType, Callable[[torch.Tensor, float], torch.Tensor]] = {
    CandidateType.RIGHT: _right,
    CandidateType.LEFT: _left,
    CandidateType.MID: _mid,
    CandidateType.TAIL: _tail,
}


def apply_candidate(
    candidate: CandidateType,
    z: torch.Tensor,
    offset: float,
) -> torch.Tensor:
    """Missingness probability of each row of a pattern group.

    Args:
        candidate: Function shape.
        z: [m] group-standardized scores.
        offset: Calibration offset b.

    Returns:
        [m] probabilities in (0, 1).
    """
    if z.numel() == 0:
        return z.to(torch.float64)
    return CANDIDATE_FUNCTIONS[candidate](z.to(torch.float64), float(offset))


def mean_probability(
    candidate: CandidateType,
    z: torch.Tensor,
    offset: float,
) -> float:
    """Group mean of the candidate probabilities at a given offset."""
    return apply_candidate(candidate, z, offset).mean().item()
