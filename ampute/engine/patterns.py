"""
ampute.engine.patterns

Pattern assignment and pattern matrix helpers.

A pattern is a 0/1 row over the variables: 1 = observed, 0 = amputed.
Each observation is assigned one pattern by an independent categorical draw.
"""

import torch

from ampute.core.exceptions import InvalidFrequencyError
from ampute.core.rng import RNGState
from ampute.core.validation import validate_positive_int


def normalize_frequencies(freq: torch.Tensor) -> torch.Tensor:
    """Return frequencies rescaled to sum to 1.

    Raises:
        InvalidFrequencyError: If any entry is negative or the total is zero.
    """
    if (freq < 0).any():
        bad = torch.nonzero(freq < 0).flatten().tolist()
        raise InvalidFrequencyError(f"freq must be non-negative, negative at patterns {bad}")

    total = freq.sum()
    if total <= 0:
        raise InvalidFrequencyError("freq must have a positive sum")

    return (freq / total).to(torch.float64)


def select_patterns(
    freq: torch.Tensor,
    n: int,
    rng: RNGState,
    block_size: int = 4096,
) -> torch.Tensor:
    """Assign a pattern index to each of n observations.

    Block b of rows draws from rng.substream(b).

    Args:
        freq: [K] normalized frequencies.
        n: Number of observations.
        rng: RNG state for reproducibility.
        block_size: Rows per substream.

    Returns:
        [n] long tensor of pattern indices in [0, K).
    """
    validate_positive_int(n, name="n")
    validate_positive_int(block_size, name="block_size")

    probs = freq.to(torch.float64)
    blocks = []
    for b, start in enumerate(range(0, n, block_size)):
        size = min(block_size, n - start)
        blocks.append(rng.substream(b).categorical(probs, size))

    return torch.cat(blocks).long()


def amputable(patterns: torch.Tensor) -> torch.Tensor:
    """[K] bool: True where the pattern has at least one zero."""
    return (patterns == 0).any(dim=1)


def zeros_per_pattern(patterns: torch.Tensor) -> torch.Tensor:
    """[K] long: number of amputed variables in each pattern."""
    return (patterns == 0).sum(dim=1)


def x_patterns(p: int, include_full_row: bool = False) -> torch.Tensor:
    """Square pattern matrix with the diagonal and anti-diagonal zeroed.

    Row k amputes variables k and p - 1 - k (one variable on the middle
    row of an odd p).

    Args:
        p: Number of variables (and patterns).
        include_full_row: Make the first pattern all ones (amputes nothing).
    """
    validate_positive_int(p, name="p")
    idx = torch.arange(p)
    pat = torch.ones(p, p, dtype=torch.float64)
    pat[idx, idx] = 0.0
    pat[idx, p - 1 - idx] = 0.0
    if include_full_row:
        pat[0] = 1.0
    return pat


def identity_patterns(p: int) -> torch.Tensor:
    """Pattern k amputes exactly variable k."""
    validate_positive_int(p, name="p")
    return 1.0 - torch.eye(p, dtype=torch.float64)
