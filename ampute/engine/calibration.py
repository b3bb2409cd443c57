"""
ampute.engine.calibration

Find per-pattern offsets so the realized missingness matches the target.

The global proportion is first converted to the mean per-row probability
every amputable pattern must reach (target_rate). Each pattern's offset is
then found by bisection on the group mean of its candidate function, which
is continuous and strictly increasing in the offset.

The root finder is split into a pure update (bisection_step) and a driver
(calibrate_offset) that evaluates the group mean between updates.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple
import torch

from ampute.core.exceptions import (
    CalibrationNonConvergenceError,
    InfeasibleProportionError,
)
from ampute.core.types import CandidateType, Mechanism
from .candidates import apply_candidate, mean_probability, standardize_group_scores
from .patterns import amputable, zeros_per_pattern
from .scores import ScorePlan, rows_by_pattern


def target_rate(
    pattern_ids: torch.Tensor,
    patterns: torch.Tensor,
    prop: float,
    by_cases: bool = True,
) -> float:
    """Mean per-row amputation probability needed to reach prop.

    Rows mode:  prop * n / (rows assigned an amputable pattern)
    Cells mode: prop * n * d / (zero cells of the assigned patterns)

    Raises:
        InfeasibleProportionError: If nothing can be amputed or the
            required rate is not below 1.
    """
    n = pattern_ids.shape[0]
    d = patterns.shape[1]

    if by_cases:
        available = int(amputable(patterns)[pattern_ids].sum().item())
        total = n
        unit = "rows"
    else:
        available = int(zeros_per_pattern(patterns)[pattern_ids].sum().item())
        total = n * d
        unit = "cells"

    achievable = available / total
    if available == 0:
        raise InfeasibleProportionError(
            f"No amputable {unit}: every assigned pattern observes all variables",
            requested=prop,
            achievable=0.0,
        )

    rate = prop * total / available
    if rate >= 1.0:
        raise InfeasibleProportionError(
            f"Requested proportion {prop:.4f} of {unit} is not below the "
            f"achievable proportion {achievable:.4f} for the given patterns",
            requested=prop,
            achievable=achievable,
        )
    return rate


@dataclass(frozen=True)
class BisectionState:
    """Offset bracket of the bisection search.

    The offset evaluated next is the bracket midpoint.
    """
    lower: float
    upper: float
    n_iter: int = 0

    @property
    def offset(self) -> float:
        return 0.5 * (self.lower + self.upper)

    @property
    def width(self) -> float:
        return self.upper - self.lower


def bisection_step(
    state: BisectionState,
    mean_probability: float,
    target: float,
) -> BisectionState:
    """Shrink the bracket given the group mean observed at state.offset.

    The mean increases with the offset, so a mean below target moves the
    lower edge up and anything else moves the upper edge down.
    """
    if mean_probability < target:
        return BisectionState(state.offset, state.upper, state.n_iter + 1)
    return BisectionState(state.lower, state.offset, state.n_iter + 1)


@dataclass(frozen=True)
class OffsetFit:
    """Calibrated offset of one pattern group."""
    offset: float
    achieved: float
    n_iter: int


def calibrate_offset(
    z: torch.Tensor,
    candidate: CandidateType,
    target: float,
    tol: float = 1e-6,
    max_iter: int = 100,
    bound: float = 50.0,
    pattern_index: Optional[int] = None,
    requested: Optional[float] = None,
) -> OffsetFit:
    """Find b with mean(candidate(z, b)) within tol of target.

    Args:
        z: [m] group-standardized scores (m >= 1).
        candidate: Candidate function shape.
        target: Target mean probability in (0, 1).
        tol: Absolute tolerance on the mean probability.
        max_iter: Hard cap on mean evaluations.
        bound: Search interval is [-bound, bound].
        pattern_index: Reported in errors.
        requested: Global proportion behind target, reported in errors
            together with the achievable proportion on the same scale.
            Defaults to target.

    Raises:
        InfeasibleProportionError: Target not reachable within the bound.
        CalibrationNonConvergenceError: max_iter exhausted.
    """
    low_mean = mean_probability(candidate, z, -bound)
    high_mean = mean_probability(candidate, z, bound)
    if target < low_mean - tol or target > high_mean + tol:
        achievable = low_mean if target < low_mean else high_mean
        if requested is None:
            requested = target
        # Rate and proportion differ by a constant factor
        achievable *= requested / target
        raise InfeasibleProportionError(
            f"Pattern {pattern_index}: {candidate.value} function reaches mean "
            f"probabilities in [{low_mean:.6f}, {high_mean:.6f}] for offsets "
            f"within +/-{bound}, target is {target:.6f}",
            requested=requested,
            achievable=achievable,
            pattern_index=pattern_index,
        )

    state = BisectionState(-bound, bound)
    achieved = math.nan
    for _ in range(max_iter):
        achieved = mean_probability(candidate, z, state.offset)
        if abs(achieved - target) <= tol:
            return OffsetFit(offset=state.offset, achieved=achieved, n_iter=state.n_iter + 1)
        state = bisection_step(state, achieved, target)

    raise CalibrationNonConvergenceError(
        f"Pattern {pattern_index}: offset search did not reach tolerance {tol:g} "
        f"in {max_iter} iterations (target {target:.6f}, last mean {achieved:.6f})",
        pattern_index=pattern_index,
        target=target,
        achieved=achieved,
        n_iter=max_iter,
    )


def calibrate_probabilities(
    scores: torch.Tensor,
    pattern_ids: torch.Tensor,
    plans: Tuple[ScorePlan, ...],
    types: Sequence[CandidateType],
    mechanism: Mechanism,
    rate: float,
    tol: float = 1e-6,
    max_iter: int = 100,
    bound: float = 50.0,
    prop: Optional[float] = None,
    log: Optional[Callable[[dict], None]] = None,
) -> Tuple[torch.Tensor, torch.Tensor]:
    """Per-row amputation probabilities for every pattern group.

    MCAR rows of amputable patterns get the flat rate. MAR/MNAR groups are
    standardized, calibrated and mapped through their candidate function.
    Rows of all-ones patterns get probability 0. prop, the global proportion
    behind rate, is what infeasibility errors report as requested.

    Returns:
        probs: [n] float64 probabilities.
        offsets: [K] float64 offsets, NaN where nothing was calibrated.
    """
    n = pattern_ids.shape[0]
    K = len(plans)
    probs = torch.zeros(n, dtype=torch.float64)
    offsets = torch.full((K,), math.nan, dtype=torch.float64)

    for plan, rows in zip(plans, rows_by_pattern(pattern_ids, K)):
        if not plan.is_amputable or rows.numel() == 0:
            continue

        if not mechanism.uses_scores:
            probs[rows] = rate
            continue

        candidate = types[plan.index]
        z = standardize_group_scores(scores[rows])
        fit = calibrate_offset(
            z, candidate, rate,
            tol=tol, max_iter=max_iter, bound=bound,
            pattern_index=plan.index,
            requested=prop,
        )
        probs[rows] = apply_candidate(candidate, z, fit.offset)
        offsets[plan.index] = fit.offset

        if log is not None:
            log({
                "event": "calibration",
                "pattern": plan.index,
                "type": candidate.value,
                "rows": int(rows.numel()),
                "target": rate,
                "achieved": fit.achieved,
                "offset": fit.offset,
                "n_iter": fit.n_iter,
            })

    return probs, offsets
