"""
ampute.engine

Amputation engine.

This module provides:
- Pattern assignment (PatternSelector)
- Weighted scores for MAR/MNAR (WeightedScoreCalculator)
- Candidate functions (CandidateFunctionApplicator)
- Offset calibration (ProportionCalibrator)
- The Amputer pipeline and the ampute() entry point
"""

from .patterns import (
    normalize_frequencies,
    select_patterns,
    amputable,
    zeros_per_pattern,
    x_patterns,
    identity_patterns,
)

from .scores import (
    ScorePlan,
    build_score_plans,
    compute_scores,
    weighted_scores,
)

from .candidates import (
    CANDIDATE_FUNCTIONS,
    standardize_group_scores,
    apply_candidate,
    mean_probability,
)

from .calibration import (
    BisectionState,
    OffsetFit,
    target_rate,
    bisection_step,
    calibrate_offset,
    calibrate_probabilities,
)

from .amputer import Amputer, ampute, draw_decisions, resolve_types
from .diagnostics import proportion_z, proportion_within
from .logging import create_logger

__all__ = [
    # Patterns
    "normalize_frequencies",
    "select_patterns",
    "amputable",
    "zeros_per_pattern",
    "x_patterns",
    "identity_patterns",
    # Scores
    "ScorePlan",
    "build_score_plans",
    "compute_scores",
    "weighted_scores",
    # Candidates
    "CANDIDATE_FUNCTIONS",
    "standardize_group_scores",
    "apply_candidate",
    "mean_probability",
    # Calibration
    "BisectionState",
    "OffsetFit",
    "target_rate",
    "bisection_step",
    "calibrate_offset",
    "calibrate_probabilities",
    # Pipeline
    "Amputer",
    "ampute",
    "draw_decisions",
    "resolve_types",
    # Diagnostics / logging
    "proportion_z",
    "proportion_within",
    "create_logger",
]
