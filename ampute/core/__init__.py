"""
ampute.core

Core infrastructure for ampute.

Exports:
- Exception classes
- RNG management
- Core data types
- Validation utilities
"""

from .exceptions import (
    AmputeError,
    ValidationError,
    InvalidFrequencyError,
    ConfigError,
    NumericalError,
    InfeasibleProportionError,
    CalibrationNonConvergenceError,
)

from .rng import RNGState

from .types import (
    Mechanism,
    CandidateType,
    AmputationResult,
    MECHANISM_NAMES,
    CANDIDATE_TYPE_NAMES,
)

from .validation import (
    validate_tensor_shape,
    validate_no_nan_inf,
    validate_open_unit_interval,
    validate_positive_int,
    validate_binary,
)

__all__ = [
    # Exceptions
    "AmputeError",
    "ValidationError",
    "InvalidFrequencyError",
    "ConfigError",
    "NumericalError",
    "InfeasibleProportionError",
    "CalibrationNonConvergenceError",
    # RNG
    "RNGState",
    # Types
    "Mechanism",
    "CandidateType",
    "AmputationResult",
    "MECHANISM_NAMES",
    "CANDIDATE_TYPE_NAMES",
    # Validation
    "validate_tensor_shape",
    "validate_no_nan_inf",
    "validate_open_unit_interval",
    "validate_positive_int",
    "validate_binary",
]
