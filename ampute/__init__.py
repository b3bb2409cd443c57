"""
ampute

Missing-data amputation: introduce MCAR, MAR or MNAR missingness into
complete data with controlled patterns, frequencies and proportions.
"""

from .core import (
    AmputeError,
    ValidationError,
    InvalidFrequencyError,
    ConfigError,
    NumericalError,
    InfeasibleProportionError,
    CalibrationNonConvergenceError,
    RNGState,
    Mechanism,
    CandidateType,
    AmputationResult,
)
from .config import AmputeConfig, AmputationConfig, CalibrationConfig, load_config
from .engine import Amputer, ampute, create_logger, x_patterns, identity_patterns

__version__ = "0.1.0"

__all__ = [
    "AmputeError",
    "ValidationError",
    "InvalidFrequencyError",
    "ConfigError",
    "NumericalError",
    "InfeasibleProportionError",
    "CalibrationNonConvergenceError",
    "RNGState",
    "Mechanism",
    "CandidateType",
    "AmputationResult",
    "AmputeConfig",
    "AmputationConfig",
    "CalibrationConfig",
    "load_config",
    "Amputer",
    "ampute",
    "create_logger",
    "x_patterns",
    "identity_patterns",
]
