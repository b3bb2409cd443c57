"""
ampute.core.exceptions

All custom exceptions for ampute.

Design: Fail fast and loud with informative errors.
"""

from typing import Optional


class AmputeError(Exception):
    """Base exception for all ampute errors."""
    pass


class ValidationError(AmputeError):
    """Input validation failed.
    
    Raised when data, patterns, weights or parameters fail boundary checks.
    """
    pass


class InvalidFrequencyError(ValidationError):
    """Pattern frequencies are negative or sum to zero."""
    pass


class ConfigError(AmputeError):
    """Configuration invalid or missing.
    
    Raised when config files are malformed or required fields are absent.
    """
    pass


class NumericalError(AmputeError):
    """NaN/Inf or other numerical issue.
    
    Raised when inputs or computations contain invalid numerical values.
    """
    pass


class InfeasibleProportionError(AmputeError):
    """Requested missingness proportion cannot be reached.
    
    Raised when the patterns do not expose enough amputable rows or cells,
    or when a candidate function cannot produce the required rate.
    
    Attributes:
        requested: Requested proportion (or per-row rate).
        achievable: Largest proportion the inputs allow, if known.
        pattern_index: Offending pattern, if the problem is pattern specific.
    """
    
    def __init__(
        self,
        message: str,
        requested: Optional[float] = None,
        achievable: Optional[float] = None,
        pattern_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.requested = requested
        self.achievable = achievable
        self.pattern_index = pattern_index


class CalibrationNonConvergenceError(AmputeError):
    """Offset root-finding hit its iteration cap.
    
    Attributes:
        pattern_index: Pattern being calibrated.
        target: Target mean probability.
        achieved: Mean probability at the last iterate.
        n_iter: Number of iterations performed.
    """
    
    def __init__(
        self,
        message: str,
        pattern_index: Optional[int] = None,
        target: Optional[float] = None,
        achieved: Optional[float] = None,
        n_iter: Optional[int] = None,
    ):
        super().__init__(message)
        self.pattern_index = pattern_index
        self.target = target
        self.achieved = achieved
        self.n_iter = n_iter
