"""
ampute.config.schema

Configuration schemas using dataclasses.

Design: All config fields have explicit types. Defaults only at top level.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ampute.core.types import MECHANISM_NAMES, CANDIDATE_TYPE_NAMES


@dataclass
class AmputationConfig:
    """What to amputate: proportion, mechanism and scoring flags."""
    prop: float = 0.5
    mechanism: str = "MAR"  # "MCAR" | "MAR" | "MNAR"
    standardized: bool = True
    continuous: bool = True
    by_cases: bool = True
    types: Optional[List[str]] = None  # Per-pattern candidate types, default RIGHT
    
    def __post_init__(self):
        if not (0 < self.prop < 1):
            raise ValueError(f"prop must be in (0, 1), got {self.prop}")
        self.mechanism = self.mechanism.upper()
        if self.mechanism not in MECHANISM_NAMES:
            raise ValueError(f"Invalid mechanism: {self.mechanism}")
        if self.types is not None:
            self.types = [t.upper() for t in self.types]
            unknown = [t for t in self.types if t not in CANDIDATE_TYPE_NAMES]
            if unknown:
                raise ValueError(f"Invalid candidate types: {unknown}")


@dataclass
class CalibrationConfig:
    """Offset root-finding controls."""
    tol: float = 1e-6
    max_iter: int = 100
    bound: float = 50.0
    
    def __post_init__(self):
        if self.tol <= 0:
            raise ValueError("tol must be positive")
        if self.max_iter <= 0:
            raise ValueError("max_iter must be positive")
        if self.bound <= 0:
            raise ValueError("bound must be positive")


@dataclass
class AmputeConfig:
    """Top-level configuration.
    
    This is the ONLY place defaults are specified.
    All sub-configs receive explicit values.
    """
    amputation: AmputationConfig = field(default_factory=AmputationConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    
    seed: int = 42
    block_size: int = 4096  # Rows per RNG substream
    output_dir: Optional[str] = None  # Log directory, None = stdout only
    
    def __post_init__(self):
        if self.block_size <= 0:
            raise ValueError("block_size must be positive")
    
    @classmethod
    def minimal(cls) -> "AmputeConfig":
        """Factory for small, fast test configuration."""
        return cls(
            amputation=AmputationConfig(prop=0.3, mechanism="MCAR"),
            calibration=CalibrationConfig(tol=1e-4, max_iter=60),
            block_size=256,
        )
