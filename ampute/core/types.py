"""
ampute.core.types

Core data types for ampute.

Mechanisms and candidate function shapes are closed enums; results are
immutable dataclasses with validation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union
import torch


class Mechanism(Enum):
    """Missingness mechanism.
    
    MCAR: missingness independent of the data.
    MAR:  missingness depends on variables observed under the pattern.
    MNAR: missingness depends on the variables being amputated.
    """
    MCAR = "MCAR"
    MAR = "MAR"
    MNAR = "MNAR"
    
    @classmethod
    def parse(cls, value: Union["Mechanism", str]) -> "Mechanism":
        """Accept a member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise ValueError(
            f"Unknown mechanism {value!r}; expected one of {list(cls.__members__)}"
        )
    
    @property
    def uses_scores(self) -> bool:
        return self is not Mechanism.MCAR


class CandidateType(Enum):
    """Shape of the score-to-probability function of a pattern.
    
    RIGHT: high scores are more likely to be amputed.
    LEFT:  low scores are more likely to be amputed.
    MID:   scores near the center are more likely to be amputed.
    TAIL:  scores at both tails are more likely to be amputed.
    """
    RIGHT = "RIGHT"
    LEFT = "LEFT"
    MID = "MID"
    TAIL = "TAIL"
    
    @classmethod
    def parse(cls, value: Union["CandidateType", str]) -> "CandidateType":
        """Accept a member or a case-insensitive name.
        
        Numeric type codes are rejected: the legacy code set (-2, 0, 1)
        reuses 1 and cannot name four shapes, so names are required.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise ValueError(
            f"Unknown candidate type {value!r}; expected one of {list(cls.__members__)}"
        )


MECHANISM_NAMES = tuple(m.value for m in Mechanism)
CANDIDATE_TYPE_NAMES = tuple(t.value for t in CandidateType)


@dataclass(frozen=True)
class AmputationResult:
    """Output of one amputation run.
    
    Attributes:
        data: [n, d] amputed data. Amputed cells are NaN.
        mask: [n, d] bool tensor. True = amputed.
        amputed_row_count: Rows with at least one amputed cell.
        amputed_cell_count: Total amputed cells.
        pattern_ids: [n] long tensor, 0-based pattern assigned to each row.
        offsets: [K] float64 calibration offsets (NaN where not calibrated).
        target_rate: Mean per-row missingness probability each amputable
            pattern was calibrated to.
        mechanism: Mechanism used.
        by_cases: True if the proportion was measured over rows.
        meta: Additional metadata (config hash, seed, ...).
    """
    data: torch.Tensor
    mask: torch.Tensor
    amputed_row_count: int
    amputed_cell_count: int
    pattern_ids: torch.Tensor
    offsets: torch.Tensor
    target_rate: float
    mechanism: Mechanism
    by_cases: bool = True
    meta: Optional[Dict[str, Any]] = None
    
    def __post_init__(self):
        if self.data.dim() != 2:
            raise ValueError(f"data must be 2-D, got shape {tuple(self.data.shape)}")
        n, d = self.data.shape
        if self.mask.shape != (n, d):
            raise ValueError(f"mask shape {tuple(self.mask.shape)} != expected ({n}, {d})")
        if self.mask.dtype != torch.bool:
            raise TypeError(f"mask.dtype must be bool, got {self.mask.dtype}")
        if self.pattern_ids.shape != (n,):
            raise ValueError(f"pattern_ids shape {tuple(self.pattern_ids.shape)} != ({n},)")
    
    @property
    def n(self) -> int:
        return self.data.shape[0]
    
    @property
    def d(self) -> int:
        return self.data.shape[1]
    
    @property
    def row_proportion(self) -> float:
        """Fraction of rows with at least one amputed cell."""
        return self.amputed_row_count / self.n
    
    @property
    def cell_proportion(self) -> float:
        """Fraction of amputed cells."""
        return self.amputed_cell_count / (self.n * self.d)
    
    @property
    def realized_proportion(self) -> float:
        """Proportion in the unit the run was calibrated for."""
        return self.row_proportion if self.by_cases else self.cell_proportion
