"""
ampute.data.ingestion

Convert caller-supplied matrices to tensors.

Supported inputs:
- torch tensors
- numpy arrays
- pandas DataFrames / Series (numeric columns only)
- nested Python sequences
"""

import torch
import numpy as np
import pandas as pd
from typing import Any, Optional, Tuple

from ampute.core.exceptions import ValidationError
from ampute.core.validation import validate_no_nan_inf


def _to_numpy(value: Any, name: str) -> np.ndarray:
    if isinstance(value, torch.Tensor):
        return value.detach().cpu().numpy()

    if isinstance(value, (pd.DataFrame, pd.Series)):
        frame = value.to_frame() if isinstance(value, pd.Series) else value
        non_numeric = [c for c in frame.columns if not pd.api.types.is_numeric_dtype(frame[c])]
        if non_numeric:
            raise ValidationError(f"{name} has non-numeric columns: {non_numeric}")
        return frame.to_numpy()

    try:
        return np.asarray(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} could not be converted to an array: {e}")


def feature_names_of(value: Any) -> Optional[Tuple[str, ...]]:
    """Column names of a DataFrame input, None for unnamed inputs."""
    if isinstance(value, pd.DataFrame):
        return tuple(str(c) for c in value.columns)
    return None


def as_data_tensor(data: Any, name: str = "data") -> torch.Tensor:
    """Convert complete input data to a 2-D float tensor.

    Floating tensors keep their dtype; everything else becomes float64.

    Raises:
        ValidationError: If not 2-D, empty, or not numeric.
        NumericalError: If values contain NaN/Inf.
    """
    if isinstance(data, torch.Tensor) and data.is_floating_point():
        x = data.detach().clone()
    else:
        arr = _to_numpy(data, name)
        if not (np.issubdtype(arr.dtype, np.number) or arr.dtype == bool):
            raise ValidationError(f"{name} must be numeric, got dtype {arr.dtype}")
        x = torch.as_tensor(arr.astype(np.float64))

    if x.dim() != 2:
        raise ValidationError(f"{name} must be 2-D, got {x.dim()} dims")
    n, d = x.shape
    if n < 1 or d < 1:
        raise ValidationError(f"{name} must have at least one row and column, got ({n}, {d})")

    validate_no_nan_inf(x, name=name)
    return x


def as_matrix_tensor(value: Any, name: str) -> torch.Tensor:
    """Convert a K x P parameter matrix (patterns, weights) to float64.

    A 1-D input is read as a single row.
    """
    arr = _to_numpy(value, name)
    try:
        x = torch.as_tensor(arr.astype(np.float64))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be numeric: {e}")

    if x.dim() == 1:
        x = x.unsqueeze(0)
    if x.dim() != 2:
        raise ValidationError(f"{name} must be 2-D, got {x.dim()} dims")

    validate_no_nan_inf(x, name=name)
    return x


def as_vector_tensor(value: Any, name: str) -> torch.Tensor:
    """Convert a length-K vector (frequencies) to float64.

    Column vectors of shape [K, 1] are flattened.
    """
    arr = _to_numpy(value, name)
    try:
        x = torch.as_tensor(arr.astype(np.float64))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be numeric: {e}")

    if x.dim() == 0:
        x = x.reshape(1)
    if x.dim() == 2 and 1 in x.shape:
        x = x.reshape(-1)
    if x.dim() != 1:
        raise ValidationError(f"{name} must be 1-D, got shape {tuple(x.shape)}")

    validate_no_nan_inf(x, name=name)
    return x
