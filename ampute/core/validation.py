"""
ampute.core.validation

Boundary validation functions.

Design: Validate at API boundaries, trust internally.
All validation functions raise ValidationError on failure.
"""

import torch

from .exceptions import ValidationError, NumericalError


def validate_tensor_shape(
    tensor: torch.Tensor,
    expected_shape: tuple,
    name: str = "tensor"
) -> None:
    """Validate tensor has expected shape.
    
    Args:
        tensor: Tensor to validate.
        expected_shape: Expected shape tuple. Use -1 for any size.
        name: Name for error messages.
    
    Raises:
        ValidationError: If shape doesn't match.
    """
    if len(tensor.shape) != len(expected_shape):
        raise ValidationError(
            f"{name} has {len(tensor.shape)} dims, expected {len(expected_shape)}"
        )
    
    for i, (actual, expected) in enumerate(zip(tensor.shape, expected_shape)):
        if expected != -1 and actual != expected:
            raise ValidationError(
                f"{name} dim {i} is {actual}, expected {expected}"
            )


def validate_no_nan_inf(
    tensor: torch.Tensor,
    name: str = "tensor"
) -> None:
    """Validate tensor contains no NaN or Inf values.
    
    Raises:
        NumericalError: If NaN or Inf found.
    """
    if torch.isnan(tensor).any():
        n_nan = torch.isnan(tensor).sum().item()
        raise NumericalError(f"{name} contains {n_nan} NaN values")
    
    if torch.isinf(tensor).any():
        n_inf = torch.isinf(tensor).sum().item()
        raise NumericalError(f"{name} contains {n_inf} Inf values")


def validate_open_unit_interval(
    value: float,
    name: str = "value"
) -> None:
    """Validate value is in (0, 1)."""
    if not (0 < value < 1):
        raise ValidationError(f"{name} must be in (0, 1), got {value}")


def validate_positive_int(
    value: int,
    name: str = "value"
) -> None:
    """Validate value is a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be positive int, got {value}")


def validate_binary(
    tensor: torch.Tensor,
    name: str = "tensor"
) -> None:
    """Validate every entry is 0 or 1."""
    bad = (tensor != 0) & (tensor != 1)
    if bad.any():
        n_bad = bad.sum().item()
        raise ValidationError(f"{name} must contain only 0/1 entries, found {n_bad} others")
