"""
Tests for ampute.core.validation

Verify validation functions catch errors appropriately.
"""

import pytest
import torch
from ampute.core.validation import (
    validate_tensor_shape,
    validate_no_nan_inf,
    validate_open_unit_interval,
    validate_positive_int,
    validate_binary,
)
from ampute.core.exceptions import ValidationError, NumericalError


class TestValidateTensorShape:
    """Tests for validate_tensor_shape."""
    
    def test_correct_shape_passes(self):
        validate_tensor_shape(torch.zeros(3, 4), (3, 4))
    
    def test_wrong_shape_raises(self):
        with pytest.raises(ValidationError, match="dim 1"):
            validate_tensor_shape(torch.zeros(3, 4), (3, 5))
    
    def test_wrong_ndim_raises(self):
        with pytest.raises(ValidationError, match="dims"):
            validate_tensor_shape(torch.zeros(3), (3, 1))
    
    def test_wildcard_dim_passes(self):
        validate_tensor_shape(torch.zeros(7, 5), (-1, 5))


class TestValidateNoNanInf:
    """Tests for validate_no_nan_inf."""
    
    def test_clean_tensor_passes(self):
        validate_no_nan_inf(torch.ones(10))
    
    def test_nan_raises(self):
        with pytest.raises(NumericalError, match="NaN"):
            validate_no_nan_inf(torch.tensor([1.0, float("nan")]))
    
    def test_inf_raises(self):
        with pytest.raises(NumericalError, match="Inf"):
            validate_no_nan_inf(torch.tensor([1.0, float("-inf")]))


class TestScalarValidators:
    """Tests for scalar validators."""
    
    @pytest.mark.parametrize("value", [0.01, 0.5, 0.99])
    def test_open_unit_interval_passes(self, value):
        validate_open_unit_interval(value)
    
    @pytest.mark.parametrize("value", [0.0, 1.0, -0.2, 1.5])
    def test_open_unit_interval_raises(self, value):
        with pytest.raises(ValidationError, match=r"\(0, 1\)"):
            validate_open_unit_interval(value, name="prop")
    
    def test_positive_int(self):
        validate_positive_int(3)
        with pytest.raises(ValidationError):
            validate_positive_int(0)
        with pytest.raises(ValidationError):
            validate_positive_int(2.0)
        with pytest.raises(ValidationError):
            validate_positive_int(True)


class TestValidateBinary:
    """Tests for validate_binary."""
    
    def test_binary_passes(self):
        validate_binary(torch.tensor([[0.0, 1.0], [1.0, 1.0]]))
    
    def test_non_binary_raises(self):
        with pytest.raises(ValidationError, match="0/1"):
            validate_binary(torch.tensor([[0.0, 0.5]]), name="patterns")
