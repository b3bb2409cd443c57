"""
Integration test: full amputation pipeline on the X-pattern scenario.

N = 10000 rows, P = 11 variables uniform on [1, 10), 11 X-shaped patterns
(diagonal and anti-diagonal zeroed), equal frequencies.

Tests:
- Realized row/cell proportions match the request for every mechanism
- Flag combinations (standardized, continuous) all calibrate
- Patterns without zeros never contribute amputation
- Identity patterns amputate one column per amputed row
- Cell-mode requests beyond the pattern zero density are rejected
"""

import pytest
import torch

from ampute.core.exceptions import InfeasibleProportionError
from ampute.core.rng import RNGState
from ampute.core.types import CandidateType
from ampute.engine.amputer import Amputer, ampute
from ampute.engine.diagnostics import proportion_z
from ampute.engine.patterns import identity_patterns, x_patterns

N_SAMPLES = 10000
N_FEATURES = 11
DEFAULT_PROP = 0.5

# Realized proportions must stay within this many standard errors
Z_TOLERANCE = 4.0

TYPE_CYCLE = (CandidateType.RIGHT, CandidateType.LEFT, CandidateType.MID, CandidateType.TAIL)


@pytest.fixture(scope="module")
def data():
    return 1.0 + 9.0 * RNGState(seed=42).rand(N_SAMPLES, N_FEATURES)


@pytest.fixture(scope="module")
def patterns():
    return x_patterns(N_FEATURES)


@pytest.fixture(scope="module")
def frequencies():
    return torch.full((N_FEATURES,), 1.0 / N_FEATURES, dtype=torch.float64)


@pytest.fixture(scope="module")
def weights():
    # Uniform on [-1, 1) with about 10% of entries zeroed
    gen = RNGState(seed=42)
    w = 2.0 * gen.rand(N_FEATURES, N_FEATURES) - 1.0
    w[gen.rand(N_FEATURES, N_FEATURES) < 0.1] = 0.0
    return w


@pytest.fixture(scope="module")
def types():
    return [TYPE_CYCLE[k % len(TYPE_CYCLE)] for k in range(N_FEATURES)]


def run(data, patterns, frequencies, weights, types, mechanism, prop,
        standardized=True, continuous=True, by_cases=True, seed=0):
    return ampute(
        data, prop, patterns, frequencies,
        mechanism=mechanism,
        weights=weights,
        standardized=standardized,
        continuous=continuous,
        by_cases=by_cases,
        types=types,
        rng=RNGState(seed=seed),
    )


MECHANISMS = ["MCAR", "MAR", "MNAR"]
FLAGS = [
    (True, True),   # standardized, continuous
    (False, True),
    (True, False),
]


class TestRowProportion:
    """amputed_row_count / N matches prop."""
    
    @pytest.mark.filterwarnings("ignore::UserWarning")
    @pytest.mark.parametrize("mechanism", MECHANISMS)
    @pytest.mark.parametrize("standardized,continuous", FLAGS)
    def test_row_proportion(self, data, patterns, frequencies, weights, types,
                            mechanism, standardized, continuous):
        result = run(data, patterns, frequencies, weights, types, mechanism, DEFAULT_PROP,
                     standardized=standardized, continuous=continuous, by_cases=True)
        
        assert result.data.shape == (N_SAMPLES, N_FEATURES)
        assert result.mask.shape == (N_SAMPLES, N_FEATURES)
        z = proportion_z(DEFAULT_PROP, result.row_proportion, N_SAMPLES)
        assert abs(z) < Z_TOLERANCE
    
    def test_mcar_row_count_scenario(self, data, patterns, frequencies):
        result = Amputer(mechanism="MCAR", prop=DEFAULT_PROP).run(
            data, patterns, frequencies, rng=RNGState(seed=1),
        )
        assert abs(result.amputed_row_count - 5000) < 200


class TestCellProportion:
    """amputed_cell_count / (N * P) matches prop."""
    
    @pytest.mark.filterwarnings("ignore::UserWarning")
    @pytest.mark.parametrize("mechanism", MECHANISMS)
    def test_cell_proportion(self, data, patterns, frequencies, weights, types, mechanism):
        prop = DEFAULT_PROP / N_FEATURES
        result = run(data, patterns, frequencies, weights, types, mechanism, prop, by_cases=False)
        
        expected_cells = prop * N_SAMPLES * N_FEATURES
        # Cells are drawn independently with per-row rates near 0.26
        assert abs(result.amputed_cell_count - expected_cells) < 0.06 * expected_cells
    
    @pytest.mark.parametrize("mechanism", MECHANISMS)
    def test_cell_mode_infeasible(self, data, patterns, frequencies, mechanism):
        with pytest.raises(InfeasibleProportionError) as exc_info:
            ampute(data, DEFAULT_PROP, patterns, frequencies, mechanism=mechanism,
                   by_cases=False, rng=RNGState(seed=0))
        
        assert exc_info.value.achievable == pytest.approx(21 / 121, abs=0.01)


class TestFullPatterns:
    """Patterns without zeros contribute no amputation."""
    
    @pytest.mark.parametrize("mechanism", MECHANISMS)
    def test_full_row_pattern_untouched(self, data, mechanism):
        patterns = x_patterns(N_FEATURES, include_full_row=True)
        freq = torch.full((N_FEATURES,), 0.05, dtype=torch.float64)
        freq[0] = 0.5
        
        result = ampute(data, 0.2, patterns, freq, mechanism=mechanism, rng=RNGState(seed=3))
        
        full_rows = result.pattern_ids == 0
        assert full_rows.sum() > N_SAMPLES * 0.4
        assert not result.mask[full_rows].any()
        # The remaining rows carry the whole requested proportion
        assert abs(proportion_z(0.2, result.row_proportion, N_SAMPLES)) < Z_TOLERANCE


class TestIdentityPatterns:
    """Each identity pattern masks exactly one distinct variable."""
    
    def test_one_column_per_row_under_mar(self, data):
        patterns = identity_patterns(N_FEATURES)
        result = ampute(data, 0.3, patterns, mechanism="MAR", rng=RNGState(seed=5))
        
        per_row = result.mask.sum(dim=1)
        amputed = per_row > 0
        assert (per_row[amputed] == 1).all()
        
        cols = result.mask[amputed].float().argmax(dim=1)
        assert torch.equal(cols, result.pattern_ids[amputed])


class TestMechanismSignal:
    """MAR depends on observed variables, MNAR on the amputed ones."""
    
    def test_mar_depends_on_observed(self):
        data = torch.randn(8000, 2, generator=torch.Generator().manual_seed(11), dtype=torch.float64)
        patterns = torch.tensor([[1.0, 0.0]], dtype=torch.float64)
        
        result = ampute(data, 0.4, patterns, mechanism="MAR", types="RIGHT", rng=RNGState(seed=2))
        amputed = result.mask[:, 1]
        
        assert not result.mask[:, 0].any()
        assert data[amputed, 0].mean() > data[~amputed, 0].mean() + 0.5
        # Column 1 is independent of the decision
        assert abs(data[amputed, 1].mean() - data[~amputed, 1].mean()) < 0.1
    
    def test_mnar_depends_on_amputed(self):
        data = torch.randn(8000, 2, generator=torch.Generator().manual_seed(11), dtype=torch.float64)
        patterns = torch.tensor([[1.0, 0.0]], dtype=torch.float64)
        
        result = ampute(data, 0.4, patterns, mechanism="MNAR", types="LEFT", rng=RNGState(seed=2))
        amputed = result.mask[:, 1]
        
        assert data[amputed, 1].mean() < data[~amputed, 1].mean() - 0.5
        assert abs(data[amputed, 0].mean() - data[~amputed, 0].mean()) < 0.1
