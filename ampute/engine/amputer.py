"""
ampute.engine.amputer

Amputation pipeline: patterns -> scores -> calibration -> decisions.

Design: Amputer instances are immutable run specifications. All randomness
comes from the RNGState passed to run(); inputs are never modified.
"""

from typing import Any, Callable, Optional, Sequence, Tuple, Union
import torch

from ampute.config.hashing import hash_config
from ampute.config.schema import AmputeConfig, CalibrationConfig
from ampute.core.exceptions import ValidationError
from ampute.core.rng import RNGState
from ampute.core.types import AmputationResult, CandidateType, Mechanism
from ampute.core.validation import (
    validate_binary,
    validate_open_unit_interval,
    validate_positive_int,
    validate_tensor_shape,
)
from ampute.data.ingestion import (
    as_data_tensor,
    as_matrix_tensor,
    as_vector_tensor,
    feature_names_of,
)
from .calibration import calibrate_probabilities, target_rate
from .patterns import normalize_frequencies, select_patterns
from .scores import weighted_scores

TypesArg = Union[None, str, CandidateType, Sequence[Union[str, CandidateType]]]


def resolve_types(types: TypesArg, K: int) -> Tuple[CandidateType, ...]:
    """Per-pattern candidate types.

    A single value, or a one-entry sequence such as a config file's
    `types: MID`, applies to every pattern.

    Raises:
        ValidationError: Unknown name or wrong length.
    """
    if types is None:
        return (CandidateType.RIGHT,) * K

    try:
        if isinstance(types, (str, CandidateType)):
            return (CandidateType.parse(types),) * K
        parsed = tuple(CandidateType.parse(t) for t in types)
    except ValueError as e:
        raise ValidationError(str(e))

    if len(parsed) == 1:
        return parsed * K

    if len(parsed) != K:
        raise ValidationError(f"types has {len(parsed)} entries, expected {K} (one per pattern)")
    return parsed


def draw_decisions(
    probs: torch.Tensor,
    missing: torch.Tensor,
    rng: RNGState,
    by_cases: bool = True,
    block_size: int = 4096,
) -> torch.Tensor:
    """Bernoulli amputation decisions.

    Rows mode makes one draw per row covering all of the row's pattern
    zeros. Cells mode draws each (row, zero variable) pair independently
    with the row's probability. Block b of rows uses rng.substream(b).

    Args:
        probs: [n] per-row amputation probability.
        missing: [n, d] bool, zeros of each row's assigned pattern.
        rng: RNG state for the decision draws.
        by_cases: Rows mode if True, cells mode otherwise.
        block_size: Rows per substream.

    Returns:
        [n, d] bool mask, True = amputed.
    """
    n, d = missing.shape
    mask = torch.zeros(n, d, dtype=torch.bool)

    for b, start in enumerate(range(0, n, block_size)):
        stop = min(start + block_size, n)
        sub = rng.substream(b)
        p = probs[start:stop]
        if by_cases:
            hit = (sub.rand(stop - start) < p).unsqueeze(1)
        else:
            hit = sub.rand(stop - start, d) < p.unsqueeze(1)
        mask[start:stop] = missing[start:stop] & hit

    return mask


class Amputer:
    """Introduces missing values into complete data.

    Attributes:
        mechanism: MCAR, MAR or MNAR.
        prop: Target proportion of amputed rows (by_cases) or cells.
        standardized: Standardize columns before scoring.
        continuous: Score raw values (True) or average-rank quantiles (False).
        by_cases: Measure prop over rows (True) or cells (False).
        calibration: Root-finding controls.
        block_size: Rows per RNG substream.
        seed: Seed used when run() gets no RNGState.

    Usage:
        amputer = Amputer(mechanism="MAR", prop=0.3)
        result = amputer.run(X, patterns, freq, rng=RNGState(seed=1))
    """

    def __init__(
        self,
        mechanism: Union[Mechanism, str] = Mechanism.MAR,
        prop: float = 0.5,
        standardized: bool = True,
        continuous: bool = True,
        by_cases: bool = True,
        calibration: Optional[CalibrationConfig] = None,
        block_size: int = 4096,
        seed: int = 42,
        log: Optional[Callable[[dict], None]] = None,
    ):
        try:
            self._mechanism = Mechanism.parse(mechanism)
        except ValueError as e:
            raise ValidationError(str(e))
        validate_open_unit_interval(prop, name="prop")
        validate_positive_int(block_size, name="block_size")

        self._prop = float(prop)
        self._standardized = bool(standardized)
        self._continuous = bool(continuous)
        self._by_cases = bool(by_cases)
        self._calibration = calibration or CalibrationConfig()
        self._block_size = block_size
        self._seed = seed
        self._log = log
        self._meta: dict = {}
        self._default_types: TypesArg = None

    @classmethod
    def from_config(
        cls,
        config: AmputeConfig,
        log: Optional[Callable[[dict], None]] = None,
    ) -> "Amputer":
        """Build an Amputer from a validated AmputeConfig."""
        a = config.amputation
        amputer = cls(
            mechanism=a.mechanism,
            prop=a.prop,
            standardized=a.standardized,
            continuous=a.continuous,
            by_cases=a.by_cases,
            calibration=config.calibration,
            block_size=config.block_size,
            seed=config.seed,
            log=log,
        )
        amputer._default_types = a.types
        amputer._meta = {"config_hash": hash_config(config)}
        return amputer

    @property
    def mechanism(self) -> Mechanism:
        return self._mechanism

    @property
    def prop(self) -> float:
        return self._prop

    @property
    def by_cases(self) -> bool:
        return self._by_cases

    @property
    def calibration(self) -> CalibrationConfig:
        return self._calibration

    def run(
        self,
        data: Any,
        patterns: Any,
        freq: Any = None,
        weights: Any = None,
        types: TypesArg = None,
        rng: Optional[RNGState] = None,
    ) -> AmputationResult:
        """Ampute a complete dataset.

        Args:
            data: [n, d] complete numeric data.
            patterns: [K, d] 0/1 patterns, 1 = observed, 0 = amputed.
            freq: [K] relative pattern frequencies (default: equal).
            weights: [K, d] scoring weights (default: ones on the scoring set).
            types: Candidate type per pattern, or one for all (default: RIGHT).
            rng: RNG state (default: RNGState(seed)).

        Returns:
            AmputationResult with NaN in amputed cells.

        Raises:
            ValidationError: Malformed inputs.
            NumericalError: data contains NaN/Inf.
            InfeasibleProportionError: prop unreachable with these patterns.
            CalibrationNonConvergenceError: Offset search hit its cap.
        """
        x = as_data_tensor(data)
        n, d = x.shape

        pat = as_matrix_tensor(patterns, name="patterns")
        validate_tensor_shape(pat, (-1, d), name="patterns")
        validate_binary(pat, name="patterns")
        K = pat.shape[0]

        if freq is None:
            freq_t = torch.full((K,), 1.0 / K, dtype=torch.float64)
        else:
            freq_t = as_vector_tensor(freq, name="freq")
            validate_tensor_shape(freq_t, (K,), name="freq")
        freq_t = normalize_frequencies(freq_t)

        W = None
        if weights is not None:
            W = as_matrix_tensor(weights, name="weights")
            validate_tensor_shape(W, (K, d), name="weights")

        cand_types = resolve_types(types if types is not None else self._default_types, K)

        if rng is None:
            rng = RNGState(seed=self._seed)
        selection_rng = rng.spawn()
        decision_rng = rng.spawn()

        pattern_ids = select_patterns(freq_t, n, selection_rng, block_size=self._block_size)

        scores, plans = weighted_scores(
            x, pattern_ids, pat, W, self._mechanism,
            standardized=self._standardized,
            continuous=self._continuous,
        )

        rate = target_rate(pattern_ids, pat, self._prop, by_cases=self._by_cases)

        cal = self._calibration
        probs, offsets = calibrate_probabilities(
            scores, pattern_ids, plans, cand_types, self._mechanism, rate,
            tol=cal.tol, max_iter=cal.max_iter, bound=cal.bound,
            prop=self._prop, log=self._log,
        )

        missing = (pat == 0)[pattern_ids]
        mask = draw_decisions(
            probs, missing, decision_rng,
            by_cases=self._by_cases, block_size=self._block_size,
        )

        amputed = x.clone()
        amputed[mask] = float("nan")

        row_count = int(mask.any(dim=1).sum().item())
        cell_count = int(mask.sum().item())

        meta = dict(self._meta)
        meta.update({
            "seed": rng.seed,
            "block_size": self._block_size,
            "n_patterns": K,
            "frequencies": freq_t.tolist(),
            "types": [t.value for t in cand_types],
            "feature_names": feature_names_of(data),
        })

        result = AmputationResult(
            data=amputed,
            mask=mask,
            amputed_row_count=row_count,
            amputed_cell_count=cell_count,
            pattern_ids=pattern_ids,
            offsets=offsets,
            target_rate=rate,
            mechanism=self._mechanism,
            by_cases=self._by_cases,
            meta=meta,
        )

        if self._log is not None:
            self._log({
                "event": "summary",
                "mechanism": self._mechanism.value,
                "by_cases": self._by_cases,
                "prop": self._prop,
                "realized": result.realized_proportion,
                "amputed_rows": row_count,
                "amputed_cells": cell_count,
            })

        return result

    def __repr__(self) -> str:
        unit = "rows" if self._by_cases else "cells"
        return f"{self.__class__.__name__}({self._mechanism.value}, prop={self._prop}, {unit})"


def ampute(
    data: Any,
    prop: float,
    patterns: Any,
    freq: Any = None,
    mechanism: Union[Mechanism, str] = Mechanism.MAR,
    weights: Any = None,
    standardized: bool = True,
    continuous: bool = True,
    by_cases: bool = True,
    types: TypesArg = None,
    rng: Optional[RNGState] = None,
    seed: int = 42,
    calibration: Optional[CalibrationConfig] = None,
    block_size: int = 4096,
    log: Optional[Callable[[dict], None]] = None,
) -> AmputationResult:
    """One-call amputation; see Amputer.run for argument details."""
    amputer = Amputer(
        mechanism=mechanism,
        prop=prop,
        standardized=standardized,
        continuous=continuous,
        by_cases=by_cases,
        calibration=calibration,
        block_size=block_size,
        seed=seed,
        log=log,
    )
    return amputer.run(data, patterns, freq=freq, weights=weights, types=types, rng=rng)
