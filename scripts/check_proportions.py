#!/usr/bin/env python3
"""
Check realized against requested missingness on the X-pattern scenario.

Runs every mechanism in rows mode (prop) and cells mode (prop / n_features)
on uniform data with X-shaped patterns and prints the realized proportion
and its two-sided proportion z statistic.

Usage:
    python scripts/check_proportions.py
    python scripts/check_proportions.py --config configs/mar.yaml --n-samples 20000
"""

import argparse
import sys
from pathlib import Path

import torch

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from ampute.config import AmputeConfig, load_config, config_signature
from ampute.core import RNGState, CandidateType, AmputeError
from ampute.engine import Amputer, create_logger, x_patterns, proportion_z
from ampute.engine.diagnostics import Z_CRITICAL


def parse_args():
    parser = argparse.ArgumentParser(description="Check amputation proportions on X-shaped patterns")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    parser.add_argument("--n-samples", type=int, default=10000, help="Number of rows")
    parser.add_argument("--n-features", type=int, default=11, help="Number of variables")
    parser.add_argument("--prop", type=float, default=None, help="Override requested proportion")
    parser.add_argument("--seed", type=int, default=None, help="Override random seed")
    parser.add_argument("--verbose", action="store_true", help="Print per-pattern calibration")
    return parser.parse_args()


def main():
    args = parse_args()

    config = load_config(args.config) if args.config else AmputeConfig()
    if args.seed is not None:
        config.seed = args.seed
    if args.prop is not None:
        config.amputation.prop = args.prop

    n, p = args.n_samples, args.n_features
    rng = RNGState(seed=config.seed)
    data = 1.0 + 9.0 * rng.spawn().rand(n, p)
    patterns = x_patterns(p)
    freq = torch.full((p,), 1.0 / p, dtype=torch.float64)
    weights = 2.0 * rng.spawn().rand(p, p) - 1.0
    cycle = list(CandidateType)
    types = [cycle[k % len(cycle)] for k in range(p)]

    log = create_logger(config.output_dir, verbose=args.verbose)

    print("=" * 72)
    print(f"X-pattern check: n={n}, p={p}, {config_signature(config)}")
    print("=" * 72)

    failures = 0
    for mechanism in ("MCAR", "MAR", "MNAR"):
        for by_cases in (True, False):
            prop = config.amputation.prop if by_cases else config.amputation.prop / p
            amputer = Amputer(
                mechanism=mechanism,
                prop=prop,
                standardized=config.amputation.standardized,
                continuous=config.amputation.continuous,
                by_cases=by_cases,
                calibration=config.calibration,
                block_size=config.block_size,
                log=log,
            )
            unit = "rows " if by_cases else "cells"
            try:
                result = amputer.run(data, patterns, freq, weights=weights, types=types, rng=rng.spawn())
            except AmputeError as e:
                failures += 1
                print(f"  {mechanism:<4} | {unit} | FAILED: {e}")
                continue

            n_units = n if by_cases else n * p
            z = proportion_z(prop, result.realized_proportion, n_units)
            status = "ok" if abs(z) < Z_CRITICAL else "OUTSIDE"
            print(f"  {mechanism:<4} | {unit} | requested: {prop:.4f} | "
                  f"realized: {result.realized_proportion:.4f} | z: {z:+.2f} | {status}")

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
