"""
ampute.engine.diagnostics

Checks of realized against requested missingness.
"""

import math

# Two-sided critical value at alpha = 0.05
Z_CRITICAL = 1.96


def proportion_z(expected: float, observed: float, n: int) -> float:
    """z statistic of an observed proportion under H0: pi = expected."""
    if not (0 < expected < 1):
        raise ValueError(f"expected must be in (0, 1), got {expected}")
    return (observed - expected) / math.sqrt(expected * (1 - expected) / n)


def proportion_within(expected: float, observed: float, n: int, z_critical: float = Z_CRITICAL) -> bool:
    """True if a two-sided proportion test does not reject pi = expected."""
    return abs(proportion_z(expected, observed, n)) < z_critical
