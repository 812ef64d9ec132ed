"""
Oscillatory series behind the Crooks field.

    S(phase) = sum_{i=1}^{terms} (coefficient * sin(a_i) / cosh(a_i)) ** exponent,
    a_i = 2*pi*i + phase

The formula is illustrative, not a physics model. It never raises for
numeric reasons: cosh overflow gives a zero term, and a negative base
with a fractional exponent gives NaN, both returned as ordinary output.
"""

import math

import numpy as np


def series_field(
    terms: int,
    coefficient: float,
    exponent: float,
    phase: np.ndarray,
) -> np.ndarray:
    """
    Evaluate the series elementwise over an array of phases.

    Terms are accumulated one at a time in index order, so every element
    matches the scalar ``evaluate`` for the same phase.

    Args:
        terms: Number of terms (0 gives an all-zero result).
        coefficient: Multiplier applied to each term before the power.
        exponent: Real-valued power applied to each scaled term.
        phase: Array (any shape) of phase offsets.

    Returns:
        float64 array with the shape of ``phase``.
    """
    if terms < 0:
        raise ValueError(f"terms must be non-negative, got {terms}")

    phase = np.asarray(phase, dtype=np.float64)
    total = np.zeros_like(phase)

    with np.errstate(all="ignore"):
        for i in range(1, terms + 1):
            arg = 2.0 * math.pi * i + phase
            term = np.sin(arg) / np.cosh(arg)
            total = total + np.power(coefficient * term, exponent)

    return total


def evaluate(terms: int, coefficient: float, exponent: float, phase: float) -> float:
    """Evaluate the series at a single phase."""
    return float(series_field(terms, coefficient, exponent, np.float64(phase)))
