"""
Normalization helpers for converting raw area-level quantities to 0–100 scores.

Every helper is total: zero or degenerate denominators give 0, never NaN/Inf.
"""

from __future__ import annotations

import math


def safe_divide(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def clamp_0_100(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(100.0, value))


def log_normalize_0_100(value: float, *, benchmark: float) -> float:
    """
    Map a non-negative density to 0–100 with diminishing returns.

    score = 100 × ln(1 + value) / ln(1 + benchmark), capped at 100.
    A value equal to the benchmark scores 100.
    """
    if value <= 0 or benchmark <= 0:
        return 0.0
    return clamp_0_100(math.log1p(value) / math.log1p(benchmark) * 100)


def decay_normalize_0_100(density: float, *, max_density: float) -> float:
    """
    Logarithmic distance-decay proxy used by the walkability categories.

    The density is first capped at max_density, then
    score = 100 × ln(1 + 10 × d/max_d) / ln(11).
    """
    if density <= 0 or max_density <= 0:
        return 0.0
    normalized = min(density / max_density, 1.0)
    return clamp_0_100(math.log1p(normalized * 10) / math.log1p(10) * 100)


def linear_normalize_0_100(value: float, *, benchmark: float) -> float:
    """value / benchmark × 100, capped at 100."""
    if benchmark <= 0:
        return 0.0
    return clamp_0_100(value / benchmark * 100)


def shannon_entropy(counts) -> float:
    """
    Shannon entropy H = -Σ(pᵢ × ln(pᵢ)) over non-negative counts.

    Zero counts contribute nothing; an all-zero input has entropy 0.
    """
    total = sum(counts)
    if total <= 0:
        return 0.0

    entropy = 0.0
    for count in counts:
        if count > 0:
            proportion = count / total
            entropy -= proportion * math.log(proportion)
    return entropy
