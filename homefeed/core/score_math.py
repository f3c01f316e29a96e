"""Numeric primitives shared by the scoring engines.

All functions are pure. Half-lives and caps must be positive; callers are
responsible for that, it is not checked at runtime.
"""

import math
from typing import Iterable, Optional, Tuple

LN2 = math.log(2.0)


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def decay(elapsed: float, half_life: float) -> float:
    """Exponential decay: 1.0 at zero elapsed time, halving every half_life."""
    if elapsed <= 0:
        return 1.0
    return clamp(math.exp(-LN2 * elapsed / half_life))


def log_compress(count: float, cap: float) -> float:
    """Logarithmic compression of a count into [0, 1], saturating at cap."""
    if count <= 0:
        return 0.0
    return min(1.0, math.log1p(count) / math.log1p(cap))


def weighted_sum(terms: Iterable[Tuple[float, float]]) -> float:
    """Sum of weight * value over (weight, value) pairs. Not clamped."""
    return sum(weight * value for weight, value in terms)


def rank_decay(index: int, size: int) -> float:
    """Linear credit for a 0-based rank in a list of ``size`` entries."""
    if index < 0 or size <= 0:
        return 0.0
    return max(0.0, 1.0 - index / size)


def popularity(view_count: Optional[int], default: float) -> float:
    """Map a view count onto [0, 1] on a log10 scale capping at 10M views."""
    if not view_count or view_count <= 0:
        return default
    return min(1.0, math.log10(view_count) / 7.0)
