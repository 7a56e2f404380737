import math
from typing import Iterable, Optional, Sequence, Tuple

from autowin.models.results import RatingRecord

# Heuristics tuned to the auto scoring scale; overridable through settings.
TWO_MATCH_SD_FACTOR = 0.3
FALLBACK_MATCH_SD = 10.0
MIN_POOLED_ESTIMATES = 3

ALLIANCE_SIZE = 3

# Abramowitz & Stegun 26.2.17
_P = 0.2316419
_B = (0.319381530, -0.356563782, 1.781477937, -1.821255978, 1.330274429)
_INV_SQRT_2PI = 0.3989422804014327


def sample_std_dev(scores: Sequence[float]) -> float:
    """Bessel-corrected sample standard deviation."""
    n = len(scores)
    if n < 2:
        raise ValueError(f"Sample standard deviation needs at least 2 values, got {n}")
    mean = sum(scores) / n
    return math.sqrt(sum((s - mean) ** 2 for s in scores) / (n - 1))


def normal_cdf(z: float) -> float:
    """Standard normal CDF, absolute error below 7.5e-8.

    Evaluated on |z|; negative inputs use Phi(-z) = 1 - Phi(z).
    """
    x = abs(z)
    t = 1.0 / (1.0 + _P * x)
    poly = t * (_B[0] + t * (_B[1] + t * (_B[2] + t * (_B[3] + t * _B[4]))))
    p = 1.0 - _INV_SQRT_2PI * math.exp(-0.5 * x * x) * poly
    return p if z >= 0 else 1.0 - p


def alliance_total(records: Iterable[Optional[RatingRecord]]) -> float:
    """Sum of the ratings that resolved; missing teams are left out."""
    return sum(r.auto_rating for r in records if r is not None)


def pooled_match_sd(
    std_devs: Iterable[Optional[float]],
    min_estimates: int = MIN_POOLED_ESTIMATES,
    fallback_sd: float = FALLBACK_MATCH_SD,
) -> Tuple[float, bool]:
    """Std dev of the alliance auto score difference.

    With independent, equally scaled robots an alliance sum scales the
    per-robot sd by sqrt(3) and the difference of two alliances by a
    further sqrt(2). A pooled sd of zero (scores that never vary) cannot
    scale a z-score, so it also takes the fallback. Returns
    ``(sd, used_fallback)``.
    """
    usable = [sd for sd in std_devs if sd is not None]
    if len(usable) < min_estimates:
        return fallback_sd, True
    mean_sd = sum(usable) / len(usable)
    pooled = mean_sd * math.sqrt(ALLIANCE_SIZE) * math.sqrt(2)
    if pooled <= 0:
        return fallback_sd, True
    return pooled, False


def win_probability(
    total_a: float, total_b: float, match_sd: float
) -> Tuple[float, float, float]:
    """``(z, p_a, p_b)`` for alliance A outscoring alliance B.

    A non-positive ``match_sd`` makes the outcome certain: the higher total
    wins outright and equal totals split evenly.
    """
    diff = total_a - total_b
    if match_sd <= 0:
        p_a = 1.0 if diff > 0 else 0.0 if diff < 0 else 0.5
        return math.copysign(math.inf, diff) if diff else 0.0, p_a, 1.0 - p_a
    z = diff / match_sd
    p_a = normal_cdf(z)
    return z, p_a, 1.0 - p_a
