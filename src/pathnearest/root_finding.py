"""Real root isolation for polynomials in Bernstein form using Bezier clipping.

The polynomial is treated as the explicit curve (i / n, coefficient[i]). The convex hull of
that control polygon bounds where the polynomial can cross zero, so the curve is repeatedly
clipped to the hull's crossing range. Slow convergence, usually caused by several roots
within the range, is handled by bisecting the curve and processing both halves separately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from pathnearest.bezier import BezierCurve1D
from pathnearest.common import InvalidConfigError
from pathnearest.linear_math import linear_interpolate

logger = logging.getLogger(__name__)

DEFAULT_ERROR_THRESHOLD: float = 1e-5
MINIMUM_ERROR_THRESHOLD: float = 1e-12
DEFAULT_MAX_DEPTH: int = 256

# Crossing ranges at least this wide are bisected instead of clipped
_BISECTION_WIDTH: float = 0.8


###############################################################################
# RootFindingConfig
###############################################################################


@dataclass(frozen=True)
class RootFindingConfig:
    """Tunables of the root finder.

    Attributes:
        error_threshold: Maximum width of a root interval before it is reported as a
            single root. Must be at least MINIMUM_ERROR_THRESHOLD.
        max_depth: Recursion depth after which refinement stops. The current interval is
            then reported by its midpoint if the polynomial changes sign (or is zero) at
            its ends, and dropped otherwise. Must be at least 1.
    """

    error_threshold: float = DEFAULT_ERROR_THRESHOLD
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        # written as a negated >= so that NaN is rejected too
        if not self.error_threshold >= MINIMUM_ERROR_THRESHOLD:
            raise InvalidConfigError(
                f"error_threshold must be at least {MINIMUM_ERROR_THRESHOLD} (got {self.error_threshold})"
            )
        if self.max_depth < 1:
            raise InvalidConfigError(f"max_depth must be at least 1 (got {self.max_depth})")

    def to_dict(self) -> dict:
        """Convert the configuration to a dictionary for serialization."""
        return {
            "error_threshold": self.error_threshold,
            "max_depth": self.max_depth,
        }

    @classmethod
    def from_dict(cls, data: dict) -> RootFindingConfig:
        """Create a RootFindingConfig from a dictionary."""
        return cls(
            error_threshold=data.get("error_threshold", DEFAULT_ERROR_THRESHOLD),
            max_depth=data.get("max_depth", DEFAULT_MAX_DEPTH),
        )


DEFAULT_ROOT_FINDING_CONFIG = RootFindingConfig()


###############################################################################
# Root finding
###############################################################################


def distinct_real_roots_in_unit_interval(
    curve: BezierCurve1D, config: Optional[RootFindingConfig] = None
) -> List[float]:
    """Return the distinct real roots of ``curve`` within 0 <= t <= 1 in ascending order.

    The identically zero polynomial is reported as having no roots.

    Args:
        curve: The polynomial in Bernstein form.
        config: Root finding tunables, DEFAULT_ROOT_FINDING_CONFIG if None.

    Returns:
        List[float]: The roots, each within ``config.error_threshold`` of a true root.
    """
    if config is None:
        config = DEFAULT_ROOT_FINDING_CONFIG
    if all(coefficient == 0 for coefficient in curve.points):
        return []

    roots = _roots_in_range(curve, 0.0, 1.0, config, 0)

    # the recursion emits roots in non-decreasing order, so duplicates are neighbors
    distinct: List[float] = []
    for root in roots:
        if not distinct or root != distinct[-1]:
            distinct.append(root)
    return distinct


def _convex_hull_crossing(coefficients: NDArray[np.float64]) -> Optional[Tuple[float, float]]:
    """Range of x where the convex hull of the explicit control polygon meets the x-axis.

    Every pair of polygon vertices (i < j) is checked; the hull's crossing range is the
    span of all pairwise segment crossings. A pair lying on the axis contributes its whole
    x-span. Returns None if nothing crosses.
    """
    n = len(coefficients) - 1
    xs = np.arange(n + 1, dtype=np.float64) / n
    first, second = np.triu_indices(n + 1, k=1)
    x1, y1 = xs[first], coefficients[first]
    x2, y2 = xs[second], coefficients[second]

    on_axis = (y1 == 0) & (y2 == 0)
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        t_line = -y1 / (y2 - y1)
    crosses = ~on_axis & (t_line >= 0) & (t_line <= 1)
    t_cross = t_line[crosses]
    x_cross = (1 - t_cross) * x1[crosses] + t_cross * x2[crosses]

    candidates = np.concatenate([x1[on_axis], x2[on_axis], x_cross])
    if candidates.size == 0:
        return None
    return float(candidates.min()), float(candidates.max())


def _skipped_root(first: float, second: float) -> bool:
    """True if the sign strictly changes between two boundary values."""
    return (first > 0 and second < 0) or (first < 0 and second > 0)


def _roots_in_range(
    curve: BezierCurve1D, range_start: float, range_end: float, config: RootFindingConfig, depth: int
) -> List[float]:
    """Roots of ``curve`` mapped from its local [0, 1] onto [range_start, range_end]."""
    # a non-zero constant has no root
    if curve.degree == 0:
        return []

    crossing = _convex_hull_crossing(curve.coefficients)
    if crossing is None:
        return []
    lower_bound, upper_bound = crossing

    if upper_bound - lower_bound >= _BISECTION_WIDTH and depth < config.max_depth:
        range_mid = linear_interpolate(range_start, range_end, 0.5)
        left, right = curve.split_at(0.5)
        return _roots_in_range(left, range_start, range_mid, config, depth + 1) + _roots_in_range(
            right, range_mid, range_end, config, depth + 1
        )

    next_range_start = linear_interpolate(range_start, range_end, lower_bound)
    next_range_end = linear_interpolate(range_start, range_end, upper_bound)
    if next_range_end - next_range_start <= config.error_threshold:
        return [linear_interpolate(next_range_start, next_range_end, 0.5)]

    if depth >= config.max_depth:
        # only a sign change (or a zero) at the range ends proves a root inside
        start_value, end_value = curve.start_point, curve.end_point
        if _skipped_root(start_value, end_value) or start_value == 0 or end_value == 0:
            logger.warning(
                "Root refinement stopped at depth %d, reporting interval [%g, %g] by its midpoint",
                depth,
                next_range_start,
                next_range_end,
            )
            return [linear_interpolate(next_range_start, next_range_end, 0.5)]
        logger.warning(
            "Root refinement stopped at depth %d, no sign change over [%g, %g], reporting no root",
            depth,
            range_start,
            range_end,
        )
        return []

    subcurve = curve.split_range(lower_bound, upper_bound)
    roots: List[float] = []
    # rounding may let the clipped range step over a root right at its boundary
    if _skipped_root(curve.start_point, subcurve.start_point):
        logger.debug("Recovered skipped root at %r", next_range_start)
        roots.append(next_range_start)
    roots += _roots_in_range(subcurve, next_range_start, next_range_end, config, depth + 1)
    if _skipped_root(subcurve.end_point, curve.end_point):
        logger.debug("Recovered skipped root at %r", next_range_end)
        roots.append(next_range_end)
    return roots
