"""Nearest point queries on planar Bezier curves and sequences of curve segments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional, Sequence

from pathnearest.bezier import BezierCurve2D
from pathnearest.linear_math import Point2D
from pathnearest.root_finding import RootFindingConfig, distinct_real_roots_in_unit_interval

logger = logging.getLogger(__name__)


class NearestPoint(NamedTuple):
    """Closest curve point as (t, point)."""

    t: float
    point: Point2D


@dataclass(frozen=True)
class SegmentNearestPoint:
    """Closest point on one segment of a segment sequence.

    Attributes:
        segment_index (int): Index of the segment within the queried sequence.
        t (float): Curve parameter of the closest point on that segment.
        point (Point2D): The closest point.
        distance (float): Euclidean distance between the query point and ``point``.
    """

    segment_index: int
    t: float
    point: Point2D
    distance: float


###############################################################################
# Single curve
###############################################################################


def nearest_point_on_curve(
    curve: BezierCurve2D, point: Any, config: Optional[RootFindingConfig] = None
) -> NearestPoint:
    """Find the point on ``curve`` closest to ``point``.

    The squared distance to the query point is stationary where
    (curve(t) - point) . curve'(t) = 0. The roots of that polynomial in [0, 1] together with
    both curve ends are the candidates; the closest candidate wins, the first one on ties.

    Args:
        curve: The curve to search.
        point: The query point as Point2D or (x, y).
        config: Root finding tunables, the defaults if None.

    Returns:
        NearestPoint: The parameter and the position of the closest point.
    """
    query = Point2D.from_any(point)
    difference = BezierCurve2D(control_point - query for control_point in curve.points)
    equation = difference.dot_product(curve.derivative())

    candidates = [0.0, 1.0] + distinct_real_roots_in_unit_interval(equation, config)
    points = [curve.value_at(t) for t in candidates]
    closest_t, closest_point = min(zip(candidates, points), key=lambda candidate: query.distance_to(candidate[1]))
    logger.debug("Nearest point: %d candidates, closest at t=%r", len(candidates), closest_t)
    return NearestPoint(t=closest_t, point=closest_point)


###############################################################################
# Segment sequences
###############################################################################


def nearest_points_on_segments(
    segments: Sequence[BezierCurve2D], point: Any, config: Optional[RootFindingConfig] = None
) -> List[SegmentNearestPoint]:
    """Find the closest point on each segment, in segment order.

    Args:
        segments: The curve segments, e.g. the lines and curves of a decomposed path.
        point: The query point as Point2D or (x, y).
        config: Root finding tunables, the defaults if None.

    Returns:
        List[SegmentNearestPoint]: One result per segment.
    """
    query = Point2D.from_any(point)
    results: List[SegmentNearestPoint] = []
    for index, segment in enumerate(segments):
        t, closest = nearest_point_on_curve(segment, query, config)
        results.append(SegmentNearestPoint(index, t, closest, query.distance_to(closest)))
    return results


def nearest_point_on_segments(
    segments: Sequence[BezierCurve2D], point: Any, config: Optional[RootFindingConfig] = None
) -> SegmentNearestPoint:
    """Find the closest point over all segments.

    Ties are resolved in favor of the earlier segment.

    Raises:
        ValueError: If ``segments`` is empty.
    """
    results = nearest_points_on_segments(segments, point, config)
    if not results:
        raise ValueError("At least one segment is required to find a nearest point")
    return min(results, key=lambda result: result.distance)


def main():
    """Print the nearest points of a small two segment path."""
    segments = [
        BezierCurve2D.line(start=(3.0, 1.0), end=(7.0, 9.0)),
        BezierCurve2D.cubic(start=(7.0, 9.0), end=(11.0, 9.0), control1=(8.0, 10.0), control2=(10.0, 10.0)),
    ]
    for query in [(2.0, 4.0), (9.0, 11.0)]:
        for result in nearest_points_on_segments(segments, query):
            print(query, result)
        print("closest:", nearest_point_on_segments(segments, query))
        print()


if __name__ == "__main__":
    main()
