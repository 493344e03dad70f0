"""Bezier curve algebra over any coordinate type supporting linear math.

Curves are immutable values in Bernstein form. ``BezierCurve`` holds the degree generic
operations (evaluation, subdivision, derivative), ``BezierCurve1D`` adds the polynomial
arithmetic needed for root finding and ``BezierCurve2D`` the planar helpers.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from pathnearest.common import DegreeMismatchError, EmptyCurveError
from pathnearest.linear_math import T, Point2D, binomial_coefficient, linear_interpolate, zero_of

if TYPE_CHECKING:
    from pathnearest.nearest import NearestPoint
    from pathnearest.root_finding import RootFindingConfig


###############################################################################
# BezierCurve
###############################################################################


@dataclass(frozen=True, init=False)
class BezierCurve(Generic[T]):
    """Bezier curve defined by one or more control points.

    The degree is ``len(points) - 1``: a single point is a constant, two points a line,
    three a quadratic and four a cubic curve, but every operation works for any degree.

    Attributes:
        points (Tuple[T, ...]): The control points, never empty.
    """

    points: Tuple[T, ...]

    def __init__(self, points: Iterable[Any]):
        """Initialize the curve from its control points.

        Args:
            points: The control points in order from start to end.

        Raises:
            EmptyCurveError: If no control point is given.
        """
        coerced = tuple(self._coerce_point(point) for point in points)
        if not coerced:
            raise EmptyCurveError("Bezier curves require at least one control point")
        object.__setattr__(self, "points", coerced)

    @staticmethod
    def _coerce_point(point: Any) -> Any:
        return point

    def _with_points(self, points: Iterable[T]):
        return type(self)(points)

    @property
    def degree(self) -> int:
        """int: The polynomial degree of the curve."""
        return len(self.points) - 1

    @property
    def start_point(self) -> T:
        """The first control point, which is the value at t=0."""
        return self.points[0]

    @property
    def end_point(self) -> T:
        """The last control point, which is the value at t=1."""
        return self.points[-1]

    def scaled(self, factor: float):
        """Return the curve with every control point multiplied by ``factor``."""
        factor = float(factor)
        return self._with_points(factor * point for point in self.points)

    def __rmul__(self, factor: float):
        if not isinstance(factor, numbers.Real):
            return NotImplemented
        return self.scaled(factor)

    def reversed(self):
        """Return the same curve traversed from end to start (t -> 1 - t)."""
        return self._with_points(reversed(self.points))

    def _hodograph(self):
        return self._with_points(self.points[i + 1] - self.points[i] for i in range(self.degree))

    def derivative(self):
        """Return the derivative curve.

        For degree n > 0 this is the hodograph scaled by n. A constant curve has the
        constant zero curve as derivative.
        """
        if self.degree == 0:
            return self._with_points([zero_of(self.points[0])])
        return self._hodograph().scaled(self.degree)

    def split_at(self, t: float):
        """Split the curve at parameter ``t`` using the de Casteljau algorithm.

        Args:
            t: The split parameter, usually within [0, 1].

        Returns:
            Tuple of the left curve (covering [0, t]) and the right curve (covering [t, 1]),
            both reparametrized to [0, 1].
        """
        if self.degree == 0:
            return self, self

        t = float(t)
        n = self.degree
        left_points = list(self.points)
        right_points = list(self.points)
        scratch = list(self.points)
        for j in range(1, n + 1):
            for i in range(n - j + 1):
                scratch[i] = linear_interpolate(scratch[i], scratch[i + 1], t)
            left_points[j] = scratch[0]
            right_points[n - j] = scratch[n - j]
        return self._with_points(left_points), self._with_points(right_points)

    def split_range(self, t1: float, t2: float):
        """Return the part of the curve between ``t1`` and ``t2`` reparametrized to [0, 1].

        If ``t1 > t2`` the extracted curve runs backwards. NaN bounds yield NaN points.
        """
        if self.degree == 0:
            return self
        # NaN makes this comparison False, so NaN bounds never bounce between both orders
        if t1 > t2:
            return self.split_range(t2, t1).reversed()
        if t1 == 0:
            return self.split_at(t2)[0]
        right = self.split_at(t1)[1]
        if t2 == 1:
            return right
        t2_mapped_to_right = (t2 - t1) / (1 - t1)
        return right.split_at(t2_mapped_to_right)[0]

    def value_at(self, t: float) -> T:
        """Evaluate the curve at parameter ``t``."""
        return self.split_at(t)[0].points[-1]

    def _bernstein_basis(self, ts: Union[Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        """Matrix of shape (len(ts), degree + 1) holding the Bernstein basis values."""
        t = np.asarray(ts, dtype=np.float64).reshape(-1, 1)
        n = self.degree
        i = np.arange(n + 1, dtype=np.float64)
        weights = np.array([binomial_coefficient(n, k) for k in range(n + 1)], dtype=np.float64)
        return weights * t**i * (1.0 - t) ** (n - i)


###############################################################################
# BezierCurve1D
###############################################################################


class BezierCurve1D(BezierCurve[float]):
    """Scalar Bezier curve, i.e. a polynomial in Bernstein form."""

    @staticmethod
    def _coerce_point(point: Any) -> float:
        return float(point)

    @property
    def coefficients(self) -> NDArray[np.float64]:
        """NDArray[np.float64]: The Bernstein coefficients."""
        return np.array(self.points, dtype=np.float64)

    def __add__(self, other: BezierCurve1D) -> BezierCurve1D:
        if not isinstance(other, BezierCurve1D):
            return NotImplemented
        if self.degree != other.degree:
            raise DegreeMismatchError(
                f"Polynomials must have equal degree to be added (got {self.degree} and {other.degree})"
            )
        return BezierCurve1D(a + b for a, b in zip(self.points, other.points))

    def __mul__(self, other: Union[BezierCurve1D, float]) -> BezierCurve1D:
        if isinstance(other, numbers.Real):
            return self.scaled(other)
        if not isinstance(other, BezierCurve1D):
            return NotImplemented
        return self._multiply_bernstein(other)

    def _multiply_bernstein(self, other: BezierCurve1D) -> BezierCurve1D:
        """Multiply two polynomials without leaving the Bernstein basis.

        Coefficient k of the product of degree m and degree n polynomials a and b is
            sum_i C(m, i) * C(n, k - i) * a[i] * b[k - i] / C(m + n, k)
        which is a convolution of the binomially weighted coefficients.
        See T.W. Sederberg, "Computer Aided Geometric Design", 9.3.
        """
        m = self.degree
        n = other.degree
        left = self.coefficients * np.array([binomial_coefficient(m, i) for i in range(m + 1)], dtype=np.float64)
        right = other.coefficients * np.array([binomial_coefficient(n, j) for j in range(n + 1)], dtype=np.float64)
        divisors = np.array([binomial_coefficient(m + n, k) for k in range(m + n + 1)], dtype=np.float64)
        return BezierCurve1D(np.convolve(left, right) / divisors)

    def evaluate(self, ts: Union[Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        """Evaluate the polynomial at several parameters at once."""
        return self._bernstein_basis(ts) @ self.coefficients

    def distinct_real_roots_in_unit_interval(self, config: Optional[RootFindingConfig] = None) -> List[float]:
        """Return the sorted, distinct real roots within [0, 1].

        See ``pathnearest.root_finding.distinct_real_roots_in_unit_interval``.
        """
        from pathnearest.root_finding import (  # pylint: disable=import-outside-toplevel
            distinct_real_roots_in_unit_interval,
        )

        return distinct_real_roots_in_unit_interval(self, config)


###############################################################################
# BezierCurve2D
###############################################################################


class BezierCurve2D(BezierCurve[Point2D]):
    """Planar Bezier curve with Point2D control points.

    Control points may be given as Point2D, (x, y) tuples or numpy rows.
    """

    @staticmethod
    def _coerce_point(point: Any) -> Point2D:
        return Point2D.from_any(point)

    @classmethod
    def line(cls, start: Any, end: Any) -> BezierCurve2D:
        """Create a straight line from ``start`` to ``end``."""
        return cls([start, end])

    @classmethod
    def quadratic(cls, start: Any, end: Any, control: Any) -> BezierCurve2D:
        """Create a quadratic curve from ``start`` to ``end`` with one control point."""
        return cls([start, control, end])

    @classmethod
    def cubic(cls, start: Any, end: Any, control1: Any, control2: Any) -> BezierCurve2D:
        """Create a cubic curve from ``start`` to ``end`` with two control points."""
        return cls([start, control1, control2, end])

    @classmethod
    def from_array(cls, points: NDArray[np.float64]) -> BezierCurve2D:
        """Create a curve from an array of shape (n, 2) or (n, 3); extra columns are ignored."""
        points_array = np.asarray(points, dtype=np.float64)
        if points_array.ndim != 2 or points_array.shape[1] < 2:
            raise ValueError("BezierCurve2D requires (x, y) formatted points.")
        return cls(points_array[:, :2])

    def to_array(self) -> NDArray[np.float64]:
        """Control points as array of shape (degree + 1, 2)."""
        return np.array([point.to_tuple() for point in self.points], dtype=np.float64)

    def x_polynomial(self) -> BezierCurve1D:
        """The x-coordinate channel as scalar curve."""
        return BezierCurve1D(point.x for point in self.points)

    def y_polynomial(self) -> BezierCurve1D:
        """The y-coordinate channel as scalar curve."""
        return BezierCurve1D(point.y for point in self.points)

    def dot_product(self, other: BezierCurve2D) -> BezierCurve1D:
        """Return the polynomial x1 * x2 + y1 * y2 of degree ``self.degree + other.degree``."""
        return self.x_polynomial() * other.x_polynomial() + self.y_polynomial() * other.y_polynomial()

    def polygonize(self, steps: int) -> NDArray[np.float64]:
        """
        Sample the curve at ``steps + 1`` evenly spaced parameters.

        Uses direct Bernstein basis evaluation with vectorized NumPy operations.

        Args:
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) containing the sampled (x, y) points
        """
        if steps < 1:
            raise ValueError(f"Polygonizing a curve requires at least one step (got {steps})")
        t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)
        return self._bernstein_basis(t) @ self.to_array()

    def nearest_point_on_curve(self, point: Any, config: Optional[RootFindingConfig] = None) -> NearestPoint:
        """Return the parameter and position of the curve point closest to ``point``.

        See ``pathnearest.nearest.nearest_point_on_curve``.
        """
        from pathnearest.nearest import nearest_point_on_curve  # pylint: disable=import-outside-toplevel

        return nearest_point_on_curve(self, point, config)
