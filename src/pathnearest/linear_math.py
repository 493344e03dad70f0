"""Linear math capability for coordinate types usable as Bezier control points.

A coordinate type takes part in curve math if it supports ``k * v``, ``v + v``, ``v - v``
and registers a zero value (``zero_of``) and a metric (``distance``).
Python floats (any ``numbers.Real``) and ``Point2D`` are provided here.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from functools import singledispatch
from typing import Any, Iterator, Protocol, Sequence, TypeVar, Union

import numpy as np
from numpy.typing import NDArray

Scalar = float


class LinearMath(Protocol):
    """Protocol for values that can be scaled, added and subtracted."""

    def __add__(self, other: Any) -> Any: ...

    def __sub__(self, other: Any) -> Any: ...

    def __rmul__(self, factor: float) -> Any: ...


T = TypeVar("T", bound=LinearMath)


###############################################################################
# Functions
###############################################################################


def binomial_coefficient(n: int, k: int) -> int:
    """Number of ways to choose ``k`` out of ``n`` (zero when ``k > n``).

    Uses the multiplicative recurrence ``result * (n - i) / (i + 1)``,
    every intermediate value of which is an integer.

    Raises:
        ValueError: If ``n`` or ``k`` is negative.
    """
    if n < 0 or k < 0:
        raise ValueError(f"Binomial coefficient requires n >= 0 and k >= 0 (got n={n}, k={k})")
    result = 1
    for i in range(k):
        result *= n - i
        result //= i + 1
    return result


def linear_interpolate(first: T, second: T, t: float) -> T:
    """Interpolate between ``first`` (t=0) and ``second`` (t=1)."""
    return (1 - t) * first + t * second


@singledispatch
def zero_of(value: Any) -> Any:
    """Return the additive identity of the coordinate space ``value`` belongs to."""
    raise TypeError(f"Type {type(value).__name__} does not support linear math")


@zero_of.register(numbers.Real)
def _zero_of_scalar(value: numbers.Real) -> float:  # pylint: disable=unused-argument
    return 0.0


@singledispatch
def distance(first: Any, second: Any) -> float:
    """Return the non-negative distance between two values of the same coordinate space."""
    raise TypeError(f"Type {type(first).__name__} does not support linear math")


@distance.register(numbers.Real)
def _distance_scalar(first: numbers.Real, second: numbers.Real) -> float:
    return abs(float(first) - float(second))


###############################################################################
# Point2D
###############################################################################


@dataclass(frozen=True)
class Point2D:
    """Immutable 2D point with componentwise arithmetic.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    def __add__(self, other: Point2D) -> Point2D:
        if not isinstance(other, Point2D):
            return NotImplemented
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point2D) -> Point2D:
        if not isinstance(other, Point2D):
            return NotImplemented
        return Point2D(self.x - other.x, self.y - other.y)

    def __rmul__(self, factor: float) -> Point2D:
        if not isinstance(factor, numbers.Real):
            return NotImplemented
        return Point2D(factor * self.x, factor * self.y)

    def __mul__(self, factor: float) -> Point2D:
        return self.__rmul__(factor)

    def __neg__(self) -> Point2D:
        return Point2D(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    @classmethod
    def zero(cls) -> Point2D:
        """The origin (0, 0)."""
        return cls(0.0, 0.0)

    @classmethod
    def from_any(cls, value: Union[Point2D, Sequence[float], NDArray[np.float64]]) -> Point2D:
        """Create a Point2D from a Point2D, an (x, y) sequence or a numpy row.

        Only the first two entries are used, so (x, y, type) rows are accepted as well.
        """
        if isinstance(value, Point2D):
            return value
        return cls(float(value[0]), float(value[1]))

    def distance_to(self, other: Point2D) -> float:
        """Euclidean distance to ``other``."""
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    @property
    def is_nan(self) -> bool:
        """True if any coordinate is NaN."""
        return math.isnan(self.x) or math.isnan(self.y)

    def to_tuple(self) -> tuple:
        """The point as (x, y) tuple."""
        return (self.x, self.y)


@zero_of.register(Point2D)
def _zero_of_point(value: Point2D) -> Point2D:  # pylint: disable=unused-argument
    return Point2D.zero()


@distance.register(Point2D)
def _distance_point(first: Point2D, second: Point2D) -> float:
    return first.distance_to(second)
