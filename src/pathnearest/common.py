"""Central module containing the exception types shared by the curve and root finding modules."""

from __future__ import annotations

###############################################################################
# Exceptions
###############################################################################


class PathNearestError(ValueError):
    """Base exception for precondition violations in curve math."""


class EmptyCurveError(PathNearestError):
    """Raised when a Bezier curve is constructed without control points."""


class DegreeMismatchError(PathNearestError):
    """Raised when two polynomials of different degree are added."""


class InvalidConfigError(PathNearestError):
    """Raised when a root finding configuration is out of its allowed range."""
