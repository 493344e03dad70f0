"""Test module for pathnearest.root_finding

The tests are run using pytest.
These tests ensure that Bezier clipping finds every real root within the
unit interval, sorted and without duplicates, after changes and refactoring.
"""

import logging
import math
import warnings

import numpy as np
import pytest
from polynomial_helpers import polynomial_with_complex_roots, polynomial_with_real_roots

from pathnearest.bezier import BezierCurve1D
from pathnearest.common import InvalidConfigError
from pathnearest.root_finding import (
    DEFAULT_ERROR_THRESHOLD,
    DEFAULT_ROOT_FINDING_CONFIG,
    MINIMUM_ERROR_THRESHOLD,
    RootFindingConfig,
    distinct_real_roots_in_unit_interval,
)

MAX_ERROR = DEFAULT_ERROR_THRESHOLD

###############################################################################
# RootFindingConfig Tests
###############################################################################


class TestRootFindingConfig:
    """Test class for RootFindingConfig."""

    def test_defaults(self):
        """Test the default configuration."""
        assert DEFAULT_ROOT_FINDING_CONFIG.error_threshold == 1e-5
        assert RootFindingConfig().error_threshold == DEFAULT_ERROR_THRESHOLD
        assert RootFindingConfig(error_threshold=MINIMUM_ERROR_THRESHOLD).error_threshold == 1e-12

    @pytest.mark.parametrize("threshold", [0.0, -1.0, 1e-13, math.nan])
    def test_threshold_below_minimum_raises(self, threshold):
        """Test that thresholds below the minimum are rejected."""
        with pytest.raises(InvalidConfigError):
            RootFindingConfig(error_threshold=threshold)

    def test_invalid_config_is_value_error(self):
        """Test that configuration errors are ValueErrors."""
        with pytest.raises(ValueError):
            RootFindingConfig(error_threshold=1e-20)

    def test_max_depth_must_be_positive(self):
        """Test that the depth limit must allow at least one level."""
        with pytest.raises(InvalidConfigError):
            RootFindingConfig(max_depth=0)

    def test_dict_conversion(self):
        """Test conversion to and from dictionaries."""
        config = RootFindingConfig(error_threshold=1e-8, max_depth=64)
        assert config.to_dict() == {"error_threshold": 1e-8, "max_depth": 64}
        assert RootFindingConfig.from_dict(config.to_dict()) == config
        assert RootFindingConfig.from_dict({}) == DEFAULT_ROOT_FINDING_CONFIG


###############################################################################
# Simple Polynomial Tests
###############################################################################


class TestRootFindingSimple:
    """Test root finding on constants, lines and quadratics."""

    def test_constant(self):
        """Test that constants have no roots, including the zero constant."""
        assert distinct_real_roots_in_unit_interval(BezierCurve1D([0.0])) == []
        assert distinct_real_roots_in_unit_interval(BezierCurve1D([3.0])) == []

    def test_linear(self):
        """Test lines crossing inside, at the ends, and not at all."""
        assert BezierCurve1D([-1.0, 2.0]).distinct_real_roots_in_unit_interval() == pytest.approx([1.0 / 3.0])
        assert BezierCurve1D([0.0, 2.0]).distinct_real_roots_in_unit_interval() == [0.0]
        assert BezierCurve1D([2.0, 0.0]).distinct_real_roots_in_unit_interval() == [1.0]
        assert BezierCurve1D([1.0, 2.0]).distinct_real_roots_in_unit_interval() == []
        assert BezierCurve1D([-2.0, -1.0]).distinct_real_roots_in_unit_interval() == []
        assert BezierCurve1D([0.0, 0.0]).distinct_real_roots_in_unit_interval() == []

    def test_quadratic(self):
        """Test quadratics with double, simple, boundary and no roots."""
        assert BezierCurve1D([1.0, -1.0, 1.0]).distinct_real_roots_in_unit_interval() == pytest.approx(
            [0.5], abs=MAX_ERROR
        )

        roots2 = [0.25, 0.75]
        assert polynomial_with_real_roots(roots2).distinct_real_roots_in_unit_interval() == pytest.approx(
            roots2, abs=MAX_ERROR
        )

        assert BezierCurve1D([-1.0, -1.0, 1.0]).distinct_real_roots_in_unit_interval() == pytest.approx(
            [math.sqrt(2) / 2], abs=MAX_ERROR
        )

        assert BezierCurve1D([0.0, 2.0, 0.0]).distinct_real_roots_in_unit_interval() == pytest.approx([0.0, 1.0])

        quad5_roots = [0.5 - math.sqrt(2) / 4, 0.5 + math.sqrt(2) / 4]
        assert BezierCurve1D([-1.0, 3.0, -1.0]).distinct_real_roots_in_unit_interval() == pytest.approx(
            quad5_roots, abs=MAX_ERROR
        )

        assert BezierCurve1D([1.0, -0.999, 1.0]).distinct_real_roots_in_unit_interval() == []
        assert BezierCurve1D([2.0, 1.0, 2.0]).distinct_real_roots_in_unit_interval() == []
        assert BezierCurve1D([0.0, 0.0, 0.0]).distinct_real_roots_in_unit_interval() == []

    @pytest.mark.parametrize(
        "roots",
        [
            [0.95160796486060883, 0.95173949374103949],
            [0.89445832700841654, 0.97339909490455367],
        ],
    )
    def test_close_roots(self, roots):
        """Test nearby root pairs that once made clipping step over a root."""
        computed = polynomial_with_real_roots(roots).distinct_real_roots_in_unit_interval()
        assert computed == pytest.approx(roots, abs=MAX_ERROR)

    def test_roots_outside_unit_interval_ignored(self):
        """Test that only roots within [0, 1] are reported."""
        polynomial = polynomial_with_real_roots([-0.5, 0.3, 0.6, 1.5])
        assert polynomial.distinct_real_roots_in_unit_interval() == pytest.approx([0.3, 0.6], abs=MAX_ERROR)

    def test_nan_coefficients(self):
        """Test that NaN coefficients give no roots instead of failing."""
        assert BezierCurve1D([math.nan, math.nan]).distinct_real_roots_in_unit_interval() == []
        assert BezierCurve1D([math.nan, math.nan, math.nan]).distinct_real_roots_in_unit_interval() == []

    def test_huge_coefficients_do_not_warn(self):
        """Test that coefficients near the float limit overflow silently inside the hull test."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            roots = BezierCurve1D([1e308, -1e308]).distinct_real_roots_in_unit_interval()

        assert len(roots) == 1
        assert 0.0 <= roots[0] <= 1.0

    def test_custom_threshold(self):
        """Test that a smaller threshold gives a more accurate root."""
        line = BezierCurve1D([-1.0, 2.0])
        config = RootFindingConfig(error_threshold=MINIMUM_ERROR_THRESHOLD)
        assert distinct_real_roots_in_unit_interval(line, config) == pytest.approx([1.0 / 3.0], abs=1e-12)

        cubic = polynomial_with_real_roots([0.1, 0.45, 0.8])
        assert cubic.distinct_real_roots_in_unit_interval(config) == pytest.approx([0.1, 0.45, 0.8], abs=1e-10)


###############################################################################
# Depth Limit Tests
###############################################################################


class TestRootFindingDepthLimit:
    """Test that the depth limit stops refinement without failing."""

    def test_depth_limit_reports_interval(self, caplog):
        """Test that hitting the depth limit logs a warning and reports a bracketed root by its interval."""
        config = RootFindingConfig(max_depth=1)
        # 2t^2 + t - 1 in Bernstein form, its only root in [0, 1] is 0.5
        polynomial = BezierCurve1D([-1.0, -0.5, 2.0])
        with caplog.at_level(logging.WARNING, logger="pathnearest.root_finding"):
            roots = polynomial.distinct_real_roots_in_unit_interval(config)

        assert len(roots) == 1
        # the first clip narrows the search to [1/3, 0.6]
        assert 1.0 / 3.0 <= roots[0] <= 0.6
        assert "Root refinement stopped" in caplog.text

    def test_depth_limit_without_sign_change_reports_nothing(self, caplog):
        """Test that an unconverged interval without a sign change is not reported as a root."""
        config = RootFindingConfig(max_depth=1)
        with caplog.at_level(logging.WARNING, logger="pathnearest.root_finding"):
            no_real_roots = BezierCurve1D([1.0, -0.999, 1.0]).distinct_real_roots_in_unit_interval(config)
            two_close_roots = BezierCurve1D([-1.0, 3.0, -1.0]).distinct_real_roots_in_unit_interval(config)

        assert no_real_roots == []
        assert two_close_roots == sorted(two_close_roots)
        assert all(0.0 <= root <= 1.0 for root in two_close_roots)
        assert "Root refinement stopped" in caplog.text

    def test_default_depth_not_reached(self, caplog):
        """Test that ordinary polynomials converge well within the depth limit."""
        config = RootFindingConfig(error_threshold=MINIMUM_ERROR_THRESHOLD)
        with caplog.at_level(logging.WARNING, logger="pathnearest.root_finding"):
            polynomial_with_real_roots([0.0, 0.0, 0.2, 0.7, 1.0, 1.0]).distinct_real_roots_in_unit_interval(config)

        assert "Root refinement stopped" not in caplog.text


###############################################################################
# Fuzzing Tests
###############################################################################


def _random_value(rng: np.random.Generator, interval_size: int = 2) -> float:
    """Random value in [-interval_size, interval_size], an integer half of the time."""
    if rng.random() < 0.5:
        return float(rng.uniform(-interval_size, interval_size))
    return float(rng.integers(-interval_size, interval_size, endpoint=True))


class TestRootFindingFuzzed:
    """Test root finding on randomized products of real and complex root factors."""

    def test_using_fuzzed_inputs(self):
        """Test that computed roots match the known real roots within [0, 1]."""
        config = RootFindingConfig(error_threshold=MINIMUM_ERROR_THRESHOLD)
        # the generated coefficients carry rounding errors, which move the true roots slightly
        tolerance = 1e-9
        # seeded so that failures are reproducible
        rng = np.random.default_rng(12345)

        for iteration in range(1000):
            real_roots = [_random_value(rng) for _ in range(rng.integers(0, 9, endpoint=True))]
            complex_roots = []
            for _ in range(rng.integers(0, 4, endpoint=True)):
                root = (_random_value(rng), _random_value(rng))
                # a zero imaginary part makes the root real
                if root[1] != 0:
                    complex_roots.append(root)
            expected = sorted({root for root in real_roots if 0 <= root <= 1})

            polynomial = polynomial_with_real_roots(real_roots) * polynomial_with_complex_roots(complex_roots)
            computed = polynomial.distinct_real_roots_in_unit_interval(config)

            message = f"iteration {iteration}: expected {expected}, computed {computed}"
            assert all(0 <= root <= 1 for root in computed), f"{message}: values outside of unit interval"
            assert computed == sorted(computed), f"{message}: not sorted"
            assert len(set(computed)) == len(computed), f"{message}: contains duplicate(s)"
            for expected_root in expected:
                assert any(abs(expected_root - root) <= tolerance for root in computed), f"{message}: missing root"
            assert len(computed) <= len(expected), f"{message}: extra root(s)"
            for root in computed:
                assert any(abs(root - expected_root) <= tolerance for expected_root in expected), f"{message}: false root"
