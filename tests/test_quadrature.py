"""Tests for discrete ability distributions."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from irtlink.quadrature import NormalQuadrature, QuadratureRule, UniformQuadrature


class TestQuadratureRule:
    """Moments and validation of arbitrary point/weight rules."""

    def test_moments_use_normalized_weights(self):
        rule = QuadratureRule([-1.0, 0.0, 1.0], [1.0, 2.0, 1.0])
        assert rule.mean == 0.0
        assert abs(rule.variance - 0.5) < 1e-12
        assert abs(rule.standard_deviation - np.sqrt(0.5)) < 1e-12
        assert rule.total_weight == 4.0

    def test_points_and_weights_read_only(self):
        rule = QuadratureRule([0.0, 1.0], [0.5, 0.5])
        with pytest.raises(ValueError):
            rule.points[0] = 3.0
        with pytest.raises(ValueError):
            rule.weights[0] = 3.0

    def test_input_is_copied(self):
        points = np.array([0.0, 1.0])
        rule = QuadratureRule(points, [0.5, 0.5])
        points[0] = 5.0
        assert rule.points[0] == 0.0

    def test_iteration(self):
        rule = QuadratureRule([0.0, 1.0], [0.25, 0.75])
        assert list(rule) == [(0.0, 0.25), (1.0, 0.75)]
        assert len(rule) == 2
        assert rule.minimum == 0.0
        assert rule.maximum == 1.0

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="same length"):
            QuadratureRule([0.0, 1.0], [1.0])

    def test_negative_weights(self):
        with pytest.raises(ValueError):
            QuadratureRule([0.0, 1.0], [1.0, -0.1])

    def test_non_finite_points(self):
        with pytest.raises(ValueError):
            QuadratureRule([0.0, np.inf], [1.0, 1.0])

    def test_summary(self):
        text = QuadratureRule([-1.0, 1.0], [0.5, 0.5]).summary()
        assert "QuadratureRule: 2 points" in text
        assert "Mean: 0.0000" in text

    def test_repr(self):
        assert repr(QuadratureRule([-1.0, 1.0], [0.5, 0.5])) == (
            "QuadratureRule(n_points=2, mean=0.0000, sd=1.0000)"
        )


class TestStandardize:
    def test_moving_points(self):
        rule = QuadratureRule([1.0, 2.0, 3.0, 4.0], [0.1, 0.4, 0.3, 0.2])
        standardized = rule.standardize()
        assert abs(standardized.mean) < 1e-12
        assert abs(standardized.standard_deviation - 1.0) < 1e-12
        assert_allclose(standardized.weights, rule.weights)

    def test_keeping_points(self):
        rule = NormalQuadrature(-4.0, 4.0, 81, mean=0.5, sd=1.2)
        standardized = rule.standardize(keep_points=True)
        assert_allclose(standardized.points, rule.points)
        assert abs(standardized.total_weight - 1.0) < 1e-6
        assert abs(standardized.mean) < 0.05
        assert abs(standardized.standard_deviation - 1.0) < 0.05

    def test_does_not_modify_original(self):
        rule = QuadratureRule([1.0, 2.0, 3.0], [0.2, 0.5, 0.3])
        rule.standardize()
        assert_allclose(rule.points, [1.0, 2.0, 3.0])

    def test_zero_variance(self):
        with pytest.raises(ValueError, match="zero variance"):
            QuadratureRule([1.0], [1.0]).standardize()


class TestUniformQuadrature:
    def test_grid(self):
        rule = UniformQuadrature(-4.0, 4.0, 161)
        assert rule.n_points == 161
        assert_allclose(rule.points[:3], [-4.0, -3.95, -3.9])
        assert_allclose(rule.weights, 1.0 / 161)
        assert abs(rule.mean) < 1e-12

    def test_reversed_bounds(self):
        rule = UniformQuadrature(3.0, -3.0, 25)
        assert rule.minimum == -3.0
        assert rule.maximum == 3.0

    def test_invalid_count(self):
        with pytest.raises(ValueError):
            UniformQuadrature(-1.0, 1.0, 0)


class TestNormalQuadrature:
    """Normal density on an evenly spaced grid."""

    def test_weights_sum_to_one(self):
        rule = NormalQuadrature(-4.0, 4.0, 41)
        assert abs(rule.total_weight - 1.0) < 1e-12
        assert abs(rule.mean) < 1e-12
        assert abs(rule.standard_deviation - 1.0) < 1e-3

    def test_weights_follow_density(self):
        rule = NormalQuadrature(-4.0, 4.0, 41)
        assert np.argmax(rule.weights) == 20
        assert_allclose(rule.weights, rule.weights[::-1])

    def test_shifted_mean(self):
        rule = NormalQuadrature(-5.0, 6.0, 111, mean=0.5, sd=1.5)
        assert abs(rule.mean - 0.5) < 1e-3
        assert abs(rule.standard_deviation - 1.5) < 1e-2

    def test_mean_outside_range(self):
        with pytest.raises(ValueError, match="must lie between"):
            NormalQuadrature(-1.0, 1.0, 11, mean=2.0)

    def test_invalid_sd(self):
        with pytest.raises(ValueError):
            NormalQuadrature(sd=0.0)
