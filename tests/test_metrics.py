"""
Unit tests for the metrics module.
"""

import pytest
import numpy as np
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pftrack.metrics import (DistanceMetric, Mean, Norm, SetDistanceMetric, cauchy_product,
                             circular_convolution, decrease_distance, distance, distance_to_point,
                             distance_to_set, increase_distance, integral, mean, norm,
                             reverse_inner_product)


class TestDistance:
    """Test cases for point metrics."""

    def test_euclidean(self):
        assert distance([0, 0], [3, 4], DistanceMetric.EUCLIDEAN) == pytest.approx(5.0)

    def test_dot_product(self):
        assert distance([1, 2, 3], [4, 5, 6], DistanceMetric.DOTPRODUCT) == pytest.approx(32.0)

    def test_manhattan_and_chebyshev(self):
        assert distance([1, 2], [4, 0], DistanceMetric.MANHATTAN) == pytest.approx(5.0)
        assert distance([1, 2], [4, 0], DistanceMetric.CHEBYSHEV) == pytest.approx(3.0)

    @pytest.mark.parametrize("metric", [DistanceMetric.EUCLIDEAN,
                                        DistanceMetric.MANHATTAN,
                                        DistanceMetric.CHEBYSHEV])
    def test_symmetric_and_zero_on_identity(self, metric):
        """Test that the vector metrics are symmetric and vanish on equal inputs."""
        rng = np.random.default_rng(7)
        x = rng.normal(size=8)
        y = rng.normal(size=8)

        assert distance(x, y, metric) == pytest.approx(distance(y, x, metric))
        assert distance(x, x, metric) == 0.0
        assert distance(x, y, metric) > 0.0

    def test_bhattacharyya_identical(self):
        p = [0.25, 0.25, 0.5]
        assert distance(p, p, DistanceMetric.BHATTACHARYYA_COEFFICIENT) == pytest.approx(1.0)
        assert distance(p, p, DistanceMetric.BHATTACHARYYA) == pytest.approx(0.0, abs=1e-12)

    def test_hellinger_disjoint(self):
        assert distance([1, 0], [0, 1], DistanceMetric.HELLINGER) == pytest.approx(1.0)
        assert distance([1, 0], [0, 1], DistanceMetric.SQUARED_HELLINGER) == pytest.approx(1.0)

    def test_squared_hellinger_identical(self):
        p = [0.1, 0.2, 0.3, 0.4]
        assert distance(p, p, DistanceMetric.SQUARED_HELLINGER) == pytest.approx(0.0, abs=1e-6)

    def test_squared_hellinger_bounded(self):
        """Test that squared-Hellinger stays within [0, 1] on random distributions."""
        rng = np.random.default_rng(42)
        for _ in range(50):
            x = rng.dirichlet(np.ones(16))
            y = rng.dirichlet(np.ones(16))
            d = distance(x, y, DistanceMetric.SQUARED_HELLINGER)
            assert 0.0 <= d <= 1.0

    def test_size_mismatch(self):
        with pytest.raises(AssertionError):
            distance([1, 2, 3], [1, 2], DistanceMetric.EUCLIDEAN)


class TestNormAndMean:
    """Test cases for norms and means."""

    def test_norms(self):
        assert norm([3, -4], Norm.EUCLIDEAN) == pytest.approx(5.0)
        assert norm([3, -4], Norm.TAXICAB) == pytest.approx(7.0)
        assert norm([3, -4], Norm.MAXIMUM) == pytest.approx(-4.0)

    def test_means(self):
        x = [1, 2, 4]
        assert mean(x, Mean.ARITHMETIC) == pytest.approx(7.0 / 3.0)
        assert mean(x, Mean.GEOMETRIC) == pytest.approx(2.0)
        assert mean(x, Mean.HARMONIC) == pytest.approx(3.0 / 1.75)
        assert mean(x, Mean.QUADRATIC) == pytest.approx(np.sqrt(7.0))

    def test_mean_of_empty(self):
        assert mean([], Mean.ARITHMETIC) == 0.0


class TestMoveDistance:
    """Test cases for increase_distance and decrease_distance."""

    def test_increase(self):
        np.testing.assert_allclose(increase_distance([1, 1], [0, 0], 0.5), [1.5, 1.5])

    def test_decrease(self):
        np.testing.assert_allclose(decrease_distance([1, 1], [0, 0], 0.5), [0.5, 0.5])

    def test_decrease_full_step_reaches_reference(self):
        np.testing.assert_allclose(decrease_distance([4, -2], [1, 1], 1.0), [1, 1])

    @pytest.mark.parametrize("mu", [0.0, -0.5, 1.5])
    def test_step_size_out_of_range(self, mu):
        with pytest.raises(AssertionError):
            increase_distance([1], [0], mu)


class TestConvolution:
    """Test cases for integral, Cauchy product and circular convolution of (1, 2, 3, 4)."""

    def test_integral(self):
        np.testing.assert_allclose(integral([1, 2, 3, 4], [1, 2, 3, 4]), [1, 5, 14, 30])

    def test_integral_short_kernel(self):
        with pytest.raises(AssertionError):
            integral([1, 2, 3], [1, 2])

    def test_reverse_inner_product(self):
        assert reverse_inner_product([1, 2, 3, 4], [1, 2, 3, 4]) == pytest.approx(20.0)
        assert reverse_inner_product([1, 2], [1, 2, 3, 4], init=1.0) == pytest.approx(11.0)

    def test_cauchy_product(self):
        np.testing.assert_allclose(cauchy_product([1, 2, 3, 4], [1, 2, 3, 4]), [4, 10, 16, 20])

    def test_circular_convolution(self):
        np.testing.assert_allclose(circular_convolution([1, 2, 3, 4], [1, 2, 3, 4]), [26, 28, 26, 20])

    def test_circular_convolution_leaves_input(self):
        y = np.array([1.0, 2.0, 3.0, 4.0])
        circular_convolution([1, 0, 0, 0], y, shift=2)
        np.testing.assert_array_equal(y, [1, 2, 3, 4])

    def test_circular_convolution_with_impulse(self):
        """Test that a unit impulse picks out the reversed, rotated second sequence."""
        result = circular_convolution([1, 0, 0, 0], [1, 2, 3, 4])
        np.testing.assert_allclose(result, [3, 2, 1, 4])


class TestSetDistance:
    """Test cases for distances between points and sets."""

    def test_infimum_to_point(self):
        assert distance_to_point([3, 6], 1, SetDistanceMetric.INFIMUM) == pytest.approx(2.0)

    def test_supremum_to_point(self):
        assert distance_to_point([3, 6], 1, SetDistanceMetric.SUPREMUM) == pytest.approx(5.0)

    def test_multidimensional_points(self):
        points = [[0, 0], [10, 10]]
        assert distance_to_point(points, [3, 4]) == pytest.approx(5.0)

    def test_hausdorff(self):
        assert distance_to_set([3, 6], [1, 3, 6, 7], SetDistanceMetric.HAUSDORFF) == pytest.approx(2.0)
        assert distance_to_set([1, 3, 6, 7], [3, 6], SetDistanceMetric.HAUSDORFF) == pytest.approx(2.0)

    def test_supinf_not_symmetric(self):
        assert distance_to_set([1, 3, 6, 7], [3, 6], SetDistanceMetric.SUPINF) == pytest.approx(2.0)
        assert distance_to_set([3, 6], [1, 3, 6, 7], SetDistanceMetric.SUPINF) == pytest.approx(0.0)

    def test_unsupported_set_metric(self):
        with pytest.raises(ValueError):
            distance_to_point([3, 6], 1, SetDistanceMetric.HAUSDORFF)
        with pytest.raises(ValueError):
            distance_to_set([3, 6], [1], SetDistanceMetric.INFIMUM)

    def test_empty_set(self):
        with pytest.raises(AssertionError):
            distance_to_point([], 1)
