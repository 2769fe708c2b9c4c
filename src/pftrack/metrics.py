"""
Distance metrics between equal-length numeric sequences, and between sets of them.

The point metrics are used to compare normalized histograms (Bhattacharyya, Hellinger)
as well as ordinary vectors (Euclidean, Manhattan, Chebyshev). Running products
(integral, Cauchy product, circular convolution) live here as well. All functions
accept anything numpy can turn into a 1D float array.
"""

from enum import Enum
from typing import Sequence

import numpy as np


class DistanceMetric(Enum):
    EUCLIDEAN = 0
    DOTPRODUCT = 1
    BHATTACHARYYA = 2
    HELLINGER = 3
    MANHATTAN = 4
    CHEBYSHEV = 5
    BHATTACHARYYA_COEFFICIENT = 6
    SQUARED_HELLINGER = 7


class SetDistanceMetric(Enum):
    INFIMUM = 0
    SUPREMUM = 1
    HAUSDORFF = 2
    SUPINF = 3


class Norm(Enum):
    EUCLIDEAN = 0
    TAXICAB = 1
    MAXIMUM = 2


class Mean(Enum):
    ARITHMETIC = 0
    GEOMETRIC = 1
    HARMONIC = 2
    QUADRATIC = 3


def _pair(x, y):
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    assert x.size == y.size, f"Container size unequal: {x.size} vs {y.size}"
    return x, y


def bhattacharyya_coefficient(x, y) -> float:
    """Sum of sqrt(x_i * y_i). Only meaningful for non-negative inputs."""
    x, y = _pair(x, y)
    return float(np.sum(np.sqrt(x * y)))


def distance(x, y, metric: DistanceMetric = DistanceMetric.EUCLIDEAN) -> float:
    """
    Compute the dissimilarity between two sequences of equal length.

    Parameters
    ----------
    x, y : array_like
        The two sequences. A length mismatch is a programming error and fails the assertion.
    metric : DistanceMetric
        DOTPRODUCT         sum_i x_i*y_i
        EUCLIDEAN          sqrt(sum_i (x_i-y_i)^2)
        MANHATTAN          sum_i |x_i-y_i|
        CHEBYSHEV          max_i |x_i-y_i|
        BHATTACHARYYA_COEFFICIENT  sum_i sqrt(x_i*y_i)
        BHATTACHARYYA      -ln(sum_i sqrt(x_i*y_i))
        HELLINGER          sqrt(sum_i (sqrt(x_i)-sqrt(y_i))^2) / sqrt(2)
        SQUARED_HELLINGER  sqrt(1 - sum_i sqrt(x_i*y_i))

    Returns
    -------
    float
        The distance.
    """
    x, y = _pair(x, y)

    if metric == DistanceMetric.DOTPRODUCT:
        return float(np.dot(x, y))
    if metric == DistanceMetric.EUCLIDEAN:
        return float(np.sqrt(np.sum((x - y) ** 2)))
    if metric == DistanceMetric.MANHATTAN:
        return float(np.sum(np.abs(x - y)))
    if metric == DistanceMetric.CHEBYSHEV:
        if x.size == 0:
            return 0.0
        return float(np.max(np.abs(x - y)))
    if metric == DistanceMetric.BHATTACHARYYA_COEFFICIENT:
        return bhattacharyya_coefficient(x, y)
    if metric == DistanceMetric.BHATTACHARYYA:
        return float(-np.log(bhattacharyya_coefficient(x, y)))
    if metric == DistanceMetric.HELLINGER:
        return float(np.sqrt(np.sum((np.sqrt(x) - np.sqrt(y)) ** 2)) / np.sqrt(2.0))
    if metric == DistanceMetric.SQUARED_HELLINGER:
        # Rounding can push the coefficient a hair above one for identical histograms.
        return float(np.sqrt(max(0.0, 1.0 - bhattacharyya_coefficient(x, y))))

    raise ValueError(f"Unknown distance metric: {metric}")


def norm(x, kind: Norm = Norm.EUCLIDEAN) -> float:
    """Length of a sequence: L2, L1 or the element of largest magnitude."""
    x = np.asarray(x, dtype=np.float64).ravel()

    if kind == Norm.EUCLIDEAN:
        return float(np.sqrt(np.sum(x ** 2)))
    if kind == Norm.TAXICAB:
        return float(np.sum(np.abs(x)))
    if kind == Norm.MAXIMUM:
        if x.size == 0:
            return 0.0
        return float(x[np.argmax(np.abs(x))])

    raise ValueError(f"Unknown norm: {kind}")


def mean(x, kind: Mean = Mean.ARITHMETIC) -> float:
    x = np.asarray(x, dtype=np.float64).ravel()
    if x.size == 0:
        return 0.0

    if kind == Mean.ARITHMETIC:
        return float(np.mean(x))
    if kind == Mean.GEOMETRIC:
        return float(np.exp(np.mean(np.log(x))))
    if kind == Mean.HARMONIC:
        return float(x.size / np.sum(1.0 / x))
    if kind == Mean.QUADRATIC:
        return float(np.sqrt(np.mean(x ** 2)))

    raise ValueError(f"Unknown mean: {kind}")


def increase_distance(tomove, reference, mu: float) -> np.ndarray:
    """
    Push a container away from a reference: x + mu * (x - ref).

    Args:
        tomove: The container to be moved.
        reference: The "repeller".
        mu: Step size, 0 < mu <= 1.

    Returns:
        np.ndarray: The moved container.
    """
    assert 0.0 < mu <= 1.0, f"Step size {mu} outside (0, 1]"
    x, ref = _pair(tomove, reference)
    return x + mu * (x - ref)


def decrease_distance(tomove, reference, mu: float) -> np.ndarray:
    """
    Pull a container towards a reference: x - mu * (x - ref). With mu == 1 the
    result equals the reference.
    """
    assert 0.0 < mu <= 1.0, f"Step size {mu} outside (0, 1]"
    x, ref = _pair(tomove, reference)
    return x - mu * (x - ref)


def integral(x, kernel) -> np.ndarray:
    """
    Discrete integral of a function under a kernel: the running sum of x_i * k_i.

    The kernel must be at least as long as x, only its first len(x) values are used.
    """
    x = np.asarray(x, dtype=np.float64).ravel()
    kernel = np.asarray(kernel, dtype=np.float64).ravel()
    assert kernel.size >= x.size, f"Kernel of {kernel.size} values is shorter than {x.size}"
    return np.cumsum(x * kernel[:x.size])


def reverse_inner_product(x, y, init: float = 0.0) -> float:
    """Inner product with y traversed backwards from its last element."""
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    assert y.size >= x.size, f"Second container of {y.size} values is shorter than {x.size}"
    return float(init + np.dot(x, y[::-1][:x.size]))


def cauchy_product(x, y) -> np.ndarray:
    """
    Running reverse inner product, the partial sums
    c_n = sum_{k<=n} x_k * y_{m-1-k} with m the length of y.
    """
    x = np.asarray(x, dtype=np.float64).ravel()
    y = np.asarray(y, dtype=np.float64).ravel()
    assert y.size >= x.size, f"Second container of {y.size} values is shorter than {x.size}"
    return np.cumsum(x * y[::-1][:x.size])


def circular_convolution(x, y, shift: int = 1) -> np.ndarray:
    """
    Circular convolution of two equally long sequences.

    Entry n is the reverse inner product of x with y rotated to the right by
    (n + 1) * shift positions. For x = y = (1, 2, 3, 4) this gives (26, 28, 26, 20).
    """
    x, y = _pair(x, y)
    return np.array([reverse_inner_product(x, np.roll(y, (n + 1) * shift)) for n in range(x.size)])


def distance_to_point(point_set: Sequence, point,
                      set_metric: SetDistanceMetric = SetDistanceMetric.INFIMUM,
                      point_metric: DistanceMetric = DistanceMetric.EUCLIDEAN) -> float:
    """
    Distance of a point to a set of points.

    INFIMUM is the distance to the closest member, e.g. d(1, {3, 6}) = 2 under the
    Euclidean metric. SUPREMUM is the distance to the most remote member.
    """
    assert len(point_set) > 0, "Distance to an empty set is undefined"

    distances = [distance(member, point, point_metric) for member in point_set]

    if set_metric == SetDistanceMetric.INFIMUM:
        return min(distances)
    if set_metric == SetDistanceMetric.SUPREMUM:
        return max(distances)

    raise ValueError(f"Set metric {set_metric} is not defined between a point and a set")


def distance_to_set(set0: Sequence, set1: Sequence,
                    set_metric: SetDistanceMetric = SetDistanceMetric.HAUSDORFF,
                    point_metric: DistanceMetric = DistanceMetric.EUCLIDEAN) -> float:
    """
    Distance between two sets of points.

    SUPINF picks, for every point in set0, its distance to the closest point in set1,
    and returns the largest of those. It is not symmetric: d({1,3,6,7}, {3,6}) = 2 but
    d({3,6}, {1,3,6,7}) = 0. HAUSDORFF is the maximum of SUPINF in both directions, the
    longest distance an adversary can force you to travel from one set to the other.
    """
    if set_metric == SetDistanceMetric.HAUSDORFF:
        return max(distance_to_set(set0, set1, SetDistanceMetric.SUPINF, point_metric),
                   distance_to_set(set1, set0, SetDistanceMetric.SUPINF, point_metric))

    if set_metric == SetDistanceMetric.SUPINF:
        assert len(set0) > 0, "Distance from an empty set is undefined"
        return max(distance_to_point(set1, p, SetDistanceMetric.INFIMUM, point_metric) for p in set0)

    raise ValueError(f"Set metric {set_metric} is not defined between two sets")
