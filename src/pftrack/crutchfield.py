"""
Information-theoretic distance between sensors.

Treating every pixel of a camera as a separate sensor, the Crutchfield distance

    d(X, Y) = H(X|Y) + H(Y|X)

tells how much one sensor's readings say about another's over a series of frames.
It can be used, for example, to find out which pixels (or cameras) observe the same
part of the world without any knowledge of their geometry.
"""

from abc import ABC, abstractmethod

import numpy as np

from pftrack.histogram import Histogram


class DistanceSource(ABC):
    """Anything that can report a distance between two of its sensors."""

    @abstractmethod
    def get_distance(self, sensor0: int, sensor1: int) -> float:
        ...

    @property
    @abstractmethod
    def sensor_count(self) -> int:
        ...


class CrutchfieldDistance(Histogram, DistanceSource):
    """
    Crutchfield distance between all pixel pairs.

    Call ``calc_probabilities(frames, joint=True)`` first, then ``calc_distances()``.
    """

    def __init__(self, bins: int, width: int, height: int):
        super().__init__(bins, width, height)
        self._dist = None

    def clear(self):
        super().clear()
        self._dist = None

    def calc_distance(self, p0: int, p1: int) -> float:
        dist = self.get_conditional_entropy(p0, p1) + self.get_conditional_entropy(p1, p0)
        assert dist >= 0.0
        return dist

    def calc_distances(self):
        """Fill the distance matrix for every ordered pair of pixels."""
        n = self.sensor_count
        dist = np.zeros((n, n), dtype=np.float64)
        for p0 in range(n):
            for p1 in range(p0 + 1, n):
                dist[p0, p1] = dist[p1, p0] = self.calc_distance(p0, p1)
        self._dist = dist

    def get_distance(self, sensor0: int, sensor1: int) -> float:
        assert self._dist is not None, "Distances queried before calc_distances"
        return float(self._dist[sensor0, sensor1])

    def get_distances(self) -> np.ndarray:
        assert self._dist is not None, "Distances queried before calc_distances"
        return self._dist.copy()
