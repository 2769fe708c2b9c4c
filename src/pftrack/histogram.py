"""
Histogram engine.

Every pixel position of a frame is treated as a separate sensor. Given a series of
equally shaped frames, the engine counts per pixel how often its intensity fell into
each of a fixed number of bins, and (on request) how often two pixels fell into a
given pair of bins jointly. From these tables it derives probabilities, aggregate
per-bin histograms and the conditional entropy between two pixels.

Tables are rebuilt from scratch on every call to ``calc_probabilities``. Querying them
before the first computation is a programming error.
"""

from typing import Sequence

import numpy as np


# Intensities are 8-bit samples.
VALUE_RANGE = 256


def value2bin(values, bins: int) -> np.ndarray:
    """
    Map 8-bit intensities to bin indices: floor(value * bins / 256).

    Args:
        values: Array of intensities in [0, 255].
        bins: The number of bins.

    Returns:
        np.ndarray: Integer bin indices with the shape of the input.
    """
    values = np.asarray(values)
    assert values.size == 0 or values.min() >= 0, "Negative intensity values cannot be binned"

    result = (values.astype(np.int64) * bins) // VALUE_RANGE
    assert result.size == 0 or result.max() < bins, "Intensity falls outside the bin range"
    return result


class ProbMatrix:
    """Frequency tables over (pixel, bin) and (pixel pair, bin pair)."""

    def __init__(self, bins: int, width: int, height: int):
        assert bins > 0
        assert width > 0 and height > 0

        self._bins = bins
        self.width = width
        self.height = height
        self.frame_count = 0

        # Shape (sensor_count, bins).
        self._freq = None
        # Shape (sensor_count, sensor_count, bins, bins), filled for p0 > p1 only.
        self._joint_freq = None

    @property
    def bins(self) -> int:
        return self._bins

    @bins.setter
    def bins(self, bins: int):
        assert bins > 0
        self._bins = bins
        self.clear()

    @property
    def sensor_count(self) -> int:
        return self.width * self.height

    def clear(self):
        """Discard all previously computed tables."""
        self._freq = None
        self._joint_freq = None

    def _check_freq(self):
        assert self._freq is not None, "Frequencies queried before calc_probabilities"

    def _check_frame_count(self):
        assert self.frame_count > 0, "Probabilities need at least one frame"

    def get_frequency(self, p: int, b: int) -> int:
        self._check_freq()
        return int(self._freq[p, b])

    def get_probability(self, p: int, b: int) -> float:
        self._check_freq()
        self._check_frame_count()
        return self._freq[p, b] / float(self.frame_count)

    def get_joint_frequency(self, p0: int, b0: int, p1: int, b1: int) -> int:
        """
        Number of frames in which pixel p0 was in bin b0 and pixel p1 in bin b1.

        The table is symmetric, so only the half with p0 > p1 is stored and the other
        half is mirrored on lookup.
        """
        assert self._joint_freq is not None, "Joint frequencies were not calculated"
        if p0 == p1:
            return 0
        if p0 < p1:
            p0, b0, p1, b1 = p1, b1, p0, b0
        return int(self._joint_freq[p0, p1, b0, b1])

    def get_joint_probability(self, p0: int, b0: int, p1: int, b1: int) -> float:
        self._check_frame_count()
        return self.get_joint_frequency(p0, b0, p1, b1) / float(self.frame_count)


class Histogram(ProbMatrix):
    """
    Calculates histograms from data provided in the form of frames.

    Usage::

        histogram = Histogram(16, width, height)
        histogram.calc_probabilities([frame])
        distribution = histogram.get_probabilities()
    """

    def _flatten(self, frames: Sequence[np.ndarray]) -> np.ndarray:
        data = np.empty((len(frames), self.sensor_count), dtype=np.int64)
        for t, frame in enumerate(frames):
            assert frame is not None, "Missing frame"
            frame = np.asarray(frame)
            assert frame.size == self.sensor_count, \
                f"Frame of {frame.size} values does not match {self.width}x{self.height}"
            data[t] = value2bin(frame.ravel(), self.bins)
        return data

    def calc_probabilities(self, frames: Sequence[np.ndarray], joint: bool = False):
        """
        Count bin occurrences per pixel over a series of frames.

        Parameters
        ----------
        frames : sequence of np.ndarray
            Intensity matrices of shape (height, width), or flat arrays of
            width * height values.
        joint : bool
            Also build the joint frequency table between all pixel pairs. Its size is
            quadratic in the number of pixels, so it is only built on request.
        """
        self.clear()
        self.frame_count = len(frames)

        binned = self._flatten(frames)
        n = self.sensor_count

        self._freq = self._allocate((n, self.bins))
        pixels = np.broadcast_to(np.arange(n), binned.shape)
        np.add.at(self._freq, (pixels.ravel(), binned.ravel()), 1)

        if joint:
            self._joint_freq = self._allocate((n, n, self.bins, self.bins))
            p0, p1 = np.tril_indices(n, k=-1)
            for bins_t in binned:
                np.add.at(self._joint_freq, (p0, p1, bins_t[p0], bins_t[p1]), 1)

    @staticmethod
    def _allocate(shape) -> np.ndarray:
        try:
            return np.zeros(shape, dtype=np.int64)
        except MemoryError as e:
            raise MemoryError(f"Frequency table of shape {shape} could not be allocated") from e

    def get_conditional_entropy(self, p0: int, p1: int) -> float:
        """
        Conditional entropy between two pixels over the series of frames, in bits.

            H = sum_b0 sum_b1 p(b0, b1) log2(p(b0) / p(b0, b1))

        Requires the joint table, see ``calc_probabilities(frames, joint=True)``.
        """
        self._check_frame_count()
        self._check_freq()
        if p0 == p1:
            return 0.0

        total = 0.0
        for b0 in range(self.bins):
            f0 = self.get_frequency(p0, b0)
            if f0 == 0:
                continue
            for b1 in range(self.bins):
                f01 = self.get_joint_frequency(p0, b0, p1, b1)
                if f01 == 0:
                    continue
                total += (f01 / float(self.frame_count)) * np.log2(f0 / float(f01))
        return float(total)

    def get_frequencies(self) -> np.ndarray:
        """Per-bin counts summed over all pixel positions."""
        self._check_frame_count()
        self._check_freq()
        return self._freq.sum(axis=0)

    def get_samples(self) -> int:
        """Total number of binned samples (pixels times frames)."""
        self._check_frame_count()
        self._check_freq()
        return int(self._freq.sum())

    def get_probabilities(self) -> np.ndarray:
        """Per-bin counts over all pixels, normalized to sum to one."""
        frequencies = self.get_frequencies()
        total = frequencies.sum()
        assert total != 0
        return frequencies / float(total)


def image_histogram(region, bins: int = 16) -> np.ndarray:
    """Normalized single-frame histogram of a 2D intensity region."""
    region = np.asarray(region)
    assert region.ndim == 2 and region.size > 0, "Histogram needs a non-empty 2D region"

    height, width = region.shape
    histogram = Histogram(bins, width, height)
    histogram.calc_probabilities([region])
    return histogram.get_probabilities()
