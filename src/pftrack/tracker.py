"""
Particle filter that tracks the 2D position and scale of an object in a video.

A particle holds a short history of x, y and scale values. The transition predicts the
next values with a second-order autoregressive model; the likelihood compares the
intensity histogram of the predicted rectangle against the histogram of the object
selected in the first frame.
"""

import logging
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Optional, Sequence

import numpy as np

from pftrack.autoregression import RingBuffer, predict
from pftrack.frame import Frame
from pftrack.histogram import image_histogram
from pftrack.metrics import DistanceMetric, distance
from pftrack.particlefilter import Particle, ParticleFilter


logger = logging.getLogger(__name__)

Rectangle = tuple[int, int, int, int]

_identities = count(1)


@dataclass
class ParticleState:
    """
    Hypothesis of the tracked object: recent positions and scales (most recent first)
    and the size of the object at scale one.
    """
    x: RingBuffer
    y: RingBuffer
    scale: RingBuffer
    width: int
    height: int
    # Diagnostics only, not part of the state's value.
    likelihood: float = field(default=0.0, compare=False)
    identity: int = field(default_factory=lambda: next(_identities), compare=False)

    def clone(self) -> "ParticleState":
        return ParticleState(self.x.copy(), self.y.copy(), self.scale.copy(),
                             self.width, self.height, self.likelihood, self.identity)

    def rectangle(self) -> Rectangle:
        """Rectangle (x0, y0, x1, y1) around the current position at the current scale."""
        assert len(self.x) and len(self.y) and len(self.scale)
        x, y, scale = self.x[0], self.y[0], self.scale[0]
        half_w = scale * self.width / 2.0
        half_h = scale * self.height / 2.0
        return int(x - half_w), int(y - half_h), int(x + half_w), int(y + half_h)

    def center(self) -> tuple[float, float]:
        return self.x[0], self.y[0]


class PositionParticleFilter(ParticleFilter[ParticleState]):
    """
    Tracks a rectangle through a sequence of grayscale frames.

    Parameters
    ----------
    bins : int
        Number of histogram bins of the observation model.
    seed : int
        Seed of the filter's random generator.
    coefficients : sequence of float
        Autoregressive coefficients. The default (2, -1) is constant-velocity
        extrapolation, x[n] = 2 x[n-1] - x[n-2] + noise, as used for example in
        CamShift guided particle filters.
    position_variance : float
        Noise variance on the predicted x and y (in pixels squared).
    scale_variance : float
        Noise variance on the predicted scale.
    min_scale : float
        Lower bound on the predicted scale.
    steepness : float
        Weight is exp(-steepness * distance) for the squared-Hellinger distance.
    history_size : int
        Length of the per-particle history windows, at least the model order.
    """

    def __init__(self,
                 bins: int = 16,
                 seed: Optional[int] = 234789,
                 coefficients: Sequence[float] = (2.0, -1.0),
                 position_variance: float = 1.0,
                 scale_variance: float = 0.001,
                 min_scale: float = 0.1,
                 steepness: float = 20.0,
                 history_size: int = 2):
        super().__init__(seed)
        assert history_size >= len(coefficients)
        assert min_scale > 0.0

        self.bins = bins
        self.coefficients = np.asarray(coefficients, dtype=np.float64)
        self.position_variance = position_variance
        self.scale_variance = scale_variance
        self.min_scale = min_scale
        self.steepness = steepness
        self.history_size = history_size

        self.reference_histogram = None
        self.frame_size = None

    def init(self, reference_histogram, rectangle: Sequence[int], particle_count: int):
        """
        Seed the particle cloud at the given rectangle.

        Every particle starts with a history of identical positions, so the
        autoregressive model has a valid window from the first tick on.

        Parameters
        ----------
        reference_histogram : array_like
            Normalized histogram of the object to be tracked, with ``bins`` entries.
        rectangle : sequence of int
            (x0, y0, x1, y1) of the object in the first frame.
        particle_count : int
            Number of particles, constant for the lifetime of the filter.
        """
        assert particle_count > 0
        x0, y0, x1, y1 = (int(v) for v in rectangle)
        width = x1 - x0
        height = y1 - y0
        assert width > 0 and height > 0, f"Degenerate rectangle {rectangle}"

        reference_histogram = np.array(reference_histogram, dtype=np.float64)
        assert reference_histogram.size == self.bins, \
            f"Reference histogram has {reference_histogram.size} bins, expected {self.bins}"
        self.reference_histogram = reference_histogram

        logger.info("Tracking a %dx%d region with %d particles", width, height, particle_count)

        cx = x0 + width // 2
        cy = y0 + height // 2
        n = self.history_size

        self.particles.clear()
        for _ in range(particle_count):
            state = ParticleState(RingBuffer([cx] * n), RingBuffer([cy] * n), RingBuffer([1.0] * n),
                                  width, height)
            self.particles.append(Particle(state, 0.0))

        assert len(self.particles) == particle_count

    def init_from_frame(self, frame: Frame, rectangle: Sequence[int], particle_count: int):
        """Compute the reference histogram from the rectangle in the frame and seed the cloud."""
        assert frame is not None
        region = frame.get_pixel_region(*rectangle)
        self.init(image_histogram(region, self.bins), rectangle, particle_count)

    def _predict(self, history: RingBuffer, variance: float) -> float:
        window = history.as_array()[:self.coefficients.size]
        return predict(window, self.coefficients, variance=variance, rng=self.rng)

    def transition(self, state: ParticleState) -> ParticleState:
        assert self.frame_size is not None, "Transition needs the size of the current frame"
        width, height = self.frame_size

        xn = int(round(self._predict(state.x, self.position_variance)))
        yn = int(round(self._predict(state.y, self.position_variance)))
        scale = self._predict(state.scale, self.scale_variance)

        xn = max(0, min(width - 1, xn))
        yn = max(0, min(height - 1, yn))
        scale = max(self.min_scale, scale)

        state.x.pushpop(xn)
        state.y.pushpop(yn)
        state.scale.pushpop(scale)
        return state

    def likelihood(self, state: ParticleState, observation: Frame) -> float:
        """
        Compare the histogram of the rectangle described by the state with the
        reference histogram.

        Returns
        -------
        float
            exp(-steepness * d) for the squared-Hellinger distance d, in (0, 1].
        """
        assert observation is not None, "No image to compute the likelihood on"
        assert self.reference_histogram is not None, "Filter was not initialized"

        region = observation.get_pixel_region(*state.rectangle())
        assert region.size > 0, f"Rectangle {state.rectangle()} falls outside the frame"

        candidate = image_histogram(region, self.bins)
        dist = distance(self.reference_histogram, candidate, DistanceMetric.SQUARED_HELLINGER)
        state.likelihood = float(np.exp(-self.steepness * dist))
        return state.likelihood

    def likelihood_all(self, observation: Any):
        super().likelihood_all(observation)

        if logger.isEnabledFor(logging.DEBUG):
            best = sorted(self.particles, key=lambda p: p.weight, reverse=True)[:10]
            logger.debug("Likelihoods: %s",
                         " ".join(f"[{p.state.identity}:{p.state.likelihood:.4f}]" for p in best))

    def tick(self, frame: Frame, subticks: int = 1):
        """Advance the filter on a new frame, reusing it ``subticks`` times."""
        assert frame is not None, "No frame given"
        assert len(self.particles) > 0, "Filter was not initialized"
        self.frame_size = (frame.width, frame.height)
        super().tick(frame, subticks)

    def get_particle_coordinates(self) -> list[Rectangle]:
        """Rectangles of all particles, the one with the highest weight first."""
        self.particles.sort()
        coordinates = []
        for particle in self.particles:
            state = particle.state
            assert state is not None and state.identity
            coordinates.append(state.rectangle())
        return coordinates

    def best_rectangle(self) -> Rectangle:
        assert len(self.particles) > 0, "Filter was not initialized"
        return self.get_particle_coordinates()[0]

    def get_likelihoods(self, frame: Frame, region_size: tuple[int, int], block_size: int = 1) -> np.ndarray:
        """
        Likelihood of the tracked object at every location of the frame.

        Evaluating every pixel takes very long, so the map is filled in blocks of
        ``block_size`` pixels. Locations closer than one region to the border are left
        at zero.

        Parameters
        ----------
        frame : Frame
            The image to evaluate.
        region_size : tuple of int
            (width, height) of the rectangle to match.
        block_size : int
            Subsampling step.

        Returns
        -------
        np.ndarray
            Float map of the frame's shape with values in [0, 1].
        """
        assert frame is not None
        assert block_size > 0
        region_w, region_h = region_size

        result = np.zeros((frame.height, frame.width), dtype=np.float64)
        half = block_size // 2

        for j in range(region_h, frame.height - region_h, block_size):
            for i in range(region_w, frame.width - region_w, block_size):
                state = ParticleState(RingBuffer([i]), RingBuffer([j]), RingBuffer([1.0]),
                                      region_w, region_h, identity=0)
                value = self.likelihood(state, frame)
                result[max(0, j - half):j + half + 1, max(0, i - half):i + half + 1] = value

        return result
