"""
Generic particle filter.

A particle is one hypothesis about the state of whatever is tracked: the x,y position
of a cursor, the position and size of a football player on a TV screen, the location
of a robot in its environment. A cloud of weighted particles approximates the posterior
distribution over that state, and it improves over time with more (noisy) measurements.

Each tick the filter

1. moves every particle with a transition model, an educated guess on how the state
   changes (something on an image most likely stays close to where it was, and keeps
   moving in the direction it moved before),
2. weighs every particle with an observation model, the likelihood that what we track
   is actually at the hypothesised state, e.g. by comparing the histogram of the image
   region against that of the tracked object,
3. resamples the cloud in proportion to those weights.

Subclasses supply the two models through ``transition`` and ``likelihood``.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Generic, Iterator, List, Optional, TypeVar

import numpy as np


logger = logging.getLogger(__name__)

State = TypeVar("State")


class Particle(Generic[State]):
    """A state hypothesis with its weight."""

    def __init__(self, state: State, weight: float = 0.0):
        self.state = state
        self.weight = weight

    def clone(self) -> "Particle[State]":
        """Deep copy with zero weight. States provide their own ``clone``."""
        return Particle(self.state.clone(), 0.0)

    def __repr__(self):
        return f"Particle({self.weight}, {self.state!r})"


class ParticleSet(Generic[State]):
    """Ordered collection of particles, exclusively owned by its filter."""

    def __init__(self, particles: Optional[List[Particle[State]]] = None):
        self.particles: List[Particle[State]] = list(particles) if particles else []

    def __len__(self):
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle[State]]:
        return iter(self.particles)

    def __getitem__(self, index: int) -> Particle[State]:
        return self.particles[index]

    def append(self, particle: Particle[State]):
        self.particles.append(particle)

    def clear(self):
        self.particles = []

    @property
    def weights(self) -> np.ndarray:
        return np.array([p.weight for p in self.particles], dtype=np.float64)

    def normalize(self):
        """
        Scale the weights so that they sum to one.

        If every particle lost its weight (e.g. all likelihoods underflowed to zero)
        there is nothing to be proportional to, and the weights fall back to uniform.
        """
        assert self.particles, "Cannot normalize an empty particle set"

        total = float(np.sum(self.weights))
        if total <= 0.0 or not math.isfinite(total):
            logger.warning("Particle weights sum to %s, falling back to uniform weights", total)
            uniform = 1.0 / len(self.particles)
            for p in self.particles:
                p.weight = uniform
            return

        for p in self.particles:
            p.weight /= total

    def sort(self):
        """Sort descending by weight, ties keep their original order."""
        self.particles.sort(key=lambda p: p.weight, reverse=True)


class ParticleFilter(ABC, Generic[State]):
    """
    Base particle filter: transition, likelihood and resampling of a particle set.

    Parameters
    ----------
    seed : int
        Seed of the random generator owned by the filter. Know your seeds, it makes
        it easier to repeat experiments.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.particles: ParticleSet[State] = ParticleSet()

    @abstractmethod
    def transition(self, state: State) -> State:
        """Move a single state according to the motion model."""

    @abstractmethod
    def likelihood(self, state: State, observation: Any) -> float:
        """Non-negative score of how well the state explains the observation."""

    def transition_all(self):
        for particle in self.particles:
            assert particle.state is not None
            particle.state = self.transition(particle.state)

    def likelihood_all(self, observation: Any):
        for particle in self.particles:
            assert particle.state is not None
            particle.weight = self.likelihood(particle.state, observation)

    def resample(self):
        """
        Replicate particles in proportion to their weight.

        After normalization the particles are visited from heavy to light, and each
        contributes round(w * N) deep copies until N copies exist. A shortfall due to
        rounding is padded with copies of the heaviest particle. The result is
        deterministic given the weights, and a heavy particle is never lost to an
        unlucky draw.
        """
        n = len(self.particles)
        assert n > 0, "Cannot resample an empty particle set"

        self.particles.normalize()
        self.particles.sort()

        resampled: List[Particle[State]] = []
        for particle in self.particles:
            copies = int(math.floor(particle.weight * n + 0.5))
            for _ in range(copies):
                if len(resampled) == n:
                    break
                resampled.append(particle.clone())
            if len(resampled) == n:
                break

        best = self.particles[0]
        while len(resampled) < n:
            resampled.append(best.clone())

        self.particles = ParticleSet(resampled)

    def tick(self, observation: Any, subticks: int = 1):
        """
        Run transition, likelihood and resampling ``subticks`` times on the same
        observation.
        """
        assert subticks > 0
        for _ in range(subticks):
            logger.debug("Transition all particles")
            self.transition_all()
            logger.debug("Likelihood for all particles")
            self.likelihood_all(observation)
            logger.debug("Resample all particles")
            self.resample()
