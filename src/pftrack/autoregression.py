"""
Autoregressive prediction and the history windows it runs on.

An AR(k) process predicts the next value from the k previous ones:

    x[t] = c + phi_1 x[t-1] + ... + phi_k x[t-k] + eps,   eps ~ N(0, sigma^2)

No stationarity constraints are enforced on the coefficients. The tracker uses
phi = (2, -1), which extrapolates with constant velocity: x[t] = 2 x[t-1] - x[t-2].
"""

from typing import Optional, Sequence

import numpy as np


def predict(history: Sequence[float], coefficients: Sequence[float], variance: float = 0.0,
            constant: float = 0.0, rng: Optional[np.random.Generator] = None) -> float:
    """
    Predict the next value of an autoregressive process.

    Parameters
    ----------
    history : sequence of float
        Previous values x[t-1], x[t-2], ... (most recent first).
    coefficients : sequence of float
        Model parameters phi_1, phi_2, ... The order of the model is their count, and
        the history must be of the same length.
    variance : float
        Variance of the white noise term. Zero gives a deterministic prediction.
    constant : float
        The constant term c.
    rng : numpy.random.Generator, optional
        Source of the noise. Required when the variance is positive.

    Returns
    -------
    float
        The predicted value x[t].
    """
    history = np.asarray(history, dtype=np.float64)
    coefficients = np.asarray(coefficients, dtype=np.float64)
    assert history.size == coefficients.size, \
        f"History of length {history.size} does not match {coefficients.size} coefficients"
    assert variance >= 0.0

    value = constant + float(np.dot(history, coefficients))

    if variance > 0.0:
        assert rng is not None, "A random generator is needed for a noisy prediction"
        value += rng.normal(0.0, np.sqrt(variance))

    return value


def pushpop(sequence: list, value) -> list:
    """Insert value at the front of a list and drop the last (oldest) element."""
    assert sequence, "Cannot push into an empty history"
    sequence.insert(0, value)
    sequence.pop()
    return sequence


class RingBuffer:
    """
    Fixed-capacity history window, most recent value at index 0.

    Values are kept in a numpy array and a head pointer marks the most recent entry,
    so pushing a new value overwrites the oldest one without shifting the rest.
    """

    def __init__(self, values: Sequence[float]):
        data = np.array(values, dtype=np.float64).ravel()
        assert data.size > 0, "A history window cannot be empty"

        self._data = data
        self._head = 0

    def pushpop(self, value: float) -> float:
        """Insert value as the most recent entry and return the dropped oldest one."""
        self._head = (self._head - 1) % self._data.size
        oldest = self._data[self._head]
        self._data[self._head] = value
        return float(oldest)

    def as_array(self) -> np.ndarray:
        return np.roll(self._data, -self._head)

    def tolist(self) -> list:
        return self.as_array().tolist()

    def copy(self) -> "RingBuffer":
        return RingBuffer(self.as_array())

    def front(self) -> float:
        return float(self._data[self._head])

    def __len__(self):
        return self._data.size

    def __getitem__(self, index: int) -> float:
        n = self._data.size
        if not -n <= index < n:
            raise IndexError("RingBuffer index out of range")
        return float(self._data[(self._head + index) % n])

    def __iter__(self):
        return iter(self.tolist())

    def __eq__(self, other):
        if isinstance(other, RingBuffer):
            other = other.as_array()
        try:
            other = np.asarray(other, dtype=np.float64)
        except (TypeError, ValueError):
            return NotImplemented
        return other.shape == (len(self),) and bool(np.array_equal(self.as_array(), other))

    def __repr__(self):
        return f"RingBuffer({self.tolist()})"
