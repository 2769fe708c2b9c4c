"""
Utility functions for the tracked path of an object: smoothing and length of the
trajectory, and drawing of the particle cloud on a frame.

A trajectory is a list of (frame_idx, x, y) tuples in pixel coordinates.
"""

from typing import Sequence

import cv2
import numpy as np
from scipy.signal import savgol_filter


def smooth_trajectory(trajectory: list[tuple[int, float, float]], filter_size: int = 15) -> list[tuple[int, float, float]]:
    """
    Apply Savitzky-Golay filter to smooth a trajectory.

    Parameters:
        trajectory (list of (t, x, y)): Frame id with raw trajectory points.
        filter_size (int): Window size for filtering (must be odd and >= 5).

    Returns:
        list of (t, x, y): Smoothed trajectory points, frame ids untouched.
    """
    # polyorder=3, so min window=5
    if filter_size < 5:
        filter_size = 5
    if filter_size % 2 == 0:
        filter_size += 1
    if len(trajectory) < filter_size:
        return list(trajectory)

    trajectory = np.array(trajectory, dtype=np.float64)
    x = savgol_filter(trajectory[:, 1], filter_size, 3)
    y = savgol_filter(trajectory[:, 2], filter_size, 3)

    return [(int(t), float(xi), float(yi)) for t, xi, yi in zip(trajectory[:, 0], x, y)]


def trajectory_length(trajectory: list[tuple[int, float, float]]) -> float:
    """Sum of the euclidean distances between successive points."""
    if len(trajectory) < 2:
        return 0.0

    points = np.array([(x, y) for _, x, y in trajectory], dtype=np.float64)
    return float(np.sum(np.linalg.norm(np.diff(points, axis=0), axis=1)))


def draw_particles(frame: np.ndarray, rectangles: Sequence[tuple[int, int, int, int]], thickness: int = 1) -> np.ndarray:
    """
    Draw the particle rectangles on a copy of the frame.

    The first rectangle is taken to be the best hypothesis and is drawn in red, the
    rest in yellow. Grayscale frames are converted to BGR first.
    """
    if frame.ndim == 2:
        dframe = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    else:
        dframe = np.copy(frame)

    for x0, y0, x1, y1 in rectangles[1:]:
        cv2.rectangle(dframe, (int(x0), int(y0)), (int(x1), int(y1)), (0, 200, 255), thickness)

    if rectangles:
        x0, y0, x1, y1 = rectangles[0]
        cv2.rectangle(dframe, (int(x0), int(y0)), (int(x1), int(y1)), (0, 0, 255), thickness + 1)

    return dframe
