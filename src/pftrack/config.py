"""
Tracking descriptor.

A tracking run is described by a JSON file with the following fields:
    - videoPath: path to the video file, or
    - imageDir: directory with an image sequence
    - extension: (optional) image file extension in imageDir, default ".jpg"
    - reverseSeries: (optional) append the image sequence in reverse, default false
    - rectangle: [x0, y0, x1, y1] of the object to be tracked in the first frame
    - particleCount: (optional) number of particles, default 100
    - bins: (optional) number of histogram bins, default 16
    - seed: (optional) random seed, default 234789
    - subticks: (optional) filter iterations per frame, default 1
    - steepness: (optional) weight = exp(-steepness * distance), default 20
    - positionVariance: (optional) noise variance on x and y, default 1.0
    - scaleVariance: (optional) noise variance on the scale, default 0.001
    - minScale: (optional) lower bound on the scale, default 0.1
    - outputPath: path of the JSON file the trajectory is written to
    - annotatedVideoPath: (optional) path of a video with the particles drawn in
    - smoothingWindow: (optional) Savitzky-Golay window of the smoothed trajectory, default 15
    - maxFrames: (optional) stop after this many frames
"""

import json
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class TrackingConfig:
    rectangle: Tuple[int, int, int, int]
    output_path: str
    video_path: Optional[str] = None
    image_dir: Optional[str] = None
    extension: str = ".jpg"
    reverse_series: bool = False
    particle_count: int = 100
    bins: int = 16
    seed: int = 234789
    subticks: int = 1
    steepness: float = 20.0
    position_variance: float = 1.0
    scale_variance: float = 0.001
    min_scale: float = 0.1
    annotated_video_path: Optional[str] = None
    smoothing_window: int = 15
    max_frames: Optional[int] = None


def load_descriptor(path: str) -> dict:
    """
    Load tracking configuration from a JSON descriptor file.

    Args:
        path (str): Path to the JSON file.

    Returns:
        dict: Descriptor data.
    """
    with open(path, "r") as f:
        descriptor = json.load(f)
    return descriptor


def parse_descriptor(descriptor: dict) -> TrackingConfig:
    """Validate a descriptor and convert it into a TrackingConfig."""
    video_path = descriptor.get("videoPath")
    image_dir = descriptor.get("imageDir")
    if (video_path is None) == (image_dir is None):
        raise ValueError("Descriptor needs exactly one of 'videoPath' and 'imageDir'")

    if "outputPath" not in descriptor:
        raise ValueError("Descriptor is missing 'outputPath'")

    rectangle = descriptor.get("rectangle")
    if rectangle is None or len(rectangle) != 4:
        raise ValueError(f"'rectangle' must be [x0, y0, x1, y1], got {rectangle}")
    x0, y0, x1, y1 = (int(v) for v in rectangle)
    if x1 <= x0 or y1 <= y0:
        raise ValueError(f"'rectangle' has no area: {rectangle}")

    max_frames = descriptor.get("maxFrames")
    if max_frames is not None:
        max_frames = int(max_frames)

    config = TrackingConfig(
        rectangle=(x0, y0, x1, y1),
        output_path=descriptor["outputPath"],
        video_path=video_path,
        image_dir=image_dir,
        extension=descriptor.get("extension", ".jpg"),
        reverse_series=bool(descriptor.get("reverseSeries", False)),
        particle_count=int(descriptor.get("particleCount", 100)),
        bins=int(descriptor.get("bins", 16)),
        seed=int(descriptor.get("seed", 234789)),
        subticks=int(descriptor.get("subticks", 1)),
        steepness=float(descriptor.get("steepness", 20.0)),
        position_variance=float(descriptor.get("positionVariance", 1.0)),
        scale_variance=float(descriptor.get("scaleVariance", 0.001)),
        min_scale=float(descriptor.get("minScale", 0.1)),
        annotated_video_path=descriptor.get("annotatedVideoPath"),
        smoothing_window=int(descriptor.get("smoothingWindow", 15)),
        max_frames=max_frames,
    )

    if config.particle_count <= 0:
        raise ValueError("'particleCount' must be positive")
    if config.bins <= 0 or config.bins > 256:
        raise ValueError("'bins' must be in [1, 256]")
    if config.subticks <= 0:
        raise ValueError("'subticks' must be positive")
    if config.max_frames is not None and config.max_frames <= 0:
        raise ValueError("'maxFrames' must be positive")

    return config


def load_config(path: str) -> TrackingConfig:
    return parse_descriptor(load_descriptor(path))
