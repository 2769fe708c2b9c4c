#!/usr/bin/env python3
"""
Track an object through a video or an image sequence.

Usage:
    pftrack <tracking_descriptor>.json [--debug]

The descriptor format is documented in pftrack.config. The first frame together with
the descriptor's rectangle defines the object; every following frame advances the
particle filter. The result is written as JSON: per frame the best rectangle, its
centre and all particle rectangles ranked by weight, plus the smoothed trajectory of
the best centre.
"""

import json
import logging
import sys

import cv2
from tqdm import tqdm

from pftrack.config import TrackingConfig, load_config
from pftrack.tracker import PositionParticleFilter
from pftrack.trajectory import draw_particles, smooth_trajectory, trajectory_length
from pftrack.video import ImageFolder, VideoClip


logger = logging.getLogger("pftrack")


def open_source(config: TrackingConfig):
    if config.video_path is not None:
        return VideoClip(config.video_path)
    return ImageFolder(config.image_dir, config.extension, config.reverse_series)


def build_filter(config: TrackingConfig) -> PositionParticleFilter:
    return PositionParticleFilter(bins=config.bins,
                                  seed=config.seed,
                                  position_variance=config.position_variance,
                                  scale_variance=config.scale_variance,
                                  min_scale=config.min_scale,
                                  steepness=config.steepness)


def run_tracking(config: TrackingConfig) -> dict:
    """Run the filter over the whole source and return the tracking result."""
    source = open_source(config)
    num_frames = len(source)
    if config.max_frames is not None:
        num_frames = min(num_frames, config.max_frames)

    pf = build_filter(config)
    writer = None
    frames = []
    trajectory = []

    try:
        for frame_id, frame in enumerate(tqdm(source, total=num_frames, desc="Tracking")):
            if frame_id >= num_frames:
                break

            if frame_id == 0:
                pf.init_from_frame(frame, config.rectangle, config.particle_count)
                rectangles = [tuple(config.rectangle)]
            else:
                pf.tick(frame, config.subticks)
                rectangles = pf.get_particle_coordinates()

            x0, y0, x1, y1 = rectangles[0]
            center = ((x0 + x1) / 2.0, (y0 + y1) / 2.0)
            trajectory.append((frame_id, center[0], center[1]))
            frames.append({
                "frame": frame_id,
                "best": list(rectangles[0]),
                "center": list(center),
                "particles": [list(r) for r in rectangles],
            })

            if config.annotated_video_path is not None:
                if writer is None:
                    fps = getattr(source, "fps", 25.0) or 25.0
                    fourcc = cv2.VideoWriter_fourcc(*"mp4v")
                    writer = cv2.VideoWriter(config.annotated_video_path, fourcc, fps,
                                             (frame.width, frame.height))
                writer.write(draw_particles(frame.data, rectangles))
    finally:
        if isinstance(source, VideoClip):
            source.release()
        if writer is not None:
            writer.release()
            logger.info("Annotated video saved to %s", config.annotated_video_path)

    smoothed = smooth_trajectory(trajectory, config.smoothing_window)
    logger.info("Tracked %d frames, path length %.1f px", len(frames), trajectory_length(smoothed))

    return {
        "frames": frames,
        "trajectory": [list(p) for p in trajectory],
        "smoothedTrajectory": [list(p) for p in smoothed],
    }


def main():
    args = sys.argv[1:]
    debug = "--debug" in args
    args = [a for a in args if a != "--debug"]

    if len(args) != 1:
        sys.exit("Usage: pftrack <tracking_descriptor>.json [--debug]")

    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    try:
        config = load_config(args[0])
        result = run_tracking(config)
    except (IOError, ValueError) as e:
        sys.exit(f"Tracking failed: {e}")

    with open(config.output_path, "w") as f:
        json.dump(result, f, indent=4)
    logger.info("Saved tracking result to %s", config.output_path)


if __name__ == '__main__':
    main()
