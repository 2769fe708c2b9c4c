"""
Unit tests for frames and frame sources.
"""

import pytest
import numpy as np
import cv2
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pftrack.frame import Frame
from pftrack.video import ImageFolder, VideoClip


class TestFrame:
    """Test cases for Frame."""

    def test_gray(self):
        frame = Frame(np.zeros((4, 5), dtype=np.uint8))
        assert frame.width == 5
        assert frame.height == 4

    def test_color_converted(self):
        frame = Frame(np.full((4, 5, 3), 100, dtype=np.uint8))
        assert frame.data.ndim == 2
        assert frame.data[0, 0] == 100

    def test_region_inclusive(self):
        frame = Frame(np.arange(20, dtype=np.uint8).reshape(4, 5))
        region = frame.get_pixel_region(1, 1, 2, 2)
        np.testing.assert_array_equal(region, [[6, 7], [11, 12]])

    def test_region_clipped(self):
        frame = Frame(np.arange(20, dtype=np.uint8).reshape(4, 5))
        assert frame.get_pixel_region(-5, -5, 1, 1).shape == (2, 2)
        assert frame.get_pixel_region(3, 2, 50, 50).shape == (2, 2)

    def test_region_outside(self):
        frame = Frame(np.zeros((4, 5), dtype=np.uint8))
        assert frame.get_pixel_region(10, 10, 20, 20).size == 0

    def test_no_data(self):
        with pytest.raises(AssertionError):
            Frame(None)


class TestImageFolder:
    """Test cases for ImageFolder."""

    @pytest.fixture
    def folder(self, tmp_path):
        for index in (1, 2, 10, 3):
            image = np.full((6, 8), index, dtype=np.uint8)
            cv2.imwrite(str(tmp_path / f"t{index}.png"), image)
        return tmp_path

    def test_natural_order(self, folder):
        images = ImageFolder(str(folder), ".png")
        assert images.filenames == ["t1.png", "t2.png", "t3.png", "t10.png"]
        assert len(images) == 4
        assert images.get_frame_by_index(3).data[0, 0] == 10

    def test_reverse_series(self, folder):
        images = ImageFolder(str(folder), ".png", reverse_series=True)
        assert [f.data[0, 0] for f in images] == [1, 2, 3, 10, 3, 2]

    def test_frames_are_gray(self, folder):
        frame = next(iter(ImageFolder(str(folder), ".png")))
        assert frame.width == 8
        assert frame.height == 6

    def test_missing_directory(self, tmp_path):
        with pytest.raises(IOError):
            ImageFolder(str(tmp_path / "missing"))

    def test_no_images(self, folder):
        with pytest.raises(IOError):
            ImageFolder(str(folder), ".jpg")


class TestVideoClip:
    """Test cases for VideoClip."""

    def test_missing_video(self, tmp_path):
        with pytest.raises(IOError):
            VideoClip(str(tmp_path / "missing.mp4"))
