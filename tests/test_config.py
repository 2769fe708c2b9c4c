"""
Unit tests for the tracking descriptor.
"""

import json

import pytest
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pftrack.config import load_config, parse_descriptor


def descriptor(**overrides):
    data = {
        "imageDir": "frames",
        "rectangle": [10, 20, 30, 50],
        "outputPath": "out.json",
    }
    data.update(overrides)
    return data


class TestParseDescriptor:
    """Test cases for descriptor validation."""

    def test_defaults(self):
        config = parse_descriptor(descriptor())

        assert config.image_dir == "frames"
        assert config.video_path is None
        assert config.rectangle == (10, 20, 30, 50)
        assert config.particle_count == 100
        assert config.bins == 16
        assert config.seed == 234789
        assert config.subticks == 1
        assert config.steepness == 20.0
        assert config.extension == ".jpg"
        assert config.reverse_series is False
        assert config.annotated_video_path is None

    def test_overrides(self):
        config = parse_descriptor(descriptor(particleCount=40, bins=8, reverseSeries=True,
                                             extension=".png", maxFrames=12))
        assert config.particle_count == 40
        assert config.bins == 8
        assert config.reverse_series is True
        assert config.extension == ".png"
        assert config.max_frames == 12

    def test_source_required(self):
        data = descriptor()
        del data["imageDir"]
        with pytest.raises(ValueError):
            parse_descriptor(data)

    def test_single_source(self):
        with pytest.raises(ValueError):
            parse_descriptor(descriptor(videoPath="clip.mp4"))

    def test_output_required(self):
        data = descriptor()
        del data["outputPath"]
        with pytest.raises(ValueError):
            parse_descriptor(data)

    @pytest.mark.parametrize("rectangle", [None, [1, 2, 3], [10, 10, 5, 20], [0, 0, 10, 0]])
    def test_bad_rectangle(self, rectangle):
        with pytest.raises(ValueError):
            parse_descriptor(descriptor(rectangle=rectangle))

    @pytest.mark.parametrize("key,value", [("particleCount", 0), ("bins", 0), ("bins", 300),
                                           ("subticks", 0), ("maxFrames", 0), ("maxFrames", -3),
                                           ("maxFrames", "many")])
    def test_bad_values(self, key, value):
        with pytest.raises(ValueError):
            parse_descriptor(descriptor(**{key: value}))

    def test_max_frames_converted(self):
        assert parse_descriptor(descriptor(maxFrames="12")).max_frames == 12
        assert parse_descriptor(descriptor()).max_frames is None


class TestLoadConfig:
    """Test cases for reading descriptors from disk."""

    def test_load(self, tmp_path):
        path = tmp_path / "track.json"
        path.write_text(json.dumps(descriptor(videoPath="clip.mp4", imageDir=None)))

        config = load_config(str(path))
        assert config.video_path == "clip.mp4"
        assert config.image_dir is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(IOError):
            load_config(str(tmp_path / "missing.json"))
