import os
import re

import cv2

from pftrack.frame import Frame


class VideoClip:
    """Minimalistic video clip class for reading grayscale frames from a video file."""
    def __init__(self, path):
        self.path = path
        self._cap = cv2.VideoCapture(path)
        if not self._cap.isOpened():
            raise IOError(f"Cannot open video: {path}")

        self.fps = self._cap.get(cv2.CAP_PROP_FPS)
        self.num_frames = int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT))

    def get_frame_by_index(self, frame_id):
        """
        Return the frame at the given frame index, or None past the end of the clip.
        """
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, frame_id)
        success, frame = self._cap.read()
        if not success:
            return None

        return Frame(cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY))

    def __len__(self):
        return self.num_frames

    def __iter__(self):
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
        while True:
            success, frame = self._cap.read()
            if not success:
                return
            yield Frame(cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY))

    def release(self):
        self._cap.release()

    def __del__(self):
        if hasattr(self, "_cap"):
            self.release()


def _natural_key(filename):
    """Sort key that orders t2.jpg before t10.jpg."""
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", filename)]


class ImageFolder:
    """
    Sequence of frames stored as image files in one directory.

    Files are ordered by their numeric postfix (t1.jpg ... t10.jpg). With
    ``reverse_series`` the sequence is followed by itself in reverse, [0, 1, 2, 3]
    becoming [0, 1, 2, 3, 2, 1], so that looping over it gives continuous motion.
    """

    def __init__(self, path, extension=".jpg", reverse_series=False):
        if not os.path.isdir(path):
            raise IOError(f"Not a directory: {path}")

        self.path = path
        self.extension = extension

        filenames = sorted((f for f in os.listdir(path) if f.lower().endswith(extension.lower())),
                           key=_natural_key)
        if not filenames:
            raise IOError(f"No {extension} images in {path}")

        if reverse_series and len(filenames) > 2:
            filenames = filenames + filenames[-2:0:-1]

        self.filenames = filenames

    def get_frame_by_index(self, frame_id):
        file = os.path.join(self.path, self.filenames[frame_id])
        image = cv2.imread(file, cv2.IMREAD_GRAYSCALE)
        if image is None:
            raise IOError(f"Cannot read image: {file}")
        return Frame(image)

    def __len__(self):
        return len(self.filenames)

    def __iter__(self):
        for frame_id in range(len(self.filenames)):
            yield self.get_frame_by_index(frame_id)
