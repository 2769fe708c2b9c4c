import cv2
import numpy as np


class Frame:
    """
    A single grayscale image: a 2D grid of 8-bit intensity samples.

    Colour input (RGB, as delivered by the frame sources) is converted to gray on
    construction.
    """

    def __init__(self, data: np.ndarray):
        assert data is not None, "Frame needs image data"
        data = np.asarray(data)

        if data.ndim == 3:
            data = cv2.cvtColor(data.astype(np.uint8), cv2.COLOR_RGB2GRAY)

        assert data.ndim == 2 and data.size > 0, f"Expected a 2D image, got shape {data.shape}"
        self.data = data.astype(np.uint8, copy=False)

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    def get_pixel_region(self, x0: int, y0: int, x1: int, y1: int) -> np.ndarray:
        """
        Crop the rectangle spanned by (x0, y0) and (x1, y1), both corners included.

        The rectangle is clipped to the frame; a rectangle entirely outside of it gives
        an empty array.
        """
        x0, x1 = sorted((int(x0), int(x1)))
        y0, y1 = sorted((int(y0), int(y1)))

        x0 = max(x0, 0)
        y0 = max(y0, 0)
        x1 = min(x1, self.width - 1)
        y1 = min(y1, self.height - 1)

        if x1 < x0 or y1 < y0:
            return self.data[0:0, 0:0]

        return self.data[y0:y1 + 1, x0:x1 + 1]
