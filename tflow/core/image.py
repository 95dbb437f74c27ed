"""
Still-image access for feature scanning.

Wraps a numpy pixel buffer (as returned by OpenCV) with the small
interface the scanner needs: the image size and nearest-pixel reads
addressed from the top-left corner.
"""

from pathlib import Path

import cv2
import numpy as np


class Image:
    """
    Read-only 3-channel image.

    Example:
        >>> image = Image.from_file("frame_0001.png")
        >>> width, height = image.size
        >>> b, g, r = image.read(10, 20)
    """

    def __init__(self, pixels: np.ndarray):
        """
        Args:
            pixels: HxWx3 (BGR or RGB) or HxW greyscale array
        """
        if pixels.ndim == 2:
            pixels = np.repeat(pixels[:, :, np.newaxis], 3, axis=2)
        elif pixels.ndim != 3 or pixels.shape[2] < 3:
            raise ValueError(f"Unsupported pixel buffer shape: {pixels.shape}")

        self.pixels = pixels[:, :, :3]

    @classmethod
    def from_file(cls, path: str | Path) -> "Image":
        """Load an image from disk with OpenCV."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {path}")

        pixels = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if pixels is None:
            raise RuntimeError(f"Failed to decode image: {path}")
        return cls(pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return (self.width, self.height)

    def read(self, x: int, y: int) -> tuple[int, int, int]:
        """Nearest-pixel sample at column x, row y (y measured from the top)."""
        pixel = self.pixels[y, x]
        return (int(pixel[0]), int(pixel[1]), int(pixel[2]))

    def __repr__(self) -> str:
        return f"Image({self.width}x{self.height})"
