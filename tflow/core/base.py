"""
Base classes for frame-to-frame motion models.

A motion model consumes frames in order and reports, for every frame
after the first, an estimate of how far the image moved relative to the
previous frame.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np


@dataclass
class MotionEstimate:
    """Offset of a frame relative to the previous frame."""
    frame: int
    offset: tuple[float, float]
    samples: int = 0
    features: int = 0

    def to_dict(self) -> dict:
        return {
            "frame": self.frame,
            "dx": self.offset[0],
            "dy": self.offset[1],
            "samples": self.samples,
            "features": self.features,
        }


class BaseMotionModel(ABC):
    """
    Abstract base class for motion models.

    Example:
        model = ScanLineMotionModel()
        for frame_num, frame in reader:
            estimate = model.update(frame)
            if estimate is not None:
                print(estimate.offset)
    """

    def __init__(self):
        self.frame_count = 0

    @abstractmethod
    def update(self, frame: np.ndarray) -> MotionEstimate | None:
        """
        Feed the next frame.

        Args:
            frame: BGR frame as numpy array

        Returns:
            Estimate relative to the previous frame, or None for the first
            frame and for frames where no estimate could be made
        """
        pass

    def reset(self) -> None:
        """Forget all previous frames."""
        self.frame_count = 0
