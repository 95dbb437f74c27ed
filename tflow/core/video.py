"""
Video frames for the motion models.

read_frames() decodes a frame range with OpenCV and hands out numbered
BGR frames that can be passed straight to BaseMotionModel.update().
"""

from pathlib import Path
from typing import Iterator

import cv2
import numpy as np


def read_frames(
    path: str | Path,
    first_frame: int = 1,
    last_frame: int | None = None,
) -> Iterator[tuple[int, np.ndarray]]:
    """
    Yield (frame_num, frame) for every decoded frame in the range.

    Frame numbers are 1-indexed and the range is inclusive. Decoding stops
    early at the end of the video. The capture is released when the
    generator finishes or is closed.

    Args:
        path: Video file
        first_frame: First frame to yield
        last_frame: Last frame to yield (None = end of video)

    Raises:
        ValueError: If the frame range is empty or starts before frame 1
        FileNotFoundError: If the video doesn't exist
        RuntimeError: If OpenCV cannot open the video

    Example:
        >>> for frame_num, frame in read_frames("input.mp4", 100, 500):
        ...     estimate = model.update(frame)
    """
    if first_frame < 1:
        raise ValueError(f"first_frame must be >= 1, got {first_frame}")
    if last_frame is not None and last_frame < first_frame:
        raise ValueError(f"Empty frame range {first_frame}-{last_frame}")

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Video file not found: {path}")

    cap = cv2.VideoCapture(str(path))
    if not cap.isOpened():
        raise RuntimeError(f"Failed to open video: {path}")

    try:
        if first_frame > 1:
            cap.set(cv2.CAP_PROP_POS_FRAMES, first_frame - 1)

        frame_num = first_frame
        while last_frame is None or frame_num <= last_frame:
            ok, frame = cap.read()
            if not ok:
                break
            yield frame_num, frame
            frame_num += 1
    finally:
        cap.release()
