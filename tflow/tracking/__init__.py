"""
Tracking module - Frame-to-frame motion estimation.

This module provides:
- ScanLineMotionModel: Offsets from aligned scan-line feature tables
- OpticalFlowMotionModel: Offsets from matched ORB keypoints
- Offset curve smoothing for stabilization

Example:
    >>> from tflow.tracking import ScanLineMotionModel
    >>> model = ScanLineMotionModel()
    >>> for frame in video:
    ...     estimate = model.update(frame)
"""

from tflow.tracking.motion import ScanLineMotionModel
from tflow.tracking.optical_flow import OpticalFlowMotionModel, find_key_points
from tflow.tracking.smoothing import (
    accumulate_offsets,
    smooth_offsets,
    stabilizing_corrections,
)

__all__ = [
    "ScanLineMotionModel",
    "OpticalFlowMotionModel",
    "find_key_points",
    "accumulate_offsets",
    "smooth_offsets",
    "stabilizing_corrections",
]
