"""
Frame-to-frame motion from scan-line feature tables.

Each frame is scanned into its own FeatureTable and aligned against the
table of the previous frame.
"""

import logging

import numpy as np

from tflow.core.base import BaseMotionModel, MotionEstimate
from tflow.core.config import AlignSettings, ScanSettings, TableSettings
from tflow.core.geometry import rotation_matrix
from tflow.core.image import Image
from tflow.features.scanner import FeatureScanner
from tflow.features.table import FeatureTable

logger = logging.getLogger(__name__)


class ScanLineMotionModel(BaseMotionModel):
    """
    Estimate horizontal motion perpendicular to gravity.

    Offsets are measured along the aligned x axis and reported in image
    coordinates.

    Example:
        >>> model = ScanLineMotionModel(tilt=0.05)
        >>> for frame_num, frame in reader:
        ...     estimate = model.update(frame)
    """

    def __init__(
        self,
        settings: ScanSettings | None = None,
        table_settings: TableSettings | None = None,
        align_settings: AlignSettings | None = None,
        tilt: float | None = None,
    ):
        super().__init__()
        self.settings = settings or ScanSettings()
        self.table_settings = table_settings or TableSettings()
        self.align_settings = align_settings or AlignSettings()
        self.tilt = self.settings.tilt if tilt is None else tilt

        self.previous_table: FeatureTable | None = None

    def scan(self, frame: np.ndarray) -> FeatureScanner:
        """Scan a single frame with a fresh scanner."""
        scanner = FeatureScanner(self.settings, self.table_settings)
        scanner.scan(Image(frame), tilt=self.tilt)
        return scanner

    def update(self, frame: np.ndarray) -> MotionEstimate | None:
        self.frame_count += 1
        scanner = self.scan(frame)
        table = scanner.table

        previous, self.previous_table = self.previous_table, table
        if previous is None:
            return None

        distribution = previous.calculate_offset(
            table,
            max_shift=self.align_settings.max_shift,
            sigma=self.align_settings.sigma,
        )
        if not distribution.has_samples:
            logger.warning("Frame %d: no matching bins, no offset estimate", self.frame_count)
            return None

        # Aligned x back into image space
        dx, dy = rotation_matrix(-self.tilt) @ np.array([distribution.value, 0.0])

        return MotionEstimate(
            frame=self.frame_count,
            offset=(float(dx), float(dy)),
            samples=distribution.count,
            features=len(scanner.points),
        )

    def reset(self) -> None:
        super().reset()
        self.previous_table = None
