"""
Gravity-aligned scan-line feature detection.

Scan lines are laid out horizontally in a frame rotated by the tilt angle,
mapped back into image space, clipped to a slightly shrunk image box and
searched for sub-pixel edges. The resulting points are binned and chained
in a FeatureTable.
"""

import logging

import numpy as np

from tflow.core.config import ScanSettings, TableSettings
from tflow.core.geometry import AlignedBox, LineSegment, rotation_matrix
from tflow.core.image import Image
from tflow.features.edges import features_along_line
from tflow.features.table import FeatureTable

logger = logging.getLogger(__name__)


def default_spacing(height: int, divisor: int = 40) -> int:
    """Scan-line spacing used when none is given."""
    return max(height // divisor, 2)


class FeatureScanner:
    """
    Scan an image for edge features along lines perpendicular to gravity.

    A scanner holds the results of a single scan; once it has found
    points, further calls to scan() return those results unchanged.

    Attributes:
        points: Sub-pixel feature points in image coordinates
        segments: Clipped scan segments that were searched
        bounding_box: Image bounds rotated into gravity-aligned space
        table: FeatureTable built from the points

    Example:
        >>> scanner = FeatureScanner()
        >>> points, segments, table = scanner.scan(Image.from_file("a.png"), tilt=0.0)
        >>> print(f"{len(points)} points in {table.chain_count} chains")
    """

    def __init__(
        self,
        settings: ScanSettings | None = None,
        table_settings: TableSettings | None = None,
    ):
        self.settings = settings or ScanSettings()
        self.table_settings = table_settings or TableSettings()

        self.image: Image | None = None
        self.points: list[np.ndarray] = []
        self.segments: list[LineSegment] = []
        self.bounding_box: AlignedBox | None = None
        self.table: FeatureTable | None = None

    def scan(
        self,
        image: Image,
        tilt: float | None = None,
        spacing: int | None = None,
        bin_count: int | None = None,
    ) -> tuple[list[np.ndarray], list[LineSegment], FeatureTable | None]:
        """
        Find feature points and build the feature table.

        Args:
            image: Image to scan
            tilt: Gravity rotation in radians (default: settings.tilt)
            spacing: Distance between scan lines in aligned space
                (default: settings.spacing, else height // spacing_divisor)
            bin_count: Table bins (default: settings.bin_count, else spacing)

        Returns:
            Tuple of (points, segments, table)
        """
        if self.points:
            return self.points, self.segments, self.table

        if tilt is None:
            tilt = self.settings.tilt
        if spacing is None:
            spacing = self.settings.spacing
        if spacing is None:
            spacing = default_spacing(image.height, self.settings.spacing_divisor)
        if spacing <= 0:
            raise ValueError(f"Scan spacing must be positive, got {spacing}")
        if bin_count is None:
            bin_count = self.settings.bin_count or int(spacing)

        self.image = image
        self.segments = []
        width, height = image.size
        image_box = AlignedBox.from_origin_and_size((0, 0), (width, height))

        # Forward rotation: bounding box of the image where the tilt axis is vertical
        forward = rotation_matrix(tilt)
        self.bounding_box = AlignedBox.from_points(
            [forward @ corner for corner in image_box.corners()]
        )

        # Enumerate lines in rotated space and map them back to image space
        inverse = rotation_matrix(-tilt)
        clipping_box = AlignedBox.from_center_and_size(
            image_box.center, image_box.size * self.settings.clip_scale
        )

        lo = self.bounding_box.min
        hi = self.bounding_box.max

        y = lo[1] + spacing
        while y + spacing < hi[1]:
            segment = LineSegment(inverse @ np.array([lo[0], y]), inverse @ np.array([hi[0], y]))
            clipped = segment.clip(clipping_box)

            if clipped is not None:
                self.segments.append(clipped)
                self.points.extend(features_along_line(
                    image,
                    clipped.start,
                    clipped.end,
                    window_size=self.settings.window_size,
                    threshold=self.settings.contrast_threshold,
                ))

            y += spacing

        self.table = FeatureTable(
            bin_count,
            image_box,
            tilt,
            max_displacement=self.table_settings.max_displacement,
        )
        self.table.update(self.points)

        logger.debug(
            "Scanned %d lines, found %d feature points in %d chains",
            len(self.segments), len(self.points), self.table.chain_count,
        )

        return self.points, self.segments, self.table
