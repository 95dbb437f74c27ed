"""
Binning and chaining of feature points in gravity-aligned space.

Points are rotated so the tilt axis is vertical and centred on the origin,
then bucketed by their aligned x coordinate. Each new point extends the
most similar chain ending in its own bin or one of the two neighbouring
bins, or starts a new chain.

Links are stored by value in append-only per-bin lists; chain successors
and chain heads are (bin, position) references into those lists.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, NamedTuple

import numpy as np

from tflow.core.geometry import AlignedBox, apply_transform, rotate, translate
from tflow.features.alignment import align_tables
from tflow.features.average import Average

logger = logging.getLogger(__name__)


DEFAULT_MAX_DISPLACEMENT = (4.0, 25.0)


class BinningError(ValueError):
    """A point fell outside the table's aligned bounds."""


class LinkRef(NamedTuple):
    """Position of a link inside the table's bins."""
    bin: int
    position: int


@dataclass(eq=False)
class ChainLink:
    """One feature point in a chain."""
    aligned_offset: np.ndarray
    offset: np.ndarray
    next: LinkRef | None = None


class FeatureTable:
    """
    Feature points grouped into bins and linked into chains.

    Example:
        >>> table = FeatureTable(16, AlignedBox.from_origin_and_size((0, 0), (640, 480)))
        >>> table.update(points)
        >>> for chain in table.chains():
        ...     print([link.offset for link in chain])
    """

    def __init__(
        self,
        bin_count: int,
        bounds: AlignedBox,
        tilt: float = 0.0,
        max_displacement: tuple[float, float] = DEFAULT_MAX_DISPLACEMENT,
    ):
        """
        Args:
            bin_count: Number of bins along the aligned x axis
            bounds: Image-space bounds of the points that will be added
            tilt: Rotation (radians) that makes the gravity axis vertical
            max_displacement: (x, y) tolerance for extending a chain
        """
        if bin_count < 1:
            raise ValueError(f"bin_count must be positive, got {bin_count}")

        self.tilt = tilt
        self.max_displacement = (float(max_displacement[0]), float(max_displacement[1]))

        # Centre the image on the origin, then rotate into aligned space
        self.transform = rotate(tilt) @ translate(-bounds.size / 2)
        self.inverse = np.linalg.inv(self.transform)

        self.bins: list[list[ChainLink]] = [[] for _ in range(bin_count)]
        self.heads: list[LinkRef] = []

        # Any corner can become extremal after rotation
        self.bounds = AlignedBox.from_points(
            [apply_transform(self.transform, corner) for corner in bounds.corners()]
        )

    @property
    def bin_count(self) -> int:
        return len(self.bins)

    @property
    def chain_count(self) -> int:
        return len(self.heads)

    def __len__(self) -> int:
        return sum(len(links) for links in self.bins)

    def to_aligned(self, point) -> np.ndarray:
        return apply_transform(self.transform, point)

    def from_aligned(self, point) -> np.ndarray:
        return apply_transform(self.inverse, point)

    def bin_index(self, aligned_offset) -> int:
        """
        Bin owning an aligned point.

        Raises:
            BinningError: If the point is outside the aligned x range
        """
        f = (aligned_offset[0] - self.bounds.min[0]) / self.bounds.size[0]
        if not (0 <= f < 1):
            raise BinningError(
                f"Aligned point {tuple(aligned_offset)} outside table bounds (fraction {f})"
            )
        return min(int(f * self.bin_count), self.bin_count - 1)

    def link(self, ref: LinkRef) -> ChainLink:
        return self.bins[ref.bin][ref.position]

    def find_previous_similar(self, aligned_offset: np.ndarray, index: int) -> LinkRef | None:
        """
        Closest chain end within tolerance in bin index or its neighbours.

        Only the newest link of each bin is considered, and only if it
        does not already continue its chain.
        """
        max_x, max_y = self.max_displacement
        best: LinkRef | None = None
        best_distance = 0.0

        for b in range(max(index - 1, 0), min(index + 2, self.bin_count)):
            links = self.bins[b]
            if not links:
                continue

            candidate = links[-1]
            if candidate.next is not None:
                continue

            dx, dy = np.abs(aligned_offset - candidate.aligned_offset)
            if dx > max_x or dy > max_y:
                continue

            distance = float(np.hypot(dx, dy))
            if best is None or distance < best_distance:
                best = LinkRef(b, len(links) - 1)
                best_distance = distance

        return best

    def update(self, points: Iterable) -> None:
        """Bin and chain each image-space point, in order."""
        added = 0
        for point in points:
            offset = np.asarray(point, dtype=np.float64)
            aligned_offset = self.to_aligned(offset)
            index = self.bin_index(aligned_offset)

            previous = self.find_previous_similar(aligned_offset, index)

            links = self.bins[index]
            links.append(ChainLink(aligned_offset, offset))
            ref = LinkRef(index, len(links) - 1)

            if previous is not None:
                self.link(previous).next = ref
            else:
                self.heads.append(ref)
            added += 1

        logger.debug("Added %d points, table has %d chains", added, self.chain_count)

    def chain(self, head: LinkRef) -> list[ChainLink]:
        """Links of the chain starting at head, in order."""
        links = []
        ref = head
        while ref is not None:
            link = self.link(ref)
            links.append(link)
            ref = link.next
        return links

    def chains(self) -> Iterator[list[ChainLink]]:
        for head in self.heads:
            yield self.chain(head)

    def average_chain_position(self, bin: int) -> Average:
        """Mean aligned x of every link stored in a bin."""
        distribution = Average()
        for link in self.bins[bin]:
            distribution.add_sample(float(link.aligned_offset[0]))
        return distribution

    def calculate_offset(self, other: "FeatureTable", **kwargs) -> Average:
        """Horizontal aligned-space offset from this table to other."""
        return align_tables(self, other, **kwargs)

    def format_table(self) -> str:
        lines = []
        for index, links in enumerate(self.bins):
            offsets = "; ".join(f"({link.offset[0]:.2f}, {link.offset[1]:.2f})" for link in links)
            lines.append(f"Bin {index}: {offsets}")
        return "\n".join(lines)
