"""
Data file writers.

- Feature points and chains as CSV
- Per-frame offsets in the .crv format: FRAME [[ x, y]]
"""

import csv
import re
from pathlib import Path
from typing import Iterable

import numpy as np

from tflow.features.table import FeatureTable


# Pattern for parsing CRV format: FRAME [[ x, y ]]
CRV_PATTERN = re.compile(r'(\d+)\s*\[\[\s*(-?[\d.eE+-]+)\s*,\s*(-?[\d.eE+-]+)\s*\]\]')


def write_features_csv(path: str | Path, points: Iterable) -> None:
    """
    Write feature points as CSV.

    Columns: index, x, y
    """
    with open(Path(path), 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['index', 'x', 'y'])
        for i, point in enumerate(points):
            writer.writerow([i, f"{point[0]:.4f}", f"{point[1]:.4f}"])


def write_chains_csv(path: str | Path, table: FeatureTable) -> None:
    """
    Write every chain link as CSV, chain by chain.

    Columns: chain, link, x, y, aligned_x, aligned_y
    """
    with open(Path(path), 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['chain', 'link', 'x', 'y', 'aligned_x', 'aligned_y'])
        for chain_id, chain in enumerate(table.chains()):
            for link_id, link in enumerate(chain):
                writer.writerow([
                    chain_id,
                    link_id,
                    f"{link.offset[0]:.4f}",
                    f"{link.offset[1]:.4f}",
                    f"{link.aligned_offset[0]:.4f}",
                    f"{link.aligned_offset[1]:.4f}",
                ])


def write_offsets_crv(
    path: str | Path,
    offsets: dict[int, tuple[float, float]] | np.ndarray,
    first_frame: int = 1,
) -> None:
    """
    Write per-frame offsets to a .crv file.

    Args:
        path: Output path
        offsets: Dict mapping frame -> (x, y), or an Nx2 array starting at first_frame
        first_frame: Frame number of the first array row
    """
    if isinstance(offsets, dict):
        items = [(frame, xy[0], xy[1]) for frame, xy in sorted(offsets.items())]
    else:
        arr = np.asarray(offsets, dtype=np.float64).reshape(-1, 2)
        items = [(first_frame + i, x, y) for i, (x, y) in enumerate(arr)]

    with open(Path(path), 'w') as f:
        for frame, x, y in items:
            f.write(f"{frame} [[ {float(x)}, {float(y)}]]\n")


def read_offsets_crv(path: str | Path) -> dict[int, tuple[float, float]]:
    """Read a .crv file into a dict mapping frame -> (x, y)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Offset file not found: {path}")

    data = {}
    with open(path, 'r') as f:
        for line in f:
            match = CRV_PATTERN.match(line.strip())
            if match:
                data[int(match.group(1))] = (float(match.group(2)), float(match.group(3)))
    return data
