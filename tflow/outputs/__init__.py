"""
Output module - Data files for feature points, chains and offsets.

Example:
    >>> from tflow.outputs import write_chains_csv
    >>> write_chains_csv("chains.csv", table)
"""

from tflow.outputs.data import (
    write_features_csv,
    write_chains_csv,
    write_offsets_crv,
    read_offsets_crv,
)

__all__ = [
    "write_features_csv",
    "write_chains_csv",
    "write_offsets_crv",
    "read_offsets_crv",
]
