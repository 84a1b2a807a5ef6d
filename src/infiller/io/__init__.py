"""Region I/O layer for infiller.

This module handles reading region files and writing fill results. It
provides a clean abstraction layer between the JSON file format and the
domain models.

Key responsibilities:
- Load region files into Layer models, validating the geometry
- Write per-layer results atomically
- Derive result file names

Key classes:
- RegionReader: Load region files and iterate layers
- ResultWriter: Save fill results
"""

from infiller.io.reader import RegionReader
from infiller.io.writer import ResultWriter

__all__ = [
    "RegionReader",
    "ResultWriter",
]
