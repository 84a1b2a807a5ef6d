"""Infiller - Generate infill toolpaths for sliced layers.

Infiller fills the cross-section of every layer of a part with a print
pattern: straight lines, grids, zigzags, concentric rings, gyroids and
more. Scan-line segments can be joined along the boundary into long
continuous polylines, and walls can be generated around the fill area.

Example:
    $ infiller fill part.json --pattern grid --spacing 2000

This will create part-infill.json with the toolpaths of every layer.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
