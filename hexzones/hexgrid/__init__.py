"""Spatial allocation of zones on an unbounded hexagonal lattice.

This package holds the building blocks, leaf first:

- coordinates: axial, cube and world coordinates of the pointy-top layout
- rings: neighbours, rings, spirals and disks around a hex
- occupancy: which owner holds which hex
- allocator: spiral and nearest-free placement of new zones
- elevation: painted height of free cells and elevation of zones
- persistence: saving and restoring paint, elevations and placements
"""

from hexzones.hexgrid.allocator import (
    SpiralAllocator,
    hex_to_index,
    index_to_hex,
    ring_start,
)
from hexzones.hexgrid.coordinates import (
    ORIGIN,
    CubeCoord,
    HexCoord,
    HexLayout,
    axial_to_cube,
    cube_to_axial,
    distance,
    round_to_hex,
)
from hexzones.hexgrid.elevation import ElevationModel, PaintedCell
from hexzones.hexgrid.occupancy import OccupancyChange, OccupancyTable
from hexzones.hexgrid.rings import DIRECTIONS, filled_disk, neighbors, ring, spiral

__all__ = [
    "DIRECTIONS",
    "ORIGIN",
    "CubeCoord",
    "ElevationModel",
    "HexCoord",
    "HexLayout",
    "OccupancyChange",
    "OccupancyTable",
    "PaintedCell",
    "SpiralAllocator",
    "axial_to_cube",
    "cube_to_axial",
    "distance",
    "filled_disk",
    "hex_to_index",
    "index_to_hex",
    "neighbors",
    "ring",
    "ring_start",
    "round_to_hex",
    "spiral",
]
