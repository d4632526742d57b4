"""Hex coordinates and the pointy-top layout that maps them to world space.

Three coordinate systems are in play:

- Axial ``(q, r)``: column and row of a hex, the canonical address.
- Cube ``(x, y, z)`` with ``x + y + z == 0``: used for rounding and distance.
- Cartesian ``(x, z)``: world space positions on the ground plane.

Refer https://www.redblobgames.com/grids/hexagons/#hex-to-pixel for more detail.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from hexzones.errors import ConfigurationError

SQRT3 = math.sqrt(3.0)


@dataclass(frozen=True, slots=True, order=True)
class HexCoord:
    """Axial address of a single hex cell.

    Hashable and immutable, so it is used directly as a dictionary key.
    """

    q: int
    r: int

    def __add__(self, other: HexCoord) -> HexCoord:  # noqa: D105
        return HexCoord(self.q + other.q, self.r + other.r)

    def __sub__(self, other: HexCoord) -> HexCoord:  # noqa: D105
        return HexCoord(self.q - other.q, self.r - other.r)

    def __mul__(self, k: int) -> HexCoord:  # noqa: D105
        return HexCoord(self.q * k, self.r * k)

    __rmul__ = __mul__

    @property
    def s(self) -> int:
        """Third cube coordinate (q + r + s = 0)."""
        return -self.q - self.r

    def cube(self) -> CubeCoord:
        """Return the cube form of this hex."""
        return axial_to_cube(self)

    def distance_to(self, other: HexCoord) -> int:
        """Return the hex distance to another cell."""
        return distance(self, other)

    def as_tuple(self) -> tuple[int, int]:
        """Return ``(q, r)``."""
        return (self.q, self.r)


ORIGIN = HexCoord(0, 0)


@dataclass(frozen=True, slots=True)
class CubeCoord:
    """Cube form of a hex; the three components always sum to zero."""

    x: int
    y: int
    z: int

    def __post_init__(self):  # noqa: D105
        if self.x + self.y + self.z != 0:
            raise ValueError(
                f"Cube coordinates must sum to zero, got ({self.x}, {self.y}, {self.z})"
            )


def axial_to_cube(hex: HexCoord) -> CubeCoord:
    """Convert an axial hex to cube coordinates."""
    x = hex.q
    z = hex.r
    return CubeCoord(x, -x - z, z)


def cube_to_axial(cube: CubeCoord) -> HexCoord:
    """Convert cube coordinates back to an axial hex."""
    return HexCoord(cube.x, cube.z)


def round_to_hex(q: float, r: float) -> HexCoord:
    """Round fractional axial coordinates to the hex that contains them.

    Each cube component is rounded on its own, then the component with the
    largest rounding error is recomputed from the other two so the result
    still sums to zero. Points exactly on an edge may land on either side.
    """
    x = q
    z = r
    y = -x - z

    rx = round(x)
    ry = round(y)
    rz = round(z)

    dx = abs(rx - x)
    dy = abs(ry - y)
    dz = abs(rz - z)

    if dx > dy and dx > dz:
        rx = -ry - rz
    elif dy > dz:
        ry = -rx - rz
    else:
        rz = -rx - ry

    return cube_to_axial(CubeCoord(int(rx), int(ry), int(rz)))


def distance(a: HexCoord, b: HexCoord) -> int:
    """Return the number of steps between two hexes."""
    ca = axial_to_cube(a)
    cb = axial_to_cube(b)
    return max(abs(ca.x - cb.x), abs(ca.y - cb.y), abs(ca.z - cb.z))


class HexLayout:
    """Pointy-top layout of the lattice in world space.

    Attributes:
        hex_radius (float): circumradius of a hex cell
        spacing (float): factor that leaves a gap between neighbouring cells
        hex_width (float): distance between centers along a row, ``sqrt(3) * R * s``
        hex_height (float): vertex to vertex height of a cell, ``2 * R * s``

    """

    def __init__(self, hex_radius: float = 10.0, spacing: float = 1.1) -> None:
        """Initialize the layout.

        Args:
            hex_radius: circumradius of a cell in world units
            spacing: multiplier applied to the cell size when laying out centers
        """
        if hex_radius <= 0:
            raise ConfigurationError("hex_radius", "must be positive")
        if spacing <= 0:
            raise ConfigurationError("spacing", "must be positive")

        self.hex_radius = hex_radius
        self.spacing = spacing
        self.hex_width = SQRT3 * hex_radius * spacing
        self.hex_height = 2 * hex_radius * spacing

    def __repr__(self) -> str:  # noqa: D105
        return f"HexLayout(hex_radius={self.hex_radius}, spacing={self.spacing})"

    def axial_to_cartesian(self, hex: HexCoord) -> tuple[float, float]:
        """Return the world ``(x, z)`` of a hex center."""
        x = self.hex_width * (hex.q + hex.r / 2)
        z = self.hex_height * 0.75 * hex.r
        return x, z

    def cartesian_to_axial(self, x: float, z: float) -> tuple[float, float]:
        """Return fractional ``(q, r)`` for a world position; round it to get a cell."""
        r = z / (self.hex_height * 0.75)
        q = x / self.hex_width - r / 2
        return q, r

    def cartesian_to_hex(self, x: float, z: float) -> HexCoord:
        """Return the hex containing a world position."""
        return round_to_hex(*self.cartesian_to_axial(x, z))

    def centers(self, hexes: Iterable[HexCoord]) -> np.ndarray:
        """Return an ``(N, 2)`` array with the world centers of the given hexes."""
        qr = np.array([(h.q, h.r) for h in hexes], dtype=float).reshape(-1, 2)
        x = self.hex_width * (qr[:, 0] + qr[:, 1] / 2)
        z = self.hex_height * 0.75 * qr[:, 1]
        return np.column_stack((x, z))

    def pixel_to_hexes(self, points) -> list[HexCoord]:
        """Vectorised :meth:`cartesian_to_hex` for an ``(N, 2)`` array of positions."""
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        r = points[:, 1] / (self.hex_height * 0.75)
        q = points[:, 0] / self.hex_width - r / 2

        cube = np.column_stack((q, -q - r, r))
        rounded = np.rint(cube)
        error = np.abs(rounded - cube)

        # fix the component with the largest rounding error
        rx, ry, rz = rounded.T
        dx, dy, dz = error.T
        fix_x = (dx > dy) & (dx > dz)
        fix_y = ~fix_x & (dy > dz)
        fix_z = ~fix_x & ~fix_y
        rx = np.where(fix_x, -ry - rz, rx)
        ry = np.where(fix_y, -rx - rz, ry)
        rz = np.where(fix_z, -rx - ry, rz)

        return [HexCoord(int(a), int(b)) for a, b in zip(rx, rz)]

    def corners(self, hex: HexCoord, scale: float = 1.0) -> np.ndarray:
        """Return the six ``(x, z)`` corners of a hex, starting at the top vertex.

        Args:
            hex: the cell
            scale: shrink factor applied to the radius, e.g. 0.95 to leave grid lines visible
        """
        cx, cz = self.axial_to_cartesian(hex)
        radius = self.hex_radius * scale
        angles = np.pi / 3 * np.arange(6) - np.pi / 2
        return np.column_stack(
            (cx + radius * np.cos(angles), cz + radius * np.sin(angles))
        )
