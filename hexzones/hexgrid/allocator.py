"""Deterministic placement of zones on the hex lattice.

Two strategies decide where a new zone goes:

- The spiral: a fixed enumeration of the lattice (origin, then ring 1,
  ring 2, ...) walked by a cursor that remembers where the last placement
  landed, so consecutive placements fill outward without re-scanning.
- Nearest free: starting from a hint (for instance where the user clicked),
  the target itself if free, otherwise the first free cell on the closest
  ring around it.

Both searches are bounded. When the bound runs out they either return a
documented fallback (with a :class:`~hexzones.errors.PlacementFallbackWarning`)
or, with ``strict=True``, raise :class:`~hexzones.errors.PlacementExhaustedError`.
"""

from __future__ import annotations

import math
import warnings

from hexzones.errors import PlacementExhaustedError, PlacementFallbackWarning
from hexzones.hexgrid.coordinates import ORIGIN, HexCoord, HexLayout, round_to_hex
from hexzones.hexgrid.occupancy import OccupancyTable
from hexzones.hexgrid.rings import DIRECTIONS, ring, side_direction
from hexzones.hexzones_logging import create_module_logger

_logger = create_module_logger()


def ring_start(n: int) -> int:
    """Return the spiral index of the first hex on ring ``n`` (``n >= 1``)."""
    return 1 + 3 * n * (n - 1)


def ring_of_index(index: int) -> int:
    """Return the ring that spiral index ``index`` falls on."""
    if index == 0:
        return 0
    # solve 1 + 3n(n-1) <= index for the largest n, then correct float error
    n = (3 + math.isqrt(12 * index - 3)) // 6
    while ring_start(n + 1) <= index:
        n += 1
    while ring_start(n) > index:
        n -= 1
    return n


def index_to_hex(index: int) -> HexCoord:
    """Map a spiral index to its hex; 0 is the origin, 1-6 ring 1, 7-18 ring 2 and so on.

    Positions within a ring follow the walk order of
    :func:`hexzones.hexgrid.rings.ring`.
    """
    if index < 0:
        raise ValueError(f"Spiral index must be non-negative, got {index}")
    if index == 0:
        return ORIGIN

    n = ring_of_index(index)
    position = index - ring_start(n)
    side, offset = divmod(position, n)

    hex = DIRECTIONS[0] * n
    for s in range(side):
        hex = hex + side_direction(s) * n
    return hex + side_direction(side) * offset


def hex_to_index(hex: HexCoord) -> int:
    """Inverse of :func:`index_to_hex`."""
    n = hex.distance_to(ORIGIN)
    if n == 0:
        return 0

    corner = DIRECTIONS[0] * n
    for side in range(6):
        step = side_direction(side)
        delta = hex - corner
        # the hex lies on this side if it is a whole number of steps away
        for offset in range(n):
            if delta == step * offset:
                return ring_start(n) + side * n + offset
        corner = corner + step * n

    raise AssertionError(f"{hex} was not found on ring {n}")  # pragma: no cover


class SpiralAllocator:
    """Chooses free hexes for new zones.

    The allocator never occupies anything itself: callers take the returned
    hex and hand it to :meth:`OccupancyTable.occupy`. Between those two calls
    the allocator and table must not be used by anyone else.

    Attributes:
        occupancy (OccupancyTable): the table consulted for free cells
        layout (HexLayout): used to turn world positions into hexes
        max_spiral_scan (int): how many spiral indices one search may inspect
        max_search_rings (int): how many rings a nearest-free search may inspect
        cursor (int): spiral index where the next search starts

    """

    def __init__(
        self,
        occupancy: OccupancyTable,
        layout: HexLayout | None = None,
        max_spiral_scan: int = 1000,
        max_search_rings: int = 50,
    ) -> None:
        """Create an allocator.

        Args:
            occupancy: the table of occupied cells
            layout: world layout, a default HexLayout if None
            max_spiral_scan: bound on spiral indices inspected per search
            max_search_rings: bound on rings inspected per nearest-free search
        """
        self.occupancy = occupancy
        self.layout = layout if layout is not None else HexLayout()
        self.max_spiral_scan = max_spiral_scan
        self.max_search_rings = max_search_rings
        self.cursor = 0

    def _scan_spiral(self) -> int | None:
        for index in range(self.cursor, self.cursor + self.max_spiral_scan):
            if not self.occupancy.is_occupied(index_to_hex(index)):
                return index
        return None

    def _spiral_exhausted(self, strict: bool, consume: bool) -> HexCoord:
        if strict:
            raise PlacementExhaustedError("spiral", self.max_spiral_scan, self.cursor)
        message = (
            f"No free hex within {self.max_spiral_scan} spiral indices of "
            f"index {self.cursor}, falling back to {ORIGIN}"
        )
        if not consume:
            # previews repeat while a placeholder is shown
            _logger.debug(message)
            return ORIGIN
        _logger.warning(message)
        warnings.warn(message, PlacementFallbackWarning, stacklevel=3)
        return ORIGIN

    def next_in_spiral(self, strict: bool = False) -> HexCoord:
        """Return the next free hex in spiral order and move the cursor past it.

        The hex is not occupied by this call.

        Args:
            strict: raise instead of returning the origin when the search is exhausted

        Raises:
            PlacementExhaustedError: if ``strict`` and no free hex was found

        """
        index = self._scan_spiral()
        if index is None:
            return self._spiral_exhausted(strict, consume=True)
        self.cursor = index + 1
        return index_to_hex(index)

    def peek_next_in_spiral(self, strict: bool = False) -> HexCoord:
        """Return what :meth:`next_in_spiral` would return, without moving the cursor.

        An exhausted preview returns the origin without a warning; only
        :meth:`next_in_spiral` warns.
        """
        index = self._scan_spiral()
        if index is None:
            return self._spiral_exhausted(strict, consume=False)
        return index_to_hex(index)

    def reset_spiral(self) -> None:
        """Rewind the cursor to the origin."""
        self.cursor = 0

    def find_nearest_free(self, target: HexCoord, strict: bool = False) -> HexCoord:
        """Return ``target`` if free, else the first free hex on the closest ring around it.

        Within a ring, cells are tried in ring walk order, so ties go to the
        first one reached from the east corner.

        Args:
            target: preferred cell
            strict: raise instead of returning ``target`` when the search is exhausted

        Raises:
            PlacementExhaustedError: if ``strict`` and no free hex was found

        """
        if not self.occupancy.is_occupied(target):
            return target

        for n in range(1, self.max_search_rings + 1):
            for hex in ring(target, n):
                if not self.occupancy.is_occupied(hex):
                    return hex

        if strict:
            raise PlacementExhaustedError(
                "nearest free search", self.max_search_rings, target
            )
        message = (
            f"No free hex within {self.max_search_rings} rings of {target}, "
            "returning the occupied target"
        )
        _logger.warning(message)
        warnings.warn(message, PlacementFallbackWarning, stacklevel=2)
        return target

    def find_nearest_free_from_cartesian(
        self, x: float, z: float, strict: bool = False
    ) -> HexCoord:
        """Nearest free hex to a world position."""
        target = round_to_hex(*self.layout.cartesian_to_axial(x, z))
        return self.find_nearest_free(target, strict=strict)
