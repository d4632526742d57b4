"""Neighbourhoods, rings and disks on the hex lattice.

The order of :data:`DIRECTIONS` is load-bearing: :func:`ring` walks its
sides using it, and the spiral index of the allocator is defined in terms of
that walk.
"""

from __future__ import annotations

from hexzones.hexgrid.coordinates import HexCoord

# fmt: off
DIRECTIONS: tuple[HexCoord, ...] = (
    HexCoord(1, 0),   # east
    HexCoord(1, -1),  # northeast
    HexCoord(0, -1),  # northwest
    HexCoord(-1, 0),  # west
    HexCoord(-1, 1),  # southwest
    HexCoord(0, 1),   # southeast
)
# fmt: on


def side_direction(side: int) -> HexCoord:
    """Return the step direction used along the given side of a ring."""
    return DIRECTIONS[(side + 2) % 6]


def neighbors(hex: HexCoord) -> list[HexCoord]:
    """Return the six adjacent cells, in :data:`DIRECTIONS` order."""
    return [hex + d for d in DIRECTIONS]


def ring(center: HexCoord, n: int) -> list[HexCoord]:
    """Return the hexes at exactly distance ``n`` from ``center``.

    The walk starts at the east corner, ``center + n * DIRECTIONS[0]``, and
    goes around the six sides with ``n`` steps each, so the result holds
    ``6n`` distinct cells (or just ``center`` for ``n == 0``).

    Args:
        center: center of the ring
        n: radius of the ring

    Raises:
        ValueError: if ``n`` is negative
    """
    if n < 0:
        raise ValueError(f"Ring radius must be non-negative, got {n}")
    if n == 0:
        return [center]

    results = []
    hex = center + DIRECTIONS[0] * n
    for side in range(6):
        step = side_direction(side)
        for _ in range(n):
            results.append(hex)
            hex = hex + step
    return results


def spiral(center: HexCoord, radius: int) -> list[HexCoord]:
    """Return rings ``0..radius`` around ``center``, innermost first."""
    results = []
    for n in range(radius + 1):
        results.extend(ring(center, n))
    return results


def filled_disk(center: HexCoord, radius: int) -> list[HexCoord]:
    """Return every hex within distance ``radius - 1`` of ``center``.

    ``radius`` counts cells across the middle from the center outwards, so
    1 is just the center and 2 adds its neighbours. The order of the result
    is not meaningful.
    """
    results = []
    for dq in range(-radius + 1, radius):
        for dr in range(max(-radius + 1, -dq - radius + 1), min(radius, -dq + radius)):
            results.append(HexCoord(center.q + dq, center.r + dr))
    return results
