"""Decorative height on free cells and elevation of occupied zones.

Each cell is in one of three states::

    Free --paint(c)--> Painted(step, c)
    Painted --paint(c)--> Painted(height + step, c)     (capped)
    Painted --paint(c')--> Painted(step, c')            (colour change resets)
    Painted --erase--> Free
    Free/Painted --occupy--> Occupied(elevation)        (painted cell is discarded)
    Occupied --paint/erase--> Occupied(elevation +/- step)
    Occupied --release--> Free

Heights and elevations are whole multiples of the step and saturate at the
cap without raising. :meth:`ElevationModel.apply_brush` is the single entry
point for a brush stroke; it branches on occupancy, so occupied cells always
win over decoration.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Mapping
from dataclasses import dataclass

import numpy as np

from hexzones.errors import ConfigurationError
from hexzones.hexgrid.coordinates import HexCoord
from hexzones.hexgrid.occupancy import OCCUPY, RELEASE, OccupancyChange, OccupancyTable
from hexzones.hexgrid.rings import filled_disk
from hexzones.hexzones_logging import create_module_logger

_logger = create_module_logger()

Color = Hashable


@dataclass(frozen=True, slots=True)
class PaintedCell:
    """Decoration on a free cell."""

    height: float
    color: Color


class ElevationModel:
    """Painted heights of free cells and elevations of occupied ones.

    Attributes:
        occupancy (OccupancyTable): decides whether a brush stroke paints or raises
        step (float): height added or removed by one stroke
        max_height (float): cap shared by painted heights and zone elevations
        stacking (bool): whether repeated strokes build height; when False,
            repainting keeps a single step and occupied cells are left alone

    """

    def __init__(
        self,
        occupancy: OccupancyTable,
        step: float = 0.5,
        max_height: float = 100.0,
        stacking: bool = True,
    ) -> None:
        """Create the model and subscribe it to ``occupancy``.

        Args:
            occupancy: table of occupied cells
            step: height of one stroke
            max_height: cap on heights and elevations
            stacking: whether repeated strokes build height
        """
        if step <= 0:
            raise ConfigurationError("height_step", "must be positive")
        if max_height < step:
            raise ConfigurationError("max_height", "must be at least one height_step")

        self.occupancy = occupancy
        self.step = step
        self.max_height = max_height
        self.stacking = stacking
        self._max_levels = math.floor(max_height / step)

        self._painted: dict[HexCoord, PaintedCell] = {}
        self._elevations: dict[str, float] = {}
        self._pending_elevations: dict[str, float] = {}

        occupancy.subscribe(self._on_occupancy_change)
        # owners placed before this model existed start at ground level
        for _, owner_id in occupancy.occupied_hexes():
            self._elevations[owner_id] = 0.0

    def _levels(self, value: float) -> int:
        return min(max(round(value / self.step), 0), self._max_levels)

    def snap(self, value: float) -> float:
        """Round ``value`` to the nearest whole number of steps within ``[0, max_height]``."""
        return self._levels(value) * self.step

    def _on_occupancy_change(self, change: OccupancyChange) -> None:
        if change.type == OCCUPY:
            if self._painted.pop(change.hex, None) is not None:
                _logger.debug(f"painted cell at {change.hex} covered by {change.owner_id}")
            pending = self._pending_elevations.pop(change.owner_id, 0.0)
            self._elevations[change.owner_id] = self.snap(pending)
        elif change.type == RELEASE:
            self._elevations.pop(change.owner_id, None)

    # Painted cells

    def paint(self, hex: HexCoord, color: Color) -> PaintedCell:
        """Paint a free cell and return its new state.

        Painting with the current colour adds a step (when stacking), any
        other colour starts over at a single step.

        Raises:
            ValueError: if ``hex`` is occupied; use :meth:`apply_brush` for strokes
                that may land on zones

        """
        if self.occupancy.is_occupied(hex):
            raise ValueError(f"{hex} is occupied, it cannot be painted")

        levels = 1
        existing = self._painted.get(hex)
        if existing is not None and existing.color == color and self.stacking:
            levels = min(self._levels(existing.height) + 1, self._max_levels)

        cell = PaintedCell(levels * self.step, color)
        self._painted[hex] = cell
        return cell

    def apply_brush(self, hex: HexCoord, color: Color) -> bool:
        """Apply one brush stroke to ``hex``.

        A free cell is painted. An occupied cell is not painted; its owner's
        zone is raised by one step instead.

        Returns:
            True if anything changed
        """
        owner_id = self.occupancy.get_occupant(hex)
        if owner_id is not None:
            if not self.stacking:
                return False
            return self.raise_zone(owner_id)

        self.paint(hex, color)
        return True

    def erase(self, hex: HexCoord) -> bool:
        """Remove the paint from ``hex``, or lower the zone standing on it.

        Returns:
            True if anything changed
        """
        owner_id = self.occupancy.get_occupant(hex)
        if owner_id is not None:
            if not self.stacking:
                return False
            return self.lower_zone(owner_id)

        return self._painted.pop(hex, None) is not None

    def clear_painted(self) -> None:
        """Remove every painted cell."""
        self._painted.clear()

    def get_painted(self, hex: HexCoord) -> PaintedCell | None:
        """Return the decoration on ``hex``, if any."""
        return self._painted.get(hex)

    def is_painted(self, hex: HexCoord) -> bool:
        """Return True if ``hex`` carries paint."""
        return hex in self._painted

    def painted_height(self, hex: HexCoord) -> float:
        """Return the painted height of ``hex``, 0 if unpainted."""
        cell = self._painted.get(hex)
        return cell.height if cell is not None else 0.0

    def painted_cells(self) -> list[tuple[HexCoord, PaintedCell]]:
        """Return ``(hex, cell)`` for every painted cell."""
        return list(self._painted.items())

    def area_heights(self, center: HexCoord, radius: int) -> np.ndarray:
        """Return an ``(N, 3)`` array of ``q, r, height`` over ``filled_disk(center, radius)``."""
        hexes = filled_disk(center, radius)
        return np.array(
            [(h.q, h.r, self.painted_height(h)) for h in hexes], dtype=float
        ).reshape(-1, 3)

    # Zone elevations

    def zone_elevation(self, owner_id: str) -> float:
        """Return the elevation of an owner's zone, 0 for unknown owners."""
        return self._elevations.get(owner_id, 0.0)

    def zone_elevations(self) -> dict[str, float]:
        """Return the elevation of every placed owner."""
        return dict(self._elevations)

    def _amount(self, amount: float | None) -> float:
        if amount is None:
            return self.step
        if amount < 0:
            raise ValueError(
                f"Elevation change must be non-negative, got {amount}; "
                "use the opposite direction instead"
            )
        return amount

    def raise_zone(self, owner_id: str, amount: float | None = None) -> bool:
        """Raise an owner's zone, saturating at ``max_height``.

        Args:
            owner_id: owner of the zone
            amount: height to add, one step if None

        Returns:
            False if the owner holds no hex or the zone is already at the cap

        Raises:
            ValueError: if ``amount`` is negative
        """
        amount = self._amount(amount)
        if owner_id not in self._elevations:
            return False
        current = self._elevations[owner_id]
        self._elevations[owner_id] = self.snap(current + amount)
        return self._elevations[owner_id] != current

    def lower_zone(self, owner_id: str, amount: float | None = None) -> bool:
        """Lower an owner's zone, saturating at 0.

        Returns:
            False if the owner holds no hex or the zone is already on the ground

        Raises:
            ValueError: if ``amount`` is negative
        """
        amount = self._amount(amount)
        if owner_id not in self._elevations:
            return False
        current = self._elevations[owner_id]
        self._elevations[owner_id] = self.snap(current - amount)
        return self._elevations[owner_id] != current

    def set_zone_elevation(self, owner_id: str, elevation: float) -> bool:
        """Set an owner's elevation directly, snapped to the step grid.

        Returns:
            False if the owner holds no hex
        """
        if owner_id not in self._elevations:
            return False
        self._elevations[owner_id] = self.snap(elevation)
        return True

    def load_zone_elevations(self, elevations: Mapping[str, float]) -> None:
        """Apply saved elevations; owners without a hex get theirs when they are placed."""
        for owner_id, elevation in elevations.items():
            if not self.set_zone_elevation(owner_id, elevation):
                self._pending_elevations[owner_id] = elevation

    @property
    def pending_elevations(self) -> dict[str, float]:
        """Saved elevations waiting for their owner to be placed."""
        return dict(self._pending_elevations)
