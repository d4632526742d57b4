"""The zone map: one lattice, its occupants and their decoration.

Core Objects: ZoneMap
"""

from __future__ import annotations

from collections.abc import Hashable

from hexzones.errors import OwnerAlreadyPlacedError
from hexzones.hexgrid.allocator import SpiralAllocator
from hexzones.hexgrid.coordinates import HexCoord, HexLayout
from hexzones.hexgrid.elevation import ElevationModel
from hexzones.hexgrid.occupancy import OccupancyTable
from hexzones.hexzones_logging import create_module_logger, method_logger
from hexzones.settings import Settings

_hexzones_logger = create_module_logger()


class ZoneMap:
    """Places one zone per owner on a hex lattice and tracks their decoration.

    A ZoneMap owns all mutable state of the lattice: the occupancy table, the
    spiral cursor of the allocator, painted cells and zone elevations. It is
    not thread safe; callers sharing one across threads must lock the whole
    instance, since choosing a hex and occupying it are two separate steps.

    Attributes:
        settings: the frozen settings the map was built from
        layout: world layout of the lattice
        occupancy: which owner holds which hex
        allocator: chooses hexes for new zones
        elevation: painted heights and zone elevations

    """

    @method_logger(__name__)
    def __init__(self, settings: Settings | None = None, **kwargs) -> None:
        """Create a new zone map.

        Args:
            settings: the settings to use, a default Settings if None
            kwargs: individual settings, only allowed without ``settings``

        """
        if settings is None:
            settings = Settings(**kwargs)
        elif kwargs:
            raise ValueError("you have to pass either settings or keyword settings, not both")

        self.settings = settings
        settings.zone_map = self

        self.layout = HexLayout(settings.hex_radius, settings.spacing)
        self.occupancy = OccupancyTable()
        self.allocator = SpiralAllocator(
            self.occupancy,
            self.layout,
            max_spiral_scan=settings.max_spiral_scan,
            max_search_rings=settings.max_search_rings,
        )
        self.elevation = ElevationModel(
            self.occupancy,
            step=settings.height_step,
            max_height=settings.max_height,
            stacking=settings.stacking,
        )

    def _choose(
        self, hint: tuple[float, float] | None, consume: bool, strict: bool
    ) -> HexCoord:
        if hint is not None:
            x, z = hint
            return self.allocator.find_nearest_free_from_cartesian(x, z, strict=strict)
        if consume:
            return self.allocator.next_in_spiral(strict=strict)
        return self.allocator.peek_next_in_spiral(strict=strict)

    def place_zone(
        self,
        owner_id: str,
        hint: tuple[float, float] | None = None,
        strict: bool = False,
    ) -> HexCoord:
        """Choose a hex for ``owner_id`` and occupy it.

        Args:
            owner_id: the owner of the new zone
            hint: world ``(x, z)`` the zone should be close to; the spiral is used if None
            strict: raise PlacementExhaustedError instead of using the fallback hex

        Returns:
            the occupied hex

        Raises:
            CellOccupiedError: if the search fell back to an occupied hex
            OwnerAlreadyPlacedError: if ``owner_id`` already has a zone elsewhere

        Notes:
            The owner is checked before a hex is chosen, so a refused call
            leaves the spiral cursor where it was.

        """
        current = self.occupancy.get_owner_hex(owner_id)
        if current is not None:
            raise OwnerAlreadyPlacedError(owner_id, current, "a new zone")

        hex = self._choose(hint, consume=True, strict=strict)
        self.occupancy.occupy(hex, owner_id)
        _hexzones_logger.info(f"placed zone {owner_id} at {hex}")
        return hex

    def preview_zone(self, hint: tuple[float, float] | None = None) -> HexCoord:
        """Return where :meth:`place_zone` would put a zone, changing nothing."""
        return self._choose(hint, consume=False, strict=False)

    def remove_zone(self, owner_id: str) -> None:
        """Remove the zone of ``owner_id``; unknown owners are ignored."""
        if self.occupancy.get_owner_hex(owner_id) is not None:
            _hexzones_logger.info(f"removing zone {owner_id}")
        self.occupancy.release(owner_id)

    def zone_hex(self, owner_id: str) -> HexCoord | None:
        """Return the hex of an owner's zone."""
        return self.occupancy.get_owner_hex(owner_id)

    def zone_position(self, owner_id: str) -> tuple[float, float, float] | None:
        """Return the world ``(x, elevation, z)`` of an owner's zone."""
        hex = self.occupancy.get_owner_hex(owner_id)
        if hex is None:
            return None
        x, z = self.layout.axial_to_cartesian(hex)
        return x, self.elevation.zone_elevation(owner_id), z

    def hex_at(self, x: float, z: float) -> HexCoord:
        """Return the hex under a world position."""
        return self.layout.cartesian_to_hex(x, z)

    def apply_brush(self, hex: HexCoord, color: Hashable) -> bool:
        """Paint ``hex``, or raise the zone standing on it."""
        return self.elevation.apply_brush(hex, color)

    def erase(self, hex: HexCoord) -> bool:
        """Erase paint from ``hex``, or lower the zone standing on it."""
        return self.elevation.erase(hex)

    def reset(self) -> None:
        """Remove every zone and painted cell and rewind the spiral."""
        self.occupancy.clear()
        self.elevation.clear_painted()
        self.allocator.reset_spiral()
