"""Tests for the ZoneMap facade."""

import pytest

from hexzones import Settings, ZoneMap
from hexzones.errors import (
    CellOccupiedError,
    ConfigurationError,
    OwnerAlreadyPlacedError,
    PlacementExhaustedError,
    PlacementFallbackWarning,
)
from hexzones.hexgrid.coordinates import ORIGIN, HexCoord


class TestZoneMap:
    """Tests for placing, previewing and removing zones."""

    def test_defaults(self):
        """Test a map built without arguments uses the default settings."""
        zone_map = ZoneMap()
        assert zone_map.layout.hex_radius == 10.0
        assert zone_map.layout.spacing == 1.1
        assert zone_map.allocator.max_spiral_scan == 1000
        assert zone_map.settings.zone_map is zone_map

    def test_keyword_settings(self):
        """Test individual settings can be passed as keywords."""
        zone_map = ZoneMap(hex_radius=5.0, spacing=1.0)
        assert zone_map.layout.hex_width == pytest.approx(5.0 * 3**0.5)

    def test_settings_and_keywords_conflict(self):
        """Test passing both a settings object and keywords is refused."""
        with pytest.raises(ValueError):
            ZoneMap(Settings(), hex_radius=3.0)

    def test_settings_frozen_once_bound(self):
        """Test settings cannot change under a running map."""
        settings = Settings()
        ZoneMap(settings)
        with pytest.raises(ConfigurationError):
            settings.hex_radius = 20.0

    def test_spiral_placement(self):
        """Test zones without a hint fill the spiral."""
        zone_map = ZoneMap(hex_radius=10, spacing=1.0)
        assert zone_map.place_zone("S1") == ORIGIN
        assert zone_map.preview_zone() == HexCoord(1, 0)
        assert zone_map.place_zone("S2") == HexCoord(1, 0)
        assert zone_map.place_zone("S3") == HexCoord(1, -1)

    def test_preview_changes_nothing(self):
        """Test preview leaves occupancy and cursor untouched."""
        zone_map = ZoneMap()
        zone_map.preview_zone()
        zone_map.preview_zone(hint=(50.0, 50.0))
        assert zone_map.occupancy.occupied_count == 0
        assert zone_map.allocator.cursor == 0

    def test_hint_placement(self):
        """Test a hint places the zone on the hex under it, or next to it."""
        zone_map = ZoneMap(hex_radius=10, spacing=1.0)
        x, z = zone_map.layout.axial_to_cartesian(HexCoord(-2, 3))

        assert zone_map.place_zone("A", hint=(x, z)) == HexCoord(-2, 3)
        assert zone_map.preview_zone(hint=(x, z)) == HexCoord(-1, 3)
        assert zone_map.place_zone("B", hint=(x, z)) == HexCoord(-1, 3)
        assert zone_map.allocator.cursor == 0

    def test_owner_placed_twice(self):
        """Test an owner cannot get a second zone."""
        zone_map = ZoneMap()
        zone_map.place_zone("A")
        with pytest.raises(OwnerAlreadyPlacedError):
            zone_map.place_zone("A")

    def test_refused_placement_keeps_cursor(self):
        """Test a refused second placement does not skip a spiral cell."""
        zone_map = ZoneMap()
        zone_map.place_zone("A")
        with pytest.raises(OwnerAlreadyPlacedError):
            zone_map.place_zone("A")

        assert zone_map.allocator.cursor == 1
        assert zone_map.place_zone("B") == HexCoord(1, 0)

    def test_remove_zone(self):
        """Test removing a zone frees its hex and forgets its elevation."""
        zone_map = ZoneMap()
        hex = zone_map.place_zone("A")
        zone_map.apply_brush(hex, "red")

        zone_map.remove_zone("A")
        zone_map.remove_zone("A")

        assert zone_map.zone_hex("A") is None
        assert not zone_map.occupancy.is_occupied(hex)
        assert zone_map.elevation.zone_elevation("A") == 0.0

    def test_zone_position(self):
        """Test the world position includes the zone elevation."""
        zone_map = ZoneMap(hex_radius=10, spacing=1.0)
        zone_map.place_zone("A")
        hex = zone_map.place_zone("B")
        zone_map.apply_brush(hex, "red")
        zone_map.apply_brush(hex, "red")

        x, y, z = zone_map.zone_position("B")
        assert (x, z) == zone_map.layout.axial_to_cartesian(hex)
        assert y == 1.0
        assert zone_map.zone_position("nobody") is None

    def test_placing_over_paint(self):
        """Test a zone placed on a painted cell clears the paint."""
        zone_map = ZoneMap()
        zone_map.apply_brush(ORIGIN, "red")
        zone_map.place_zone("A")
        assert not zone_map.elevation.is_painted(ORIGIN)

    def test_erase(self):
        """Test erase goes to paint or zone depending on occupancy."""
        zone_map = ZoneMap()
        hex = zone_map.place_zone("A")
        zone_map.apply_brush(hex, "red")
        zone_map.apply_brush(HexCoord(3, 3), "red")

        assert zone_map.erase(hex)
        assert zone_map.erase(HexCoord(3, 3))
        assert zone_map.elevation.zone_elevation("A") == 0.0
        assert not zone_map.elevation.is_painted(HexCoord(3, 3))

    def test_hex_at(self):
        """Test world positions map back to hexes."""
        zone_map = ZoneMap()
        x, z = zone_map.layout.axial_to_cartesian(HexCoord(4, -7))
        assert zone_map.hex_at(x, z) == HexCoord(4, -7)

    def test_exhausted_fallback_collides(self):
        """Test a non-strict fallback onto an occupied hex is refused by occupancy."""
        zone_map = ZoneMap(max_spiral_scan=1)
        zone_map.place_zone("A")
        zone_map.allocator.reset_spiral()

        with pytest.warns(PlacementFallbackWarning):
            with pytest.raises(CellOccupiedError):
                zone_map.place_zone("B")
        assert zone_map.zone_hex("B") is None

    def test_exhausted_strict(self):
        """Test strict placement raises before touching occupancy."""
        zone_map = ZoneMap(max_spiral_scan=1)
        zone_map.place_zone("A")
        zone_map.allocator.reset_spiral()

        with pytest.raises(PlacementExhaustedError):
            zone_map.place_zone("B", strict=True)

    def test_reset(self):
        """Test reset empties the map and rewinds the spiral."""
        zone_map = ZoneMap()
        zone_map.place_zone("A")
        zone_map.place_zone("B")
        zone_map.apply_brush(HexCoord(5, 0), "red")

        zone_map.reset()

        assert zone_map.occupancy.occupied_count == 0
        assert zone_map.elevation.painted_cells() == []
        assert zone_map.place_zone("C") == ORIGIN
