"""Tests for spiral indexing and placement search."""

import pytest

from hexzones.errors import PlacementExhaustedError, PlacementFallbackWarning
from hexzones.hexgrid.allocator import (
    SpiralAllocator,
    hex_to_index,
    index_to_hex,
    ring_of_index,
    ring_start,
)
from hexzones.hexgrid.coordinates import ORIGIN, HexCoord, HexLayout, distance
from hexzones.hexgrid.occupancy import OccupancyTable
from hexzones.hexgrid.rings import ring, spiral


@pytest.fixture
def occupancy():
    """An empty occupancy table."""
    return OccupancyTable()


@pytest.fixture
def allocator(occupancy):
    """An allocator with a R=10, s=1.0 layout."""
    return SpiralAllocator(occupancy, HexLayout(hex_radius=10, spacing=1.0))


class TestSpiralIndex:
    """Tests for the index <-> hex bijection."""

    def test_ring_start(self):
        """Test the first index of each ring."""
        assert [ring_start(n) for n in range(1, 5)] == [1, 7, 19, 37]

    def test_ring_of_index(self):
        """Test ring lookup at ring boundaries."""
        assert ring_of_index(0) == 0
        assert ring_of_index(1) == 1
        assert ring_of_index(6) == 1
        assert ring_of_index(7) == 2
        assert ring_of_index(18) == 2
        assert ring_of_index(19) == 3
        assert ring_of_index(ring_start(300)) == 300
        assert ring_of_index(ring_start(300) - 1) == 299

    def test_first_indices(self):
        """Test the origin and the start of ring 1."""
        assert index_to_hex(0) == ORIGIN
        assert index_to_hex(1) == HexCoord(1, 0)
        assert index_to_hex(2) == HexCoord(1, -1)
        assert index_to_hex(7) == HexCoord(2, 0)

    def test_negative_index(self):
        """Test negative indices are rejected."""
        with pytest.raises(ValueError):
            index_to_hex(-1)

    def test_matches_ring_walk(self):
        """Test the spiral index follows the ring walk order exactly."""
        expected = spiral(ORIGIN, 10)
        assert [index_to_hex(i) for i in range(len(expected))] == expected

    def test_bijection(self):
        """Test the first indices map to distinct, reproducible hexes."""
        n = 2000
        hexes = [index_to_hex(i) for i in range(n)]
        assert len(set(hexes)) == n
        assert hexes == [index_to_hex(i) for i in range(n)]

    def test_index_lands_on_its_ring(self):
        """Test every index lands at the distance of its ring."""
        for i in range(1, 500):
            assert distance(ORIGIN, index_to_hex(i)) == ring_of_index(i)

    def test_hex_to_index_inverse(self):
        """Test hex_to_index undoes index_to_hex."""
        for i in range(400):
            assert hex_to_index(index_to_hex(i)) == i


class TestSpiralPlacement:
    """Tests for next_in_spiral and peek_next_in_spiral."""

    def test_peek_does_not_consume(self, allocator):
        """Test peeking repeatedly returns the same hex."""
        assert allocator.peek_next_in_spiral() == ORIGIN
        assert allocator.peek_next_in_spiral() == ORIGIN
        assert allocator.cursor == 0

    def test_next_consumes_without_occupying(self, allocator, occupancy):
        """Test next_in_spiral advances the cursor but leaves the cell free."""
        assert allocator.next_in_spiral() == ORIGIN
        assert allocator.cursor == 1
        assert not occupancy.is_occupied(ORIGIN)
        assert allocator.next_in_spiral() == HexCoord(1, 0)

    def test_end_to_end_scenario(self, allocator, occupancy):
        """Test peek and next around an occupied center."""
        occupancy.occupy(ORIGIN, "S1")

        assert allocator.peek_next_in_spiral() == HexCoord(1, 0)
        assert allocator.cursor == 0

        assert allocator.next_in_spiral() == HexCoord(1, 0)
        assert allocator.cursor == 2

        assert allocator.next_in_spiral() == HexCoord(1, -1)

    def test_skips_occupied(self, allocator, occupancy):
        """Test occupied cells ahead of the cursor are skipped."""
        for hex in ring(ORIGIN, 1)[:3]:
            occupancy.occupy(hex, str(hex))
        allocator.cursor = 1
        assert allocator.next_in_spiral() == index_to_hex(4)

    def test_non_collision(self, allocator, occupancy):
        """Test next_in_spiral followed by occupy never repeats a hex."""
        seen = set()
        for i in range(1000):
            hex = allocator.next_in_spiral()
            assert hex not in seen
            occupancy.occupy(hex, f"session-{i}")
            seen.add(hex)
        assert len(seen) == 1000

    def test_cursor_does_not_revisit_released(self, allocator, occupancy):
        """Test a released early cell is not reused until the spiral is reset."""
        for i in range(3):
            occupancy.occupy(allocator.next_in_spiral(), f"s{i}")
        occupancy.release("s0")

        assert allocator.next_in_spiral() == index_to_hex(3)

        allocator.reset_spiral()
        assert allocator.next_in_spiral() == ORIGIN

    def test_exhausted_fallback_warns(self, occupancy):
        """Test an exhausted spiral returns the origin with a warning."""
        allocator = SpiralAllocator(occupancy, max_spiral_scan=7)
        for hex in spiral(ORIGIN, 1):
            occupancy.occupy(hex, str(hex))

        with pytest.warns(PlacementFallbackWarning):
            assert allocator.next_in_spiral() == ORIGIN
        assert allocator.cursor == 0

    def test_exhausted_peek_is_quiet(self, occupancy, recwarn):
        """Test an exhausted preview returns the origin without warning."""
        allocator = SpiralAllocator(occupancy, max_spiral_scan=7)
        for hex in spiral(ORIGIN, 1):
            occupancy.occupy(hex, str(hex))

        for _ in range(3):
            assert allocator.peek_next_in_spiral() == ORIGIN
        assert not [w for w in recwarn if w.category is PlacementFallbackWarning]

        with pytest.raises(PlacementExhaustedError):
            allocator.peek_next_in_spiral(strict=True)

    def test_exhausted_strict_raises(self, occupancy):
        """Test strict mode raises instead of falling back."""
        allocator = SpiralAllocator(occupancy, max_spiral_scan=7)
        for hex in spiral(ORIGIN, 1):
            occupancy.occupy(hex, str(hex))

        with pytest.raises(PlacementExhaustedError):
            allocator.next_in_spiral(strict=True)

    def test_scan_window_moves_with_cursor(self, occupancy):
        """Test the scan bound counts from the cursor, not from the origin."""
        allocator = SpiralAllocator(occupancy, max_spiral_scan=5)
        allocator.cursor = 100
        assert allocator.next_in_spiral() == index_to_hex(100)


class TestNearestFree:
    """Tests for find_nearest_free."""

    def test_free_target(self, allocator):
        """Test a free target is returned as is."""
        assert allocator.find_nearest_free(HexCoord(4, -2)) == HexCoord(4, -2)

    def test_first_free_in_walk_order(self, allocator, occupancy):
        """Test ties within a ring go to the first cell of the walk."""
        target = HexCoord(2, 2)
        occupancy.occupy(target, "T")
        assert allocator.find_nearest_free(target) == ring(target, 1)[0]

        first, second = ring(target, 1)[:2]
        occupancy.occupy(first, "F")
        assert allocator.find_nearest_free(target) == second

    def test_ring_two_when_ring_one_full(self, allocator, occupancy):
        """Test the search returns a ring 2 cell when ring 1 is full."""
        target = HexCoord(-1, 3)
        for hex in spiral(target, 1):
            occupancy.occupy(hex, str(hex))
        ring_two = ring(target, 2)
        for hex in ring_two:
            if hex != ring_two[5]:
                occupancy.occupy(hex, str(hex))

        result = allocator.find_nearest_free(target)
        assert result == ring_two[5]
        assert distance(target, result) == 2

    def test_exhausted_returns_target(self, occupancy):
        """Test an exhausted search returns the occupied target with a warning."""
        allocator = SpiralAllocator(occupancy, max_search_rings=1)
        for hex in spiral(ORIGIN, 1):
            occupancy.occupy(hex, str(hex))

        with pytest.warns(PlacementFallbackWarning):
            assert allocator.find_nearest_free(ORIGIN) == ORIGIN

        with pytest.raises(PlacementExhaustedError):
            allocator.find_nearest_free(ORIGIN, strict=True)

    def test_from_cartesian(self, allocator, occupancy):
        """Test a world position is rounded to its hex before searching."""
        x, z = allocator.layout.axial_to_cartesian(HexCoord(3, -1))
        assert allocator.find_nearest_free_from_cartesian(x + 2, z - 1) == HexCoord(3, -1)

        occupancy.occupy(HexCoord(3, -1), "A")
        assert allocator.find_nearest_free_from_cartesian(x, z) == HexCoord(4, -1)
