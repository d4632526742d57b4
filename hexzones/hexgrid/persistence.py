"""Saving and restoring painted cells, zone elevations and zone placements.

Painted cells are stored as ``{"q", "r", "color", "height"}`` records and
zone elevations as ``{owner_id: elevation}``. Heights are never assigned on
load: each record is replayed as ``round(height / step)`` paint strokes, so a
stored height that is not a whole number of steps comes back rounded.
"""

from __future__ import annotations

import json
import pathlib
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from hexzones.errors import CellOccupiedError, OwnerAlreadyPlacedError
from hexzones.hexgrid.coordinates import HexCoord
from hexzones.hexgrid.elevation import ElevationModel
from hexzones.hexzones_logging import create_module_logger, function_logger

if TYPE_CHECKING:
    from hexzones.zone_map import ZoneMap

_logger = create_module_logger()

STATE_VERSION = 1


def dump_painted(model: ElevationModel) -> list[dict[str, Any]]:
    """Return every painted cell as a ``{q, r, color, height}`` record."""
    return [
        {"q": hex.q, "r": hex.r, "color": cell.color, "height": cell.height}
        for hex, cell in model.painted_cells()
    ]


def load_painted(model: ElevationModel, records: Iterable[Mapping[str, Any]]) -> None:
    """Replace all painted cells by replaying the strokes that built ``records``.

    Records without a height count as a single stroke. Records that land on
    an occupied hex are skipped.
    """
    model.clear_painted()

    stacking = model.stacking
    model.stacking = True
    try:
        for record in records:
            hex = HexCoord(int(record["q"]), int(record["r"]))
            if model.occupancy.is_occupied(hex):
                _logger.debug(f"skipping saved paint at occupied {hex}")
                continue
            height = record.get("height")
            if height is None:
                height = model.step
            strokes = round(height / model.step)
            for _ in range(strokes):
                model.paint(hex, record["color"])
    finally:
        model.stacking = stacking


def dump_zone_elevations(model: ElevationModel) -> dict[str, float]:
    """Return the elevation of every zone that is above ground."""
    return {
        owner_id: elevation
        for owner_id, elevation in model.zone_elevations().items()
        if elevation > 0
    }


def load_zone_elevations(model: ElevationModel, elevations: Mapping[str, float]) -> None:
    """Apply saved elevations, deferring those whose owner is not placed yet."""
    model.load_zone_elevations(elevations)


def dump_state(zone_map: ZoneMap) -> dict[str, Any]:
    """Return a JSON-serialisable snapshot of a zone map."""
    return {
        "version": STATE_VERSION,
        "zones": {
            owner_id: [hex.q, hex.r]
            for hex, owner_id in zone_map.occupancy.occupied_hexes()
        },
        "painted": dump_painted(zone_map.elevation),
        "elevations": dump_zone_elevations(zone_map.elevation),
    }


def _check_zones(zone_map: ZoneMap, zones: Mapping[str, HexCoord]) -> None:
    claimed: dict[HexCoord, str] = {}
    for owner_id, hex in zones.items():
        occupant = claimed.get(hex, zone_map.occupancy.get_occupant(hex))
        if occupant is not None and occupant != owner_id:
            raise CellOccupiedError(hex, occupant, owner_id)
        current = zone_map.occupancy.get_owner_hex(owner_id)
        if current is not None and current != hex:
            raise OwnerAlreadyPlacedError(owner_id, current, hex)
        claimed[hex] = owner_id


def restore_state(zone_map: ZoneMap, state: Mapping[str, Any]) -> None:
    """Apply a snapshot produced by :func:`dump_state`.

    Saved zones are merged into the placements already on the map, while
    painted cells are replaced. Zones are occupied first, so saved paint under
    a zone is dropped and saved elevations reach their zones directly.

    Every saved zone is checked against the map before anything is applied,
    so a snapshot that conflicts with current placements changes nothing.

    Raises:
        ValueError: if the snapshot has an unknown version
        CellOccupiedError: if a saved hex is held by another owner, on the
            map or earlier in the snapshot
        OwnerAlreadyPlacedError: if a saved owner already holds a different hex

    """
    version = state.get("version", STATE_VERSION)
    if version != STATE_VERSION:
        raise ValueError(f"Unsupported state version {version}")

    zones = {
        owner_id: HexCoord(int(q), int(r))
        for owner_id, (q, r) in state.get("zones", {}).items()
    }
    _check_zones(zone_map, zones)

    for owner_id, hex in zones.items():
        zone_map.occupancy.occupy(hex, owner_id)
    load_painted(zone_map.elevation, state.get("painted", []))
    load_zone_elevations(zone_map.elevation, state.get("elevations", {}))


@function_logger(__name__)
def save_state(zone_map: ZoneMap, path: str | pathlib.Path) -> pathlib.Path:
    """Write a snapshot of ``zone_map`` to a JSON file and return its path."""
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(dump_state(zone_map), f, indent=2)
    return path


@function_logger(__name__)
def load_state(zone_map: ZoneMap, path: str | pathlib.Path) -> None:
    """Restore ``zone_map`` from a JSON file written by :func:`save_state`."""
    with open(pathlib.Path(path)) as f:
        restore_state(zone_map, json.load(f))
