"""Bidirectional bookkeeping of which owner holds which hex.

Every occupied hex maps to exactly one owner and every owner to exactly one
hex; the two dictionaries are kept as mutual inverses by going through
:meth:`OccupancyTable.occupy` and :meth:`OccupancyTable.release` only.

Components that keep per-cell state of their own (such as the elevation
model) subscribe to the table and receive an :class:`OccupancyChange`
message after every change.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

import pandas as pd

from hexzones.errors import CellOccupiedError, OwnerAlreadyPlacedError
from hexzones.hexgrid.coordinates import HexCoord
from hexzones.hexzones_logging import create_module_logger

_logger = create_module_logger()

OCCUPY = "occupy"
RELEASE = "release"


@dataclass(frozen=True, slots=True)
class OccupancyChange:
    """A message describing one change to an occupancy table."""

    type: str
    hex: HexCoord
    owner_id: str


class OccupancyTable:
    """Exclusive assignment of hex cells to owner identifiers.

    Attributes:
        occupied_count (int): number of occupied hexes

    Notes:
        Occupying a hex held by a different owner raises
        :class:`~hexzones.errors.CellOccupiedError`, and an owner can hold
        only one hex at a time. Both checks happen before any state changes,
        so a failed call leaves the table untouched.

    """

    def __init__(self) -> None:
        """Create an empty table."""
        self._hex_to_owner: dict[HexCoord, str] = {}
        self._owner_to_hex: dict[str, HexCoord] = {}
        self._subscribers: list[Callable[[OccupancyChange], None]] = []

    def subscribe(self, callback: Callable[[OccupancyChange], None]) -> None:
        """Call ``callback`` with an OccupancyChange after every occupy and release."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[OccupancyChange], None]) -> None:
        """Stop notifying ``callback``."""
        self._subscribers.remove(callback)

    def _notify(self, change: OccupancyChange) -> None:
        for callback in self._subscribers:
            callback(change)

    def occupy(self, hex: HexCoord, owner_id: str) -> None:
        """Give ``hex`` to ``owner_id``.

        Args:
            hex: the cell to occupy
            owner_id: identifier of the new occupant

        Raises:
            CellOccupiedError: if another owner already holds ``hex``
            OwnerAlreadyPlacedError: if ``owner_id`` already holds a different hex

        """
        occupant = self._hex_to_owner.get(hex)
        if occupant is not None and occupant != owner_id:
            raise CellOccupiedError(hex, occupant, owner_id)

        current = self._owner_to_hex.get(owner_id)
        if current is not None:
            if current == hex:
                return
            raise OwnerAlreadyPlacedError(owner_id, current, hex)

        self._hex_to_owner[hex] = owner_id
        self._owner_to_hex[owner_id] = hex
        _logger.debug(f"{owner_id} occupies {hex}")
        self._notify(OccupancyChange(OCCUPY, hex, owner_id))

    def release(self, owner_id: str) -> None:
        """Free the hex held by ``owner_id``; unknown owners are ignored."""
        hex = self._owner_to_hex.pop(owner_id, None)
        if hex is None:
            return
        del self._hex_to_owner[hex]
        _logger.debug(f"{owner_id} released {hex}")
        self._notify(OccupancyChange(RELEASE, hex, owner_id))

    def is_occupied(self, hex: HexCoord) -> bool:
        """Return True if some owner holds ``hex``."""
        return hex in self._hex_to_owner

    def get_occupant(self, hex: HexCoord) -> str | None:
        """Return the owner of ``hex``, or None if it is free."""
        return self._hex_to_owner.get(hex)

    def get_owner_hex(self, owner_id: str) -> HexCoord | None:
        """Return the hex held by ``owner_id``, or None."""
        return self._owner_to_hex.get(owner_id)

    @property
    def occupied_count(self) -> int:
        """Number of occupied hexes."""
        return len(self._hex_to_owner)

    def occupied_hexes(self) -> list[tuple[HexCoord, str]]:
        """Return ``(hex, owner_id)`` pairs for every occupied cell."""
        return list(self._hex_to_owner.items())

    def clear(self) -> None:
        """Release every owner, notifying subscribers for each one."""
        for owner_id in list(self._owner_to_hex):
            self.release(owner_id)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the occupied cells as a table with ``q``, ``r`` and ``owner_id`` columns."""
        records = [
            {"q": hex.q, "r": hex.r, "owner_id": owner_id}
            for hex, owner_id in self._hex_to_owner.items()
        ]
        return pd.DataFrame(records, columns=["q", "r", "owner_id"])

    def __len__(self) -> int:  # noqa: D105
        return len(self._hex_to_owner)

    def __contains__(self, hex: HexCoord) -> bool:  # noqa: D105
        return hex in self._hex_to_owner

    def __iter__(self) -> Iterator[tuple[HexCoord, str]]:  # noqa: D105
        return iter(list(self._hex_to_owner.items()))
