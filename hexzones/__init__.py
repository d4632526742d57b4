"""hexzones: non-overlapping workspace zones on a hexagonal lattice.

Core Objects: ZoneMap, Settings, and the hex grid building blocks in
:mod:`hexzones.hexgrid`.
"""

import datetime

__title__ = "hexzones"
__version__ = "0.3.0"
__license__ = "Apache 2.0"
_this_year = datetime.datetime.now(tz=datetime.UTC).date().year
__copyright__ = f"Copyright {_this_year} hexzones contributors"

from hexzones.hexgrid import HexCoord, HexLayout  # noqa: E402
from hexzones.settings import Settings  # noqa: E402
from hexzones.zone_map import ZoneMap  # noqa: E402

__all__ = [
    "HexCoord",
    "HexLayout",
    "Settings",
    "ZoneMap",
]
