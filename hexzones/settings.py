"""Settings for a hex zone map."""

from __future__ import annotations

from collections.abc import MutableMapping
from numbers import Real
from typing import TYPE_CHECKING, Any, ClassVar

from hexzones.errors import ConfigurationError

if TYPE_CHECKING:
    from hexzones.zone_map import ZoneMap


class Settings(MutableMapping):
    """Layout and allocation parameters of a ZoneMap.

    Attributes:
        zone_map : the zone map this settings object is bound to, if any

    Notes:
        in essence, this is a mutable mapping with protection, so it cannot
        be mutated once a ZoneMap has been built from it. Unknown keys are
        kept as they are, which lets callers carry their own parameters.

    """

    defaults: ClassVar[dict[str, Any]] = {
        "hex_radius": 10.0,
        "spacing": 1.1,
        "max_spiral_scan": 1000,
        "max_search_rings": 50,
        "height_step": 0.5,
        "max_height": 100.0,
        "stacking": True,
    }

    __slots__ = ("__dict__", "zone_map")

    def __init__(self, **kwargs):
        """Initialize a Settings object.

        Args:
            kwargs: settings overriding the defaults

        """
        self.zone_map: ZoneMap | None = None
        self.__dict__.update(self.defaults)
        self.__dict__.update(kwargs)
        self.validate()

    def validate(self) -> None:
        """Check every known setting, raising ConfigurationError on the first bad one."""
        for name in ("hex_radius", "spacing", "height_step", "max_height"):
            value = self.__dict__[name]
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ConfigurationError(name, f"must be a number, got {value!r}")
            if value <= 0:
                raise ConfigurationError(name, f"must be positive, got {value!r}")

        for name in ("max_spiral_scan", "max_search_rings"):
            value = self.__dict__[name]
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(
                    name, f"must be a positive integer, got {value!r}"
                )

        if self.max_height < self.height_step:
            raise ConfigurationError(
                "max_height", "must be at least one height_step"
            )
        if not isinstance(self.stacking, bool):
            raise ConfigurationError("stacking", "must be a boolean")

    def __setitem__(self, key, value):  # noqa: D105
        if self.zone_map is not None:
            raise ConfigurationError(
                key, "cannot be changed once the settings are bound to a zone map"
            )

        existed = key in self.__dict__
        old = self.__dict__.get(key)
        self.__dict__[key] = value
        try:
            self.validate()
        except ConfigurationError:
            if existed:
                self.__dict__[key] = old
            else:
                del self.__dict__[key]
            raise

    def __getitem__(self, key):  # noqa: D105
        return self.__dict__[key]

    def __delitem__(self, key):  # noqa: D105
        if key in self.defaults:
            raise ConfigurationError(key, "is a required setting")
        del self.__dict__[key]

    def __iter__(self):  # noqa: D105
        return iter(self.__dict__)

    def __len__(self):  # noqa: D105
        return len(self.__dict__)

    def __setattr__(self, key, value):  # noqa: D105
        if key not in self.__slots__:
            self.__setitem__(key, value)
        else:
            super().__setattr__(key, value)

    def __delattr__(self, key):  # noqa: D105
        if key not in self.__slots__:
            self.__delitem__(key)
        else:
            super().__delattr__(key)

    def to_dict(self) -> dict[str, Any]:
        """Return a dict representation of the settings."""
        return self.__dict__.copy()
