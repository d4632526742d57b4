import hexzones


class HexZonesError(Exception):
    """Base class for all hexzones-specific exceptions.
    It automatically appends the hexzones version to help with debugging reports.
    """

    def __init__(self, message: str):
        self.hexzones_version = getattr(hexzones, "__version__", "unknown")
        # Store the original message cleanly for programmatic access
        self.original_message = message
        full_message = f"[hexzones {self.hexzones_version}] {message}"
        super().__init__(full_message)


class ConfigurationError(HexZonesError):
    """Raised when layout or allocator settings are invalid."""

    def __init__(self, param_name: str = None, reason: str = None):
        # raise ConfigurationError("Generic message")
        # OR: raise ConfigurationError("hex_radius", "must be positive")
        if param_name and reason:
            message = f"Invalid configuration for '{param_name}': {reason}"
            self.param_name = param_name
        else:
            message = param_name if param_name else "Invalid configuration"
            self.param_name = None

        super().__init__(message)


# Space Errors
class SpaceError(HexZonesError):
    """Generic errors related to the hex lattice and its occupancy."""


class CellOccupiedError(SpaceError):
    """Raised when occupying a hex that is already held by another owner."""

    def __init__(self, hex, occupant, owner_id):
        self.hex = hex
        self.occupant = occupant
        self.owner_id = owner_id
        message = (
            f"Cannot give {hex} to '{owner_id}': it is already occupied by '{occupant}'."
        )
        super().__init__(message)


class OwnerAlreadyPlacedError(SpaceError):
    """Raised when an owner that already holds a hex tries to occupy another one."""

    def __init__(self, owner_id, current, requested):
        self.owner_id = owner_id
        self.current = current
        self.requested = requested
        message = (
            f"Owner '{owner_id}' already holds {current}; release it before occupying {requested}."
        )
        super().__init__(message)


class PlacementExhaustedError(SpaceError):
    """Raised by strict searches that found no free hex within their bound."""

    def __init__(self, search: str, bound: int, start):
        self.search = search
        self.bound = bound
        self.start = start
        message = f"{search} found no free hex within {bound} steps of {start}."
        super().__init__(message)


# Warnings
class PlacementFallbackWarning(RuntimeWarning):
    """Issued when a bounded search gives up and returns its fallback hex."""
