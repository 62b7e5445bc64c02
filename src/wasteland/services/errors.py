"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when the world or the player cannot be created."""


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""


class TravelStateError(Exception):
    """Raised when travel steps are invoked out of order."""
