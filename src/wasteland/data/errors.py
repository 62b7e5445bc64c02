"""Exceptions raised while loading world and balance definitions."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a definition file is missing or is not valid JSON."""


class DataValidationError(DataError):
    """Raised when definition content has the wrong shape or range."""


class DataReferenceError(DataError):
    """Raised when a definition points at a city that does not exist."""
