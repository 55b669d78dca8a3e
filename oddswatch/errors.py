"""Exceptions raised by the analysis engine and its loaders."""


class OddswatchError(Exception):
    """Base class for oddswatch errors."""

    pass


class ValidationError(OddswatchError, ValueError):
    """Raised when an alert is constructed (or added) with malformed fields."""

    pass


class InvalidInputError(OddswatchError, ValueError):
    """Raised when race data cannot be analysed at all (e.g. no odds)."""

    pass


class RaceDataNotFound(OddswatchError, FileNotFoundError):
    """Raised when the odds snapshot for a race cannot be found on disk."""

    pass
