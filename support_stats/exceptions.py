"""Exceptions raised by the support stats engine."""


class StatsError(Exception):
    """Base exception for support stats."""

    pass


class InvalidInputError(StatsError, TypeError):
    """Raised when the record collection itself has an unusable shape."""

    pass
