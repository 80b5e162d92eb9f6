"""Exceptions raised by the labyrinth engine."""


class InvalidDimensionsError(ValueError):
    """Raised when a maze is requested below the minimum viable size."""

    pass


class UnknownAlgorithmError(ValueError):
    """Raised when an algorithm name is not recognised."""

    pass
