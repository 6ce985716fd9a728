from __future__ import annotations


class ScaleError(ValueError):
    """Base class for scale construction and mapping failures."""


class InvalidDomainError(ScaleError):
    pass


class InvalidRangeError(ScaleError):
    pass


class InvalidTicksError(ScaleError):
    pass


class UnsupportedModeError(ScaleError):
    pass


class ScaleConfigError(ScaleError):
    pass


class DomainNotSetError(ScaleError):
    pass
