from __future__ import annotations


class BoundaryError(Exception):
    """Base class for boundary lookup errors."""


class BoundaryLoadError(BoundaryError):
    """The boundary geometry could not be loaded. Retryable on the next call."""


class ResourceMissingError(BoundaryLoadError):
    pass


class ParseError(BoundaryLoadError):
    pass


class MissingFeatureError(ParseError):
    pass


class LoadTimeoutError(BoundaryLoadError):
    pass


class InvalidCoordinateError(BoundaryError, ValueError):
    """
    Latitude/longitude is not a finite number inside [-90, 90] x [-180, 180].

    Never escapes `BoundaryService.is_within_boundary`; an invalid point is reported as outside.
    """
