"""Error taxonomy shared by the backend and the visit planning workflow."""

from __future__ import annotations

from enum import Enum


class LocationErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: int | None) -> "LocationErrorKind":
        """Map a positioning API error code (1, 2, 3) to a kind."""
        return {
            1: cls.PERMISSION_DENIED,
            2: cls.POSITION_UNAVAILABLE,
            3: cls.TIMEOUT,
        }.get(code, cls.UNKNOWN)


class GeorefError(Exception):
    """Base class for every error raised by this package."""


class LocationUnavailable(GeorefError):
    """No position could be obtained from any positioning source."""

    kind = LocationErrorKind.UNKNOWN

    def __init__(self, message: str, *, kind: LocationErrorKind | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class PermissionDenied(LocationUnavailable):
    kind = LocationErrorKind.PERMISSION_DENIED


class PositionUnavailable(LocationUnavailable):
    kind = LocationErrorKind.POSITION_UNAVAILABLE


class LocationTimeout(LocationUnavailable):
    kind = LocationErrorKind.TIMEOUT


class LocationUnsupported(LocationUnavailable):
    """Neither positioning API exists in the current runtime."""


class InsufficientDestinations(GeorefError):
    """Route sequencing was requested without any destination."""


class RouteServiceError(GeorefError):
    """The route optimization service failed or answered with a malformed payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(GeorefError):
    """A required selection is missing or the target record cannot take the change."""


class MutationFailed(GeorefError):
    """The persistence layer rejected or failed an agenda update."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PatientFetchFailed(GeorefError):
    """The patient collection could not be loaded from the backend."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def location_error_for(kind: LocationErrorKind, message: str) -> LocationUnavailable:
    """Build the concrete exception for a classified positioning failure."""
    error_type = {
        LocationErrorKind.PERMISSION_DENIED: PermissionDenied,
        LocationErrorKind.POSITION_UNAVAILABLE: PositionUnavailable,
        LocationErrorKind.TIMEOUT: LocationTimeout,
    }.get(kind)
    if error_type is None:
        return LocationUnavailable(message, kind=kind)
    return error_type(message)
