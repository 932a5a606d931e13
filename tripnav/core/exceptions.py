"""
Custom exceptions for the trip navigator backend.

Provider-facing errors degrade locally (the session keeps its last known-good
state); usage errors are reported straight back to the caller.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Provider errors
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    RATE_LIMITED = "RATE_LIMITED"
    NO_ROUTE_FOUND = "NO_ROUTE_FOUND"

    # Usage errors
    NO_LOCATION_SELECTED = "NO_LOCATION_SELECTED"
    INVALID_COORDINATE = "INVALID_COORDINATE"
    INVALID_SEARCH_RADIUS = "INVALID_SEARCH_RADIUS"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"

    # Generic errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class TripPlannerException(Exception):
    """Base exception for the trip navigator backend."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class ProviderUnavailableError(TripPlannerException):
    """Raised when an external geocoding/routing/weather provider cannot answer."""

    def __init__(self, provider: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Provider '{provider}' is temporarily unavailable",
            error_code=ErrorCode.PROVIDER_UNAVAILABLE,
            details={"provider": provider, **(details or {})},
            status_code=503
        )
        self.provider = provider


class RateLimitedError(TripPlannerException):
    """Raised when a provider rejects the request because of rate limiting."""

    def __init__(self, provider: str, retry_after_seconds: Optional[float] = None):
        details: Dict[str, Any] = {"provider": provider}
        if retry_after_seconds is not None:
            details["retry_after_seconds"] = retry_after_seconds
        super().__init__(
            message=f"Provider '{provider}' rate limit exceeded",
            error_code=ErrorCode.RATE_LIMITED,
            details=details,
            status_code=429
        )
        self.provider = provider
        self.retry_after_seconds = retry_after_seconds


class NoRouteFoundError(TripPlannerException):
    """Raised when the routing provider has no route between two points."""

    def __init__(self, mode: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"No {mode} route found between origin and destination",
            error_code=ErrorCode.NO_ROUTE_FOUND,
            details={"transport_mode": mode, **(details or {})},
            status_code=404
        )


class NoLocationSelectedError(TripPlannerException):
    """Raised when directions are requested without a user location and a destination."""

    def __init__(self, missing: list):
        super().__init__(
            message=f"Cannot request directions, missing: {', '.join(missing)}",
            error_code=ErrorCode.NO_LOCATION_SELECTED,
            details={"missing": missing},
            status_code=409
        )
        self.missing = missing


class InvalidCoordinateError(TripPlannerException):
    """Raised when a latitude/longitude pair is out of range."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_COORDINATE,
            details=details,
            status_code=422
        )


class InvalidSearchRadiusError(TripPlannerException):
    """Raised when a nearby-search radius is not positive or exceeds the maximum."""

    def __init__(self, message: str, radius_m: int):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_SEARCH_RADIUS,
            details={"radius_m": radius_m},
            status_code=422
        )


class SessionNotFoundError(TripPlannerException):
    """Raised when an unknown or closed session id is used."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session '{session_id}' not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
            status_code=404
        )


# Provider errors that orchestration degrades to an empty result
PROVIDER_ERRORS = (ProviderUnavailableError, RateLimitedError, NoRouteFoundError)
