"""
Error handlers for the FastAPI application.

Every ``TripPlannerException`` becomes an error envelope carrying its error
code and status; nothing raised by the trip services takes the process down.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
from typing import Dict

from tripnav.core.exceptions import ErrorCode, TripPlannerException
from tripnav.schemas.base import error

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Renders exceptions as envelopes and counts them per error code."""

    def __init__(self):
        self.error_counts: Dict[str, int] = {}

    def _track_error(self, error_code: str) -> None:
        self.error_counts[error_code] = self.error_counts.get(error_code, 0) + 1

    async def handle_trip_planner_exception(self, request: Request, exc: TripPlannerException) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{exc.error_code.value} in request {request_id}: {exc.message}",
            extra={
                "request_id": request_id,
                "error_code": exc.error_code.value,
                "status_code": exc.status_code,
                "details": exc.details,
                "request_path": request.url.path,
            },
        )
        self._track_error(exc.error_code.value)
        return JSONResponse(
            status_code=exc.status_code,
            content=error(exc.message, exc.error_code.value, data={"details": exc.details}),
        )

    async def handle_validation_error(self, request: Request, exc: RequestValidationError) -> JSONResponse:
        self._track_error(ErrorCode.VALIDATION_ERROR.value)
        return JSONResponse(
            status_code=422,
            content=error(
                "Request validation failed",
                ErrorCode.VALIDATION_ERROR.value,
                data={"details": jsonable_errors(exc)},
            ),
        )

    async def handle_unexpected(self, request: Request, exc: Exception) -> JSONResponse:
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(f"Unhandled error in request {request_id}: {exc}", exc_info=True)
        self._track_error(ErrorCode.INTERNAL_SERVER_ERROR.value)
        return JSONResponse(
            status_code=500,
            content=error("Internal server error", ErrorCode.INTERNAL_SERVER_ERROR.value),
        )

    def get_error_statistics(self) -> Dict[str, int]:
        return dict(self.error_counts)


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]


error_handler = ErrorHandler()


def setup_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TripPlannerException, error_handler.handle_trip_planner_exception)
    app.add_exception_handler(RequestValidationError, error_handler.handle_validation_error)
    app.add_exception_handler(Exception, error_handler.handle_unexpected)
