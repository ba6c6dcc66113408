"""
Exceptions raised by the repair planner and the FastAPI handlers that turn
them (and MongoDB driver failures) into JSON error responses.
"""

import time
from typing import Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)

from services.logger_singleton import LoggerSingleton

logger = LoggerSingleton.get_logger(__name__)


class RepairPlannerError(Exception):
    """Base class for planner errors"""
    pass


class ConfigurationError(RepairPlannerError):
    """Required connection or model settings are missing. Fatal at startup."""
    pass


class DraftGenerationError(RepairPlannerError):
    """The text-generation service returned nothing usable for a draft work order"""

    def __init__(self, reason: str):
        super().__init__(f"Draft work order generation failed: {reason}")
        self.reason = reason


class ErrorLogLimiter:
    """Caps how often one error type is logged while a dependency is down"""

    def __init__(self, max_per_window: int = 10, window_seconds: float = 60, clock=time.monotonic):
        self.max_per_window = max_per_window
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, list] = {}  # error type -> [window start, count]

    def should_suppress(self, error_type: str) -> bool:
        now = self.clock()
        window = self._windows.get(error_type)
        if window is None or now - window[0] > self.window_seconds:
            self._windows[error_type] = [now, 1]
            return False
        window[1] += 1
        return window[1] > self.max_per_window


error_log_limiter = ErrorLogLimiter()


def _error_response(status_code: int, error: str, error_type: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "code": status_code,
            "status": "error",
            "error": error,
            "details": {
                "error_type": error_type,
                "message": message
            }
        }
    )


async def mongodb_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Connectivity failures: the store could not be reached"""
    if not error_log_limiter.should_suppress(f"mongodb_{type(exc).__name__}"):
        logger.error(f"MongoDB unreachable during {request.method} {request.url.path}: {exc}")

    return _error_response(
        503,
        "Database temporarily unavailable",
        "database_connection_error",
        "The work order store is unreachable. No work order was created."
    )


async def mongodb_operation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Any other driver error, e.g. a rejected write"""
    if not error_log_limiter.should_suppress(f"mongodb_op_{type(exc).__name__}"):
        logger.error(f"MongoDB operation failed during {request.method} {request.url.path}: {exc}")

    return _error_response(
        500,
        "Database operation failed",
        "database_error",
        "The work order store rejected the request. No work order was created."
    )


async def draft_generation_exception_handler(request: Request, exc: DraftGenerationError) -> JSONResponse:
    logger.error(f"Draft generation failed during {request.method} {request.url.path}: {exc.reason}")
    return _error_response(
        502,
        "Repair plan generation failed",
        "draft_generation_error",
        exc.reason
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    error_type = type(exc).__name__
    if not error_log_limiter.should_suppress(f"unhandled_{error_type}"):
        logger.error(f"Unhandled {error_type} during {request.method} {request.url.path}: {exc}", exc_info=True)
    return _error_response(
        500,
        "Internal server error",
        error_type,
        "An unexpected error occurred. The incident has been logged."
    )


# Starlette resolves handlers by walking the exception's MRO, so
# subclasses listed here win over PyMongoError and Exception.
EXCEPTION_HANDLERS = (
    (AutoReconnect, mongodb_exception_handler),
    (ServerSelectionTimeoutError, mongodb_exception_handler),
    (ConnectionFailure, mongodb_exception_handler),
    (OperationFailure, mongodb_operation_exception_handler),
    (PyMongoError, mongodb_operation_exception_handler),
    (DraftGenerationError, draft_generation_exception_handler),
    (Exception, general_exception_handler),
)


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    for exc_class, handler in EXCEPTION_HANDLERS:
        app.add_exception_handler(exc_class, handler)
    logger.info(f"Registered {len(EXCEPTION_HANDLERS)} exception handlers")
