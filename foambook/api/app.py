"""
HTTP boundary for availability and quote requests using FastAPI.

Handlers stay thin: they pass the raw body to the services and translate
domain errors into status codes. Unexpected failures are logged and reported
without internals.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..bootstrap import Services, build_services
from ..config import AppConfig
from ..domain.exceptions import (
    BookingError,
    GeocodingError,
    NotFoundError,
    ServiceAreaError,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def error_response(exc: BookingError) -> JSONResponse:
    """Return a JSON error body with a status code matching the error type."""
    body: Dict[str, Any] = {"error": exc.message}

    if isinstance(exc, ValidationError):
        code = status.HTTP_400_BAD_REQUEST
        if exc.details:
            body["details"] = exc.details
    elif isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
        if exc.missing_ids:
            body["missingIds"] = exc.missing_ids
    elif isinstance(exc, ServiceAreaError):
        code = status.HTTP_400_BAD_REQUEST
        body["distance"] = exc.distance
        body["maxDistance"] = exc.max_distance
    elif isinstance(exc, GeocodingError):
        code = status.HTTP_400_BAD_REQUEST
        body["error"] = "geocoding failed"
        body["details"] = [exc.message]
    else:
        logger.error("Boundary failure: %s", exc.message)
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
        body = {"error": "Internal server error"}

    return JSONResponse(status_code=code, content=body)


async def _respond(request: Request, handler: Callable[[bytes], Awaitable[Dict[str, Any]]]):
    body = await request.body()
    try:
        return await handler(body)
    except BookingError as exc:
        return error_response(exc)
    except Exception:
        logger.exception("Unhandled error at %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


@router.post("/availability")
async def availability(request: Request):
    services: Services = request.app.state.services
    return await _respond(request, services.availability.get_slots)


@router.post("/quote")
async def quote(request: Request):
    services: Services = request.app.state.services
    return await _respond(request, services.quotes.quote)


def create_app(
    config: Optional[AppConfig] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """Build the FastAPI application around a set of services."""
    if services is None:
        services = build_services(config or AppConfig())

    app = FastAPI(title="Foambook Booking API")
    app.state.services = services
    app.include_router(router)
    return app
