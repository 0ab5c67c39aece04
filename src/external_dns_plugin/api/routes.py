"""API routes implementing the ExternalDNS plugin protocol."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, TypeAdapter, ValidationError
from starlette.concurrency import run_in_threadpool

from external_dns_plugin.api.models import (
    PluginNegotiationResponse,
    PropertyValuesEqualsRequest,
    PropertyValuesEqualsResponse,
)
from external_dns_plugin.core.config import Settings
from external_dns_plugin.core.models import Changes, EndpointList, endpoints_to_wire
from external_dns_plugin.core.provider import Provider
from external_dns_plugin.utils.exceptions import (
    MalformedRequestError,
    capture_exception,
)

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")


@dataclass
class RouteDependencies:
    """Dependencies for route handlers."""

    provider: Provider
    settings: Settings


def get_dependencies(request: Request) -> RouteDependencies:
    """Get the dependencies bound to the running application."""
    return request.app.state.dependencies


async def _decode(request: Request, schema: type[BaseModel] | TypeAdapter) -> Any:
    """Decode the request body, answering 400 if it does not fit the schema."""
    body = await request.body()

    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_json(body)
        return schema.model_validate_json(body)
    except ValidationError as e:
        error = MalformedRequestError(
            f"{request.method} {request.url.path}: {e.error_count()} validation error(s)"
        )
        logger.debug("%s\n%s", error, e)
        raise HTTPException(status_code=400) from error


async def _call_provider(operation: str, func: Callable[..., T], *args) -> T:
    """Run a provider operation on a worker thread, answering 500 on failure."""
    try:
        return await run_in_threadpool(func, *args)
    except Exception as e:  # pylint: disable=broad-exception-caught
        capture_exception(e, {"operation": operation})
        raise HTTPException(status_code=500) from e


@router.get("/")
async def negotiate() -> Response:
    """Advertise the plugin protocol version."""
    return PluginNegotiationResponse()


@router.api_route("/records", methods=["GET", "POST"])
async def records(
    request: Request,
    deps: RouteDependencies = Depends(get_dependencies),
) -> Response:
    """List records (GET) or apply a change batch (POST)."""
    if request.method == "GET":
        logger.debug("get records")
        endpoints = await _call_provider("records", deps.provider.records)

        return JSONResponse(endpoints_to_wire(endpoints))

    logger.info("post applychanges")
    changes = await _decode(request, Changes)
    await _call_provider("apply_changes", deps.provider.apply_changes, changes)

    return Response(status_code=200)


@router.get("/propertyvaluesequals")
async def property_values_equals(
    request: Request,
    deps: RouteDependencies = Depends(get_dependencies),
) -> Response:
    """Ask the provider whether two values of a property are equivalent."""
    logger.debug("get propertyValuesEquals")
    query = await _decode(request, PropertyValuesEqualsRequest)
    equals = await _call_provider(
        "property_values_equal",
        deps.provider.property_values_equal,
        query.name,
        query.previous,
        query.current,
    )

    return JSONResponse(PropertyValuesEqualsResponse(equals=bool(equals)).model_dump())


@router.get("/adjustendpoints")
async def adjust_endpoints(
    request: Request,
    deps: RouteDependencies = Depends(get_dependencies),
) -> Response:
    """Let the provider normalize desired endpoints before planning."""
    logger.debug("get adjustEndpoints")
    endpoints = await _decode(request, EndpointList)
    adjusted = await _call_provider(
        "adjust_endpoints", deps.provider.adjust_endpoints, endpoints
    )

    return JSONResponse(endpoints_to_wire(adjusted))
