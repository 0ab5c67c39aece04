"""Pydantic models and response types for the plugin API."""

from fastapi.responses import Response
from pydantic import BaseModel, StrictBool, StrictStr

PLUGIN_MEDIA_TYPE = "application/external.dns.plugin+json;version=1"


class PluginNegotiationResponse(Response):
    """Empty response advertising the plugin protocol version."""

    media_type = PLUGIN_MEDIA_TYPE

    def __init__(self) -> None:
        super().__init__(status_code=200, headers={"Vary": "Content-Type"})


class PropertyValuesEqualsRequest(BaseModel):
    """Request body of /propertyvaluesequals."""

    name: StrictStr
    previous: StrictStr
    current: StrictStr


class PropertyValuesEqualsResponse(BaseModel):
    """Response body of /propertyvaluesequals."""

    equals: StrictBool
