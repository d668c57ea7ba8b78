import logging

import numpy as np
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from grib_inspector.config import configure_logging
from grib_inspector.models.schemas import (
    FileRequest, RecordRequest, ParameterNamesRequest, ParameterRequest,
    InventoryResponse, RecordResponse, ParameterNamesResponse, ParameterNameItem, ParameterResponse
)
from grib_inspector.models.values import record_to_python
from grib_inspector.services.grib_metadata_service import GribMetadataService
from grib_inspector.utils.errors import (
    PreconditionError, FileError, RangeError, KeyExtractionError
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="GRIB Inspector API",
    description="""
    This API extracts metadata from GRIB1/GRIB2 files so specific forecast fields can be
    located without knowing the GRIB key model.

    ## Features
    * Inventory of every message in a file (parameter, units, level, level type)
    * Full key/value record of any message
    * Parameter names of every message, by parameterName, name, shortName or cfName
    * Records of every message carrying a given parameter

    ## Usage Example
    ```python
    import requests

    data = {"path": "gribs/gfs.t12z.pgrb2.0p25.f000.grib2", "parameter_name": "157"}
    response = requests.post("http://localhost:8000/parameter", json=data)
    result = response.json()

    print(f"Found: {result['found']} in messages {result['message_indices']}")
    ```
    """,
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

grib_service = GribMetadataService()

ERROR_RESPONSES = {
    400: {
        "description": "Invalid arguments or unsupported decoder version",
        "content": {"application/json": {"example": {"detail": "parameter_name must be a non-empty string, got ''"}}}
    },
    404: {
        "description": "GRIB file not found or not readable",
        "content": {"application/json": {"example": {"detail": "gribs/missing.grib2: file does not exist"}}}
    },
    500: {
        "description": "Error processing the request",
        "content": {"application/json": {"example": {"detail": "Error opening GRIB file"}}}
    }
}


def _http_error(e: Exception) -> HTTPException:
    """Map an inspection failure onto an HTTP status code"""
    if isinstance(e, PreconditionError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, FileError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, RangeError):
        return HTTPException(status_code=416, detail=str(e))
    if isinstance(e, KeyExtractionError):
        return HTTPException(status_code=422, detail=str(e))
    logger.error(f"Unexpected error: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=str(e))


def _jsonable(value):
    if isinstance(value, np.generic):
        return value.item()
    return value


@app.on_event("startup")
async def startup_event():
    configure_logging()
    logger.info("GRIB inspector API started")


@app.get("/")
async def root():
    """Root endpoint that returns API information"""
    return {
        "name": "GRIB Inspector API",
        "version": "0.1.0",
        "description": "API for inventorying GRIB files and extracting message metadata",
        "endpoints": [
            {
                "path": "/inventory",
                "method": "POST",
                "description": "Get the inventory of every message in a GRIB file"
            },
            {
                "path": "/record",
                "method": "POST",
                "description": "Get the full key/value record of one message"
            },
            {
                "path": "/parameter-names",
                "method": "POST",
                "description": "Get the parameter name of every message"
            },
            {
                "path": "/parameter",
                "method": "POST",
                "description": "Get the records of every message carrying a parameter"
            }
        ]
    }


@app.post("/inventory",
    response_model=InventoryResponse,
    summary="Get the inventory of a GRIB file",
    responses=ERROR_RESPONSES
)
async def get_inventory(request: FileRequest):
    """
    Get the inventory of a GRIB file.

    Returns:
        InventoryResponse containing:
        - header: file path, GRIB edition, originating centre and message count
        - entries: descriptive keys of each message
        - lines: the fixed-width text rendering of header and entries
    """
    try:
        result = grib_service.build_inventory(request.path, multi_field_support=request.multi_field_support)
        return InventoryResponse(header=result.header, entries=result.entries, lines=result.lines())
    except HTTPException:
        raise
    except Exception as e:
        raise _http_error(e)


@app.post("/record",
    response_model=RecordResponse,
    summary="Get the record of one message",
    responses={**ERROR_RESPONSES, 416: {
        "description": "Message index outside the file",
        "content": {"application/json": {"example": {"detail": "Message index 0 is outside the valid range [1, 3]"}}}
    }}
)
async def get_record(request: RecordRequest):
    """Get every readable key of message `index` (1-based) of a GRIB file."""
    try:
        record = grib_service.get_record(
            request.path,
            index=request.index,
            record_count=request.record_count,
            structured=request.structured,
            multi_field_support=request.multi_field_support
        )
        return RecordResponse(path=request.path, index=request.index, record=record_to_python(record))
    except HTTPException:
        raise
    except Exception as e:
        raise _http_error(e)


@app.post("/parameter-names",
    response_model=ParameterNamesResponse,
    summary="Get the parameter name of every message",
    responses=ERROR_RESPONSES
)
async def get_parameter_names(request: ParameterNamesRequest):
    """
    Get the value of `name_key` for every message that carries it.

    Each name is returned with the 1-based index of its message, since messages
    lacking the key are left out.
    """
    try:
        names = grib_service.get_parameter_names(
            request.path, name_key=request.name_key, multi_field_support=request.multi_field_support
        )
        return ParameterNamesResponse(
            path=request.path,
            name_key=request.name_key,
            names=[ParameterNameItem(message_index=n.message_index, value=_jsonable(n.value.to_python())) for n in names]
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _http_error(e)


@app.post("/parameter",
    response_model=ParameterResponse,
    summary="Get the records of every message carrying a parameter",
    responses=ERROR_RESPONSES
)
async def get_parameter(request: ParameterRequest):
    """
    Get the records of every message whose `name_key` equals `parameter_name` exactly.

    A parameter that matches nothing is not an error: the response has
    `found` set to false and no records.
    """
    try:
        result = grib_service.get_parameter(
            request.path,
            request.parameter_name,
            name_key=request.name_key,
            structured=request.structured,
            multi_field_support=request.multi_field_support
        )
        return ParameterResponse(
            path=request.path,
            parameter_name=result.parameter_name,
            name_key=result.name_key,
            found=result.found,
            message_indices=result.message_indices,
            records=[record_to_python(record) for record in result.records]
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _http_error(e)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
