# schooldesk/core/responses.py - Uniform JSON envelope for every API response
from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def _encode(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_encode(item) for item in data]
    return jsonable_encoder(data)


def success_response(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
    pagination: Optional[dict] = None,
) -> JSONResponse:
    """
    Build a success envelope: {"success": true, "data": ..., "message"?, "pagination"?}

    Args:
        data: Payload, pydantic models are serialized in JSON mode
        message: Optional human-readable message
        status_code: HTTP status, 200 unless a resource was created
        pagination: Page metadata from Page.meta()
    """
    body = {"success": True, "data": _encode(data)}
    if message:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return JSONResponse(status_code=status_code, content=body)


def created_response(data: Any, message: Optional[str] = None) -> JSONResponse:
    return success_response(data, message=message, status_code=status.HTTP_201_CREATED)


def error_response(error: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    """Build a failure envelope: {"success": false, "error": "..."}"""
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})
