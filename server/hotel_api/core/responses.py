"""
Standardized API response helpers.

Every endpoint answers with the same envelope:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "message": "...", "errors"?: [...], "error"?: "..."}

Errors are raised as ``ApiError`` (see ``core.exceptions``); handlers use
``api_success`` to build the success half.
"""

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel


def api_success(
    data: Any = None,
    message: str | None = None,
    status_code: int = 200,
    **extra_fields: Any
) -> JSONResponse:
    """
    Build a standardized success JSON response.

    Args:
        data: Payload for the 'data' key; pydantic models are dumped.
        message: Optional success message.
        status_code: HTTP status code (default 200).
        **extra_fields: Additional top-level fields to include in the response.

    Returns:
        JSONResponse with the success envelope
    """
    response: dict[str, Any] = {'success': True}

    if message:
        response['message'] = message

    if data is not None:
        if isinstance(data, BaseModel):
            data = data.model_dump()
        elif isinstance(data, list):
            data = [item.model_dump() if isinstance(item, BaseModel) else item for item in data]
        response['data'] = data

    if extra_fields:
        response.update(extra_fields)

    return JSONResponse(status_code=status_code, content=jsonable_encoder(response))
