"""
Response envelope helpers for the REST API.

Every endpoint answers {"success": true, "data": ...} or
{"success": false, "error": "..."}. Service failures are turned into
APIError, rendered by the handlers registered in main.create_app().
"""
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from backend.app.logging_config import get_logger
from backend.app.schemas.common import ErrorKind, ServiceResponse

logger = get_logger(__name__)

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
    }


class APIError(Exception):
    """HTTP error rendered in the standard envelope."""

    def __init__(
        self,
        status_code: int,
        message: str,
        headers: Optional[Dict[str, str]] = None,
        extra: Optional[Dict[str, Any]] = None,
        ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.headers = headers
        self.extra = extra or {}


def success(data: Any) -> Dict[str, Any]:
    """Wrap a payload in the success envelope (models serialized in JSON mode)."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    elif isinstance(data, list):
        data = [item.model_dump(mode="json") if isinstance(item, BaseModel) else item for item in data]
    return {"success": True, "data": data}


def unwrap(result: ServiceResponse) -> Any:
    """
    Return the data of a successful ServiceResponse.

    Raises:
        APIError: With the status mapped from the failure kind
    """
    if result.success:
        return result.data
    status_code = STATUS_BY_KIND.get(result.kind, 500)
    raise APIError(status_code, result.error or "Internal server error")


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    body = {"success": False, "error": exc.message, **exc.extra}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests (bad JSON, non-integer path ids) use the envelope with status 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = first.get("msg", "Invalid request")
    if loc:
        message = f"{'.'.join(loc)}: {message}"
    logger.warning("Request rejected", path=request.url.path, error=message)
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"success": False, "error": message}),
        )
