"""
Notes API: Response Envelope Builders
=======================================

What:  Builders for every JSON response the API sends.
Why:   Clients parse one success shape and one error shape across all routes.
How:   Thin wrappers around Starlette's JSONResponse; no business logic.
Who:   Route handlers, the exception handlers in main.py and the error-trap
       middleware.

Envelopes:
    success:  arbitrary JSON object, status 200 unless told otherwise
    list:     {"<item_name>": [...], "count": <int>}
    error:    {"error": {"code": ..., "message": ..., "details": {...}}}
              (details omitted when empty)
    204:      empty body; content-type still application/json

Error codes:
    BAD_REQUEST, VALIDATION_ERROR, NOT_FOUND, METHOD_NOT_ALLOWED,
    INTERNAL_SERVER_ERROR
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from starlette.responses import JSONResponse, Response

JSON_MEDIA_TYPE = "application/json"


def success(
    data: Mapping[str, Any],
    status_code: int = 200,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=dict(data), headers=headers)


def success_list(
    items: List[Any],
    item_name: str,
    count: Optional[int] = None,
    status_code: int = 200,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    data = {item_name: items, "count": count if count is not None else len(items)}
    return success(data, status_code=status_code, headers=headers)


def created(data: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    return success(data, status_code=201, headers=headers)


def no_content(headers: Optional[Mapping[str, str]] = None) -> Response:
    return Response(status_code=204, headers=headers, media_type=JSON_MEDIA_TYPE)


def error(
    message: str,
    code: str,
    status_code: int = 500,
    details: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {"code": code, "message": message}
    if details:
        body["details"] = dict(details)
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


def bad_request(
    message: str,
    details: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return error(message, code="BAD_REQUEST", status_code=400, details=details, headers=headers)


def validation_error(
    message: str,
    field: Optional[str] = None,
    value: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    details: Dict[str, Any] = {}
    if field is not None:
        details["field"] = field
    if value is not None:
        details["value"] = value
    return error(
        message, code="VALIDATION_ERROR", status_code=400, details=details, headers=headers
    )


def not_found(
    message: str,
    resource_id: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    details = {"id": resource_id} if resource_id is not None else None
    return error(message, code="NOT_FOUND", status_code=404, details=details, headers=headers)


def method_not_allowed(
    method: str,
    allowed_methods: Optional[Iterable[str]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    response_headers: Dict[str, str] = {}
    if allowed_methods is not None:
        response_headers["Allow"] = ", ".join(allowed_methods)
    response_headers.update(headers or {})
    return error(
        f"Method {method} not allowed",
        code="METHOD_NOT_ALLOWED",
        status_code=405,
        headers=response_headers,
    )


def internal_server_error(
    message: str = "Internal server error",
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return error(message, code="INTERNAL_SERVER_ERROR", status_code=500, headers=headers)


def health_check(
    service: str,
    status: str = "healthy",
    additional_info: Optional[Mapping[str, Any]] = None,
) -> JSONResponse:
    data: Dict[str, Any] = {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "service": service,
    }
    data.update(additional_info or {})
    return success(data)
