"""
HTTP Response Mapping
Result values to JSON responses, plus the app-wide exception handlers
"""
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from loguru import logger
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.pagination import Page
from core.result import Error, ErrorKind, Result


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DOMAIN_RULE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ACCESS_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.LIMIT_EXCEEDED: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorKind.UNEXPECTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."

HTTP_ERROR_CODES: Dict[int, str] = {
    status.HTTP_401_UNAUTHORIZED: "unauthenticated",
    status.HTTP_403_FORBIDDEN: "access_denied",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
}


def error_body(error: Error) -> Dict[str, Any]:
    """{code, message} plus field errors or transition details when present"""
    message = error.message
    if error.kind == ErrorKind.UNEXPECTED and not settings.DEBUG:
        message = GENERIC_ERROR_MESSAGE
    body: Dict[str, Any] = {"code": error.code, "message": message}
    if error.field_errors:
        body["errors"] = [{"field": e.field, "message": e.message} for e in error.field_errors]
    if error.transition:
        body["from"], body["to"] = error.transition
    return body


def error_response(error: Error) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if error.kind == ErrorKind.UNAUTHENTICATED else None
    return JSONResponse(status_code=STATUS_BY_KIND[error.kind], content=error_body(error), headers=headers)


def serialize(value: Any) -> Any:
    """camelCase JSON for DTOs, pages and plain values"""
    if isinstance(value, Page):
        return {
            "items": [serialize(item) for item in value.items],
            "total": value.total,
            "page": value.page,
            "pageSize": value.page_size,
            "totalPages": value.total_pages,
            "hasNextPage": value.has_next_page,
            "hasPreviousPage": value.has_previous_page,
            **value.extra_fields(),
        }
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    return jsonable_encoder(value)


def to_response(result: Result, status_code: int = status.HTTP_200_OK, empty_status: int = status.HTTP_204_NO_CONTENT):
    """Ok -> status_code with the serialised value (empty_status when there is none); Err -> mapped error"""
    if not result.is_ok:
        return error_response(result.error)
    if result.value is None:
        return Response(status_code=empty_status)
    return JSONResponse(status_code=status_code, content=serialize(result.value))


# ============================================================================
# Exception handlers
# ============================================================================

async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        errors.append({"field": location or "request", "message": err.get("msg", "Invalid value")})
    fields = ", ".join(sorted({e["field"] for e in errors}))
    logger.info(f"Rejected {request.method} {request.url.path}: {fields}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "code": "validation_failed",
            "message": f"One or more fields are invalid: {fields}.",
            "errors": errors,
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework-raised errors (bad bearer token, unknown route, wrong method) in the same envelope"""
    code = HTTP_ERROR_CODES.get(exc.status_code, "http_error")
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": code, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'}: {exc.detail}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"code": "rate_limited", "message": f"Too many requests: {exc.detail}"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": "unexpected", "message": str(exc) if settings.DEBUG else GENERIC_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
