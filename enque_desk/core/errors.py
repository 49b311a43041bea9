from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)

# Upstream statuses that are meaningful to the caller as-is; everything else is a bad gateway.
PASSTHROUGH_STATUSES = frozenset({400, 401, 403, 404, 409, 422})
# Submitted values (passwords included) are never echoed back.
_HIDDEN_ISSUE_KEYS = frozenset({"ctx", "input", "url"})


class AppError(Exception):
    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UpstreamError(AppError):
    """Raised when the Enque REST API rejects a call or cannot be reached."""

    def __init__(
        self,
        upstream_status: int | None,
        message: str,
        *,
        path: str,
        code: str = "UPSTREAM_ERROR",
    ) -> None:
        if upstream_status in PASSTHROUGH_STATUSES:
            status_code = upstream_status
        else:
            status_code = status.HTTP_502_BAD_GATEWAY
        self.upstream_status = upstream_status
        super().__init__(
            status_code=status_code,
            code=code,
            message=message,
            details={"upstream_status": upstream_status, "path": path},
        )


def error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            }
        },
    )


def flatten_field_errors(issues: list[dict[str, Any]]) -> dict[str, list[str]]:
    """Group validation messages by form field; model-level errors go under ``_form``."""
    field_errors: dict[str, list[str]] = {}
    for issue in issues:
        location = [part for part in issue.get("loc", ()) if part not in ("body", "query", "path")]
        field = str(location[0]) if location else "_form"
        message = str(issue.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message.removeprefix("Value error, ")
        field_errors.setdefault(field, []).append(message)
    return field_errors


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    issues = exc.errors()
    return error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        code="VALIDATION_ERROR",
        message="Request validation failed.",
        details={
            "issues": [
                {key: value for key, value in issue.items() if key not in _HIDDEN_ISSUE_KEYS}
                for issue in issues
            ],
            "field_errors": flatten_field_errors(issues),
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code="INTERNAL_SERVER_ERROR",
        message="Unexpected server error.",
        details={"reason": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
