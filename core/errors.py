# backend/core/errors.py
from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import (
    http_exception_handler,
    request_validation_exception_handler,
)
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """
    Error surfaced to the HTTP caller as {"error": ..., "details": ...}.

    4xx for client errors (missing file, bad upload, unknown id),
    500 for storage faults.
    """

    def __init__(self, status_code: int, error: str, details: Optional[str] = None):
        super().__init__(error if details is None else f"{error}: {details}")
        self.status_code = status_code
        self.error = error
        self.details = details


def client_error(error: str, details: Optional[str] = None, status_code: int = 400) -> GatewayError:
    logger.info("client error %s: %s%s", status_code, error, f" ({details})" if details else "")
    return GatewayError(status_code=status_code, error=error, details=details)


def dependency_error(error: str, exc: BaseException) -> GatewayError:
    """Log a storage fault and wrap it as a 500 echoing the fault message."""
    logger.error("%s: %s", error, exc, exc_info=exc)
    return GatewayError(status_code=500, error=error, details=str(exc))


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    body = {"error": exc.error}
    if exc.details is not None:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


def _upload_label(request: Request, labels: Dict[str, str]) -> Optional[str]:
    # scope["route"] is set once routing matched; body parsing happens after that
    if request.method != "POST":
        return None
    route = request.scope.get("route")
    return labels.get(getattr(route, "path", None) or request.url.path)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', '')}")
    return "; ".join(parts)


def install_error_handlers(app: FastAPI, upload_labels: Optional[Dict[str, str]] = None) -> None:
    """
    upload_labels maps an upload route path to the error label used when its
    multipart body cannot be parsed or does not carry a file part,
    e.g. {"/api/audio": "Audio upload error"}. Those cases answer 400;
    every other route keeps FastAPI's default responses.
    """
    labels = dict(upload_labels or {})

    async def validation_error_handler(request: Request, exc: RequestValidationError):
        label = _upload_label(request, labels)
        if label is None:
            return await request_validation_exception_handler(request, exc)
        return await gateway_error_handler(request, client_error(label, _format_validation_errors(exc)))

    async def body_parse_error_handler(request: Request, exc: StarletteHTTPException):
        label = _upload_label(request, labels) if exc.status_code == 400 else None
        if label is None:
            return await http_exception_handler(request, exc)
        return await gateway_error_handler(request, client_error(label, str(exc.detail)))

    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, body_parse_error_handler)
