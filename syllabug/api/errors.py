"""Error envelope for API responses: ``{"error": ..., "hint": ...}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """An error surfaced verbatim to the caller."""

    def __init__(self, status_code: int, error: str, hint: str | None = None) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.hint = hint

    def to_dict(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.hint:
            body["hint"] = self.hint
        return body


async def _api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.error)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Something went wrong"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, _api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
