"""Global exception handler mapping domain exceptions to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from confshare.exceptions import ConfShareError


def register_error_handlers(app: FastAPI) -> None:
    """Register the backstop for domain errors that escape a route."""

    @app.exception_handler(ConfShareError)
    async def handle_confshare_error(request: Request, exc: ConfShareError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})
