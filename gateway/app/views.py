from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gateway.app.facts import random_fact, structure_status
from shared.common.errors import ApiError


def register_routes(app: FastAPI) -> None:
    prefix = app.state.settings.api_prefix

    @app.exception_handler(ApiError)
    def api_error(request: Request, exc: ApiError) -> JSONResponse:
        body = exc.to_body(include_details=app.state.settings.is_development)
        return JSONResponse(body, status_code=exc.status_code)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(f"{prefix}/test")
    def structure_probe() -> dict[str, str]:
        return structure_status()

    @app.get(f"{prefix}/fact")
    def fact() -> dict[str, object]:
        return random_fact()

    @app.get(prefix + "/{path:path}")
    def catch_all(path: str, fields: str | None = None) -> dict[str, Any]:
        return app.state.dispatcher.handle(path, fields)
