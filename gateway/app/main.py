from __future__ import annotations

from collections.abc import Awaitable, Callable

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from gateway.app.dispatcher import RequestDispatcher
from gateway.app.views import register_routes
from shared.common.completion import CompletionBackend, build_completion_client
from shared.common.config import Settings
from shared.common.logging import configure_logging


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept",
}


def create_app(settings: Settings | None = None, *, backend: CompletionBackend | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logger = configure_logging(settings.app_name)
    client = build_completion_client(settings, logger=logger, backend=backend)
    if client is None:
        logger.error("OPENAI_API_KEY is not set in environment variables")

    app = FastAPI(title="Playful API")
    app.state.settings = settings
    app.state.logger = logger
    app.state.dispatcher = RequestDispatcher(settings, client, logger)

    @app.middleware("http")
    async def cors(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        if request.method != "GET":
            response: Response = JSONResponse({"error": "Method not allowed"}, status_code=405)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    register_routes(app)
    return app


app = create_app()


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
