import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dreamers.api.routes import characters, health, sessions, story
from dreamers.context import AppContext, build_context
from dreamers.core.config import Settings, get_settings
from dreamers.core.errors import DreamersError
from dreamers.core.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    settings = settings or (context.settings if context else get_settings())
    setup_logging(settings)
    # Tables are created here when the context is built (dev setup, no migrations)
    context = context or build_context(settings)

    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "x-api-key", "anthropic-version"],
    )

    @app.exception_handler(DreamersError)
    async def dreamers_error_handler(request: Request, exc: DreamersError):
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _describe(exc)})

    app.include_router(health.router)
    app.include_router(story.router, prefix=settings.API_PREFIX)
    app.include_router(sessions.router, prefix=settings.API_PREFIX)
    app.include_router(characters.router, prefix=settings.API_PREFIX)

    return app


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


app = create_app()


def run() -> None:
    import uvicorn

    settings = app.state.context.settings
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
