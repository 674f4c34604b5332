"""FastAPI application: entry point for the generation gateway."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from context import AppContext, build_context
from routes import router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def create_app(context: AppContext | None = None) -> FastAPI:
    """Build the app. A prebuilt context skips config-driven wiring (tests)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logger.info("Starting generation gateway")
        if getattr(app.state, "context", None) is None:
            app.state.context = build_context()
        logger.info("Providers: %s", ", ".join(app.state.context.registry.ids()) or "none")
        logger.info("Community workflows API: %s", app.state.context.workflows.base_url)
        logger.info("Listening on http://localhost:%d", settings.port)
        yield
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Banana Gateway",
        description="Uniform access to generation providers and community workflows",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port, reload=True)
