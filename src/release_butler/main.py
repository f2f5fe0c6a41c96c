"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.router import router
from .config import Settings
from .context import AppContext
from .utils.logging import setup_logging


def create_app(context: AppContext | None = None) -> FastAPI:
    """
    Build the application.

    Without an explicit context, settings are read from the environment at
    startup and the real GitHub client is used.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        if getattr(app.state, "context", None) is None:
            settings = Settings()
            setup_logging(settings.log_level)
            app.state.context = AppContext.from_settings(settings)
        yield

    app = FastAPI(
        title="Release Butler",
        description="GitHub App that turns labeled issues into package releases",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.context = context

    # Include routes
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "release_butler.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
