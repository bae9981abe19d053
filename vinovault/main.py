"""FastAPI application serving the VinoVault UI bundle."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request

from vinovault.config import Settings, settings as default_settings
from vinovault.health import HealthProbeMiddleware
from vinovault.static import serve_request

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app for one document root."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown events."""
        if not settings.entry_document_path.is_file():
            logger.warning(
                f"Entry document {settings.entry_document_path} not found; "
                "non-asset paths will return 404"
            )
        yield

    app = FastAPI(
        title="VinoVault",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings

    # Probes must be answered before routing or logging
    app.add_middleware(HealthProbeMiddleware, user_agent_token=settings.HEALTH_USER_AGENT_TOKEN)

    # SPA catch-all: every path is either a bundle file or client-side route
    @app.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def spa(request: Request, full_path: str):
        return await serve_request(request.method, request.scope["path"], settings)

    return app


app = create_app()
