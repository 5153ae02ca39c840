# metproxy/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .collection import collection_router
from .collection.met_service import MetCollectionClient, create_http_client
from .collection.schemas import RouteNotFound
from .config import Settings, get_settings


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the proxy application.

    When ``http_client`` is given it is used for every upstream call and
    left open on shutdown; otherwise a client is created at startup and
    closed with the application.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = http_client or create_http_client(settings)
        app.state.met_client = MetCollectionClient(client, settings.met_api_base_url)
        logger.info("Proxying Met collection API at %s", settings.met_api_base_url)
        try:
            yield
        finally:
            if http_client is None:
                await client.aclose()

    app = FastAPI(
        title="Met Collection Proxy",
        description=(
            "Proxy for the Metropolitan Museum of Art collection API that "
            "adds pagination and content filtering to artwork searches."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=settings.cors_allow_methods,
        allow_headers=["*"],
    )

    app.include_router(collection_router)

    # Unknown paths and unsupported methods both answer like a missing route.
    @app.exception_handler(StarletteHTTPException)
    async def route_not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content=RouteNotFound().model_dump())
        return await http_exception_handler(request, exc)

    return app


app = create_app()
