import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from archgraph import __version__, config
from archgraph.api.routes import router
from archgraph.api.schemas import ErrorResponse
from archgraph.graph.errors import GraphSourceError
from archgraph.graph.loader import load_graph_file
from archgraph.graph.source import GraphSource

logger = logging.getLogger(__name__)


def create_app(source: Optional[GraphSource] = None, graph_file: Optional[str] = None) -> FastAPI:
    """
    Build the app around a GraphSource.

    Without an explicit source, the YAML document at graph_file (or
    ARCHGRAPH_GRAPH_FILE) is loaded on startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if source is not None:
            app.state.graph_source = source
            app.state.graph_file = None
        else:
            path = graph_file or config.GRAPH_FILE
            app.state.graph_source = load_graph_file(path)
            app.state.graph_file = path
        yield

    app = FastAPI(
        title="Architecture Graph",
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware FIRST
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Routes AFTER middleware
    app.include_router(router)

    @app.exception_handler(GraphSourceError)
    async def graph_source_error(request: Request, exc: GraphSourceError):
        logger.error("[API] Graph source failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(error="Graph source unavailable").model_dump(),
        )

    return app


def build_app() -> FastAPI:
    """Factory for `uvicorn --factory archgraph.main:build_app`."""
    config.configure_logging()
    return create_app()
