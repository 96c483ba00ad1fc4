"""FastAPI application factory for the XAI mask API."""
from __future__ import annotations

import json
import logging
import os
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware

from logging_config import configure_logging

# Patchable import for testing
from db.session import ensure_schema

configure_logging()
logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = ["http://localhost:5173"]


def parse_cors_origins() -> List[str]:
    """Parse CORS_ORIGINS from env (JSON array) or fall back to the Vite dev server."""
    origins_json = os.getenv("CORS_ORIGINS")
    if origins_json:
        try:
            origins = json.loads(origins_json)
            if isinstance(origins, list):
                return [str(origin) for origin in origins]
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed CORS_ORIGINS value: %s", origins_json)
    return list(DEFAULT_CORS_ORIGINS)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="XAI Mask API",
        description="Browse classified frames and their explainability masks, ingested from disk",
        version="0.1.0",
    )

    try:
        ensure_schema()
    except Exception:
        logger.exception("Database bootstrap failed")
        raise

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    from api.routes import (
        system_router,
        images_router,
        files_router,
        ingest_router,
    )

    app.include_router(system_router)
    app.include_router(ingest_router)
    app.include_router(images_router)
    app.include_router(files_router)

    return app


def main():
    """Run the API server."""
    import uvicorn

    app = create_app()
    uvicorn.run(
        app,
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "3000")),
    )


if __name__ == "__main__":
    main()
