"""API route modules."""
from api.routes.system import router as system_router
from api.routes.images import router as images_router
from api.routes.files import router as files_router
from api.routes.ingest import router as ingest_router

__all__ = [
    "system_router",
    "images_router",
    "files_router",
    "ingest_router",
]
