#!/usr/bin/env python3
"""
FastAPI server for the inventory catalog.

Provides item registration, CRUD, photo upload/download and search over
the JSON inventory kept in the cache directory.
"""
import logging
from contextlib import asynccontextmanager
from html import escape
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from starlette.concurrency import run_in_threadpool

from . import __version__
from .config import Settings, load_settings
from .errors import InventoryError
from .log import configure_logging
from .models import ItemUpdate
from .photos import PhotoUpload
from .search import SearchResult, SearchStatus
from .store import InventoryStore

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / 'templates'

router = APIRouter()


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store


def to_upload(photo: Optional[UploadFile]) -> Optional[PhotoUpload]:
    """Browsers send an empty file part when no file was chosen."""
    if photo is None or not photo.filename:
        return None
    return PhotoUpload(filename=photo.filename, stream=photo.file)


def render_search_results(result: SearchResult) -> str:
    if result.status is SearchStatus.NO_QUERY:
        return "No query provided"
    if result.status is SearchStatus.NO_MATCHES:
        return "Item not found"

    html = "<h1>Search Results</h1>"
    for item in result.items:
        html += f"<p><b>{escape(item.name)}</b> - {escape(item.description)}</p>"
        if item.photo_url:
            html += f'<img src="{escape(item.photo_url)}" width="150"><br>'
    return html


async def read_search_query(request: Request) -> Optional[str]:
    """Accept the query as a JSON body or as a submitted form field."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            return None
        query = body.get("query") if isinstance(body, dict) else None
    else:
        form = await request.form()
        query = form.get("query")
    return query if isinstance(query, str) else None


async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@router.get("/RegisterForm.html", include_in_schema=False)
async def register_form() -> FileResponse:
    return FileResponse(TEMPLATES_DIR / "RegisterForm.html", media_type="text/html")


@router.get("/SearchForm.html", include_in_schema=False)
async def search_form() -> FileResponse:
    return FileResponse(TEMPLATES_DIR / "SearchForm.html", media_type="text/html")


@router.post("/register", status_code=201, tags=["Inventory"])
def register_item(
    name: Optional[str] = Form(None),
    inventory_name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    store: InventoryStore = Depends(get_store),
) -> dict:
    """Register a new item (multipart form, photo optional)."""
    item = store.create(name or inventory_name, description, to_upload(photo))
    return item.to_record()


@router.get("/inventory", tags=["Inventory"])
def list_items(store: InventoryStore = Depends(get_store)) -> list:
    """List all items in the order they were registered."""
    return [item.to_record() for item in store.list()]


@router.get("/inventory/{item_id}", tags=["Inventory"])
def get_item(item_id: str, store: InventoryStore = Depends(get_store)) -> dict:
    return store.get(item_id).to_record()


@router.put("/inventory/{item_id}", tags=["Inventory"])
def update_item(item_id: str, changes: ItemUpdate, store: InventoryStore = Depends(get_store)) -> dict:
    """Update name and/or description. Fields left out stay unchanged."""
    item = store.update(item_id, name=changes.name, description=changes.description)
    return item.to_record()


@router.delete("/inventory/{item_id}", tags=["Inventory"])
def delete_item(item_id: str, store: InventoryStore = Depends(get_store)) -> dict:
    """Delete an item together with its photo."""
    item = store.delete(item_id)
    return {"message": "Deleted", "id": item.id}


@router.get("/inventory/{item_id}/photo", tags=["Inventory"])
def get_photo(item_id: str, store: InventoryStore = Depends(get_store)) -> FileResponse:
    return FileResponse(store.photo_path(item_id))


@router.put("/inventory/{item_id}/photo", tags=["Inventory"])
def replace_photo(
    item_id: str,
    photo: Optional[UploadFile] = File(None),
    store: InventoryStore = Depends(get_store),
) -> dict:
    """Replace the photo of an item; the old photo file is deleted."""
    item = store.replace_photo(item_id, to_upload(photo))
    return item.to_record()


@router.post("/search", response_class=HTMLResponse, tags=["Search"])
async def search_items(request: Request, store: InventoryStore = Depends(get_store)) -> HTMLResponse:
    """Search names and descriptions; results are rendered as HTML."""
    query = await read_search_query(request)
    result = await run_in_threadpool(store.search, query)
    return HTMLResponse(render_search_results(result))


@router.get("/health")
def health(store: InventoryStore = Depends(get_store)) -> dict:
    """Health check endpoint."""
    return {
        "status": "ok",
        "item_count": len(store.list()),
        "cache_dir": str(store.cache_dir),
    }


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API application for the given settings."""
    if settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        app.state.store = InventoryStore(settings.cache_dir, reset_on_corrupt=settings.reset_on_corrupt)
        logger.info("Serving inventory from %s", app.state.store.document_path)
        yield

    app = FastAPI(
        title="Inventory API",
        version=__version__,
        description="Inventory management with photo uploads",
        lifespan=lifespan,
    )

    # Enable CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
