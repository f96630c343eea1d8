"""
HTTP server for Site Catalog.

Provides:
- GET /api/websites - List catalog entries, newest first
- POST /api/websites - Capture and add a website
- GET /api/websites/{id} - Fetch one entry
- DELETE /api/websites/{id} - Remove an entry
- PATCH /api/websites/{id}/tags - Replace an entry's tags
- POST /api/websites/{id}/rescan - Capture an entry again
- GET /screenshots/{filename} - Serve a stored screenshot
"""

from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from pydantic import BaseModel

from . import __version__
from .api import (
    add_website,
    delete_website,
    rescan_website,
    resolve_screenshot_file,
    update_tags,
)
from .capture.errors import (
    CaptureError,
    CaptureTimeoutError,
    DuplicateWebsiteError,
    InvalidURLError,
    WebsiteNotFoundError,
)
from .capture.storage import PUBLIC_PREFIX
from .config import CaptureConfig
from .store import WebsiteStore


class AddWebsiteRequest(BaseModel):
    """Request to add a website to the catalog."""

    url: Optional[str] = None


class UpdateTagsRequest(BaseModel):
    """Request to replace the tags of an entry."""

    tags: Optional[str] = None


def create_app(
    config: Optional[CaptureConfig] = None,
    store: Optional[WebsiteStore] = None,
    launcher=None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Capture settings (defaults to CaptureConfig.from_env())
        store: Record store (defaults to one at config.database_path)
        launcher: Browser launcher passed through to the capture pipeline
    """
    config = config or CaptureConfig.from_env()
    store = store or WebsiteStore(config.database_path)

    web_app = FastAPI(
        title="Site Catalog API",
        description="Capture and catalog websites with screenshots and metadata",
        version=__version__,
    )
    web_app.state.store = store
    web_app.state.config = config

    @web_app.get("/health")
    async def health():
        return {
            "status": "ok",
            "service": "site-catalog",
            "version": __version__,
        }

    @web_app.get("/api/websites")
    def list_websites():
        try:
            return [w.to_dict() for w in store.list_all()]
        except Exception as e:
            print(f"[API] Error fetching websites: {e}", flush=True)
            raise HTTPException(status_code=500, detail="Failed to fetch websites")

    @web_app.post("/api/websites", status_code=201)
    async def create_website(request: AddWebsiteRequest):
        try:
            website = await add_website(store, request.url, config, launcher=launcher)
            return website.to_dict()

        except InvalidURLError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except DuplicateWebsiteError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except CaptureTimeoutError as e:
            raise HTTPException(status_code=408, detail=str(e))
        except CaptureError as e:
            print(f"[API] Error adding website: {e}", flush=True)
            raise HTTPException(status_code=500, detail=f"Failed to add website: {e}")
        except Exception as e:
            print(f"[API] Unexpected error adding website: {e}", flush=True)
            raise HTTPException(status_code=500, detail="Failed to add website")

    @web_app.get("/api/websites/{website_id}")
    def get_website(website_id: int):
        website = store.get(website_id)
        if website is None:
            raise HTTPException(status_code=404, detail="Website not found")
        return website.to_dict()

    @web_app.delete("/api/websites/{website_id}")
    def remove_website(website_id: int):
        try:
            delete_website(store, website_id, config)
        except WebsiteNotFoundError:
            raise HTTPException(status_code=404, detail="Website not found")
        return {"success": True}

    @web_app.patch("/api/websites/{website_id}/tags")
    def set_tags(website_id: int, request: UpdateTagsRequest):
        try:
            return update_tags(store, website_id, request.tags).to_dict()
        except WebsiteNotFoundError:
            raise HTTPException(status_code=404, detail="Website not found")

    @web_app.post("/api/websites/{website_id}/rescan")
    async def rescan(website_id: int):
        try:
            website = await rescan_website(store, website_id, config, launcher=launcher)
            return website.to_dict()

        except WebsiteNotFoundError:
            raise HTTPException(status_code=404, detail="Website not found")
        except CaptureTimeoutError as e:
            raise HTTPException(status_code=408, detail=str(e))
        except CaptureError as e:
            print(f"[API] Error rescanning website: {e}", flush=True)
            raise HTTPException(status_code=500, detail=f"Failed to rescan website: {e}")
        except Exception as e:
            print(f"[API] Unexpected error rescanning website: {e}", flush=True)
            raise HTTPException(status_code=500, detail="Failed to rescan website")

    @web_app.get(PUBLIC_PREFIX + "{filename}")
    def screenshot(filename: str):
        path = resolve_screenshot_file(config, PUBLIC_PREFIX + filename)
        if path is None or not path.is_file():
            raise HTTPException(status_code=404, detail="Screenshot not found")
        return FileResponse(path=str(path), media_type="image/jpeg")

    return web_app
