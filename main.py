"""
Main API module for Shortlink.

Responsibilities:
    - Expose the JSON endpoint that creates short links
    - Redirect short codes to their original URLs (counting visits)
    - Serve a plain-text banner at the root

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Settings are loaded once and threaded into the store and LinkService.
    - The store is opened once per app and closed on shutdown.
    - LinkService owns validation, dedupe, custom-code rules and code issuance.

Run:
    python main.py
    uvicorn main:app --port 1337
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlink.config import Settings, configure_logging, load_settings
from shortlink.errors import StorageError
from shortlink.service.link_service import LinkService
from shortlink.storage.base import BaseStore
from shortlink.storage.storage_factory import get_store

BANNER = "Link Shortener API"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class ShortenRequest(BaseModel):
    """Request payload for creating a new short link."""
    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None
    custom_code: Optional[str] = Field(default=None, alias="customCode")


def create_app(settings: Optional[Settings] = None, store: Optional[BaseStore] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        settings (Settings, optional): Configuration; read from the environment when omitted.
        store (BaseStore, optional): Pre-built store; chosen by `get_store(settings)` when omitted.

    Returns:
        FastAPI: A configured application with its own store and LinkService.
    """
    settings = settings or load_settings()
    log = configure_logging(settings.LOG_LEVEL)

    store = store or get_store(settings)
    link_service = LinkService(
        store=store,
        base_url=settings.BASE_URL,
        code_length=settings.CODE_LENGTH,
        max_code_retries=settings.MAX_CODE_RETRIES,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Link shortener service running at %s", settings.BASE_URL)
        yield
        store.close()
        log.info("Link shortener service stopped")

    app = FastAPI(
        title="Shortlink",
        description="URL shortener with custom codes and visit counting",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.link_service = link_service

    # ----------------------------------------------------------------
    # Error handlers
    # ----------------------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def not_found(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(StorageError)
    async def storage_failure(request: Request, exc: StorageError) -> PlainTextResponse:
        log.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return PlainTextResponse("Internal Server Error", status_code=500)

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.api_route("/", methods=ALL_METHODS)
    def banner() -> PlainTextResponse:
        return PlainTextResponse(BANNER)

    @app.post("/api/shorten")
    async def shorten(request: Request) -> JSONResponse:
        """
        Create a short link for a given URL.

        The body is parsed as JSON whatever its Content-Type, so
        `curl -d '{"url": ...}'` works without extra headers.

        Returns:
            JSONResponse: 200 with the link on success, 400 with `error` otherwise.
        """
        try:
            req = ShortenRequest.model_validate(json.loads(await request.body()))
        except (ValueError, ValidationError) as exc:
            # Malformed JSON, non-object body or wrongly typed fields
            log.debug("Rejected request body: %s", exc)
            return JSONResponse({"success": False, "error": "Invalid request"}, status_code=400)

        result = await run_in_threadpool(link_service.create_link, req.url, req.custom_code)
        return JSONResponse(result, status_code=200 if result["success"] else 400)

    # The code is the whole path after the leading "/", slashes included.
    @app.api_route("/{short_code:path}", methods=ALL_METHODS)
    def redirect(short_code: str) -> Response:
        """Redirect to the original URL, or 404 if the code is unknown."""
        result = link_service.resolve(short_code)
        if result["success"]:
            return RedirectResponse(url=result["url"], status_code=302)
        return PlainTextResponse(result["error"], status_code=404)

    return app


# `uvicorn main:app` and `from main import app` keep working.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
