from fastapi import Depends, FastAPI, Query, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from starlette.background import BackgroundTask
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Optional
import os
import httpx
from dotenv import load_dotenv
from contextlib import asynccontextmanager
from loguru import logger
from wallaura.byte_proxy import LONG_CACHE_CONTROL, open_upstream
from wallaura.errors import GalleryError, MethodNotAllowedError, TransportError
from wallaura.gallery import GalleryProxy
from wallaura.log import setup_logging
from wallaura.rate_limiter import resolve_client_key
from wallaura.settings import Settings, mask_key

if os.path.exists('.dev.env'):
    load_dotenv('.dev.env')

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Lifespan event handler - runs on startup and shutdown."""
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    if not settings.access_key:
        logger.error("No Unsplash credential configured; gallery requests will fail with NO_UNSPLASH_KEY")
    logger.info(
        f"Starting gallery proxy: key={mask_key(settings.access_key)} "
        f"cache_ttl={settings.cache_ttl}s rate_limit={settings.rate_limit_max}/{settings.rate_limit_window}s"
    )

    # Proxy state lives for the whole process
    app.state.gallery = GalleryProxy(settings)

    yield


app = FastAPI(
    title="wallaura",
    description="Server-side proxy for the Unsplash photo API",
    version="0.1.0",
    lifespan=lifespan
)


def get_gallery(request: Request) -> GalleryProxy:
    return request.app.state.gallery


def error_response(error: GalleryError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_body().model_dump(exclude_none=True),
        headers=error.headers(),
    )


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    # Routing-level 405s for verbs no route declares
    if exc.status_code == 405:
        return error_response(MethodNotAllowedError(request.method))
    return await http_exception_handler(request, exc)


@app.get("/")
def read_root():
    return {
        "message": "wallaura API",
        "docs": "/docs",
        "endpoints": {
            "gallery": "/api/unsplash?q=&per_page=&page=",
            "download": "/api/unsplash?download_id= | download_location=",
            "byte_proxy": "/proxy?url=",
        }
    }


@app.api_route("/api/unsplash", methods=ALL_METHODS)
async def unsplash_proxy(request: Request, gallery: GalleryProxy = Depends(get_gallery)):
    """
    Search, list or resolve downloads of Unsplash photos.

    Returns:
        ``{"results": [...]}`` for search/list, the download-resolution body otherwise.
        Failures are ``{"error": ..., "detail": ...}`` with a matching status.
    """
    peer = request.client.host if request.client else None
    client_key = resolve_client_key(request.headers, peer)

    try:
        payload = await gallery.handle(request.method, request.query_params, client_key)
        return JSONResponse(status_code=200, content=payload)
    except GalleryError as e:
        return error_response(e)
    except Exception:
        logger.exception("Unhandled error in gallery proxy")
        return error_response(TransportError())


@app.get("/proxy")
async def byte_proxy(
    url: Optional[str] = Query(None, description="URL to fetch"),
    gallery: GalleryProxy = Depends(get_gallery),
):
    """
    Fetch an arbitrary URL and stream it back, to get around CORS.
    """
    if not url:
        return PlainTextResponse("Missing url param", status_code=400)

    try:
        upstream = await open_upstream(url, gallery.settings.upstream_timeout, gallery.transport)
        if not upstream.is_success:
            try:
                text = await upstream.read_text()
            finally:
                await upstream.aclose()
            return PlainTextResponse(text, status_code=upstream.status_code)
    except (httpx.HTTPError, httpx.InvalidURL):
        logger.exception(f"Byte proxy failed to fetch {url}")
        return PlainTextResponse("proxy error", status_code=500)

    return StreamingResponse(
        upstream.aiter_bytes(),
        status_code=upstream.status_code,
        media_type=upstream.content_type,
        headers={"Cache-Control": LONG_CACHE_CONTROL},
        background=BackgroundTask(upstream.aclose),
    )
