"""
FastAPI application for the TMDB Browser API.

REST surface over the browser: catalogs, details, search (proxied to TMDB)
and the local favorites / watchlist lists.
"""

import time

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import get_config, get_state
from api.exceptions import (
    APIError,
    api_error_handler,
    generic_exception_handler,
    storage_error_handler,
    tmdb_error_handler,
)
from api.logging_config import logger, generate_request_id, set_request_id
from api.routers import lists, movies, search, tv
from tmdb_browser.exceptions import StorageError, TMDBError
from tmdb_browser.state import AppState

app = FastAPI(
    title="TMDB Browser API",
    description="Browse movies and TV series, manage favorites and watchlists",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(TMDBError, tmdb_error_handler)
app.add_exception_handler(StorageError, storage_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().allowed_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Log all HTTP requests with timing and response status."""
    request_id = generate_request_id()
    set_request_id(request_id)

    skip_paths = {"/health", "/", "/api/docs", "/api/redoc", "/api/openapi.json"}
    if request.url.path in skip_paths:
        return await call_next(request)

    start_time = time.time()
    client_ip = request.client.host if request.client else "unknown"
    logger.info(f"Request started: {request.method} {request.url.path} from {client_ip}")

    try:
        response = await call_next(request)
    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        logger.error(
            f"Request failed: {request.method} {request.url.path} "
            f"duration={duration_ms:.2f}ms error={e}"
        )
        raise

    duration_ms = (time.time() - start_time) * 1000
    log_msg = (
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration_ms:.2f}ms"
    )
    if response.status_code >= 500:
        logger.error(log_msg)
    elif response.status_code >= 400:
        logger.warning(log_msg)
    else:
        logger.info(log_msg)

    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(movies.router, prefix="/api/v1", tags=["Movies"])
app.include_router(tv.router, prefix="/api/v1", tags=["TV"])
app.include_router(search.router, prefix="/api/v1", tags=["Search"])
app.include_router(lists.router, prefix="/api/v1", tags=["Lists"])


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint points to the docs."""
    return {
        "message": "TMDB Browser API",
        "docs": "/api/docs",
        "redoc": "/api/redoc",
    }


@app.get("/health", include_in_schema=False)
def health(state: AppState = Depends(get_state)):
    """Health check with data source and list sizes."""
    counts = {}
    storage_ok = True
    for list_type, service in state.lists.items():
        try:
            counts[list_type.key] = service.count(raise_errors=True)
        except StorageError:
            counts[list_type.key] = None
            storage_ok = False
    return {
        "status": "ok" if storage_ok else "degraded",
        "data_source": type(state.source).__name__,
        "storage": "ok" if storage_ok else "unavailable",
        "lists": counts,
    }


def run() -> None:
    """Run the API with uvicorn using API_HOST / API_PORT / API_DEBUG."""
    config = get_config()
    uvicorn.run("api.main:app", host=config.api_host, port=config.api_port, reload=config.api_debug)


if __name__ == "__main__":
    run()
