import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from sheetrelay.clients import Clients, build_clients
from sheetrelay.config import configure_logging, get_settings
from sheetrelay.exceptions import SheetRelayError
from sheetrelay.routers.relay import router as relay_router
from sheetrelay.routes import ROUTES_BY_PATH
from sheetrelay.translator import (
    DEFAULT_ALLOW_METHODS,
    error_response,
    to_starlette,
    translate_error,
)

logger = logging.getLogger(__name__)


def _cors_methods(request: Request) -> str:
    route = ROUTES_BY_PATH.get(request.url.path)
    return route.cors_methods if route else DEFAULT_ALLOW_METHODS


# --- Exception handlers ---

async def relay_error_handler(request: Request, exc: SheetRelayError):
    return to_starlette(translate_error(exc, _cors_methods(request)))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        response = error_response(405, "Method Not Allowed", plain_text=True, allow_methods=_cors_methods(request))
    else:
        response = error_response(exc.status_code, str(exc.detail), allow_methods=_cors_methods(request))
    return to_starlette(response)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return to_starlette(translate_error(exc, _cors_methods(request)))


# --- FastAPI app ---

@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.clients is None:
        settings = get_settings()
        configure_logging(settings.log_level)
        app.state.clients = build_clients(settings)
        logger.info("Remote clients ready; uploads go to folder %s", settings.drive_upload_folder_id)
    yield


def create_app(clients: Clients | None = None) -> FastAPI:
    """Build the app. Without ``clients`` they are built from settings at startup."""
    api = FastAPI(title="Sheet Relay", version="0.1.0", lifespan=lifespan)
    api.state.clients = clients
    api.include_router(relay_router)
    api.add_exception_handler(SheetRelayError, relay_error_handler)
    api.add_exception_handler(StarletteHTTPException, http_error_handler)
    api.add_exception_handler(Exception, unhandled_error_handler)
    return api


app = create_app()


def run():
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "sheetrelay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
