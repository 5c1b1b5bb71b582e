import time
import traceback
import uuid
from contextlib import asynccontextmanager
from os import environ

import logfire
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from granian import Granian
from livekit.api.twirp_client import TwirpError
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.live.errors import app_error_handler, twirp_error_handler
from app.app_config import ensure_required_config, get_app_environ_config
from app.services.integrations.livekit_service import livekit_service
from app.shared.api import health
from app.shared.api.utils import (
    api_failure,
    init_logger,
    load_routes,
    make_response,
    validation_exception_handler,
)
from app.utils.app_errors import AppError, AppErrorCode

API_PREFIX = "/api"


class HTTPLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore
        start_time = time.time()
        request_id = str(uuid.uuid4())[:8]

        logger.info(f"[{request_id}] {request.method} {request.url.path}")

        try:
            response = await call_next(request)

            process_time = (time.time() - start_time) * 1000
            logger.info(
                f"[{request_id}] {request.method} {request.url.path} - "
                f"Status: {response.status_code} - "
                f"Duration: {process_time:.2f}ms"
            )

            return response

        except Exception as exc:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                f"[{request_id}] Unhandled exception in {request.method} {request.url.path} - "
                f"Duration: {process_time:.2f}ms - "
                f"Error: {type(exc).__name__}: {exc}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            failure = api_failure(
                errcode=AppErrorCode.E_INTERNAL_ERROR.value,
                error=f"Something went wrong! (request_id: {request_id})",
            )
            return make_response(failure, status_code=500)


@asynccontextmanager
async def lifespan(server: FastAPI):
    cfg = get_app_environ_config()
    init_logger(debug=cfg.DEBUG)
    ensure_required_config()

    logger.info("Application startup...")

    if cfg.LOGFIRE_ENABLE:
        logger.info("Logfire initializing")

        logfire.configure(
            token=cfg.LOGFIRE_TOKEN,
            service_name="livestage",
            service_version=environ.get("BUILD_COMMIT") or "dev",
        )

        logger.info("Logfire instrument fastapi")
        logfire.instrument_fastapi(server, capture_headers=False)

        logger.info("Logfire instrument pydantic")
        logfire.instrument_pydantic()

    yield

    logger.info("Application shutdown...")

    await livekit_service.aclose()


def create_app() -> FastAPI:
    cfg = get_app_environ_config()

    server = FastAPI(
        version="1.0",
        title="Livestage API",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    server.add_middleware(HTTPLoggingMiddleware)

    server.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=cfg.API_CORS_ORIGINS,
        allow_credentials="*" not in cfg.API_CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    server.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore
    server.add_exception_handler(AppError, app_error_handler)  # type: ignore
    server.add_exception_handler(TwirpError, twirp_error_handler)  # type: ignore

    server.include_router(health.router)
    load_routes(server, API_PREFIX)

    return server


app = create_app()


def build_granian_kwargs():
    cfg = get_app_environ_config()
    return {
        "interface": "asgi",
        "address": cfg.API_HOST,
        "port": cfg.API_PORT,
        "workers": cfg.API_WORKERS,
        "reload": cfg.DEBUG,
    }


if __name__ == "__main__":
    init_logger(debug=get_app_environ_config().DEBUG)
    ensure_required_config()
    Granian("app.main:app", **build_granian_kwargs()).serve()
