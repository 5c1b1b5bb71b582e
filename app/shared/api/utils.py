import inspect
import sys
from importlib import import_module
from os import environ
from pathlib import Path
from typing import Literal
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from loguru import logger
from pydantic import BaseModel, Field

from app.utils.app_errors import AppErrorCode, HttpStatusCode


class ApiFailure(BaseModel):
    success: Literal[False] = False
    errcode: str = AppErrorCode.E_INTERNAL_ERROR.value
    erresid: str = Field(default_factory=lambda: uuid4().hex[:10])
    error: str = "We are sorry, an error occurred."


def api_failure(errcode: str, error: str) -> ApiFailure:
    """Build a failure body and log it with the caller's location."""
    failure = ApiFailure(errcode=errcode, error=error)

    caller_frame = inspect.stack()[1]
    module = inspect.getmodule(caller_frame.frame)
    module_name = module.__name__ if module else caller_frame.filename
    caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

    logger.warning(f"{failure.errcode} {failure.erresid}\n{failure.error} caller={caller_info}")

    return failure


def make_response(results: BaseModel, *, status_code: int) -> ORJSONResponse:
    return ORJSONResponse(status_code=int(status_code), content=results.model_dump())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()

    logger.warning(
        "Validation error: path={} method={} errors={}",
        request.url.path, request.method, errors
    )

    failure = api_failure(AppErrorCode.E_INVALID_PARAMS.value, error=str(errors))
    return make_response(failure, status_code=HttpStatusCode.UNPROCESSABLE_ENTITY)


def get_worker_info():
    project_root = Path(__file__).parent.parent.parent.parent
    worker_name = environ.get("WORKER_NAME", project_root.name)

    parts = environ.get("BUILD_COMMIT", "").split("-")
    commit_id = parts[1] if len(parts) > 1 else "dev"

    return worker_name, commit_id, uuid4().hex[:8]


def init_logger(debug: bool = False):
    logger.remove()

    worker_name, commit_id, _ = get_worker_info()

    if debug:
        logger_level = "DEBUG"
        logger_format = (
            f"<yellow>{worker_name}:{commit_id}</yellow> | "
            "<green>{time:MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )
    else:
        logger_level = "INFO"
        logger_format = (
            f"{worker_name}:{commit_id} | "
            "{time:MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{name}:{function}:{line} | "
            "{message}"
        )
    logger.add(sys.stderr, level=logger_level, format=logger_format)


def load_routes(app: FastAPI, prefix: str, folder: Path | None = None):
    """Include the ``router`` of every module under ``app/api/live/routers``."""
    if folder is None:
        folder = Path(__file__).parent.parent.parent / "api" / "live" / "routers"

    app_root = Path(__file__).parent.parent.parent.parent
    for x in sorted(folder.rglob("*.py")):
        if x.name == "__init__.py":
            continue

        name = ".".join(x.relative_to(app_root).with_suffix("").parts)
        module = import_module(name)
        if hasattr(module, "router"):
            app.include_router(module.router, prefix=prefix)
            logger.info("Added routes in {}", name)

            for route in module.router.routes:
                if hasattr(route, "methods"):
                    methods = ",".join(sorted(route.methods))
                    logger.debug("Loaded route: {:<12} {}{}", methods, prefix, route.path)
