from fastapi import Request
from fastapi.responses import JSONResponse
from livekit.api.twirp_client import TwirpError, TwirpErrorCode
from loguru import logger

from app.shared.api.utils import ApiFailure, make_response
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Custom exception handler for AppError.
    Converts AppError to ApiFailure and returns via make_response.
    """
    log_msg = f"{exc.errcode} {exc.erresid} msg={exc.errmesg} caller={exc.caller_info}"
    if exc.status_code >= HttpStatusCode.INTERNAL_SERVER_ERROR:
        logger.error(log_msg)
    else:
        logger.warning(log_msg)

    failure = ApiFailure(errcode=exc.errcode, error=exc.errmesg, erresid=exc.erresid)
    return make_response(failure, status_code=exc.status_code)


# Mapping from Twirp error codes to AppErrorCode
_TWIRP_TO_APP_ERROR_MAP = {
    TwirpErrorCode.CANCELED: AppErrorCode.E_LIVEKIT_CANCELED,
    TwirpErrorCode.UNKNOWN: AppErrorCode.E_LIVEKIT_UNKNOWN,
    TwirpErrorCode.INVALID_ARGUMENT: AppErrorCode.E_LIVEKIT_INVALID_ARGUMENT,
    TwirpErrorCode.MALFORMED: AppErrorCode.E_LIVEKIT_MALFORMED,
    TwirpErrorCode.DEADLINE_EXCEEDED: AppErrorCode.E_LIVEKIT_DEADLINE_EXCEEDED,
    TwirpErrorCode.NOT_FOUND: AppErrorCode.E_LIVEKIT_NOT_FOUND,
    TwirpErrorCode.BAD_ROUTE: AppErrorCode.E_LIVEKIT_BAD_ROUTE,
    TwirpErrorCode.ALREADY_EXISTS: AppErrorCode.E_LIVEKIT_ALREADY_EXISTS,
    TwirpErrorCode.PERMISSION_DENIED: AppErrorCode.E_LIVEKIT_PERMISSION_DENIED,
    TwirpErrorCode.UNAUTHENTICATED: AppErrorCode.E_LIVEKIT_UNAUTHENTICATED,
    TwirpErrorCode.RESOURCE_EXHAUSTED: AppErrorCode.E_LIVEKIT_RESOURCE_EXHAUSTED,
    TwirpErrorCode.FAILED_PRECONDITION: AppErrorCode.E_LIVEKIT_FAILED_PRECONDITION,
    TwirpErrorCode.ABORTED: AppErrorCode.E_LIVEKIT_ABORTED,
    TwirpErrorCode.OUT_OF_RANGE: AppErrorCode.E_LIVEKIT_OUT_OF_RANGE,
    TwirpErrorCode.UNIMPLEMENTED: AppErrorCode.E_LIVEKIT_UNIMPLEMENTED,
    TwirpErrorCode.INTERNAL: AppErrorCode.E_LIVEKIT_INTERNAL,
    TwirpErrorCode.UNAVAILABLE: AppErrorCode.E_LIVEKIT_UNAVAILABLE,
    TwirpErrorCode.DATA_LOSS: AppErrorCode.E_LIVEKIT_DATA_LOSS,
}


async def twirp_error_handler(request: Request, exc: TwirpError) -> JSONResponse:
    """
    Custom exception handler for TwirpError (LiveKit API errors).

    Upstream 5xx responses become 502; client-side errors keep their status.
    """
    app_errcode = _TWIRP_TO_APP_ERROR_MAP.get(exc.code, AppErrorCode.E_UPSTREAM_FAILURE)

    log_msg = f"TwirpError: code={exc.code} status={exc.status} msg={exc.message}"
    if exc.metadata:
        log_msg += f" metadata={exc.metadata}"

    if exc.status >= HttpStatusCode.INTERNAL_SERVER_ERROR:
        logger.error(log_msg)
        status_code = HttpStatusCode.BAD_GATEWAY
    else:
        logger.warning(log_msg)
        status_code = exc.status

    failure = ApiFailure(errcode=app_errcode.value, error=exc.message)
    return make_response(failure, status_code=status_code)
