"""Application error taxonomy.

Every failure raised by the domain and service layers is an ``AppError``.
The API layer converts it into a JSON failure body with the carried HTTP status.
"""

import inspect
from enum import Enum, IntEnum
from uuid import uuid4


class HttpStatusCode(IntEnum):
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502


class AppErrorCode(str, Enum):
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"

    # Session credential
    E_UNAUTHORIZED = "E_UNAUTHORIZED"
    E_FORBIDDEN = "E_FORBIDDEN"

    # Room / participant lookups
    E_ROOM_NOT_FOUND = "E_ROOM_NOT_FOUND"
    E_PARTICIPANT_NOT_FOUND = "E_PARTICIPANT_NOT_FOUND"
    E_PARTICIPANT_EXISTS = "E_PARTICIPANT_EXISTS"

    # Stored JSON that cannot be decoded
    E_CORRUPT_METADATA = "E_CORRUPT_METADATA"

    # Media service
    E_UPSTREAM_FAILURE = "E_UPSTREAM_FAILURE"
    E_LIVEKIT_CANCELED = "E_LIVEKIT_CANCELED"
    E_LIVEKIT_UNKNOWN = "E_LIVEKIT_UNKNOWN"
    E_LIVEKIT_INVALID_ARGUMENT = "E_LIVEKIT_INVALID_ARGUMENT"
    E_LIVEKIT_MALFORMED = "E_LIVEKIT_MALFORMED"
    E_LIVEKIT_DEADLINE_EXCEEDED = "E_LIVEKIT_DEADLINE_EXCEEDED"
    E_LIVEKIT_NOT_FOUND = "E_LIVEKIT_NOT_FOUND"
    E_LIVEKIT_BAD_ROUTE = "E_LIVEKIT_BAD_ROUTE"
    E_LIVEKIT_ALREADY_EXISTS = "E_LIVEKIT_ALREADY_EXISTS"
    E_LIVEKIT_PERMISSION_DENIED = "E_LIVEKIT_PERMISSION_DENIED"
    E_LIVEKIT_UNAUTHENTICATED = "E_LIVEKIT_UNAUTHENTICATED"
    E_LIVEKIT_RESOURCE_EXHAUSTED = "E_LIVEKIT_RESOURCE_EXHAUSTED"
    E_LIVEKIT_FAILED_PRECONDITION = "E_LIVEKIT_FAILED_PRECONDITION"
    E_LIVEKIT_ABORTED = "E_LIVEKIT_ABORTED"
    E_LIVEKIT_OUT_OF_RANGE = "E_LIVEKIT_OUT_OF_RANGE"
    E_LIVEKIT_UNIMPLEMENTED = "E_LIVEKIT_UNIMPLEMENTED"
    E_LIVEKIT_INTERNAL = "E_LIVEKIT_INTERNAL"
    E_LIVEKIT_UNAVAILABLE = "E_LIVEKIT_UNAVAILABLE"
    E_LIVEKIT_DATA_LOSS = "E_LIVEKIT_DATA_LOSS"

    def __str__(self) -> str:
        return self.value


class AppError(Exception):
    """Domain exception carrying an error code, message and HTTP status.

    The caller location is captured at construction so that the log line
    emitted by the exception handler points at the raise site rather than
    at the handler.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str,
        errmesg: str,
        status_code: int = HttpStatusCode.BAD_REQUEST,
    ) -> None:
        super().__init__(errmesg)
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else errcode
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]

        caller_frame = inspect.stack()[1]
        module = inspect.getmodule(caller_frame.frame)
        module_name = (
            module.__name__
            if module and getattr(module, "__name__", None)
            else caller_frame.filename
        )
        self.caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

    def __repr__(self) -> str:
        return f"AppError({self.errcode!r}, {self.errmesg!r}, status_code={self.status_code})"
