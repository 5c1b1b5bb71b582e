from typing import Annotated

from fastapi import Depends, Header
from loguru import logger

from app.domain.auth.session_codec import SessionClaims, session_codec
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


def get_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


async def get_current_session(
    authorization: str | None = Header(default=None),
) -> SessionClaims:
    # Do not log the header itself; it carries the credential.
    if not authorization:
        raise AppError(
            errcode=AppErrorCode.E_UNAUTHORIZED,
            errmesg="No authorization header found",
            status_code=HttpStatusCode.UNAUTHORIZED,
        )

    session = session_codec.verify(get_bearer_token(authorization))
    logger.debug("Authenticated session: room={} identity={}", session.room_name, session.identity)
    return session


CurrentSession = Annotated[SessionClaims, Depends(get_current_session)]
