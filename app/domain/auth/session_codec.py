"""Stateless session credentials.

A session credential is an HS256-signed JWT whose claims are exactly the
room name and participant identity. It is issued alongside every LiveKit
token so that follow-up stage requests can be authenticated without any
server-side session storage.
"""

import jwt
from loguru import logger
from pydantic import BaseModel, ValidationError

from app.app_config import get_app_environ_config
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

ALGORITHM = "HS256"


class SessionClaims(BaseModel):
    room_name: str
    identity: str


class SessionCodec:
    def __init__(self, secret: str | None = None) -> None:
        self._secret = secret

    @property
    def secret(self) -> str:
        secret = self._secret or get_app_environ_config().session_secret
        if not secret:
            raise AppError(
                errcode=AppErrorCode.E_INTERNAL_ERROR,
                errmesg="Session secret is not configured",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )
        return secret

    def issue(self, room_name: str, identity: str) -> str:
        claims = SessionClaims(room_name=room_name, identity=identity)
        return jwt.encode(claims.model_dump(), self.secret, algorithm=ALGORITHM)

    def verify(self, token: str | None) -> SessionClaims:
        """Decode a session credential.

        Raises:
            AppError: E_UNAUTHORIZED if the token is absent, malformed, or
                carries an invalid signature.
        """
        if not token:
            raise AppError(
                errcode=AppErrorCode.E_UNAUTHORIZED,
                errmesg="No authorization header found",
                status_code=HttpStatusCode.UNAUTHORIZED,
            )

        try:
            payload = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
            return SessionClaims.model_validate(payload)
        except (jwt.InvalidTokenError, ValidationError) as e:
            logger.debug("Rejected session credential: {}", type(e).__name__)
            raise AppError(
                errcode=AppErrorCode.E_UNAUTHORIZED,
                errmesg="Invalid token",
                status_code=HttpStatusCode.UNAUTHORIZED,
            ) from e


session_codec = SessionCodec()


__all__ = ["SessionClaims", "SessionCodec", "session_codec"]
