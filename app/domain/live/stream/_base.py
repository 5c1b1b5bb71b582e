"""Base service for stream operations."""

import orjson

from app.app_config import get_app_environ_config
from app.domain.auth.session_codec import session_codec
from app.domain.live.participant.participant_metadata import parse_room_metadata
from app.services.integrations.livekit_service import livekit_service

from .stream_models import ConnectionDetails, StreamAccessResponse


class BaseService:
    """Base service with shared stream operation methods."""

    def __init__(self):
        self.livekit = livekit_service
        self.sessions = session_codec

    async def _get_creator_identity(self, room_name: str) -> str | None:
        """Look up the room and return the creator recorded in its metadata.

        Raises:
            AppError: E_ROOM_NOT_FOUND if the room does not exist,
                E_CORRUPT_METADATA if its metadata cannot be decoded
        """
        room = await self.livekit.get_room(room_name)
        return parse_room_metadata(room.metadata, room_name).creator_identity

    async def _create_room(self, room_name: str, metadata: dict) -> None:
        await self.livekit.create_room(
            room_name=room_name,
            metadata=orjson.dumps(metadata).decode(),
        )

    def _access_response(
        self,
        room_name: str,
        identity: str,
        livekit_token: str,
    ) -> StreamAccessResponse:
        return StreamAccessResponse(
            room_name=room_name,
            auth_token=self.sessions.issue(room_name, identity),
            connection_details=ConnectionDetails(
                ws_url=get_app_environ_config().LIVEKIT_WS_URL or "",
                token=livekit_token,
            ),
        )
