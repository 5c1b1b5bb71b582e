"""Stream lifecycle operations: create, join and stop."""

from loguru import logger

from app.domain.live.stage.stage_state_machine import StageAction, StageStateMachine
from app.domain.utils.idgen import new_room_name
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._base import BaseService
from .stream_models import CreateStreamParams, JoinStreamParams, StreamAccessResponse


class StreamOperations(BaseService):
    """Room lifecycle for browser-published streams."""

    async def create_stream(self, params: CreateStreamParams) -> StreamAccessResponse:
        """Create a room and hand its creator a publish-capable token.

        The LiveKit token is minted before the room is created, so a
        failed room creation leaves nothing behind.
        """
        room_name = params.room_name or new_room_name()
        identity = params.creator_identity

        token = self.livekit.create_access_token(
            identity=identity,
            room=room_name,
            can_publish=True,
            can_subscribe=True,
        )

        await self._create_room(room_name, params.metadata)

        logger.info(f"Stream created: room={room_name}, creator={identity}")
        return self._access_response(room_name, identity, token)

    async def join_stream(self, params: JoinStreamParams) -> StreamAccessResponse:
        """Issue a viewer token for a participant that is not yet in the room.

        Raises:
            AppError: E_PARTICIPANT_EXISTS if the identity is already connected
        """
        try:
            await self.livekit.get_participant(room=params.room_name, identity=params.identity)
        except AppError as e:
            if e.errcode != AppErrorCode.E_PARTICIPANT_NOT_FOUND.value:
                raise
        else:
            raise AppError(
                errcode=AppErrorCode.E_PARTICIPANT_EXISTS,
                errmesg="Participant already exists",
                status_code=HttpStatusCode.CONFLICT,
            )

        token = self.livekit.create_access_token(
            identity=params.identity,
            room=params.room_name,
            can_publish=False,
            can_subscribe=True,
            can_publish_data=True,
        )

        logger.info(f"Viewer joined: room={params.room_name}, identity={params.identity}")
        return self._access_response(params.room_name, params.identity, token)

    async def stop_stream(self, room_name: str, actor: str) -> None:
        """Delete the room. Only the creator may stop a stream."""
        creator_identity = await self._get_creator_identity(room_name)
        StageStateMachine.authorize(StageAction.STOP_STREAM, actor, creator_identity)

        await self.livekit.delete_room(room_name)
        logger.info(f"Stream stopped: room={room_name}, by={actor}")
