"""Stream domain service."""

from app.domain.live.stage.stage_state_machine import StageTransition

from ._ingress import IngressOperations
from ._stage import StageOperations
from ._streams import StreamOperations
from .stream_models import (
    CreateIngressParams,
    CreateStreamParams,
    IngressResponse,
    JoinStreamParams,
    StreamAccessResponse,
)


class StreamService:
    """Entry point for every stream and stage operation."""

    def __init__(self):
        self._streams = StreamOperations()
        self._ingress = IngressOperations()
        self._stage = StageOperations()

    # ==================== STREAMS ====================

    async def create_ingress(self, params: CreateIngressParams) -> IngressResponse:
        return await self._ingress.create_ingress(params)

    async def create_stream(self, params: CreateStreamParams) -> StreamAccessResponse:
        return await self._streams.create_stream(params)

    async def join_stream(self, params: JoinStreamParams) -> StreamAccessResponse:
        """Raises AppError(E_PARTICIPANT_EXISTS) if the identity is already in the room."""
        return await self._streams.join_stream(params)

    async def stop_stream(self, room_name: str, actor: str) -> None:
        """Raises AppError(E_FORBIDDEN) unless the actor created the room."""
        await self._streams.stop_stream(room_name=room_name, actor=actor)

    # ==================== STAGE ====================

    async def raise_hand(self, room_name: str, actor: str) -> StageTransition:
        return await self._stage.raise_hand(room_name=room_name, actor=actor)

    async def invite_to_stage(self, room_name: str, actor: str, identity: str) -> StageTransition:
        return await self._stage.invite_to_stage(room_name=room_name, actor=actor, identity=identity)

    async def remove_from_stage(
        self,
        room_name: str,
        actor: str,
        identity: str | None = None,
    ) -> StageTransition:
        return await self._stage.remove_from_stage(
            room_name=room_name, actor=actor, identity=identity
        )
