from fastapi import APIRouter, Depends

from app.api.live.dependency import CurrentSession
from app.api.live.schemas.stream import CreateStreamIn, EmptyOut, JoinStreamIn
from app.domain.live.stream.stream_domain import StreamService
from app.domain.live.stream.stream_models import (
    CreateStreamParams,
    JoinStreamParams,
    StreamAccessResponse,
)

router = APIRouter()

# Singleton instance
_stream_service = StreamService()


def get_stream_service() -> StreamService:
    """Get the singleton StreamService instance."""
    return _stream_service


@router.post("/create_stream", response_model=StreamAccessResponse)
async def create_stream(
    body: CreateStreamIn,
    service: StreamService = Depends(get_stream_service),
) -> StreamAccessResponse:
    """Create a room for direct browser publishing by its creator."""
    params = CreateStreamParams(
        room_name=body.room_name,
        metadata=body.metadata.model_dump(),
        creator_identity=body.metadata.creator_identity,
    )
    return await service.create_stream(params)


@router.post("/join_stream", response_model=StreamAccessResponse)
async def join_stream(
    body: JoinStreamIn,
    service: StreamService = Depends(get_stream_service),
) -> StreamAccessResponse:
    """Join a stream as a viewer (subscribe and data only)."""
    return await service.join_stream(
        JoinStreamParams(room_name=body.room_name, identity=body.identity)
    )


@router.post("/stop_stream", response_model=EmptyOut)
async def stop_stream(
    session: CurrentSession,
    service: StreamService = Depends(get_stream_service),
) -> EmptyOut:
    """Delete the room. Creator only."""
    await service.stop_stream(room_name=session.room_name, actor=session.identity)
    return EmptyOut()
