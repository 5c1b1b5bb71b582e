from fastapi import APIRouter, Body, Depends

from app.api.live.dependency import CurrentSession
from app.api.live.routers.stream import get_stream_service
from app.api.live.schemas.stage import InviteToStageIn, RemoveFromStageIn
from app.api.live.schemas.stream import EmptyOut
from app.domain.live.stream.stream_domain import StreamService

router = APIRouter()


@router.post("/invite_to_stage", response_model=EmptyOut)
async def invite_to_stage(
    body: InviteToStageIn,
    session: CurrentSession,
    service: StreamService = Depends(get_stream_service),
) -> EmptyOut:
    """Invite a participant on stage. Creator only."""
    await service.invite_to_stage(
        room_name=session.room_name,
        actor=session.identity,
        identity=body.identity,
    )
    return EmptyOut()


@router.post("/raise_hand", response_model=EmptyOut)
async def raise_hand(
    session: CurrentSession,
    service: StreamService = Depends(get_stream_service),
) -> EmptyOut:
    """Raise the caller's hand."""
    await service.raise_hand(room_name=session.room_name, actor=session.identity)
    return EmptyOut()


@router.post("/remove_from_stage", response_model=EmptyOut)
async def remove_from_stage(
    session: CurrentSession,
    body: RemoveFromStageIn | None = Body(default=None),
    service: StreamService = Depends(get_stream_service),
) -> EmptyOut:
    """Take a participant off stage; without an identity the caller leaves the stage."""
    await service.remove_from_stage(
        room_name=session.room_name,
        actor=session.identity,
        identity=body.identity if body else None,
    )
    return EmptyOut()
