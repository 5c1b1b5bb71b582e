from fastapi import APIRouter, Depends

from app.api.live.routers.stream import get_stream_service
from app.api.live.schemas.stream import CreateIngressIn
from app.domain.live.stream.stream_domain import StreamService
from app.domain.live.stream.stream_models import CreateIngressParams, IngressResponse

router = APIRouter()


@router.post("/create_ingress", response_model=IngressResponse)
async def create_ingress(
    body: CreateIngressIn,
    service: StreamService = Depends(get_stream_service),
) -> IngressResponse:
    """Create a room with an RTMP or WHIP ingest endpoint for broadcaster software."""
    params = CreateIngressParams(
        room_name=body.room_name,
        ingress_type=body.ingress_type,
        metadata=body.metadata.model_dump(),
        creator_identity=body.metadata.creator_identity,
    )
    return await service.create_ingress(params)
