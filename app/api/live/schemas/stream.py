from pydantic import BaseModel, ConfigDict, Field

from app.domain.live.stream.stream_models import IngressType


class StreamMetadataIn(BaseModel):
    """Room metadata supplied by the creator; stored verbatim on the room."""

    model_config = ConfigDict(extra="allow")

    creator_identity: str = Field(min_length=1, description="Identity of the room creator")


class CreateStreamIn(BaseModel):
    room_name: str | None = Field(
        default=None, description="Room name; generated as `xxxx-xxxx` when omitted"
    )
    metadata: StreamMetadataIn


class CreateIngressIn(CreateStreamIn):
    ingress_type: IngressType = Field(
        default=IngressType.RTMP, description="Ingest protocol: `rtmp` or `whip`"
    )


class JoinStreamIn(BaseModel):
    room_name: str = Field(min_length=1)
    identity: str = Field(min_length=1)


class EmptyOut(BaseModel):
    pass
