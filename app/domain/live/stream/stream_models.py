"""Stream domain models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class IngressType(str, Enum):
    RTMP = "rtmp"
    WHIP = "whip"

    def __str__(self) -> str:
        return self.value


class CreateStreamParams(BaseModel):
    room_name: str | None = None
    metadata: dict[str, Any]
    creator_identity: str


class CreateIngressParams(CreateStreamParams):
    ingress_type: IngressType = IngressType.RTMP


class JoinStreamParams(BaseModel):
    room_name: str
    identity: str


class ConnectionDetails(BaseModel):
    ws_url: str
    token: str


class StreamAccessResponse(BaseModel):
    """Credentials handed to a client after creating or joining a stream."""

    room_name: str
    auth_token: str
    connection_details: ConnectionDetails


class IngressDetails(BaseModel):
    ingress_id: str
    name: str
    input_type: IngressType
    url: str
    stream_key: str = ""
    room_name: str
    participant_identity: str
    participant_name: str


class IngressResponse(StreamAccessResponse):
    ingress: IngressDetails = Field(description="Ingest endpoint for broadcaster software")
