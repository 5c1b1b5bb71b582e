"""LiveKit ingress operations for broadcaster software (OBS and the like)."""

from livekit import api
from loguru import logger

from app.domain.utils.idgen import new_room_name

from ._base import BaseService
from .stream_models import CreateIngressParams, IngressDetails, IngressResponse, IngressType

# Fixed transcoding policy for RTMP sources
RTMP_VIDEO_PRESET = api.IngressVideoEncodingPreset.H264_1080P_30FPS_3_LAYERS
RTMP_AUDIO_PRESET = api.IngressAudioEncodingPreset.OPUS_STEREO_96KBPS


def ingress_participant_identity(creator_identity: str) -> str:
    return f"{creator_identity} (via OBS)"


def build_ingress_request(
    ingress_type: IngressType,
    room_name: str,
    creator_identity: str,
) -> api.CreateIngressRequest:
    """Build the ingress request for the given input protocol.

    WHIP sources are relayed as-is; RTMP sources are transcoded to a
    three-layer 1080p30 H.264 simulcast with stereo Opus audio.
    """
    participant = ingress_participant_identity(creator_identity)

    if ingress_type == IngressType.WHIP:
        return api.CreateIngressRequest(
            input_type=api.IngressInput.WHIP_INPUT,
            name=room_name,
            room_name=room_name,
            participant_identity=participant,
            participant_name=participant,
            bypass_transcoding=True,
        )

    return api.CreateIngressRequest(
        input_type=api.IngressInput.RTMP_INPUT,
        name=room_name,
        room_name=room_name,
        participant_identity=participant,
        participant_name=participant,
        video=api.IngressVideoOptions(
            source=api.TrackSource.CAMERA,
            preset=RTMP_VIDEO_PRESET,
        ),
        audio=api.IngressAudioOptions(
            source=api.TrackSource.MICROPHONE,
            preset=RTMP_AUDIO_PRESET,
        ),
    )


class IngressOperations(BaseService):
    """Room + ingest endpoint creation."""

    async def create_ingress(self, params: CreateIngressParams) -> IngressResponse:
        """Create a room with an ingest endpoint scoped to the creator.

        The creator receives a subscribe-only token: their media arrives
        through the ingest participant, not their own connection.

        A failing ingress creation leaves the room in place; no rollback
        is attempted.
        """
        room_name = params.room_name or new_room_name()
        identity = params.creator_identity

        await self._create_room(room_name, params.metadata)

        ingress = await self.livekit.create_ingress(
            build_ingress_request(params.ingress_type, room_name, identity)
        )

        token = self.livekit.create_access_token(
            identity=identity,
            room=room_name,
            can_publish=False,
            can_subscribe=True,
            can_publish_data=True,
        )

        logger.info(
            f"Ingress created: room={room_name}, ingress_id={ingress.ingress_id}, "
            f"type={params.ingress_type}"
        )

        access = self._access_response(room_name, identity, token)
        return IngressResponse(
            **access.model_dump(),
            ingress=IngressDetails(
                ingress_id=ingress.ingress_id,
                name=ingress.name,
                input_type=params.ingress_type,
                url=ingress.url,
                stream_key=ingress.stream_key,
                room_name=ingress.room_name or room_name,
                participant_identity=ingress.participant_identity,
                participant_name=ingress.participant_name,
            ),
        )
