"""Participant and room metadata stored opaquely inside LiveKit records."""

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from app.app_config import get_app_environ_config
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


def default_avatar_image(identity: str) -> str:
    base_url = get_app_environ_config().AVATAR_BASE_URL.rstrip("/")
    return f"{base_url}/{identity}.png"


class ParticipantMetadata(BaseModel):
    """Stage flags kept in ``ParticipantInfo.metadata``.

    Unknown keys written by clients are preserved across updates.
    """

    model_config = ConfigDict(extra="allow")

    hand_raised: bool = False
    invited_to_stage: bool = False
    avatar_image: str | None = None

    @field_validator("hand_raised", "invited_to_stage", mode="before")
    @classmethod
    def _null_is_false(cls, value):
        return False if value is None else value

    @classmethod
    def default_for(cls, identity: str) -> "ParticipantMetadata":
        return cls(avatar_image=default_avatar_image(identity))


class RoomMetadata(BaseModel):
    """Creator-supplied metadata kept in ``Room.metadata``."""

    model_config = ConfigDict(extra="allow")

    creator_identity: str | None = None


def _corrupt_metadata(owner: str, e: ValidationError) -> AppError:
    if any(err["type"] == "json_invalid" for err in e.errors()):
        reason = "is not valid JSON"
    else:
        reason = "has an unexpected shape"
    return AppError(
        errcode=AppErrorCode.E_CORRUPT_METADATA,
        errmesg=f"Stored metadata for {owner} {reason}",
        status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
    )


def parse_participant_metadata(raw: str | None, identity: str) -> ParticipantMetadata:
    """Decode participant metadata, synthesizing defaults when none is stored.

    A stored value without ``avatar_image`` gets the identity's default avatar.

    Raises:
        AppError: E_CORRUPT_METADATA if the stored value is not a JSON object
            of the expected shape.
    """
    if not raw:
        return ParticipantMetadata.default_for(identity)

    try:
        metadata = ParticipantMetadata.model_validate_json(raw)
    except ValidationError as e:
        raise _corrupt_metadata(f"participant '{identity}'", e) from e

    if not metadata.avatar_image:
        metadata.avatar_image = default_avatar_image(identity)
    return metadata


def serialize_participant_metadata(metadata: ParticipantMetadata) -> str:
    return metadata.model_dump_json(exclude_none=True)


def parse_room_metadata(raw: str | None, room_name: str) -> RoomMetadata:
    if not raw:
        return RoomMetadata()

    try:
        return RoomMetadata.model_validate_json(raw)
    except ValidationError as e:
        raise _corrupt_metadata(f"room '{room_name}'", e) from e
