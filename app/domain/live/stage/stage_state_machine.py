"""Stage state machine deciding publish permission from participant metadata."""

from dataclasses import dataclass
from enum import Enum

from app.domain.live.participant.participant_metadata import ParticipantMetadata
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class StageState(str, Enum):
    """Stage position derived from the two metadata flags."""

    IDLE = "idle"
    HAND_RAISED = "hand_raised"
    INVITED = "invited"
    ON_STAGE = "on_stage"

    def __str__(self) -> str:
        return self.value


class StageAction(str, Enum):
    RAISE_HAND = "raise_hand"
    INVITE_TO_STAGE = "invite_to_stage"
    REMOVE_FROM_STAGE = "remove_from_stage"
    STOP_STREAM = "stop_stream"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class StageTransition:
    """Outcome of applying a stage action.

    ``can_publish`` is None when the participant's current publish
    permission must be left as it is.
    """

    metadata: ParticipantMetadata
    can_publish: bool | None
    previous: StageState
    current: StageState


class StageStateMachine:
    """State machine for the raise-hand / invite-to-stage handshake.

    State flow with triggers:
    - IDLE -> HAND_RAISED (raise_hand) | INVITED (invite_to_stage)
    - HAND_RAISED -> ON_STAGE (invite_to_stage) | IDLE (remove_from_stage)
    - INVITED -> ON_STAGE (raise_hand) | IDLE (remove_from_stage)
    - ON_STAGE -> IDLE (remove_from_stage)

    Publish permission is granted only by the transition that makes both
    flags true, and revoked together with both flags on removal. Every
    decision is made against the metadata as read at the start of the
    request.
    """

    @classmethod
    def state_of(cls, metadata: ParticipantMetadata) -> StageState:
        if metadata.hand_raised and metadata.invited_to_stage:
            return StageState.ON_STAGE
        if metadata.hand_raised:
            return StageState.HAND_RAISED
        if metadata.invited_to_stage:
            return StageState.INVITED
        return StageState.IDLE

    @classmethod
    def apply(cls, action: StageAction, metadata: ParticipantMetadata) -> StageTransition:
        """Apply a stage action to a copy of ``metadata``.

        Args:
            action: One of RAISE_HAND, INVITE_TO_STAGE, REMOVE_FROM_STAGE
            metadata: Participant metadata as currently stored

        Returns:
            StageTransition with the updated metadata and publish decision
        """
        previous = cls.state_of(metadata)
        updated = metadata.model_copy()
        can_publish: bool | None = None

        if action == StageAction.RAISE_HAND:
            updated.hand_raised = True
            if updated.invited_to_stage:
                can_publish = True
        elif action == StageAction.INVITE_TO_STAGE:
            updated.invited_to_stage = True
            if updated.hand_raised:
                can_publish = True
        elif action == StageAction.REMOVE_FROM_STAGE:
            updated.hand_raised = False
            updated.invited_to_stage = False
            can_publish = False
        else:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg=f"Action {action} does not change participant stage state",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        return StageTransition(
            metadata=updated,
            can_publish=can_publish,
            previous=previous,
            current=cls.state_of(updated),
        )

    @classmethod
    def is_allowed(
        cls,
        action: StageAction,
        actor: str,
        creator_identity: str | None,
        target: str | None = None,
    ) -> bool:
        """Check whether ``actor`` may perform ``action`` on ``target``.

        Args:
            action: Requested stage action
            actor: Identity from the caller's session credential
            creator_identity: Room creator, None if the room records none
            target: Participant being acted upon (defaults to the actor)
        """
        is_creator = creator_identity is not None and actor == creator_identity

        if action == StageAction.RAISE_HAND:
            return True
        if action in (StageAction.INVITE_TO_STAGE, StageAction.STOP_STREAM):
            return is_creator
        if action == StageAction.REMOVE_FROM_STAGE:
            return is_creator or (target or actor) == actor
        return False

    @classmethod
    def authorize(
        cls,
        action: StageAction,
        actor: str,
        creator_identity: str | None,
        target: str | None = None,
    ) -> None:
        """Raise AppError(E_FORBIDDEN) unless ``is_allowed``."""
        if cls.is_allowed(action, actor, creator_identity, target):
            return

        if action == StageAction.REMOVE_FROM_STAGE:
            errmesg = "Only the creator or the participant themselves can remove from stage"
        elif action == StageAction.STOP_STREAM:
            errmesg = "Only the creator can stop the stream"
        else:
            errmesg = "Only the creator can invite to stage"

        raise AppError(
            errcode=AppErrorCode.E_FORBIDDEN,
            errmesg=errmesg,
            status_code=HttpStatusCode.FORBIDDEN,
        )
