"""Stage operations: raise hand, invite to stage, remove from stage."""

from livekit.protocol.models import ParticipantInfo, ParticipantPermission
from loguru import logger

from app.domain.live.participant.participant_metadata import (
    parse_participant_metadata,
    serialize_participant_metadata,
)
from app.domain.live.stage.stage_state_machine import (
    StageAction,
    StageStateMachine,
    StageTransition,
)

from ._base import BaseService


def current_permission(participant: ParticipantInfo) -> ParticipantPermission:
    """Copy the participant's permission, or a viewer default if none is set."""
    permission = ParticipantPermission()
    if participant.HasField("permission"):
        permission.CopyFrom(participant.permission)
    else:
        permission.can_subscribe = True
        permission.can_publish_data = True
    return permission


class StageOperations(BaseService):
    """Publish-permission handshake between viewers and the room creator.

    Metadata is read, transitioned and written back in one request. Two
    concurrent requests against the same participant are last-write-wins
    on the whole metadata blob; LiveKit offers no conditional update.
    """

    async def _transition(self, room_name: str, identity: str, action: StageAction) -> StageTransition:
        participant = await self.livekit.get_participant(room=room_name, identity=identity)
        metadata = parse_participant_metadata(participant.metadata, identity)

        transition = StageStateMachine.apply(action, metadata)

        permission = current_permission(participant)
        if transition.can_publish is not None:
            permission.can_publish = transition.can_publish

        await self.livekit.update_participant(
            room=room_name,
            identity=identity,
            metadata=serialize_participant_metadata(transition.metadata),
            permission=permission,
        )

        logger.info(
            f"Stage {action}: room={room_name}, identity={identity}, "
            f"{transition.previous} -> {transition.current}, can_publish={permission.can_publish}"
        )
        return transition

    async def raise_hand(self, room_name: str, actor: str) -> StageTransition:
        return await self._transition(room_name, actor, StageAction.RAISE_HAND)

    async def invite_to_stage(self, room_name: str, actor: str, identity: str) -> StageTransition:
        """Invite ``identity`` on stage. Only the room creator may invite."""
        creator_identity = await self._get_creator_identity(room_name)
        StageStateMachine.authorize(StageAction.INVITE_TO_STAGE, actor, creator_identity, identity)

        return await self._transition(room_name, identity, StageAction.INVITE_TO_STAGE)

    async def remove_from_stage(
        self,
        room_name: str,
        actor: str,
        identity: str | None = None,
    ) -> StageTransition:
        """Take ``identity`` (default: the actor) off stage.

        Allowed for the room creator and for participants removing themselves.
        """
        target = identity or actor

        creator_identity = await self._get_creator_identity(room_name)
        StageStateMachine.authorize(StageAction.REMOVE_FROM_STAGE, actor, creator_identity, target)

        return await self._transition(room_name, target, StageAction.REMOVE_FROM_STAGE)
