"""LiveKit helper service.

This module provides a thin wrapper around the `livekit-api` package.

Based on the official LiveKit Python SDK:
https://github.com/livekit/python-sdks

Usage:
    from app.services.integrations.livekit_service import livekit_service

    token = livekit_service.create_access_token(
        identity="user-123",
        room="my-room",
        can_publish=False,
    )

    participant = await livekit_service.get_participant(room="my-room", identity="user-123")
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiohttp
from livekit import api
from livekit.api.twirp_client import TwirpError, TwirpErrorCode
from livekit.protocol.models import ParticipantInfo, ParticipantPermission
from loguru import logger

from app.app_config import get_app_environ_config
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class LivekitService:
    """Service wrapper for LiveKit server SDK (livekit-api package).

    A single ``LiveKitAPI`` client is shared by all requests. It is created
    lazily on first use, because its HTTP session must be bound to the
    running event loop, and released by ``aclose()`` at shutdown.
    """

    def __init__(self) -> None:
        self._cfg = get_app_environ_config()
        self._lkapi: api.LiveKitAPI | None = None
        logger.info("LivekitService initialized")

    def _get_api_client(self) -> api.LiveKitAPI:
        """Return the shared LiveKit API client, creating it on first use.

        Raises:
            AppError: If the LiveKit URL or credentials are not configured
        """
        if self._lkapi is not None:
            return self._lkapi

        url = self._cfg.LIVEKIT_HTTP_URL
        api_key = self._cfg.LIVEKIT_API_KEY
        api_secret = self._cfg.LIVEKIT_API_SECRET
        if not url or not api_key or not api_secret:
            logger.error("LIVEKIT_WS_URL, LIVEKIT_API_KEY or LIVEKIT_API_SECRET not configured")
            raise AppError(
                errcode=AppErrorCode.E_INTERNAL_ERROR,
                errmesg="RTC provider must be configured. Set it in env.local or environment variables.",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )

        logger.debug(f"Creating LiveKit API client for URL={url}")
        self._lkapi = api.LiveKitAPI(url=url, api_key=api_key, api_secret=api_secret)
        return self._lkapi

    async def aclose(self) -> None:
        if self._lkapi is not None:
            await self._lkapi.aclose()
            self._lkapi = None
            logger.info("LiveKit API client closed")

    @asynccontextmanager
    async def _upstream(self, operation: str) -> AsyncIterator[api.LiveKitAPI]:
        """Yield the client, turning transport failures into E_UPSTREAM_FAILURE.

        Twirp errors pass through untouched; the API layer maps them by code.
        """
        lkapi = self._get_api_client()
        try:
            yield lkapi
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"LiveKit {operation} failed: {type(e).__name__}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_UPSTREAM_FAILURE,
                errmesg=f"RTC provider request failed: {operation}",
                status_code=HttpStatusCode.BAD_GATEWAY,
            ) from e

    def create_access_token(
        self,
        identity: str,
        room: str,
        name: str | None = None,
        room_join: bool = True,
        can_publish: bool = True,
        can_subscribe: bool = True,
        can_publish_data: bool = True,
    ) -> str:
        """Create and return a LiveKit JWT access token.

        Args:
            identity: Unique identity for the participant
            room: Room name to grant access to
            name: Display name for the participant (optional)
            room_join: Grant permission to join the room (default: True)
            can_publish: Grant permission to publish tracks (default: True)
            can_subscribe: Grant permission to subscribe to tracks (default: True)
            can_publish_data: Grant permission to publish data (default: True)

        Returns:
            JWT token string
        """
        api_key = self._cfg.LIVEKIT_API_KEY
        api_secret = self._cfg.LIVEKIT_API_SECRET

        if not api_key or not api_secret:
            logger.error("LIVEKIT_API_KEY or LIVEKIT_API_SECRET not configured")
            raise AppError(
                errcode=AppErrorCode.E_INTERNAL_ERROR,
                errmesg="RTC provider credentials must be configured. Set them in env.local or environment variables.",
                status_code=HttpStatusCode.INTERNAL_SERVER_ERROR,
            )

        logger.info(
            f"Creating LiveKit access token for identity={identity}, room={room}, "
            f"can_publish={can_publish}"
        )

        token = api.AccessToken(api_key, api_secret).with_identity(identity)
        if name:
            token = token.with_name(name)

        grants = api.VideoGrants(
            room_join=room_join,
            room=room,
            can_publish=can_publish,
            can_subscribe=can_subscribe,
            can_publish_data=can_publish_data,
        )
        return token.with_grants(grants).to_jwt()

    async def create_room(
        self,
        room_name: str,
        metadata: str | None = None,
        empty_timeout: int | None = None,
    ) -> api.Room:
        """Create a LiveKit room.

        Args:
            room_name: Unique name for the room
            metadata: Optional JSON string containing room metadata
            empty_timeout: Seconds before an empty room closes (defaults to ROOM_EMPTY_TIMEOUT)

        Returns:
            Room object with .name, .sid, .metadata attributes
        """
        if empty_timeout is None:
            empty_timeout = self._cfg.ROOM_EMPTY_TIMEOUT

        logger.info(f"Creating LiveKit room: room_name={room_name}, empty_timeout={empty_timeout}")
        async with self._upstream("create_room") as lkapi:
            room = await lkapi.room.create_room(
                api.CreateRoomRequest(
                    name=room_name,
                    metadata=metadata or "",
                    empty_timeout=empty_timeout,
                )
            )
        logger.debug(f"Successfully created LiveKit room: name={room.name}, sid={room.sid}")
        return room

    async def delete_room(self, room_name: str) -> None:
        logger.info(f"Deleting LiveKit room: room_name={room_name}")
        async with self._upstream("delete_room") as lkapi:
            await lkapi.room.delete_room(api.DeleteRoomRequest(room=room_name))
        logger.debug(f"Successfully deleted LiveKit room: name={room_name}")

    async def list_rooms(self, names: list[str] | None = None) -> list[api.Room]:
        """List rooms, optionally restricted to the given names."""
        async with self._upstream("list_rooms") as lkapi:
            response = await lkapi.room.list_rooms(api.ListRoomsRequest(names=names or []))
        return list(response.rooms)

    async def get_room(self, room_name: str) -> api.Room:
        """Get room info by name.

        Raises:
            AppError: E_ROOM_NOT_FOUND if the room does not exist
        """
        rooms = await self.list_rooms([room_name])
        if not rooms:
            raise AppError(
                errcode=AppErrorCode.E_ROOM_NOT_FOUND,
                errmesg="Room does not exist",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return rooms[0]

    async def get_participant(self, room: str, identity: str) -> ParticipantInfo:
        """Get a participant of a room.

        Raises:
            AppError: E_PARTICIPANT_NOT_FOUND if the participant is not in the room
        """
        logger.debug(f"Getting participant: room={room}, identity={identity}")
        async with self._upstream("get_participant") as lkapi:
            try:
                return await lkapi.room.get_participant(
                    api.RoomParticipantIdentity(room=room, identity=identity)
                )
            except TwirpError as e:
                if e.code == TwirpErrorCode.NOT_FOUND:
                    raise AppError(
                        errcode=AppErrorCode.E_PARTICIPANT_NOT_FOUND,
                        errmesg=f"Participant '{identity}' not found in room '{room}'",
                        status_code=HttpStatusCode.NOT_FOUND,
                    ) from e
                raise

    async def update_participant(
        self,
        room: str,
        identity: str,
        metadata: str,
        permission: ParticipantPermission,
    ) -> ParticipantInfo:
        """Write participant metadata and permission in a single call.

        Reference:
            https://docs.livekit.io/home/server/managing-participants/#updateparticipant
        """
        logger.info(
            f"Updating participant: room={room}, identity={identity}, "
            f"can_publish={permission.can_publish}"
        )
        async with self._upstream("update_participant") as lkapi:
            participant = await lkapi.room.update_participant(
                api.UpdateParticipantRequest(
                    room=room,
                    identity=identity,
                    metadata=metadata,
                    permission=permission,
                )
            )
        logger.debug(f"Successfully updated participant: identity={participant.identity}")
        return participant

    async def create_ingress(self, request: api.CreateIngressRequest) -> api.IngressInfo:
        """Create an ingress endpoint.

        Example:
            ingress = await livekit_service.create_ingress(
                api.CreateIngressRequest(
                    input_type=api.IngressInput.WHIP_INPUT,
                    name="abcd-1234",
                    room_name="abcd-1234",
                    participant_identity="bob (via OBS)",
                    participant_name="bob (via OBS)",
                    bypass_transcoding=True,
                )
            )
        """
        logger.info(f"Creating ingress for room={request.room_name}, input_type={request.input_type}")
        async with self._upstream("create_ingress") as lkapi:
            ingress = await lkapi.ingress.create_ingress(request)
        logger.debug(f"Successfully created ingress: ingress_id={ingress.ingress_id}")
        return ingress


# Module-level singleton
livekit_service = LivekitService()


__all__ = ["LivekitService", "livekit_service"]
