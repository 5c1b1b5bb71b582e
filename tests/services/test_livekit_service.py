"""Tests for the LiveKit gateway wrapper."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import jwt
import pytest
from livekit import api
from livekit.api.twirp_client import TwirpError
from livekit.protocol.models import ParticipantInfo, ParticipantPermission

from app.services.integrations.livekit_service import LivekitService
from app.utils.app_errors import AppError, AppErrorCode


@pytest.fixture
def lkapi() -> MagicMock:
    client = MagicMock()
    client.room = MagicMock()
    client.room.create_room = AsyncMock()
    client.room.delete_room = AsyncMock()
    client.room.list_rooms = AsyncMock()
    client.room.get_participant = AsyncMock()
    client.room.update_participant = AsyncMock()
    client.ingress = MagicMock()
    client.ingress.create_ingress = AsyncMock()
    return client


@pytest.fixture
def service(lkapi: MagicMock) -> LivekitService:
    svc = LivekitService()
    with patch.object(svc, "_get_api_client", return_value=lkapi):
        yield svc


class TestClientLifecycle:
    async def test_client_is_shared(self):
        svc = LivekitService()
        with patch("app.services.integrations.livekit_service.api.LiveKitAPI") as mock_cls:
            first = svc._get_api_client()
            second = svc._get_api_client()

        assert first is second
        mock_cls.assert_called_once_with(
            url="https://livekit.test",
            api_key="test-api-key",
            api_secret="test-api-secret-with-enough-length-for-hs256",
        )

    async def test_aclose_releases_client(self):
        svc = LivekitService()
        client = MagicMock()
        client.aclose = AsyncMock()
        svc._lkapi = client

        await svc.aclose()

        client.aclose.assert_awaited_once()
        assert svc._lkapi is None


class TestAccessToken:
    def test_viewer_token_claims(self):
        token = LivekitService().create_access_token(
            identity="carol", room="bob-room", can_publish=False
        )

        payload = jwt.decode(
            token,
            "test-api-secret-with-enough-length-for-hs256",
            algorithms=["HS256"],
        )
        assert payload["sub"] == "carol"
        assert payload["iss"] == "test-api-key"
        assert payload["video"]["room"] == "bob-room"
        assert payload["video"]["roomJoin"] is True


class TestRooms:
    async def test_create_room_request(self, service, lkapi):
        lkapi.room.create_room.return_value = api.Room(name="bob-room", sid="RM_1")

        room = await service.create_room("bob-room", metadata='{"creator_identity":"bob"}')

        assert room.sid == "RM_1"
        request = lkapi.room.create_room.call_args.args[0]
        assert request.name == "bob-room"
        assert request.metadata == '{"creator_identity":"bob"}'
        assert request.empty_timeout == 300

    async def test_get_room_missing(self, service, lkapi):
        lkapi.room.list_rooms.return_value = api.ListRoomsResponse(rooms=[])

        with pytest.raises(AppError) as exc_info:
            await service.get_room("gone-room")
        assert exc_info.value.errcode == AppErrorCode.E_ROOM_NOT_FOUND

    async def test_list_rooms_filters_by_name(self, service, lkapi):
        lkapi.room.list_rooms.return_value = api.ListRoomsResponse(
            rooms=[api.Room(name="bob-room")]
        )

        rooms = await service.list_rooms(["bob-room"])

        assert [r.name for r in rooms] == ["bob-room"]
        assert list(lkapi.room.list_rooms.call_args.args[0].names) == ["bob-room"]

    async def test_delete_room(self, service, lkapi):
        await service.delete_room("bob-room")

        assert lkapi.room.delete_room.call_args.args[0].room == "bob-room"


class TestParticipants:
    async def test_get_participant_not_found(self, service, lkapi):
        lkapi.room.get_participant.side_effect = TwirpError(
            "not_found", "participant does not exist", status=404
        )

        with pytest.raises(AppError) as exc_info:
            await service.get_participant("bob-room", "carol")
        assert exc_info.value.errcode == AppErrorCode.E_PARTICIPANT_NOT_FOUND
        assert exc_info.value.status_code == 404

    async def test_get_participant_other_twirp_error_propagates(self, service, lkapi):
        lkapi.room.get_participant.side_effect = TwirpError("internal", "boom", status=500)

        with pytest.raises(TwirpError):
            await service.get_participant("bob-room", "carol")

    async def test_transport_failure_is_upstream_failure(self, service, lkapi):
        lkapi.room.get_participant.side_effect = aiohttp.ClientConnectionError("refused")

        with pytest.raises(AppError) as exc_info:
            await service.get_participant("bob-room", "carol")
        assert exc_info.value.errcode == AppErrorCode.E_UPSTREAM_FAILURE
        assert exc_info.value.status_code == 502

    async def test_update_participant_sends_metadata_and_permission(self, service, lkapi):
        lkapi.room.update_participant.return_value = ParticipantInfo(identity="carol")
        permission = ParticipantPermission(can_publish=True, can_subscribe=True)

        await service.update_participant("bob-room", "carol", '{"hand_raised":true}', permission)

        request = lkapi.room.update_participant.call_args.args[0]
        assert request.room == "bob-room"
        assert request.identity == "carol"
        assert request.metadata == '{"hand_raised":true}'
        assert request.permission.can_publish is True


class TestIngress:
    async def test_create_ingress_passes_request(self, service, lkapi):
        lkapi.ingress.create_ingress.return_value = api.IngressInfo(ingress_id="IN_1")
        request = api.CreateIngressRequest(
            input_type=api.IngressInput.WHIP_INPUT, room_name="bob-room"
        )

        ingress = await service.create_ingress(request)

        assert ingress.ingress_id == "IN_1"
        lkapi.ingress.create_ingress.assert_awaited_once_with(request)
