"""Unit tests for stage participation endpoints."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.live.errors import app_error_handler
from app.api.live.routers import participation
from app.api.live.routers.stream import get_stream_service
from app.domain.auth.session_codec import session_codec
from app.domain.live.stream.stream_domain import StreamService
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


@pytest.fixture
def mock_stream_service() -> AsyncMock:
    return AsyncMock(spec=StreamService)


@pytest.fixture
def client(mock_stream_service: AsyncMock) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_stream_service] = lambda: mock_stream_service
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(participation.router, prefix="/api")
    return TestClient(app)


def _auth(identity: str, room_name: str = "bob-room") -> dict[str, str]:
    return {"Authorization": f"Bearer {session_codec.issue(room_name, identity)}"}


class TestAuthentication:
    @pytest.mark.parametrize("path", ["/api/raise_hand", "/api/remove_from_stage"])
    def test_missing_header(self, client, path):
        response = client.post(path, json={})

        assert response.status_code == 401
        assert response.json()["error"] == "No authorization header found"

    def test_wrong_scheme(self, client):
        token = session_codec.issue("bob-room", "carol")

        response = client.post("/api/raise_hand", headers={"Authorization": f"Token {token}"})

        assert response.status_code == 401

    def test_tampered_token(self, client, mock_stream_service):
        token = session_codec.issue("bob-room", "carol")
        header, payload, signature = token.split(".")
        forged = f"{header}.{payload}.{'A' if signature[0] != 'A' else 'B'}{signature[1:]}"

        response = client.post("/api/raise_hand", headers={"Authorization": f"Bearer {forged}"})

        assert response.status_code == 401
        assert response.json()["errcode"] == "E_UNAUTHORIZED"
        mock_stream_service.raise_hand.assert_not_called()


class TestRaiseHand:
    def test_uses_session_identity(self, client, mock_stream_service):
        response = client.post("/api/raise_hand", headers=_auth("carol"), json={})

        assert response.status_code == 200
        assert response.json() == {}
        mock_stream_service.raise_hand.assert_awaited_once_with(room_name="bob-room", actor="carol")


class TestInviteToStage:
    def test_success(self, client, mock_stream_service):
        response = client.post(
            "/api/invite_to_stage", headers=_auth("bob"), json={"identity": "carol"}
        )

        assert response.status_code == 200
        mock_stream_service.invite_to_stage.assert_awaited_once_with(
            room_name="bob-room", actor="bob", identity="carol"
        )

    def test_requires_identity(self, client, mock_stream_service):
        response = client.post("/api/invite_to_stage", headers=_auth("bob"), json={})

        assert response.status_code == 422
        mock_stream_service.invite_to_stage.assert_not_called()

    def test_forbidden(self, client, mock_stream_service):
        mock_stream_service.invite_to_stage.side_effect = AppError(
            errcode=AppErrorCode.E_FORBIDDEN,
            errmesg="Only the creator can invite to stage",
            status_code=HttpStatusCode.FORBIDDEN,
        )

        response = client.post(
            "/api/invite_to_stage", headers=_auth("dave"), json={"identity": "carol"}
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Only the creator can invite to stage"


class TestRemoveFromStage:
    def test_defaults_to_self(self, client, mock_stream_service):
        response = client.post("/api/remove_from_stage", headers=_auth("carol"), json={})

        assert response.status_code == 200
        mock_stream_service.remove_from_stage.assert_awaited_once_with(
            room_name="bob-room", actor="carol", identity=None
        )

    def test_without_body(self, client, mock_stream_service):
        response = client.post("/api/remove_from_stage", headers=_auth("carol"))

        assert response.status_code == 200
        mock_stream_service.remove_from_stage.assert_awaited_once_with(
            room_name="bob-room", actor="carol", identity=None
        )

    def test_explicit_identity(self, client, mock_stream_service):
        response = client.post(
            "/api/remove_from_stage", headers=_auth("bob"), json={"identity": "carol"}
        )

        assert response.status_code == 200
        mock_stream_service.remove_from_stage.assert_awaited_once_with(
            room_name="bob-room", actor="bob", identity="carol"
        )
