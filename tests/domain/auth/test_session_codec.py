"""Tests for stateless session credentials."""

import jwt
import pytest

from app.domain.auth.session_codec import SessionClaims, SessionCodec, session_codec
from app.utils.app_errors import AppError, AppErrorCode


class TestIssueVerify:
    def test_round_trip(self):
        codec = SessionCodec(secret="unit-test-secret-unit-test-secret")

        token = codec.issue("abcd-1234", "alice")
        claims = codec.verify(token)

        assert claims == SessionClaims(room_name="abcd-1234", identity="alice")

    def test_default_codec_uses_livekit_secret(self):
        token = session_codec.issue("abcd-1234", "alice")

        payload = jwt.decode(
            token, "test-api-secret-with-enough-length-for-hs256", algorithms=["HS256"]
        )
        assert payload == {"room_name": "abcd-1234", "identity": "alice"}

    def test_tampered_signature_rejected(self):
        codec = SessionCodec(secret="unit-test-secret-unit-test-secret")
        token = codec.issue("abcd-1234", "alice")

        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]

        with pytest.raises(AppError) as exc_info:
            codec.verify(f"{header}.{payload}.{flipped}")
        assert exc_info.value.errcode == AppErrorCode.E_UNAUTHORIZED
        assert exc_info.value.status_code == 401

    def test_token_signed_with_other_secret_rejected(self):
        forged = jwt.encode(
            {"room_name": "abcd-1234", "identity": "mallory"},
            "some-other-secret-some-other-secret",
            algorithm="HS256",
        )

        with pytest.raises(AppError) as exc_info:
            SessionCodec(secret="unit-test-secret-unit-test-secret").verify(forged)
        assert exc_info.value.errcode == AppErrorCode.E_UNAUTHORIZED

    @pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c"])
    def test_absent_or_malformed_rejected(self, token):
        with pytest.raises(AppError) as exc_info:
            SessionCodec(secret="unit-test-secret-unit-test-secret").verify(token)
        assert exc_info.value.errcode == AppErrorCode.E_UNAUTHORIZED

    def test_missing_claims_rejected(self):
        secret = "unit-test-secret-unit-test-secret"
        token = jwt.encode({"room_name": "abcd-1234"}, secret, algorithm="HS256")

        with pytest.raises(AppError) as exc_info:
            SessionCodec(secret=secret).verify(token)
        assert exc_info.value.errcode == AppErrorCode.E_UNAUTHORIZED
