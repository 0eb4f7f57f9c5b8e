"""Unit tests for SessionCodec: token issue, verification and expiry."""

from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from src.models.auth import AuthUser, UserRole
from src.services.session_codec import SessionCodec
from tests.conftest import START, TEST_SECRET, FakeClock


@pytest.fixture()
def instructor() -> AuthUser:
    return AuthUser(
        role=UserRole.INSTRUCTOR,
        name="Alex Rivera",
        email="alex@example.com",
        mobile="0400 111 222",
        fee="85",
    )


class TestIssue:
    def test_round_trip_preserves_identity(self, codec: SessionCodec, instructor: AuthUser) -> None:
        claims = codec.verify(codec.issue(instructor))

        assert claims is not None
        assert claims.role is UserRole.INSTRUCTOR
        assert claims.name == "Alex Rivera"
        assert claims.email == "alex@example.com"

    def test_expiry_is_issue_time_plus_ttl(self, codec: SessionCodec, instructor: AuthUser) -> None:
        claims = codec.verify(codec.issue(instructor))

        assert claims.issued_at == START
        assert claims.expires_at == START + timedelta(hours=24)

    def test_mobile_and_fee_are_not_embedded(self, codec: SessionCodec, instructor: AuthUser) -> None:
        payload = jwt.decode(
            codec.issue(instructor), TEST_SECRET, algorithms=["HS256"], options={"verify_exp": False}
        )

        assert set(payload) == {"role", "name", "email", "iat", "exp"}
        assert payload["role"] == "INSTRUCTOR"

    def test_ttl_seconds_reflects_configuration(self) -> None:
        assert SessionCodec(TEST_SECRET, ttl=timedelta(hours=2)).ttl_seconds == 7200


class TestVerify:
    @pytest.mark.parametrize("token", [None, "", "not-a-token", "a.b.c"])
    def test_garbage_is_rejected(self, codec: SessionCodec, token: str | None) -> None:
        assert codec.verify(token) is None

    def test_wrong_secret_is_rejected(self, codec: SessionCodec, instructor: AuthUser) -> None:
        other = SessionCodec(secret="another-secret-that-is-also-32-bytes-long!")

        assert other.verify(codec.issue(instructor), now=START) is None

    def test_tampered_payload_is_rejected(self, codec: SessionCodec, instructor: AuthUser) -> None:
        forged = jwt.encode(
            {"role": "EM", "name": "x", "email": "x@example.com", "iat": 0, "exp": 2**31},
            "guessed-secret-guessed-secret-guessed",
            algorithm="HS256",
        )

        assert codec.verify(forged) is None

    def test_valid_until_just_before_expiry(
        self, codec: SessionCodec, clock: FakeClock, instructor: AuthUser
    ) -> None:
        token = codec.issue(instructor)
        clock.advance(hours=24, seconds=-1)

        assert codec.verify(token) is not None

    def test_invalid_at_exact_expiry(
        self, codec: SessionCodec, clock: FakeClock, instructor: AuthUser
    ) -> None:
        token = codec.issue(instructor)
        clock.advance(hours=24)

        assert codec.verify(token) is None

    def test_explicit_now_overrides_clock(self, codec: SessionCodec, instructor: AuthUser) -> None:
        token = codec.issue(instructor)

        assert codec.verify(token, now=START + timedelta(days=2)) is None

    def test_missing_exp_claim_is_rejected(self, codec: SessionCodec) -> None:
        token = jwt.encode(
            {"role": "EM", "name": "EM", "email": "em@example.com", "iat": int(START.timestamp())},
            TEST_SECRET,
            algorithm="HS256",
        )

        assert codec.verify(token) is None

    def test_unknown_role_is_rejected(self, codec: SessionCodec) -> None:
        issued = int(START.timestamp())
        token = jwt.encode(
            {"role": "ADMIN", "name": "x", "email": "x@example.com", "iat": issued, "exp": issued + 60},
            TEST_SECRET,
            algorithm="HS256",
        )

        assert codec.verify(token) is None
