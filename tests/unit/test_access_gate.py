"""Unit tests for AccessGate routing decisions."""

from __future__ import annotations

from datetime import timedelta

import pytest

from src.models.auth import AuthUser, UserRole
from src.services.access_gate import AccessGate, GateDecision
from src.services.session_codec import SessionCodec
from tests.conftest import START


@pytest.fixture()
def gate(codec: SessionCodec) -> AccessGate:
    return AccessGate(codec=codec, exempt_prefixes=["/api", "/static"])


@pytest.fixture()
def instructor_token(codec: SessionCodec) -> str:
    return codec.issue(AuthUser(role=UserRole.INSTRUCTOR, name="Alex", email="alex@example.com"))


@pytest.fixture()
def em_token(codec: SessionCodec) -> str:
    return codec.issue(AuthUser(role=UserRole.EM, name="Sam", email="em@example.com"))


class TestLoginPage:
    def test_anonymous_sees_login(self, gate: AccessGate) -> None:
        assert gate.decide("/login", None, START) == GateDecision(allow=True)

    def test_instructor_is_sent_home(self, gate: AccessGate, instructor_token: str) -> None:
        decision = gate.decide("/login", instructor_token, START)

        assert decision == GateDecision(allow=False, redirect_to="/instructor")

    def test_em_is_sent_home(self, gate: AccessGate, em_token: str) -> None:
        decision = gate.decide("/login", em_token, START)

        assert decision == GateDecision(allow=False, redirect_to="/em")

    def test_expired_session_sees_login(self, gate: AccessGate, instructor_token: str) -> None:
        later = START + timedelta(hours=24)

        assert gate.decide("/login", instructor_token, later).allow is True


class TestProtectedPaths:
    @pytest.mark.parametrize("path", ["/instructor", "/instructor/", "/instructor/schedule"])
    def test_instructor_paths_allow_instructor(
        self, gate: AccessGate, instructor_token: str, path: str
    ) -> None:
        assert gate.decide(path, instructor_token, START).allow is True

    @pytest.mark.parametrize("path", ["/instructor", "/instructor/schedule"])
    def test_instructor_paths_reject_em(self, gate: AccessGate, em_token: str, path: str) -> None:
        assert gate.decide(path, em_token, START) == GateDecision(allow=False, redirect_to="/login")

    def test_em_path_rejects_instructor(self, gate: AccessGate, instructor_token: str) -> None:
        assert gate.decide("/em/reports", instructor_token, START).redirect_to == "/login"

    def test_em_path_allows_em(self, gate: AccessGate, em_token: str) -> None:
        assert gate.decide("/em", em_token, START).allow is True

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    def test_missing_or_bad_token_redirects(self, gate: AccessGate, token: str | None) -> None:
        assert gate.decide("/em", token, START).redirect_to == "/login"

    def test_expired_token_redirects(self, gate: AccessGate, em_token: str) -> None:
        later = START + timedelta(hours=25)

        assert gate.decide("/em", em_token, later).redirect_to == "/login"


class TestUnprotectedPaths:
    @pytest.mark.parametrize("path", ["/emails", "/instructors", "/", "/about"])
    def test_prefix_match_is_per_segment(self, gate: AccessGate, path: str) -> None:
        assert gate.required_role(path) is None
        assert gate.decide(path, None, START).allow is True

    @pytest.mark.parametrize("path", ["/api/auth/me", "/api/instructor/reset-pin", "/static/app.css"])
    def test_exempt_paths_pass_without_session(self, gate: AccessGate, path: str) -> None:
        assert gate.is_exempt(path) is True
        assert gate.decide(path, None, START).allow is True


class TestConfiguration:
    def test_custom_role_paths(self, codec: SessionCodec, em_token: str) -> None:
        gate = AccessGate(codec=codec, role_paths={"/admin": UserRole.EM}, login_path="/signin")

        assert gate.required_role("/admin/users") is UserRole.EM
        assert gate.required_role("/em") is None
        assert gate.decide("/admin", None, START).redirect_to == "/signin"
        assert gate.decide("/signin", em_token, START).redirect_to == "/admin"

    def test_home_without_mapping_falls_back_to_login(self, codec: SessionCodec) -> None:
        gate = AccessGate(codec=codec, role_paths={"/em": UserRole.EM})

        assert gate.home_for(UserRole.INSTRUCTOR) == "/login"
