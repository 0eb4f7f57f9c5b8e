"""Unit tests for domain models and the error hierarchy."""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from src.models.account import Account
from src.models.auth import AuthUser, SessionClaims, UserRole
from src.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    InstructorHubError,
    NotFoundError,
    ProviderUnavailableError,
    ValidationError,
)
from tests.conftest import START


class TestAuthUser:
    def test_instructor_profile_includes_contact_fields(self) -> None:
        user = AuthUser(role=UserRole.INSTRUCTOR, name="Alex", email="a@example.com", mobile="0400", fee="85")

        assert user.public_profile() == {"name": "Alex", "email": "a@example.com", "mobile": "0400", "fee": "85"}

    def test_instructor_profile_omits_unknown_fields(self) -> None:
        user = AuthUser(role=UserRole.INSTRUCTOR, name="Alex", email="a@example.com")

        assert user.public_profile() == {"name": "Alex", "email": "a@example.com"}

    def test_em_profile_never_has_contact_fields(self) -> None:
        user = AuthUser(role=UserRole.EM, name="Sam", email="em@example.com", mobile="0400")

        assert user.public_profile() == {"name": "Sam", "email": "em@example.com"}

    def test_is_immutable(self) -> None:
        user = AuthUser(role=UserRole.EM, name="Sam", email="em@example.com")

        with pytest.raises(PydanticValidationError):
            user.name = "Other"

    def test_role_from_string(self) -> None:
        assert AuthUser(role="INSTRUCTOR", name="A", email="a@example.com").role is UserRole.INSTRUCTOR


class TestSessionClaims:
    def test_to_user_drops_timestamps(self) -> None:
        claims = SessionClaims(
            role=UserRole.EM,
            name="Sam",
            email="em@example.com",
            issued_at=START,
            expires_at=START + timedelta(hours=24),
        )

        assert claims.to_user() == AuthUser(role=UserRole.EM, name="Sam", email="em@example.com")


class TestAccount:
    def test_row_ref_must_be_positive(self) -> None:
        with pytest.raises(PydanticValidationError):
            Account(name="A", email="a@example.com", row_ref=0)

    def test_contact_fields_default_empty(self) -> None:
        account = Account(name="A", email="a@example.com", row_ref=2)

        assert account.mobile == ""
        assert account.fee == ""


class TestErrors:
    @pytest.mark.parametrize(
        "error_cls,status",
        [
            (InstructorHubError, 500),
            (ValidationError, 400),
            (AuthenticationError, 401),
            (AuthorizationError, 403),
            (NotFoundError, 404),
            (ConfigurationError, 500),
            (ProviderUnavailableError, 500),
        ],
    )
    def test_status_codes(self, error_cls: type[InstructorHubError], status: int) -> None:
        assert error_cls("x").status_code == status

    def test_str_prefixes_provider(self) -> None:
        error = ProviderUnavailableError("Sheets API returned 503", provider_name="google_sheets")

        assert str(error) == "[google_sheets] Sheets API returned 503"
        assert error.message == "Sheets API returned 503"

    def test_str_without_provider(self) -> None:
        assert str(ValidationError("Please fill in all fields.")) == "Please fill in all fields."

    def test_all_inherit_from_base(self) -> None:
        assert issubclass(NotFoundError, InstructorHubError)
        assert issubclass(ProviderUnavailableError, InstructorHubError)
