"""Tests for mapping Warden errors onto HTTP responses."""

import pydantic
import pytest

from warden.application.api.v1.errors import map_warden_error
from warden.domain.shared.error import (
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    InfrastructureError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)


class TestErrorMapping:
    def test_missing_token_is_401_with_challenge(self) -> None:
        exc = map_warden_error(AuthorizationError("Authentication required", code="missing_token"))
        assert exc.status_code == 401
        assert exc.headers == {"WWW-Authenticate": "Bearer"}
        assert exc.detail["code"] == "missing_token"

    def test_access_denied_is_403(self) -> None:
        exc = map_warden_error(AuthorizationError("Access denied"))
        assert exc.status_code == 403
        assert exc.detail == {"code": "access_denied", "message": "Access denied"}
        assert exc.headers is None

    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (NotFoundError("gone", code="user_not_found"), 404),
            (ConflictError("taken", code="username_taken"), 409),
            (InvalidStateError("in use", code="role_in_use"), 409),
            (InfrastructureError("db down"), 503),
            (ConfigurationError("bad table"), 500),
        ],
    )
    def test_status_codes(self, error, status: int) -> None:
        assert map_warden_error(error).status_code == status

    def test_validation_error_carries_field(self) -> None:
        exc = map_warden_error(ValidationError("bad", code="invalid_limit", field="limit"))
        assert exc.status_code == 422
        assert exc.detail == {"code": "invalid_limit", "message": "bad", "field": "limit"}

    def test_default_codes(self) -> None:
        assert NotFoundError("x").code == "not_found"
        assert AuthorizationError("x").code == "access_denied"
        assert ConfigurationError("x").code == "configuration_error"

    def test_validation_error_from_pydantic(self) -> None:
        class Profile(pydantic.BaseModel):
            email: pydantic.EmailStr

        with pytest.raises(pydantic.ValidationError) as exc_info:
            Profile(email="not-an-email")

        error = ValidationError.from_pydantic(exc_info.value)
        assert error.code == "invalid_field"
        assert error.field == "email"
        assert error.message.startswith("Invalid email:")
