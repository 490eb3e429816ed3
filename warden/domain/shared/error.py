"""Error hierarchy for Warden.

Every error carries a machine-readable ``code`` alongside its message so the
HTTP layer can map it without string matching.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pydantic


class WardenError(Exception):
    """Base class for all Warden errors."""

    default_code = "error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class DomainError(WardenError):
    """Business-rule violation raised by the domain layer."""

    default_code = "domain_error"


class NotFoundError(DomainError):
    default_code = "not_found"


class ValidationError(DomainError):
    """Input rejected by a domain rule."""

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.field = field

    @classmethod
    def from_pydantic(cls, e: "pydantic.ValidationError") -> "ValidationError":
        """Report the first error pydantic found, naming the offending field."""
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or None
        return cls(f"Invalid {field}: {first['msg']}", code="invalid_field", field=field)


class ConflictError(DomainError):
    default_code = "conflict"


class InvalidStateError(DomainError):
    default_code = "invalid_state"


class AuthorizationError(DomainError):
    """Access refused. ``missing_token`` means unauthenticated, ``access_denied`` unauthorized."""

    default_code = "access_denied"


class InfrastructureError(WardenError):
    """A backing service (database, etc.) failed."""

    default_code = "infrastructure_error"


class ConfigurationError(WardenError):
    """Invalid startup configuration. Raised before the app serves requests."""

    default_code = "configuration_error"
