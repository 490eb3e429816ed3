"""Value objects for the auth domain."""

from uuid import UUID, uuid4

from pydantic import RootModel


class UserId(RootModel[UUID]):
    """Unique identifier for a User."""

    @classmethod
    def generate(cls) -> "UserId":
        return cls(uuid4())

    @classmethod
    def parse(cls, value: str) -> "UserId":
        """Parse a UUID string from the API, raising ValidationError if malformed."""
        from warden.domain.shared.error import ValidationError

        try:
            return cls(UUID(value))
        except ValueError:
            raise ValidationError(
                f"Invalid user id: {value!r}", code="invalid_user_id", field="user_id"
            ) from None

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)
