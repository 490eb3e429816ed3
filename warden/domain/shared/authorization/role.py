"""Role names and role definitions."""

import re

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from warden.domain.shared.authorization.permission import PermissionKind

ROLE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]{0,63}$")


def check_role_name(value: str) -> str:
    if not ROLE_NAME_PATTERN.match(value):
        raise ValueError(
            f"Invalid role name {value!r}: use a lower-case letter followed by "
            "lower-case letters, digits or underscores (max 64 characters)"
        )
    return value


class RoleName(RootModel[str]):
    """Validated role name (e.g. ``super_admin``)."""

    @field_validator("root")
    @classmethod
    def validate_format(cls, v: str) -> str:
        return check_role_name(v)

    @classmethod
    def parse(cls, value: str) -> "RoleName":
        """Parse a role name from the API, raising a domain ValidationError if malformed."""
        from warden.domain.shared.error import ValidationError

        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Invalid role name: {value!r}", code="invalid_role_name", field="role"
            ) from None

    def __str__(self) -> str:
        return self.root

    def __hash__(self) -> int:
        return hash(self.root)


class RoleDefinition(BaseModel):
    """A role's place in the policy table: its level and what it may do."""

    model_config = ConfigDict(frozen=True)

    name: str
    level: int = Field(ge=0)
    capabilities: frozenset[PermissionKind] = frozenset()
    description: str = ""

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return check_role_name(v)

    def grants(self, kind: PermissionKind) -> bool:
        return kind in self.capabilities
