"""PermissionKind: the closed set of operations a role can be granted."""

from enum import StrEnum

from warden.domain.shared.error import ValidationError


class PermissionKind(StrEnum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE_ROLES = "manage_roles"

    @classmethod
    def parse(cls, value: str) -> "PermissionKind":
        """Parse a permission name. Accepts the camelCase ``manageRoles`` spelling too.

        Raises:
            ValidationError: If ``value`` names no known permission.
        """
        normalized = value.strip()
        if normalized == "manageRoles":
            normalized = cls.MANAGE_ROLES.value
        try:
            return cls(normalized.lower())
        except ValueError:
            raise ValidationError(
                f"Unknown permission kind: {value!r}",
                code="unknown_permission",
                field="kind",
            ) from None
