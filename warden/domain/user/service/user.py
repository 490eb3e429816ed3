"""User service: profile management."""

from __future__ import annotations

import logging
from typing import Any

import pydantic

from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.role_repository import RoleAssignmentRepository
from warden.domain.shared.error import ConflictError, NotFoundError, ValidationError
from warden.domain.shared.service import Service
from warden.domain.user.model.user import User
from warden.domain.user.port.repository import UserRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"username", "firstname", "lastname", "phone", "email", "image_url"})


class UserService(Service):
    _user_repo: UserRepository
    _assignment_repo: RoleAssignmentRepository

    async def _ensure_username_free(self, username: str, user_id: UserId | None = None) -> None:
        existing = await self._user_repo.get_by_username(username)
        if existing is not None and existing.id != user_id:
            raise ConflictError(
                f"Username {username!r} is already registered", code="username_taken"
            )

    async def create(self, **fields: Any) -> User:
        await self._ensure_username_free(fields["username"])
        try:
            user = User.create(**fields)
        except pydantic.ValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        await self._user_repo.save(user)
        logger.info("User created: id=%s username=%s", user.id, user.username)
        return user

    async def get(self, user_id: UserId) -> User:
        user = await self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}", code="user_not_found")
        return user

    async def list(self, role: str | None = None) -> list[User]:
        return await self._user_repo.list(role=role)

    async def update(self, user_id: UserId, changes: dict[str, Any]) -> User:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {sorted(unknown)}", code="invalid_update_fields"
            )
        if not changes:
            raise ValidationError("No fields to update", code="empty_update")

        user = await self.get(user_id)
        if "username" in changes and changes["username"] != user.username:
            await self._ensure_username_free(changes["username"], user_id)
        try:
            user.apply(changes)
        except pydantic.ValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        await self._user_repo.save(user)
        logger.info("User updated: id=%s fields=%s", user_id, sorted(changes))
        return user

    async def delete(self, user_id: UserId) -> None:
        """Delete a user and every role assignment they hold."""
        await self.get(user_id)
        removed = await self._assignment_repo.delete_by_user_id(user_id)
        await self._user_repo.delete(user_id)
        logger.info("User deleted: id=%s (removed %d role assignment(s))", user_id, removed)

    async def roles_of(self, user_id: UserId) -> list[str]:
        return sorted(a.role for a in await self._assignment_repo.get_by_user_id(user_id))
