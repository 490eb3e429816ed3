"""Repository port for User persistence."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from warden.domain.auth.model.value import UserId
from warden.domain.shared.port import Port
from warden.domain.user.model.user import User


class UserRepository(Port, Protocol):
    @abstractmethod
    async def get(self, user_id: UserId) -> User | None: ...

    @abstractmethod
    async def get_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    async def list(self, role: str | None = None) -> list[User]:
        """List users ordered by lastname, optionally only holders of ``role``."""
        ...

    @abstractmethod
    async def list_without_roles(self) -> list[User]: ...

    @abstractmethod
    async def count(self) -> int: ...

    @abstractmethod
    async def save(self, user: User) -> None:
        """Insert or update a user."""
        ...

    @abstractmethod
    async def delete(self, user_id: UserId) -> bool:
        """Delete a user. Returns True if deleted, False if not found."""
        ...
