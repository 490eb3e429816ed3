"""Integration tests for the SQL role and role-assignment repositories."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from warden.domain.auth.model.role_assignment import RoleAssignment
from warden.domain.auth.model.role_record import RoleRecord
from warden.domain.shared.authorization.policy_table import DEFAULT_POLICY_TABLE
from warden.domain.shared.authorization.role import RoleName
from warden.domain.shared.error import ConflictError
from warden.domain.user.model.user import User
from warden.infrastructure.auth.role_repository import (
    SqlRoleAssignmentRepository,
    SqlRoleRepository,
)
from warden.infrastructure.persistence.repository.user import SqlUserRepository
from warden.infrastructure.persistence.seed import ensure_policy_roles


async def _stored_user(session: AsyncSession, username: str = "jdoe") -> User:
    user = User.create(
        username=username,
        firstname="Jane",
        lastname="Doe",
        phone="+1 555 0100",
        email=f"{username}@example.com",
    )
    await SqlUserRepository(session).save(user)
    return user


class TestSeed:
    @pytest.mark.asyncio
    async def test_policy_roles_are_seeded_once(self, engine: AsyncEngine) -> None:
        # The fixture already seeded; a second run creates nothing
        assert await ensure_policy_roles(engine, DEFAULT_POLICY_TABLE) == []

    @pytest.mark.asyncio
    async def test_seeded_roles_are_listed(self, session: AsyncSession) -> None:
        names = [r.name for r in await SqlRoleRepository(session).list()]
        assert names == ["admin", "developer", "super_admin"]


class TestSqlRoleRepository:
    @pytest.mark.asyncio
    async def test_save_get_delete(self, session: AsyncSession) -> None:
        repo = SqlRoleRepository(session)
        record = RoleRecord.create(RoleName("auditor"))

        await repo.save(record)
        fetched = await repo.get("auditor")
        assert fetched is not None
        assert fetched.created_at.tzinfo is not None

        assert await repo.delete("auditor") is True
        assert await repo.get("auditor") is None
        assert await repo.delete("auditor") is False


class TestSqlRoleAssignmentRepository:
    @pytest.mark.asyncio
    async def test_assign_and_read_back(self, session: AsyncSession) -> None:
        user = await _stored_user(session)
        repo = SqlRoleAssignmentRepository(session)
        assignment = RoleAssignment.create(user.id, "developer", None)

        await repo.save(assignment)

        fetched = await repo.get(user.id, "developer")
        assert fetched is not None
        assert fetched.id == assignment.id
        assert fetched.assigned_by is None
        assert [a.role for a in await repo.get_by_user_id(user.id)] == ["developer"]
        assert [a.user_id for a in await repo.get_by_role("developer")] == [user.id]

    @pytest.mark.asyncio
    async def test_duplicate_assignment_is_a_conflict(self, session: AsyncSession) -> None:
        user = await _stored_user(session)
        repo = SqlRoleAssignmentRepository(session)
        await repo.save(RoleAssignment.create(user.id, "admin", None))

        with pytest.raises(ConflictError) as exc_info:
            await repo.save(RoleAssignment.create(user.id, "admin", None))
        assert exc_info.value.code == "role_already_assigned"

    @pytest.mark.asyncio
    async def test_unknown_role_is_rejected(self, session: AsyncSession) -> None:
        user = await _stored_user(session)
        with pytest.raises(IntegrityError):
            await SqlRoleAssignmentRepository(session).save(
                RoleAssignment.create(user.id, "ghost", None)
            )

    @pytest.mark.asyncio
    async def test_counts_and_bulk_delete(self, session: AsyncSession) -> None:
        jane = await _stored_user(session, "jane")
        john = await _stored_user(session, "john")
        repo = SqlRoleAssignmentRepository(session)
        await repo.save(RoleAssignment.create(jane.id, "admin", None))
        await repo.save(RoleAssignment.create(jane.id, "developer", None))
        await repo.save(RoleAssignment.create(john.id, "admin", None))

        assert await repo.count_by_role() == {"admin": 2, "developer": 1}
        assert await repo.delete_by_user_id(jane.id) == 2
        assert await repo.count_by_role() == {"admin": 1}
        assert await repo.delete(john.id, "developer") is False
