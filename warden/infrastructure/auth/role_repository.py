"""SQL implementations of RoleRepository and RoleAssignmentRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.auth.model.role_assignment import RoleAssignment, RoleAssignmentId
from warden.domain.auth.model.role_record import RoleRecord
from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.role_repository import RoleAssignmentRepository, RoleRepository
from warden.domain.shared.error import ConflictError
from warden.domain.shared.model.value import to_utc
from warden.infrastructure.persistence.tables import role_assignments_table, roles_table


def _row_to_role_assignment(row: dict) -> RoleAssignment:
    """Convert a database row to a RoleAssignment model."""
    return RoleAssignment(
        id=RoleAssignmentId(UUID(row["id"])),
        user_id=UserId(UUID(row["user_id"])),
        role=row["role"],
        assigned_by=UserId(UUID(row["assigned_by"])) if row["assigned_by"] else None,
        assigned_at=to_utc(row["assigned_at"]),
    )


def _role_assignment_to_dict(assignment: RoleAssignment) -> dict:
    """Convert a RoleAssignment model to a database row dict."""
    return {
        "id": str(assignment.id),
        "user_id": str(assignment.user_id),
        "role": assignment.role,
        "assigned_by": str(assignment.assigned_by) if assignment.assigned_by else None,
        "assigned_at": assignment.assigned_at,
    }


class SqlRoleRepository(RoleRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, name: str) -> RoleRecord | None:
        stmt = select(roles_table).where(roles_table.c.name == name)
        row = (await self.session.execute(stmt)).mappings().first()
        if row is None:
            return None
        return RoleRecord(name=row["name"], created_at=to_utc(row["created_at"]))

    async def list(self) -> list[RoleRecord]:
        stmt = select(roles_table).order_by(roles_table.c.name)
        rows = (await self.session.execute(stmt)).mappings().all()
        return [RoleRecord(name=r["name"], created_at=to_utc(r["created_at"])) for r in rows]

    async def save(self, role: RoleRecord) -> None:
        stmt = insert(roles_table).values(name=role.name, created_at=role.created_at)
        await self.session.execute(stmt)
        await self.session.flush()

    async def delete(self, name: str) -> bool:
        result = await self.session.execute(delete(roles_table).where(roles_table.c.name == name))
        await self.session.flush()
        return result.rowcount > 0


class SqlRoleAssignmentRepository(RoleAssignmentRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_user_id(self, user_id: UserId) -> list[RoleAssignment]:
        stmt = (
            select(role_assignments_table)
            .where(role_assignments_table.c.user_id == str(user_id))
            .order_by(role_assignments_table.c.role)
        )
        rows = (await self.session.execute(stmt)).mappings().all()
        return [_row_to_role_assignment(dict(row)) for row in rows]

    async def get_by_role(self, role: str) -> list[RoleAssignment]:
        stmt = (
            select(role_assignments_table)
            .where(role_assignments_table.c.role == role)
            .order_by(role_assignments_table.c.assigned_at)
        )
        rows = (await self.session.execute(stmt)).mappings().all()
        return [_row_to_role_assignment(dict(row)) for row in rows]

    async def get(self, user_id: UserId, role: str) -> RoleAssignment | None:
        stmt = select(role_assignments_table).where(
            role_assignments_table.c.user_id == str(user_id),
            role_assignments_table.c.role == role,
        )
        row = (await self.session.execute(stmt)).mappings().first()
        return _row_to_role_assignment(dict(row)) if row else None

    async def save(self, assignment: RoleAssignment) -> None:
        stmt = insert(role_assignments_table).values(**_role_assignment_to_dict(assignment))
        try:
            await self.session.execute(stmt)
        except IntegrityError as e:
            # Only the (user_id, role) unique constraint maps to a conflict
            if "unique" not in str(e.orig).lower():
                raise
            raise ConflictError(
                f"Role {assignment.role} already assigned to user {assignment.user_id}",
                code="role_already_assigned",
            ) from e
        await self.session.flush()

    async def delete(self, user_id: UserId, role: str) -> bool:
        stmt = delete(role_assignments_table).where(
            role_assignments_table.c.user_id == str(user_id),
            role_assignments_table.c.role == role,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_by_user_id(self, user_id: UserId) -> int:
        stmt = delete(role_assignments_table).where(
            role_assignments_table.c.user_id == str(user_id)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def count_by_role(self) -> dict[str, int]:
        stmt = select(role_assignments_table.c.role, func.count()).group_by(
            role_assignments_table.c.role
        )
        rows = (await self.session.execute(stmt)).all()
        return {role: count for role, count in rows}
