"""SQL implementation of UserRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.auth.model.value import UserId
from warden.domain.user.model.user import User
from warden.domain.user.port.repository import UserRepository
from warden.domain.shared.model.value import to_utc
from warden.infrastructure.persistence.tables import role_assignments_table, users_table


def _row_to_user(row: dict) -> User:
    return User(
        id=UserId(UUID(row["id"])),
        username=row["username"],
        firstname=row["firstname"],
        lastname=row["lastname"],
        phone=row["phone"],
        email=row["email"],
        image_url=row["image_url"],
        created_at=to_utc(row["created_at"]),
        updated_at=to_utc(row["updated_at"]),
    )


def _user_to_dict(user: User) -> dict:
    return {
        "id": str(user.id),
        "username": user.username,
        "firstname": user.firstname,
        "lastname": user.lastname,
        "phone": user.phone,
        "email": str(user.email),
        "image_url": str(user.image_url) if user.image_url else None,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


_ORDER = (users_table.c.lastname, users_table.c.firstname, users_table.c.username)


class SqlUserRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: UserId) -> User | None:
        stmt = select(users_table).where(users_table.c.id == str(user_id))
        row = (await self.session.execute(stmt)).mappings().first()
        return _row_to_user(dict(row)) if row else None

    async def get_by_username(self, username: str) -> User | None:
        stmt = select(users_table).where(users_table.c.username == username)
        row = (await self.session.execute(stmt)).mappings().first()
        return _row_to_user(dict(row)) if row else None

    async def list(self, role: str | None = None) -> list[User]:
        stmt = select(users_table).order_by(*_ORDER)
        if role is not None:
            holders = select(role_assignments_table.c.user_id).where(
                role_assignments_table.c.role == role
            )
            stmt = stmt.where(users_table.c.id.in_(holders))
        rows = (await self.session.execute(stmt)).mappings().all()
        return [_row_to_user(dict(row)) for row in rows]

    async def list_without_roles(self) -> list[User]:
        assigned = select(role_assignments_table.c.user_id)
        stmt = select(users_table).where(users_table.c.id.not_in(assigned)).order_by(*_ORDER)
        rows = (await self.session.execute(stmt)).mappings().all()
        return [_row_to_user(dict(row)) for row in rows]

    async def count(self) -> int:
        stmt = select(func.count()).select_from(users_table)
        return (await self.session.execute(stmt)).scalar_one()

    async def save(self, user: User) -> None:
        values = _user_to_dict(user)
        exists = await self.session.execute(
            select(users_table.c.id).where(users_table.c.id == values["id"])
        )
        if exists.first() is None:
            await self.session.execute(insert(users_table).values(**values))
        else:
            await self.session.execute(
                update(users_table).where(users_table.c.id == values["id"]).values(**values)
            )
        await self.session.flush()

    async def delete(self, user_id: UserId) -> bool:
        stmt = delete(users_table).where(users_table.c.id == str(user_id))
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
