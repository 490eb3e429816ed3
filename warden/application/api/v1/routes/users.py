"""User profile routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from warden.domain.user.command.manage_user import (
    CreateUser,
    CreateUserHandler,
    DeleteUser,
    DeleteUserHandler,
    DeleteUserResult,
    UpdateUser,
    UpdateUserHandler,
    UserResult,
)
from warden.domain.user.query.get_user import (
    GetMe,
    GetMeHandler,
    GetMeResult,
    GetUser,
    GetUserHandler,
    GetUserResult,
)
from warden.domain.user.query.list_users import ListUsers, ListUsersHandler, ListUsersResult

router = APIRouter(tags=["Users"], route_class=DishkaRoute)


class UpdateUserRequest(BaseModel):
    """Fields a client may change. Anything else is rejected."""

    model_config = ConfigDict(extra="forbid")

    username: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    phone: str | None = None
    email: str | None = None
    image_url: str | None = None


@router.get("/me", response_model=GetMeResult)
async def get_me(handler: FromDishka[GetMeHandler]) -> GetMeResult:
    """The caller's own profile and roles."""
    return await handler.run(GetMe())


@router.get("/users", response_model=ListUsersResult)
async def list_users(
    handler: FromDishka[ListUsersHandler],
    role: str | None = None,
) -> ListUsersResult:
    """List users by last name, optionally only those holding ``role``."""
    return await handler.run(ListUsers(role=role))


@router.post("/users", response_model=UserResult, status_code=201)
async def create_user(body: CreateUser, handler: FromDishka[CreateUserHandler]) -> UserResult:
    return await handler.run(body)


@router.get("/users/{user_id}", response_model=GetUserResult)
async def get_user(user_id: str, handler: FromDishka[GetUserHandler]) -> GetUserResult:
    return await handler.run(GetUser(user_id=user_id))


@router.patch("/users/{user_id}", response_model=UserResult)
async def update_user(
    user_id: str,
    body: UpdateUserRequest,
    handler: FromDishka[UpdateUserHandler],
) -> UserResult:
    return await handler.run(
        UpdateUser(user_id=user_id, **body.model_dump(exclude_unset=True))
    )


@router.delete("/users/{user_id}", response_model=DeleteUserResult)
async def delete_user(user_id: str, handler: FromDishka[DeleteUserHandler]) -> DeleteUserResult:
    """Delete a user together with their role assignments."""
    return await handler.run(DeleteUser(user_id=user_id))
