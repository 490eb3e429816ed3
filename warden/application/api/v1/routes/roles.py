"""Role administration routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Response
from pydantic import BaseModel

from warden.domain.auth.command.assign_role import AssignRole, AssignRoleHandler, AssignRoleResult
from warden.domain.auth.command.change_role import (
    ChangeRole,
    ChangeRoleHandler,
    ChangeRoleResult,
    ClearRoles,
    ClearRolesHandler,
    ClearRolesResult,
)
from warden.domain.auth.command.revoke_role import RevokeRole, RevokeRoleHandler
from warden.domain.auth.command.role_admin import (
    CreateRole,
    CreateRoleHandler,
    CreateRoleResult,
    DeleteRole,
    DeleteRoleHandler,
    DeleteRoleResult,
    RunMaintenance,
    RunMaintenanceHandler,
    RunMaintenanceResult,
    SetupInitialRoles,
    SetupInitialRolesHandler,
    SetupInitialRolesResult,
)
from warden.domain.auth.model.report import MaintenanceAction
from warden.domain.auth.query.check_access import (
    CheckAccess,
    CheckAccessHandler,
    CheckAccessResult,
)
from warden.domain.auth.query.get_user_roles import (
    GetUserRoles,
    GetUserRolesHandler,
    GetUserRolesResult,
)
from warden.domain.auth.query.list_roles import (
    GetSystemStats,
    GetSystemStatsHandler,
    ListRoles,
    ListRolesHandler,
    ListRolesResult,
    ListUsersWithoutRoles,
    ListUsersWithoutRolesHandler,
    ListUsersWithoutRolesResult,
    SystemStatsResult,
)

router = APIRouter(tags=["Roles"], route_class=DishkaRoute)


class AssignRoleRequest(BaseModel):
    role: str


class ChangeRoleRequest(BaseModel):
    new_role: str
    old_role: str | None = None


class MaintenanceRequest(BaseModel):
    action: MaintenanceAction


@router.get("/me/access", response_model=CheckAccessResult)
async def check_access(handler: FromDishka[CheckAccessHandler]) -> CheckAccessResult:
    """What the caller's current roles allow."""
    return await handler.run(CheckAccess())


@router.get("/roles", response_model=ListRolesResult)
async def list_roles(handler: FromDishka[ListRolesHandler]) -> ListRolesResult:
    return await handler.run(ListRoles())


@router.post("/roles", response_model=CreateRoleResult, status_code=201)
async def create_role(body: CreateRole, handler: FromDishka[CreateRoleHandler]) -> CreateRoleResult:
    return await handler.run(body)


@router.post("/roles/setup", response_model=SetupInitialRolesResult)
async def setup_roles(handler: FromDishka[SetupInitialRolesHandler]) -> SetupInitialRolesResult:
    """Create any built-in roles that are missing."""
    return await handler.run(SetupInitialRoles())


@router.get("/roles/unassigned-users", response_model=ListUsersWithoutRolesResult)
async def users_without_roles(
    handler: FromDishka[ListUsersWithoutRolesHandler],
) -> ListUsersWithoutRolesResult:
    return await handler.run(ListUsersWithoutRoles())


@router.get("/roles/stats", response_model=SystemStatsResult)
async def role_stats(handler: FromDishka[GetSystemStatsHandler]) -> SystemStatsResult:
    return await handler.run(GetSystemStats())


@router.post("/roles/maintenance", response_model=RunMaintenanceResult)
async def run_maintenance(
    body: MaintenanceRequest,
    handler: FromDishka[RunMaintenanceHandler],
) -> RunMaintenanceResult:
    return await handler.run(RunMaintenance(action=body.action))


@router.delete("/roles/{name}", response_model=DeleteRoleResult)
async def delete_role(name: str, handler: FromDishka[DeleteRoleHandler]) -> DeleteRoleResult:
    return await handler.run(DeleteRole(name=name))


@router.get("/users/{user_id}/roles", response_model=GetUserRolesResult)
async def list_user_roles(
    user_id: str,
    handler: FromDishka[GetUserRolesHandler],
) -> GetUserRolesResult:
    return await handler.run(GetUserRoles(user_id=user_id))


@router.post("/users/{user_id}/roles", response_model=AssignRoleResult, status_code=201)
async def assign_role(
    user_id: str,
    body: AssignRoleRequest,
    handler: FromDishka[AssignRoleHandler],
) -> AssignRoleResult:
    return await handler.run(AssignRole(user_id=user_id, role=body.role))


@router.put("/users/{user_id}/roles", response_model=ChangeRoleResult)
async def change_role(
    user_id: str,
    body: ChangeRoleRequest,
    handler: FromDishka[ChangeRoleHandler],
) -> ChangeRoleResult:
    """Replace ``old_role`` with ``new_role``. ``old_role`` may be omitted or "none"."""
    return await handler.run(
        ChangeRole(user_id=user_id, new_role=body.new_role, old_role=body.old_role)
    )


@router.delete("/users/{user_id}/roles", response_model=ClearRolesResult)
async def clear_roles(user_id: str, handler: FromDishka[ClearRolesHandler]) -> ClearRolesResult:
    return await handler.run(ClearRoles(user_id=user_id))


@router.delete("/users/{user_id}/roles/{role}", status_code=204)
async def revoke_role(
    user_id: str,
    role: str,
    handler: FromDishka[RevokeRoleHandler],
) -> Response:
    await handler.run(RevokeRole(user_id=user_id, role=role))
    return Response(status_code=204)
