"""Unit tests for AuthorizationService."""

from unittest.mock import AsyncMock

import pytest

from warden.domain.auth.model.report import MaintenanceAction
from warden.domain.auth.model.role_assignment import RoleAssignment
from warden.domain.auth.model.role_record import RoleRecord
from warden.domain.auth.model.value import UserId
from warden.domain.auth.service.authorization import AuthorizationService
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.role import RoleName
from warden.domain.shared.error import ConflictError, InvalidStateError, NotFoundError
from warden.domain.user.model.user import User


def _make_user(username: str = "jdoe") -> User:
    return User.create(
        username=username,
        firstname="Jane",
        lastname="Doe",
        phone="+1 555 0100",
        email=f"{username}@example.com",
    )


def _record(name: str) -> RoleRecord:
    return RoleRecord.create(RoleName(name))


def make_service(
    role_repo: AsyncMock | None = None,
    assignment_repo: AsyncMock | None = None,
    user_repo: AsyncMock | None = None,
    base_role: str = "admin",
) -> AuthorizationService:
    return AuthorizationService(
        _role_repo=role_repo or AsyncMock(),
        _assignment_repo=assignment_repo or AsyncMock(),
        _user_repo=user_repo or AsyncMock(),
        _evaluator=AccessPolicyEvaluator(),
        _base_role=base_role,
    )


class TestAssignRole:
    @pytest.mark.asyncio
    async def test_assign_role_success(self) -> None:
        user = _make_user()
        admin_id = UserId.generate()
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("developer")
        user_repo = AsyncMock()
        user_repo.get.return_value = user
        assignment_repo = AsyncMock()
        assignment_repo.get.return_value = None

        service = make_service(role_repo, assignment_repo, user_repo)
        assignment = await service.assign_role(user.id, RoleName("developer"), admin_id)

        assert assignment.user_id == user.id
        assert assignment.role == "developer"
        assert assignment.assigned_by == admin_id
        assignment_repo.save.assert_awaited_once_with(assignment)

    @pytest.mark.asyncio
    async def test_assign_unknown_role(self) -> None:
        role_repo = AsyncMock()
        role_repo.get.return_value = None
        service = make_service(role_repo=role_repo)

        with pytest.raises(NotFoundError) as exc_info:
            await service.assign_role(UserId.generate(), RoleName("ghost"), None)
        assert exc_info.value.code == "role_not_found"

    @pytest.mark.asyncio
    async def test_assign_to_missing_user(self) -> None:
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("admin")
        user_repo = AsyncMock()
        user_repo.get.return_value = None
        service = make_service(role_repo=role_repo, user_repo=user_repo)

        with pytest.raises(NotFoundError) as exc_info:
            await service.assign_role(UserId.generate(), RoleName("admin"), None)
        assert exc_info.value.code == "user_not_found"

    @pytest.mark.asyncio
    async def test_assign_duplicate_role(self) -> None:
        user = _make_user()
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("admin")
        user_repo = AsyncMock()
        user_repo.get.return_value = user
        assignment_repo = AsyncMock()
        assignment_repo.get.return_value = RoleAssignment.create(user.id, "admin", None)
        service = make_service(role_repo, assignment_repo, user_repo)

        with pytest.raises(ConflictError) as exc_info:
            await service.assign_role(user.id, RoleName("admin"), None)
        assert exc_info.value.code == "role_already_assigned"
        assignment_repo.save.assert_not_awaited()


class TestRevokeRole:
    @pytest.mark.asyncio
    async def test_revoke_success(self) -> None:
        assignment_repo = AsyncMock()
        assignment_repo.delete.return_value = True
        service = make_service(assignment_repo=assignment_repo)
        user_id = UserId.generate()

        await service.revoke_role(user_id, RoleName("admin"))
        assignment_repo.delete.assert_awaited_once_with(user_id, "admin")

    @pytest.mark.asyncio
    async def test_revoke_not_assigned(self) -> None:
        assignment_repo = AsyncMock()
        assignment_repo.delete.return_value = False
        service = make_service(assignment_repo=assignment_repo)

        with pytest.raises(NotFoundError) as exc_info:
            await service.revoke_role(UserId.generate(), RoleName("admin"))
        assert exc_info.value.code == "role_not_assigned"


class TestChangeRole:
    @pytest.mark.asyncio
    async def test_replaces_old_role(self) -> None:
        user = _make_user()
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("developer")
        user_repo = AsyncMock()
        user_repo.get.return_value = user
        assignment_repo = AsyncMock()
        assignment_repo.get.return_value = None
        service = make_service(role_repo, assignment_repo, user_repo)

        assignment = await service.change_role(
            user.id, RoleName("developer"), RoleName("admin"), None
        )

        assignment_repo.delete.assert_awaited_once_with(user.id, "admin")
        assert assignment.role == "developer"
        assignment_repo.save.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_already_holding_new_role_is_idempotent(self) -> None:
        user = _make_user()
        held = RoleAssignment.create(user.id, "developer", None)
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("developer")
        user_repo = AsyncMock()
        user_repo.get.return_value = user
        assignment_repo = AsyncMock()
        assignment_repo.get.return_value = held
        service = make_service(role_repo, assignment_repo, user_repo)

        assignment = await service.change_role(user.id, RoleName("developer"), None, None)

        assert assignment is held
        assignment_repo.delete.assert_not_awaited()
        assignment_repo.save.assert_not_awaited()


class TestClearRoles:
    @pytest.mark.asyncio
    async def test_returns_sorted_removed_names(self) -> None:
        user = _make_user()
        user_repo = AsyncMock()
        user_repo.get.return_value = user
        assignment_repo = AsyncMock()
        assignment_repo.get_by_user_id.return_value = [
            RoleAssignment.create(user.id, "developer", None),
            RoleAssignment.create(user.id, "admin", None),
        ]
        service = make_service(assignment_repo=assignment_repo, user_repo=user_repo)

        removed = await service.clear_roles(user.id)

        assert removed == ["admin", "developer"]
        assignment_repo.delete_by_user_id.assert_awaited_once_with(user.id)


class TestRoleAdministration:
    @pytest.mark.asyncio
    async def test_create_role(self) -> None:
        role_repo = AsyncMock()
        role_repo.get.return_value = None
        service = make_service(role_repo=role_repo)

        record = await service.create_role(RoleName("auditor"))

        assert record.name == "auditor"
        role_repo.save.assert_awaited_once_with(record)

    @pytest.mark.asyncio
    async def test_create_existing_role(self) -> None:
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("auditor")
        service = make_service(role_repo=role_repo)

        with pytest.raises(ConflictError) as exc_info:
            await service.create_role(RoleName("auditor"))
        assert exc_info.value.code == "role_exists"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["super_admin", "developer", "admin"])
    async def test_builtin_roles_cannot_be_deleted(self, name: str) -> None:
        role_repo = AsyncMock()
        service = make_service(role_repo=role_repo)

        with pytest.raises(InvalidStateError) as exc_info:
            await service.delete_role(RoleName(name))
        assert exc_info.value.code == "role_protected"
        role_repo.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_role_in_use_cannot_be_deleted(self) -> None:
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("auditor")
        assignment_repo = AsyncMock()
        assignment_repo.get_by_role.return_value = [
            RoleAssignment.create(UserId.generate(), "auditor", None)
        ]
        service = make_service(role_repo=role_repo, assignment_repo=assignment_repo)

        with pytest.raises(InvalidStateError) as exc_info:
            await service.delete_role(RoleName("auditor"))
        assert exc_info.value.code == "role_in_use"

    @pytest.mark.asyncio
    async def test_delete_empty_role(self) -> None:
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("auditor")
        assignment_repo = AsyncMock()
        assignment_repo.get_by_role.return_value = []
        service = make_service(role_repo=role_repo, assignment_repo=assignment_repo)

        await service.delete_role(RoleName("auditor"))
        role_repo.delete.assert_awaited_once_with("auditor")

    @pytest.mark.asyncio
    async def test_list_all_roles_orders_by_level(self) -> None:
        member = UserId.generate()
        role_repo = AsyncMock()
        role_repo.list.return_value = [
            _record("admin"),
            _record("auditor"),
            _record("super_admin"),
        ]
        assignment_repo = AsyncMock()
        assignment_repo.get_by_role.side_effect = lambda name: (
            [RoleAssignment.create(member, name, None)] if name == "admin" else []
        )
        service = make_service(role_repo=role_repo, assignment_repo=assignment_repo)

        summaries = await service.list_all_roles()

        assert [s.definition.name for s in summaries] == ["super_admin", "admin", "auditor"]
        admin = summaries[1]
        assert admin.recognized
        assert admin.members == [member]
        assert admin.member_count == 1
        assert not summaries[2].recognized
        assert summaries[2].definition.level == 0

    @pytest.mark.asyncio
    async def test_setup_initial_roles_is_idempotent(self) -> None:
        stored = {"admin"}
        role_repo = AsyncMock()
        role_repo.get.side_effect = lambda name: _record(name) if name in stored else None
        role_repo.save.side_effect = lambda record: stored.add(record.name)
        service = make_service(role_repo=role_repo)

        first = await service.setup_initial_roles()
        assert first.required == ["super_admin", "developer", "admin"]
        assert first.created == ["super_admin", "developer"]
        assert first.already_existed == ["admin"]

        second = await service.setup_initial_roles()
        assert second.created == []
        assert second.already_existed == ["super_admin", "developer", "admin"]


class TestSystemStats:
    @pytest.mark.asyncio
    async def test_percentages_and_coverage(self) -> None:
        user_repo = AsyncMock()
        user_repo.count.return_value = 3
        user_repo.list_without_roles.return_value = [_make_user("lonely")]
        role_repo = AsyncMock()
        role_repo.list.return_value = [_record("admin"), _record("developer")]
        assignment_repo = AsyncMock()
        assignment_repo.count_by_role.return_value = {"admin": 2}
        service = make_service(role_repo, assignment_repo, user_repo)

        stats = await service.system_stats()

        assert stats.total_users == 3
        assert stats.total_roles == 2
        assert stats.users_without_roles == 1
        assert stats.active_users == 2
        assert stats.coverage == 66.7
        shares = {s.definition.name: s for s in stats.role_breakdown}
        assert shares["admin"].percentage == 66.7
        assert shares["developer"].user_count == 0
        assert shares["developer"].percentage == 0.0
        assert [s.definition.name for s in stats.role_breakdown] == ["developer", "admin"]

    @pytest.mark.asyncio
    async def test_no_users(self) -> None:
        user_repo = AsyncMock()
        user_repo.count.return_value = 0
        user_repo.list_without_roles.return_value = []
        role_repo = AsyncMock()
        role_repo.list.return_value = [_record("admin")]
        assignment_repo = AsyncMock()
        assignment_repo.count_by_role.return_value = {}
        service = make_service(role_repo, assignment_repo, user_repo)

        stats = await service.system_stats()
        assert stats.coverage == 0.0
        assert stats.role_breakdown[0].percentage == 0.0


class TestMaintenance:
    @pytest.mark.asyncio
    async def test_cleanup_removes_only_empty_custom_roles(self) -> None:
        role_repo = AsyncMock()
        role_repo.list.return_value = [
            _record("admin"),
            _record("auditor"),
            _record("support"),
        ]
        assignment_repo = AsyncMock()
        assignment_repo.count_by_role.return_value = {"support": 1}
        service = make_service(role_repo=role_repo, assignment_repo=assignment_repo)

        report = await service.run_maintenance(MaintenanceAction.CLEANUP, None)

        assert report.deleted_roles == ["auditor"]
        assert report.assigned_users == []
        role_repo.delete.assert_awaited_once_with("auditor")

    @pytest.mark.asyncio
    async def test_assign_default_roles(self) -> None:
        performer = UserId.generate()
        lonely = _make_user("lonely")
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("admin")
        user_repo = AsyncMock()
        user_repo.list_without_roles.return_value = [lonely]
        assignment_repo = AsyncMock()
        service = make_service(role_repo, assignment_repo, user_repo)

        report = await service.run_maintenance(MaintenanceAction.ASSIGN_DEFAULT_ROLES, performer)

        assert report.default_role == "admin"
        assert report.assigned_users == [lonely.id]
        saved = assignment_repo.save.await_args.args[0]
        assert saved.role == "admin"
        assert saved.assigned_by == performer

    @pytest.mark.asyncio
    async def test_assign_default_roles_requires_base_role(self) -> None:
        role_repo = AsyncMock()
        role_repo.get.return_value = None
        service = make_service(role_repo=role_repo, base_role="viewer")

        with pytest.raises(NotFoundError) as exc_info:
            await service.run_maintenance(MaintenanceAction.ASSIGN_DEFAULT_ROLES, None)
        assert exc_info.value.code == "role_not_found"

    @pytest.mark.asyncio
    async def test_all_keeps_empty_custom_base_role(self) -> None:
        lonely = _make_user("lonely")
        role_repo = AsyncMock()
        role_repo.get.return_value = _record("viewer")
        role_repo.list.return_value = [_record("admin"), _record("viewer"), _record("temp")]
        assignment_repo = AsyncMock()
        assignment_repo.count_by_role.return_value = {}
        user_repo = AsyncMock()
        user_repo.list_without_roles.return_value = [lonely]
        service = make_service(role_repo, assignment_repo, user_repo, base_role="viewer")

        report = await service.run_maintenance(MaintenanceAction.ALL, None)

        assert report.deleted_roles == ["temp"]
        role_repo.delete.assert_awaited_once_with("temp")
        assert report.default_role == "viewer"
        assert report.assigned_users == [lonely.id]
        assert assignment_repo.save.await_args.args[0].role == "viewer"

    @pytest.mark.asyncio
    async def test_all_with_missing_base_role_deletes_nothing(self) -> None:
        role_repo = AsyncMock()
        role_repo.get.return_value = None
        role_repo.list.return_value = [_record("temp")]
        assignment_repo = AsyncMock()
        assignment_repo.count_by_role.return_value = {}
        service = make_service(role_repo, assignment_repo, base_role="viewer")

        with pytest.raises(NotFoundError) as exc_info:
            await service.run_maintenance(MaintenanceAction.ALL, None)

        assert exc_info.value.code == "role_not_found"
        role_repo.delete.assert_not_awaited()
        assignment_repo.save.assert_not_awaited()
