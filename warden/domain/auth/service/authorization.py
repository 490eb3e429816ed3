"""Authorization service: role administration and role assignment management."""

import logging

from warden.domain.auth.model.report import (
    MaintenanceAction,
    MaintenanceReport,
    RoleShare,
    RoleSummary,
    SetupReport,
    SystemStats,
)
from warden.domain.auth.model.role_assignment import RoleAssignment
from warden.domain.auth.model.role_record import RoleRecord
from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.role_repository import RoleAssignmentRepository, RoleRepository
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.policy_table import CANONICAL_ROLE_NAMES
from warden.domain.shared.authorization.role import RoleName
from warden.domain.shared.error import ConflictError, InvalidStateError, NotFoundError
from warden.domain.shared.service import Service
from warden.domain.user.model.user import User
from warden.domain.user.port.repository import UserRepository

logger = logging.getLogger(__name__)


class AuthorizationService(Service):
    """Manages stored roles and the users assigned to them."""

    _role_repo: RoleRepository
    _assignment_repo: RoleAssignmentRepository
    _user_repo: UserRepository
    _evaluator: AccessPolicyEvaluator
    _base_role: str = "admin"

    async def _require_user(self, user_id: UserId) -> User:
        user = await self._user_repo.get(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}", code="user_not_found")
        return user

    async def _require_role(self, name: str) -> RoleRecord:
        role = await self._role_repo.get(name)
        if role is None:
            raise NotFoundError(f"Role not found: {name}", code="role_not_found")
        return role

    # -- assignments --------------------------------------------------------

    async def assign_role(
        self,
        user_id: UserId,
        role: RoleName,
        assigned_by: UserId | None,
    ) -> RoleAssignment:
        """Assign a role to a user. Raises ConflictError if already assigned."""
        name = str(role)
        await self._require_role(name)
        await self._require_user(user_id)

        existing = await self._assignment_repo.get(user_id, name)
        if existing is not None:
            raise ConflictError(
                f"Role {name} already assigned to user {user_id}",
                code="role_already_assigned",
            )

        assignment = RoleAssignment.create(user_id=user_id, role=name, assigned_by=assigned_by)
        await self._assignment_repo.save(assignment)
        logger.info("Role assigned: user=%s role=%s by=%s", user_id, name, assigned_by)
        return assignment

    async def revoke_role(self, user_id: UserId, role: RoleName) -> None:
        """Revoke a role from a user. Raises NotFoundError if not assigned."""
        deleted = await self._assignment_repo.delete(user_id, str(role))
        if not deleted:
            raise NotFoundError(
                f"Role {role} not assigned to user {user_id}",
                code="role_not_assigned",
            )
        logger.info("Role revoked: user=%s role=%s", user_id, role)

    async def change_role(
        self,
        user_id: UserId,
        new_role: RoleName,
        old_role: RoleName | None,
        assigned_by: UserId | None,
    ) -> RoleAssignment:
        """Move a user from ``old_role`` (if held) to ``new_role``.

        ``new_role`` must exist. Holding ``new_role`` already is not an error.
        """
        await self._require_user(user_id)
        await self._require_role(str(new_role))

        if old_role is not None and old_role != new_role:
            await self._assignment_repo.delete(user_id, str(old_role))

        existing = await self._assignment_repo.get(user_id, str(new_role))
        if existing is not None:
            return existing

        assignment = RoleAssignment.create(
            user_id=user_id, role=str(new_role), assigned_by=assigned_by
        )
        await self._assignment_repo.save(assignment)
        logger.info(
            "Role changed: user=%s from=%s to=%s", user_id, old_role or "none", new_role
        )
        return assignment

    async def clear_roles(self, user_id: UserId) -> list[str]:
        """Remove every role of a user. Returns the removed role names."""
        await self._require_user(user_id)
        assignments = await self._assignment_repo.get_by_user_id(user_id)
        await self._assignment_repo.delete_by_user_id(user_id)
        removed = sorted(a.role for a in assignments)
        logger.info("Roles cleared: user=%s removed=%s", user_id, removed)
        return removed

    async def list_roles(self, user_id: UserId) -> list[RoleAssignment]:
        """List all role assignments for a user."""
        return await self._assignment_repo.get_by_user_id(user_id)

    # -- role administration ------------------------------------------------

    async def create_role(self, name: RoleName) -> RoleRecord:
        if await self._role_repo.get(str(name)) is not None:
            raise ConflictError(f"Role {name} already exists", code="role_exists")
        record = RoleRecord.create(name)
        await self._role_repo.save(record)
        if not self._evaluator.table.is_recognized(str(name)):
            logger.warning("Role %s created but has no policy entry; it grants nothing", name)
        return record

    async def delete_role(self, name: RoleName) -> None:
        role = str(name)
        if role in CANONICAL_ROLE_NAMES:
            raise InvalidStateError(
                f"Role {role} is a built-in role and cannot be deleted",
                code="role_protected",
            )
        await self._require_role(role)

        members = await self._assignment_repo.get_by_role(role)
        if members:
            raise InvalidStateError(
                f"Role {role} still has {len(members)} user(s) assigned",
                code="role_in_use",
            )
        await self._role_repo.delete(role)
        logger.info("Role deleted: %s", role)

    async def list_all_roles(self) -> list[RoleSummary]:
        """Every stored role with its definition and members, most privileged first."""
        summaries: list[RoleSummary] = []
        for record in await self._role_repo.list():
            assignments = await self._assignment_repo.get_by_role(record.name)
            summaries.append(
                RoleSummary(
                    definition=self._evaluator.capabilities_of(record.name),
                    recognized=self._evaluator.table.is_recognized(record.name),
                    members=[a.user_id for a in assignments],
                )
            )
        summaries.sort(key=lambda s: (-s.definition.level, s.definition.name))
        return summaries

    async def setup_initial_roles(self) -> SetupReport:
        """Ensure every role in the policy table is stored. Idempotent."""
        required = [r.name for r in self._evaluator.table.roles()]
        created: list[str] = []
        for name in required:
            if await self._role_repo.get(name) is None:
                await self._role_repo.save(RoleRecord.create(RoleName(name)))
                created.append(name)
        if created:
            logger.info("Initial roles created: %s", created)
        return SetupReport(required=required, created=created)

    async def users_without_roles(self) -> list[User]:
        return await self._user_repo.list_without_roles()

    async def system_stats(self) -> SystemStats:
        total_users = await self._user_repo.count()
        roles = await self._role_repo.list()
        counts = await self._assignment_repo.count_by_role()
        without = len(await self._user_repo.list_without_roles())

        breakdown = [
            RoleShare(
                definition=self._evaluator.capabilities_of(r.name),
                user_count=counts.get(r.name, 0),
                percentage=(
                    round(counts.get(r.name, 0) / total_users * 100, 1) if total_users else 0.0
                ),
            )
            for r in roles
        ]
        breakdown.sort(key=lambda s: (-s.definition.level, s.definition.name))

        return SystemStats(
            total_users=total_users,
            total_roles=len(roles),
            users_without_roles=without,
            role_breakdown=breakdown,
        )

    async def run_maintenance(
        self,
        action: MaintenanceAction,
        performed_by: UserId | None,
    ) -> MaintenanceReport:
        report = MaintenanceReport(action=action)
        assign_defaults = action in (MaintenanceAction.ASSIGN_DEFAULT_ROLES, MaintenanceAction.ALL)
        if assign_defaults:
            await self._require_role(self._base_role)

        if action in (MaintenanceAction.CLEANUP, MaintenanceAction.ALL):
            kept = CANONICAL_ROLE_NAMES | {self._base_role}
            counts = await self._assignment_repo.count_by_role()
            for record in await self._role_repo.list():
                if record.name in kept or counts.get(record.name, 0):
                    continue
                await self._role_repo.delete(record.name)
                report.deleted_roles.append(record.name)
            logger.info("Maintenance cleanup removed %d empty role(s)", len(report.deleted_roles))

        if assign_defaults:
            report.default_role = self._base_role
            for user in await self._user_repo.list_without_roles():
                await self._assignment_repo.save(
                    RoleAssignment.create(
                        user_id=user.id, role=self._base_role, assigned_by=performed_by
                    )
                )
                report.assigned_users.append(user.id)
            logger.info(
                "Maintenance assigned %s to %d user(s)",
                self._base_role,
                len(report.assigned_users),
            )

        return report
