"""
Change Account Role Use Case

Changes an account's role and administrator tier.
"""

import logging
from typing import Optional
from uuid import UUID

from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.domain import permissions
from vetclinic_iam.domain.entities import AdminTier, AuditEvent, Capability, Role
from vetclinic_iam.libs.result import Error, Result, Return
from .dtos import AccountResponse

logger = logging.getLogger(__name__)


class ChangeAccountRoleUseCase:
    """
    Use case for changing an account's role/tier.

    Business Rules:
    - Actor needs edit_accounts
    - Actor must be able to manage the target as it is now (can_manage)
      and to assign the target's new role/tier (can_assign_role)
    - Nobody changes their own role
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor_id: UUID,
        account_id: UUID,
        new_role: str,
        new_admin_tier: Optional[str] = None,
    ) -> Result[AccountResponse]:
        async with self.uow:
            actor = await self.uow.accounts.get_by_id(actor_id)

            if not permissions.has_capability(actor, Capability.edit_accounts):
                return Return.err(Error("UNAUTHORIZED", "You are not allowed to edit accounts"))

            target = await self.uow.accounts.get_by_id(account_id)
            if target is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            if target.id == actor.id:
                return Return.err(
                    Error("CANNOT_MODIFY_SELF", "You cannot change your own role")
                )

            if not (
                permissions.can_manage(actor, target)
                and permissions.can_assign_role(actor, new_role, new_admin_tier)
            ):
                logger.warning(
                    f"Account {actor_id} denied changing {account_id} to "
                    f"role={new_role} tier={new_admin_tier}"
                )
                return Return.err(
                    Error("UNAUTHORIZED", "You are not allowed to assign this role to this account")
                )

            old_role = target.role.value
            old_tier = target.admin_tier.value if target.admin_tier else None

            target.role = Role(new_role)
            target.admin_tier = AdminTier(new_admin_tier) if new_admin_tier else None
            target = await self.uow.accounts.update(target)

            audit_event = AuditEvent(
                account_id=target.id,
                actor_id=actor.id,
                action="account_role_changed",
                event_metadata={
                    "old_role": old_role,
                    "old_admin_tier": old_tier,
                    "new_role": new_role,
                    "new_admin_tier": new_admin_tier,
                },
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

            return Return.ok(AccountResponse.from_account(target))
