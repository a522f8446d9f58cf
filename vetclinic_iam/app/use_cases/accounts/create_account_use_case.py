"""
Create Account Use Case

Provisions a pet owner, veterinarian or administrator account.
"""

import logging
from uuid import UUID

from vetclinic_iam.app.services.password_policy import PasswordPolicy
from vetclinic_iam.app.services.passwords import hash_password
from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.domain import permissions
from vetclinic_iam.domain.entities import (
    Account,
    AdminTier,
    AuditEvent,
    Capability,
    Role,
    normalize_email,
)
from vetclinic_iam.libs.result import Error, Result, Return
from .dtos import AccountResponse, CreateAccountCommand

logger = logging.getLogger(__name__)


class CreateAccountUseCase:
    """
    Use case for provisioning an account.

    Business Rules:
    - Actor needs create_accounts and must pass can_assign_role for the
      requested role/tier; role and tier are re-read from the store
    - Only super admins create administrators
    - Password must satisfy the configured PasswordPolicy
    - Email must be unused (case-insensitive), deleted accounts included
    """

    def __init__(self, uow: UnitOfWork, password_policy: PasswordPolicy = PasswordPolicy()):
        self.uow = uow
        self.password_policy = password_policy

    async def execute(self, actor_id: UUID, command: CreateAccountCommand) -> Result[AccountResponse]:
        async with self.uow:
            actor = await self.uow.accounts.get_by_id(actor_id)

            if not permissions.has_capability(actor, Capability.create_accounts):
                return Return.err(
                    Error("UNAUTHORIZED", "You are not allowed to create accounts")
                )

            if not permissions.can_assign_role(actor, command.role, command.admin_tier):
                logger.warning(
                    f"Account {actor_id} denied creating role={command.role} "
                    f"tier={command.admin_tier}"
                )
                return Return.err(
                    Error("UNAUTHORIZED", "You are not allowed to assign this role")
                )

            unmet_rules = self.password_policy.unmet_rules(command.password)
            if unmet_rules:
                return Return.err(
                    Error("WEAK_PASSWORD", unmet_rules[0], details={"unmet_rules": unmet_rules})
                )

            email = normalize_email(command.email)
            if await self.uow.accounts.get_by_email(email, include_deleted=True) is not None:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "An account with this email already exists")
                )

            account = Account(
                email=email,
                password_hash=hash_password(command.password),
                role=Role(command.role),
                admin_tier=AdminTier(command.admin_tier) if command.admin_tier else None,
            )
            account = await self.uow.accounts.create(account)

            audit_event = AuditEvent(
                account_id=account.id,
                actor_id=actor.id,
                action="account_created",
                event_metadata={
                    "role": account.role.value,
                    "admin_tier": account.admin_tier.value if account.admin_tier else None,
                },
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

            return Return.ok(AccountResponse.from_account(account))
