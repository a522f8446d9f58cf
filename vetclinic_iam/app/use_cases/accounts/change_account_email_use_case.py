"""
Change Account Email Use Case

Changes an account's email and invalidates its outstanding reset tokens.
"""

from uuid import UUID

from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.domain import permissions
from vetclinic_iam.domain.entities import AuditEvent, Capability, normalize_email
from vetclinic_iam.libs.result import Error, Result, Return
from .dtos import AccountResponse


class ChangeAccountEmailUseCase:
    """
    Use case for changing an account's email address.

    Business Rules:
    - An account may change its own email
    - Otherwise the actor needs edit_accounts and must be able to manage the target
    - New email must be unused (case-insensitive), deleted accounts included
    - Outstanding reset tokens were mailed to the old address and are revoked
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor_id: UUID, account_id: UUID, new_email: str) -> Result[AccountResponse]:
        async with self.uow:
            actor = await self.uow.accounts.get_by_id(actor_id)
            if actor is None:
                return Return.err(Error("UNAUTHORIZED", "You are not allowed to edit accounts"))

            target = await self.uow.accounts.get_by_id(account_id)
            if target is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            is_self = target.id == actor.id
            if not is_self and not (
                permissions.has_capability(actor, Capability.edit_accounts)
                and permissions.can_manage(actor, target)
            ):
                return Return.err(
                    Error("UNAUTHORIZED", "You are not allowed to edit this account")
                )

            email = normalize_email(new_email)
            if email == target.email:
                return Return.ok(AccountResponse.from_account(target))

            if await self.uow.accounts.get_by_email(email, include_deleted=True) is not None:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "An account with this email already exists")
                )

            old_email = target.email
            target.email = email
            target = await self.uow.accounts.update(target)

            revoked = await self.uow.password_reset_tokens.delete_for_account(target.id)

            audit_event = AuditEvent(
                account_id=target.id,
                actor_id=actor.id,
                action="account_email_changed",
                event_metadata={
                    "old_email": old_email,
                    "new_email": email,
                    "reset_tokens_revoked": revoked,
                },
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

            return Return.ok(AccountResponse.from_account(target))
