"""
Delete Account Use Case

Soft-deletes an account and revokes its reset tokens.
"""

from datetime import datetime
from uuid import UUID

from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.domain import permissions
from vetclinic_iam.domain.entities import AuditEvent, Capability
from vetclinic_iam.libs.result import Error, Result, Return
from .dtos import DeleteAccountResponse


class DeleteAccountUseCase:
    """
    Use case for removing an account.

    Business Rules:
    - Actor needs delete_accounts and must be able to manage the target
    - Nobody deletes their own account here
    - Row is kept with deleted_at set; lookups stop returning it
    - Reset tokens of the removed account are deleted
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor_id: UUID, account_id: UUID) -> Result[DeleteAccountResponse]:
        async with self.uow:
            actor = await self.uow.accounts.get_by_id(actor_id)

            if not permissions.has_capability(actor, Capability.delete_accounts):
                return Return.err(Error("UNAUTHORIZED", "You are not allowed to delete accounts"))

            target = await self.uow.accounts.get_by_id(account_id)
            if target is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            if target.id == actor.id:
                return Return.err(
                    Error("CANNOT_MODIFY_SELF", "You cannot delete your own account")
                )

            if not permissions.can_manage(actor, target):
                return Return.err(
                    Error("UNAUTHORIZED", "You are not allowed to delete this account")
                )

            target.deleted_at = datetime.utcnow()
            await self.uow.accounts.update(target)

            revoked = await self.uow.password_reset_tokens.delete_for_account(target.id)

            audit_event = AuditEvent(
                account_id=target.id,
                actor_id=actor.id,
                action="account_deleted",
                event_metadata={"reset_tokens_revoked": revoked},
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

            return Return.ok(
                DeleteAccountResponse(
                    status="deleted",
                    account_id=str(target.id),
                    reset_tokens_revoked=revoked,
                )
            )
