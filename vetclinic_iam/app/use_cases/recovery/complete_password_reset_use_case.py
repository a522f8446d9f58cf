"""
Complete Password Reset Use Case

Consumes a reset token and sets the new password.
"""

import logging
from datetime import datetime

from vetclinic_iam.app.services.email_sender import EmailSender
from vetclinic_iam.app.services.password_policy import PasswordPolicy
from vetclinic_iam.app.services.passwords import hash_password
from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.domain.entities import AuditEvent
from vetclinic_iam.libs.result import Error, Result, Return
from .dtos import CompletePasswordResetResponse
from .token_lookup import INVALID_TOKEN_ERROR, find_active_token

logger = logging.getLogger(__name__)


class CompletePasswordResetUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - Token is re-validated under the same rules as ValidateResetTokenUseCase
    - New password must satisfy the configured PasswordPolicy
    - Token consumption is a compare-and-set: of two concurrent calls with
      the same secret exactly one succeeds, the other gets INVALID_OR_EXPIRED_TOKEN
    - Password is hashed with bcrypt (cost factor 12)
    - Expired tokens of other accounts are swept in the same transaction
    - Confirmation notification failure does not undo the reset

    Errors:
        - INVALID_OR_EXPIRED_TOKEN: Unknown, used or expired token
        - WEAK_PASSWORD: details["unmet_rules"] lists every failed rule
    """

    def __init__(
        self,
        uow: UnitOfWork,
        email_sender: EmailSender,
        password_policy: PasswordPolicy = PasswordPolicy(),
    ):
        self.uow = uow
        self.email_sender = email_sender
        self.password_policy = password_policy

    async def execute(self, secret: str, new_password: str) -> Result[CompletePasswordResetResponse]:
        now = datetime.utcnow()

        async with self.uow:
            token = await find_active_token(self.uow, secret, now)
            if token is None:
                return Return.err(INVALID_TOKEN_ERROR)

            unmet_rules = self.password_policy.unmet_rules(new_password)
            if unmet_rules:
                return Return.err(
                    Error(
                        "WEAK_PASSWORD",
                        unmet_rules[0],
                        details={"unmet_rules": unmet_rules},
                    )
                )

            # Lost a race with another completion of the same token
            if not await self.uow.password_reset_tokens.mark_used(token.id, now):
                return Return.err(INVALID_TOKEN_ERROR)

            # Removing an account deletes its tokens, so a miss here means the
            # account went away mid-request; leaving without commit rolls back
            updated = await self.uow.accounts.update_password_hash(
                token.account_id, hash_password(new_password)
            )
            if not updated:
                return Return.err(INVALID_TOKEN_ERROR)

            swept = await self.uow.password_reset_tokens.delete_expired(now)

            audit_event = AuditEvent(
                account_id=token.account_id,
                action="password_reset_completed",
                event_metadata={
                    "token_id": str(token.id),
                    "expired_tokens_swept": swept,
                },
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

            account_email = token.account_email
            logger.info(f"Password reset token {token.id} consumed for account {token.account_id}")

        try:
            await self.email_sender.send_password_changed_notification(account_email)
        except Exception:
            logger.exception(f"Password changed notification failed for {account_email}")

        return Return.ok(
            CompletePasswordResetResponse(
                status="success",
                message="Password reset successful. You can now log in with your new password.",
            )
        )
