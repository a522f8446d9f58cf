"""
Request Password Reset Use Case

Issues a credential recovery token and hands it to the email port.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple
from urllib.parse import urlencode

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError

from vetclinic_iam.app.services.email_sender import EmailSender
from vetclinic_iam.app.services.passwords import generate_reset_secret, hash_reset_secret
from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.domain.entities import AuditEvent, PasswordResetToken, normalize_email
from vetclinic_iam.libs.result import Result, Return
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

RESET_REQUESTED_MESSAGE = (
    "If an account with this email exists, you will receive a password reset link shortly."
)


def build_recovery_link(base_url: str, secret: str) -> str:
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode({'token': secret})}"


class RequestPasswordResetUseCase:
    """
    Use case for requesting a password reset.

    Business Rules:
    - Secret is 32 random bytes, url-safe encoded; only its SHA-256 hash is stored
    - Token expires after the configured TTL (1 hour by default)
    - Issuing replaces any earlier token of the account in one upsert
    - No email enumeration: the response is identical whether or not the
      account exists, and store failures are logged, not surfaced
    - Email delivery failure does not undo issuance
    - With background_tasks, delivery runs after the response is sent, so
      response time does not depend on whether the account exists
    """

    def __init__(
        self,
        uow: UnitOfWork,
        email_sender: EmailSender,
        reset_url_base: str,
        token_ttl: timedelta = timedelta(hours=1),
    ):
        self.uow = uow
        self.email_sender = email_sender
        self.reset_url_base = reset_url_base
        self.token_ttl = token_ttl

    async def execute(
        self, email: str, background_tasks: Optional[BackgroundTasks] = None
    ) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: Email address as typed by the user
            background_tasks: FastAPI BackgroundTasks for email sending

        Returns:
            Result with the generic "check your email" response, always ok
        """
        response = RequestPasswordResetResponse(status="sent", message=RESET_REQUESTED_MESSAGE)

        try:
            issued = await self._issue_token(normalize_email(email))
        except SQLAlchemyError as exc:
            logger.error(f"Password reset issuance failed: {exc.__class__.__name__}")
            return Return.ok(response)

        if issued is None:
            return Return.ok(response)

        account_email, secret = issued
        if background_tasks is not None:
            background_tasks.add_task(self._deliver, account_email, secret)
        else:
            await self._deliver(account_email, secret)

        return Return.ok(response)

    async def _deliver(self, account_email: str, secret: str) -> None:
        recovery_link = build_recovery_link(self.reset_url_base, secret)
        try:
            await self.email_sender.send_password_reset_email(account_email, secret, recovery_link)
        except Exception:
            logger.exception(f"Password reset email delivery failed for {account_email}")

    async def _issue_token(self, email: str) -> Optional[Tuple[str, str]]:
        async with self.uow:
            account = await self.uow.accounts.get_by_email(email)
            if account is None:
                logger.info("Password reset requested for an unregistered email")
                return None

            now = datetime.utcnow()
            secret = generate_reset_secret()
            token = PasswordResetToken(
                account_id=account.id,
                account_email=account.email,
                token_hash=hash_reset_secret(secret),
                used=False,
                issued_at=now,
                expires_at=now + self.token_ttl,
            )
            await self.uow.password_reset_tokens.replace_for_account(token)

            audit_event = AuditEvent(
                account_id=account.id,
                action="password_reset_requested",
                event_metadata={
                    "token_id": str(token.id),
                    "expires_at": token.expires_at.isoformat(),
                },
            )
            await self.uow.audit_events.create(audit_event)

            await self.uow.commit()

            logger.info(f"Password reset token {token.id} issued for account {account.id}")
            return account.email, secret
