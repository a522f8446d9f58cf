import logging

from vetclinic_iam.app.services.email_sender import EmailSender

logger = logging.getLogger(__name__)


class LoggingEmailSender(EmailSender):
    """
    Stand-in transport that only records dispatches in the log.

    Production deployments provide an EmailSender backed by a mail service;
    the reset secret and link are not logged.
    """

    async def send_password_reset_email(
        self, to_email: str, secret: str, recovery_link: str
    ) -> None:
        logger.info(f"Password reset email dispatched to {to_email}")

    async def send_password_changed_notification(self, to_email: str) -> None:
        logger.info(f"Password changed notification dispatched to {to_email}")
