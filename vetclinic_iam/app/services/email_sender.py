from abc import ABC, abstractmethod


class EmailSender(ABC):
    """
    Outbound email port used by credential recovery.

    Implementations own formatting and transport. Any exception raised here is
    a delivery failure and never undoes token issuance or a password change.
    """

    @abstractmethod
    async def send_password_reset_email(
        self, to_email: str, secret: str, recovery_link: str
    ) -> None:
        pass

    @abstractmethod
    async def send_password_changed_notification(self, to_email: str) -> None:
        pass
