from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from vetclinic_iam.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def replace_for_account(self, token: PasswordResetToken) -> PasswordResetToken:
        """
        Store token as the only token of its account.

        Must be a single atomic write keyed by account_id (upsert), so two
        concurrent issuances never leave two active tokens behind.
        """
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        pass

    @abstractmethod
    async def mark_used(self, token_id: UUID, now: datetime) -> bool:
        """
        Compare-and-set: mark the token used only if it is unused and unexpired.

        Returns True for exactly one caller per token.
        """
        pass

    @abstractmethod
    async def delete_for_account(self, account_id: UUID) -> int:
        """Invalidate every token of an account, returns rows removed"""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Remove tokens whose expiry has passed, returns rows removed"""
        pass

    @abstractmethod
    async def get_stats(self, now: datetime) -> Dict[str, int]:
        """Counts of total, active, expired and used tokens"""
        pass
