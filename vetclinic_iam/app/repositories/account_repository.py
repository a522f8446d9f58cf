from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from vetclinic_iam.domain.entities import Account


class IAccountRepository(ABC):
    """Account repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str, include_deleted: bool = False) -> Optional[Account]:
        """Get an account by normalized email address, non-deleted unless include_deleted"""
        pass

    @abstractmethod
    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get a non-deleted account by ID"""
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Create a new account"""
        pass

    @abstractmethod
    async def update(self, account: Account) -> Account:
        """Update existing account"""
        pass

    @abstractmethod
    async def update_password_hash(self, account_id: UUID, password_hash: str) -> bool:
        """Replace the password hash, returns False if the account is gone"""
        pass
