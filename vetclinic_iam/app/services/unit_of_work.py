from abc import ABC, abstractmethod

from vetclinic_iam.app.repositories.account_repository import IAccountRepository
from vetclinic_iam.app.repositories.audit_event_repository import IAuditEventRepository
from vetclinic_iam.app.repositories.password_reset_token_repository import (
    IPasswordResetTokenRepository,
)


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    accounts: IAccountRepository
    audit_events: IAuditEventRepository
    password_reset_tokens: IPasswordResetTokenRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
