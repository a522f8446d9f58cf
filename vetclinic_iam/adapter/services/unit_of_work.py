from sqlmodel.ext.asyncio.session import AsyncSession

from vetclinic_iam.adapter.repositories.account_repository import AccountRepository
from vetclinic_iam.adapter.repositories.audit_event_repository import AuditEventRepository
from vetclinic_iam.adapter.repositories.password_reset_token_repository import (
    PasswordResetTokenRepository,
)
from vetclinic_iam.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.accounts = AccountRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
