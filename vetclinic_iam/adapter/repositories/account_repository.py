from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from vetclinic_iam.app.repositories.account_repository import IAccountRepository
from vetclinic_iam.domain.entities import Account, normalize_email


class AccountRepository(IAccountRepository):
    """Account repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str, include_deleted: bool = False) -> Optional[Account]:
        """
        Get an account by normalized email address.

        Soft-deleted rows still hold their email under the unique index, so
        uniqueness checks pass include_deleted=True.
        """
        stmt = select(Account).where(Account.email == normalize_email(email))
        if not include_deleted:
            stmt = stmt.where(Account.deleted_at == None)  # noqa: E711
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get a non-deleted account by ID"""
        stmt = select(Account).where(
            Account.id == account_id,
            Account.deleted_at == None,  # noqa: E711
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: Account) -> Account:
        """Create a new account"""
        account.email = normalize_email(account.email)
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update(self, account: Account) -> Account:
        """Update existing account"""
        account.email = normalize_email(account.email)
        account.updated_at = datetime.utcnow()
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update_password_hash(self, account_id: UUID, password_hash: str) -> bool:
        """Replace the password hash, returns False if the account is gone"""
        stmt = (
            update(Account)
            .where(Account.id == account_id, Account.deleted_at == None)  # noqa: E711
            .values(password_hash=password_hash, updated_at=datetime.utcnow())
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
