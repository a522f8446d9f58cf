from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import delete, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from vetclinic_iam.app.repositories.password_reset_token_repository import (
    IPasswordResetTokenRepository,
)
from vetclinic_iam.domain.entities import PasswordResetToken

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def replace_for_account(self, token: PasswordResetToken) -> PasswordResetToken:
        """
        Upsert keyed by account_id.

        The unique constraint on account_id makes the replace a single
        statement, so concurrent issuances for one account serialize in the
        database and the last writer's token is the only one left.
        """
        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Token upsert not supported on dialect {dialect}")

        values = {
            "id": token.id,
            "account_id": token.account_id,
            "account_email": token.account_email,
            "token_hash": token.token_hash,
            "used": False,
            "used_at": None,
            "issued_at": token.issued_at,
            "expires_at": token.expires_at,
        }
        stmt = insert(PasswordResetToken).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["account_id"],
            set_={key: stmt.excluded[key] for key in values if key != "account_id"},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return token

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        stmt = select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def mark_used(self, token_id: UUID, now: datetime) -> bool:
        """Compare-and-set used=False -> True, only while unexpired"""
        stmt = (
            update(PasswordResetToken)
            .where(
                PasswordResetToken.id == token_id,
                PasswordResetToken.used == False,  # noqa: E712
                PasswordResetToken.expires_at > now,
            )
            .values(used=True, used_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def delete_for_account(self, account_id: UUID) -> int:
        """Invalidate every token of an account"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.account_id == account_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_expired(self, now: datetime) -> int:
        """Remove tokens whose expiry has passed"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.expires_at <= now)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def get_stats(self, now: datetime) -> Dict[str, int]:
        """Counts of total, active, expired and used tokens"""
        return {
            "total": await self._count(),
            "active": await self._count(
                PasswordResetToken.used == False,  # noqa: E712
                PasswordResetToken.expires_at > now,
            ),
            "expired": await self._count(PasswordResetToken.expires_at <= now),
            "used": await self._count(PasswordResetToken.used == True),  # noqa: E712
        }

    async def _count(self, *criteria) -> int:
        stmt = select(func.count()).select_from(PasswordResetToken).where(*criteria)
        result = await self.session.execute(stmt)
        return result.scalar_one()
