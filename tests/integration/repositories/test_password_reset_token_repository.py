"""
Repository tests for the atomic token operations (upsert and compare-and-set)
"""
from datetime import datetime, timedelta

import pytest
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from vetclinic_iam.adapter.repositories.password_reset_token_repository import (
    PasswordResetTokenRepository,
)
from vetclinic_iam.domain.entities import PasswordResetToken


def build_token(account, token_hash: str, ttl: timedelta = timedelta(hours=1)) -> PasswordResetToken:
    now = datetime.utcnow()
    return PasswordResetToken(
        account_id=account.id,
        account_email=account.email,
        token_hash=token_hash,
        issued_at=now,
        expires_at=now + ttl,
    )


@pytest.mark.asyncio
async def test_replace_for_account_keeps_single_row(db_session: AsyncSession, create_account):
    account = await create_account("one@clinic.example")
    repo = PasswordResetTokenRepository(db_session)

    await repo.replace_for_account(build_token(account, "a" * 64))
    await repo.replace_for_account(build_token(account, "b" * 64))
    await db_session.commit()

    rows = (
        await db_session.exec(
            select(PasswordResetToken).where(PasswordResetToken.account_id == account.id)
        )
    ).all()
    assert len(rows) == 1
    assert rows[0].token_hash == "b" * 64
    assert await repo.get_by_token_hash("a" * 64) is None


@pytest.mark.asyncio
async def test_replace_resets_used_flag(db_session: AsyncSession, create_account):
    account = await create_account("two@clinic.example")
    repo = PasswordResetTokenRepository(db_session)
    first = await repo.replace_for_account(build_token(account, "c" * 64))
    assert await repo.mark_used(first.id, datetime.utcnow()) is True

    second = await repo.replace_for_account(build_token(account, "d" * 64))
    await db_session.commit()

    stored = await repo.get_by_token_hash("d" * 64)
    assert stored.id == second.id
    assert stored.used is False


@pytest.mark.asyncio
async def test_mark_used_succeeds_once(db_session: AsyncSession, create_account):
    account = await create_account("three@clinic.example")
    repo = PasswordResetTokenRepository(db_session)
    token = await repo.replace_for_account(build_token(account, "e" * 64))
    now = datetime.utcnow()

    assert await repo.mark_used(token.id, now) is True
    assert await repo.mark_used(token.id, now) is False


@pytest.mark.asyncio
async def test_mark_used_refuses_expired_token(db_session: AsyncSession, create_account):
    account = await create_account("four@clinic.example")
    repo = PasswordResetTokenRepository(db_session)
    token = await repo.replace_for_account(build_token(account, "f" * 64, ttl=timedelta(minutes=1)))

    assert await repo.mark_used(token.id, datetime.utcnow() + timedelta(minutes=5)) is False


@pytest.mark.asyncio
async def test_delete_for_account(db_session: AsyncSession, create_account):
    account = await create_account("five@clinic.example")
    repo = PasswordResetTokenRepository(db_session)
    await repo.replace_for_account(build_token(account, "9" * 64))

    assert await repo.delete_for_account(account.id) == 1
    assert await repo.delete_for_account(account.id) == 0
