from uuid import uuid4

import pytest
from unittest.mock import AsyncMock, MagicMock

from vetclinic_iam.domain.entities import Account, AdminTier, Role


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.accounts = MagicMock()
    uow.accounts.get_by_email = AsyncMock(return_value=None)
    uow.accounts.get_by_id = AsyncMock(return_value=None)
    uow.accounts.create = AsyncMock(side_effect=lambda account: account)
    uow.accounts.update = AsyncMock(side_effect=lambda account: account)
    uow.accounts.update_password_hash = AsyncMock(return_value=True)

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.replace_for_account = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.mark_used = AsyncMock(return_value=True)
    uow.password_reset_tokens.delete_for_account = AsyncMock(return_value=0)
    uow.password_reset_tokens.delete_expired = AsyncMock(return_value=0)
    uow.password_reset_tokens.get_stats = AsyncMock()

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()

    return uow


@pytest.fixture
def email_sender():
    sender = MagicMock()
    sender.send_password_reset_email = AsyncMock()
    sender.send_password_changed_notification = AsyncMock()
    return sender


@pytest.fixture
def make_account():
    def _make(role: Role, admin_tier: AdminTier = None, email: str = None) -> Account:
        return Account(
            id=uuid4(),
            email=email or f"{uuid4().hex[:8]}@clinic.example",
            password_hash="hashed_password",
            role=role,
            admin_tier=admin_tier,
        )

    return _make
