"""
Unit tests for CompletePasswordResetUseCase

Tests all business logic with mocked dependencies.
"""
import hashlib
from datetime import datetime, timedelta
from uuid import uuid4

import bcrypt
import pytest

from vetclinic_iam.app.services.password_policy import PasswordPolicy
from vetclinic_iam.app.use_cases.recovery import CompletePasswordResetUseCase
from vetclinic_iam.domain.entities import PasswordResetToken

SECRET = "reset_secret_12345"


@pytest.fixture
def active_token(mock_uow):
    now = datetime.utcnow()
    token = PasswordResetToken(
        id=uuid4(),
        account_id=uuid4(),
        account_email="owner@clinic.example",
        token_hash=hashlib.sha256(SECRET.encode()).hexdigest(),
        used=False,
        issued_at=now,
        expires_at=now + timedelta(minutes=30),
    )
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = token
    return token


@pytest.mark.asyncio
async def test_successful_reset(mock_uow, email_sender, active_token):
    # Arrange
    mock_uow.password_reset_tokens.delete_expired.return_value = 2
    use_case = CompletePasswordResetUseCase(mock_uow, email_sender)

    # Act
    result = await use_case.execute(SECRET, "Passw0rd!")

    # Assert
    assert result.is_ok()
    assert result.value.status == "success"

    mock_uow.password_reset_tokens.mark_used.assert_called_once()
    assert mock_uow.password_reset_tokens.mark_used.call_args.args[0] == active_token.id

    account_id, password_hash = mock_uow.accounts.update_password_hash.call_args.args
    assert account_id == active_token.account_id
    assert bcrypt.checkpw(b"Passw0rd!", password_hash.encode())

    # Lazy sweep of expired tokens
    mock_uow.password_reset_tokens.delete_expired.assert_called_once()
    audit_event = mock_uow.audit_events.create.call_args.args[0]
    assert audit_event.action == "password_reset_completed"
    assert audit_event.event_metadata["expired_tokens_swept"] == 2

    mock_uow.commit.assert_called_once()
    email_sender.send_password_changed_notification.assert_called_once_with("owner@clinic.example")


@pytest.mark.asyncio
async def test_invalid_token(mock_uow, email_sender):
    use_case = CompletePasswordResetUseCase(mock_uow, email_sender)

    result = await use_case.execute("unknown", "Passw0rd!")

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"
    mock_uow.password_reset_tokens.mark_used.assert_not_called()
    mock_uow.accounts.update_password_hash.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_expired_token(mock_uow, email_sender, active_token):
    active_token.expires_at = datetime.utcnow() - timedelta(seconds=1)
    use_case = CompletePasswordResetUseCase(mock_uow, email_sender)

    result = await use_case.execute(SECRET, "Passw0rd!")

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_weak_password_reports_unmet_rules(mock_uow, email_sender, active_token):
    policy = PasswordPolicy(require_mixed_case=True, require_digit=True)
    use_case = CompletePasswordResetUseCase(mock_uow, email_sender, policy)

    result = await use_case.execute(SECRET, "weak")

    assert result.is_err()
    assert result.error.code == "WEAK_PASSWORD"
    assert len(result.error.details["unmet_rules"]) == 3

    # Token stays usable for a second attempt
    mock_uow.password_reset_tokens.mark_used.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_lost_consumption_race(mock_uow, email_sender, active_token):
    """Second of two concurrent completions loses the compare-and-set"""
    mock_uow.password_reset_tokens.mark_used.return_value = False
    use_case = CompletePasswordResetUseCase(mock_uow, email_sender)

    result = await use_case.execute(SECRET, "Passw0rd!")

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"
    mock_uow.accounts.update_password_hash.assert_not_called()
    mock_uow.commit.assert_not_called()
    email_sender.send_password_changed_notification.assert_not_called()


@pytest.mark.asyncio
async def test_account_gone_never_reports_account_not_found(mock_uow, email_sender, active_token):
    mock_uow.accounts.update_password_hash.return_value = False
    use_case = CompletePasswordResetUseCase(mock_uow, email_sender)

    result = await use_case.execute(SECRET, "Passw0rd!")

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED_TOKEN"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_notification_failure_keeps_reset(mock_uow, email_sender, active_token):
    email_sender.send_password_changed_notification.side_effect = RuntimeError("smtp down")
    use_case = CompletePasswordResetUseCase(mock_uow, email_sender)

    result = await use_case.execute(SECRET, "Passw0rd!")

    assert result.is_ok()
    mock_uow.commit.assert_called_once()
