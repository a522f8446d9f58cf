"""
Unit tests for RequestPasswordResetUseCase

Tests all business logic with mocked dependencies.
"""
import hashlib
from datetime import timedelta

import pytest
from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError

from vetclinic_iam.app.use_cases.recovery import RequestPasswordResetUseCase, build_recovery_link
from vetclinic_iam.domain.entities import Role

RESET_URL = "https://clinic.example/reset-password"


def make_use_case(mock_uow, email_sender):
    return RequestPasswordResetUseCase(mock_uow, email_sender, reset_url_base=RESET_URL)


@pytest.mark.asyncio
async def test_issues_token_for_existing_account(mock_uow, email_sender, make_account):
    """Token is stored hashed, expires in one hour and is mailed as a link"""
    # Arrange
    account = make_account(Role.pet_owner, email="owner@clinic.example")
    mock_uow.accounts.get_by_email.return_value = account

    use_case = make_use_case(mock_uow, email_sender)

    # Act
    result = await use_case.execute("owner@clinic.example")

    # Assert
    assert result.is_ok()
    assert result.value.status == "sent"

    mock_uow.password_reset_tokens.replace_for_account.assert_called_once()
    token = mock_uow.password_reset_tokens.replace_for_account.call_args.args[0]
    assert token.account_id == account.id
    assert token.account_email == "owner@clinic.example"
    assert token.used is False
    assert token.expires_at - token.issued_at == timedelta(hours=1)

    email_sender.send_password_reset_email.assert_called_once()
    to_email, secret, link = email_sender.send_password_reset_email.call_args.args
    assert to_email == "owner@clinic.example"
    assert len(secret) >= 43  # 32 bytes base64url encoded
    assert hashlib.sha256(secret.encode()).hexdigest() == token.token_hash
    assert link == f"{RESET_URL}?token={secret}"

    mock_uow.audit_events.create.assert_called_once()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_email_is_normalized_before_lookup(mock_uow, email_sender):
    use_case = make_use_case(mock_uow, email_sender)

    await use_case.execute("  Owner@Clinic.EXAMPLE ")

    mock_uow.accounts.get_by_email.assert_called_once_with("owner@clinic.example")


@pytest.mark.asyncio
async def test_unknown_email_gets_identical_response(mock_uow, email_sender, make_account):
    """No email enumeration: registered and unknown emails look the same"""
    use_case = make_use_case(mock_uow, email_sender)

    unknown = await use_case.execute("nonexistent@x.com")

    mock_uow.accounts.get_by_email.return_value = make_account(Role.pet_owner, email="real@x.com")
    known = await use_case.execute("real@x.com")

    assert unknown.is_ok() and known.is_ok()
    assert unknown.value.model_dump_json() == known.value.model_dump_json()


@pytest.mark.asyncio
async def test_unknown_email_issues_nothing(mock_uow, email_sender):
    use_case = make_use_case(mock_uow, email_sender)

    result = await use_case.execute("nonexistent@x.com")

    assert result.is_ok()
    mock_uow.password_reset_tokens.replace_for_account.assert_not_called()
    email_sender.send_password_reset_email.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_store_failure_is_swallowed(mock_uow, email_sender):
    """Lookup failures must not reveal anything to the caller"""
    mock_uow.accounts.get_by_email.side_effect = SQLAlchemyError("database unavailable")

    use_case = make_use_case(mock_uow, email_sender)

    result = await use_case.execute("owner@clinic.example")

    assert result.is_ok()
    assert result.value.status == "sent"
    email_sender.send_password_reset_email.assert_not_called()


@pytest.mark.asyncio
async def test_delivery_failure_keeps_issued_token(mock_uow, email_sender, make_account):
    mock_uow.accounts.get_by_email.return_value = make_account(Role.veterinarian)
    email_sender.send_password_reset_email.side_effect = RuntimeError("smtp down")

    use_case = make_use_case(mock_uow, email_sender)

    result = await use_case.execute("vet@clinic.example")

    assert result.is_ok()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_each_request_generates_a_new_secret(mock_uow, email_sender, make_account):
    mock_uow.accounts.get_by_email.return_value = make_account(Role.pet_owner)
    use_case = make_use_case(mock_uow, email_sender)

    await use_case.execute("owner@clinic.example")
    await use_case.execute("owner@clinic.example")

    first, second = [c.args[1] for c in email_sender.send_password_reset_email.call_args_list]
    assert first != second


@pytest.mark.asyncio
async def test_delivery_deferred_to_background_tasks(mock_uow, email_sender, make_account):
    """Email is only sent once the background tasks run, after the response"""
    mock_uow.accounts.get_by_email.return_value = make_account(Role.pet_owner, email="late@clinic.example")
    background_tasks = BackgroundTasks()
    use_case = make_use_case(mock_uow, email_sender)

    result = await use_case.execute("late@clinic.example", background_tasks)

    assert result.is_ok()
    mock_uow.commit.assert_called_once()
    email_sender.send_password_reset_email.assert_not_called()

    await background_tasks()

    email_sender.send_password_reset_email.assert_called_once()
    assert email_sender.send_password_reset_email.call_args.args[0] == "late@clinic.example"


@pytest.mark.asyncio
async def test_unknown_email_schedules_nothing(mock_uow, email_sender):
    background_tasks = BackgroundTasks()
    use_case = make_use_case(mock_uow, email_sender)

    result = await use_case.execute("nobody@clinic.example", background_tasks)

    assert result.is_ok()
    assert background_tasks.tasks == []

def test_build_recovery_link_appends_to_existing_query():
    assert build_recovery_link("https://a.example/r?lang=en", "abc") == (
        "https://a.example/r?lang=en&token=abc"
    )
