from datetime import timedelta

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from vetclinic_iam.api.error import ClientError, ServerError
from vetclinic_iam.app.services.email_sender import EmailSender
from vetclinic_iam.app.services.password_policy import PasswordPolicy
from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.app.use_cases.recovery import (
    CompletePasswordResetResponse,
    CompletePasswordResetUseCase,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    ValidateResetTokenResponse,
    ValidateResetTokenUseCase,
)
from vetclinic_iam.depends import get_email_sender, get_password_policy, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RequestPasswordResetRequest(BaseModel):
    """
    Request password reset HTTP request payload

    Validates incoming password reset request.
    """

    email: EmailStr = Field(..., description="Account email address")


@router.post(
    "/request-password-reset",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    background_tasks: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """
    Request Password Reset ("forgot password")

    Issues a reset token, replacing any earlier one for the account, and
    mails a recovery link built from PASSWORD_RESET_URL_BASE.

    Security:
        - No email enumeration (same response for registered and unknown emails)
        - Email is sent after the response, so timing does not reveal registration
        - Token is 32 random bytes; only its SHA-256 hash is stored

    Returns:
        - 200 OK: Always returns the same body
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        email_sender,
        reset_url_base=ApplicationConfig.PASSWORD_RESET_URL_BASE,
        token_ttl=timedelta(minutes=ApplicationConfig.RESET_TOKEN_TTL_MINUTES),
    )
    result = await use_case.execute(request.email, background_tasks)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ValidateResetTokenRequest(BaseModel):
    """Validate reset token HTTP request payload"""

    token: str = Field(..., description="Password reset token from email")


@router.post(
    "/validate-reset-token",
    status_code=status.HTTP_200_OK,
    response_model=ValidateResetTokenResponse,
)
async def validate_reset_token(
    request: ValidateResetTokenRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Validate Reset Token

    Read-only check used before showing the new password form.

    Raises:
        - 400 Bad Request: INVALID_OR_EXPIRED_TOKEN
    """
    use_case = ValidateResetTokenUseCase(uow)
    result = await use_case.execute(request.token)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_OR_EXPIRED_TOKEN":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class ResetPasswordRequest(BaseModel):
    """
    Reset password HTTP request payload

    Strength rules are enforced by the use case so every unmet rule is reported.
    """

    token: str = Field(..., description="Password reset token from email")
    new_password: str = Field(..., description="New password")


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=CompletePasswordResetResponse,
)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    email_sender: EmailSender = Depends(get_email_sender),
    password_policy: PasswordPolicy = Depends(get_password_policy),
):
    """
    Complete Password Reset

    Consumes the token (single use) and sets the new password.

    Raises:
        - 400 Bad Request: INVALID_OR_EXPIRED_TOKEN (unknown, used or expired)
        - 422 Unprocessable Entity: WEAK_PASSWORD, with details.unmet_rules
    """
    use_case = CompletePasswordResetUseCase(uow, email_sender, password_policy)
    result = await use_case.execute(request.token, request.new_password)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_OR_EXPIRED_TOKEN":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "WEAK_PASSWORD":
            raise ClientError(error, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
        raise ServerError(error)

    return result.value
