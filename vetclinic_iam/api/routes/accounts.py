from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from vetclinic_iam.api.error import ClientError, ServerError
from vetclinic_iam.app.services.password_policy import PasswordPolicy
from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.app.use_cases.accounts import (
    AccountResponse,
    ChangeAccountEmailUseCase,
    ChangeAccountRoleUseCase,
    CreateAccountCommand,
    CreateAccountUseCase,
    DeleteAccountResponse,
    DeleteAccountUseCase,
    GetMyPermissionsUseCase,
    PermissionsResponse,
)
from vetclinic_iam.depends import get_current_account_id, get_password_policy, get_unit_of_work
from vetclinic_iam.libs.result import Error

router = APIRouter(tags=["Accounts"])

_CLIENT_ERROR_STATUS = {
    "UNAUTHORIZED": status.HTTP_403_FORBIDDEN,
    "CANNOT_MODIFY_SELF": status.HTTP_403_FORBIDDEN,
    "ACCOUNT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "WEAK_PASSWORD": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def _raise_for(error: Error):
    status_code = _CLIENT_ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)


@router.get("/me/permissions", status_code=status.HTTP_200_OK, response_model=PermissionsResponse)
async def get_my_permissions(
    account_id: UUID = Depends(get_current_account_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Effective permissions of the signed-in account

    Recomputed from the stored role/tier on every request.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: Account no longer active
    """
    result = await GetMyPermissionsUseCase(uow).execute(account_id)

    if result.is_err():
        _raise_for(result.error)

    return result.value


class CreateAccountRequest(BaseModel):
    """
    Create account HTTP request payload

    role/admin_tier are plain strings; unknown values are denied by the gate (403).
    """

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., description="Initial password")
    role: str = Field(..., description="pet_owner, veterinarian or administrator")
    admin_tier: Optional[str] = Field(
        None, description="standard, elevated or super_admin; administrators only"
    )


@router.post("/accounts", status_code=status.HTTP_201_CREATED, response_model=AccountResponse)
async def create_account(
    request: CreateAccountRequest,
    account_id: UUID = Depends(get_current_account_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_policy: PasswordPolicy = Depends(get_password_policy),
):
    """
    Provision an account

    Raises:
        - 403 Forbidden: UNAUTHORIZED (permission gate refused the role/tier)
        - 409 Conflict: EMAIL_ALREADY_EXISTS
        - 422 Unprocessable Entity: WEAK_PASSWORD
    """
    command = CreateAccountCommand(
        email=request.email,
        password=request.password,
        role=request.role,
        admin_tier=request.admin_tier,
    )
    result = await CreateAccountUseCase(uow, password_policy).execute(account_id, command)

    if result.is_err():
        _raise_for(result.error)

    return result.value


class ChangeRoleRequest(BaseModel):
    """Change role HTTP request payload"""

    role: str = Field(..., description="pet_owner, veterinarian or administrator")
    admin_tier: Optional[str] = Field(None, description="Required for administrators")


@router.patch(
    "/accounts/{target_id}/role",
    status_code=status.HTTP_200_OK,
    response_model=AccountResponse,
)
async def change_account_role(
    target_id: UUID,
    request: ChangeRoleRequest,
    account_id: UUID = Depends(get_current_account_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change an account's role and tier

    Raises:
        - 403 Forbidden: UNAUTHORIZED or CANNOT_MODIFY_SELF
        - 404 Not Found: ACCOUNT_NOT_FOUND
    """
    result = await ChangeAccountRoleUseCase(uow).execute(
        account_id, target_id, request.role, request.admin_tier
    )

    if result.is_err():
        _raise_for(result.error)

    return result.value


class ChangeEmailRequest(BaseModel):
    """Change email HTTP request payload"""

    email: EmailStr = Field(..., description="New email address")


@router.patch(
    "/accounts/{target_id}/email",
    status_code=status.HTTP_200_OK,
    response_model=AccountResponse,
)
async def change_account_email(
    target_id: UUID,
    request: ChangeEmailRequest,
    account_id: UUID = Depends(get_current_account_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change an account's email, revoking its outstanding reset tokens

    Raises:
        - 403 Forbidden: UNAUTHORIZED
        - 404 Not Found: ACCOUNT_NOT_FOUND
        - 409 Conflict: EMAIL_ALREADY_EXISTS
    """
    result = await ChangeAccountEmailUseCase(uow).execute(account_id, target_id, request.email)

    if result.is_err():
        _raise_for(result.error)

    return result.value


@router.delete(
    "/accounts/{target_id}",
    status_code=status.HTTP_200_OK,
    response_model=DeleteAccountResponse,
)
async def delete_account(
    target_id: UUID,
    account_id: UUID = Depends(get_current_account_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Remove an account (soft delete), revoking its reset tokens

    Raises:
        - 403 Forbidden: UNAUTHORIZED or CANNOT_MODIFY_SELF
        - 404 Not Found: ACCOUNT_NOT_FOUND
    """
    result = await DeleteAccountUseCase(uow).execute(account_id, target_id)

    if result.is_err():
        _raise_for(result.error)

    return result.value
